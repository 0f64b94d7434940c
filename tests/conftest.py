import json
import os
import tempfile

# Окружение задается до импорта приложения: движок БД создается при импорте
_TMP_DIR = tempfile.mkdtemp(prefix="backoffice-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'test.db')}"
os.environ["UPLOAD_DIR"] = os.path.join(_TMP_DIR, "uploads")
os.environ["LOG_FILE"] = ""

import httpx
import pytest
from fastapi import Depends
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from backoffice.database import Base, SessionLocal, engine, get_db, create_tables
from backoffice.main import app
from backoffice.api.deps import require_admin, get_botbhai_bridge
from backoffice.crud.settings import set_setting
from backoffice.models.catalog import Product, Category
from backoffice.models.order import Order, OrderItem
from backoffice.models.user import User, UserRole
from backoffice.services.botbhai_bridge import BotBhaiBridge, load_botbhai_config

TEST_API_KEY = "test-botbhai-key"

class UpstreamRecorder:
    """Фейковый BotBhai для httpx.MockTransport: запоминает запросы"""

    def __init__(self):
        self.requests = []
        self.status_code = 200
        self.failing_ids = {}      # id записи -> статус ответа
        self.broken_ids = set()    # id записи -> ошибка соединения

    def __call__(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else None
        self.requests.append({
            "method": request.method,
            "url": str(request.url),
            "api_key": request.headers.get("x-api-key"),
            "json": body,
        })

        record_id = None
        if isinstance(body, dict):
            record_id = body.get("product_id") or body.get("order_id") or body.get("id")

        if record_id in self.broken_ids:
            raise httpx.ConnectError("connection refused", request=request)

        status_code = self.failing_ids.get(record_id, self.status_code)
        return httpx.Response(status_code, json={"success": 200 <= status_code < 300})

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

@pytest.fixture
def db():
    Base.metadata.drop_all(bind=engine)
    create_tables()
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()

@pytest.fixture
def upstream():
    return UpstreamRecorder()

@pytest.fixture
def api_key(db):
    set_setting(db, "botbhai_api_key", TEST_API_KEY)
    return TEST_API_KEY

@pytest.fixture
def admin_user():
    return User(
        id=1,
        username="admin",
        email="admin@example.com",
        hashed_password="not-used",
        role=UserRole.ADMIN,
        is_active=True,
    )

@pytest.fixture
def client(db, upstream, admin_user):
    """TestClient от имени администратора; BotBhai подменен MockTransport"""

    def override_bridge(session: Session = Depends(get_db)) -> BotBhaiBridge:
        config = load_botbhai_config(session)
        config.batch_delay = 0
        return BotBhaiBridge(config, transport=upstream.transport())

    app.dependency_overrides[require_admin] = lambda: admin_user
    app.dependency_overrides[get_botbhai_bridge] = override_bridge
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()

@pytest.fixture
def anonymous_client(db):
    with TestClient(app) as test_client:
        yield test_client

def make_product(db, **overrides) -> Product:
    category_name = overrides.pop("category", None)
    data = {
        "name": "Cotton Panjabi",
        "price": 1200.0,
        "original_price": None,
        "stock": 25,
        "images": ["https://cdn.example.com/p1.jpg"],
        "tags": ["men"],
        "description": "Soft cotton",
        "is_active": True,
    }
    data.update(overrides)
    product = Product(**data)
    if category_name:
        product.category = db.query(Category).filter(Category.name == category_name).first() or Category(name=category_name)
    db.add(product)
    db.commit()
    db.refresh(product)
    return product

def make_order(db, items=None, **overrides) -> Order:
    data = {
        "shipping_name": "Rahim Uddin",
        "shipping_phone": "01711000000",
        "shipping_street": "House 12, Road 5",
        "shipping_city": "Dhaka",
        "shipping_district": "Dhanmondi",
        "subtotal": 2400.0,
        "shipping_cost": 60.0,
        "discount": 0.0,
        "total": 2460.0,
        "status": "pending",
        "payment_method": "cod",
        "payment_status": "unpaid",
    }
    data.update(overrides)
    order = Order(**data)
    order.items = [OrderItem(**item) for item in (items or [{"product_id": "p-1", "quantity": 2, "price": 1200.0}])]
    db.add(order)
    db.commit()
    db.refresh(order)
    return order
