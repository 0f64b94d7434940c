# backoffice/crud/product.py
from sqlalchemy.orm import Session, joinedload
from typing import Optional, List
from backoffice.models.catalog import Product, Category
from backoffice.schemas.catalog import ProductCreate, ProductUpdate

def get_or_create_category(db: Session, name: Optional[str]) -> Optional[Category]:
    """Категория по названию; создается при первом упоминании"""
    if not name:
        return None
    category = db.query(Category).filter(Category.name == name).first()
    if not category:
        category = Category(name=name)
        db.add(category)
        db.flush()
    return category

def get_product(db: Session, product_id: str) -> Optional[Product]:
    return db.query(Product).options(joinedload(Product.category)).filter(Product.id == product_id).first()

def get_products(
    db: Session,
    skip: int = 0,
    limit: int = 100,
    is_active: Optional[bool] = None,
    category: Optional[str] = None
) -> List[Product]:
    """Список товаров с фильтрами"""
    query = db.query(Product).options(joinedload(Product.category))

    if is_active is not None:
        query = query.filter(Product.is_active == is_active)

    if category:
        query = query.join(Category).filter(Category.name == category)

    return query.order_by(Product.created_at.desc()).offset(skip).limit(limit).all()

def get_active_products(db: Session) -> List[Product]:
    """Все активные товары (для полной синхронизации)"""
    return (
        db.query(Product)
        .options(joinedload(Product.category))
        .filter(Product.is_active == True)  # noqa: E712
        .order_by(Product.created_at)
        .all()
    )

def create_product(db: Session, product_in: ProductCreate) -> Product:
    data = product_in.dict(exclude={"category"})
    db_product = Product(**data)
    db_product.category = get_or_create_category(db, product_in.category)

    db.add(db_product)
    db.commit()
    db.refresh(db_product)
    return db_product

def update_product(db: Session, product: Product, product_update: ProductUpdate) -> Product:
    update_data = product_update.dict(exclude_unset=True)

    if "category" in update_data:
        product.category = get_or_create_category(db, update_data.pop("category"))

    for field, value in update_data.items():
        setattr(product, field, value)

    db.commit()
    db.refresh(product)
    return product

def delete_product(db: Session, product: Product) -> None:
    db.delete(product)
    db.commit()
