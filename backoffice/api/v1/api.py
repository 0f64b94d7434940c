# backoffice/api/v1/api.py
from fastapi import APIRouter
from backoffice.api.v1.endpoints import auth, botbhai, home_page, media, order_protection, orders, products

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(botbhai.router, tags=["botbhai"])
api_router.include_router(products.router, prefix="/products", tags=["products"])
api_router.include_router(orders.router, prefix="/orders", tags=["orders"])
api_router.include_router(order_protection.router, prefix="/order-protection", tags=["order-protection"])
api_router.include_router(home_page.router, prefix="/home-page", tags=["home-page"])
api_router.include_router(media.router, prefix="/media", tags=["media"])
