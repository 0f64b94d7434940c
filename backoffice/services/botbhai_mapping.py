"""Перевод локальных товаров и заказов во внешнюю схему BotBhai.

Функции чистые: payload зависит только от переданной записи.
"""
from backoffice.schemas.botbhai import (
    ProductRecord, OrderRecord,
    BotBhaiProductPayload, BotBhaiOrderPayload, BotBhaiOrderItem,
    StockStatus,
)

LOW_STOCK_THRESHOLD = 10

def get_stock_status(stock: int) -> StockStatus:
    if stock <= 0:
        return "out_of_stock"
    if stock < LOW_STOCK_THRESHOLD:
        return "low_stock"
    return "in_stock"

def build_product_payload(product: ProductRecord) -> BotBhaiProductPayload:
    stock = product.stock or 0
    price = product.price or 0
    original_price = product.original_price

    # Скидка есть только если старая цена выше текущей
    has_discount = bool(original_price) and original_price > price

    return BotBhaiProductPayload(
        product_id=product.id,
        product_name=product.name,
        image_url=product.images[0] if product.images else None,
        images=product.images or None,
        category=product.category or None,
        tags=product.tags or None,
        stock=stock,
        stock_status=get_stock_status(stock),
        base_price=original_price if original_price is not None else price,
        selling_price=price,
        discount_price=price if has_discount else None,
        description=product.description or None,
        is_available=product.is_active,
        status="active" if product.is_active else "inactive",
    )

def build_order_payload(order: OrderRecord) -> BotBhaiOrderPayload:
    customer = order.customer
    total = order.total or 0
    payment_status = order.payment_status or "unpaid"

    return BotBhaiOrderPayload(
        order_id=order.id,
        customer_id=customer.phone or customer.email or order.id,
        customer_name=customer.name or None,
        customer_phone=customer.phone or None,
        customer_email=customer.email or None,
        customer_address=customer.address or None,
        items=[
            BotBhaiOrderItem(product_id=line.product_id, qty=line.qty, price=line.price)
            for line in order.items
        ],
        subtotal=order.subtotal if order.subtotal is not None else total,
        delivery_charge=order.shipping_cost or 0,
        discount=order.discount or 0,
        total=total,
        status=order.status or "pending",
        payment_method=order.payment_method or None,
        payment_status=payment_status,
        paid_amount=total if payment_status == "paid" else 0,
        customer_notes=order.notes or None,
    )
