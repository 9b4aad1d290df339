# import every model so SQLAlchemy registers it on Base.metadata

from storefront.data.models.product import ProductModel
from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel
from storefront.data.models.order import OrderModel, OrderStatus, PaymentStatus
from storefront.data.models.order_item import OrderItemModel
from storefront.data.models.payment_intent import PaymentIntentModel

__all__ = [
    "ProductModel",
    "CartModel",
    "CartItemModel",
    "OrderModel",
    "OrderStatus",
    "PaymentStatus",
    "OrderItemModel",
    "PaymentIntentModel",
]
