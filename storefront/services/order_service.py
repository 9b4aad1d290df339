# storefront/services/order_service.py
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List, NamedTuple, Optional

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel, OrderStatus, PaymentStatus
from storefront.data.models.order_item import OrderItemModel
from storefront.domain.errors import NotFoundError, StoreError, TransactionError, ValidationError
from storefront.domain.schemas import SHIPPING_FIELDS, OrderCreate, ShippingInfo
from storefront.repos.cart_repo import CartRepo
from storefront.repos.order_repo import OrderRepo
from storefront.services.catalog_service import CatalogService
from storefront.services.notification_service import NotificationService
from storefront.utils import settings
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

CENTS = Decimal("0.01")


class OrderLine(NamedTuple):
    product_id: int
    name: str
    price: Decimal
    quantity: int


def to_money(value) -> Decimal:
    return Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)


def order_total(lines: Iterable[OrderLine]) -> Decimal:
    return to_money(sum((to_money(line.price) * line.quantity for line in lines), Decimal("0")))


def parse_shipping(raw: Optional[dict]) -> ShippingInfo:
    """Reports the first missing field by its storefront name."""
    if not isinstance(raw, dict):
        raise ValidationError("Shipping information is required.")

    for field in SHIPPING_FIELDS:
        value = raw.get(field)
        if value is None and field == "fullName":
            value = raw.get("full_name")
        if value is None or not str(value).strip():
            raise ValidationError(f"Shipping {field} is required.")

    try:
        return ShippingInfo.model_validate(raw)
    except PydanticValidationError as e:
        raise ValidationError("Invalid shipping information.") from e


class OrderService:
    """
    Order ledger. Orders are written once, together with their items, and
    only read afterwards.
    """

    def __init__(
        self,
        db: Session,
        catalog: CatalogService | None = None,
        notification_service: NotificationService | None = None,
    ):
        self.db = db
        self.repo = OrderRepo(db)
        self.cart_repo = CartRepo(db)
        self.catalog = catalog or CatalogService(db)
        self.notification_service = notification_service or NotificationService()

    def place_order(
        self,
        user_id: int,
        lines: List[OrderLine],
        shipping: ShippingInfo,
        payment_status: PaymentStatus,
        payment_method: str | None = None,
        transaction_id: str | None = None,
        total_amount: Decimal | None = None,
        razorpay_payment_id: str | None = None,
        razorpay_order_id: str | None = None,
    ) -> OrderModel:
        """
        Inserts the order and its item snapshot. The caller owns the
        transaction: nothing is committed here.

        The stored total is always the sum of the line extensions; a declared
        total_amount that disagrees is rejected.
        """
        if not lines:
            raise ValidationError("An order needs at least one item.")

        total = order_total(lines)
        if total_amount is not None and to_money(total_amount) != total:
            raise ValidationError("Order total does not match its items.")

        order = self.repo.add_order(
            OrderModel(
                user_id=user_id,
                total_amount=total,
                order_status=OrderStatus.PROCESSING.value,
                payment_status=payment_status.value,
                payment_method=payment_method,
                transaction_id=transaction_id,
                razorpay_payment_id=razorpay_payment_id,
                razorpay_order_id=razorpay_order_id,
                shipping_full_name=shipping.full_name,
                shipping_address=shipping.address,
                shipping_city=shipping.city,
                shipping_state=shipping.state,
                shipping_zip=shipping.zip,
                shipping_country=shipping.country,
            )
        )

        for line in lines:
            self.repo.add_order_item(
                OrderItemModel(
                    order_id=order.id,
                    product_id=line.product_id,
                    product_name=line.name,
                    product_price=to_money(line.price),
                    quantity=line.quantity,
                )
            )

        return order

    def _priced_lines(self, payload: OrderCreate) -> List[OrderLine]:
        if settings.TRUST_CLIENT_PRICING:
            lines = []
            for item in payload.cart_items:
                if not item.name or item.price is None:
                    raise ValidationError("Each order item needs a name and a price.")
                lines.append(OrderLine(item.product_id, item.name, item.price, item.quantity))

            if to_money(payload.total_amount) != order_total(lines):
                raise ValidationError("Order total does not match its items.")
            return lines

        try:
            prices = self.catalog.get_prices(i.product_id for i in payload.cart_items)
        except NotFoundError as e:
            raise ValidationError(e.message) from e

        lines = [
            OrderLine(item.product_id, prices[item.product_id][0], prices[item.product_id][1], item.quantity)
            for item in payload.cart_items
        ]

        if to_money(payload.total_amount) != order_total(lines):
            raise ValidationError("Order total does not match current prices.")
        return lines

    def create_order(self, user_id: int, payload: OrderCreate) -> Dict[str, Any]:
        """
        Checkout from the client's cart snapshot.

        1. validates items, total and all six shipping fields
        2. prices the lines (catalog, or client prices in legacy mode)
        3. order + items + cart clear in one transaction
        4. queues the notification
        """
        if not payload.cart_items or payload.total_amount is None or not payload.shipping_info:
            raise ValidationError("Missing required order details.")

        shipping = parse_shipping(payload.shipping_info)
        lines = self._priced_lines(payload)

        try:
            order = self.place_order(
                user_id=user_id,
                lines=lines,
                shipping=shipping,
                payment_status=PaymentStatus.PAID if payload.transaction_id else PaymentStatus.PENDING,
                payment_method=payload.payment_method,
                transaction_id=payload.transaction_id,
                total_amount=payload.total_amount,
            )

            # the cart may not exist yet; nothing to clear then
            cart = self.cart_repo.get_cart_by_user(user_id)
            if cart:
                self.cart_repo.clear_cart(cart.id)

            self.db.commit()

        except StoreError:
            self.db.rollback()
            raise
        except Exception as e:
            self.db.rollback()
            logger.error(f"Error placing order for user {user_id}: {e}")
            raise TransactionError("Failed to place order. Please try again.") from e

        logger.info(f"Order {order.id} placed by user {user_id}, total {order.total_amount}")
        self.notification_service.send_order_notification(user_id, order.id, order.total_amount)

        return {
            "message": "Order placed successfully!",
            "order_id": order.id,
            "status": order.order_status,
            "created_at": order.created_at,
        }

    def get_order(self, user_id: int, order_id: int) -> OrderModel:
        order = self.repo.get_user_order(order_id, user_id)

        if not order:
            raise NotFoundError("Order not found or not authorized.")

        return order

    def list_orders(self, user_id: int) -> List[OrderModel]:
        return self.repo.list_user_orders(user_id)
