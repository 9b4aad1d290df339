# storefront/services/payment_service.py
import time
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.models.order import PaymentStatus
from storefront.data.models.payment_intent import PaymentIntentModel
from storefront.domain.errors import (
    NotFoundError,
    PaymentVerificationError,
    StoreError,
    TransactionError,
    ValidationError,
)
from storefront.domain.schemas import PaymentIntentIn, PaymentVerificationIn, ShippingInfo
from storefront.repos.cart_repo import CartRepo
from storefront.repos.payment_repo import PaymentRepo
from storefront.services.order_service import OrderLine, OrderService, order_total, parse_shipping
from storefront.services.payment_client import PaymentClient
from storefront.utils.settings import PAYMENT_PROVIDER_NAME
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class PaymentService:
    """
    Turns a verified payment confirmation plus the caller's current cart
    into a paid order. Prices come from the catalog, never from the client.
    """

    def __init__(
        self,
        db: Session,
        client: PaymentClient | None = None,
        order_service: OrderService | None = None,
    ):
        self.db = db
        self.client = client or PaymentClient()
        self.order_service = order_service or OrderService(db)
        self.cart_repo = CartRepo(db)
        self.repo = PaymentRepo(db)

    def create_payment_intent(self, user_id: int, payload: PaymentIntentIn) -> dict:
        if payload.amount is None or not payload.currency:
            raise ValidationError("Amount and currency are required.")

        try:
            amount_minor = int((Decimal(payload.amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
        except InvalidOperation as e:
            raise ValidationError("Amount and currency are required.") from e
        if amount_minor <= 0:
            raise ValidationError("Amount must be greater than 0.")

        shipping = parse_shipping(payload.shipping_info) if payload.shipping_info else None
        currency = payload.currency.strip().upper()
        receipt = f"receipt_{user_id}_{int(time.time() * 1000)}"

        descriptor = self.client.create_order(amount_minor, currency, receipt, user_id)

        try:
            self.repo.add_intent(
                PaymentIntentModel(
                    id=descriptor["id"],
                    user_id=user_id,
                    amount=descriptor.get("amount", amount_minor),
                    currency=descriptor.get("currency", currency),
                    receipt=descriptor.get("receipt", receipt),
                    status=descriptor.get("status", "created"),
                    shipping_info=shipping.model_dump(by_alias=True) if shipping else None,
                )
            )
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Error storing payment intent for user {user_id}: {e}")
            raise TransactionError("Internal server error creating order.") from e

        logger.info(f"Payment intent {descriptor['id']} created for user {user_id}: {amount_minor} {currency}")
        return descriptor

    def _resolve_intent(self, user_id: int, order_ref: str) -> PaymentIntentModel:
        intent = self.repo.get_user_intent(order_ref, user_id)
        if not intent:
            raise PaymentVerificationError("Payment verification failed: Unknown payment order.")
        if intent.status == "paid":
            raise PaymentVerificationError("Payment verification failed: Payment already processed.")
        return intent

    def _resolve_shipping(self, intent: PaymentIntentModel, payload: PaymentVerificationIn) -> ShippingInfo:
        if payload.shipping_info:
            return parse_shipping(payload.shipping_info)

        if intent.shipping_info:
            return parse_shipping(intent.shipping_info)

        raise ValidationError("Shipping information is required.")

    def verify_payment(self, user_id: int, payload: PaymentVerificationIn) -> int:
        """
        1. all three provider fields present
        2. HMAC signature matches (hard reject otherwise, nothing written)
        3. the provider order is one of the caller's unpaid intents and the
           payment id has not been used by another order
        4. in one transaction: cart -> order + items (catalog prices), cart
           cleared, intent marked paid; the cart total must equal the
           intent amount
        Returns the new order id.
        """
        payment_id = payload.razorpay_payment_id
        order_ref = payload.razorpay_order_id
        signature = payload.razorpay_signature

        if not payment_id or not order_ref or not signature:
            raise PaymentVerificationError("Payment verification failed: Missing parameters.")

        if not self.client.verify_signature(order_ref, payment_id, signature):
            logger.warning(f"Payment signature mismatch for user {user_id}, order {order_ref}")
            raise PaymentVerificationError("Payment verification failed: Invalid signature.")

        intent = self._resolve_intent(user_id, order_ref)

        if self.order_service.repo.get_order_by_payment_id(payment_id):
            logger.warning(f"Payment {payment_id} replayed by user {user_id}")
            raise PaymentVerificationError("Payment verification failed: Payment already processed.")

        shipping = self._resolve_shipping(intent, payload)

        try:
            cart = self.cart_repo.get_cart_by_user(user_id)
            if not cart:
                raise NotFoundError("Cart not found for order processing.")

            rows = self.cart_repo.get_cart_lines(cart.id)
            if not rows:
                raise ValidationError("Cart is empty, cannot create order.")

            lines = [
                OrderLine(product.id, product.name, Decimal(product.price), item.quantity)
                for item, product in rows
            ]

            if int(order_total(lines) * 100) != intent.amount:
                logger.warning(
                    f"Payment {payment_id} amount {intent.amount} does not match cart total "
                    f"{order_total(lines)} for user {user_id}"
                )
                raise PaymentVerificationError("Payment verification failed: Amount does not match cart total.")

            order = self.order_service.place_order(
                user_id=user_id,
                lines=lines,
                shipping=shipping,
                payment_status=PaymentStatus.PAID,
                payment_method=PAYMENT_PROVIDER_NAME,
                transaction_id=payment_id,
                razorpay_payment_id=payment_id,
                razorpay_order_id=order_ref,
            )

            self.cart_repo.clear_cart(cart.id)
            intent.status = "paid"

            self.db.commit()

        except StoreError:
            self.db.rollback()
            raise
        except IntegrityError as e:
            # a concurrent request stored an order for the same payment id first
            self.db.rollback()
            raise PaymentVerificationError("Payment verification failed: Payment already processed.") from e
        except Exception as e:
            self.db.rollback()
            logger.error(f"Error during payment verification for user {user_id}: {e}")
            raise TransactionError("Internal server error during payment verification.") from e

        logger.info(f"Payment {payment_id} verified, order {order.id} placed for user {user_id}")
        self.order_service.notification_service.send_order_notification(user_id, order.id, order.total_amount)

        return order.id
