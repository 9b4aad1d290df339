import enum
from decimal import Decimal
from typing import Any, Dict

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.models.cart_item import CartItemModel
from storefront.domain.errors import NotFoundError, StoreError, TransactionError, ValidationError
from storefront.repos.cart_repo import CartRepo
from storefront.services.catalog_service import CatalogService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class AddResult(str, enum.Enum):
    CREATED = "created"
    UPDATED = "updated"


def validate_line(product_id, quantity) -> None:
    valid_quantity = isinstance(quantity, int) and not isinstance(quantity, bool) and quantity > 0
    if not product_id or not valid_quantity:
        raise ValidationError("Product ID and a valid quantity are required.")


class CartService:
    """
    Use cases for the cart domain.
    Query: get. Commands: add, update, remove.
    The cart is always resolved from the caller's user id, never from a client cart id.
    """

    def __init__(self, db: Session, catalog: CatalogService | None = None):
        self.repo = CartRepo(db)
        self.catalog = catalog or CatalogService(db)

    # query
    def get_cart(self, user_id: int) -> Dict[str, Any]:
        cart = self.repo.get_cart_by_user(user_id)

        if not cart:
            try:
                created = self.repo.create_cart(user_id)
                self.repo.commit()
                logger.info(f"Created cart {created.id} for user {user_id}")
            except IntegrityError:
                # another request created it first
                self.repo.rollback()
            return {"message": "Cart created and is empty.", "items": [], "total": Decimal("0.00")}

        lines = self.repo.get_cart_lines(cart.id)
        items = [
            {
                "product_id": item.product_id,
                "quantity": item.quantity,
                "name": product.name,
                "price": Decimal(product.price),
                "image_url": product.image_url,
            }
            for item, product in lines
        ]
        total = sum((i["price"] * i["quantity"] for i in items), Decimal("0.00"))

        return {"items": items, "total": total}

    # commands
    def add_item(self, user_id: int, product_id: int, quantity: int) -> AddResult:
        validate_line(product_id, quantity)

        # unknown products never reach the cart
        self.catalog.get_price(product_id)

        try:
            cart, created = self.repo.get_or_create_cart(user_id)
            if created:
                logger.info(f"Created cart {cart.id} for user {user_id}")

            existing = self.repo.get_cart_item(cart.id, product_id)

            if existing:
                # incremented in SQL, not read-modify-write
                existing.quantity = CartItemModel.quantity + quantity
                result = AddResult.UPDATED
            else:
                self.repo.add_cart_item(
                    CartItemModel(
                        cart_id=cart.id,
                        product_id=product_id,
                        quantity=quantity,
                    )
                )
                result = AddResult.CREATED

            self.repo.commit()

        except StoreError:
            self.repo.rollback()
            raise
        except Exception as e:
            self.repo.rollback()
            logger.error(f"Error adding product {product_id} to cart of user {user_id}: {e}")
            raise TransactionError("Internal server error while adding to cart.") from e

        logger.info(f"Product {product_id} x{quantity} {result.value} in cart of user {user_id}")
        return result

    def update_item(self, user_id: int, product_id: int, quantity: int) -> None:
        validate_line(product_id, quantity)

        cart = self.repo.get_cart_by_user(user_id)
        if not cart:
            raise NotFoundError("Cart not found for this user.")

        item = self.repo.get_cart_item(cart.id, product_id)
        if not item:
            raise NotFoundError("Item not found in cart.")

        item.quantity = quantity
        try:
            self.repo.commit()
        except Exception as e:
            self.repo.rollback()
            logger.error(f"Error updating product {product_id} in cart {cart.id}: {e}")
            raise TransactionError("Internal server error while updating cart item.") from e

        logger.info(f"Product {product_id} set to x{quantity} in cart {cart.id}")

    def remove_item(self, user_id: int, product_id: int) -> None:
        cart = self.repo.get_cart_by_user(user_id)
        if not cart:
            raise NotFoundError("Cart not found for this user.")

        try:
            deleted = self.repo.delete_cart_item(cart.id, product_id)
            if not deleted:
                self.repo.rollback()
                raise NotFoundError("Item not found in cart.")
            self.repo.commit()
        except StoreError:
            raise
        except Exception as e:
            self.repo.rollback()
            logger.error(f"Error removing product {product_id} from cart {cart.id}: {e}")
            raise TransactionError("Internal server error while removing cart item.") from e

        logger.info(f"Product {product_id} removed from cart {cart.id}")
