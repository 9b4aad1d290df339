# storefront/domain/schemas.py
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

SHIPPING_FIELDS = ("fullName", "address", "city", "state", "zip", "country")


class CamelModel(BaseModel):
    """Accepts both the storefront's camelCase keys and snake_case names."""

    model_config = ConfigDict(populate_by_name=True)


class MessageOut(BaseModel):
    message: str


# ---------------------------------------------------------------- catalog


class ProductOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    category: Optional[str] = None
    price: Decimal
    image_url: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


# ---------------------------------------------------------------- cart


class CartItemIn(CamelModel):
    """Body of add / update cart requests."""

    product_id: int = Field(..., alias="productId", gt=0, description="Catalog product id")
    quantity: int = Field(..., gt=0, description="Must be greater than 0")


class CartLineOut(BaseModel):
    product_id: int
    quantity: int
    name: str
    price: Decimal
    image_url: Optional[str] = None


class CartOut(BaseModel):
    message: Optional[str] = None
    items: List[CartLineOut]
    total: Decimal


# ---------------------------------------------------------------- orders


class ShippingInfo(CamelModel):
    full_name: str = Field(..., alias="fullName", min_length=1)
    address: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    zip: str = Field(..., min_length=1)
    country: str = Field(..., min_length=1)

    @field_validator("full_name", "address", "city", "state", "zip", "country", mode="before")
    @classmethod
    def _strip(cls, value):
        if isinstance(value, str):
            return value.strip()
        return value


class OrderLineIn(CamelModel):
    product_id: int = Field(..., alias="productId", gt=0)
    name: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, ge=0)
    quantity: int = Field(..., gt=0)


class OrderCreate(CamelModel):
    """Checkout body. Shipping is kept as a dict so each missing field can be reported by name."""

    cart_items: List[OrderLineIn] = Field(default_factory=list, alias="cartItems")
    total_amount: Optional[Decimal] = Field(default=None, alias="totalAmount")
    shipping_info: Optional[dict] = Field(default=None, alias="shippingInfo")
    payment_method: Optional[str] = Field(default=None, alias="paymentMethod")
    transaction_id: Optional[str] = Field(default=None, alias="transactionId")


class OrderCreatedOut(CamelModel):
    message: str
    order_id: int = Field(..., serialization_alias="orderId")
    status: str
    created_at: datetime = Field(..., serialization_alias="createdAt")


class OrderItemOut(BaseModel):
    id: int
    product_id: int
    product_name: str
    product_price: Decimal
    quantity: int

    model_config = ConfigDict(from_attributes=True)


class OrderSummaryOut(BaseModel):
    id: int
    total_amount: Decimal
    order_status: str
    payment_status: str
    payment_method: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class OrderOut(OrderSummaryOut):
    transaction_id: Optional[str] = None
    razorpay_payment_id: Optional[str] = None
    razorpay_order_id: Optional[str] = None
    shipping_full_name: str
    shipping_address: str
    shipping_city: str
    shipping_state: str
    shipping_zip: str
    shipping_country: str
    items: List[OrderItemOut]


# ---------------------------------------------------------------- payments


class PaymentIntentIn(CamelModel):
    amount: Optional[Decimal] = None
    currency: Optional[str] = None
    shipping_info: Optional[dict] = Field(default=None, alias="shippingInfo")


class PaymentIntentOut(BaseModel):
    id: str
    entity: str
    amount: int
    currency: str
    receipt: str
    status: str


class PaymentVerificationIn(CamelModel):
    razorpay_payment_id: Optional[str] = None
    razorpay_order_id: Optional[str] = None
    razorpay_signature: Optional[str] = None
    shipping_info: Optional[dict] = Field(default=None, alias="shippingInfo")


class PaymentVerificationOut(CamelModel):
    verified: bool
    message: str
    order_id: Optional[int] = Field(default=None, serialization_alias="orderId")
