from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, JSON

from storefront.data.database import Base


class PaymentIntentModel(Base):
    __tablename__ = "payment_intents"

    # provider order id, e.g. order_1718000000000_7
    id = Column(String(100), primary_key=True)
    user_id = Column(Integer, nullable=False, index=True)

    amount = Column(Integer, nullable=False)  # minor units (paisa)
    currency = Column(String(3), nullable=False)
    receipt = Column(String(100), nullable=False)
    status = Column(String(20), nullable=False, default="created")
    shipping_info = Column(JSON, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
