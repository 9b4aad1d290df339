# storefront/repos/payment_repo.py
from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.data.models.payment_intent import PaymentIntentModel


class PaymentRepo:
    def __init__(self, db: Session):
        self.db = db

    def add_intent(self, intent: PaymentIntentModel) -> PaymentIntentModel:
        self.db.add(intent)
        self.db.flush()
        return intent

    def get_user_intent(self, intent_id: str, user_id: int) -> PaymentIntentModel | None:
        return self.db.execute(
            select(PaymentIntentModel).where(
                PaymentIntentModel.id == intent_id,
                PaymentIntentModel.user_id == user_id,
            )
        ).scalar_one_or_none()
