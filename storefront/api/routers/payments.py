# storefront/api/routers/payments.py
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from storefront.api.auth import current_user
from storefront.data.database import get_db
from storefront.domain.errors import StoreError
from storefront.domain.schemas import (
    PaymentIntentIn,
    PaymentIntentOut,
    PaymentVerificationIn,
    PaymentVerificationOut,
)
from storefront.services.payment_service import PaymentService

router = APIRouter(prefix="/api", tags=["payments"])


def get_service(db: Session):
    return PaymentService(db)


@router.post("/create-razorpay-order", response_model=PaymentIntentOut)
def create_payment_order(
    payload: PaymentIntentIn,
    user_id: int = Depends(current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.create_payment_intent(user_id, payload)
    except StoreError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("/verify-razorpay-payment", response_model=PaymentVerificationOut)
def verify_payment(
    payload: PaymentVerificationIn,
    user_id: int = Depends(current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        order_id = svc.verify_payment(user_id, payload)
    except StoreError as e:
        return JSONResponse(
            status_code=e.status_code,
            content={"verified": False, "message": e.message},
        )

    return {"verified": True, "message": "Payment verified and order placed!", "order_id": order_id}
