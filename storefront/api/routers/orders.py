# storefront/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.api.auth import current_user
from storefront.data.database import get_db
from storefront.domain.errors import StoreError
from storefront.domain.schemas import OrderCreate, OrderCreatedOut, OrderOut, OrderSummaryOut
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/api/orders", tags=["orders"])


def get_service(db: Session):
    return OrderService(db)


@router.post("", response_model=OrderCreatedOut, status_code=201)
def create_order(
    payload: OrderCreate,
    user_id: int = Depends(current_user),
    db: Session = Depends(get_db),
):
    """
    Places an order from the checkout form and clears the caller's cart.
    """
    svc = get_service(db)
    try:
        return svc.create_order(user_id, payload)
    except StoreError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("", response_model=List[OrderSummaryOut])
def list_orders(
    user_id: int = Depends(current_user),
    db: Session = Depends(get_db),
):
    return get_service(db).list_orders(user_id)


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: int,
    user_id: int = Depends(current_user),
    db: Session = Depends(get_db),
):
    """
    Order with its items. Someone else's order looks exactly like a missing one.
    """
    svc = get_service(db)
    try:
        return svc.get_order(user_id, order_id)
    except StoreError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
