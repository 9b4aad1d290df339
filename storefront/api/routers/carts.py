# storefront/api/routers/carts.py
from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from storefront.api.auth import current_user
from storefront.data.database import get_db
from storefront.domain.errors import StoreError
from storefront.domain.schemas import CartItemIn, CartOut, MessageOut
from storefront.services.cart_service import AddResult, CartService

router = APIRouter(prefix="/api/cart", tags=["cart"])


def get_service(db: Session):
    return CartService(db)


@router.get("", response_model=CartOut)
def get_cart(
    user_id: int = Depends(current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.get_cart(user_id)
    except StoreError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("/add", response_model=MessageOut)
def add_item(
    payload: CartItemIn,
    response: Response,
    user_id: int = Depends(current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        result = svc.add_item(user_id, payload.product_id, payload.quantity)
    except StoreError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

    if result is AddResult.CREATED:
        response.status_code = 201
        return {"message": "Product added to cart successfully."}
    return {"message": "Product quantity updated in cart."}


@router.put("/update-item", response_model=MessageOut)
def update_item(
    payload: CartItemIn,
    user_id: int = Depends(current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        svc.update_item(user_id, payload.product_id, payload.quantity)
    except StoreError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return {"message": "Cart item quantity updated successfully."}


@router.delete("/remove-item/{product_id}", response_model=MessageOut)
def remove_item(
    product_id: int,
    user_id: int = Depends(current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        svc.remove_item(user_id, product_id)
    except StoreError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return {"message": "Cart item removed successfully."}
