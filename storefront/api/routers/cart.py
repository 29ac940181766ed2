# storefront/api/routers/cart.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import get_catalog_client, get_current_identity, get_db, get_lock_service
from storefront.domain.schemas import CartEnvelope, CartItemIn, CartQuantityIn
from storefront.services.cart_service import CartService
from storefront.services.catalog_client import CatalogClient
from storefront.services.identity import Identity
from storefront.services.lock_service import LockService

router = APIRouter(prefix="/cart", tags=["cart"])


def get_service(
    db: Session = Depends(get_db),
    catalog_client: CatalogClient = Depends(get_catalog_client),
    lock_service: LockService = Depends(get_lock_service),
) -> CartService:
    return CartService(
        db=db,
        catalog_client=catalog_client,
        lock_service=lock_service,
    )


def _envelope(lines, message: str | None = None):
    return {"success": True, "data": {"items": lines}, "message": message}


@router.get("", response_model=CartEnvelope)
def get_cart(
    identity: Identity = Depends(get_current_identity),
    svc: CartService = Depends(get_service),
):
    return _envelope(svc.get_cart(identity.user_id))


@router.post("/add", response_model=CartEnvelope)
def add_item(
    payload: CartItemIn,
    identity: Identity = Depends(get_current_identity),
    svc: CartService = Depends(get_service),
):
    return _envelope(svc.add_item(identity.user_id, payload.item_id), "Item added to cart")


@router.put("/update", response_model=CartEnvelope)
def update_item(
    payload: CartQuantityIn,
    identity: Identity = Depends(get_current_identity),
    svc: CartService = Depends(get_service),
):
    lines = svc.set_quantity(identity.user_id, payload.item_id, payload.quantity)
    return _envelope(lines, "Cart updated")


@router.delete("/remove/{item_id}", response_model=CartEnvelope)
def remove_item(
    item_id: str,
    identity: Identity = Depends(get_current_identity),
    svc: CartService = Depends(get_service),
):
    return _envelope(svc.remove_item(identity.user_id, item_id), "Item removed from cart")


@router.delete("/clear", response_model=CartEnvelope)
def clear_cart(
    identity: Identity = Depends(get_current_identity),
    svc: CartService = Depends(get_service),
):
    return _envelope(svc.clear(identity.user_id), "Cart cleared")
