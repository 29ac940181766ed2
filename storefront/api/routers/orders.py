# storefront/api/routers/orders.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import get_catalog_client, get_current_identity, get_db, get_lock_service
from storefront.domain.schemas import OrderCreate, OrderEnvelope, OrderListEnvelope, OrderStatusIn
from storefront.services.catalog_client import CatalogClient
from storefront.services.identity import Identity
from storefront.services.lock_service import LockService
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(
    db: Session = Depends(get_db),
    catalog_client: CatalogClient = Depends(get_catalog_client),
    lock_service: LockService = Depends(get_lock_service),
) -> OrderService:
    return OrderService(db, catalog_client=catalog_client, lock_service=lock_service)


@router.post("", response_model=OrderEnvelope, status_code=201)
def place_order(
    payload: OrderCreate,
    identity: Identity = Depends(get_current_identity),
    svc: OrderService = Depends(get_service),
):
    """
    Tworzy zamowienie z danych checkoutu i czysci koszyk wywolujacego.
    """
    order = svc.place_order(identity, payload)
    return {"success": True, "data": order, "message": "Order placed successfully"}


# /user i /all przed /{order_id}
@router.get("/user", response_model=OrderListEnvelope)
def list_user_orders(
    identity: Identity = Depends(get_current_identity),
    svc: OrderService = Depends(get_service),
):
    return {"success": True, "data": svc.list_for_user(identity)}


@router.get("/all", response_model=OrderListEnvelope)
def list_all_orders(
    identity: Identity = Depends(get_current_identity),
    svc: OrderService = Depends(get_service),
):
    return {"success": True, "data": svc.list_all(identity)}


@router.get("/{order_id}", response_model=OrderEnvelope)
def get_order(
    order_id: int,
    identity: Identity = Depends(get_current_identity),
    svc: OrderService = Depends(get_service),
):
    """
    Pobiera szczegoly zamowienia (wlasciciel albo admin).
    """
    return {"success": True, "data": svc.get_order(identity, order_id)}


@router.put("/{order_id}/status", response_model=OrderEnvelope)
def update_order_status(
    order_id: int,
    payload: OrderStatusIn,
    identity: Identity = Depends(get_current_identity),
    svc: OrderService = Depends(get_service),
):
    order = svc.update_status(identity, order_id, payload.status)
    return {"success": True, "data": order, "message": "Order status updated successfully"}
