from typing import Any, Dict, List

from sqlalchemy.orm import Session

from storefront.domain.errors import CartNotFound, InvalidInput, ItemNotInCart
from storefront.repos.cart_repo import CartRepo
from storefront.services.catalog_client import CatalogClient
from storefront.services.lock_service import LockService
from storefront.utils.settings import MAX_ITEM_QUANTITY
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Prosta implementacja cqrs i proste use case dla koszyka
    commands (add, set_quantity, remove, clear) modyfikuja stan pod lockiem uzytkownika
    query (get) tylko odczyt
    kazda komenda zwraca caly koszyk z aktualnymi danymi z katalogu
    """

    def __init__(
        self,
        db: Session,
        catalog_client: CatalogClient,
        lock_service: LockService,
    ):
        self.repo = CartRepo(db)
        self.catalog_client = catalog_client
        self.lock_service = lock_service

    #query - odczyt
    def get_cart(self, user_id: str) -> List[Dict[str, Any]]:
        cart = self.repo.get_cart_by_user(user_id)

        if not cart:
            return []

        return self._with_catalog_fields(self.repo.get_cart_items(cart.id))

    def _with_catalog_fields(self, items) -> List[Dict[str, Any]]:
        lines = []
        for i in items:
            data = self.catalog_client.find_item(i.item_id)
            if data is None:
                # pozycja zniknela z katalogu, nie pokazujemy jej
                logger.warning(f"Cart line {i.item_id} no longer in catalog, skipping")
                continue

            lines.append(
                {
                    "id": i.item_id,
                    "name": data.get("name"),
                    "description": data.get("description"),
                    "price": data.get("price"),
                    "image": data.get("image"),
                    "category": data.get("category"),
                    "quantity": i.quantity,
                }
            )
        return lines

    #commands
    def add_item(self, user_id: str, item_id: str) -> List[Dict[str, Any]]:
        # HTTP do catalog-service, brak/nieaktywna pozycja -> ItemNotFound
        self.catalog_client.fetch_item(item_id)

        with self.lock_service.cart_lock(user_id):
            try:
                cart_id = self.repo.ensure_cart(user_id)
                self.repo.increment_item(cart_id, item_id)
                self.repo.commit()
            except Exception as e:
                logger.error(f"Failed to add item {item_id} to cart of user {user_id}: {e}")
                self.repo.rollback()
                raise

            logger.info(f"Item {item_id} added to cart {cart_id} of user {user_id}")
            return self.get_cart(user_id)

    def set_quantity(self, user_id: str, item_id: str, quantity: int) -> List[Dict[str, Any]]:
        if quantity > MAX_ITEM_QUANTITY:
            raise InvalidInput(f"Quantity cannot exceed {MAX_ITEM_QUANTITY}")

        with self.lock_service.cart_lock(user_id):
            cart = self.repo.get_cart_by_user(user_id)
            if not cart:
                raise CartNotFound()

            item = self.repo.get_cart_item(cart.id, item_id)
            if not item:
                raise ItemNotInCart()

            try:
                #ilosc <= 0 usuwa pozycje, nigdy nie zapisujemy 0 ani ujemnej
                if quantity <= 0:
                    self.repo.delete_cart_item(cart.id, item_id)
                    logger.info(f"Item {item_id} removed from cart {cart.id} (quantity {quantity})")
                else:
                    self.repo.set_item_quantity(item, quantity)
                    logger.info(f"Item {item_id} in cart {cart.id} set to {quantity}")
                self.repo.commit()
            except Exception:
                self.repo.rollback()
                raise

            return self.get_cart(user_id)

    def remove_item(self, user_id: str, item_id: str) -> List[Dict[str, Any]]:
        with self.lock_service.cart_lock(user_id):
            cart = self.repo.get_cart_by_user(user_id)

            #idempotentne: brak koszyka albo pozycji to nie blad
            if cart:
                removed = self.repo.delete_cart_item(cart.id, item_id)
                self.repo.commit()
                logger.info(f"Remove item {item_id} from cart {cart.id}: {removed} row(s)")

            return self.get_cart(user_id)

    def clear(self, user_id: str) -> List[Dict[str, Any]]:
        with self.lock_service.cart_lock(user_id):
            try:
                deleted = self.repo.delete_cart(user_id)
                self.repo.commit()
            except Exception as e:
                logger.error(f"Failed to clear cart of user {user_id}: {e}")
                self.repo.rollback()
                raise

        logger.info(f"Cart of user {user_id} cleared ({deleted} cart row(s) deleted)")
        return []
