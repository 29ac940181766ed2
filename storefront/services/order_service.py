# storefront/services/order_service.py
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List

from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type

from storefront.data.models.order import OrderModel, OrderStatus
from storefront.data.models.order_item import OrderItemModel
from storefront.data.models.user import UserModel
from storefront.domain.errors import Forbidden, InvalidInput, InvalidOrder, OrderNotFound
from storefront.domain.schemas import OrderCreate
from storefront.repos.cart_repo import CartRepo
from storefront.repos.order_repo import OrderRepo
from storefront.services.catalog_client import CatalogClient
from storefront.services.identity import Identity
from storefront.services.lock_service import LockService
from storefront.services.user_service import UserService
from storefront.utils.settings import MAX_ITEM_QUANTITY, TAX_RATE, TOTALS_TOLERANCE
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

CENT = Decimal("0.01")

# cancelled jest w slowniku, ale nie da sie go ustawic
ASSIGNABLE_STATUSES = (
    OrderStatus.PENDING,
    OrderStatus.PROCESSING,
    OrderStatus.COMPLETED,
    OrderStatus.DELIVERED,
)


def db_retry():
    return retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
        retry=retry_if_exception_type(OperationalError),
    )


def compute_totals(lines: List[Dict[str, Any]], tax_rate: Decimal = TAX_RATE):
    """subtotal = suma cena*ilosc, tax = subtotal*stawka (do groszy, half-up), total = subtotal+tax."""
    subtotal = sum((l["price"] * l["quantity"] for l in lines), Decimal("0.00")).quantize(
        CENT, rounding=ROUND_HALF_UP
    )
    tax = (subtotal * tax_rate).quantize(CENT, rounding=ROUND_HALF_UP)
    return subtotal, tax, subtotal + tax


def _owner_view(order: OrderModel, owner: UserModel | None) -> Dict[str, Any]:
    if owner is None:
        return {"id": order.user_id, "first_name": None, "last_name": None, "email": order.user_email}
    return {
        "id": owner.id,
        "first_name": owner.first_name,
        "last_name": owner.last_name,
        "email": owner.email,
    }


def format_order(order: OrderModel, owner: Dict[str, Any] | None = None) -> Dict[str, Any]:
    return {
        "id": order.id,
        "user": owner,
        "user_email": order.user_email,
        "customer_name": order.customer_name,
        "customer_phone": order.customer_phone,
        "customer_address": order.customer_address,
        "items": [
            {
                "id": i.item_id,
                "name": i.name,
                "price": i.price,
                "quantity": i.quantity,
                "image": i.image,
            }
            for i in order.items
        ],
        "subtotal": order.subtotal,
        "tax": order.tax,
        "total": order.total,
        "payment_method": order.payment_method,
        "status": order.status,
        "created_at": order.created_at,
        "updated_at": order.updated_at,
    }


class OrderService:
    """
    Serwis odpowiedzialny za domene zamowien.
    Separacja od CartService, ale koszyk czyscimy tutaj, w tej samej transakcji co zapis zamowienia.
    """

    def __init__(
        self,
        db: Session,
        catalog_client: CatalogClient,
        lock_service: LockService,
    ):
        self.db = db
        self.repo = OrderRepo(db)
        self.cart_repo = CartRepo(db)
        self.user_service = UserService(db)
        self.catalog_client = catalog_client
        self.lock_service = lock_service

    # =====================================================
    # COMMANDS
    # =====================================================
    def place_order(self, identity: Identity, checkout: OrderCreate) -> Dict[str, Any]:
        """
        Use Case: zlozenie zamowienia.

        1. Walidacja danych klienta, pozycji i metody platnosci
        2. Snapshot pozycji z katalogu (ceny klienta nie sa zrodlem prawdy)
        3. subtotal / tax / total liczone po stronie serwera
        4. Zamowienie (pending) + usuniecie koszyka w jednej transakcji, pod lockiem koszyka
        """
        self._validate_checkout(checkout)

        lines = self._snapshot_lines(checkout)
        subtotal, tax, total = compute_totals(lines)
        self._check_declared_totals(checkout, subtotal, tax, total)

        with self.lock_service.cart_lock(identity.user_id):
            order = self._save_order_and_clear_cart(identity, checkout, lines, subtotal, tax, total)

        logger.info(
            f"Order {order.id} placed by user {identity.user_id}: "
            f"{len(lines)} line(s), total {total}"
        )
        return format_order(order)

    def _validate_checkout(self, checkout: OrderCreate):
        for field, label in (
            ("customer_name", "customerName"),
            ("customer_phone", "customerPhone"),
            ("customer_address", "customerAddress"),
            ("payment_method", "paymentMethod"),
        ):
            value = getattr(checkout, field)
            if not value or not value.strip():
                raise InvalidOrder(f"{label} is required")

        if not checkout.items:
            raise InvalidOrder("Order must contain at least one item")

        for item in checkout.items:
            if not item.id:
                raise InvalidOrder("Every order item needs an id")
            if item.quantity < 1:
                raise InvalidOrder(f"Quantity for item {item.id} must be at least 1")
            if item.quantity > MAX_ITEM_QUANTITY:
                raise InvalidOrder(f"Quantity for item {item.id} cannot exceed {MAX_ITEM_QUANTITY}")

    def _snapshot_lines(self, checkout: OrderCreate) -> List[Dict[str, Any]]:
        lines = []
        for item in checkout.items:
            # brak/nieaktywna pozycja -> ItemNotFound, katalog niedostepny -> UpstreamFailure
            data = self.catalog_client.fetch_item(item.id)
            lines.append(
                {
                    "item_id": item.id,
                    "name": data["name"],
                    "price": Decimal(str(data["price"])).quantize(CENT, rounding=ROUND_HALF_UP),
                    "image": data.get("image"),
                    "quantity": item.quantity,
                }
            )
        return lines

    def _check_declared_totals(self, checkout: OrderCreate, subtotal, tax, total):
        for label, declared, actual in (
            ("subtotal", checkout.subtotal, subtotal),
            ("tax", checkout.tax, tax),
            ("total", checkout.total, total),
        ):
            if declared is None:
                continue
            if abs(Decimal(str(declared)) - actual) > TOTALS_TOLERANCE:
                logger.warning(f"Declared {label} {declared} differs from computed {actual}")
                raise InvalidOrder(f"Declared {label} {declared} does not match computed {actual}")

    @db_retry()
    def _save_order_and_clear_cart(self, identity: Identity, checkout: OrderCreate, lines, subtotal, tax, total):
        try:
            self.user_service.remember_owner(identity)

            order = OrderModel(
                user_id=identity.user_id,
                user_email=identity.email,
                customer_name=checkout.customer_name.strip(),
                customer_phone=checkout.customer_phone.strip(),
                customer_address=checkout.customer_address.strip(),
                subtotal=subtotal,
                tax=tax,
                total=total,
                payment_method=checkout.payment_method.strip(),
                status=OrderStatus.PENDING.value,
                items=[OrderItemModel(**line) for line in lines],
            )
            self.repo.add_order(order)
            self.cart_repo.delete_cart(identity.user_id)

            # jeden commit: albo jest zamowienie i nie ma koszyka, albo nic sie nie zmienilo
            self.repo.commit()
        except Exception as e:
            logger.error(f"Placing order for user {identity.user_id} failed, rolled back: {e}")
            self.repo.rollback()
            raise

        return order

    def update_status(self, identity: Identity, order_id: int, status: str) -> Dict[str, Any]:
        """
        Use Case: zmiana statusu (tylko admin).
        Dowolny z czterech statusow z dowolnego stanu, zmienia tylko status i updated_at.
        """
        if not identity.is_admin:
            raise Forbidden()

        try:
            new_status = OrderStatus(status)
        except ValueError:
            raise InvalidInput(f"Unknown order status '{status}'")

        if new_status not in ASSIGNABLE_STATUSES:
            raise InvalidInput(f"Order status '{status}' cannot be assigned")

        order = self.repo.get_order(order_id)
        if not order:
            raise OrderNotFound()

        previous = order.status
        order = self.repo.update_order_status(order, new_status.value)

        logger.info(f"Order {order.id} status {previous} -> {order.status} by {identity.user_id}")

        owner = self.user_service.owners_by_id([order.user_id]).get(order.user_id)
        return format_order(order, _owner_view(order, owner))

    # =====================================================
    # QUERIES
    # =====================================================
    def list_for_user(self, identity: Identity) -> List[Dict[str, Any]]:
        return [format_order(o) for o in self.repo.list_orders(user_id=identity.user_id)]

    def list_all(self, identity: Identity) -> List[Dict[str, Any]]:
        if not identity.is_admin:
            raise Forbidden()

        orders = self.repo.list_orders()
        owners = self.user_service.owners_by_id(o.user_id for o in orders)
        return [format_order(o, _owner_view(o, owners.get(o.user_id))) for o in orders]

    def get_order(self, identity: Identity, order_id: int) -> Dict[str, Any]:
        order = self.repo.get_order(order_id)

        if not order:
            raise OrderNotFound()

        if order.user_id != identity.user_id and not identity.is_admin:
            raise Forbidden("No access to this order")

        return format_order(order)
