# storefront/repos/cart_repo.py
from sqlalchemy import select, delete
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel

_UPSERT_DIALECTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def _insert(self, model):
        factory = _UPSERT_DIALECTS.get(self.db.get_bind().dialect.name)
        return factory(model) if factory else None

    # ---------- odczyt ----------
    def get_cart_by_user(self, user_id: str) -> CartModel | None:
        return self.db.execute(
            select(CartModel).where(CartModel.user_id == user_id)
        ).scalar_one_or_none()

    def get_cart_items(self, cart_id: int) -> list[CartItemModel]:
        return list(
            self.db.execute(
                select(CartItemModel)
                .where(CartItemModel.cart_id == cart_id)
                .order_by(CartItemModel.id)
            ).scalars()
        )

    def get_cart_item(self, cart_id: int, item_id: str) -> CartItemModel | None:
        return self.db.execute(
            select(CartItemModel).where(
                CartItemModel.cart_id == cart_id,
                CartItemModel.item_id == item_id,
            )
        ).scalar_one_or_none()

    # ---------- zapis ----------
    def ensure_cart(self, user_id: str) -> int:
        """INSERT ... ON CONFLICT DO NOTHING, zwraca id koszyka (nowego albo istniejacego)."""
        stmt = self._insert(CartModel)
        if stmt is not None:
            self.db.execute(
                stmt.values(user_id=user_id).on_conflict_do_nothing(index_elements=["user_id"])
            )
        elif self.get_cart_by_user(user_id) is None:
            self.db.add(CartModel(user_id=user_id))
            self.db.flush()

        return self.db.execute(
            select(CartModel.id).where(CartModel.user_id == user_id)
        ).scalar_one()

    def increment_item(self, cart_id: int, item_id: str, by: int = 1) -> None:
        """Atomowe insert-or-increment po (cart_id, item_id)."""
        stmt = self._insert(CartItemModel)
        if stmt is not None:
            stmt = stmt.values(cart_id=cart_id, item_id=item_id, quantity=by)
            stmt = stmt.on_conflict_do_update(
                index_elements=["cart_id", "item_id"],
                set_={"quantity": CartItemModel.__table__.c.quantity + by},
            )
            self.db.execute(stmt)
            return

        existing = self.get_cart_item(cart_id, item_id)
        if existing:
            existing.quantity += by
        else:
            self.db.add(CartItemModel(cart_id=cart_id, item_id=item_id, quantity=by))
        self.db.flush()

    def set_item_quantity(self, item: CartItemModel, quantity: int) -> None:
        item.quantity = quantity
        self.db.flush()

    def delete_cart_item(self, cart_id: int, item_id: str) -> int:
        res = self.db.execute(
            delete(CartItemModel).where(
                CartItemModel.cart_id == cart_id,
                CartItemModel.item_id == item_id,
            )
        )
        return res.rowcount

    def delete_cart(self, user_id: str) -> int:
        # cart_items leca kaskadowo (ON DELETE CASCADE)
        res = self.db.execute(delete(CartModel).where(CartModel.user_id == user_id))
        return res.rowcount

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
