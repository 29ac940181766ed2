# storefront/domain/schemas.py
from datetime import datetime
from decimal import Decimal
from typing import Annotated, List

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

from storefront.utils.settings import MAX_ITEM_QUANTITY

# kwoty jako liczby w JSON, nie stringi
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]

# id pozycji menu idzie do sciezki URL katalogu, wiec bez '/', '?', '.' itp.
ITEM_ID_PATTERN = r"^[A-Za-z0-9_-]{1,64}$"


class CamelModel(BaseModel):
    """JSON w camelCase (jak front), w Pythonie snake_case."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ---------- cart ----------
class CartItemIn(CamelModel):
    """Schema dla dodawania pozycji do koszyka."""

    item_id: str = Field(
        ...,
        pattern=ITEM_ID_PATTERN,
        validation_alias=AliasChoices("itemId", "menuItemId", "item_id"),
        description="ID pozycji menu",
    )


class CartQuantityIn(CamelModel):
    """Schema dla ustawienia ilosci; <= 0 usuwa pozycje."""

    item_id: str = Field(
        ...,
        pattern=ITEM_ID_PATTERN,
        validation_alias=AliasChoices("itemId", "menuItemId", "item_id"),
    )
    quantity: int = Field(..., le=MAX_ITEM_QUANTITY)


class CartLineOut(CamelModel):
    id: str
    name: str | None = None
    description: str | None = None
    price: float | None = None
    image: str | None = None
    category: str | None = None
    quantity: int


class CartOut(CamelModel):
    items: List[CartLineOut]


class CartEnvelope(BaseModel):
    success: bool = True
    data: CartOut
    message: str | None = None


# ---------- orders ----------
class OrderItemIn(CamelModel):
    """Pozycja z checkoutu. Nazwa/cena od klienta sa ignorowane, snapshot bierzemy z katalogu."""

    # pusty id przechodzi, brak pozycji zglasza OrderService jako InvalidOrder
    id: str = Field(
        "",
        pattern=f"^$|{ITEM_ID_PATTERN}",
        validation_alias=AliasChoices("id", "itemId", "menuItemId"),
    )
    name: str | None = None
    price: Decimal | None = None
    image: str | None = None
    quantity: int = Field(..., le=MAX_ITEM_QUANTITY)


class OrderCreate(CamelModel):
    """Schema dla zlozenia zamowienia. Wymagane pola sprawdza OrderService (InvalidOrder)."""

    customer_name: str = ""
    customer_phone: str = ""
    customer_address: str = ""
    items: List[OrderItemIn] = Field(default_factory=list)
    subtotal: Decimal | None = None
    tax: Decimal | None = None
    total: Decimal | None = None
    payment_method: str = ""


class OrderStatusIn(CamelModel):
    status: str = Field(..., min_length=1)


class OrderOwnerOut(CamelModel):
    id: str
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None


class OrderLineOut(CamelModel):
    id: str
    name: str
    price: Money
    quantity: int
    image: str | None = None


class OrderOut(CamelModel):
    """Schema dla zamowienia (response)."""

    id: int
    user: OrderOwnerOut | None = None
    user_email: str
    customer_name: str
    customer_phone: str
    customer_address: str
    items: List[OrderLineOut]
    subtotal: Money
    tax: Money
    total: Money
    payment_method: str
    status: str
    created_at: datetime
    updated_at: datetime


class OrderEnvelope(BaseModel):
    success: bool = True
    data: OrderOut
    message: str | None = None


class OrderListEnvelope(BaseModel):
    success: bool = True
    data: List[OrderOut]
    message: str | None = None


# ---------- misc ----------
class ErrorEnvelope(BaseModel):
    success: bool = False
    error: str
    message: str | None = None


class HealthOut(BaseModel):
    status: str
    timestamp: datetime
