from sqlalchemy import Column, Integer, String, ForeignKey, Numeric
from sqlalchemy.orm import relationship

from storefront.data.database import Base


class OrderItemModel(Base):
    """Snapshot pozycji z chwili zamowienia, niezalezny od pozniejszych zmian w katalogu."""

    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)

    item_id = Column(String(64), nullable=False)
    name = Column(String(200), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    image = Column(String(1024), nullable=True)
    quantity = Column(Integer, nullable=False)

    order = relationship("OrderModel", back_populates="items")
