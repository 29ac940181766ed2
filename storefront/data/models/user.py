from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime

from storefront.data.database import Base


class UserModel(Base):
    """Katalog wlascicieli zamowien, zapisywany z danych tozsamosci przy skladaniu zamowienia."""

    __tablename__ = "users"

    id = Column(String(64), primary_key=True)
    email = Column(String(255), nullable=False)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
