# storefront/utils/settings.py
import os
from decimal import Decimal
from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./storefront.db")
REDIS_URL = os.getenv("REDIS_URL", "redis://redis:6379/0")
CATALOG_SERVICE_URL = os.getenv("CATALOG_SERVICE_URL", "http://catalog-service:8000")
CATALOG_TIMEOUT_SECONDS = float(os.getenv("CATALOG_TIMEOUT_SECONDS", 2))

JWT_SECRET = os.getenv("JWT_SECRET", "change-me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
# comma separated, compared case-insensitively
ADMIN_EMAILS = frozenset(
    e.strip().lower() for e in os.getenv("ADMIN_EMAILS", "").split(",") if e.strip()
)

TAX_RATE = Decimal(os.getenv("TAX_RATE", "0.13"))
TOTALS_TOLERANCE = Decimal(os.getenv("TOTALS_TOLERANCE", "0.01"))
# gorny limit ilosci jednej pozycji (koszyk i checkout), miesci sie w INTEGER
MAX_ITEM_QUANTITY = int(os.getenv("MAX_ITEM_QUANTITY", 1000))

CART_LOCK_TTL_MS = int(os.getenv("CART_LOCK_TTL_MS", 10_000))
CART_LOCK_WAIT_SECONDS = float(os.getenv("CART_LOCK_WAIT_SECONDS", 5))

API_PREFIX = os.getenv("API_PREFIX", "/api")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
