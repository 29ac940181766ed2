# storefront/services/catalog_client.py
import re
from decimal import Decimal, InvalidOperation
from urllib.parse import quote

import requests
from requests import RequestException

from storefront.domain.errors import ItemNotFound, UpstreamFailure
from storefront.domain.schemas import ITEM_ID_PATTERN
from storefront.utils.settings import CATALOG_SERVICE_URL, CATALOG_TIMEOUT_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

_ITEM_ID_RE = re.compile(ITEM_ID_PATTERN)


class CatalogClient:
    """
    Odczyt pozycji menu z catalog-service (tylko odczyt).
    Bez retry: blad polaczenia idzie do wywolujacego jako UpstreamFailure.
    Odpowiedz bez wymaganych pol albo z innym id to tez UpstreamFailure.
    """

    def __init__(self, base_url: str | None = None, timeout: float | None = None, session=None):
        self.base_url = (base_url or CATALOG_SERVICE_URL).rstrip("/")
        self.timeout = timeout or CATALOG_TIMEOUT_SECONDS
        # cokolwiek z .get(url, timeout=...), domyslnie requests
        self.session = session if session is not None else requests.Session()

    def fetch_item(self, item_id: str) -> dict:
        if not isinstance(item_id, str) or not _ITEM_ID_RE.match(item_id):
            raise ItemNotFound(f"Menu item {item_id!r} not found")

        url = f"{self.base_url}/menu/{quote(item_id, safe='')}"
        logger.info(f"CatalogClient GET {url}")

        try:
            resp = self.session.get(url, timeout=self.timeout)
        except RequestException as e:
            logger.error(f"Catalog unreachable: {e}")
            raise UpstreamFailure("Catalog service unavailable")

        if resp.status_code == 404:
            raise ItemNotFound(f"Menu item {item_id} not found")
        if resp.status_code >= 400:
            logger.error(f"Catalog returned {resp.status_code} for item {item_id}")
            raise UpstreamFailure("Catalog service error")

        try:
            data = resp.json()
        except ValueError as e:
            logger.error(f"Catalog returned non-JSON body for item {item_id}: {e}")
            raise UpstreamFailure("Catalog service error")

        self._check_shape(item_id, data)

        if not data.get("isActive", True):
            raise ItemNotFound(f"Menu item {item_id} not found")
        return data

    def _check_shape(self, item_id: str, data) -> None:
        if not isinstance(data, dict):
            logger.error(f"Catalog returned {type(data).__name__} instead of an object for item {item_id}")
            raise UpstreamFailure("Catalog service error")

        if str(data.get("id")) != item_id:
            logger.error(f"Catalog answered item {data.get('id')!r} when asked for {item_id}")
            raise UpstreamFailure("Catalog service error")

        if not isinstance(data.get("name"), str) or not data["name"]:
            logger.error(f"Catalog item {item_id} has no name")
            raise UpstreamFailure("Catalog service error")

        price = data.get("price")
        try:
            valid = not isinstance(price, bool) and Decimal(str(price)).is_finite() and Decimal(str(price)) >= 0
        except InvalidOperation:
            valid = False
        if not valid:
            logger.error(f"Catalog item {item_id} has invalid price {price!r}")
            raise UpstreamFailure("Catalog service error")

    def find_item(self, item_id: str) -> dict | None:
        """Jak fetch_item, ale brak pozycji to None (slaba referencja z koszyka)."""
        try:
            return self.fetch_item(item_id)
        except ItemNotFound:
            return None
