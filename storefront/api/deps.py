# storefront/api/deps.py
from functools import lru_cache

from fastapi import Depends, Header

from storefront.data.database import get_db  # noqa: F401  (re-export dla routerow)
from storefront.domain.errors import Unauthorized
from storefront.services.catalog_client import CatalogClient
from storefront.services.identity import Identity, IdentityResolver
from storefront.services.lock_service import LockService


@lru_cache
def get_catalog_client() -> CatalogClient:
    return CatalogClient()


@lru_cache
def get_lock_service() -> LockService:
    return LockService()


@lru_cache
def get_identity_resolver() -> IdentityResolver:
    return IdentityResolver()


def get_current_identity(
    authorization: str | None = Header(default=None),
    resolver: IdentityResolver = Depends(get_identity_resolver),
) -> Identity:
    """Authorization: Bearer <token> -> Identity, inaczej 401."""
    if not authorization:
        raise Unauthorized("No token provided")

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise Unauthorized("No token provided")

    return resolver.resolve(token.strip())
