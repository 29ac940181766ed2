import copy
from datetime import datetime, timedelta, timezone

import fakeredis
import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy.orm import sessionmaker

import storefront.data.models  # noqa: F401
from storefront.api.deps import get_catalog_client, get_identity_resolver, get_lock_service
from storefront.catalog_service import main as catalog_main
from storefront.data.database import Base, get_db, make_engine
from storefront.main import create_app
from storefront.services.cart_service import CartService
from storefront.services.catalog_client import CatalogClient
from storefront.services.identity import Identity, IdentityResolver
from storefront.services.lock_service import LockService
from storefront.services.order_service import OrderService

JWT_SECRET = "test-secret"
ADMIN_EMAIL = "admin@shop.test"


def make_token(user_id, email, expires_in=timedelta(hours=1), **claims):
    payload = {
        "userId": user_id,
        "email": email,
        "exp": datetime.now(timezone.utc) + expires_in,
        **claims,
    }
    return jwt.encode(payload, JWT_SECRET, algorithm="HS256")


def bearer(user_id, email, **claims):
    return {"Authorization": f"Bearer {make_token(user_id, email, **claims)}"}


@pytest.fixture()
def engine(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'storefront-test.db'}")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture()
def redis_server():
    return fakeredis.FakeServer()


@pytest.fixture()
def lock_service(redis_server):
    return LockService(client=fakeredis.FakeRedis(server=redis_server, decode_responses=True))


@pytest.fixture()
def menu(monkeypatch):
    """Kopia menu dev catalog-service, test moze ja zmieniac."""
    items = copy.deepcopy(catalog_main.MENU_ITEMS)
    monkeypatch.setattr(catalog_main, "MENU_ITEMS", items)
    return items


def catalog_client_for_tests():
    return CatalogClient(base_url="http://testserver", session=TestClient(catalog_main.app))


@pytest.fixture()
def catalog_client(menu):
    return catalog_client_for_tests()


@pytest.fixture()
def resolver():
    return IdentityResolver(secret=JWT_SECRET, algorithm="HS256", admin_emails=frozenset({ADMIN_EMAIL}))


@pytest.fixture()
def cart_service(db, catalog_client, lock_service):
    return CartService(db=db, catalog_client=catalog_client, lock_service=lock_service)


@pytest.fixture()
def order_service(db, catalog_client, lock_service):
    return OrderService(db, catalog_client=catalog_client, lock_service=lock_service)


@pytest.fixture()
def alice():
    return Identity(user_id="u-alice", email="alice@shop.test", first_name="Alice", last_name="Nowak")


@pytest.fixture()
def bob():
    return Identity(user_id="u-bob", email="bob@shop.test")


@pytest.fixture()
def admin():
    return Identity(user_id="admin-1", email=ADMIN_EMAIL, is_admin=True)


@pytest.fixture()
def app(session_factory, catalog_client, lock_service, resolver):
    app = create_app()

    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_catalog_client] = lambda: catalog_client
    app.dependency_overrides[get_lock_service] = lambda: lock_service
    app.dependency_overrides[get_identity_resolver] = lambda: resolver
    return app


@pytest.fixture()
def client(app):
    return TestClient(app)


@pytest.fixture()
def auth():
    return bearer


@pytest.fixture()
def token():
    return make_token


@pytest.fixture()
def make_catalog_client(menu):
    return catalog_client_for_tests
