"""Fixtures pytest: SQLite em memória, store, identidade e app Flask."""
from decimal import Decimal

import pytest
from kink import di

from cart_sync.connectors.identity import InMemoryIdentityProvider
from cart_sync.core.db import create_session_factory, create_schema
from cart_sync.core.settings import Settings
from cart_sync.domain.cart_session import CartSession
from cart_sync.ports.interfaces import Identity, ProductDetails, RemoteStore
from cart_sync.repo.models import User
from cart_sync.repo.store import SqlCartStore


def add_profile(session_factory, auth_id: str) -> str:
    """Provisiona a linha de `users` (o carrinho só lê perfis)."""
    with session_factory() as s, s.begin():
        user = User(auth_id=auth_id)
        s.add(user)
        s.flush()
        user_id = user.id
    return user_id


@pytest.fixture
def session_factory():
    """Banco SQLite novo por teste, com schema criado."""
    factory = create_session_factory("sqlite://")
    create_schema(factory)
    di["session_factory"] = factory
    return factory


@pytest.fixture
def store(session_factory):
    store = SqlCartStore(session_factory)
    di[RemoteStore] = store
    return store


@pytest.fixture
def seed_profile(session_factory):
    return lambda auth_id: add_profile(session_factory, auth_id)


@pytest.fixture
def profile_id(store, seed_profile):
    """Perfil já provisionado para a identidade auth-1."""
    return seed_profile("auth-1")


@pytest.fixture
def identity():
    return InMemoryIdentityProvider(Identity(id="auth-1", email="ana@example.com"))


@pytest.fixture
def cart(identity, store, profile_id):
    session = CartSession(identity, store).start()
    yield session
    session.close()


@pytest.fixture
def product():
    return ProductDetails(price=Decimal("9.99"), name="Café em grãos", image="https://img/cafe.png",
                          weight=Decimal("500"), weight_unit="g")


@pytest.fixture
def other_product():
    return ProductDetails(price=Decimal("4.50"), name="Filtro de papel", weight=Decimal("1"), weight_unit="un")


@pytest.fixture
def app():
    app = create_test_app()
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


def create_test_app():
    from cart_sync.api.app import create_app
    app = create_app(Settings(database_url="sqlite://", create_schema=True))
    app.config.update(TESTING=True)
    add_profile(di["session_factory"], "auth-1")
    add_profile(di["session_factory"], "auth-2")
    return app
