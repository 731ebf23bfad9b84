"""Pytest configuration and fixtures"""
import os
from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock

import pytest

# Set test environment variables (placeholder backend: nothing is contacted)
os.environ.setdefault("SUPABASE_URL", "https://placeholder.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "test_anon_key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test_jwt_secret_with_enough_length_123")
os.environ.setdefault("CART_SYNC_BACKOFF_SECONDS", "0")

from ecofurnish.models.cart import CartItem  # noqa: E402
from ecofurnish.services.cart_store import CartStore  # noqa: E402
from ecofurnish.services.session_store import SessionStore  # noqa: E402
from ecofurnish.services.storefront import Storefront  # noqa: E402
from tests.fakes import FakeAuth, FakeCartRepository, FakeProfileRepository  # noqa: E402


@pytest.fixture
def fake_auth():
    return FakeAuth()


@pytest.fixture
def profile_repo():
    return FakeProfileRepository()


@pytest.fixture
def cart_repo():
    return FakeCartRepository()


@pytest.fixture
def session_store(fake_auth, profile_repo):
    return SessionStore(fake_auth, profile_repo, redirect_url="http://localhost:8080/api/v1/auth/callback")


@pytest.fixture
def cart_store(session_store, cart_repo):
    return CartStore(session_store, cart_repo, sync_attempts=3, sync_backoff=0)


@pytest.fixture
def storefront(session_store, cart_store):
    return Storefront(session=session_store, cart=cart_store)


@pytest.fixture
def pep_board():
    return CartItem(id="1", name="PEP Board (1 m²)", price=425, image="/assets/pep-board-product.png", category="Boards")


@pytest.fixture
def pencil_box():
    return CartItem(id="2", name="Pencil Box", price=129, image="/assets/pencil-box.png", category="Stationery")


@pytest.fixture
def garden_bench():
    return CartItem(id="5", name="Garden Bench", price=3200, image="/assets/eco-bench.png", category="Outdoor")


@pytest.fixture
def mock_supabase_client():
    """Mock Supabase client"""
    client = Mock()

    # Mock table operations
    table_mock = Mock()
    table_mock.select.return_value = table_mock
    table_mock.insert.return_value = table_mock
    table_mock.upsert.return_value = table_mock
    table_mock.delete.return_value = table_mock
    table_mock.eq.return_value = table_mock
    table_mock.in_.return_value = table_mock
    table_mock.limit.return_value = table_mock
    table_mock.not_ = table_mock
    table_mock.execute = AsyncMock(return_value=SimpleNamespace(data=[]))

    client.table.return_value = table_mock
    return client
