"""
Tests for the HTTP API
"""

import asyncio
import time

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from postgrest.exceptions import APIError
from unittest.mock import AsyncMock, Mock

from ecofurnish.core.auth import get_registry, get_storefront
from ecofurnish.core.config import get_settings
from ecofurnish.main import app
from ecofurnish.routers.newsletter import get_newsletter_service
from ecofurnish.services.newsletter_service import NewsletterService
from ecofurnish.services.storefront import StorefrontRegistry
from tests.fakes import make_auth_user

API = get_settings().API_V1_STR


@pytest.fixture
def client(storefront):
    asyncio.run(storefront.session.start())
    app.dependency_overrides[get_storefront] = lambda: storefront
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def jane(fake_auth):
    return fake_auth.add_account("jane-id", "jane@example.com", "pw123456")


def test_health(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


class TestProducts:

    def test_list(self, client):
        response = client.get(f"{API}/products")

        assert response.status_code == 200
        assert len(response.json()) == 6

    def test_filter(self, client):
        response = client.get(f"{API}/products", params={"category": "Furniture"})

        assert [p["name"] for p in response.json()] == ["Wave Dining Table", "Bookshelf", "Chair"]

    def test_categories(self, client):
        assert client.get(f"{API}/products/categories").json()[0] == "All"

    def test_deep_link(self, client):
        response = client.get(
            f"{API}/products/deep-link",
            params={"location": "https://ecofurnish.in/#products?category=Outdoor"},
        )

        assert response.json() == {"category": "Outdoor", "fragment": "#products?category=Outdoor"}

    def test_deep_link_unknown_category(self, client):
        response = client.get(f"{API}/products/deep-link", params={"location": "/#products?category=Nope"})

        assert response.json() == {"category": None, "fragment": "#products"}

    def test_detail(self, client):
        assert client.get(f"{API}/products/5").json()["price"] == 3200

    def test_detail_missing(self, client):
        assert client.get(f"{API}/products/99").status_code == 404


class TestCart:

    def test_scenario(self, client):
        client.post(f"{API}/cart", json={"product_id": "1"})
        response = client.post(f"{API}/cart", json={"product_id": "1"})
        body = response.json()
        assert len(body["items"]) == 1
        assert body["items"][0]["quantity"] == 2
        assert body["total_price"] == 850
        assert body["is_cart_open"] is True

        body = client.post(f"{API}/cart", json={"product_id": "2"}).json()
        assert (len(body["items"]), body["total_items"], body["total_price"]) == (2, 3, 979)

        body = client.delete(f"{API}/cart/1").json()
        assert (len(body["items"]), body["total_items"], body["total_price"]) == (1, 1, 129)
        assert body["items"][0]["line_total"] == 129

    def test_add_unknown_product(self, client):
        response = client.post(f"{API}/cart", json={"product_id": "99"})

        assert response.status_code == 404

    def test_update_quantity(self, client):
        client.post(f"{API}/cart", json={"product_id": "4"})

        body = client.patch(f"{API}/cart/4", json={"quantity": 3}).json()

        assert body["total_items"] == 3
        assert body["total_price"] == 3 * 4800

    def test_zero_quantity_removes(self, client):
        client.post(f"{API}/cart", json={"product_id": "4"})

        body = client.patch(f"{API}/cart/4", json={"quantity": 0}).json()

        assert body["items"] == []

    def test_update_missing_line(self, client):
        assert client.patch(f"{API}/cart/4", json={"quantity": 2}).status_code == 404

    def test_clear(self, client):
        client.post(f"{API}/cart", json={"product_id": "1"})
        client.post(f"{API}/cart", json={"product_id": "2"})

        body = client.delete(f"{API}/cart").json()

        assert body["items"] == []
        assert body["total_price"] == 0

    def test_panel(self, client):
        assert client.put(f"{API}/cart/panel", json={"open": True}).json()["is_cart_open"] is True
        assert client.get(f"{API}/cart").json()["is_cart_open"] is True
        assert client.put(f"{API}/cart/panel", json={"open": False}).json()["is_cart_open"] is False


class TestAuth:

    def test_anonymous_session(self, client):
        body = client.get(f"{API}/session").json()

        assert body == {
            "user": None,
            "is_authenticated": False,
            "is_auth_modal_open": False,
            "auth_mode": "login",
        }

    def test_modal(self, client):
        body = client.put(f"{API}/session/modal", json={"open": True, "mode": "signup"}).json()
        assert (body["is_auth_modal_open"], body["auth_mode"]) == (True, "signup")

        body = client.put(f"{API}/session/modal", json={"open": False}).json()
        assert body["is_auth_modal_open"] is False

    def test_login(self, client, jane):
        response = client.post(f"{API}/auth/login", json={"email": "jane@example.com", "password": "pw123456"})

        assert response.status_code == 200
        body = response.json()
        assert body["is_authenticated"] is True
        assert body["user"]["name"] == "jane"

    def test_login_failure_is_generic(self, client, jane):
        wrong_password = client.post(f"{API}/auth/login", json={"email": "jane@example.com", "password": "nope"})
        unknown_user = client.post(f"{API}/auth/login", json={"email": "who@example.com", "password": "nope"})

        assert wrong_password.status_code == unknown_user.status_code == 401
        assert wrong_password.json() == unknown_user.json() == {"detail": "Invalid credentials. Please try again."}

    def test_login_validation(self, client):
        response = client.post(f"{API}/auth/login", json={"email": "not-an-email", "password": "x"})

        assert response.status_code == 422

    def test_signup(self, client, profile_repo):
        response = client.post(
            f"{API}/auth/signup",
            json={"name": "  Jane Doe ", "email": "jane@example.com", "password": "pw123456"},
        )

        assert response.status_code == 200
        assert response.json()["user"]["name"] == "Jane Doe"
        assert profile_repo.created[0].name == "Jane Doe"

    def test_signup_existing_account(self, client, jane):
        response = client.post(
            f"{API}/auth/signup",
            json={"name": "Jane", "email": "jane@example.com", "password": "pw123456"},
        )

        assert response.status_code == 401

    def test_google(self, client):
        response = client.post(f"{API}/auth/google")

        assert response.status_code == 200
        assert response.json()["url"].startswith("https://accounts.google.com/")

    def test_google_unavailable(self, client, fake_auth):
        fake_auth.fail_all = True

        assert client.post(f"{API}/auth/google").status_code == 503

    def test_oauth_callback(self, client, fake_auth):
        fake_auth.oauth_codes["abc"] = make_auth_user("g1", "gina@gmail.com", full_name="Gina G")

        response = client.get(f"{API}/auth/callback", params={"code": "abc"}, follow_redirects=False)

        assert response.status_code == 303
        assert response.headers["location"] == get_settings().SITE_URL
        assert client.get(f"{API}/session").json()["user"]["name"] == "Gina G"

    def test_oauth_callback_without_code(self, client):
        response = client.get(f"{API}/auth/callback", follow_redirects=False)

        assert response.status_code == 303
        assert client.get(f"{API}/session").json()["is_authenticated"] is False

    def test_restore_session(self, client, fake_auth, jane):
        token = jwt.encode(
            {"sub": "jane-id", "exp": int(time.time()) + 600},
            get_settings().SUPABASE_JWT_SECRET,
            algorithm="HS256",
        )
        fake_auth.tokens[token] = jane

        response = client.post(f"{API}/auth/session", json={"access_token": token, "refresh_token": "r"})

        assert response.status_code == 200
        assert response.json()["user"]["id"] == "jane-id"

    def test_restore_session_bad_token(self, client):
        response = client.post(f"{API}/auth/session", json={"access_token": "garbage", "refresh_token": "r"})

        assert response.status_code == 401

    def test_logout_clears_cart(self, client, jane):
        client.post(f"{API}/auth/login", json={"email": "jane@example.com", "password": "pw123456"})
        client.post(f"{API}/cart", json={"product_id": "1"})

        body = client.post(f"{API}/auth/logout").json()

        assert body["is_authenticated"] is False
        assert client.get(f"{API}/cart").json()["items"] == []


class TestNewsletter:

    @pytest.fixture
    def repo(self):
        repo = Mock()
        repo.create = AsyncMock()
        return repo

    @pytest.fixture
    def newsletter_client(self, client, repo):
        app.dependency_overrides[get_newsletter_service] = lambda: NewsletterService(repo)
        return client

    def test_subscribe(self, newsletter_client):
        response = newsletter_client.post(f"{API}/newsletter", json={"email": "green@example.com"})

        assert response.json()["status"] == "subscribed"

    def test_already_subscribed(self, newsletter_client, repo):
        repo.create.side_effect = APIError({"code": "23505", "message": "duplicate key"})

        body = newsletter_client.post(f"{API}/newsletter", json={"email": "green@example.com"}).json()

        assert body == {
            "status": "already_subscribed",
            "message": "This email is already subscribed to our newsletter.",
        }

    def test_invalid_email(self, newsletter_client):
        assert newsletter_client.post(f"{API}/newsletter", json={"email": "nope"}).status_code == 422

    def test_placeholder_backend(self, client):
        # Default service from the lifespan: placeholder Supabase, nothing stored.
        response = client.post(f"{API}/newsletter", json={"email": "green@example.com"})

        assert response.json()["status"] == "subscribed"


class TestSessionCookie:

    @pytest.fixture
    def cookie_client(self, storefront):
        async def factory():
            return storefront

        app.dependency_overrides[get_registry] = lambda: StorefrontRegistry(factory)
        with TestClient(app) as test_client:
            yield test_client
        app.dependency_overrides.clear()

    def test_cookie_is_issued(self, cookie_client):
        response = cookie_client.get(f"{API}/session")

        assert get_settings().SESSION_COOKIE_NAME in response.cookies
