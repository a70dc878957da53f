"""
Integration tests for authentication API endpoints.
"""
import pytest
from django.core.cache import cache
from django.urls import reverse

from accounts.application.services.token_blacklist import CACHE_KEY_PREFIX as BLACKLIST_PREFIX
from accounts.infrastructure.models import StoredSecret
from core.infrastructure import cache_adapters


class BlacklistOutage:
    """Django cache whose token blacklist keys fail for the chosen operations."""

    def __init__(self, *operations):
        self.operations = set(operations)

    def __getattr__(self, name):
        method = getattr(cache, name)
        if name not in self.operations:
            return method

        def guarded(key, *args, **kwargs):
            if key.startswith(BLACKLIST_PREFIX):
                raise ConnectionError("redis down")
            return method(key, *args, **kwargs)

        return guarded


def _sign_in(api_client, username="admin", password="admin123"):
    return api_client.post(
        reverse("accounts:signin"), {"username": username, "password": password}, format="json"
    )


@pytest.mark.django_db
@pytest.mark.integration
class TestAuthAPI:
    """Integration tests for the auth API."""

    def test_signin_bootstraps_credentials(self, api_client, settings):
        """Test the first sign-in creates the credential secret."""
        response = _sign_in(api_client)

        assert response.status_code == 200
        data = response.json()
        assert set(data) == {"message", "token", "refreshToken", "user"}
        assert data["user"]["username"] == "admin"
        assert data["user"]["role"] == "admin"
        assert StoredSecret.objects.filter(name=settings.CREDENTIALS_SECRET_NAME).exists()

    def test_signin_failures_look_alike(self, api_client):
        """Test wrong password and unknown user give the same answer."""
        wrong_password = _sign_in(api_client, password="nope")
        unknown_user = _sign_in(api_client, username="mallory", password="nope")

        assert wrong_password.status_code == unknown_user.status_code == 401
        assert wrong_password.json() == unknown_user.json()

    def test_signin_validation(self, api_client):
        """Test missing fields."""
        response = api_client.post(reverse("accounts:signin"), {}, format="json")
        assert response.status_code == 400

    def test_renew_token_once(self, api_client):
        """Test a refresh token is single use; bare tokens are accepted."""
        refresh_token = _sign_in(api_client).json()["refreshToken"]
        url = reverse("accounts:renew-token")

        first = api_client.post(url, HTTP_AUTHORIZATION=f"Bearer {refresh_token}")
        assert first.status_code == 200
        assert first.json()["refreshToken"] != refresh_token

        again = api_client.post(url, HTTP_AUTHORIZATION=refresh_token)
        assert again.status_code == 401
        assert again.json()["error"]["code"] == "TOKEN_REVOKED"

    def test_renew_requires_token(self, api_client):
        """Test renewing without a token."""
        response = api_client.post(reverse("accounts:renew-token"))
        assert response.status_code == 400

    def test_renew_rejects_access_token(self, api_client):
        """Test an access token cannot renew."""
        token = _sign_in(api_client).json()["token"]
        response = api_client.post(
            reverse("accounts:renew-token"), HTTP_AUTHORIZATION=f"Bearer {token}"
        )
        assert response.status_code == 403

    def test_logout_revokes_tokens(self, api_client):
        """Test tokens stop working after logout."""
        pair = _sign_in(api_client).json()
        auth = f"Bearer {pair['token']}"

        response = api_client.post(
            reverse("accounts:logout"),
            {"refreshToken": pair["refreshToken"]},
            format="json",
            HTTP_AUTHORIZATION=auth,
        )
        assert response.status_code == 200

        again = api_client.post(reverse("accounts:logout"), {}, format="json", HTTP_AUTHORIZATION=auth)
        assert again.status_code == 401

        renew = api_client.post(
            reverse("accounts:renew-token"), HTTP_AUTHORIZATION=f"Bearer {pair['refreshToken']}"
        )
        assert renew.status_code == 401

    def test_renew_reports_lost_revocation(self, api_client, monkeypatch):
        """Test renewal fails while the old refresh token cannot be revoked."""
        refresh_token = _sign_in(api_client).json()["refreshToken"]
        url = reverse("accounts:renew-token")
        auth = f"Bearer {refresh_token}"

        with monkeypatch.context() as patched:
            patched.setattr(cache_adapters, "cache", BlacklistOutage("set"))
            failed = api_client.post(url, HTTP_AUTHORIZATION=auth)
        assert failed.status_code == 503
        assert failed.json()["error"]["code"] == "STORE_UNAVAILABLE"

        assert api_client.post(url, HTTP_AUTHORIZATION=auth).status_code == 200
        assert api_client.post(url, HTTP_AUTHORIZATION=auth).status_code == 401

    def test_logout_reports_lost_revocation(self, api_client, monkeypatch):
        """Test logout does not claim success when tokens stay valid."""
        pair = _sign_in(api_client).json()
        monkeypatch.setattr(cache_adapters, "cache", BlacklistOutage("set"))

        response = api_client.post(
            reverse("accounts:logout"),
            {"refreshToken": pair["refreshToken"]},
            format="json",
            HTTP_AUTHORIZATION=f"Bearer {pair['token']}",
        )
        assert response.status_code == 503

    def test_unreadable_blacklist_refuses_tokens(self, api_client, monkeypatch):
        """Test a revoked token stays refused while the blacklist cannot be read."""
        token = _sign_in(api_client).json()["token"]
        auth = f"Bearer {token}"
        assert (
            api_client.post(reverse("accounts:logout"), {}, format="json", HTTP_AUTHORIZATION=auth)
        ).status_code == 200

        monkeypatch.setattr(cache_adapters, "cache", BlacklistOutage("get"))
        response = api_client.put(
            reverse("accounts:change-password"),
            {"username": "admin", "currentPassword": "admin123", "newPassword": "n3w-pass"},
            format="json",
            HTTP_AUTHORIZATION=auth,
        )
        assert response.status_code == 503
        assert response.json()["error"]["code"] == "STORE_UNAVAILABLE"

    def test_protected_routes_need_token(self, api_client):
        """Test logout and changePassword require a bearer token."""
        assert api_client.post(reverse("accounts:logout"), {}, format="json").status_code == 401
        response = api_client.put(reverse("accounts:change-password"), {}, format="json")
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "MISSING_TOKEN"

    def test_invalid_bearer_token(self, api_client):
        """Test a forged bearer token is forbidden."""
        response = api_client.post(
            reverse("accounts:logout"), {}, format="json", HTTP_AUTHORIZATION="Bearer abc.def.ghi"
        )
        assert response.status_code == 403

    def test_change_password(self, api_client):
        """Test changing the password."""
        token = _sign_in(api_client).json()["token"]
        url = reverse("accounts:change-password")
        auth = f"Bearer {token}"

        wrong = api_client.put(
            url,
            {"username": "admin", "currentPassword": "bad", "newPassword": "n3w-pass"},
            format="json",
            HTTP_AUTHORIZATION=auth,
        )
        assert wrong.status_code == 401
        assert wrong.json()["error"]["message"] == "Current password is incorrect."

        missing = api_client.put(
            url,
            {"username": "ghost", "currentPassword": "a", "newPassword": "b"},
            format="json",
            HTTP_AUTHORIZATION=auth,
        )
        assert missing.status_code == 404

        ok = api_client.put(
            url,
            {"username": "admin", "currentPassword": "admin123", "newPassword": "n3w-pass"},
            format="json",
            HTTP_AUTHORIZATION=auth,
        )
        assert ok.status_code == 200
        assert _sign_in(api_client, password="admin123").status_code == 401
        assert _sign_in(api_client, password="n3w-pass").status_code == 200


@pytest.mark.django_db
@pytest.mark.integration
class TestHealthEndpoints:
    """Integration tests for health endpoints."""

    def test_health(self, client):
        """Test liveness."""
        assert client.get("/health/").json()["status"] == "healthy"

    def test_ready(self, client):
        """Test readiness with database and cache."""
        response = client.get("/ready/")
        assert response.status_code == 200
        assert response.json()["checks"] == {"database": True, "cache": True}
