import jwt
import pytest
from fastapi import status
from fastapi.testclient import TestClient

from authgate.core.rate_limit import AuthRateLimiter, get_auth_limiter
from main import app
from tests.conftest import TEST_SECRET

LOGIN_URL = "/api/v1/auth/login"
REFRESH_URL = "/api/v1/auth/refresh"
ME_URL = "/api/v1/auth/me"
CHALLENGE_URL = "/api/v1/auth/challenge"
LOGOUT_URL = "/api/v1/auth/logout"


def _login(client: TestClient, wallet, message: str = "Sign in to AuthGate"):
    return client.post(
        LOGIN_URL,
        json={"publicKey": wallet.address, "signature": wallet.sign(message), "message": message},
    )


class TestLoginAPI:
    """Test cases for POST /api/v1/auth/login"""

    def test_login_success(self, client: TestClient, wallet):
        response = _login(client, wallet)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["success"] is True
        assert data["token"]
        assert data["refreshToken"]
        assert data["user"] == {"walletAddress": wallet.address, "role": "user"}

        claims = jwt.decode(data["token"], TEST_SECRET, algorithms=["HS256"])
        assert claims["walletAddress"] == wallet.address

    def test_login_invalid_signature(self, client: TestClient, wallet, other_wallet):
        message = "Sign in to AuthGate"
        response = client.post(
            LOGIN_URL,
            json={"publicKey": wallet.address, "signature": other_wallet.sign(message), "message": message},
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json() == {"success": False, "message": "Invalid signature", "code": "UNAUTHORIZED"}

    @pytest.mark.parametrize("missing", ["publicKey", "signature", "message"])
    def test_login_missing_field(self, client: TestClient, wallet, missing):
        message = "Sign in to AuthGate"
        body = {"publicKey": wallet.address, "signature": wallet.sign(message), "message": message}
        del body[missing]

        response = client.post(LOGIN_URL, json=body)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["code"] == "INVALID_REQUEST"

    def test_login_malformed_base58(self, client: TestClient):
        response = client.post(
            LOGIN_URL,
            json={"publicKey": "0OIl-not-base58", "signature": "0OIl", "message": "hello"},
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_login_malformed_body(self, client: TestClient):
        response = client.post(LOGIN_URL, content="not json", headers={"Content-Type": "application/json"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["code"] == "INVALID_REQUEST"


class TestRefreshAPI:
    """Test cases for POST /api/v1/auth/refresh"""

    def test_refresh_success(self, client: TestClient, wallet):
        refresh_token = _login(client, wallet).json()["refreshToken"]

        response = client.post(REFRESH_URL, json={"refreshToken": refresh_token})

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["success"] is True
        claims = jwt.decode(data["token"], TEST_SECRET, algorithms=["HS256"])
        assert claims["walletAddress"] == wallet.address
        assert claims["type"] == "access"

    def test_refresh_missing_token(self, client: TestClient):
        response = client.post(REFRESH_URL, json={})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "Refresh token required"

    def test_refresh_with_access_token(self, client: TestClient, wallet):
        access_token = _login(client, wallet).json()["token"]

        response = client.post(REFRESH_URL, json={"refreshToken": access_token})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["message"] == "Invalid refresh token"

    def test_refresh_with_garbage(self, client: TestClient):
        response = client.post(REFRESH_URL, json={"refreshToken": "abc.def.ghi"})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_refresh_token_can_be_reused(self, client: TestClient, wallet):
        """Refresh tokens are not rotated, so the same token keeps working until it expires"""
        refresh_token = _login(client, wallet).json()["refreshToken"]

        for _ in range(3):
            response = client.post(REFRESH_URL, json={"refreshToken": refresh_token})
            assert response.status_code == status.HTTP_200_OK


class TestMeAPI:
    """Test cases for GET /api/v1/auth/me"""

    def test_me_success(self, client: TestClient, wallet):
        access_token = _login(client, wallet).json()["token"]

        response = client.get(ME_URL, headers={"Authorization": f"Bearer {access_token}"})

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {
            "success": True,
            "user": {"walletAddress": wallet.address, "role": "user"},
        }

    def test_me_with_refreshed_token(self, client: TestClient, wallet):
        refresh_token = _login(client, wallet).json()["refreshToken"]
        access_token = client.post(REFRESH_URL, json={"refreshToken": refresh_token}).json()["token"]

        response = client.get(ME_URL, headers={"Authorization": f"Bearer {access_token}"})

        assert response.json()["user"]["walletAddress"] == wallet.address

    def test_me_without_header(self, client: TestClient):
        response = client.get(ME_URL)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["message"] == "Access token required"

    def test_me_with_empty_bearer(self, client: TestClient):
        response = client.get(ME_URL, headers={"Authorization": "Bearer "})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_me_with_invalid_token(self, client: TestClient):
        response = client.get(ME_URL, headers={"Authorization": "Bearer not-a-jwt"})

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json() == {
            "success": False,
            "message": "Invalid or expired token",
            "code": "FORBIDDEN",
        }

    def test_me_with_refresh_token(self, client: TestClient, wallet):
        refresh_token = _login(client, wallet).json()["refreshToken"]

        response = client.get(ME_URL, headers={"Authorization": f"Bearer {refresh_token}"})

        assert response.status_code == status.HTTP_403_FORBIDDEN


class TestChallengeAPI:
    """Test cases for POST /api/v1/auth/challenge"""

    def test_challenge_success(self, client: TestClient, wallet):
        response = client.post(CHALLENGE_URL, json={"walletAddress": wallet.address})

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["success"] is True
        assert data["walletAddress"] == wallet.address
        assert data["expiresIn"] == 300
        assert f"Wallet: {wallet.address}" in data["challenge"]

    def test_signed_challenge_can_log_in(self, client: TestClient, wallet):
        challenge = client.post(CHALLENGE_URL, json={"walletAddress": wallet.address}).json()["challenge"]

        response = _login(client, wallet, message=challenge)

        assert response.status_code == status.HTTP_200_OK

    @pytest.mark.parametrize("address", ["", "not*base58", "3yZe7d"])
    def test_challenge_invalid_wallet(self, client: TestClient, address):
        response = client.post(CHALLENGE_URL, json={"walletAddress": address})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "Invalid wallet address"


class TestLogoutAPI:
    """Test cases for POST /api/v1/auth/logout"""

    def test_logout_does_not_revoke(self, client: TestClient, wallet):
        access_token = _login(client, wallet).json()["token"]

        response = client.post(LOGOUT_URL)
        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"success": True, "message": "Logged out successfully"}

        me = client.get(ME_URL, headers={"Authorization": f"Bearer {access_token}"})
        assert me.status_code == status.HTTP_200_OK


class TestRateLimitAPI:
    """Test cases for rate limiting of the auth routes"""

    @pytest.fixture
    def limited_client(self, client: TestClient):
        limiter = AuthRateLimiter(times=5, seconds=15 * 60, block_seconds=30 * 60)
        app.dependency_overrides[get_auth_limiter] = lambda: limiter
        return client

    def test_failed_logins_are_limited(self, limited_client: TestClient, wallet, other_wallet):
        message = "Sign in to AuthGate"
        body = {"publicKey": wallet.address, "signature": other_wallet.sign(message), "message": message}

        for _ in range(5):
            assert limited_client.post(LOGIN_URL, json=body).status_code == status.HTTP_401_UNAUTHORIZED

        response = limited_client.post(LOGIN_URL, json=body)

        assert response.status_code == status.HTTP_429_TOO_MANY_REQUESTS
        data = response.json()
        assert data["success"] is False
        assert data["code"] == "RATE_LIMIT_EXCEEDED"
        assert 0 < int(response.headers["Retry-After"]) <= 30 * 60 + 1

    def test_blocked_client_cannot_log_in(self, limited_client: TestClient, wallet, other_wallet):
        message = "Sign in to AuthGate"
        bad = {"publicKey": wallet.address, "signature": other_wallet.sign(message), "message": message}
        for _ in range(6):
            limited_client.post(LOGIN_URL, json=bad)

        response = _login(limited_client, wallet, message)

        assert response.status_code == status.HTTP_429_TOO_MANY_REQUESTS

    def test_other_user_agent_not_blocked(self, limited_client: TestClient, wallet):
        for _ in range(6):
            _login(limited_client, wallet)

        message = "Sign in to AuthGate"
        response = limited_client.post(
            LOGIN_URL,
            json={"publicKey": wallet.address, "signature": wallet.sign(message), "message": message},
            headers={"User-Agent": "another-browser/1.0"},
        )

        assert response.status_code == status.HTTP_200_OK

    def test_refresh_is_limited(self, limited_client: TestClient):
        for _ in range(5):
            limited_client.post(REFRESH_URL, json={"refreshToken": "abc.def.ghi"})

        response = limited_client.post(REFRESH_URL, json={"refreshToken": "abc.def.ghi"})

        assert response.status_code == status.HTTP_429_TOO_MANY_REQUESTS
        assert "Retry-After" in response.headers

    def test_me_is_not_limited(self, limited_client: TestClient):
        for _ in range(10):
            response = limited_client.get(ME_URL)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
