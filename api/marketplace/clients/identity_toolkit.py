"""
Firebase Auth client for email/password accounts.

Wraps the Identity Toolkit REST endpoints used by the Firebase web SDK to sign users up and in.
"""
from __future__ import annotations

from logging import getLogger
from typing import Any

import httpx

from marketplace.config import FirebaseAuthConfig
from marketplace.errors import AuthError

logger = getLogger(__name__)


class IdentityToolkitClient:
    """Asynchronous client for the Firebase Identity Toolkit API."""

    def __init__(
        self,
        api_key: str | None = None,
        *,
        base_url: str = FirebaseAuthConfig.identity_toolkit_url,
        http_client: httpx.AsyncClient | None = None,
    ):
        """
        Initialize the client.

        :param api_key: The Firebase web API key. Defaults to ``FirebaseAuthConfig.api_key``.
        :param base_url: The Identity Toolkit base URL.
        :param http_client: Optional shared httpx client. One is created when omitted.
        """
        self.api_key = api_key or FirebaseAuthConfig.api_key
        self.base_url = base_url.rstrip("/")
        self._client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(FirebaseAuthConfig.request_timeout_seconds)
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def sign_up(self, email: str, password: str) -> dict[str, Any]:
        """Create an email/password account and return the signed-in account payload."""
        return await self._post("accounts:signUp", email, password)

    async def sign_in_with_password(self, email: str, password: str) -> dict[str, Any]:
        """Sign in with an email/password account and return the account payload."""
        return await self._post("accounts:signInWithPassword", email, password)

    async def _post(self, endpoint: str, email: str, password: str) -> dict[str, Any]:
        if not self.api_key:
            raise AuthError("CONFIGURATION_NOT_FOUND", "FIREBASE_API_KEY is not set")

        try:
            response = await self._client.post(
                f"{self.base_url}/{endpoint}",
                params={"key": self.api_key},
                json={"email": email, "password": password, "returnSecureToken": True},
            )
        except httpx.HTTPError as e:
            logger.error("Error calling identity toolkit %s: %s", endpoint, e)
            raise AuthError("NETWORK_ERROR") from e

        if response.is_success:
            return response.json()

        # error messages look like "WEAK_PASSWORD : Password should be at least 6 characters"
        try:
            message = response.json().get("error", {}).get("message", "")
        except ValueError:
            message = ""
        code = message.split(" : ")[0] or f"HTTP_{response.status_code}"
        logger.warning("Identity toolkit %s rejected request: %s", endpoint, code)
        raise AuthError(code, message or None)
