"""
Authentication gate backed by Auth0.

Implements the OpenID Connect authorization-code flow against an Auth0
tenant. The signed-in user lives in the Starlette session cookie
(``request.session["user"]``); nothing is stored server-side.

When ``AUTH_ENABLED=false`` every request is treated as a fixed local user,
which is convenient for local development.
"""

import logging
import secrets
from typing import Annotated, Any
from urllib.parse import urlencode

import httpx
from fastapi import Depends, Request

from ..core.config import Settings, get_settings
from ..core.http import BaseApiClient
from .errors import AuthenticationRequiredError

logger = logging.getLogger(__name__)

SESSION_USER_KEY = "user"
SESSION_STATE_KEY = "oauth_state"
SESSION_RETURN_TO_KEY = "return_to"

LOCAL_USER: dict[str, Any] = {"sub": "local", "name": "Local User", "email": None, "picture": None}


class LoginRequired(Exception):
    """Raised by page routes when no user is signed in; handled as a redirect."""

    def __init__(self, return_to: str = "/dashboard"):
        super().__init__(return_to)
        self.return_to = return_to


def safe_return_to(value: str | None, default: str = "/dashboard") -> str:
    """Only allow local absolute paths as post-login redirect targets."""
    if not value or not value.startswith("/") or value.startswith("//"):
        return default
    return value


class Auth0Client(BaseApiClient):
    """Auth0 authorization server client."""

    SERVICE_NAME = "Auth0"

    def __init__(
        self,
        domain: str,
        client_id: str,
        client_secret: str,
        *,
        scope: str = "openid profile email",
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(
            base_url=f"https://{domain}",
            requests_per_minute=120,
            max_retries=2,
            transport=transport,
        )
        self.client_id = client_id
        self.client_secret = client_secret
        self.scope = scope

    @classmethod
    def from_settings(cls, settings: Settings) -> "Auth0Client":
        if not (settings.auth0_domain and settings.auth0_client_id and settings.auth0_client_secret):
            raise RuntimeError(
                "AUTH0_DOMAIN, AUTH0_CLIENT_ID and AUTH0_CLIENT_SECRET must be set "
                "(or set AUTH_ENABLED=false)"
            )
        return cls(
            settings.auth0_domain,
            settings.auth0_client_id,
            settings.auth0_client_secret,
            scope=settings.auth0_scope,
        )

    def authorize_url(self, redirect_uri: str, state: str) -> str:
        query = urlencode(
            {
                "response_type": "code",
                "client_id": self.client_id,
                "redirect_uri": redirect_uri,
                "scope": self.scope,
                "state": state,
            }
        )
        return f"{self.base_url}/authorize?{query}"

    def logout_url(self, return_to: str) -> str:
        query = urlencode({"client_id": self.client_id, "returnTo": return_to})
        return f"{self.base_url}/v2/logout?{query}"

    async def exchange_code(self, code: str, redirect_uri: str) -> dict[str, Any]:
        """Trade an authorization code for tokens."""
        return await self._post(
            "/oauth/token",
            json={
                "grant_type": "authorization_code",
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "code": code,
                "redirect_uri": redirect_uri,
            },
        )

    async def get_userinfo(self, access_token: str) -> dict[str, Any]:
        return await self._get("/userinfo", headers={"Authorization": f"Bearer {access_token}"})


def new_state() -> str:
    return secrets.token_urlsafe(32)


# =============================================================================
# Dependencies
# =============================================================================


def get_current_user(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)],
) -> dict[str, Any] | None:
    """Return the signed-in user, or None."""
    if not settings.auth_enabled:
        return LOCAL_USER
    return request.session.get(SESSION_USER_KEY)


CurrentUser = Annotated[dict[str, Any] | None, Depends(get_current_user)]


def require_page_user(request: Request, user: CurrentUser) -> dict[str, Any]:
    """Page dependency: redirect anonymous visitors to the login flow."""
    if user is None:
        raise LoginRequired(return_to=request.url.path)
    return user


def require_api_user(user: CurrentUser) -> dict[str, Any]:
    """API dependency: reject anonymous callers with a 401 error envelope."""
    if user is None:
        raise AuthenticationRequiredError()
    return user


PageUser = Annotated[dict[str, Any], Depends(require_page_user)]
ApiUser = Annotated[dict[str, Any], Depends(require_api_user)]
