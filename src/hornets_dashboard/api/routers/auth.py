"""
Auth router - Auth0 login, callback and logout.

Endpoints:
- GET /login    - Start the authorization-code flow
- GET /callback - Finish it and store the user in the session
- GET /logout   - Clear the session and sign out of Auth0
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import RedirectResponse

from ...core.config import Settings, get_settings
from ...core.http import ExternalAPIError
from ..auth import (
    SESSION_RETURN_TO_KEY,
    SESSION_STATE_KEY,
    SESSION_USER_KEY,
    new_state,
    safe_return_to,
)
from ..dependencies import AuthClientDependency
from ..errors import ExternalServiceError, ValidationError

logger = logging.getLogger(__name__)

router = APIRouter()

SettingsDependency = Annotated[Settings, Depends(get_settings)]


@router.get("/login")
async def login(
    request: Request,
    auth: AuthClientDependency,
    settings: SettingsDependency,
    return_to: Annotated[str | None, Query(alias="returnTo")] = None,
) -> RedirectResponse:
    target = safe_return_to(return_to)
    if auth is None:
        return RedirectResponse(target, status_code=302)

    state = new_state()
    request.session[SESSION_STATE_KEY] = state
    request.session[SESSION_RETURN_TO_KEY] = target
    return RedirectResponse(auth.authorize_url(settings.auth_callback_url, state), status_code=302)


@router.get("/callback")
async def callback(
    request: Request,
    auth: AuthClientDependency,
    settings: SettingsDependency,
    code: str | None = None,
    state: str | None = None,
    error: str | None = None,
    error_description: str | None = None,
) -> RedirectResponse:
    if auth is None:
        return RedirectResponse("/dashboard", status_code=302)

    if error:
        logger.warning(f"Auth0 returned an error: {error} ({error_description})")
        raise ValidationError("Login failed", detail=error_description or error)

    expected_state = request.session.pop(SESSION_STATE_KEY, None)
    if not code or not state or state != expected_state:
        raise ValidationError("Invalid login callback", detail="Missing code or state mismatch")

    try:
        tokens = await auth.exchange_code(code, settings.auth_callback_url)
        userinfo = await auth.get_userinfo(tokens["access_token"])
    except (ExternalAPIError, KeyError) as e:
        logger.error(f"Auth0 code exchange failed: {e}")
        raise ExternalServiceError("Auth0", "Login failed") from e

    request.session[SESSION_USER_KEY] = {
        "sub": userinfo.get("sub"),
        "name": userinfo.get("name") or userinfo.get("nickname"),
        "email": userinfo.get("email"),
        "picture": userinfo.get("picture"),
    }
    target = safe_return_to(request.session.pop(SESSION_RETURN_TO_KEY, None))
    logger.info(f"User {userinfo.get('sub')} signed in")
    return RedirectResponse(target, status_code=302)


@router.get("/logout")
async def logout(
    request: Request,
    auth: AuthClientDependency,
    settings: SettingsDependency,
    return_to: Annotated[str | None, Query(alias="returnTo")] = None,
) -> RedirectResponse:
    target = safe_return_to(return_to, default="/")
    request.session.clear()
    if auth is None:
        return RedirectResponse(target, status_code=302)
    return RedirectResponse(
        auth.logout_url(f"{settings.base_url.rstrip('/')}{target}"),
        status_code=302,
    )
