"""
JSON error envelope for the API and auth routes.

Every error raised through APIError renders as:

    {"error": {"code": "EXTERNAL_API_ERROR", "message": "...", "detail": "..."}}

``detail`` is omitted when there is nothing to add. HTML pages do not use
this; they render error.html instead.
"""

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse


class APIError(HTTPException):
    """HTTPException carrying a machine-readable code."""

    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        detail: str | None = None,
        headers: dict[str, str] | None = None,
    ):
        self.code = code
        self.message = message
        self.error_detail = detail
        super().__init__(status_code=status_code, detail=message, headers=headers)

    def to_content(self) -> dict:
        error = {"code": self.code, "message": self.message}
        if self.error_detail:
            error["detail"] = self.error_detail
        return {"error": error}


class ValidationError(APIError):
    """Bad request, e.g. a login callback with a forged state (400)."""

    def __init__(self, message: str, detail: str | None = None):
        super().__init__(400, "VALIDATION_ERROR", message, detail)


class AuthenticationRequiredError(APIError):
    """API call without a signed-in user (401)."""

    def __init__(self):
        super().__init__(401, "UNAUTHENTICATED", "Authentication required", "Sign in at /auth/login")


class ExternalServiceError(APIError):
    """BallDontLie or Auth0 failed (502)."""

    def __init__(self, service: str, message: str, status_code: int = 502):
        super().__init__(status_code, "EXTERNAL_API_ERROR", message, f"Error from {service} API")


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_content(), headers=exc.headers)
