"""
Authentication route handlers.

Login issues a signed session token (returned in the body and as an
HttpOnly cookie); verify-token resolves a token back to its user.
"""

from typing import TYPE_CHECKING, Any, Dict

from ..utils.api_types import SESSION_COOKIE, Request
from ..utils.auth import issue_session_token
from ..utils.errors import AppError, ErrorCode
from ..utils.logging import get_logger
from ..utils.responses import ApiResult, build_user_response

if TYPE_CHECKING:
    from ..app import Application

logger = get_logger(__name__)


def _session_cookie(app: "Application", token: str, max_age: int) -> str:
    secure = "" if app.settings.environment == "local" else "; Secure"
    return f"{SESSION_COOKIE}={token}; Path=/; Max-Age={max_age}; HttpOnly; SameSite=Lax{secure}"


def _text(data: Dict[str, Any], field: str) -> str:
    value = data.get(field)
    return value.strip() if isinstance(value, str) else ""


def login(request: Request, app: "Application") -> ApiResult:
    """
    POST /api/auth/login

    Empty email or password is rejected with 400 before the credentials
    provider is consulted.
    """
    body = request.json()
    email = _text(body, "email").lower()
    password = body.get("password") if isinstance(body.get("password"), str) else ""

    if not email or not password:
        raise AppError(ErrorCode.INVALID_INPUT, "Email and password are required")

    logger.info("Login attempt", email=email, provider=app.credentials.name)
    user = app.credentials.authenticate(email, password)

    token = issue_session_token(
        app.settings, str(user["id"]), str(user.get("email", email)), str(user.get("role", ""))
    )
    logger.info("Login succeeded", userId=user["id"], role=user.get("role"))

    result = ApiResult.ok(
        {"user": build_user_response(user), "token": token}, "Login successful"
    )
    result.headers["Set-Cookie"] = _session_cookie(app, token, app.settings.session_ttl_seconds)
    return result


def logout(request: Request, app: "Application") -> ApiResult:
    """POST /api/auth/logout - drop the session cookie."""
    result = ApiResult.ok(message="Signed out")
    result.headers["Set-Cookie"] = _session_cookie(app, "", 0)
    return result


def verify_token(request: Request, app: "Application") -> ApiResult:
    """POST /api/auth/verify-token - Bearer header or session cookie."""
    claims = app.session(request)
    if claims is None:
        raise AppError(ErrorCode.UNAUTHORIZED, "Token not provided")

    user = app.credentials.resolve(claims)
    return ApiResult.ok(
        {
            "user": build_user_response(user),
            "session": {"role": claims.role, "expiresAt": claims.exp},
        },
        "Token is valid",
    )


def get_user_by_email(request: Request, app: "Application") -> ApiResult:
    """
    POST /api/auth/get-user

    A missing user is a normal outcome here: 200 with success false.
    """
    email = _text(request.json(), "email")
    if not email:
        raise AppError(ErrorCode.INVALID_INPUT, "Email is required")

    user = app.users.find_by_email(email)
    if user is None:
        logger.info("User lookup found nothing", email=email)
        return ApiResult.failure("User not found", 200)
    return ApiResult.ok({"user": build_user_response(user)})


ROUTES = [
    ("POST", "/api/auth/login", login),
    ("POST", "/api/auth/logout", logout),
    ("POST", "/api/auth/verify-token", verify_token),
    ("POST", "/api/auth/get-user", get_user_by_email),
]
