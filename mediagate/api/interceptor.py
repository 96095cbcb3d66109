"""
Route interceptor: authentication gate that runs before every handler.

Precedence per request:
1. Public allow-list and static assets pass untouched.
2. No session cookie: 401 JSON for API paths, redirect to /login for pages.
3. Invalid or expired token: same as (2); page redirects also delete the cookie.
4. Admin namespace without the admin claim: 403 JSON for API paths, redirect to / for pages.
5. Otherwise the verified claims are stored on ``request.state.session`` and the
   request proceeds.
"""

import enum
import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse, RedirectResponse, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from mediagate.core.config import Settings, get_settings
from mediagate.core.security import TokenClaims, verify_token

logger = logging.getLogger(__name__)

LOGIN_PAGE = "/login"
ROOT_PAGE = "/"
STATIC_PREFIXES = ("/static", "/favicon")


class RouteClass(enum.Enum):
    PUBLIC = "public"
    AUTHENTICATED = "authenticated"
    ADMIN = "admin"


def is_api_path(path: str, api_prefix: str) -> bool:
    return path == api_prefix or path.startswith(api_prefix + "/")


def classify_path(path: str, api_prefix: str = "/api") -> RouteClass:
    """Classify a request path into public, session-only or admin-only."""
    public_prefixes = (LOGIN_PAGE, f"{api_prefix}/auth/login")
    if path.startswith(public_prefixes):
        return RouteClass.PUBLIC
    # Anything with a dot is treated as an asset file.
    if path.startswith(STATIC_PREFIXES) or "." in path:
        return RouteClass.PUBLIC
    if path.startswith(("/admin", f"{api_prefix}/admin")):
        return RouteClass.ADMIN
    return RouteClass.AUTHENTICATED


def _unauthenticated(path: str, cfg: Settings, clear_cookie: bool) -> Response:
    if is_api_path(path, cfg.API_PREFIX):
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"detail": "Not authenticated"},
        )
    response = RedirectResponse(LOGIN_PAGE, status_code=status.HTTP_307_TEMPORARY_REDIRECT)
    if clear_cookie:
        response.delete_cookie(cfg.COOKIE_NAME, path="/")
    return response


def _forbidden(path: str, cfg: Settings) -> Response:
    if is_api_path(path, cfg.API_PREFIX):
        return JSONResponse(
            status_code=status.HTTP_403_FORBIDDEN,
            content={"detail": "Admin access required"},
        )
    return RedirectResponse(ROOT_PAGE, status_code=status.HTTP_307_TEMPORARY_REDIRECT)


class RouteInterceptorMiddleware(BaseHTTPMiddleware):
    """Reject unauthenticated or unauthorized requests before routing."""

    def __init__(self, app: ASGIApp, settings: Settings | None = None) -> None:
        super().__init__(app)
        self.settings = settings or get_settings()

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        path = request.url.path
        route_class = classify_path(path, self.settings.API_PREFIX)
        if route_class is RouteClass.PUBLIC:
            return await call_next(request)

        token = request.cookies.get(self.settings.COOKIE_NAME)
        if not token:
            logger.info("Rejected %s %s: no session cookie", request.method, path)
            return _unauthenticated(path, self.settings, clear_cookie=False)

        claims: TokenClaims | None = verify_token(token)
        if claims is None:
            logger.info("Rejected %s %s: invalid session token", request.method, path)
            return _unauthenticated(path, self.settings, clear_cookie=True)

        if route_class is RouteClass.ADMIN and not claims.is_admin:
            logger.info(
                "Rejected %s %s: user id=%s lacks admin role",
                request.method,
                path,
                claims.user_id,
            )
            return _forbidden(path, self.settings)

        request.state.session = claims
        return await call_next(request)
