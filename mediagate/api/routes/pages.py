"""HTML shells for the page paths the interceptor redirects between. UI rendering lives elsewhere."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from sqlalchemy.orm import Session

from mediagate.core.config import settings
from mediagate.core.database import get_db
from mediagate.services.session import resolve_claims

router = APIRouter(include_in_schema=False)

_SHELL = """<!doctype html>
<html lang="en">
<head><meta charset="utf-8"><title>{title}</title></head>
<body data-page="{page}"><div id="root"></div></body>
</html>
"""


def _shell(page: str, title: str) -> HTMLResponse:
    return HTMLResponse(_SHELL.format(page=page, title=title))


@router.get("/login", response_class=HTMLResponse)
def login_page() -> HTMLResponse:
    return _shell("login", "Sign in")


@router.get("/", response_class=HTMLResponse)
def home_page() -> HTMLResponse:
    return _shell("home", "Home")


@router.get("/admin", response_class=HTMLResponse)
def admin_page(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
) -> Response:
    """
    Admin page. The role is re-read from the stored user: a deleted account goes
    to /login and a demoted one to /, whatever the token still claims.
    """
    user = resolve_claims(db, getattr(request.state, "session", None))
    if user is None:
        response = RedirectResponse("/login", status_code=status.HTTP_307_TEMPORARY_REDIRECT)
        response.delete_cookie(settings.COOKIE_NAME, path="/")
        return response
    if not user.is_admin:
        return RedirectResponse("/", status_code=status.HTTP_307_TEMPORARY_REDIRECT)
    return _shell("admin", "User management")
