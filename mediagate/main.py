"""FastAPI application entrypoint. No business logic; only wiring and middleware."""

from dotenv import load_dotenv

load_dotenv()

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from mediagate.api.errors import install_exception_handlers
from mediagate.api.interceptor import RouteInterceptorMiddleware
from mediagate.api.routes import router as api_router
from mediagate.api.routes.pages import router as pages_router
from mediagate.core.config import settings
from mediagate.core.database import SessionLocal, check_db_connected
from mediagate.core.logging import configure_logging

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


class RequestLogMiddleware(BaseHTTPMiddleware):
    """Log method, path, client IP, response status and latency (ms). Bodies are never logged."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        client_ip = request.client.host if request.client else "unknown"
        logger.info(
            "%s %s | client=%s status=%d latency=%.1fms",
            request.method,
            request.url.path,
            client_ip,
            response.status_code,
            elapsed_ms,
        )
        return response


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    if settings.using_default_secret:
        logger.warning("AUTH_SECRET is not set; using the insecure default signing secret")
    db = SessionLocal()
    try:
        if not check_db_connected(db):
            logger.error("Credential store is not reachable at startup")
    finally:
        db.close()
    logger.info("mediagate starting (env=%s)", settings.APP_ENV)
    yield
    logger.info("mediagate shutting down")


app = FastAPI(
    title="mediagate",
    version="0.1.0",
    docs_url="/docs",
    redoc_url=None,
    lifespan=lifespan,
)

# Added first so it sits inside the request logger and rejected requests are logged too.
app.add_middleware(RouteInterceptorMiddleware, settings=settings)
app.add_middleware(RequestLogMiddleware)

install_exception_handlers(app)

app.include_router(api_router, prefix=settings.API_PREFIX)
app.include_router(pages_router)
