# main.py

"""FastAPI application for guest menu browsing, carts and checkout."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import Settings, get_settings

from .db import create_all, get_engine, get_sessionmaker
from .domain.errors import (
    OrderWriteError,
    PartialOrderError,
    StorefrontError,
    TenantNotResolvedError,
    ValidationError,
)
from .middlewares import RequestIdMiddleware
from .obs.logging import configure_logging
from .repos_sqlalchemy.tenants_repo_sql import TenantsRepoSQL
from .routes_cart import router as cart_router
from .routes_guest_menu import router as menu_router
from .routes_guest_order import router as order_router
from .services.catalog import CatalogService
from .services.checkout import CheckoutSubmitter
from .services.notifications import SheetsNotifier
from .storage import KeyValueStorage, RedisStorage, TTLCache, build_storage
from .tenancy.resolver import TenantIdentity, TenantResolver
from .utils.responses import err, err_from

logger = logging.getLogger("storefront")

ERROR_STATUS: list[tuple[type[StorefrontError], int]] = [
    (ValidationError, 422),
    (TenantNotResolvedError, 404),
    (OrderWriteError, 503),
    (PartialOrderError, 500),
]


def status_for(exc: StorefrontError) -> int:
    for cls, status in ERROR_STATUS:
        if isinstance(exc, cls):
            return status
    return 500


def create_app(
    settings: Settings | None = None,
    *,
    sessionmaker: async_sessionmaker[AsyncSession] | None = None,
    storage: KeyValueStorage | None = None,
    notifier: SheetsNotifier | None = None,
) -> FastAPI:
    """Build the application.

    Collaborators default to the configured database, storage backend and
    webhook; tests pass their own.
    """

    settings = settings or get_settings()
    owns_engine = sessionmaker is None
    owns_storage = storage is None

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if owns_engine:
            await create_all(get_engine())
        yield
        if owns_engine:
            await get_engine().dispose()
        if owns_storage and isinstance(app.state.storage, RedisStorage):
            await app.state.storage.close()

    app = FastAPI(title="storefront", lifespan=lifespan)
    app.add_middleware(RequestIdMiddleware)

    app.state.settings = settings
    app.state.sessionmaker = sessionmaker or get_sessionmaker()
    app.state.storage = storage if storage is not None else build_storage(settings)

    tenants = TenantsRepoSQL()

    async def _lookup(slug: str) -> TenantIdentity | None:
        async with app.state.sessionmaker() as session:
            return await tenants.get_by_slug(session, slug)

    app.state.resolver = TenantResolver(
        _lookup,
        TTLCache(app.state.storage, settings.tenant_cache_ttl_secs, namespace="tenant"),
        min_length=settings.slug_min_length,
        max_length=settings.slug_max_length,
    )
    app.state.catalog = CatalogService(
        TTLCache(app.state.storage, settings.menu_cache_ttl_secs, namespace="catalog")
    )
    app.state.checkout = CheckoutSubmitter(
        app.state.catalog,
        notifier=notifier
        or SheetsNotifier(
            settings.sheets_webhook_url,
            secret=settings.sheets_webhook_secret,
            timeout=settings.webhook_timeout_secs,
        ),
        country_code=settings.phone_country_code,
        order_code_prefix=settings.order_code_prefix,
    )

    @app.exception_handler(StorefrontError)
    async def storefront_error_handler(request: Request, exc: StorefrontError):
        status = status_for(exc)
        log = logger.error if status >= 500 else logger.warning
        log("%s %s on %s", exc.code, exc.message, request.url.path)
        return JSONResponse(err_from(exc), status_code=status)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        logger.warning("%s on %s", exc.detail, request.url.path)
        return JSONResponse(err(exc.status_code, exc.detail), status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def general_error_handler(request: Request, exc: Exception):
        logger.exception("unhandled_error on %s", request.url.path)
        return JSONResponse(err(500, "Internal Server Error"), status_code=500)

    @app.get("/healthz")
    async def healthz() -> dict:
        return {"ok": True}

    app.include_router(menu_router)
    app.include_router(cart_router)
    app.include_router(order_router)
    return app


configure_logging(get_settings().log_level)
app = create_app()
