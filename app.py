"""
app.py

Responsibility: Builds the FastAPI application: lifespan (settings, shared
HTTP client, DNS provider), routers and the mapping from error kinds to
HTTP statuses.
Does NOT: contain DNS logic or per-request business rules.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from config import Settings, load_settings
from exceptions import (
    ChangeBuildError,
    ConfigError,
    DynDnsError,
    MissingIdentifierError,
    MissingIpError,
    ProviderError,
    RecordNotFoundError,
    UnsupportedActionError,
)
from logger import configure_logging
from providers.dns_provider import DNSProvider
from providers.factory import build_dns_provider
from routes import admin_routes, domain_routes, legacy_routes

logger = logging.getLogger(__name__)

# Most specific first; the first isinstance match wins.
_ERROR_STATUS: tuple[tuple[type[DynDnsError], int], ...] = (
    (RecordNotFoundError, status.HTTP_404_NOT_FOUND),
    (MissingIdentifierError, status.HTTP_400_BAD_REQUEST),
    (UnsupportedActionError, status.HTTP_400_BAD_REQUEST),
    (MissingIpError, status.HTTP_400_BAD_REQUEST),
    (ChangeBuildError, status.HTTP_400_BAD_REQUEST),
    (ProviderError, status.HTTP_502_BAD_GATEWAY),
    (ConfigError, status.HTTP_500_INTERNAL_SERVER_ERROR),
)


async def dyndns_error_handler(request: Request, exc: DynDnsError) -> JSONResponse:
    """
    Maps a DynDnsError to a JSON error response.

    Returns:
        {"error": <exception class name>, "detail": <message>} with the mapped status.
    """
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    for error_type, mapped in _ERROR_STATUS:
        if isinstance(exc, error_type):
            status_code = mapped
            break

    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    else:
        logger.warning("%s %s rejected: %s", request.method, request.url.path, exc)

    return JSONResponse(
        status_code=status_code,
        content={"error": type(exc).__name__, "detail": str(exc)},
    )


def create_app(settings: Settings | None = None, dns_provider: DNSProvider | None = None) -> FastAPI:
    """
    Creates the FastAPI application.

    Args:
        settings: Pre-built settings; loaded from the environment at startup when None.
        dns_provider: Pre-built adapter; built from settings at startup when None.

    Returns:
        A FastAPI instance ready to be served by uvicorn.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        app_settings = settings or load_settings()
        configure_logging(app_settings.log_level)

        async with httpx.AsyncClient(timeout=app_settings.http_timeout) as http_client:
            app.state.settings = app_settings
            app.state.http_client = http_client
            app.state.dns_provider = dns_provider or build_dns_provider(app_settings, http_client)
            logger.info("Dynamic DNS service started for %s", app.state.dns_provider.domain_name)
            yield
            logger.info("Dynamic DNS service stopping.")

    app = FastAPI(title="dyn-dns", lifespan=lifespan)
    app.add_exception_handler(DynDnsError, dyndns_error_handler)
    app.include_router(domain_routes.router)
    app.include_router(admin_routes.router)
    app.include_router(legacy_routes.router)
    return app


app = create_app()


if __name__ == "__main__":
    _settings = load_settings()
    configure_logging(_settings.log_level)
    uvicorn.run(create_app(settings=_settings), host=_settings.host, port=_settings.port)
