"""
dependencies.py

Responsibility: Declares all FastAPI Depends() provider functions for
settings, the DNS provider, services and the basic-auth guard, plus the
shared check for caller-supplied IP addresses.
Does NOT: contain business logic, HTTP handlers, or provider construction.
"""

from __future__ import annotations

import ipaddress
import logging
import secrets

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from config import Settings
from providers.dns_provider import DNSProvider
from services.ip_service import IpService
from services.record_service import RecordService

logger = logging.getLogger(__name__)

_basic = HTTPBasic(auto_error=False, realm="dyn-dns requires auth")

# ---------------------------------------------------------------------------
# Infrastructure: shared app-level resources
# ---------------------------------------------------------------------------


def get_settings(request: Request) -> Settings:
    """
    Returns the Settings loaded once during the FastAPI lifespan.

    Args:
        request: The current FastAPI Request (injected automatically).
    """
    return request.app.state.settings


def get_dns_provider(request: Request) -> DNSProvider:
    """
    Returns the single DNSProvider adapter stored on app.state.

    The adapter holds only immutable configuration, so every request shares it.

    Args:
        request: The current FastAPI Request (injected automatically).
    """
    return request.app.state.dns_provider


# ---------------------------------------------------------------------------
# Service providers
# ---------------------------------------------------------------------------


def get_record_service(
    dns_provider: DNSProvider = Depends(get_dns_provider),
    settings: Settings = Depends(get_settings),
) -> RecordService:
    """
    Provides a RecordService bound to the active provider and the process salt.

    Args:
        dns_provider: The active DNSProvider implementation.
        settings: Supplies the salt.

    Returns:
        A RecordService instance.
    """
    return RecordService(dns_provider, settings.salt)


def get_ip_service() -> IpService:
    return IpService()


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------


def verify_credentials(
    credentials: HTTPBasicCredentials | None = Depends(_basic),
    settings: Settings = Depends(get_settings),
) -> None:
    """
    Enforces HTTP basic auth when both a username and a password are configured.

    Raises:
        HTTPException: 401 with a WWW-Authenticate challenge on bad or missing credentials.
    """
    if not settings.has_credentials:
        return

    if credentials is not None:
        user_ok = secrets.compare_digest(
            credentials.username.encode("utf-8"), settings.auth_username.encode("utf-8")
        )
        password_ok = secrets.compare_digest(
            credentials.password.encode("utf-8"), settings.auth_password.encode("utf-8")
        )
        if user_ok and password_ok:
            return

    logger.warning("Rejected request with invalid basic-auth credentials.")
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized",
        headers={"WWW-Authenticate": 'Basic realm="dyn-dns requires auth"'},
    )


# ---------------------------------------------------------------------------
# Request validation
# ---------------------------------------------------------------------------


def validate_ip(ip: str) -> str:
    """
    Parses a caller-supplied IP address into its canonical text form.

    Raises:
        HTTPException: 422 if ip is not an IPv4 or IPv6 address.
    """
    try:
        return str(ipaddress.ip_address(ip))
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"{ip!r} is not a valid IP address",
        ) from None
