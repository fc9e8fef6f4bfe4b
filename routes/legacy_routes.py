"""
routes/legacy_routes.py

Responsibility: Root-level endpoints kept for existing router and script
integrations: the plain-text "what is my IP" probe, the update.php style
updater and the health check.
Does NOT: enforce basic auth; these paths have never required it.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import PlainTextResponse

from dependencies import get_ip_service, get_record_service, validate_ip
from exceptions import MissingIpError
from services.ip_service import IpService
from services.record_service import RecordService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_class=PlainTextResponse)
async def whoami(
    request: Request,
    ip_service: IpService = Depends(get_ip_service),
) -> str:
    """Returns the caller's IP as plain text (empty when unknown)."""
    try:
        return ip_service.client_ip(request)
    except MissingIpError:
        return ""


@router.get("/update.php")
@router.patch("/")
async def update(
    request: Request,
    domain: str = Query(..., min_length=1, description="Opaque record id or domain name"),
    ip: str | None = Query(default=None),
    record_service: RecordService = Depends(get_record_service),
    ip_service: IpService = Depends(get_ip_service),
) -> dict[str, Any]:
    """
    Updates a record by opaque id or domain name.

    Args:
        request: The incoming FastAPI request; used for the caller IP.
        domain: The record's opaque id or its domain name.
        ip: New value; defaults to the caller's IP.
        record_service: Writes through the active provider.
        ip_service: Resolves the caller IP.

    Returns:
        The written record as a display dict.
    """
    target_ip = validate_ip(ip) if ip else ip_service.client_ip(request)
    record = await record_service.update_by_id_or_domain(domain, target_ip)
    return record.to_dict()


@router.get("/health")
async def health() -> dict:
    """
    Returns application health as a JSON response.

    Returns:
        A dict with a "status" key set to "ok".
    """
    return {"status": "ok"}
