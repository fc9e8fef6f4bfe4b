"""
routes/domain_routes.py

Responsibility: JSON endpoints under /api/domains for listing, creating,
updating and deleting managed records.
Does NOT: talk to a DNS backend directly or translate provider errors;
exception handlers registered in app.py do that.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from pydantic import BaseModel, Field

from dependencies import get_ip_service, get_record_service, validate_ip, verify_credentials
from providers.dns_provider import DEFAULT_TTL, SUPPORTED_RECORD_TYPES
from services.ip_service import IpService
from services.record_service import RecordService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/domains", dependencies=[Depends(verify_credentials)])


class CreateRecordRequest(BaseModel):
    """Body of POST /api/domains. value defaults to the caller's IP."""

    domain: str = Field(min_length=1)
    value: str | None = None
    record_type: str = "A"
    ttl: int = Field(default=DEFAULT_TTL, ge=0)


@router.get("")
async def list_domains(
    record_service: RecordService = Depends(get_record_service),
) -> list[dict[str, Any]]:
    """
    Returns every managed record as a display record.

    Args:
        record_service: Lists through the active provider.

    Returns:
        A list of {id, domain, record_type, value, ttl} dicts.
    """
    records = await record_service.list_records()
    return [record.to_dict() for record in records]


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_domain(
    request: Request,
    body: CreateRecordRequest,
    record_service: RecordService = Depends(get_record_service),
    ip_service: IpService = Depends(get_ip_service),
) -> dict[str, Any]:
    """
    Creates a record (or replaces the existing one for the same domain).

    Args:
        request: The incoming FastAPI request; used for the caller IP.
        body: Domain, optional value, type and ttl.
        record_service: Writes through the active provider.
        ip_service: Resolves the caller IP when no value is given.

    Returns:
        The written record as a display dict.
    """
    record_type = body.record_type.upper()
    if record_type not in SUPPORTED_RECORD_TYPES:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unsupported record type {body.record_type!r}",
        )

    value = body.value or ip_service.client_ip(request)
    record = await record_service.create(body.domain, value, record_type=record_type, ttl=body.ttl)
    return record.to_dict()


@router.patch("/{record_id}")
async def update_with_peer_address(
    request: Request,
    record_id: str,
    record_service: RecordService = Depends(get_record_service),
    ip_service: IpService = Depends(get_ip_service),
) -> dict[str, Any]:
    """Points the record at the caller's own IP address."""
    ip = ip_service.client_ip(request)
    record = await record_service.update_ip(record_id, ip)
    return record.to_dict()


@router.patch("/{record_id}/{ip}")
async def update_user_supplied(
    record_id: str,
    ip: str,
    record_service: RecordService = Depends(get_record_service),
) -> dict[str, Any]:
    """Points the record at an explicit IPv4 or IPv6 address."""
    record = await record_service.update_ip(record_id, validate_ip(ip))
    return record.to_dict()


@router.delete("/{id_or_domain}", status_code=status.HTTP_204_NO_CONTENT)
async def destroy(
    id_or_domain: str,
    record_service: RecordService = Depends(get_record_service),
) -> Response:
    """Deletes the record matching an opaque id or a literal domain name."""
    await record_service.delete(id_or_domain)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
