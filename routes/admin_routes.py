"""
routes/admin_routes.py

Responsibility: Renders the static admin page using Jinja2 templates.
Does NOT: call the DNS provider; the page talks to /api/domains itself.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from dependencies import get_dns_provider, verify_credentials
from providers.dns_provider import DNSProvider
from shared_templates import templates

router = APIRouter(prefix="/api", dependencies=[Depends(verify_credentials)])


@router.get("/admin", response_class=HTMLResponse)
async def admin_index(
    request: Request,
    dns_provider: DNSProvider = Depends(get_dns_provider),
) -> HTMLResponse:
    """Renders the admin page for the managed root domain."""
    return templates.TemplateResponse(
        request,
        "admin.html",
        {"domain_name": dns_provider.domain_name},
    )
