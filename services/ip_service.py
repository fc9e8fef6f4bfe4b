"""
services/ip_service.py

Responsibility: Determines the IP address a dynamic-DNS update should point
to, from the incoming request.
Does NOT: parse DNS records, interact with DNS providers, or read config.
"""

from __future__ import annotations

import logging

from fastapi import Request

from exceptions import MissingIpError

logger = logging.getLogger(__name__)


class IpService:
    """
    Resolves the caller's public IP for "update to my address" requests.

    Reverse-proxy headers win over the socket peer: X-Real-IP first, then
    the left-most X-Forwarded-For entry.
    """

    def client_ip(self, request: Request) -> str:
        """
        Returns the caller's IP address as a plain string.

        Args:
            request: The incoming FastAPI request.

        Raises:
            MissingIpError: If neither proxy headers nor the peer address are available.
        """
        real_ip = request.headers.get("x-real-ip", "").strip()
        if real_ip:
            logger.debug("Client IP from X-Real-IP: %s", real_ip)
            return real_ip

        forwarded = request.headers.get("x-forwarded-for", "")
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            logger.debug("Client IP from X-Forwarded-For: %s", first_hop)
            return first_hop

        if request.client and request.client.host:
            return request.client.host

        raise MissingIpError("Missing Update IP Address")
