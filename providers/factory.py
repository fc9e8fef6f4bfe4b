"""
providers/factory.py

Responsibility: Builds the single DNSProvider adapter selected by configuration.
Does NOT: manage the lifetime of the shared HTTP client.
"""

from __future__ import annotations

import logging

import boto3
import httpx
from botocore.config import Config

from config import Settings
from exceptions import ConfigError
from providers.cloudflare_client import CloudflareClient
from providers.dns_provider import DNSProvider
from providers.route53_client import Route53Client

logger = logging.getLogger(__name__)


def build_route53_sdk_client(settings: Settings):
    """
    Creates the boto3 Route53 client owned by the Route53 adapter.

    Credentials come from the standard AWS chain (env, profile, instance
    role). SDK retries are disabled; a failed call surfaces to the caller.
    """
    config = Config(
        retries={"max_attempts": 1, "mode": "standard"},
        connect_timeout=settings.http_timeout,
        read_timeout=settings.http_timeout,
    )
    return boto3.client("route53", region_name=settings.aws_region, config=config)


def build_dns_provider(settings: Settings, http_client: httpx.AsyncClient) -> DNSProvider:
    """
    Returns the adapter for settings.provider.

    Args:
        settings: Loaded process configuration.
        http_client: Shared async client used by the Cloudflare adapter.

    Raises:
        ConfigError: If the provider is unknown or the root domain is malformed.
    """
    if settings.provider == "cloudflare":
        provider: DNSProvider = CloudflareClient(
            http_client=http_client,
            api_key=settings.cloudflare_api_key,
            zone_id=settings.cloudflare_zone_id,
            domain_name=settings.domain_name,
            email=settings.cloudflare_email,
        )
    elif settings.provider == "route53":
        provider = Route53Client(
            client=build_route53_sdk_client(settings),
            hosted_zone_id=settings.route53_hosted_zone_id,
            domain_name=settings.domain_name,
        )
    else:
        raise ConfigError(f"Unknown DNS provider {settings.provider!r}")

    logger.info("Using %s provider for %s", settings.provider, provider.domain_name)
    return provider
