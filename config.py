"""
config.py

Responsibility: Loads process configuration from environment variables into
an immutable Settings object, once at startup.
Does NOT: construct providers, open network connections, or configure logging.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass

from exceptions import ConfigError

logger = logging.getLogger(__name__)

PROVIDERS = ("cloudflare", "route53")

_DEFAULT_LISTEN = "0.0.0.0:8080"


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration. Never mutated after load_settings()."""

    provider: str
    domain_name: str
    salt: str = ""
    host: str = "0.0.0.0"
    port: int = 8080
    auth_username: str | None = None
    auth_password: str | None = None
    cloudflare_zone_id: str = ""
    cloudflare_api_key: str = ""
    cloudflare_email: str | None = None
    route53_hosted_zone_id: str = ""
    aws_region: str = "us-east-1"
    http_timeout: float = 30.0
    log_level: str = "INFO"

    @property
    def has_credentials(self) -> bool:
        return bool(self.auth_username) and bool(self.auth_password)


def _optional(environ: Mapping[str, str], key: str) -> str | None:
    value = environ.get(key, "").strip()
    return value or None


def _required(environ: Mapping[str, str], key: str) -> str:
    value = _optional(environ, key)
    if value is None:
        raise ConfigError(f"Env Error: {key} is not set")
    return value


def _parse_listen(listen: str) -> tuple[str, int]:
    host, sep, port = listen.rpartition(":")
    if not sep or not host:
        raise ConfigError(f"Socket Error: LISTEN must be host:port, got {listen!r}")
    try:
        return host.strip("[]"), int(port)
    except ValueError as exc:
        raise ConfigError(f"Socket Error: invalid port in LISTEN {listen!r}") from exc


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """
    Builds Settings from the environment.

    Args:
        environ: Mapping to read from; defaults to os.environ.

    Returns:
        A populated Settings instance.

    Raises:
        ConfigError: If a required variable is missing or a value is malformed.
    """
    env = os.environ if environ is None else environ

    provider = (_optional(env, "DNS_PROVIDER") or "cloudflare").lower()
    if provider not in PROVIDERS:
        raise ConfigError(f"DNS_PROVIDER must be one of {', '.join(PROVIDERS)}, got {provider!r}")

    host, port = _parse_listen(_optional(env, "LISTEN") or _DEFAULT_LISTEN)

    try:
        http_timeout = float(_optional(env, "HTTP_TIMEOUT") or 30)
    except ValueError as exc:
        raise ConfigError(f"HTTP_TIMEOUT must be a number: {exc}") from exc

    settings = Settings(
        provider=provider,
        domain_name=_required(env, "DOMAIN_NAME"),
        salt=env.get("SALT", ""),
        host=host,
        port=port,
        auth_username=_optional(env, "BASIC_AUTH_USERNAME"),
        auth_password=_optional(env, "BASIC_AUTH_PASSWORD"),
        cloudflare_email=_optional(env, "CLOUDFLARE_EMAIL"),
        aws_region=_optional(env, "AWS_REGION") or "us-east-1",
        http_timeout=http_timeout,
        log_level=(_optional(env, "LOG_LEVEL") or "INFO").upper(),
        cloudflare_zone_id=_required(env, "CLOUDFLARE_ZONE_ID") if provider == "cloudflare" else "",
        cloudflare_api_key=_required(env, "CLOUDFLARE_API_KEY") if provider == "cloudflare" else "",
        route53_hosted_zone_id=_required(env, "ROUTE53_HOSTED_ZONE_ID") if provider == "route53" else "",
    )

    if not settings.salt:
        logger.warning("SALT is empty; record ids are plain MD5 hashes of the domain.")
    return settings
