"""
exceptions.py

Responsibility: Defines all custom exception classes used across the application.
Does NOT: contain business logic, logging, or HTTP handling.
"""

from __future__ import annotations


class DynDnsError(Exception):
    """Base class for every error raised by the DNS record layer."""


class ConfigError(DynDnsError):
    """
    Raised when process configuration is missing or malformed.

    Most commonly a root domain that does not parse as an absolute domain
    name. Fatal to startup of the affected adapter.
    """


class ProviderError(DynDnsError):
    """
    Base class for failures talking to a DNS provider backend.

    The core never retries; callers map this family to a 502.
    """


class ProviderTransportError(ProviderError):
    """
    Raised when the provider could not be reached at all (DNS resolution,
    TLS, connection reset, timeout).
    """


class ProviderApiError(ProviderError):
    """
    Raised when the provider answered with a non-success status or an
    API-level error payload.

    Carries the HTTP status (when known) and the raw body for diagnosis.
    """

    def __init__(self, message: str, status: int | None = None, body: str = "") -> None:
        super().__init__(message)
        self.status = status
        self.body = body


class ChangeBuildError(DynDnsError):
    """
    Raised when a Route53 change batch cannot be built from a record,
    before anything is submitted to AWS.
    """


class MissingIdentifierError(DynDnsError):
    """Raised when an operation needs a provider-native id the record lacks."""


class RecordNotFoundError(DynDnsError):
    """Raised when an opaque id or domain matches nothing in the current listing."""


class UnsupportedActionError(DynDnsError):
    """Raised when an adapter is asked to perform a change action it does not implement."""


class MissingIpError(DynDnsError):
    """Raised by IpService when the caller's IP address cannot be determined."""
