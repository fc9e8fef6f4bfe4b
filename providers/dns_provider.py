"""
providers/dns_provider.py

Responsibility: Defines the provider-agnostic Record / DisplayRecord value
objects, the opaque record-id derivation, root-domain validation and the
DNSProvider base class every backend adapter implements.
Does NOT: make HTTP or SDK calls, read configuration, or know about routes.
"""

from __future__ import annotations

import hashlib
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any

import dns.exception
import dns.name

from exceptions import ConfigError, MissingIdentifierError, RecordNotFoundError

logger = logging.getLogger(__name__)

# Closed set of record types the model round-trips.
SUPPORTED_RECORD_TYPES = frozenset({"A", "AAAA", "CNAME", "MX", "TXT"})

# Record types actively created and listed by the Cloudflare adapter.
MANAGED_RECORD_TYPES = ("A", "CNAME")

DEFAULT_TTL = 60

_LABEL_RE = re.compile(r"^(?!-)[A-Za-z0-9_-]{1,63}(?<!-)$")


# ---------------------------------------------------------------------------
# Opaque identifiers
# ---------------------------------------------------------------------------


def record_id(salt: str, domain: str) -> str:
    """
    Derives the opaque, stable id shown to callers for a domain.

    hex(MD5(salt + domain)). MD5 is an obfuscation fingerprint here, not a
    security primitive: it keeps provider ids out of client hands and is
    stable per (salt, domain), but it is not collision resistant against a
    chosen set of domains. Ids already issued depend on this exact
    construction, so it must not be swapped for another digest.

    Args:
        salt: Process-wide salt from configuration.
        domain: The record's domain name exactly as listed.

    Returns:
        A 32-character lowercase hex string.
    """
    return hashlib.md5(f"{salt}{domain}".encode("utf-8"), usedforsecurity=False).hexdigest()


def normalize_root_domain(domain: str) -> str:
    """
    Validates a managed root domain and returns it in absolute (trailing-dot) form.

    Args:
        domain: Root domain from configuration, with or without trailing dot.

    Returns:
        The absolute, lowercased domain name, e.g. "example.com.".
        Route53 lists names in lowercase and suffix checks are literal.

    Raises:
        ConfigError: If the value is empty or not a well-formed domain name.
    """
    candidate = (domain or "").strip()
    if not candidate:
        raise ConfigError("Domain Parse Error: empty domain name")
    if not candidate.endswith("."):
        candidate = f"{candidate}."

    try:
        name = dns.name.from_text(candidate)
    except dns.exception.DNSException as exc:
        raise ConfigError(f"Domain Parse Error: {domain!r}: {exc}") from exc

    labels = [label.decode("ascii", errors="replace") for label in name.labels if label]
    if len(labels) < 2:
        raise ConfigError(f"Domain Parse Error: {domain!r} is not a registrable domain")
    for label in labels:
        if not _LABEL_RE.match(label):
            raise ConfigError(f"Domain Parse Error: invalid label {label!r} in {domain!r}")

    return name.canonicalize().to_text()


# ---------------------------------------------------------------------------
# Value objects
# ---------------------------------------------------------------------------


class ChangeAction(str, Enum):
    """Change actions a provider may be asked to apply to a record."""

    CREATE = "CREATE"
    UPSERT = "UPSERT"
    DELETE = "DELETE"


@dataclass(frozen=True)
class Record:
    """
    Canonical, provider-agnostic representation of one managed DNS entry.

    A record with source_id None has never been persisted: it can be created
    through an upsert but never updated in place or deleted.
    """

    # Fully-qualified domain name as the provider lists it
    domain: str

    # One of SUPPORTED_RECORD_TYPES; kept as a plain string for round-tripping
    record_type: str = "A"

    # IP address for A/AAAA, hostname for CNAME, free text otherwise
    value: str = "0.0.0.0"

    ttl: int = DEFAULT_TTL

    # Provider-native identifier; None until the record exists at the provider
    source_id: str | None = None

    def id(self, salt: str) -> str:
        return record_id(salt, self.domain)

    def for_display(self, salt: str) -> DisplayRecord:
        """Projects this record into the shape external callers see."""
        return DisplayRecord(
            domain=self.domain,
            record_type=self.record_type,
            value=self.value,
            ttl=self.ttl,
            id=self.id(salt),
            source_id=self.source_id,
        )

    def with_value(self, value: str) -> Record:
        return replace(self, value=value)


@dataclass(frozen=True)
class DisplayRecord:
    """
    Externally visible projection of a Record.

    `id` is derived from the domain alone, so listing twice yields the same
    ids. `source_id` travels along for the orchestrator but is never
    serialised to HTTP callers.
    """

    domain: str
    record_type: str
    value: str
    ttl: int
    id: str
    source_id: str | None = None

    def to_record(self) -> Record:
        return Record(
            domain=self.domain,
            record_type=self.record_type,
            value=self.value,
            ttl=self.ttl,
            source_id=self.source_id,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "domain": self.domain,
            "record_type": self.record_type,
            "value": self.value,
            "ttl": self.ttl,
        }


# ---------------------------------------------------------------------------
# Provider contract
# ---------------------------------------------------------------------------


class DNSProvider(ABC):
    """
    Uniform operation set every DNS backend adapter must support.

    Adapters hold only configuration fixed at construction time plus the
    client handle they own, so a single instance is safe to share across
    concurrent requests. Nothing is cached: every call re-fetches from the
    provider, which stays the sole source of truth.

    Collaborators:
        - CloudflareClient: REST implementation with page-counter pagination
        - Route53Client: boto3 implementation with cursor pagination
    """

    @property
    @abstractmethod
    def domain_name(self) -> str:
        """The managed root domain in absolute form, e.g. "example.com."."""

    @abstractmethod
    async def list_records(self) -> list[Record]:
        """
        Fetches every managed record from the backend, fully paginated.

        Returns:
            All records, in provider order. Never a partial listing.

        Raises:
            ProviderError: If any page fails; records gathered so far are discarded.
        """

    @abstractmethod
    async def update_record(self, action: ChangeAction, record: Record) -> None:
        """
        Applies one change action to one record.

        UPSERT has create-or-replace semantics; DELETE needs record.source_id.

        Raises:
            MissingIdentifierError: If a required native id is absent.
            UnsupportedActionError: If the adapter does not implement the action.
            ProviderError: If the backend call fails.
        """

    async def list_display_records(self, salt: str) -> list[DisplayRecord]:
        """
        Returns list_records() projected for display, in the same order.

        Args:
            salt: Process-wide salt used for the opaque ids.
        """
        return [record.for_display(salt) for record in await self.list_records()]

    async def find(self, salt: str, id_or_domain: str) -> DisplayRecord:
        """
        Resolves an opaque id or a literal domain against the current listing.

        Raises:
            RecordNotFoundError: If no listed record matches.
        """
        for record in await self.list_display_records(salt):
            if record.id == id_or_domain or record.domain == id_or_domain:
                return record
        raise RecordNotFoundError(f"No record matches {id_or_domain!r}")

    async def delete(self, salt: str, id_or_domain: str) -> None:
        """
        Deletes the record whose opaque id or domain equals id_or_domain.

        Machine callers pass the id, humans the domain; both resolve through
        a fresh listing since providers know nothing of opaque ids.

        Raises:
            RecordNotFoundError: If nothing in the current listing matches.
        """
        record = await self.find(salt, id_or_domain)
        logger.info("Deleting record: %s (%s)", record.domain, record.record_type)
        await self.update_record(ChangeAction.DELETE, record.to_record())

    @staticmethod
    def _require_source_id(record: Record) -> str:
        if not record.source_id:
            raise MissingIdentifierError(f"Missing ID for record {record.domain!r}")
        return record.source_id
