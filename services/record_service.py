"""
services/record_service.py

Responsibility: Orchestrates record updates for the HTTP layer: resolves an
opaque id (or domain) to a record in the current listing, mutates it and
persists it through the active DNSProvider.
Does NOT: make HTTP calls directly, know which backend is active, or map
errors to HTTP statuses.
"""

from __future__ import annotations

import logging

from exceptions import RecordNotFoundError
from providers.dns_provider import DEFAULT_TTL, ChangeAction, DisplayRecord, DNSProvider, Record

logger = logging.getLogger(__name__)


class RecordService:
    """
    Thin orchestrator between route handlers and the DNS provider.

    Every operation re-lists from the provider; nothing is cached. There is
    no version check before an upsert, so two concurrent updates to the same
    record race at the provider and the last committed write wins.

    Collaborators:
        - DNSProvider: the single configured adapter, shared read-only
    """

    def __init__(self, dns_provider: DNSProvider, salt: str) -> None:
        """
        Args:
            dns_provider: Any DNSProvider implementation.
            salt: Process-wide salt for opaque ids.
        """
        self._provider = dns_provider
        self._salt = salt

    @property
    def domain_name(self) -> str:
        return self._provider.domain_name

    async def list_records(self) -> list[DisplayRecord]:
        return await self._provider.list_display_records(self._salt)

    async def update_ip(self, record_id: str, ip: str) -> DisplayRecord:
        """
        Points the record with the given opaque id at a new IP.

        Args:
            record_id: Opaque id from a previous listing.
            ip: New record value.

        Returns:
            The display projection of the record as written.

        Raises:
            RecordNotFoundError: If no listed record has that id.
        """
        for display in await self.list_records():
            if display.id == record_id:
                return await self._write(display.to_record().with_value(ip))
        raise RecordNotFoundError(f"Domain Hash Not Found: {record_id}")

    async def update_by_id_or_domain(self, id_or_domain: str, ip: str) -> DisplayRecord:
        """Same as update_ip, but also matches the literal domain name."""
        display = await self._provider.find(self._salt, id_or_domain)
        return await self._write(display.to_record().with_value(ip))

    async def create(
        self,
        domain: str,
        value: str,
        record_type: str = "A",
        ttl: int = DEFAULT_TTL,
    ) -> DisplayRecord:
        """
        Creates a record, or replaces the existing one for the same domain.

        One logical record per domain: an existing listing entry lends its
        source_id so the provider updates instead of creating a duplicate.

        Returns:
            The display projection of the record as written.
        """
        wanted = self._comparable(domain)
        source_id = None
        for display in await self.list_records():
            if self._comparable(display.domain) == wanted:
                # Keep the provider's spelling so the opaque id stays stable.
                domain = display.domain
                source_id = display.source_id
                break

        record = Record(domain=domain, record_type=record_type, value=value, ttl=ttl, source_id=source_id)
        return await self._write(record)

    async def delete(self, id_or_domain: str) -> None:
        await self._provider.delete(self._salt, id_or_domain)

    def _comparable(self, domain: str) -> str:
        """
        Folds a domain into one form for equality checks.

        "home", "home.example.com" and "HOME.example.com." all become
        "home.example.com" under the root "example.com.".
        """
        root = self._provider.domain_name.rstrip(".").lower()
        name = domain.strip().rstrip(".").lower()
        if name != root and not name.endswith(f".{root}"):
            name = f"{name}.{root}"
        return name

    async def _write(self, record: Record) -> DisplayRecord:
        await self._provider.update_record(ChangeAction.UPSERT, record)
        logger.info("Record %s now points to %s", record.domain, record.value)
        return record.for_display(self._salt)
