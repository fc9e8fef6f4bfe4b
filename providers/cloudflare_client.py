"""
providers/cloudflare_client.py

Responsibility: Implements the DNSProvider contract using the Cloudflare REST
API (v4). All Cloudflare HTTP calls are concentrated here; no other file may
call the Cloudflare API directly.
Does NOT: read configuration, derive opaque ids, or map errors to HTTP statuses.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from exceptions import ChangeBuildError, ProviderApiError, ProviderTransportError, UnsupportedActionError
from providers.dns_provider import (
    DEFAULT_TTL,
    MANAGED_RECORD_TYPES,
    ChangeAction,
    DNSProvider,
    Record,
    normalize_root_domain,
)

logger = logging.getLogger(__name__)

_CLOUDFLARE_BASE = "https://api.cloudflare.com/client/v4"

# Substituted for the body when an error response cannot be read.
_UNREADABLE_BODY = "Failed to read error response"


class CloudflareClient(DNSProvider):
    """
    Implements DNSProvider for the Cloudflare DNS REST API (v4).

    All outbound Cloudflare requests go through the injected httpx.AsyncClient,
    making this class fully testable without real network calls (use respx.mock).
    Listing walks `?page=N` from 1 and stops at the first page that yields no
    A/CNAME records; the envelope's result_info is not consulted.

    Collaborators:
        - httpx.AsyncClient: injected HTTP client; must be kept alive externally
        - DNSProvider: this class implements the contract
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        api_key: str,
        zone_id: str,
        domain_name: str,
        email: str | None = None,
    ) -> None:
        """
        Initialises the client and validates the managed root domain.

        Args:
            http_client: A long-lived httpx.AsyncClient instance.
            api_key: A Cloudflare API token, or the global API key when
                     email is given.
            zone_id: The Cloudflare zone holding the managed records.
            domain_name: The managed root domain, e.g. "example.com".
            email: Account email; switches auth to X-Auth-Email/X-Auth-Key.

        Raises:
            ConfigError: If domain_name is not a well-formed domain name.
        """
        self._domain_name = normalize_root_domain(domain_name)
        self._client = http_client
        self._zone_id = zone_id
        if email:
            self._headers = {
                "X-Auth-Email": email,
                "X-Auth-Key": api_key,
                "Content-Type": "application/json",
            }
        else:
            self._headers = {
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            }

    @property
    def domain_name(self) -> str:
        return self._domain_name

    # ---------------------------------------------------------------------------
    # DNSProvider implementation
    # ---------------------------------------------------------------------------

    async def list_records(self) -> list[Record]:
        """
        Returns every A/CNAME record in the zone, page by page.

        Returns:
            Records in page order, within-page order preserved.

        Raises:
            ProviderError: If any page fails. Nothing is returned in that case.
        """
        all_records: list[Record] = []
        page = 1

        while True:
            records = await self._fetch_records_page(page)
            if not records:
                break
            all_records.extend(records)
            page += 1

        return all_records

    async def update_record(self, action: ChangeAction, record: Record) -> None:
        """
        Applies an UPSERT or DELETE to a single Cloudflare record.

        UPSERT patches the record in place when source_id is known and
        creates it otherwise. DELETE needs the source_id.

        Args:
            action: ChangeAction.UPSERT or ChangeAction.DELETE.
            record: The record to write or remove.

        Raises:
            MissingIdentifierError: DELETE on a record without source_id.
            ChangeBuildError: UPSERT of a record with no name or no value.
            UnsupportedActionError: Any other action.
            ProviderError: If the Cloudflare API call fails.
        """
        if action is ChangeAction.UPSERT:
            payload = self._record_payload(record)
            if record.source_id:
                logger.info("Updating record: %s %s %s ttl=%s", record.record_type, record.domain, record.value, record.ttl)
                await self._request("PATCH", self._record_url(record.source_id), json=payload)
            else:
                logger.info("Creating record: %s %s %s ttl=%s", record.record_type, record.domain, record.value, record.ttl)
                await self._request("POST", self._records_url(), json=payload)
        elif action is ChangeAction.DELETE:
            source_id = self._require_source_id(record)
            logger.info("Deleting record: %s (%s)", record.domain, source_id)
            await self._request("DELETE", self._record_url(source_id))
        else:
            raise UnsupportedActionError(f"Cloudflare does not support action {action!r}")

    # ---------------------------------------------------------------------------
    # Internal helpers
    # ---------------------------------------------------------------------------

    async def _fetch_records_page(self, page: int) -> list[Record]:
        logger.info("Fetching records page %d", page)
        body = await self._request("GET", self._records_url(), params={"page": page})

        result = body.get("result") or []
        records = [
            self._parse_record(raw)
            for raw in result
            if raw.get("type") in MANAGED_RECORD_TYPES
        ]
        logger.info("Retrieved %d records for page %d", len(records), page)
        return records

    def _records_url(self) -> str:
        return f"{_CLOUDFLARE_BASE}/zones/{self._zone_id}/dns_records"

    def _record_url(self, source_id: str) -> str:
        return f"{_CLOUDFLARE_BASE}/zones/{self._zone_id}/dns_records/{source_id}"

    @staticmethod
    def _record_payload(record: Record) -> dict[str, Any]:
        if not record.domain or not record.domain.strip("."):
            raise ChangeBuildError(f"Cloudflare Build Error: invalid record name {record.domain!r}")
        if not record.value:
            raise ChangeBuildError(f"Cloudflare Build Error: record {record.domain!r} has no value")
        return {
            "type": record.record_type,
            "name": record.domain,
            "content": record.value,
            "ttl": record.ttl,
            "proxied": False,
        }

    async def _request(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """
        Sends an authenticated HTTP request to the Cloudflare API.

        Args:
            method: HTTP verb ("GET", "PATCH", "POST", "DELETE").
            url: Full URL of the Cloudflare API endpoint.
            params: Optional query-string parameters.
            json: Optional JSON request body.

        Returns:
            The parsed response envelope as a dict.

        Raises:
            ProviderTransportError: If the request never got a response.
            ProviderApiError: On a non-2xx status, an undecodable body, or
                              success=false in the envelope.
        """
        logger.debug("%s %s params=%s payload=%s", method, url, params, json)
        try:
            response = await self._client.request(
                method, url, headers=self._headers, params=params, json=json
            )
        except httpx.RequestError as exc:
            raise ProviderTransportError(
                f"Network error calling Cloudflare API ({method} {url}): {exc}"
            ) from exc

        if not response.is_success:
            try:
                error_text = response.text
            except (httpx.HTTPError, UnicodeDecodeError):
                error_text = _UNREADABLE_BODY
            raise ProviderApiError(
                f"API request failed with status {response.status_code}: {error_text}",
                status=response.status_code,
                body=error_text,
            )

        try:
            body: dict[str, Any] = response.json()
        except ValueError as exc:
            raise ProviderApiError(
                f"Failed to decode response: {exc} - Raw response: {response.text}",
                status=response.status_code,
                body=response.text,
            ) from exc

        # NOTE: Cloudflare wraps all responses in {"success": bool, "result": ...}
        if not isinstance(body, dict) or not body.get("success", False):
            errors = body.get("errors", []) if isinstance(body, dict) else body
            raise ProviderApiError(
                f"Cloudflare API returned success=false for {method} {url}. Errors: {errors}",
                status=response.status_code,
                body=response.text,
            )

        return body

    @staticmethod
    def _parse_record(raw: dict[str, Any]) -> Record:
        """
        Converts a raw Cloudflare API record dict into a Record.

        Raises:
            ProviderApiError: If the record lacks id, name or content.
        """
        try:
            return Record(
                domain=raw["name"],
                record_type=raw["type"],
                value=raw["content"],
                ttl=raw.get("ttl", DEFAULT_TTL),
                source_id=raw["id"],
            )
        except KeyError as exc:
            raise ProviderApiError(f"Malformed Cloudflare record, missing {exc}: {raw}") from exc
