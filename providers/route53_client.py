"""
providers/route53_client.py

Responsibility: Implements the DNSProvider contract on top of an AWS Route53
hosted zone using boto3. All Route53 SDK calls are concentrated here.
Does NOT: create the boto3 client, read configuration, or derive opaque ids.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError, ParamValidationError

from exceptions import (
    ChangeBuildError,
    ProviderApiError,
    ProviderTransportError,
    UnsupportedActionError,
)
from providers.dns_provider import DEFAULT_TTL, ChangeAction, DNSProvider, Record, normalize_root_domain

logger = logging.getLogger(__name__)

# Routing-policy attributes a change must repeat for a set that has a SetIdentifier.
_ROUTING_POLICY_KEYS = (
    "Weight",
    "Region",
    "GeoLocation",
    "GeoProximityLocation",
    "Failover",
    "MultiValueAnswer",
    "HealthCheckId",
    "CidrRoutingConfig",
)


class Route53Client(DNSProvider):
    """
    Implements DNSProvider for a single Route53 hosted zone.

    boto3 is blocking, so every SDK call runs in a worker thread via
    asyncio.to_thread and one slow request never stalls another. Listing
    follows the NextRecordName/NextRecordType/NextRecordIdentifier cursor
    until the service stops returning one. The apex record set (name equal
    to the managed root) is never listed, and neither are alias sets, which
    point at AWS resources rather than carrying a value.

    Route53 identifies a record set by name and type, so source_id is the
    set's SetIdentifier when it has one and its name otherwise. Writes to a
    set with a SetIdentifier re-read its routing policy first and send it
    back unchanged.

    Collaborators:
        - boto3 route53 client: injected; owned by this adapter for its lifetime
        - DNSProvider: this class implements the contract
    """

    def __init__(self, client: Any, hosted_zone_id: str, domain_name: str) -> None:
        """
        Initialises the adapter and validates the managed root domain.

        Args:
            client: A boto3 "route53" client.
            hosted_zone_id: The hosted zone holding the managed records.
            domain_name: The managed root domain, e.g. "example.com".

        Raises:
            ConfigError: If domain_name is not a well-formed domain name.
        """
        self._domain_name = normalize_root_domain(domain_name)
        self._client = client
        self._hosted_zone_id = hosted_zone_id

    @property
    def domain_name(self) -> str:
        return self._domain_name

    # ---------------------------------------------------------------------------
    # DNSProvider implementation
    # ---------------------------------------------------------------------------

    async def list_records(self) -> list[Record]:
        """
        Returns every record set in the hosted zone except the apex.

        Raises:
            ProviderError: If any page fails. Nothing is returned in that case.
        """
        result: list[Record] = []
        params: dict[str, Any] = {"HostedZoneId": self._hosted_zone_id}

        while True:
            output = await self._call("list_resource_record_sets", **params)
            for record_set in output.get("ResourceRecordSets", []):
                if record_set.get("Name") == self._domain_name:
                    continue
                if "AliasTarget" in record_set:
                    logger.debug("Skipping alias record set %s", record_set.get("Name"))
                    continue
                result.append(self._parse_record_set(record_set))

            next_name = output.get("NextRecordName")
            if not next_name:
                break

            logger.info("Following Route53 cursor to %s %s", next_name, output.get("NextRecordType"))
            params = {
                "HostedZoneId": self._hosted_zone_id,
                "StartRecordName": next_name,
                "StartRecordType": output.get("NextRecordType"),
            }
            if output.get("NextRecordIdentifier"):
                params["StartRecordIdentifier"] = output["NextRecordIdentifier"]

        return result

    async def update_record(self, action: ChangeAction, record: Record) -> None:
        """
        Submits a single-change batch for the record.

        Bare or relative names are qualified by appending the managed root
        when the domain does not already end with it (literal suffix check).

        Args:
            action: Any ChangeAction; UPSERT is Route53-native create-or-replace.
            record: The record to write or remove.

        Raises:
            MissingIdentifierError: DELETE on a record without source_id.
            UnsupportedActionError: If action is not a ChangeAction.
            ChangeBuildError: If the change batch cannot be built.
            ProviderError: If the ChangeResourceRecordSets call fails.
        """
        if not isinstance(action, ChangeAction):
            raise UnsupportedActionError(f"Route53 does not support action {action!r}")
        if action is ChangeAction.DELETE:
            self._require_source_id(record)

        domain = record.domain
        if not domain.endswith(self._domain_name):
            domain = f"{domain}.{self._domain_name}"

        logger.info("Updating record: %s %s %s %s ttl=%s", action.value, record.record_type, domain, record.value, record.ttl)
        change_batch = self._build_change_batch(action, domain, record)
        if record.source_id and record.source_id != domain:
            record_set = change_batch["Changes"][0]["ResourceRecordSet"]
            record_set["SetIdentifier"] = record.source_id
            record_set.update(await self._routing_policy(domain, record))
        await self._call(
            "change_resource_record_sets",
            HostedZoneId=self._hosted_zone_id,
            ChangeBatch=change_batch,
        )

    # ---------------------------------------------------------------------------
    # Internal helpers
    # ---------------------------------------------------------------------------

    @staticmethod
    def _build_change_batch(action: ChangeAction, domain: str, record: Record) -> dict[str, Any]:
        if not domain or domain.startswith("."):
            raise ChangeBuildError(f"Route53 Build Error: invalid record name {domain!r}")
        if not record.value:
            raise ChangeBuildError(f"Route53 Build Error: record {domain!r} has no value")
        if not record.record_type:
            raise ChangeBuildError(f"Route53 Build Error: record {domain!r} has no type")
        if isinstance(record.ttl, bool) or not isinstance(record.ttl, int) or record.ttl < 0:
            raise ChangeBuildError(f"Route53 Build Error: invalid ttl {record.ttl!r} for {domain!r}")

        return {
            "Changes": [
                {
                    "Action": action.value,
                    "ResourceRecordSet": {
                        "Name": domain,
                        "Type": record.record_type,
                        "TTL": record.ttl,
                        "ResourceRecords": [{"Value": record.value}],
                    },
                }
            ]
        }

    async def _routing_policy(self, domain: str, record: Record) -> dict[str, Any]:
        """
        Reads the routing-policy attributes of the set identified by record.source_id.

        Raises:
            ChangeBuildError: If the zone has no such set.
            ProviderError: If the lookup fails.
        """
        output = await self._call(
            "list_resource_record_sets",
            HostedZoneId=self._hosted_zone_id,
            StartRecordName=domain,
            StartRecordType=record.record_type,
            StartRecordIdentifier=record.source_id,
            MaxItems="1",
        )
        for record_set in output.get("ResourceRecordSets", []):
            if (
                record_set.get("Name") == domain
                and record_set.get("Type") == record.record_type
                and record_set.get("SetIdentifier") == record.source_id
            ):
                return {key: record_set[key] for key in _ROUTING_POLICY_KEYS if key in record_set}
        raise ChangeBuildError(
            f"Route53 Build Error: no {record.record_type} set {domain!r} with identifier {record.source_id!r}"
        )

    async def _call(self, operation: str, **params: Any) -> dict[str, Any]:
        """
        Runs one boto3 operation in a worker thread and classifies failures.

        Raises:
            ChangeBuildError: botocore rejected the request parameters.
            ProviderApiError: Route53 answered with an error.
            ProviderTransportError: Route53 could not be reached.
        """
        logger.debug("Route53 %s %s", operation, params)
        method = getattr(self._client, operation)
        try:
            return await asyncio.to_thread(method, **params)
        except ParamValidationError as exc:
            raise ChangeBuildError(f"Route53 Build Error: {exc}") from exc
        except ClientError as exc:
            status = exc.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
            raise ProviderApiError(f"AWS SDK Error: {exc}", status=status, body=str(exc.response.get("Error", {}))) from exc
        except BotoCoreError as exc:
            raise ProviderTransportError(f"AWS SDK Error: {exc}") from exc

    @staticmethod
    def _parse_record_set(record_set: dict[str, Any]) -> Record:
        values = record_set.get("ResourceRecords") or []
        value = values[0].get("Value", "") if values else ""
        return Record(
            domain=record_set["Name"],
            record_type=record_set.get("Type", "A"),
            value=value,
            ttl=record_set.get("TTL", DEFAULT_TTL),
            source_id=record_set.get("SetIdentifier") or record_set["Name"],
        )
