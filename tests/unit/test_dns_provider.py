"""
tests/unit/test_dns_provider.py

Unit tests for providers/dns_provider.py: opaque id derivation, root-domain
validation, the Record/DisplayRecord projections and the shared
list-then-match logic of the DNSProvider base class.
"""

from __future__ import annotations

import hashlib

import pytest

from exceptions import ConfigError, MissingIdentifierError, RecordNotFoundError
from providers.dns_provider import (
    ChangeAction,
    DisplayRecord,
    DNSProvider,
    Record,
    normalize_root_domain,
    record_id,
)
from tests.fakes import SALT, FakeDnsProvider

# ---------------------------------------------------------------------------
# record_id
# ---------------------------------------------------------------------------


def test_record_id_is_hex_md5_of_salt_and_domain():
    """The id is hex(MD5(salt ++ domain)); issued ids depend on this exact form."""
    expected = hashlib.md5(b"pepperhome.example.com").hexdigest()
    assert record_id("pepper", "home.example.com") == expected
    assert len(expected) == 32


def test_record_id_is_idempotent():
    assert record_id(SALT, "home.example.com") == record_id(SALT, "home.example.com")


def test_record_id_distinct_for_many_domains():
    """Distinct domains under one salt never collide for realistic label inputs."""
    domains = {f"host{i}.zone{i % 7}.example.com" for i in range(2000)}
    domains |= {f"h-{i}.example.com." for i in range(500)}
    ids = {record_id(SALT, d) for d in domains}
    assert len(ids) == len(domains)


def test_record_id_is_salt_sensitive():
    for domain in ("home.example.com", "vpn.example.org"):
        assert record_id("salt-one", domain) != record_id("salt-two", domain)


def test_record_id_never_contains_source_id():
    record = Record(domain="home.example.com", source_id="cf-native-123")
    display = record.for_display(SALT)
    assert "cf-native-123" not in display.id
    assert display.id == record_id(SALT, "home.example.com")


# ---------------------------------------------------------------------------
# normalize_root_domain
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("example.com", "example.com."),
        ("example.com.", "example.com."),
        ("  sub.example.co.uk ", "sub.example.co.uk."),
        ("my-home.example.net", "my-home.example.net."),
        ("Example.COM", "example.com."),
    ],
)
def test_normalize_root_domain_accepts_well_formed(raw, expected):
    assert normalize_root_domain(raw) == expected


@pytest.mark.parametrize(
    "raw",
    ["", "   ", ".", "localhost", "exa mple.com", "-bad.example.com", "a..b.com", "x" * 64 + ".com"],
)
def test_normalize_root_domain_rejects_malformed(raw):
    with pytest.raises(ConfigError):
        normalize_root_domain(raw)


# ---------------------------------------------------------------------------
# Record / DisplayRecord
# ---------------------------------------------------------------------------


def test_record_defaults():
    record = Record(domain="home.example.com")
    assert record.record_type == "A"
    assert record.ttl == 60
    assert record.source_id is None


def test_display_round_trip_keeps_source_id():
    record = Record(domain="home.example.com", value="1.2.3.4", ttl=120, source_id="abc")
    display = record.for_display(SALT)
    assert isinstance(display, DisplayRecord)
    assert display.to_record() == record


def test_display_to_dict_hides_source_id():
    display = Record(domain="home.example.com", value="1.2.3.4", source_id="abc").for_display(SALT)
    body = display.to_dict()
    assert "source_id" not in body
    assert body == {
        "id": record_id(SALT, "home.example.com"),
        "domain": "home.example.com",
        "record_type": "A",
        "value": "1.2.3.4",
        "ttl": 60,
    }


def test_with_value_leaves_original_untouched():
    record = Record(domain="home.example.com", value="1.1.1.1", source_id="x")
    updated = record.with_value("9.9.9.9")
    assert updated.value == "9.9.9.9"
    assert updated.source_id == "x"
    assert record.value == "1.1.1.1"


# ---------------------------------------------------------------------------
# DNSProvider shared behaviour
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_list_display_records_preserves_order(fake_provider):
    displays = await fake_provider.list_display_records(SALT)
    assert [d.domain for d in displays] == ["home.example.com", "alias.example.com"]
    assert displays[0].id == record_id(SALT, "home.example.com")


@pytest.mark.asyncio
async def test_list_display_records_is_repeatable(fake_provider):
    first = await fake_provider.list_display_records(SALT)
    second = await fake_provider.list_display_records(SALT)
    assert [d.id for d in first] == [d.id for d in second]
    assert fake_provider.list_calls == 2


@pytest.mark.asyncio
async def test_delete_by_opaque_id(fake_provider):
    await fake_provider.delete(SALT, record_id(SALT, "home.example.com"))

    action, record = fake_provider.changes[0]
    assert action is ChangeAction.DELETE
    assert record.source_id == "cf-home"


@pytest.mark.asyncio
async def test_delete_by_literal_domain(fake_provider):
    await fake_provider.delete(SALT, "alias.example.com")

    action, record = fake_provider.changes[0]
    assert action is ChangeAction.DELETE
    assert record.source_id == "cf-alias"


@pytest.mark.asyncio
async def test_delete_unknown_raises_not_found(fake_provider):
    with pytest.raises(RecordNotFoundError):
        await fake_provider.delete(SALT, "nope.example.com")
    assert fake_provider.changes == []


@pytest.mark.asyncio
async def test_delete_with_other_salt_does_not_match_id(fake_provider):
    """An id computed under a different salt is not a valid handle."""
    with pytest.raises(RecordNotFoundError):
        await fake_provider.delete("other-salt", record_id(SALT, "home.example.com"))


def test_require_source_id_guard():
    with pytest.raises(MissingIdentifierError):
        DNSProvider._require_source_id(Record(domain="new.example.com"))
    assert DNSProvider._require_source_id(Record(domain="a.example.com", source_id="id1")) == "id1"


@pytest.mark.asyncio
async def test_fake_provider_is_a_dns_provider():
    assert isinstance(FakeDnsProvider(), DNSProvider)
