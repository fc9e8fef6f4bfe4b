"""
tests/conftest.py

Shared pytest fixtures used by both unit and integration test suites.
All HTTP fixtures use respx.mock and Route53 tests use botocore's Stubber;
no real network calls are made in any test.
"""

from __future__ import annotations

import boto3
import httpx
import pytest
import respx

from config import Settings
from providers.dns_provider import Record
from tests.fakes import SALT, FakeDnsProvider


# ---------------------------------------------------------------------------
# Provider doubles
# ---------------------------------------------------------------------------


@pytest.fixture()
def fake_provider() -> FakeDnsProvider:
    """Yields a FakeDnsProvider pre-loaded with two records."""
    return FakeDnsProvider(
        records=[
            Record(domain="home.example.com", record_type="A", value="1.1.1.1", ttl=60, source_id="cf-home"),
            Record(domain="alias.example.com", record_type="CNAME", value="home.example.com", ttl=300, source_id="cf-alias"),
        ]
    )


@pytest.fixture()
def settings() -> Settings:
    """Settings for a Cloudflare-backed instance without basic auth."""
    return Settings(
        provider="cloudflare",
        domain_name="example.com",
        salt=SALT,
        cloudflare_zone_id="zone123",
        cloudflare_api_key="test-token",
    )


# ---------------------------------------------------------------------------
# HTTP mock fixture: intercepts all httpx calls
# ---------------------------------------------------------------------------


@pytest.fixture()
def mock_http():
    """
    Yields a respx router that intercepts all httpx.AsyncClient calls.

    No real network traffic is allowed during tests. Use this fixture
    wherever a service or client would normally make an outbound request.
    """
    with respx.mock(assert_all_called=False) as router:
        yield router


@pytest.fixture()
async def http_client():
    """
    Yields a real httpx.AsyncClient instance for use in tests.

    Pair with the mock_http fixture so all requests are intercepted by respx.
    The client is closed after each test.
    """
    async with httpx.AsyncClient() as client:
        yield client


# ---------------------------------------------------------------------------
# Route53 SDK client
# ---------------------------------------------------------------------------


@pytest.fixture()
def route53_sdk():
    """A real boto3 Route53 client with dummy credentials; pair with botocore Stubber."""
    return boto3.client(
        "route53",
        region_name="us-east-1",
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
    )
