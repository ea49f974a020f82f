"""Pytest fixtures for the lead relay."""

import json
import os

# Settings are loaded at import time, so the environment must be ready first
os.environ.setdefault("ENCRYPTION_KEY", "test-encryption-key")
os.environ.setdefault("UPSTREAM_BASE_URL", "https://buyer.test")
os.environ.setdefault("UPSTREAM_API_KEY", "test-key")
os.environ.setdefault("UPSTREAM_API_SECRET", "test-secret")

import httpx
import pytest
from fastapi.testclient import TestClient

from leadrelay.core.config import RelayConfig, UpstreamConfig
from leadrelay.core.dependencies import get_lead_relay
from leadrelay.external.upstream.client import UpstreamClient
from leadrelay.main import app
from leadrelay.services.lead_service import LeadRelay
from leadrelay.services.token_service import TokenCodec


class FakeBuyer:
    """Records posted leads and answers with a canned response."""

    def __init__(self, response=None):
        self.response = response or httpx.Response(
            200, json={"status": "ACCEPTED", "redirectUrl": "https://x", "price": 42}
        )
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.response

    @property
    def payloads(self):
        return [json.loads(r.content) for r in self.requests]


@pytest.fixture
def lead():
    """A submission that passes every field rule."""
    return {
        "campaignID": 1234,
        "ipAddress": "203.0.113.7",
        "sourceURL": "https://apply.example.com/form",
        "firstName": "Jane",
        "lastName": "Doe",
        "streetAddress": "1 Main St",
        "city": "Springfield",
        "state": "IL",
        "zipCode": "62701",
        "homePhone": "2175550100",
        "workPhone": "2175550101",
        "mobilePhone": "2175550102",
        "email": "jane.doe@mailhost.com",
        "dateOfBirth": "1990-04-12",
        "ssn": "123456789",
        "ownRent": "rent",
        "yearsAtResidence": 3,
        "monthsAtResidence": 4,
        "incomeSource": "employment",
        "employer": "Acme",
        "yearsAtEmployer": 5,
        "monthsAtEmployer": 0,
        "monthlyIncome": "4200",
        "loanAmount": 500,
        "payMethod": "checking",
        "payPeriod": "biWeekly",
        "firstPayDate": "2026-11-01",
        "secondPayDate": "2026-11-15",
        "bankName": "First Bank",
        "bankAccountType": "checking",
        "bankRoutingNumber": "111000025",
        "bankAccountNumber": "000123456789",
        "activeMilitary": 0,
        "minPrice": "1.50",
        "bankMonths": 24,
    }


@pytest.fixture
def codec():
    return TokenCodec("test-encryption-key", redirect_base_url="https://leads.test")


@pytest.fixture
def buyer():
    return FakeBuyer()


@pytest.fixture
def make_relay(codec):
    def _make(buyer, **relay_options):
        client = UpstreamClient(
            UpstreamConfig(
                base_url="https://buyer.test",
                lead_path="/leads",
                api_key="test-key",
                api_secret="test-secret",
            ),
            transport=httpx.MockTransport(buyer),
        )
        return LeadRelay(client, config=RelayConfig(**relay_options), codec=codec)

    return _make


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def client_for(client, make_relay):
    """TestClient whose lead endpoint talks to the given fake buyer."""

    def _for(buyer, **relay_options):
        relay = make_relay(buyer, **relay_options)
        app.dependency_overrides[get_lead_relay] = lambda: relay
        return client

    return _for
