import httpx
import pytest

from leadrelay.external.upstream.models import UpstreamResult
from leadrelay.schemas.outcomes import AcceptedOutcome, RejectedOutcome
from leadrelay.utils.exceptions import LeadValidationError, UpstreamError

from conftest import FakeBuyer


@pytest.mark.asyncio
async def test_accepted_lead_passes_redirect_and_price_through(make_relay, buyer, lead):
    relay = make_relay(buyer)

    outcome = await relay.relay(lead)

    assert outcome == AcceptedOutcome(redirectUrl="https://x", price=42)
    assert outcome.model_dump() == {"status": "accepted", "redirectUrl": "https://x", "price": 42}


@pytest.mark.asyncio
async def test_forwarded_payload_carries_subid3_not_bank_months(make_relay, buyer, lead):
    relay = make_relay(buyer)

    await relay.relay(lead)

    (sent,) = buyer.payloads
    assert sent["subID3"] == 24
    assert "bankMonths" not in sent
    assert sent["ssn"] == "123456789"


@pytest.mark.asyncio
async def test_request_goes_to_lead_path_with_credentials(make_relay, buyer, lead):
    relay = make_relay(buyer)

    await relay.relay(lead)

    (request,) = buyer.requests
    assert request.method == "POST"
    assert str(request.url) == "https://buyer.test/leads"
    assert request.headers["X-API-Key"] == "test-key"
    assert request.headers["X-API-Secret"] == "test-secret"
    assert request.headers["Content-Type"] == "application/json"


@pytest.mark.asyncio
async def test_invalid_lead_never_reaches_the_buyer(make_relay, buyer, lead):
    relay = make_relay(buyer)
    lead["state"] = "California"

    with pytest.raises(LeadValidationError):
        await relay.relay(lead)

    assert buyer.requests == []


@pytest.mark.asyncio
async def test_rejected_lead_passes_message_through(make_relay, lead):
    buyer = FakeBuyer(httpx.Response(200, json={"status": "REJECTED", "message": "duplicate"}))

    outcome = await make_relay(buyer).relay(lead)

    assert outcome == RejectedOutcome(message="duplicate")


@pytest.mark.asyncio
async def test_rejected_lead_without_message_defaults(make_relay, lead):
    buyer = FakeBuyer(httpx.Response(200, json={"status": "REJECTED"}))

    outcome = await make_relay(buyer).relay(lead)

    assert outcome.model_dump() == {"status": "rejected", "message": "rejected"}


@pytest.mark.asyncio
async def test_decision_is_case_sensitive(make_relay, lead):
    buyer = FakeBuyer(httpx.Response(200, json={"status": "accepted", "price": 1}))

    with pytest.raises(UpstreamError) as exc_info:
        await make_relay(buyer).relay(lead)

    assert exc_info.value.upstream_status == 200
    assert exc_info.value.upstream == {"status": "accepted", "price": 1}


@pytest.mark.asyncio
async def test_non_json_error_body_is_wrapped(make_relay, lead):
    buyer = FakeBuyer(httpx.Response(503, text="oops"))

    with pytest.raises(UpstreamError) as exc_info:
        await make_relay(buyer).relay(lead)

    assert exc_info.value.upstream_status == 503
    assert exc_info.value.upstream == {"raw": "oops"}


@pytest.mark.asyncio
async def test_accepted_status_with_error_code_is_an_error(make_relay, lead):
    buyer = FakeBuyer(httpx.Response(400, json={"status": "ACCEPTED"}))

    with pytest.raises(UpstreamError) as exc_info:
        await make_relay(buyer).relay(lead)

    assert exc_info.value.upstream_status == 400


@pytest.mark.asyncio
async def test_masked_redirect_url_round_trips_through_the_codec(make_relay, buyer, lead, codec):
    relay = make_relay(buyer, mask_redirect_url=True)

    outcome = await relay.relay(lead)

    prefix = "https://leads.test/redirect?token="
    assert outcome.redirectUrl.startswith(prefix)
    token = httpx.URL(outcome.redirectUrl).params["token"]
    assert codec.decrypt(token) == "https://x"


@pytest.mark.asyncio
async def test_delay_is_awaited_before_answering(make_relay, buyer, lead, monkeypatch):
    slept = []

    async def fake_sleep(seconds):
        slept.append(seconds)

    monkeypatch.setattr("leadrelay.services.lead_service.asyncio.sleep", fake_sleep)
    relay = make_relay(buyer, delay_min_seconds=5, delay_max_seconds=9)

    await relay.relay(lead)

    assert len(slept) == 1
    assert 5 <= slept[0] <= 9


def test_map_result_treats_non_object_bodies_as_errors(make_relay, buyer):
    relay = make_relay(buyer)

    with pytest.raises(UpstreamError):
        relay.map_result(UpstreamResult(status_code=200, body=["ACCEPTED"]))


@pytest.mark.asyncio
async def test_markup_in_buyer_status_is_still_an_upstream_error(make_relay, lead):
    buyer = FakeBuyer(httpx.Response(200, json={"status": "[/x]"}))

    with pytest.raises(UpstreamError) as exc_info:
        await make_relay(buyer).relay(lead)

    assert exc_info.value.upstream == {"status": "[/x]"}


@pytest.mark.asyncio
async def test_markup_in_price_does_not_break_acceptance(make_relay, lead):
    buyer = FakeBuyer(
        httpx.Response(200, json={"status": "ACCEPTED", "redirectUrl": "https://x", "price": "[/b]"})
    )

    outcome = await make_relay(buyer).relay(lead)

    assert outcome.price == "[/b]"
