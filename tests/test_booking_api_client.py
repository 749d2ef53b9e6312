"""
Tests for the booking service REST client.
"""

import asyncio
from uuid import UUID

import pendulum
import pytest
import requests

from bookingavailability.adapters import booking_api_client
from bookingavailability.adapters.booking_api_client import BookingApiClient
from bookingavailability.domain.exceptions import DataSourceError
from bookingavailability.domain.models import BookingStatus

TENANT = UUID("6f1c2a9e-3b4d-4c8e-9a71-2d5e8f0b1c33")
OTHER_TENANT = UUID("11111111-2222-3333-4444-555555555555")


class FakeResponse:
    def __init__(self, payload=None, status_code=200, invalid_json=False):
        self._payload = payload
        self.status_code = status_code
        self._invalid_json = invalid_json

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Server Error")

    def json(self):
        if self._invalid_json:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._payload


def _booking(tenant=TENANT, status="Confirmed", **extra):
    record = {
        "id": "a3d9c1e7-5f2b-4e80-b6a4-1c7d9e3f5a21",
        "tenantId": str(tenant),
        "startDateTime": "2024-11-25T10:00:00Z",
        "endDateTime": "2024-11-25T11:00:00Z",
        "status": status,
    }
    record.update(extra)
    return record


@pytest.fixture
def captured(monkeypatch):
    """Patch requests.get and record the calls."""
    calls = []
    responses = []

    def fake_get(url, headers=None, params=None, timeout=None):
        calls.append({"url": url, "headers": headers, "params": params, "timeout": timeout})
        response = responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    monkeypatch.setattr(booking_api_client.requests, "get", fake_get)
    return calls, responses


def _range():
    return pendulum.datetime(2024, 11, 25, tz="UTC"), pendulum.datetime(2024, 11, 26, tz="UTC")


def test_fetch_bookings_builds_request(captured):
    calls, responses = captured
    responses.append(FakeResponse([_booking()]))
    client = BookingApiClient("http://booking:8080/", access_token="token-123", timeout=5)

    bookings = client.fetch_bookings(TENANT, *_range())

    assert calls[0]["url"] == "http://booking:8080/api/bookings"
    assert calls[0]["headers"]["Authorization"] == "Bearer token-123"
    assert calls[0]["timeout"] == 5
    assert calls[0]["params"]["tenantId"] == str(TENANT)
    assert pendulum.parse(calls[0]["params"]["startDate"]) == pendulum.datetime(2024, 11, 25, tz="UTC")
    assert pendulum.parse(calls[0]["params"]["endDate"]) > pendulum.datetime(2024, 11, 26, 23, 59, tz="UTC")
    assert len(bookings) == 1
    assert bookings[0].status is BookingStatus.CONFIRMED


def test_no_authorization_header_without_token(captured):
    calls, responses = captured
    responses.append(FakeResponse([]))

    BookingApiClient("http://booking").fetch_bookings(TENANT, *_range())

    assert "Authorization" not in calls[0]["headers"]


def test_paginated_envelope_and_booking_status_field(captured):
    _, responses = captured
    record = _booking()
    del record["status"]
    record["bookingStatus"] = 1
    responses.append(FakeResponse({"items": [record], "totalCount": 1}))

    bookings = BookingApiClient("http://booking").fetch_bookings(TENANT, *_range())

    assert bookings[0].status is BookingStatus.CONFIRMED


def test_other_tenants_are_dropped(captured):
    _, responses = captured
    responses.append(FakeResponse([_booking(), _booking(tenant=OTHER_TENANT)]))

    bookings = BookingApiClient("http://booking").fetch_bookings(TENANT, *_range())

    assert [b.tenant_id for b in bookings] == [TENANT]


def test_get_bookings_runs_async(captured):
    _, responses = captured
    responses.append(FakeResponse([_booking(status="Pending")]))
    client = BookingApiClient("http://booking")

    bookings = asyncio.run(client.get_bookings(TENANT, *_range()))

    assert bookings[0].status is BookingStatus.PENDING


@pytest.mark.parametrize(
    "response, message",
    [
        (requests.exceptions.ConnectionError("connection refused"), "Failed to fetch bookings"),
        (FakeResponse(status_code=503), "Failed to fetch bookings"),
        (FakeResponse(invalid_json=True), "invalid JSON"),
        (FakeResponse({"message": "nope"}), "does not contain a booking list"),
        (FakeResponse([_booking(status="Lost")]), "Unknown booking status"),
    ],
)
def test_failures_raise_data_source_error(captured, response, message):
    _, responses = captured
    responses.append(response)

    with pytest.raises(DataSourceError, match=message):
        BookingApiClient("http://booking").fetch_bookings(TENANT, *_range())
