from __future__ import annotations

import httpx

from entrywatch.availability_client import fetch_slots
from entrywatch.domain import Slot

BASE = "https://scheduler.test/schedulerapi"


def test_fetch_sends_soonest_query_and_parses_slots() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json=[
                {"locationId": 5140, "startTimestamp": "2025-03-15T09:00", "active": True},
                {"locationId": 5140, "startTimestamp": "2025-03-16T10:15", "active": True},
            ],
        )

    slots = fetch_slots("5140", base_url=BASE, transport=httpx.MockTransport(handler))

    assert slots == [Slot(start_timestamp="2025-03-15T09:00"), Slot(start_timestamp="2025-03-16T10:15")]

    assert len(seen) == 1
    req = seen[0]
    assert req.method == "GET"
    assert req.url.path == "/schedulerapi/slots"
    assert dict(req.url.params) == {"orderBy": "soonest", "limit": "5", "locationId": "5140", "minimum": "1"}


def test_fetch_returns_empty_on_http_error_status() -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(503, text="unavailable"))

    assert fetch_slots("5140", base_url=BASE, transport=transport) == []


def test_fetch_returns_empty_on_transport_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    assert fetch_slots("5140", base_url=BASE, transport=httpx.MockTransport(handler)) == []


def test_fetch_returns_empty_on_invalid_json() -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(200, text="<html>oops</html>"))

    assert fetch_slots("5140", base_url=BASE, transport=transport) == []


def test_fetch_returns_empty_on_non_list_payload() -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"error": "nope"}))

    assert fetch_slots("5140", base_url=BASE, transport=transport) == []


def test_fetch_skips_items_without_start_timestamp() -> None:
    transport = httpx.MockTransport(
        lambda request: httpx.Response(200, json=[{"startTimestamp": "2025-03-15T09:00"}, {"foo": 1}, "junk"])
    )

    assert fetch_slots("5140", base_url=BASE, transport=transport) == [Slot(start_timestamp="2025-03-15T09:00")]
