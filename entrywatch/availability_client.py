from __future__ import annotations

import logging

import httpx

from entrywatch.domain import Slot

logger = logging.getLogger(__name__)


def fetch_slots(
    location_id: str,
    *,
    base_url: str,
    timeout_seconds: float = 10.0,
    limit: int = 5,
    transport: httpx.BaseTransport | None = None,
) -> list[Slot]:
    """Return up to ``limit`` soonest open slots for one location.

    Never raises on network or API trouble: the failure is logged and the
    location simply has no slots this cycle.
    """
    params = {
        "orderBy": "soonest",
        "limit": limit,
        "locationId": location_id,
        "minimum": 1,
    }

    try:
        with httpx.Client(timeout=timeout_seconds, transport=transport) as client:
            r = client.get(f"{base_url}/slots", params=params)
            r.raise_for_status()
            data = r.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.error("Error checking location %s (%s: %s)", location_id, type(e).__name__, e)
        return []

    if not data:
        return []
    if not isinstance(data, list):
        logger.warning("Unexpected slots payload for location %s: %r", location_id, type(data).__name__)
        return []

    slots: list[Slot] = []
    for item in data:
        ts = item.get("startTimestamp") if isinstance(item, dict) else None
        if not isinstance(ts, str) or not ts:
            logger.warning("Skipping slot without startTimestamp for location %s: %r", location_id, item)
            continue
        slots.append(Slot(start_timestamp=ts))
    return slots
