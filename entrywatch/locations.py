from __future__ import annotations

import logging

from entrywatch.domain import LocationTarget

logger = logging.getLogger(__name__)

LOCATIONS_FORMAT = "locationId:name:targetDate,locationId:name:targetDate"
LOCATIONS_EXAMPLE = "5140:JFK Terminal 4:2025-04-01,5183:Newark:2025-04-01"


def parse_locations(raw: str | None) -> list[LocationTarget]:
    # LOCATIONS holds comma-separated "id:name:YYYY-MM-DD" triples.
    # Bad entries are dropped, dates and ids are taken as-is.
    if not raw:
        logger.error("LOCATIONS environment variable not set")
        logger.error("Format: %r", LOCATIONS_FORMAT)
        logger.error("Example: %r", LOCATIONS_EXAMPLE)
        return []

    result: list[LocationTarget] = []
    for entry in raw.split(","):
        parts = entry.strip().split(":")
        if len(parts) != 3:
            logger.error("Invalid location format: %r", entry)
            continue
        location_id, name, target_date = parts
        result.append(LocationTarget(id=location_id, name=name, target_date=target_date))

    return result
