from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from typing import Iterable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SaveResult:
    saved: bool
    error: str | None = None


def load_notified(path: str) -> set[str]:
    if not os.path.exists(path):
        logger.info("No previous notifications file found at %s (first run)", path)
        return set()

    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except (OSError, ValueError) as e:
        # Corrupted state shouldn't brick the checker; start fresh.
        logger.warning("Could not read notifications file %s (%s: %s), starting empty", path, type(e).__name__, e)
        return set()

    if not isinstance(raw, list):
        logger.warning("Notifications file %s does not hold a JSON array, starting empty", path)
        return set()

    return {item for item in raw if isinstance(item, str)}


def save_notified(path: str, keys: Iterable[str]) -> SaveResult:
    # Plain overwrite. A crash mid-write leaves a file load_notified() discards.
    data = sorted(set(keys))

    try:
        folder = os.path.dirname(os.path.abspath(path))
        if folder and not os.path.exists(folder):
            os.makedirs(folder, exist_ok=True)

        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False)
    except OSError as e:
        logger.error("Error saving notifications to %s (%s: %s)", path, type(e).__name__, e)
        return SaveResult(saved=False, error=f"{type(e).__name__}: {e}")

    return SaveResult(saved=True)
