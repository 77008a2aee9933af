from __future__ import annotations

import datetime as dt
import logging
import time
from dataclasses import dataclass
from typing import Callable, Iterable

from entrywatch.availability_client import fetch_slots
from entrywatch.config import Settings
from entrywatch.domain import ConfigError, LocationTarget, Slot, notification_key
from entrywatch.email_notifier import build_message, format_appointment, send_email
from entrywatch.state_file import SaveResult, load_notified, save_notified

logger = logging.getLogger(__name__)

_BANNER = "=" * 60


@dataclass(frozen=True)
class CycleSummary:
    locations_checked: int
    new_notifications: int
    tracked_total: int
    save: SaveResult


def qualifies(location: LocationTarget, slot: Slot, notified: set[str]) -> bool:
    # ISO dates compare correctly as strings.
    if slot.date_iso >= location.target_date:
        return False
    return notification_key(location, slot) not in notified


def _notify_new_slots(
    settings: Settings,
    location: LocationTarget,
    slots: Iterable[Slot],
    notified: set[str],
) -> int:
    sent = 0
    for slot in slots:
        logger.info("    - %s", format_appointment(slot.start_timestamp))

        if not qualifies(location, slot, notified):
            if slot.date_iso < location.target_date:
                logger.info("    Already notified about this appointment")
            continue

        logger.info("    BETTER APPOINTMENT FOUND!")
        subject, text = build_message(location, slot, dt.datetime.now())
        if send_email(settings, subject=subject, text=text):
            # Only delivered slots are remembered; a failed send is retried next run.
            notified.add(notification_key(location, slot))
            sent += 1
    return sent


def run_check_once(settings: Settings, *, sleep: Callable[[float], None] = time.sleep) -> CycleSummary:
    logger.info(_BANNER)
    logger.info("Global Entry Appointment Checker")
    logger.info(_BANNER)
    logger.info("Started: %s", dt.datetime.now(dt.timezone.utc).isoformat())
    logger.info("Checking %d location(s)...", len(settings.locations))

    if not settings.locations:
        raise ConfigError("No locations configured. Set the LOCATIONS environment variable.")

    notified = load_notified(settings.state_file)
    new_notifications = 0

    for location in settings.locations:
        logger.info("Checking: %s (ID: %s)", location.name, location.id)
        logger.info("  Target date: %s", location.target_date)

        slots = fetch_slots(
            location.id,
            base_url=settings.api_base,
            timeout_seconds=settings.request_timeout_seconds,
        )
        if not slots:
            logger.info("  No appointments available")
            continue

        logger.info("  Found %d appointment(s)", len(slots))
        new_notifications += _notify_new_slots(settings, location, slots, notified)

        sleep(settings.location_delay_seconds)

    # Saved once per cycle: a crash between locations loses this run's new keys.
    save = save_notified(settings.state_file, notified)

    logger.info(_BANNER)
    logger.info("Summary")
    logger.info(_BANNER)
    logger.info("Total locations checked: %d", len(settings.locations))
    logger.info("New notifications sent: %d", new_notifications)
    logger.info("Total appointments tracked: %d", len(notified))
    if not save.saved:
        logger.warning("Notified appointments were not saved (%s)", save.error)
    logger.info("Completed: %s", dt.datetime.now(dt.timezone.utc).isoformat())
    logger.info(_BANNER)

    return CycleSummary(
        locations_checked=len(settings.locations),
        new_notifications=new_notifications,
        tracked_total=len(notified),
        save=save,
    )


def run_forever(settings: Settings, *, sleep: Callable[[float], None] = time.sleep) -> None:
    logger.info("Checker started. Interval=%ss", settings.check_interval_seconds)
    while True:
        try:
            run_check_once(settings, sleep=sleep)
        except ConfigError:
            raise
        except Exception as e:
            # Full traceback only once per failure; the next cycle may well succeed.
            logger.error("Check failed in run_forever (%s: %s)", type(e).__name__, e, exc_info=True)
        sleep(settings.check_interval_seconds)
