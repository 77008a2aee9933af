from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from entrywatch.domain import LocationTarget
from entrywatch.locations import parse_locations

TTP_API_BASE = "https://ttp.cbp.dhs.gov/schedulerapi"

# The state file sits next to main.py so scheduled runs (cron, CI) that keep the
# checkout between runs also keep the notified keys.
_REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DEFAULT_STATE_FILE = os.path.join(_REPO_ROOT, ".notified-appointments.json")


@dataclass(frozen=True)
class Settings:
    locations: tuple[LocationTarget, ...]

    smtp_user: str | None
    smtp_password: str | None
    email_to: tuple[str, ...]

    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    # True: implicit TLS (port 465). False: plain connection upgraded with STARTTLS.
    smtp_secure: bool = False

    api_base: str = TTP_API_BASE
    request_timeout_seconds: float = 10.0

    # Courtesy pause between locations
    location_delay_seconds: float = 2.0

    # Only used by --forever
    check_interval_seconds: int = 300

    # Where we store keys of slots we already emailed about
    state_file: str = DEFAULT_STATE_FILE


def _parse_recipients(raw: str) -> tuple[str, ...]:
    # EMAIL_TO supports a single address or a comma-separated list.
    parts = [p.strip() for p in raw.split(",")]

    seen: set[str] = set()
    result: list[str] = []
    for p in parts:
        if not p or p in seen:
            continue
        seen.add(p)
        result.append(p)
    return tuple(result)


def _int_env(name: str, default: str) -> int:
    raw = os.getenv(name, default).strip()
    try:
        return int(raw)
    except ValueError as e:
        raise RuntimeError(f"Invalid {name} value: {raw!r}. Expected integer.") from e


def _float_env(name: str, default: str) -> float:
    raw = os.getenv(name, default).strip()
    try:
        value = float(raw)
    except ValueError as e:
        raise RuntimeError(f"Invalid {name} value: {raw!r}. Expected number.") from e
    if value < 0:
        raise RuntimeError(f"{name} must be >= 0")
    return value


def load_settings(dotenv_path: str | None = None) -> Settings:
    # Prefer .env in repo root; dotenv_path allows overriding in tests.
    load_dotenv(dotenv_path=dotenv_path, override=False)

    smtp_user = os.getenv("SMTP_USER") or None
    smtp_password = os.getenv("SMTP_PASSWORD") or os.getenv("SMTP_PASS") or None

    secure_raw = os.getenv("SMTP_SECURE", "0").strip().lower()
    smtp_secure = secure_raw in {"1", "true", "yes"}

    check_interval_seconds = _int_env("CHECK_INTERVAL_SECONDS", "300")
    if check_interval_seconds < 1:
        raise RuntimeError("CHECK_INTERVAL_SECONDS must be >= 1")

    return Settings(
        locations=tuple(parse_locations(os.getenv("LOCATIONS", ""))),
        smtp_user=smtp_user,
        smtp_password=smtp_password,
        email_to=_parse_recipients(os.getenv("EMAIL_TO") or smtp_user or ""),
        smtp_host=os.getenv("SMTP_HOST") or "smtp.gmail.com",
        smtp_port=_int_env("SMTP_PORT", "587"),
        smtp_secure=smtp_secure,
        api_base=(os.getenv("TTP_API_BASE") or TTP_API_BASE).rstrip("/"),
        request_timeout_seconds=_float_env("REQUEST_TIMEOUT_SECONDS", "10"),
        location_delay_seconds=_float_env("LOCATION_DELAY_SECONDS", "2"),
        check_interval_seconds=check_interval_seconds,
        state_file=os.getenv("STATE_FILE") or DEFAULT_STATE_FILE,
    )
