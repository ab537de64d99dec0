"""Utility helpers shared across the job board."""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any, Iterable, List, Optional


# Sort key for records whose posting date cannot be parsed: oldest possible.
EPOCH_MIN = datetime.min.replace(tzinfo=timezone.utc)

FRACTION_RE = re.compile(r"(\d{2}:\d{2}:\d{2})\.(\d+)")


def uniq_preserve_order(items: Iterable[str]) -> List[str]:
    """Deduplicate while preserving first-seen order."""
    seen = set()
    out: List[str] = []
    for it in items:
        if not it:
            continue
        key = it.strip().lower()
        if key in seen:
            continue
        seen.add(key)
        out.append(it.strip())
    return out


def join_values(items: Iterable[str], default: Optional[str] = None) -> Optional[str]:
    """Join a multi-valued upstream field into one display string."""
    values = uniq_preserve_order(items)
    return ", ".join(values) if values else default


def parse_posted_date(value: Any) -> Optional[datetime]:
    """Parse the various posting-date formats the sources use into an aware datetime.

    Handles ISO-8601 strings (with or without a trailing "Z"), "YYYY-MM-DD HH:MM:SS",
    bare dates, and epoch seconds or milliseconds. Naive values are taken as UTC.
    """
    if value is None:
        return None

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        ts = float(value)
        # Some feeds return epoch in ms; convert if so.
        if ts > 1e12:
            ts /= 1000.0
        try:
            return datetime.fromtimestamp(ts, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None

    if not isinstance(value, str):
        return None

    value = value.strip()
    if not value:
        return None

    # Numeric epochs arrive as digit strings once coerced by the upstream models.
    if value.isdigit():
        return parse_posted_date(int(value))

    # USAJOBS sends four fractional digits ("...T00:00:00.0000"); pad or trim to six.
    iso = FRACTION_RE.sub(lambda m: f"{m.group(1)}.{m.group(2)[:6].ljust(6, '0')}", value.replace("Z", "+00:00"))
    try:
        parsed = datetime.fromisoformat(iso)
    except ValueError:
        # Best effort: fall back to the leading YYYY-MM-DD.
        try:
            parsed = datetime.strptime(value[:10], "%Y-%m-%d")
        except ValueError:
            return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def posted_sort_key(value: Any) -> datetime:
    """Sort key for posting dates; unparseable dates sort as the oldest."""
    return parse_posted_date(value) or EPOCH_MIN
