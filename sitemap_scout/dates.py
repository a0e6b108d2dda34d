"""sitemap_scout.dates: timestamp normalization and the date filter.

Every date found in a sitemap or feed is reduced to an ``int`` number of
milliseconds since the Unix epoch, or ``None`` when it cannot be understood.
Callers never inspect the value beyond ordering and ``is None``.

Recognized shapes, tried in order for strings:

* 9-13 digit epoch (seconds below ``10**12``, milliseconds otherwise);
* ``YYYYMMDD`` anchored at UTC midnight;
* ``YYYY-MM-DD HH:mm:ss`` / ``YYYY-MM-DDTHH:mm:ss`` without a zone, taken as UTC;
* anything :func:`dateutil.parser.parse` accepts (RFC 822/2822, ISO-8601, W3C-DTF)
  as long as it names a year; bare weekdays, months or clock times are rejected.
"""
from __future__ import annotations

import math
import re
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, Final, Optional

from dateutil import parser as date_parser
from dateutil import tz

from sitemap_scout.errors import InvalidLowerBoundError

__all__ = (
    "Timestamp",
    "normalize",
    "first_finite",
    "includes",
    "parse_lower_bound",
)

#: milliseconds since epoch, or ``None`` for "not-a-time"
Timestamp = Optional[int]

MILLIS_THRESHOLD: Final[int] = 10**12

_EPOCH: Final[datetime] = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_MS: Final[timedelta] = timedelta(milliseconds=1)
# missing components (e.g. "2023-06") are filled from here, not from today
_PARSE_DEFAULT: Final[datetime] = datetime(1970, 1, 1)
# a string whose year comes from the default ("Monday", "10:30") is not a date
_ALT_DEFAULT: Final[datetime] = datetime(1971, 1, 1)

_EPOCH_RE: Final[re.Pattern[str]] = re.compile(r"^-?\d{9,13}$")
_BASIC_DATE_RE: Final[re.Pattern[str]] = re.compile(r"^\d{8}$")
_UNZONED_RE: Final[re.Pattern[str]] = re.compile(r"^\d{4}-\d{2}-\d{2}[ T]\d{2}:\d{2}:\d{2}$")

# RFC 822 zone names dateutil does not know by itself
_TZINFOS: Final[Dict[str, Any]] = {
    "UT": tz.UTC,
    "GMT": tz.UTC,
    "Z": tz.UTC,
    "EST": tz.tzoffset("EST", -5 * 3600),
    "EDT": tz.tzoffset("EDT", -4 * 3600),
    "CST": tz.tzoffset("CST", -6 * 3600),
    "CDT": tz.tzoffset("CDT", -5 * 3600),
    "MST": tz.tzoffset("MST", -7 * 3600),
    "MDT": tz.tzoffset("MDT", -6 * 3600),
    "PST": tz.tzoffset("PST", -8 * 3600),
    "PDT": tz.tzoffset("PDT", -7 * 3600),
}


def _datetime_ms(value: datetime) -> Timestamp:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    try:
        return (value - _EPOCH) // _ONE_MS
    except (OverflowError, ValueError):
        # out-of-range year or a zone offset of 24h or more
        return None


def _epoch_ms(value: float) -> Timestamp:
    if not math.isfinite(value):
        return None
    if abs(value) < MILLIS_THRESHOLD:
        value *= 1000
    return int(value)


def _string_ms(text: str) -> Timestamp:
    if _EPOCH_RE.match(text):
        return _epoch_ms(int(text))

    if _BASIC_DATE_RE.match(text):
        try:
            return _datetime_ms(datetime.strptime(text, "%Y%m%d"))
        except ValueError:
            pass

    if _UNZONED_RE.match(text):
        try:
            return _datetime_ms(datetime.strptime(text.replace("T", " "), "%Y-%m-%d %H:%M:%S"))
        except ValueError:
            pass

    try:
        parsed = date_parser.parse(text, default=_PARSE_DEFAULT, tzinfos=_TZINFOS)
        if date_parser.parse(text, default=_ALT_DEFAULT, tzinfos=_TZINFOS).year != parsed.year:
            return None
    except (ValueError, OverflowError):
        return None
    return _datetime_ms(parsed)


def normalize(raw: Any) -> Timestamp:
    """Convert *raw* into epoch milliseconds, or ``None`` when it is not a time.

    >>> normalize("20230101")
    1672531200000
    >>> normalize(1672531200)
    1672531200000
    >>> normalize("yesterday-ish") is None
    True
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, datetime):
        return _datetime_ms(raw)
    if isinstance(raw, date):
        return _datetime_ms(datetime(raw.year, raw.month, raw.day))
    if isinstance(raw, (int, float)):
        return _epoch_ms(raw)

    text = str(raw).strip()
    if not text:
        return None
    return _string_ms(text)


def first_finite(*candidates: Any) -> Timestamp:
    """Return the first candidate that normalizes to a timestamp."""
    for candidate in candidates:
        ts = normalize(candidate)
        if ts is not None:
            return ts
    return None


def includes(ts: Timestamp, lower_bound: Timestamp) -> bool:
    """Inclusion predicate: no bound accepts all, otherwise ``ts >= lower_bound``.

    Entries without a parseable date are excluded whenever a bound is active.
    """
    if lower_bound is None:
        return True
    return ts is not None and ts >= lower_bound


def parse_lower_bound(value: Any) -> Timestamp:
    """Normalize a caller-supplied ``from_date``.

    ``None`` and the empty string disable filtering. Any other value that does
    not normalize raises :class:`InvalidLowerBoundError`.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    ts = normalize(value)
    if ts is None:
        raise InvalidLowerBoundError(value)
    return ts
