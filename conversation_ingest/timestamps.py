# Conversation Ingest
# © 2026 Dennis Schulmeister-Zimolong <dennis@wpvs.de>
#
# This source code is licensed under the BSD 3-Clause License found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

"""Timestamp resolution helpers.

All helpers are lenient: malformed or unrecognized date/time text yields
`None` (unresolved) instead of raising, so a formatting quirk never aborts a
whole ingest. The only exception is `parse_cue_ms()`, which follows the SRT
convention of resolving a malformed cue time to `0`.

Values without an explicit timezone are interpreted as UTC so that parsing
the same input twice always yields the same numbers.
"""

import logging
import math
import re
from datetime import date, datetime, timedelta, timezone
from typing import Any

from dateutil import parser as date_parser


logger = logging.getLogger(__name__)

# Epoch seconds for 2100-01-01. Smaller Unix timestamps are taken as seconds,
# larger ones as milliseconds.
UNIX_SECONDS_THRESHOLD = 4102444800

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_MS = timedelta(milliseconds=1)

# Fills in missing date components for partial values like "14:30" so the
# result does not depend on the current date.
_DEFAULT_DATETIME = datetime(1970, 1, 1)

_CUE_TIME_RE = re.compile(r"(\d{1,2}):(\d{2}):(\d{2})[,.](\d{3})")
_DATE_PARTS_RE = re.compile(r"[/\-.]")


def _to_epoch_ms(value: datetime) -> int:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return (value - _EPOCH) // _ONE_MS


def _date_value_ms(value: date) -> int:
    if isinstance(value, datetime):
        return _to_epoch_ms(value)
    return _to_epoch_ms(datetime(value.year, value.month, value.day))


def _to_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def parse_iso_ms(text: Any) -> int | None:
    """Parse an ISO-8601 date-time into epoch milliseconds.

    Args:
        text:
            Candidate value. `datetime`/`date` objects (as produced by
            YAML loaders) are converted directly, with dates taken as midnight.
            Other non-strings are unresolved.

    Returns:
        Epoch milliseconds or None.
    """

    if isinstance(text, date):
        return _date_value_ms(text)
    if not isinstance(text, str) or not text.strip():
        return None

    try:
        return _to_epoch_ms(date_parser.isoparse(text.strip()))
    except (ValueError, OverflowError, TypeError):
        return None


def parse_clock_ms(text: Any) -> int | None:
    """Parse `HH:MM:SS`, `MM:SS` or `SS` into milliseconds.

    Fractional seconds are accepted. Any non-numeric component makes the whole
    value unresolved.
    """

    if not isinstance(text, str) or not text.strip():
        return None

    parts = text.strip().split(":")
    if len(parts) > 3:
        return None

    numbers: list[float] = []
    for part in parts:
        number = _to_number(part) if part.strip() else None
        if number is None:
            return None
        numbers.append(number)

    seconds = 0.0
    for number in numbers:
        seconds = seconds * 60 + number

    return int(round(seconds * 1000))


def parse_unix_ms(value: Any) -> int | None:
    """Convert a Unix timestamp (seconds or milliseconds) to milliseconds.

    Values below `UNIX_SECONDS_THRESHOLD` are seconds (Slack-style `ts`
    strings such as `"1706540400.000100"`), anything else is already in
    milliseconds. The result is floored to whole milliseconds.
    """

    number = _to_number(value)
    if number is None:
        return None

    if number < UNIX_SECONDS_THRESHOLD:
        return math.floor(number * 1000)
    return math.floor(number)


def parse_datetime_ms(text: Any) -> int | None:
    """Parse a free-form date/time string into epoch milliseconds."""

    if isinstance(text, date):
        return _date_value_ms(text)

    if not isinstance(text, str) or not text.strip():
        return None

    try:
        parsed = date_parser.parse(text.strip(), default=_DEFAULT_DATETIME)
    except (ValueError, OverflowError, TypeError):
        logger.debug("Unresolved date/time value: %r", text)
        return None

    return _to_epoch_ms(parsed)


def parse_cue_ms(text: str) -> int:
    """Parse an SRT cue time `H:MM:SS,mmm` (or with `.`) into milliseconds.

    Returns:
        Milliseconds, or `0` if the value does not look like a cue time.
    """

    match = _CUE_TIME_RE.search(text)
    if not match:
        return 0

    hours, minutes, seconds, millis = (int(g) for g in match.groups())
    return hours * 3_600_000 + minutes * 60_000 + seconds * 1000 + millis


def parse_day_month_ms(date: str, time: str) -> int | None:
    """Resolve a chat-export date and time into epoch milliseconds.

    A direct parse of the combined value is attempted first. Otherwise the
    date is split into `a/b/c`: if `a > 12` it is read as day-first, else as
    month-first (US convention). Two-digit years get 2000 added.

    Dates such as `03/04/2024` are ambiguous and always resolve month-first.

    Args:
        date:
            Date part as it appears in the export, e.g. `1/29/24`.
        time:
            Time part, e.g. `2:30 PM` or `14:30:00`.

    Returns:
        Epoch milliseconds or None.
    """

    time = " ".join(time.split())

    direct = parse_iso_ms(f"{date.replace('/', '-')} {time}")
    if direct is not None:
        return direct

    parts = _DATE_PARTS_RE.split(date.strip())
    if len(parts) != 3 or not all(p.isdigit() for p in parts):
        return None

    a, b, c = (int(p) for p in parts)
    year = 2000 + c if c < 100 else c
    if a > 12:
        day, month = a, b
    else:
        month, day = a, b

    try:
        parsed = date_parser.parse(time, default=datetime(year, month, day))
    except (ValueError, OverflowError, TypeError):
        logger.debug("Unresolved chat date/time: %r %r", date, time)
        return None

    return _to_epoch_ms(parsed)


def relative_ms(value: int | None, baseline: int) -> int | None:
    """Rebase an absolute timestamp, keeping unresolved values unresolved."""

    if value is None:
        return None
    return value - baseline
