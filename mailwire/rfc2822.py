"""Timestamps in the RFC 2822 / RFC 1123 form the API uses everywhere."""

from __future__ import annotations

import json
import re
from datetime import datetime, timedelta, timezone

_WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

_PATTERN = re.compile(
    r"(?:%s), (?P<day>\d{2}) (?P<month>%s) (?P<year>\d{4}) "
    r"(?P<hour>\d{2}):(?P<minute>\d{2}):(?P<second>\d{2})(?:\.(?P<frac>\d+))? "
    r"(?P<zone>\S+)\Z" % ("|".join(_WEEKDAYS), "|".join(_MONTHS))
)
_NAMED_ZONE = re.compile(r"[A-Z]{3,5}\Z")
_NUMERIC_ZONE = re.compile(r"(?P<sign>[+-])(?P<hh>\d{2})(?P<mm>\d{2})\Z")


def _zone(text: str, allow_numeric: bool) -> timezone:
    if _NAMED_ZONE.match(text):
        if text == "UTC":
            return timezone.utc
        return timezone(timedelta(0), text)
    match = _NUMERIC_ZONE.match(text)
    if allow_numeric and match:
        hours, minutes = int(match["hh"]), int(match["mm"])
        if minutes >= 60 or hours >= 24:
            raise ValueError(f"time zone offset out of range: {text!r}")
        offset = timedelta(hours=hours, minutes=minutes)
        return timezone(-offset if match["sign"] == "-" else offset)
    raise ValueError(f"cannot parse time zone {text!r}")


def _parse(text: str, allow_numeric: bool) -> datetime:
    match = _PATTERN.match(text)
    if match is None:
        raise ValueError(f"cannot parse {text!r} as an RFC 2822 time")
    frac = match["frac"] or ""
    return datetime(
        int(match["year"]),
        _MONTHS.index(match["month"]) + 1,
        int(match["day"]),
        int(match["hour"]),
        int(match["minute"]),
        int(match["second"]),
        int(frac[:6].ljust(6, "0")),
        tzinfo=_zone(match["zone"], allow_numeric),
    )


def parse_rfc2822(text: str) -> datetime:
    """Parse a timestamp such as ``Thu, 13 Oct 2011 18:02:00 GMT``."""
    return _parse(text, allow_numeric=False)


def format_rfc2822(value: datetime) -> str:
    """Format ``value`` in RFC 1123 form; naive values are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    name = value.tzname()
    if name is None or (name.startswith("UTC") and name != "UTC"):
        offset = value.utcoffset() or timedelta(0)
        sign = "-" if offset < timedelta(0) else "+"
        minutes = abs(int(offset.total_seconds())) // 60
        name = f"{sign}{minutes // 60:02d}{minutes % 60:02d}"
    return (
        f"{_WEEKDAYS[value.weekday()]}, {value.day:02d} {_MONTHS[value.month - 1]} "
        f"{value.year:04d} {value.hour:02d}:{value.minute:02d}:{value.second:02d} {name}"
    )


def decode_rfc2822_json(raw: str | bytes) -> datetime:
    """Decode a JSON string holding a timestamp, with or without a numeric zone."""
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8")
    text = json.loads(raw)
    if not isinstance(text, str):
        raise ValueError(f"expected a JSON string, got {raw!r}")
    return _parse(text, allow_numeric=True)


def encode_rfc2822_json(value: datetime) -> str:
    """Encode ``value`` as a JSON string in RFC 1123 form."""
    return json.dumps(format_rfc2822(value))