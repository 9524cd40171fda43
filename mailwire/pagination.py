"""Cursor-style paging over list endpoints, and the tag list."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Generic, Optional, TypeVar
from urllib.parse import parse_qs, parse_qsl, urlencode, urlsplit, urlunsplit

T = TypeVar("T")

_RFC3339 = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})[Tt ](\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?([Zz]|[+-]\d{2}:\d{2})\Z"
)


def _parse_time(value: Any) -> datetime | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"expected a timestamp string, got {value!r}")
    match = _RFC3339.match(value)
    if match is None:
        raise ValueError(f"cannot parse {value!r} as an RFC 3339 time")
    year, month, day, hour, minute, second, frac, zone = match.groups()
    if zone in ("Z", "z"):
        tz = timezone.utc
    else:
        offset = timedelta(hours=int(zone[1:3]), minutes=int(zone[4:6]))
        tz = timezone(-offset if zone[0] == "-" else offset)
    return datetime(
        int(year), int(month), int(day), int(hour), int(minute), int(second),
        int((frac or "")[:6].ljust(6, "0")), tzinfo=tz,
    )


@dataclass
class Paging:
    """Page links returned alongside a list of items."""

    first: str = ""
    next: str = ""
    previous: str = ""
    last: str = ""

    @classmethod
    def from_json(cls, data: Mapping[str, Any] | None) -> "Paging":
        data = data or {}
        return cls(**{name: data.get(name) or "" for name in ("first", "next", "previous", "last")})


@dataclass
class Tag:
    """Metadata about a message tag."""

    value: str = ""
    description: str = ""
    first_seen: Optional[datetime] = None
    last_seen: Optional[datetime] = None

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "Tag":
        return cls(
            value=data.get("tag", "") or "",
            description=data.get("description", "") or "",
            first_seen=_parse_time(data.get("first-seen")),
            last_seen=_parse_time(data.get("last-seen")),
        )


def can_fetch_page(url: str) -> bool:
    """Return False when a tag page link signals that no more pages exist."""
    try:
        query = urlsplit(url).query
    except ValueError:
        return False
    return "tag" not in parse_qs(query, keep_blank_values=True)


def with_params(url: str, params: Mapping[str, Any] | Iterable[tuple[str, Any]]) -> str:
    """Return ``url`` with ``params`` added to its query, keys in sorted order."""
    parts = urlsplit(url)
    query = parse_qsl(parts.query, keep_blank_values=True)
    pairs = params.items() if isinstance(params, Mapping) else params
    query.extend((str(key), str(value)) for key, value in pairs)
    query.sort(key=lambda pair: pair[0])
    return urlunsplit(parts._replace(query=urlencode(query)))


def tag_list_params(limit: int = 0, prefix: str = "") -> list[tuple[str, str]]:
    """Query parameters for listing tags."""
    params = []
    if limit:
        params.append(("limit", str(limit)))
    if prefix:
        params.append(("prefix", prefix))
    return params


PageFetcher = Callable[[str], "tuple[list[T], Optional[Paging]]"]


class PageIterator(Generic[T]):
    """Walks a paged list by following the paging links of each response.

    ``fetch`` takes a page URL and returns the page's items together with its
    paging links (or None to keep the current links).
    """

    def __init__(self, fetch: PageFetcher, url: str, check_cursor: bool = False) -> None:
        self._fetch = fetch
        self._check_cursor = check_cursor
        self.paging = Paging(first=url, next=url)
        self.items: list[T] = []

    def _load(self, url: str) -> list[T]:
        self.items = []
        items, paging = self._fetch(url)
        self.items = list(items)
        if paging is not None:
            self.paging = paging
        return list(self.items)

    def first(self) -> list[T]:
        """Fetch the first page and reset the iterator to it."""
        return self._load(self.paging.first)

    def next(self) -> list[T] | None:
        """Fetch the next page; None when there are no more pages."""
        if self._check_cursor and not can_fetch_page(self.paging.next):
            return None
        return self._load(self.paging.next) or None

    def previous(self) -> list[T] | None:
        """Fetch the previous page; None when there is none."""
        if not self.paging.previous:
            return None
        if self._check_cursor and not can_fetch_page(self.paging.previous):
            return None
        return self._load(self.paging.previous) or None

    def last(self) -> list[T]:
        """Fetch the last page; valid only after first() or next()."""
        if not self.paging.last:
            raise ValueError("the last page is not known until first() or next() has been called")
        return self._load(self.paging.last)

    def __iter__(self) -> Iterator[list[T]]:
        while (page := self.next()) is not None:
            yield page