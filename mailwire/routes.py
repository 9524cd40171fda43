"""Inbound routes: route records, forwarded-message payloads and offset paging."""

from __future__ import annotations

import json
import re
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

from .rfc2822 import decode_rfc2822_json, encode_rfc2822_json

DEFAULT_ROUTES_LIMIT = 100

_INTEGER = re.compile(r"[+-]?\d+\Z")


def _parse_created(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    return decode_rfc2822_json(json.dumps(value))


@dataclass
class Route:
    """A configured route, or a template for creating one.

    Only priority, description, expression and actions are used when a route
    is created; ``created_at`` and ``id`` are filled in by the API.
    """

    priority: int = 0
    description: str = ""
    expression: str = ""
    actions: list[str] = field(default_factory=list)
    created_at: Optional[datetime] = None
    id: str = ""

    @classmethod
    def from_json(cls, data: Mapping[str, Any] | None) -> "Route":
        data = data or {}
        return cls(
            priority=int(data.get("priority") or 0),
            description=data.get("description") or "",
            expression=data.get("expression") or "",
            actions=list(data.get("actions") or []),
            created_at=_parse_created(data.get("created_at")),
            id=data.get("id") or "",
        )

    def to_json(self) -> dict[str, Any]:
        """Encode the route, leaving out empty fields."""
        result: dict[str, Any] = {}
        if self.priority:
            result["priority"] = self.priority
        if self.description:
            result["description"] = self.description
        if self.expression:
            result["expression"] = self.expression
        if self.actions:
            result["actions"] = list(self.actions)
        if self.created_at is not None:
            result["created_at"] = json.loads(encode_rfc2822_json(self.created_at))
        if self.id:
            result["id"] = self.id
        return result


@dataclass
class ForwardedMessage:
    """The payload posted to a URL when a forwarding route matches."""

    body_plain: str = ""
    from_: str = ""
    message_headers: dict[str, str] = field(default_factory=dict)
    recipient: str = ""
    sender: str = ""
    signature: str = ""
    stripped_html: str = ""
    stripped_text: str = ""
    subject: str = ""
    timestamp: datetime = field(default_factory=lambda: datetime.fromtimestamp(0, timezone.utc))
    token: str = ""


def _form_get(form: Mapping[str, Any], key: str) -> str:
    value = form.get(key, "")
    if isinstance(value, (list, tuple)):
        return str(value[0]) if value else ""
    return "" if value is None else str(value)


def _parse_headers(text: str) -> dict[str, str]:
    try:
        parsed = json.loads(text)
    except ValueError:
        return {}
    if parsed is None:
        return {}
    if not isinstance(parsed, list):
        return {}
    for header in parsed:
        if header is None:
            continue
        if not isinstance(header, list) or not all(isinstance(part, str) for part in header):
            return {}
    return {header[0]: header[1] for header in parsed if header and len(header) >= 2}


def extract_forwarded_message(form: Mapping[str, Any]) -> ForwardedMessage:
    """Build a ForwardedMessage from posted form values.

    Values may be plain strings or lists of strings, as produced by
    ``urllib.parse.parse_qs``; the first value of a list is used.
    """
    timestamp_text = _form_get(form, "timestamp")
    seconds = int(timestamp_text) if _INTEGER.match(timestamp_text) else 0
    return ForwardedMessage(
        body_plain=_form_get(form, "body-plain"),
        from_=_form_get(form, "from"),
        message_headers=_parse_headers(_form_get(form, "message-headers")),
        recipient=_form_get(form, "recipient"),
        sender=_form_get(form, "sender"),
        signature=_form_get(form, "signature"),
        stripped_html=_form_get(form, "stripped-html"),
        stripped_text=_form_get(form, "stripped-text"),
        subject=_form_get(form, "subject"),
        timestamp=datetime.fromtimestamp(seconds, timezone.utc),
        token=_form_get(form, "token"),
    )


def route_create_fields(route: Route) -> list[tuple[str, str]]:
    """Form fields for creating a route."""
    fields = [
        ("priority", str(route.priority)),
        ("description", route.description),
        ("expression", route.expression),
    ]
    fields.extend(("action", action) for action in route.actions)
    return fields


def route_update_fields(route: Route) -> list[tuple[str, str]]:
    """Form fields for an in-place update; only non-empty fields are sent."""
    fields = []
    if route.priority:
        fields.append(("priority", str(route.priority)))
    if route.description:
        fields.append(("description", route.description))
    if route.expression:
        fields.append(("expression", route.expression))
    fields.extend(("action", action) for action in route.actions or [])
    return fields


RoutesFetcher = Callable[[int, int], "tuple[list[Route], int]"]


class RoutesPager:
    """Walks the route list by offset.

    ``fetch`` takes ``(skip, limit)`` and returns the page's routes together
    with the total number of routes. ``total_count`` is -1 until a page has
    been fetched.
    """

    def __init__(self, fetch: RoutesFetcher, limit: int = 0) -> None:
        self._fetch = fetch
        self.limit = limit or DEFAULT_ROUTES_LIMIT
        self.offset = 0
        self.total_count = -1
        self.items: list[Route] = []

    def _load(self, skip: int) -> list[Route]:
        self.items = []
        items, total = self._fetch(skip, self.limit)
        self.items = list(items)
        self.total_count = total
        return list(self.items)

    def first(self) -> list[Route]:
        """Fetch the first page and reset the pager to it."""
        page = self._load(0)
        self.offset = len(page)
        return page

    def next(self) -> list[Route] | None:
        """Fetch the next page; None when there are no more routes."""
        page = self._load(self.offset)
        if not page:
            return None
        self.offset += len(page)
        return page

    def previous(self) -> list[Route] | None:
        """Fetch the previous page; None before any page was fetched or when empty."""
        if self.total_count == -1:
            return None
        self.offset = max(self.offset - self.limit * 2, 0)
        return self._load(self.offset) or None

    def last(self) -> list[Route] | None:
        """Fetch the last page; None unless first() or next() was called before."""
        if self.total_count == -1:
            return None
        self.offset = max(self.total_count - self.limit, 0)
        return self._load(self.offset)

    def __iter__(self) -> Iterator[list[Route]]:
        while (page := self.next()) is not None:
            yield page