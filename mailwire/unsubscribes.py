"""Unsubscribe records and the payloads for managing them."""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from .rfc2822 import decode_rfc2822_json, encode_rfc2822_json

UNSUBSCRIBES_ENDPOINT = "unsubscribes"


@dataclass
class Unsubscribe:
    """An address that has unsubscribed, optionally only from some tags."""

    created_at: Optional[datetime] = None
    tags: list[str] = field(default_factory=list)
    id: str = ""
    address: str = ""

    @classmethod
    def from_json(cls, data: Mapping[str, Any] | None) -> "Unsubscribe":
        data = data or {}
        created = data.get("created_at")
        return cls(
            created_at=None if created is None else decode_rfc2822_json(json.dumps(created)),
            tags=list(data.get("tags") or []),
            id=data.get("id") or "",
            address=data.get("address") or "",
        )

    def to_json(self) -> dict[str, Any]:
        """Encode the record; the address is always present, other fields only when set."""
        result: dict[str, Any] = {}
        if self.created_at is not None:
            result["created_at"] = json.loads(encode_rfc2822_json(self.created_at))
        if self.tags:
            result["tags"] = list(self.tags)
        if self.id:
            result["id"] = self.id
        result["address"] = self.address
        return result


def unsubscribe_fields(address: str, tag: str) -> list[tuple[str, str]]:
    """Form fields for adding one address to the unsubscribe table."""
    return [("address", address), ("tag", tag)]


def unsubscribes_body(unsubscribes: Iterable[Unsubscribe]) -> str:
    """JSON body for adding many addresses to the unsubscribe table."""
    return json.dumps([item.to_json() for item in unsubscribes], ensure_ascii=False)


def unsubscribe_list_params(limit: int = 0) -> list[tuple[str, str]]:
    """Query parameters for listing unsubscribes."""
    return [("limit", str(limit))] if limit else []