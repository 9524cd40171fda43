"""Stored (received) messages and the responses to send requests."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


def _text(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    return "" if value is None else str(value)


def _int(data: Mapping[str, Any], key: str) -> int:
    value = data.get(key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"expected a number for {key!r}, got {value!r}")
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"expected an integer for {key!r}, got {value!r}")
    return int(value)


@dataclass
class StoredAttachment:
    """An attachment of a stored message, or an entry of its content-id map."""

    size: int = 0
    url: str = ""
    name: str = ""
    content_type: str = ""

    @classmethod
    def from_json(cls, data: Mapping[str, Any] | None) -> "StoredAttachment":
        data = data or {}
        return cls(
            size=_int(data, "size"),
            url=_text(data, "url"),
            name=_text(data, "name"),
            content_type=_text(data, "content-type"),
        )


@dataclass
class StoredMessage:
    """The parsed content of a message received by the account.

    ``message_headers`` keeps the wire form: a list of ``[name, value]`` pairs,
    in order, since header names may repeat.
    """

    recipients: str = ""
    sender: str = ""
    from_: str = ""
    subject: str = ""
    body_plain: str = ""
    stripped_text: str = ""
    stripped_signature: str = ""
    body_html: str = ""
    stripped_html: str = ""
    attachments: list[StoredAttachment] = field(default_factory=list)
    message_url: str = ""
    content_id_map: dict[str, StoredAttachment] = field(default_factory=dict)
    message_headers: list[list[str]] = field(default_factory=list)

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "StoredMessage":
        headers = []
        for pair in data.get("message-headers") or []:
            if not isinstance(pair, (list, tuple)):
                raise ValueError(f"message header is not a list: {pair!r}")
            headers.append([str(part) for part in pair])
        return cls(
            recipients=_text(data, "recipients"),
            sender=_text(data, "sender"),
            from_=_text(data, "from"),
            subject=_text(data, "subject"),
            body_plain=_text(data, "body-plain"),
            stripped_text=_text(data, "stripped-text"),
            stripped_signature=_text(data, "stripped-signature"),
            body_html=_text(data, "body-html"),
            stripped_html=_text(data, "stripped-html"),
            attachments=[
                StoredAttachment.from_json(item) for item in data.get("attachments") or []
            ],
            message_url=_text(data, "message-url"),
            content_id_map={
                key: StoredAttachment.from_json(value)
                for key, value in (data.get("content-id-map") or {}).items()
            },
            message_headers=headers,
        )


@dataclass
class StoredMessageRaw:
    """A received message with its unparsed MIME body."""

    recipients: str = ""
    sender: str = ""
    from_: str = ""
    subject: str = ""
    body_mime: str = ""

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "StoredMessageRaw":
        return cls(
            recipients=_text(data, "recipients"),
            sender=_text(data, "sender"),
            from_=_text(data, "from"),
            subject=_text(data, "subject"),
            body_mime=_text(data, "body-mime"),
        )


@dataclass
class SendResponse:
    """The status message and message ID returned when a message is queued."""

    message: str = ""
    id: str = ""

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "SendResponse":
        return cls(message=_text(data, "message"), id=_text(data, "id"))


def resend_fields(*recipients: str) -> list[tuple[str, str]]:
    """Form fields for resending a stored message; at least one recipient is needed."""
    if not recipients:
        raise ValueError("must provide at least one recipient")
    return [("to", recipient) for recipient in recipients]