"""Outgoing messages: plain API-built messages and pre-packaged MIME messages."""

from __future__ import annotations

import enum
import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, BinaryIO, Optional

from .errors import InvalidMessageError
from .rfc2822 import format_rfc2822

MAX_NUMBER_OF_RECIPIENTS = 1000
MAX_NUMBER_OF_TAGS = 3
MAX_NUMBER_OF_CAMPAIGNS = 3
MESSAGES_ENDPOINT = "messages"
MIME_MESSAGES_ENDPOINT = "messages.mime"
_MIME_EXTRA_RECIPIENTS = 10
_INVALID_DOMAIN_CHARS = frozenset(":&'@(),!?#;%+=<>")


class MessageKind(enum.Enum):
    """Whether a message is assembled by the API or sent as ready MIME."""

    PLAIN = "plain"
    MIME = "mime"


@dataclass(frozen=True)
class FormField:
    """One field of the multipart form sent with a message.

    Plain fields carry ``value``; file fields carry one of ``path``, ``data``
    or ``stream`` together with a ``filename`` where one applies.
    """

    name: str
    value: str = ""
    filename: Optional[str] = None
    path: Optional[str] = None
    data: Optional[bytes] = None
    stream: Optional[BinaryIO] = None

    @property
    def is_file(self) -> bool:
        return self.path is not None or self.data is not None or self.stream is not None


@dataclass
class TrackingOptions:
    """Tracking, click tracking and open tracking settings applied together."""

    tracking: bool = False
    tracking_clicks: str = ""
    tracking_opens: bool = False


def yes_no(value: bool) -> str:
    """Render a boolean as the API's ``yes``/``no``."""
    return "yes" if value else "no"


def true_false(value: bool) -> str:
    """Render a boolean as ``true``/``false``."""
    return "true" if value else "false"


def validate_string_list(items: Optional[list[str]], require_one: bool) -> bool:
    """True if the list exists with only non-empty items, or is absent and not required."""
    if items is None:
        return not require_one
    if any(item == "" for item in items):
        return False
    return bool(items)


def check_send_target(domain: str, api_key: str) -> None:
    """Raise ValueError unless a domain and an API key fit for sending are given."""
    if not domain:
        raise ValueError("you must provide a valid domain before calling Send()")
    if _INVALID_DOMAIN_CHARS.intersection(domain):
        raise ValueError("you called Send() with a domain that contains invalid characters")
    if not api_key:
        raise ValueError("you must provide a valid api-key before calling Send()")


def _dumps(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), sort_keys=True, ensure_ascii=False)


@dataclass
class Message:
    """An e-mail message together with its sending options."""

    kind: MessageKind = MessageKind.PLAIN
    from_: str = ""
    subject: str = ""
    text: str = ""
    html: str = ""
    amp_html: str = ""
    template: str = ""
    body: Optional[BinaryIO] = None
    to: list[str] = field(default_factory=list)
    cc: list[str] = field(default_factory=list)
    bcc: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    campaigns: list[str] = field(default_factory=list)
    attachments: list[str] = field(default_factory=list)
    reader_attachments: list[tuple[str, BinaryIO]] = field(default_factory=list)
    buffer_attachments: list[tuple[str, bytes]] = field(default_factory=list)
    inlines: list[str] = field(default_factory=list)
    reader_inlines: list[tuple[str, BinaryIO]] = field(default_factory=list)
    headers: dict[str, str] = field(default_factory=dict)
    variables: dict[str, str] = field(default_factory=dict)
    template_variables: dict[str, Any] = field(default_factory=dict)
    recipient_variables: dict[str, dict[str, Any]] = field(default_factory=dict)
    dkim: Optional[bool] = None
    delivery_time: Optional[datetime] = None
    native_send: bool = False
    test_mode: bool = False
    tracking: Optional[bool] = None
    tracking_clicks: Optional[str] = None
    tracking_opens: Optional[bool] = None
    require_tls: bool = False
    skip_verification: bool = False
    domain: str = ""
    template_version: str = ""
    template_render_text: bool = False

    @property
    def is_mime(self) -> bool:
        return self.kind is MessageKind.MIME

    def recipient_count(self) -> int:
        """Count To, Cc and Bcc recipients; MIME messages assume ten extra."""
        if self.is_mime:
            return len(self.to) + _MIME_EXTRA_RECIPIENTS
        return len(self.to) + len(self.cc) + len(self.bcc)

    def add_recipient(self, recipient: str, variables: Optional[dict[str, Any]] = None) -> None:
        """Add a To recipient, optionally with per-recipient variables."""
        if self.recipient_count() >= MAX_NUMBER_OF_RECIPIENTS:
            raise ValueError(f"recipient limit exceeded (max {MAX_NUMBER_OF_RECIPIENTS})")
        self.to.append(recipient)
        if variables is not None:
            self.recipient_variables[recipient] = variables

    def add_cc(self, recipient: str) -> None:
        """Add a Cc recipient; ignored for MIME messages."""
        if not self.is_mime:
            self.cc.append(recipient)

    def add_bcc(self, recipient: str) -> None:
        """Add a Bcc recipient; ignored for MIME messages."""
        if not self.is_mime:
            self.bcc.append(recipient)

    def set_html(self, html: str) -> None:
        """Set the HTML body; ignored for MIME messages."""
        if not self.is_mime:
            self.html = html

    def set_amp_html(self, html: str) -> None:
        """Set the AMP-for-email body; ignored for MIME messages."""
        if not self.is_mime:
            self.amp_html = html

    def set_template(self, name: str) -> None:
        """Use a stored template; ignored for MIME messages."""
        if not self.is_mime:
            self.template = name

    def set_reply_to(self, recipient: str) -> None:
        self.add_header("Reply-To", recipient)

    def add_tag(self, *tags: str) -> None:
        """Attach tags; raises once the tag limit has been reached."""
        if len(self.tags) >= MAX_NUMBER_OF_TAGS:
            raise ValueError(
                f"cannot add any new tags. Message tag limit ({MAX_NUMBER_OF_TAGS}) reached"
            )
        self.tags.extend(tags)

    def add_campaign(self, campaign: str) -> None:
        self.campaigns.append(campaign)

    def add_attachment(self, path: str) -> None:
        """Attach a file from the local filesystem."""
        self.attachments.append(path)

    def add_buffer_attachment(self, filename: str, data: bytes) -> None:
        self.buffer_attachments.append((filename, bytes(data)))

    def add_reader_attachment(self, filename: str, stream: BinaryIO) -> None:
        self.reader_attachments.append((filename, stream))

    def add_inline(self, path: str) -> None:
        """Attach a local file inline, e.g. an image referenced by the HTML body."""
        self.inlines.append(path)

    def add_reader_inline(self, filename: str, stream: BinaryIO) -> None:
        self.reader_inlines.append((filename, stream))

    def add_header(self, header: str, value: str) -> None:
        self.headers[header] = value

    def add_variable(self, name: str, value: Any) -> None:
        """Attach a variable; strings are kept as-is, other values JSON-encoded."""
        self.variables[name] = value if isinstance(value, str) else _dumps(value)

    def add_template_variable(self, name: str, value: Any) -> None:
        self.template_variables[name] = value

    def set_tracking_options(self, options: TrackingOptions) -> None:
        self.tracking = options.tracking
        self.tracking_clicks = options.tracking_clicks
        self.tracking_opens = options.tracking_opens

    def _specific_is_valid(self) -> bool:
        if self.is_mime:
            return self.body is not None
        if not self.from_:
            return False
        if not validate_string_list(self.cc or None, False):
            return False
        if not validate_string_list(self.bcc or None, False):
            return False
        if self.template:
            return True
        return bool(self.text or self.html)

    def is_valid(self) -> bool:
        """True if the message is complete enough to send."""
        if not self._specific_is_valid():
            return False
        if self.recipient_count() == 0:
            return False
        if not validate_string_list(self.tags or None, False):
            return False
        campaigns = self.campaigns or None
        if not validate_string_list(campaigns, False) or len(self.campaigns) > MAX_NUMBER_OF_CAMPAIGNS:
            return False
        return True

    def endpoint(self) -> str:
        return MIME_MESSAGES_ENDPOINT if self.is_mime else MESSAGES_ENDPOINT

    def _specific_fields(self) -> list[FormField]:
        if self.is_mime:
            return [FormField("message", filename="message.mime", stream=self.body)]
        fields = [
            FormField("from", self.from_),
            FormField("subject", self.subject),
            FormField("text", self.text),
        ]
        fields += [FormField("cc", cc) for cc in self.cc]
        fields += [FormField("bcc", bcc) for bcc in self.bcc]
        if self.html:
            fields.append(FormField("html", self.html))
        if self.template:
            fields.append(FormField("template", self.template))
        if self.amp_html:
            fields.append(FormField("amp-html", self.amp_html))
        return fields

    def build_payload(self) -> list[FormField]:
        """Build the form fields for sending; raises InvalidMessageError if incomplete."""
        if not self.is_valid():
            raise InvalidMessageError()
        fields = self._specific_fields()
        fields += [FormField("to", to) for to in self.to]
        fields += [FormField("o:tag", tag) for tag in self.tags]
        fields += [FormField("o:campaign", campaign) for campaign in self.campaigns]
        if self.dkim is not None:
            fields.append(FormField("o:dkim", yes_no(self.dkim)))
        if self.delivery_time is not None:
            fields.append(FormField("o:deliverytime", format_rfc2822(self.delivery_time)))
        if self.native_send:
            fields.append(FormField("o:native-send", "yes"))
        if self.test_mode:
            fields.append(FormField("o:testmode", "yes"))
        if self.tracking is not None:
            fields.append(FormField("o:tracking", yes_no(self.tracking)))
        if self.tracking_clicks is not None:
            fields.append(FormField("o:tracking-clicks", self.tracking_clicks))
        if self.tracking_opens is not None:
            fields.append(FormField("o:tracking-opens", yes_no(self.tracking_opens)))
        if self.require_tls:
            fields.append(FormField("o:require-tls", true_false(self.require_tls)))
        if self.skip_verification:
            fields.append(FormField("o:skip-verification", true_false(self.skip_verification)))
        fields += [FormField("h:" + name, value) for name, value in self.headers.items()]
        fields += [FormField("v:" + name, value) for name, value in self.variables.items()]
        if self.template_variables:
            fields.append(FormField("h:X-Mailgun-Variables", _dumps(self.template_variables)))
        if self.recipient_variables:
            fields.append(FormField("recipient-variables", _dumps(self.recipient_variables)))
        fields += [FormField("attachment", path=path) for path in self.attachments]
        fields += [
            FormField("attachment", filename=name, stream=stream)
            for name, stream in self.reader_attachments
        ]
        fields += [
            FormField("attachment", filename=name, data=data)
            for name, data in self.buffer_attachments
        ]
        fields += [FormField("inline", path=path) for path in self.inlines]
        fields += [
            FormField("inline", filename=name, stream=stream) for name, stream in self.reader_inlines
        ]
        if self.template_version:
            fields.append(FormField("t:version", self.template_version))
        if self.template_render_text:
            fields.append(FormField("t:text", yes_no(self.template_render_text)))
        return fields


def new_message(from_: str, subject: str, text: str, *to: str) -> Message:
    """Create a plain message; recipients may also be added later."""
    return Message(kind=MessageKind.PLAIN, from_=from_, subject=subject, text=text, to=list(to))


def new_mime_message(body: Optional[BinaryIO], *to: str) -> Message:
    """Create a message from a ready MIME body."""
    return Message(kind=MessageKind.MIME, body=body, to=list(to))