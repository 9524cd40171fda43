"""Webhook signature checks and webhook configuration payloads."""

from __future__ import annotations

import hashlib
import hmac
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

_HEX = re.compile(r"(?:[0-9a-fA-F]{2})*\Z")


@dataclass
class Signature:
    """The signature part of a webhook POST body."""

    timestamp: str = ""
    token: str = ""
    signature: str = ""


def _verify(api_key: str, timestamp: str, token: str, signature_hex: str) -> bool:
    if not _HEX.match(signature_hex):
        raise ValueError(f"signature is not valid hex: {signature_hex!r}")
    provided = bytes.fromhex(signature_hex)
    digest = hmac.new(api_key.encode("utf-8"), (timestamp + token).encode("utf-8"), hashlib.sha256)
    calculated = digest.digest()
    if len(provided) != len(calculated):
        return False
    return hmac.compare_digest(provided, calculated)


def verify_webhook_signature(api_key: str, signature: Signature) -> bool:
    """Check a webhook signature against the HMAC-SHA256 of timestamp and token."""
    return _verify(api_key, signature.timestamp, signature.token, signature.signature)


def _form_value(form: Mapping[str, Any], key: str) -> str:
    value = form.get(key, "")
    if isinstance(value, (list, tuple)):
        return str(value[0]) if value else ""
    return str(value)


def verify_webhook_form(api_key: str, form: Mapping[str, Any]) -> bool:
    """Check the signature carried in a webhook's form fields."""
    return _verify(
        api_key,
        _form_value(form, "timestamp"),
        _form_value(form, "token"),
        _form_value(form, "signature"),
    )


def _urls_of(entry: Mapping[str, Any]) -> list[str]:
    urls = []
    if entry.get("url"):
        urls.append(entry["url"])
    urls.extend(entry.get("urls") or [])
    return urls


def flatten_webhooks(body: Mapping[str, Any]) -> dict[str, list[str]]:
    """Turn a webhook list response into a mapping of kind to URLs."""
    hooks = {}
    for kind, entry in (body.get("webhooks") or {}).items():
        urls = _urls_of(entry or {})
        if urls:
            hooks[kind] = urls
    return hooks


def webhook_urls(kind: str, body: Mapping[str, Any]) -> list[str]:
    """Return the URLs of a single webhook response; raise if it has none."""
    entry = body.get("webhook") or {}
    if entry.get("url"):
        return [entry["url"]]
    if entry.get("urls"):
        return list(entry["urls"])
    raise ValueError(f"webhook '{kind}' returned no urls")


def webhook_create_fields(kind: str, urls: Iterable[str]) -> list[tuple[str, str]]:
    """Form fields for creating a webhook."""
    return [("id", kind), *(("url", url) for url in urls)]


def webhook_update_fields(urls: Iterable[str]) -> list[tuple[str, str]]:
    """Form fields for replacing a webhook's URLs."""
    return [("url", url) for url in urls]