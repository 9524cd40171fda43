import hashlib
import hmac
from urllib.parse import parse_qs, urlencode

import pytest

from mailwire.webhooks import (
    Signature,
    flatten_webhooks,
    verify_webhook_form,
    verify_webhook_signature,
    webhook_create_fields,
    webhook_update_fields,
    webhook_urls,
)

API_KEY = "placeholder"
SIGNED_CASES = [True, False]


def signature_fields(key, signed):
    fields = {
        "token": "token",
        "timestamp": "123456789",
        "signature": b"badsignature".hex(),
    }
    if signed:
        mac = hmac.new(key.encode(), b"123456789" + b"token", hashlib.sha256)
        fields["signature"] = mac.hexdigest()
    return fields


@pytest.mark.parametrize("signed", SIGNED_CASES)
def test_verify_webhook_signature(signed):
    fields = signature_fields(API_KEY, signed)
    sig = Signature(
        timestamp=fields["timestamp"], token=fields["token"], signature=fields["signature"]
    )
    assert verify_webhook_signature(API_KEY, sig) is signed


@pytest.mark.parametrize("signed", SIGNED_CASES)
def test_verify_webhook_form(signed):
    fields = signature_fields(API_KEY, signed)
    assert verify_webhook_form(API_KEY, fields) is signed


@pytest.mark.parametrize("signed", SIGNED_CASES)
def test_verify_webhook_parsed_form(signed):
    form = parse_qs(urlencode(signature_fields(API_KEY, signed)))
    assert verify_webhook_form(API_KEY, form) is signed


def test_wrong_key_fails():
    fields = signature_fields(API_KEY, True)
    assert verify_webhook_form("secret", fields) is False


def test_invalid_hex_raises():
    sig = Signature(timestamp="123456789", token="token", signature="abc")
    with pytest.raises(ValueError):
        verify_webhook_signature(API_KEY, sig)


def test_missing_signature_is_not_verified():
    assert verify_webhook_form(API_KEY, {"timestamp": "123456789", "token": "token"}) is False


LIST_BODY = {
    "webhooks": {
        "new-webhook": {"url": "http://example.com/new"},
        "legacy-webhook": {"urls": ["http://example.com/legacy"]},
        "unset": {},
    }
}


def test_get_webhook():
    hooks = flatten_webhooks(LIST_BODY)
    assert len(hooks) == 2
    urls = webhook_urls("new-webhook", {"webhook": {"url": "http://example.com/new"}})
    assert urls == ["http://example.com/new"]


def test_flatten_merges_url_and_urls():
    body = {"webhooks": {"deliver": {"url": "http://example.com/a", "urls": ["http://example.com/b"]}}}
    assert flatten_webhooks(body) == {"deliver": ["http://example.com/a", "http://example.com/b"]}


def test_webhook_urls_from_list_field():
    urls = ["http://example.com/messages"]
    assert webhook_urls("deliver", {"webhook": {"urls": urls}}) == urls


def test_webhook_urls_without_any_raises():
    with pytest.raises(ValueError, match="webhook 'deliver' returned no urls"):
        webhook_urls("deliver", {"webhook": {}})


def test_create_and_update_fields():
    urls = ["http://example.com/webhook"]
    assert webhook_create_fields("deliver", urls) == [
        ("id", "deliver"),
        ("url", "http://example.com/webhook"),
    ]
    updated = ["http://example.com/messages", "http://example.com/more"]
    assert webhook_update_fields(updated) == [("url", u) for u in updated]