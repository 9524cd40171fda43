import pytest

from mailwire.stored import (
    SendResponse,
    StoredAttachment,
    StoredMessage,
    StoredMessageRaw,
    resend_fields,
)


SAMPLE = {
    "recipients": "alice@example.com",
    "sender": "bob@example.com",
    "from": "Bob <bob@example.com>",
    "subject": "Hi Alice",
    "body-plain": "Hello",
    "stripped-text": "Hello",
    "stripped-signature": "Bob",
    "body-html": "<p>Hello</p>",
    "stripped-html": "<p>Hello</p>",
    "attachments": [
        {"size": 139214, "url": "https://storage.example.com/a", "name": "doc.pdf",
         "content-type": "application/pdf"}
    ],
    "message-url": "https://storage.example.com/m",
    "content-id-map": {
        "<img1>": {"url": "https://storage.example.com/i", "content-type": "image/png",
                   "name": "logo.png", "size": 42}
    },
    "message-headers": [["To", "alice@example.com"], ["Received", "a"], ["Received", "b"]],
}


def test_stored_message_fields():
    msg = StoredMessage.from_json(SAMPLE)
    assert msg.recipients == "alice@example.com"
    assert msg.from_ == "Bob <bob@example.com>"
    assert msg.body_html == "<p>Hello</p>"
    assert msg.stripped_signature == "Bob"
    assert msg.message_url == "https://storage.example.com/m"


def test_stored_message_attachments():
    msg = StoredMessage.from_json(SAMPLE)
    assert msg.attachments == [
        StoredAttachment(139214, "https://storage.example.com/a", "doc.pdf", "application/pdf")
    ]
    assert msg.content_id_map["<img1>"].name == "logo.png"
    assert msg.content_id_map["<img1>"].size == 42


def test_stored_message_keeps_repeated_headers_in_order():
    msg = StoredMessage.from_json(SAMPLE)
    assert [h for h in msg.message_headers if h[0] == "Received"] == [
        ["Received", "a"],
        ["Received", "b"],
    ]


def test_stored_message_empty_and_null():
    msg = StoredMessage.from_json({"subject": None, "attachments": None})
    assert msg == StoredMessage()


def test_bad_header_rejected():
    with pytest.raises(ValueError):
        StoredMessage.from_json({"message-headers": ["To"]})


def test_attachment_bad_size_rejected():
    with pytest.raises(ValueError):
        StoredAttachment.from_json({"size": "big"})


def test_stored_message_raw():
    raw = StoredMessageRaw.from_json(
        {"recipients": "alice@example.com", "sender": "bob@example.com",
         "from": "bob@example.com", "subject": "s", "body-mime": "MIME body"}
    )
    assert raw.body_mime == "MIME body"
    assert raw.from_ == "bob@example.com"


def test_send_response():
    resp = SendResponse.from_json({"message": "Queued. Thank you.", "id": "<1@example.com>"})
    assert resp.message == "Queued. Thank you."
    assert resp.id == "<1@example.com>"


def test_resend_fields():
    assert resend_fields("a@example.com", "b@example.com") == [
        ("to", "a@example.com"),
        ("to", "b@example.com"),
    ]


def test_resend_requires_recipient():
    with pytest.raises(ValueError, match="must provide at least one recipient"):
        resend_fields()