# mailwire

`mailwire` is a client-side toolkit for a transactional e-mail HTTP API. It
builds outgoing messages and turns them into form fields. It parses the API's
JSON responses into dataclasses, walks paged listings and checks webhook
signatures.

The package has no dependencies outside the standard library.

## Installation

```
pip install mailwire
```

To run the test suite, install the test extra:

```
pip install "mailwire[test]"
pytest
```

## Composing a message

```python
from mailwire.messages import new_message, check_send_target

check_send_target("example.com", "placeholder")

msg = new_message("Sender <sender@example.com>", "Hello", "Plain text body",
                  "alice@example.com")
msg.add_cc("bob@example.com")
msg.set_html("<p>Hello</p>")
msg.add_tag("newsletter")
msg.set_reply_to("support@example.com")

payload = msg.build_payload()   # list of FormField, ready to post
endpoint = msg.endpoint()       # "messages" or "messages.mime"
```

`check_send_target(domain, api_key)` raises `ValueError` in three cases: the
domain is empty, the domain contains characters such as `@`, `:` or `;`, or
the API key is empty.

The message enforces these rules:

- `add_recipient` raises `ValueError` once the message has 1000 recipients.
  To, Cc and Bcc all count toward that total. A MIME message counts ten extra
  recipients.
- `add_tag` raises `ValueError` once three tags are attached.
- `build_payload` raises `InvalidMessageError` (from `mailwire.errors`) if the
  message is incomplete. A plain message needs a sender, at least one
  recipient, and a text body, an HTML body or a template. A MIME message needs
  a body.

`new_mime_message(body, *to)` wraps a prepared MIME document given as a binary
stream. On a MIME message, `add_cc`, `add_bcc`, `set_html`, `set_amp_html` and
`set_template` do nothing.

Each `FormField` carries either a plain `value` or file content. File content
is one of `path`, `data` or `stream`, with a `filename` where one applies.
`is_file` tells the two kinds apart.

## Handling errors

`check_response(url, code, data)` raises `UnexpectedResponseError` if the status
is not 200, 202 or 204. `get_status_from_err(err)` returns the status such an
error carries, and -1 for any other exception.

```python
from mailwire.errors import check_response, get_status_from_err

try:
    check_response("https://api.example.com/v3/routes/x", 404, b"not found")
except Exception as err:
    assert get_status_from_err(err) == 404
```

## Paging through listings

`mailwire.pagination.PageIterator` follows the `paging` links (first, next,
previous, last) that list responses carry. You supply a `fetch(url)` function
that returns `(items, Paging or None)`:

```python
from mailwire.pagination import PageIterator, Paging, Tag

def fetch(url):
    body = get_json(url)            # your HTTP call
    return ([Tag.from_json(t) for t in body["items"]],
            Paging.from_json(body.get("paging")))

for page in PageIterator(fetch, "https://api.example.com/v3/example.com/tags"):
    ...
```

`next()` and `previous()` return `None` when there are no more pages. Calling
`last()` before the last link is known raises `ValueError`. Pass
`check_cursor=True` to stop at tag-list links that mark the end of the list.
`with_params(url, params)` adds query parameters to a URL.

`mailwire.routes.RoutesPager` pages through routes by offset. Its
`fetch(skip, limit)` function returns `(routes, total_count)`, and the default
page size is 100.

## Verifying webhooks

```python
from mailwire.webhooks import Signature, verify_webhook_signature

sig = Signature(timestamp="123456789", token="token", signature="...")
ok = verify_webhook_signature("placeholder", sig)
```

`verify_webhook_form(api_key, form)` does the same check on decoded form
values. Both raise `ValueError` if the signature is not valid hex.

`flatten_webhooks` and `webhook_urls` read webhook configuration responses.
`webhook_create_fields` and `webhook_update_fields` build the form fields.

## Other modules

- `mailwire.recipients`: `Recipient` and `parse_recipient` read and write
  `Name <address>` strings.
- `mailwire.rfc2822`: `parse_rfc2822` and `format_rfc2822` handle timestamps
  like `Thu, 13 Oct 2011 18:02:00 GMT`. `decode_rfc2822_json` and
  `encode_rfc2822_json` do the same for JSON strings.
- `mailwire.stored`: `StoredMessage`, `StoredMessageRaw`, `StoredAttachment`
  and `SendResponse` parse responses. `resend_fields` builds the fields for a
  resend.
- `mailwire.routes`: `Route` and `ForwardedMessage`.
  `extract_forwarded_message` reads posted form values.
  `route_create_fields` and `route_update_fields` build route fields.
- `mailwire.unsubscribes`: `Unsubscribe`, `unsubscribe_fields`,
  `unsubscribes_body` (a JSON body) and `unsubscribe_list_params`.
- `mailwire.templates`: `Template`, `TemplateVersion` and `TemplateEngine`.
  The field builders are `create_template_fields`, `update_template_fields`,
  `add_version_fields`, `update_version_fields` and `list_template_params`.
  `versions_from_list_response` reads a list of versions.
- `mailwire.pagination`: `Tag` and `tag_list_params` for the tag list.

## What it does not do

mailwire never sends a request. It has no HTTP client, no authentication
handling, no command-line tool and no test server. You perform each request
yourself, pass the status to `check_response`, and hand the decoded JSON to the
matching `from_json` method.

mailwire does not cover mailing-list members, spam complaints or sending
statistics.