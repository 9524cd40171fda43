"""Errors raised for unexpected API responses and invalid messages."""

from __future__ import annotations

from collections.abc import Iterable

VERSION = "4.6.1"
USER_AGENT = f"mailwire/{VERSION}"

# Status codes the API answers with when a request succeeded.
EXPECTED_STATUSES: tuple[int, ...] = (200, 202, 204)


class UnexpectedResponseError(Exception):
    """The API answered with a status code outside the expected set."""

    def __init__(self, url: str, expected: Iterable[int], actual: int, data: bytes | str) -> None:
        self.url = url
        self.expected = list(expected)
        self.actual = actual
        self.data = data.encode("utf-8") if isinstance(data, str) else bytes(data)
        super().__init__(url, self.expected, actual, self.data)

    def __str__(self) -> str:
        body = self.data.decode("utf-8", errors="replace")
        return (
            f"UnexpectedResponseError URL={self.url} ExpectedOneOf={self.expected!r} "
            f"Got={self.actual} Error: {body}"
        )


class InvalidMessageError(ValueError):
    """A message is not complete enough to be sent."""

    def __init__(self, message: str = "message not valid") -> None:
        super().__init__(message)


def is_expected_status(code: int) -> bool:
    """Return True if ``code`` is one of the known-good response codes."""
    return code in EXPECTED_STATUSES


def check_response(url: str, code: int, data: bytes | str = b"") -> None:
    """Raise UnexpectedResponseError unless ``code`` is a known-good status."""
    if not is_expected_status(code):
        raise UnexpectedResponseError(url, EXPECTED_STATUSES, code, data)


def get_status_from_err(err: BaseException | None) -> int:
    """Return the HTTP status carried by ``err``, or -1 if it carries none."""
    if isinstance(err, UnexpectedResponseError):
        return err.actual
    return -1