import pytest

from mailwire.errors import (
    EXPECTED_STATUSES,
    InvalidMessageError,
    UnexpectedResponseError,
    check_response,
    get_status_from_err,
    is_expected_status,
)

URL = "https://api.example.com/v3/messages"


@pytest.mark.parametrize("code", [200, 202, 204])
def test_good_statuses_are_expected(code):
    assert is_expected_status(code) is True


@pytest.mark.parametrize("code", [201, 400, 404, 500])
def test_other_statuses_are_not_expected(code):
    assert is_expected_status(code) is False


def test_check_response_raises_with_details():
    with pytest.raises(UnexpectedResponseError) as info:
        check_response(URL, 404, b"not found")
    err = info.value
    assert err.actual == 404
    assert err.url == URL
    assert err.expected == list(EXPECTED_STATUSES)
    assert err.data == b"not found"


def test_error_string_is_logfmt_like():
    err = UnexpectedResponseError(URL, [200, 202, 204], 400, "Domain not found: example.com")
    text = str(err)
    assert text.startswith(f"UnexpectedResponseError URL={URL} ")
    assert "Got=400" in text
    assert text.endswith("Error: Domain not found: example.com")


def test_string_data_is_stored_as_bytes():
    err = UnexpectedResponseError(URL, [200], 500, "boom")
    assert err.data == b"boom"


def test_status_from_unexpected_response():
    with pytest.raises(UnexpectedResponseError) as info:
        check_response(URL, 404)
    assert get_status_from_err(info.value) == 404


def test_status_from_other_error_is_minus_one():
    assert get_status_from_err(ValueError("x")) == -1
    assert get_status_from_err(None) == -1


def test_invalid_message_error_text():
    assert str(InvalidMessageError()) == "message not valid"
    assert isinstance(InvalidMessageError(), ValueError)