import pytest

from accesslog.errors import MalformedFieldError
from accesslog.fields import (
    extract_until,
    extract_wrapped_until,
    transform_nil_log_item,
)


# ---------- extract_until ----------

def test_extract_until_delimiter():
    i, token = extract_until(b"10.0.0.1 - -", b" ")
    assert token == b"10.0.0.1"
    assert i == 9


def test_extract_until_without_delimiter_consumes_everything():
    data = b"Mozilla/5.0"
    i, token = extract_until(data, b" ")
    assert token == data
    assert i == len(data)


def test_extract_until_leading_delimiter_gives_empty_token():
    assert extract_until(b" 200", b" ") == (1, b"")


# ---------- extract_wrapped_until ----------

def test_quoted_field_followed_by_delimiter():
    data = b'"GET / HTTP/1.1" 200'
    i, token = extract_wrapped_until(data, b'"', b'"', b" ")
    assert token == b"GET / HTTP/1.1"
    assert data[i:] == b"200"


def test_bracketed_field():
    data = b"[16/Dec/2018:06:25:09 +0000] \"GET"
    i, token = extract_wrapped_until(data, b"[", b"]", b" ")
    assert token == b"16/Dec/2018:06:25:09 +0000"
    assert data[i:] == b'"GET'


def test_closing_marker_at_end_needs_no_delimiter():
    data = b'"Mozilla/5.0"'
    i, token = extract_wrapped_until(data, b'"', b'"', b" ")
    assert token == b"Mozilla/5.0"
    assert i == len(data)


def test_empty_quoted_field():
    i, token = extract_wrapped_until(b'"" x', b'"', b'"', b" ")
    assert token == b""
    assert i == 3


def test_wrong_start_character():
    with pytest.raises(MalformedFieldError) as exc:
        extract_wrapped_until(b"GET /\" 200", b'"', b'"', b" ")
    assert str(exc.value) == (
        "invalid start character 'G': expecting starting character '\"'"
    )
    assert exc.value.field is None


def test_empty_input_is_malformed():
    with pytest.raises(MalformedFieldError):
        extract_wrapped_until(b"", b"[", b"]", b" ")


def test_missing_closing_marker():
    with pytest.raises(MalformedFieldError) as exc:
        extract_wrapped_until(b'"GET / HTTP/1.1 200', b'"', b'"', b" ")
    assert "could not find end" in str(exc.value)


def test_lone_quote_is_not_its_own_close():
    with pytest.raises(MalformedFieldError):
        extract_wrapped_until(b'"', b'"', b'"', b" ")


def test_closing_marker_not_followed_by_delimiter():
    with pytest.raises(MalformedFieldError) as exc:
        extract_wrapped_until(b"[16/Dec/2018]x", b"[", b"]", b" ")
    assert "delimiter" in str(exc.value)
    assert exc.value.raw == b"[16/Dec/2018]x"


# ---------- transform_nil_log_item ----------

def test_placeholder_becomes_empty():
    assert transform_nil_log_item(b"-") == b""


@pytest.mark.parametrize("token", [b"-foo", b"--", b"frank", b""])
def test_other_tokens_pass_through(token):
    assert transform_nil_log_item(token) == token
