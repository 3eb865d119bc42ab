import re
from typing import Any, Callable, Dict, Union

from .errors import (
    ConversionError,
    InsufficientFieldsError,
    MalformedFieldError,
    RequestLineError,
)
from .fields import (
    NIL_LOG_ITEM,
    extract_until,
    extract_wrapped_until,
    transform_nil_log_item,
)
from .states import ParseState
from .types import LogEntry, Request


SPACE = b" "
QUOTE = b'"'

# Same rule as a plain decimal integer: optional sign, ASCII digits only.
INTEGER_RE = re.compile(rb"[+-]?[0-9]+")

# A handler consumes one field from `data`, stores it in `fields`
# and returns what is left of the line.
Handler = Callable[[bytes, Dict[str, Any]], bytes]


def _text(b: bytes) -> str:
    return b.decode("utf-8", errors="replace")


# -----------------------------
# REQUEST LINE PARSER
# -----------------------------

def parse_request(data: bytes) -> Request:
    """
    Parse an unwrapped request line like:
      GET /index.html HTTP/1.1

    A bare "-" is a request Apache could not read and yields an empty
    Request. Anything else must be exactly three tokens.
    """
    if data == NIL_LOG_ITEM:
        return Request()

    parts = data.split()
    if len(parts) != 3:
        raise RequestLineError(
            f"failed parsing original request: {_text(data)!r}",
            field=ParseState.REQUEST.field,
            raw=data,
        )

    method, uri, version = (_text(p) for p in parts)
    return Request(method=method, uri=uri, version=version)


# -----------------------------
# FIELD HANDLERS
# -----------------------------

def _wrapped(data: bytes, left: bytes, right: bytes, state: ParseState):
    try:
        return extract_wrapped_until(data, left, right, SPACE)
    except MalformedFieldError as e:
        raise MalformedFieldError(
            f"failed to parse {state.field}: {e}",
            field=state.field,
            raw=e.raw,
        ) from e


def _to_int(token: bytes, state: ParseState) -> int:
    if not INTEGER_RE.fullmatch(token):
        raise ConversionError(
            f"failed to convert {state.field} {_text(token)!r} to integer",
            field=state.field,
            raw=token,
        )
    return int(token)


def _parse_hostname(data: bytes, fields: Dict[str, Any]) -> bytes:
    i, token = extract_until(data, SPACE)
    fields["remote_hostname"] = _text(transform_nil_log_item(token))
    return data[i:]


def _parse_logname(data: bytes, fields: Dict[str, Any]) -> bytes:
    i, token = extract_until(data, SPACE)
    fields["remote_logname"] = _text(transform_nil_log_item(token))
    return data[i:]


def _parse_user(data: bytes, fields: Dict[str, Any]) -> bytes:
    i, token = extract_until(data, SPACE)
    fields["remote_user"] = _text(transform_nil_log_item(token))
    return data[i:]


def _parse_time(data: bytes, fields: Dict[str, Any]) -> bytes:
    i, token = _wrapped(data, b"[", b"]", ParseState.TIME)
    fields["time"] = _text(token)
    return data[i:]


def _parse_request(data: bytes, fields: Dict[str, Any]) -> bytes:
    i, token = _wrapped(data, QUOTE, QUOTE, ParseState.REQUEST)
    fields["request"] = parse_request(token)
    return data[i:]


def _parse_status(data: bytes, fields: Dict[str, Any]) -> bytes:
    i, token = extract_until(data, SPACE)
    fields["status_code"] = _to_int(token, ParseState.STATUS)
    return data[i:]


def _parse_bytes_sent(data: bytes, fields: Dict[str, Any]) -> bytes:
    i, token = extract_until(data, SPACE)
    fields["bytes_sent"] = _to_int(token, ParseState.BYTES_SENT)
    return data[i:]


def _parse_referer(data: bytes, fields: Dict[str, Any]) -> bytes:
    # not placeholder-normalized: a "-" referer stays "-"
    i, token = _wrapped(data, QUOTE, QUOTE, ParseState.REFERER)
    fields["referer"] = _text(token)
    return data[i:]


def _parse_user_agent(data: bytes, fields: Dict[str, Any]) -> bytes:
    # take the rest
    fields["user_agent"] = _text(data.strip(QUOTE))
    return b""


HANDLERS: Dict[ParseState, Handler] = {
    ParseState.HOSTNAME: _parse_hostname,
    ParseState.LOGNAME: _parse_logname,
    ParseState.USER: _parse_user,
    ParseState.TIME: _parse_time,
    ParseState.REQUEST: _parse_request,
    ParseState.STATUS: _parse_status,
    ParseState.BYTES_SENT: _parse_bytes_sent,
    ParseState.REFERER: _parse_referer,
    ParseState.USER_AGENT: _parse_user_agent,
}


# -----------------------------
# LOG LINE PARSER
# -----------------------------

def parse_line(line: Union[bytes, str]) -> LogEntry:
    """
    Parse one combined-format log line into a LogEntry.

    Example:
      73.92.251.192 - - [16/Dec/2018:06:25:09 +0000] "GET / HTTP/1.1" 200 14687 "https://www.google.com/" "Mozilla/5.0"

    Fields are consumed left to right, one ParseState at a time, without
    backtracking. Raises a ParseError subclass naming the failing field;
    a line that runs out before the user agent raises
    InsufficientFieldsError.
    """
    if isinstance(line, str):
        line = line.encode("utf-8")

    fields: Dict[str, Any] = {}
    data = line
    state = ParseState.HOSTNAME

    while state is not ParseState.DONE:
        if not data:
            raise InsufficientFieldsError(
                f"line ended before {state.field}",
                field=state.field,
                raw=line,
            )

        data = HANDLERS[state](data, fields)
        state = state.next

    return LogEntry(**fields)
