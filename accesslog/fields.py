from typing import Tuple

from .errors import MalformedFieldError


# Apache writes "-" for values it does not know.
NIL_LOG_ITEM = b"-"


def _quote(b: bytes) -> str:
    return repr(b.decode("utf-8", errors="replace"))


def extract_until(data: bytes, delimiter: bytes) -> Tuple[int, bytes]:
    """
    Extract the bytes up to the first `delimiter`.

    Returns (next_offset, token) where next_offset points just past the
    delimiter. Without a delimiter the whole input is the token and
    next_offset == len(data).
    """
    i = data.find(delimiter)
    if i == -1:
        return len(data), data

    return i + 1, data[:i]


def extract_wrapped_until(
    data: bytes,
    left: bytes,
    right: bytes,
    delimiter: bytes,
) -> Tuple[int, bytes]:
    """
    Extract the bytes enclosed by `left` and `right`, which must be
    followed by `delimiter`.

    `data` has to start with `left`. When `left == right` (quotes) the
    closing marker is searched after the opening one. A closing marker
    that is the last byte of the input needs no delimiter.

    Returns (next_offset, token) with next_offset past the delimiter (or
    past `right` at end of input). Raises MalformedFieldError otherwise.
    """
    if not data.startswith(left):
        raise MalformedFieldError(
            f"invalid start character {_quote(data[:1])}: "
            f"expecting starting character {_quote(left)}",
            raw=data,
        )

    if left == right:
        i = data.find(right, 1)
    else:
        i = data.find(right)

    if i == -1:
        raise MalformedFieldError(
            f"could not find end of sequence: "
            f"expecting terminating character {_quote(right)}",
            raw=data,
        )

    # closing marker ends the input
    if i == len(data) - 1:
        return len(data), data[1:i]

    if data[i + 1:i + 2] != delimiter:
        raise MalformedFieldError(
            f"end of sequence not followed by delimiter {_quote(delimiter)}",
            raw=data,
        )

    return i + 2, data[1:i]


def transform_nil_log_item(token: bytes) -> bytes:
    """Map the "-" placeholder to b""; anything else passes through."""
    if token == NIL_LOG_ITEM:
        return b""

    return token
