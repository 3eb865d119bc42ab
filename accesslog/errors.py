from typing import Optional


class AccessLogError(Exception):
    """Base class for everything this package raises."""


class ParseError(AccessLogError, ValueError):
    """
    A log line could not be parsed.

    `field` names the field being consumed when parsing failed (None when
    raised by a low-level extractor that does not know it), `raw` holds
    the offending bytes.
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        raw: Optional[bytes] = None,
    ):
        super().__init__(message)
        self.field = field
        self.raw = raw


class MalformedFieldError(ParseError):
    """A bracketed or quoted field is missing its markers or delimiter."""


class ConversionError(ParseError):
    """A numeric field is not a base-10 integer."""


class RequestLineError(ParseError):
    """The request line is not "METHOD URI VERSION"."""


class InsufficientFieldsError(ParseError):
    """The line ended before every field was read."""


class IngestError(AccessLogError):
    """
    Reading a log file failed, either on I/O or on one of its lines.

    The underlying exception is chained as __cause__.
    """

    def __init__(
        self,
        message: str,
        path: str,
        line_number: Optional[int] = None,
    ):
        super().__init__(message)
        self.path = path
        self.line_number = line_number


class IngestCancelled(AccessLogError):
    """Ingestion stopped because another file already failed."""

    def __init__(self, path: str):
        super().__init__(f"ingestion of {path!r} cancelled")
        self.path = path
