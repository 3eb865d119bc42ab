from enum import Enum


class ParseState(Enum):
    """
    Fields of a combined log line, in the order they are read.

    The parser only moves forward: every state consumes exactly one
    field and hands over to `next`. DONE is terminal.
    """
    HOSTNAME = 0    # %h
    LOGNAME = 1     # %l
    USER = 2        # %u
    TIME = 3        # %t
    REQUEST = 4     # "%r"
    STATUS = 5      # %>s
    BYTES_SENT = 6  # %O
    REFERER = 7     # "%{Referer}i"
    USER_AGENT = 8  # "%{User-Agent}i"
    DONE = 9

    @property
    def field(self) -> str:
        """Name used for this field in error messages."""
        return self.name.lower()

    @property
    def next(self) -> "ParseState":
        if self is ParseState.DONE:
            return self
        return ParseState(self.value + 1)
