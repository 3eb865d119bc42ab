from dataclasses import dataclass, field


@dataclass(frozen=True)
class Request:
    """
    The request line embedded in a log entry ("METHOD URI VERSION").

    All three fields are empty when the log recorded "-" instead of
    a request line.
    """
    method: str = ""
    uri: str = ""
    version: str = ""


@dataclass(frozen=True)
class LogEntry:
    """
    One parsed line of the combined log format:

      %h %l %u %t "%r" %>s %O "%{Referer}i" "%{User-Agent}i"

    Identity fields (hostname, logname, user) are "" when the log
    wrote the "-" placeholder. The referer is kept verbatim.
    """
    remote_hostname: str
    remote_logname: str
    remote_user: str
    time: str
    request: Request = field(default_factory=Request)
    status_code: int = 0
    bytes_sent: int = 0
    referer: str = ""
    user_agent: str = ""
