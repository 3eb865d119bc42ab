import logging
import os
import threading
from typing import List, Optional

from .errors import IngestCancelled, IngestError, ParseError
from .parsers import parse_line
from .types import LogEntry


logger = logging.getLogger(__name__)

# Rough average size of a combined log line, used for size estimates only.
AVERAGE_LINE_LENGTH = 256


def ingest_file(
    path: str,
    cancel: Optional[threading.Event] = None,
) -> List[LogEntry]:
    """
    Parse every line of a log file.

    Pipeline:
      open + stat
        → read line by line (\\n and trailing \\r stripped)
          → parse_line
            → ordered list of LogEntry

    Blank lines are skipped. The first bad line aborts the whole file:
    nothing is returned for it and IngestError is raised with the path
    and line number, chaining the ParseError. I/O failures are raised
    as IngestError too.

    When `cancel` is set (another file failed), reading stops with
    IngestCancelled.
    """
    try:
        f = open(path, "rb")
    except OSError as e:
        raise IngestError(f"could not open file {path!r}: {e}", path) from e

    with f:
        try:
            size = os.fstat(f.fileno()).st_size
        except OSError as e:
            raise IngestError(f"could not stat file {path!r}: {e}", path) from e

        logger.debug(
            "ingesting %s (%d bytes, ~%d lines)",
            path, size, size // AVERAGE_LINE_LENGTH,
        )

        entries: List[LogEntry] = []
        skipped = 0
        line_number = 0

        try:
            for line_number, raw in enumerate(f, 1):
                if cancel is not None and cancel.is_set():
                    raise IngestCancelled(path)

                line = raw.rstrip(b"\n")
                if line.endswith(b"\r"):
                    line = line[:-1]

                if not line.strip():
                    skipped += 1
                    continue

                try:
                    entries.append(parse_line(line))
                except ParseError as e:
                    raise IngestError(
                        f"{path}:{line_number}: {e}",
                        path,
                        line_number,
                    ) from e

        except OSError as e:
            raise IngestError(
                f"could not read file {path!r} after line {line_number}: {e}",
                path,
                line_number,
            ) from e

    logger.debug(
        "ingested %s: %d entries, %d blank lines skipped",
        path, len(entries), skipped,
    )
    return entries
