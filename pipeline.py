import logging
import queue
import threading
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from accesslog.errors import AccessLogError, IngestCancelled
from accesslog.ingest import ingest_file
from accesslog.types import LogEntry
from store import FrequencyMap, FrequencyStore, KeyFunc, request_uri


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Batch:
    """Result of ingesting one file: its entries, or the error that stopped it."""
    path: str
    entries: Optional[List[LogEntry]]
    error: Optional[BaseException] = None


# Closes the intake once every producer has finished.
_CLOSED = object()


def _produce(path: str, intake: queue.Queue, cancel: threading.Event):
    try:
        entries = ingest_file(path, cancel)
    except Exception as e:
        # the consumer sets `cancel` once it has taken this batch
        intake.put(Batch(path=path, entries=None, error=e))
        return

    intake.put(Batch(path=path, entries=entries))


def _close_when_done(futures, intake: queue.Queue):
    wait(futures)
    intake.put(_CLOSED)


def aggregate(
    paths: Sequence[str],
    predicate: Callable[[LogEntry], bool],
    key: KeyFunc = request_uri,
    max_workers: Optional[int] = None,
) -> FrequencyMap:
    """
    Ingest every file concurrently and count matching entries by key.

    Pipeline:
      one ingest_file task per path (thread pool)
        → whole-file batches on a shared queue
          → this thread folds them into a FrequencyStore

    Only the calling thread writes the store. The first file that fails
    cancels the others and its error is raised once the pool has shut
    down; no partial counts are returned.
    """
    store = FrequencyStore(key=key)
    if not paths:
        return store.snapshot()

    intake: queue.Queue = queue.Queue()
    cancel = threading.Event()
    failure: Optional[BaseException] = None

    with ThreadPoolExecutor(
        max_workers=max_workers,
        thread_name_prefix="ingest",
    ) as executor:
        futures = [
            executor.submit(_produce, path, intake, cancel)
            for path in paths
        ]

        closer = threading.Thread(
            target=_close_when_done,
            args=(futures, intake),
            name="ingest-closer",
            daemon=True,
        )
        closer.start()

        while True:
            batch = intake.get()
            if batch is _CLOSED:
                break

            if batch.error is not None:
                if failure is None and not isinstance(batch.error, IngestCancelled):
                    failure = batch.error
                    cancel.set()
                    logger.warning(
                        "ingestion of %s failed, cancelling remaining files",
                        batch.path,
                    )
                else:
                    logger.debug("ingestion of %s stopped: %s", batch.path, batch.error)
                continue

            if failure is not None:
                # run is already lost; drain without counting
                logger.debug("discarding %s after failure", batch.path)
                continue

            counted = store.fold(batch.entries, predicate)
            logger.debug(
                "folded %s: %d entries, %d counted",
                batch.path, len(batch.entries), counted,
            )

        closer.join()

        if failure is None:
            # surfaces anything _produce could not hand over as a batch
            for future in futures:
                future.result()

    if failure is not None:
        if isinstance(failure, AccessLogError):
            raise failure
        raise AccessLogError(str(failure)) from failure

    logger.debug(
        "aggregated %d files: %d entries seen, %d counted, %d keys",
        len(paths), store.entries_seen, store.entries_counted, len(store),
    )
    return store.snapshot()
