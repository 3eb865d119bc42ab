from collections import defaultdict
from typing import Callable, Dict, Iterable

from accesslog.types import LogEntry


FrequencyMap = Dict[str, int]  # key (URI) -> occurrences

KeyFunc = Callable[[LogEntry], str]


def request_uri(entry: LogEntry) -> str:
    return entry.request.uri


class FrequencyStore:
    """
    Occurrence counts per key, owned by a single writer.

    The aggregation pipeline is the only caller of the write API; worker
    threads never see the store.
    """

    def __init__(self, key: KeyFunc = request_uri):
        self.key = key
        self._counts: Dict[str, int] = defaultdict(int)
        self.entries_seen = 0
        self.entries_counted = 0

    # ---------- Write API ----------

    def fold(
        self,
        entries: Iterable[LogEntry],
        predicate: Callable[[LogEntry], bool],
    ) -> int:
        """
        Count every entry matching `predicate`.
        Returns the number of entries counted from this batch.
        """
        counted = 0
        for entry in entries:
            self.entries_seen += 1
            if not predicate(entry):
                continue
            self._counts[self.key(entry)] += 1
            counted += 1

        self.entries_counted += counted
        return counted

    # ---------- Read API ----------

    def get(self, key: str) -> int:
        return self._counts.get(key, 0)

    def __len__(self) -> int:
        return len(self._counts)

    def snapshot(self) -> FrequencyMap:
        return dict(self._counts)
