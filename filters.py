from typing import Callable, Iterable, Optional

from accesslog.types import LogEntry


EntryFilter = Callable[[LogEntry], bool]


# ---------- Predicates ----------

def status_filter(status: int) -> EntryFilter:
    def match(entry: LogEntry) -> bool:
        return entry.status_code == status

    return match


def exclude_prefix_filter(prefixes: Iterable[str]) -> EntryFilter:
    excluded = tuple(p for p in prefixes if p)

    def match(entry: LogEntry) -> bool:
        return not entry.request.uri.startswith(excluded)

    return match


def all_of(*predicates: EntryFilter) -> EntryFilter:
    def match(entry: LogEntry) -> bool:
        return all(p(entry) for p in predicates)

    return match


# ---------- Composition ----------

def build_filter(
    status: Optional[int] = None,
    exclude: Iterable[str] = (),
) -> EntryFilter:
    """
    Combine the CLI options into one predicate.

    A status of None or 0 disables the status check. With no excluded
    prefixes every URI passes the prefix check.
    """
    predicates = []
    if status:
        predicates.append(status_filter(status))

    exclude = [p for p in exclude if p]
    if exclude:
        predicates.append(exclude_prefix_filter(exclude))

    return all_of(*predicates)
