import logging

import pytest

import pipeline
from accesslog.errors import IngestCancelled, IngestError
from accesslog.ingest import ingest_file
from accesslog.types import LogEntry, Request
from filters import all_of, build_filter, exclude_prefix_filter, status_filter
from pipeline import aggregate
from ranker import RankedPair, rank
from store import FrequencyStore


LINE = (
    '10.0.0.1 - - [16/Dec/2018:06:25:09 +0000] '
    '"GET {uri} HTTP/1.1" {status} 512 "-" "curl/8.4.0"'
)


def entry(uri="/", status=200) -> LogEntry:
    return LogEntry(
        remote_hostname="10.0.0.1",
        remote_logname="",
        remote_user="",
        time="16/Dec/2018:06:25:09 +0000",
        request=Request("GET", uri, "HTTP/1.1"),
        status_code=status,
    )


def write_logs(tmp_path, files):
    paths = []
    for i, rows in enumerate(files):
        path = tmp_path / f"access-{i}.log"
        path.write_text(
            "".join(LINE.format(uri=uri, status=status) + "\n" for uri, status in rows)
        )
        paths.append(str(path))
    return paths


# ---------- Filters ----------

def test_status_filter():
    match = status_filter(404)
    assert match(entry(status=404))
    assert not match(entry(status=200))


def test_exclude_prefix_filter():
    match = exclude_prefix_filter(["/static/", "/wp-"])
    assert match(entry("/missing"))
    assert not match(entry("/static/app.js"))
    assert not match(entry("/wp-login.php"))


def test_all_of_without_predicates_accepts_everything():
    assert all_of()(entry())


def test_build_filter():
    match = build_filter(status=404, exclude=["/static/", ""])
    assert match(entry("/missing", 404))
    assert not match(entry("/missing", 200))
    assert not match(entry("/static/x", 404))


def test_build_filter_status_zero_means_any():
    match = build_filter(status=0)
    assert match(entry(status=200))
    assert match(entry(status=500))


# ---------- Store ----------

def test_store_fold_counts_matching_entries():
    store = FrequencyStore()
    counted = store.fold(
        [entry("/a", 404), entry("/a", 200), entry("/b", 404), entry("/a", 404)],
        status_filter(404),
    )

    assert counted == 3
    assert store.snapshot() == {"/a": 2, "/b": 1}
    assert store.entries_seen == 4
    assert store.get("/missing") == 0


def test_store_snapshot_is_a_copy():
    store = FrequencyStore()
    store.fold([entry("/a")], all_of())
    snapshot = store.snapshot()
    snapshot["/a"] = 100
    assert store.get("/a") == 1


# ---------- Aggregate ----------

@pytest.mark.parametrize("layout", [
    [[("/missing", 404)] * 6],
    [[("/missing", 404)] * 3, [("/missing", 404)] * 3],
    [[("/missing", 404)], [("/missing", 404)] * 2, [], [("/missing", 404)] * 3],
])
def test_count_independent_of_distribution(tmp_path, layout):
    files = [rows + [("/ok", 200), ("/missing", 200)] for rows in layout]
    paths = write_logs(tmp_path, files)

    counts = aggregate(paths, status_filter(404), max_workers=2)

    assert counts == {"/missing": 6}


def test_aggregate_with_single_worker(tmp_path):
    paths = write_logs(tmp_path, [[("/a", 404)], [("/b", 404)], [("/a", 404)]])
    assert aggregate(paths, status_filter(404), max_workers=1) == {"/a": 2, "/b": 1}


def test_aggregate_with_exclusions(tmp_path):
    paths = write_logs(tmp_path, [[("/a", 404), ("/static/x", 404), ("/b", 200)]])
    counts = aggregate(paths, build_filter(status=404, exclude=["/static/"]))
    assert counts == {"/a": 1}


def test_aggregate_without_files():
    assert aggregate([], status_filter(404)) == {}


def test_one_bad_file_fails_the_run(tmp_path):
    paths = write_logs(tmp_path, [[("/a", 404)] * 50, [("/b", 404)]])
    bad = tmp_path / "bad.log"
    bad.write_text(LINE.format(uri="/c", status="oops") + "\n")
    paths.insert(1, str(bad))

    with pytest.raises(IngestError) as exc:
        aggregate(paths, status_filter(404))

    assert exc.value.path == str(bad)


def test_failure_cancels_siblings_and_discards_late_batches(
    tmp_path, monkeypatch, caplog,
):
    good, late = write_logs(tmp_path, [[("/a", 404)] * 20, [("/b", 404)] * 5])
    bad = tmp_path / "bad.log"
    bad.write_text(LINE.format(uri="/c", status="oops") + "\n")
    bad = str(bad)

    cancelled = []

    def ingest_after_failure(path, cancel):
        if path == bad:
            return ingest_file(path, cancel)

        # hold until the consumer has taken the failing batch
        assert cancel.wait(timeout=10)
        if path == late:
            # finishes anyway, after the failure
            return ingest_file(path)

        try:
            return ingest_file(path, cancel)
        except IngestCancelled:
            cancelled.append(path)
            raise

    monkeypatch.setattr(pipeline, "ingest_file", ingest_after_failure)
    caplog.set_level(logging.DEBUG, logger="pipeline")

    with pytest.raises(IngestError) as exc:
        aggregate([good, bad, late], status_filter(404), max_workers=3)

    assert exc.value.path == bad
    assert cancelled == [good]

    messages = [r.getMessage() for r in caplog.records if r.name == "pipeline"]
    assert f"ingestion of {bad} failed, cancelling remaining files" in messages
    assert f"discarding {late} after failure" in messages
    assert not any(m.startswith("folded") for m in messages)


def test_missing_file_fails_the_run(tmp_path):
    paths = write_logs(tmp_path, [[("/a", 404)]])
    paths.append(str(tmp_path / "nope.log"))

    with pytest.raises(IngestError):
        aggregate(paths, status_filter(404))


def test_custom_key(tmp_path):
    paths = write_logs(tmp_path, [[("/a", 404), ("/b", 200)]])
    counts = aggregate(paths, build_filter(), key=lambda e: str(e.status_code))
    assert counts == {"404": 1, "200": 1}


# ---------- Ranker ----------

def test_rank_with_lower_bound():
    assert rank({"a": 5, "b": 20, "c": 15}, minimum=10, maximum=0) == [
        RankedPair("b", 20),
        RankedPair("c", 15),
    ]


def test_rank_with_both_bounds_inclusive():
    counts = {"a": 5, "b": 20, "c": 15, "d": 10}
    assert rank(counts, minimum=10, maximum=15) == [
        RankedPair("c", 15),
        RankedPair("d", 10),
    ]


def test_rank_ties_ordered_by_key():
    assert rank({"z": 3, "a": 3, "m": 7}) == [
        RankedPair("m", 7),
        RankedPair("a", 3),
        RankedPair("z", 3),
    ]


def test_rank_does_not_mutate_input():
    counts = {"a": 1, "b": 2}
    rank(counts, minimum=2)
    assert counts == {"a": 1, "b": 2}


def test_rank_empty():
    assert rank({}) == []
