import argparse
import logging
import sys

from accesslog.errors import AccessLogError
from config import load_settings
from filters import build_filter
from pipeline import aggregate
from ranker import rank
from timing import Performance


logger = logging.getLogger("apache-log")


# ---------------- CLI ----------------

def positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}")
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def build_parser(settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="apache-log",
        description="Apache Log Utils: rank request URIs in combined-format access logs",
    )
    parser.add_argument("files", nargs="*", metavar="FILE")
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="verbose log output and phase timings",
    )
    parser.add_argument(
        "--status",
        type=int,
        default=settings.status,
        help="status code to count, 0 for any (default: %(default)s)",
    )
    parser.add_argument(
        "--min",
        dest="min_count",
        type=int,
        default=settings.min_count,
        help="minimum occurrences to report (default: %(default)s)",
    )
    parser.add_argument(
        "--max",
        dest="max_count",
        type=int,
        default=settings.max_count,
        help="maximum occurrences to report, 0 for no limit (default: %(default)s)",
    )
    parser.add_argument(
        "--exclude",
        action="append",
        default=list(settings.exclude),
        metavar="PREFIX",
        help="ignore URIs starting with PREFIX (repeatable)",
    )
    parser.add_argument(
        "--workers",
        type=positive_int,
        default=settings.workers,
        help="ingestion threads (default: one per CPU, capped by the pool)",
    )

    return parser


# ---------------- Main ----------------

def main(argv=None) -> int:
    try:
        settings = load_settings()
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    parser = build_parser(settings)
    args = parser.parse_args(argv)

    logging.basicConfig(
        stream=sys.stderr,
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # No input files received
    if not args.files:
        parser.print_usage(sys.stderr)
        return 1

    perf = Performance()
    perf.execution.start()

    predicate = build_filter(status=args.status, exclude=args.exclude)

    # ---- Ingest + aggregate ----
    perf.parsing.start()
    try:
        counts = aggregate(args.files, predicate, max_workers=args.workers)
    except AccessLogError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    perf.parsing.stop()

    # ---- Rank ----
    perf.sorting.start()
    pairs = rank(counts, args.min_count, args.max_count)
    perf.sorting.stop()

    # ---- Report ----
    sys.stdout.write("".join(f"{p.count}: {p.key}\n" for p in pairs))
    sys.stdout.flush()

    perf.execution.stop()
    if args.verbose:
        logger.info("Parsing: %s", perf.parsing.elapsed_string())
        logger.info("Sorting: %s", perf.sorting.elapsed_string())
        logger.info("Total  : %s", perf.execution.elapsed_string())

    return 0


if __name__ == "__main__":
    sys.exit(main())
