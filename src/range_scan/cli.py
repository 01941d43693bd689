"""Command-line interface for range scanning."""

import argparse
import logging
import sys

from range_scan.scan.cast import FieldType, parse_field_types
from range_scan.scan.producer import RangeScanProducer
from range_scan.scan.scan_file import scan_file
from range_scan.scan.types import Record, ScanOptions, Split

logger = logging.getLogger(__name__)


def configure_logging(level: int = logging.WARNING) -> None:
    """Configure logging to write to stderr."""
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def parse_projection(text: str) -> list[int]:
    """Parse a comma-separated list of field indices, e.g. "2,0"."""
    try:
        return [int(part) for part in text.split(",")]
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid projection {text!r}") from None


def parse_schema(text: str) -> list[FieldType]:
    try:
        return parse_field_types(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from None


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        prog="range-scan",
        description="Scan a delimited text file, or one byte range of it, into records.",
    )

    parser.add_argument("input_file", help="Path to the delimited text file")

    parser.add_argument(
        "--splits",
        type=int,
        default=None,
        help="Number of splits to scan in parallel (default: one per CPU)",
    )

    parser.add_argument("--start", type=int, default=None, help="Start offset of a single range to scan")
    parser.add_argument("--end", type=int, default=None, help="End offset (exclusive) of a single range to scan")

    parser.add_argument(
        "--separator",
        default=",",
        help="Field separator character (default: ',')",
    )

    parser.add_argument(
        "--projection",
        type=parse_projection,
        default=None,
        help="Comma-separated field indices to keep, in output order (e.g. 2,0)",
    )

    parser.add_argument(
        "--schema",
        type=parse_schema,
        default=None,
        help="Comma-separated field types, one per source field (e.g. int,string,double)",
    )

    parser.add_argument("--encoding", default="utf-8", help="Text encoding (default: utf-8)")

    parser.add_argument(
        "--crlf",
        action="store_true",
        help="Treat a carriage return before each line break as part of the terminator",
    )

    parser.add_argument(
        "--output-separator",
        default=None,
        help="Separator used when printing records (default: the input separator)",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Logging level (default: WARNING)",
    )

    return parser


def scan_range(input_file: str, start: int, end: int, options: ScanOptions) -> list[Record]:
    """Scan exactly one byte range of a file with a single producer."""
    with RangeScanProducer.from_options(Split(input_file, start, end), options) as producer:
        return list(producer)


def main(argv: list[str] | None = None) -> int:
    """Entry point for CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    log_level = getattr(logging, args.log_level)
    configure_logging(log_level)

    if len(args.separator) != 1:
        parser.error(f"--separator must be a single character, got {args.separator!r}")
    if (args.start is None) != (args.end is None):
        parser.error("--start and --end must be given together")
    if args.start is not None and args.splits is not None:
        parser.error("--splits cannot be combined with --start/--end")
    if args.splits is not None and args.splits <= 0:
        parser.error(f"--splits must be positive, got {args.splits}")

    options = ScanOptions(
        separator=args.separator,
        projection=args.projection,
        schema=args.schema,
        encoding=args.encoding,
        crlf=args.crlf,
    )
    output_separator = args.separator if args.output_separator is None else args.output_separator

    try:
        if args.start is not None:
            records = scan_range(args.input_file, args.start, args.end, options)
        else:
            records = scan_file(args.input_file, num_splits=args.splits, options=options)
    except (OSError, ValueError, IndexError) as exc:
        logger.error("Scan failed: %s", exc)
        return 1

    for record in records:
        print(output_separator.join(str(value) for value in record))

    return 0


if __name__ == "__main__":
    sys.exit(main())
