"""
csv-safe command line entry point.

Encrypts a chosen set of columns of a CSV file, or restores a file that
was encrypted earlier:

    csv-safe data.csv -e PASSWORD -c "Name,SSN"
    csv-safe data_safe.csv -d PASSWORD
"""

import argparse
import csv
import sys

from .config import ConfigurationError, CsvSafeConfig
from .csv_safe_service import CsvSafeService, RunSummary


def split_columns(value: str) -> list[str]:
    """
    Split a comma-separated column list.

    Double quotes protect commas and spaces inside a name, so
    ``Name,"Home, City"`` gives two columns.

    Args:
        value: The raw ``--columns`` argument

    Returns:
        Column names, trimmed, without empty entries
    """
    fields = next(csv.reader([value], skipinitialspace=True), [])
    return [name.strip() for name in fields if name.strip()]


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """
    Parse command line arguments.

    Args:
        argv: Argument list, defaults to ``sys.argv[1:]``

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        prog="csv-safe",
        description="Encrypt selected columns of a CSV file, or decrypt a file encrypted earlier.",
    )

    parser.add_argument("input_file", help="CSV file to read")

    mode = parser.add_mutually_exclusive_group(required=True)
    mode.add_argument(
        "-e", "--encrypt",
        metavar="PASSWORD",
        help="Encrypt the selected columns with PASSWORD",
    )
    mode.add_argument(
        "-d", "--decrypt",
        metavar="PASSWORD",
        help="Decrypt a csv-safe file with PASSWORD",
    )

    parser.add_argument(
        "-o", "--output",
        help="Output file (default: derived from the input file name)",
    )

    parser.add_argument(
        "-c", "--columns",
        action="append",
        default=[],
        help='Comma-separated columns to encrypt; quote names containing commas (may be repeated)',
    )

    parser.add_argument(
        "--config",
        help="Path to a YAML configuration file",
    )

    args = parser.parse_args(argv)

    args.columns = [name for value in args.columns for name in split_columns(value)]

    if args.encrypt is not None and not args.columns:
        parser.error("Columns must be specified for encryption (-c/--columns)")

    return args


def report(summary: RunSummary) -> None:
    """Print a short summary of a finished run."""
    print(f"{summary.direction.value.capitalize()}ed {summary.input_path} -> {summary.output_path}")
    print(f"  Protected columns: {summary.protected_columns}")
    print(f"  Rows written: {summary.rows_written} (skipped {summary.rows_skipped} empty)")

    if summary.integrity_checked:
        print(f"  Integrity: {summary.integrity_passed} passed, {summary.integrity_failed} failed")
    if summary.undecryptable_fields:
        print(f"  Fields left encrypted: {summary.undecryptable_fields}")


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for csv-safe.

    Returns:
        Process exit status
    """
    args = parse_args(argv)

    try:
        CsvSafeConfig.initialize(args.config)

        if args.encrypt is not None:
            service = CsvSafeService(args.encrypt)
            summary = service.encrypt_file(args.input_file, args.output, args.columns)
        else:
            if args.columns:
                print("WARNING: --columns is ignored when decrypting", file=sys.stderr)
            service = CsvSafeService(args.decrypt)
            summary = service.decrypt_file(args.input_file, args.output)
    except ConfigurationError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("Interrupted", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"CRITICAL: Unexpected error: {e}", file=sys.stderr)
        return 1

    report(summary)
    return 0


if __name__ == "__main__":
    sys.exit(main())
