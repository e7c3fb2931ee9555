"""Command-line interface for ute-export."""

import argparse
import logging
import sys

from ute_export.api import export, validate
from ute_export.gtfs.models import ExportConfig
from ute_export.output.container import ContainerReader, load_container_bytes
from ute_export.version import VERSION


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _bool_flag(value: str) -> bool:
    return value.lower() == "true"


def cmd_export(args: argparse.Namespace) -> int:
    """Execute export command."""
    setup_logging(args.verbose)

    config = ExportConfig(
        gtfs_path=args.gtfs,
        output_path=args.output,
        transfers_path=args.transfers,
        compression=args.compression,
        debug_json=args.debug_json,
        shapes=args.shapes,
    )

    try:
        manifest = export(args.gtfs, args.output, config)
        print("\nExport successful!")
        print(f"Output: {args.output}")
        print(f"Stats: {manifest.stats}")
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        logging.exception("Export failed")
        return 1


def cmd_validate(args: argparse.Namespace) -> int:
    """Execute validate command."""
    setup_logging(args.verbose)

    try:
        report = validate(args.input)
        if report.valid:
            print("\nValidation successful!")
            print(f"Stats: {report.stats}")
            if report.warnings:
                print(f"Warnings ({len(report.warnings)}):")
                for warning in report.warnings:
                    print(f"  - {warning}")
            return 0
        else:
            print(f"\nValidation failed with {len(report.errors)} errors:")
            for error in report.errors:
                print(f"  - {error}")
            return 1
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        logging.exception("Validation failed")
        return 1


def cmd_inspect(args: argparse.Namespace) -> int:
    """Print the chunk table of a container."""
    setup_logging(args.verbose)

    try:
        data = load_container_bytes(args.input)
        entries = ContainerReader(data).read_header()
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        logging.exception("Inspect failed")
        return 1

    print(f"{args.input}: {len(entries)} chunks, {len(data)} bytes")
    for i, (offset, length) in enumerate(entries):
        print(f"  chunk {i}: offset={offset} length={length}")
    return 0


def main() -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="ute-export",
        description="Export transit shapes and agent transfers to aligned binary containers",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # Export command
    export_parser = subparsers.add_parser("export", help="Export GTFS shapes and transfers")
    export_parser.add_argument("--gtfs", required=True, help="Path to GTFS directory")
    export_parser.add_argument(
        "--output", default="./ute_export", help="Output directory (default: ./ute_export)"
    )
    export_parser.add_argument(
        "--transfers", default=None, help="CSV of agent transfers from a simulation run"
    )
    export_parser.add_argument(
        "--compression",
        type=_bool_flag,
        default=False,
        help="Write containers as .bin.zip archives (default: false)",
    )
    export_parser.add_argument(
        "--debug-json",
        type=_bool_flag,
        default=False,
        help="Generate debug JSON files (default: false)",
    )
    export_parser.add_argument(
        "--shapes",
        type=_bool_flag,
        default=True,
        help="Export route shapes (default: true)",
    )
    export_parser.set_defaults(func=cmd_export)

    # Validate command
    validate_parser = subparsers.add_parser("validate", help="Validate exported output")
    validate_parser.add_argument("--input", required=True, help="Path to output directory")
    validate_parser.set_defaults(func=cmd_validate)

    # Inspect command
    inspect_parser = subparsers.add_parser("inspect", help="Show the chunk table of a container")
    inspect_parser.add_argument("--input", required=True, help="Path to container file")
    inspect_parser.set_defaults(func=cmd_inspect)

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
