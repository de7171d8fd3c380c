#!/usr/bin/env python3
"""
EDI Directory - command line entry point.

Looks up data elements, composites, segments and message branches in EDI
standards directories, and exports directories to Excel.
"""
import argparse
import sys
from typing import Any, Dict, List, Optional, Tuple

from .config import load_settings
from .errors import (
    ConfigurationError,
    DirectoryError,
    DirectoryFileNotFoundError,
    LookupNotFoundError,
)
from .export import write_directory_workbook
from .logger import setup_logger
from .records import DataElementProperties
from .registry import DirectoryRegistry

TABLE_CHOICES = ("data_elements", "composites", "segments", "messages")


def parse_param(text: str) -> Tuple[str, Any]:
    """Parse KEY=VALUE into (key, value); d0002 becomes int, is_iedi a bool."""
    if "=" not in text:
        raise argparse.ArgumentTypeError(f"Expected KEY=VALUE, got '{text}'")
    key, value = text.split("=", 1)
    key = key.strip()
    if key == "d0002" and value.strip().isdigit():
        return key, int(value)
    if key == "is_iedi":
        return key, value.strip().lower() in ("1", "true", "yes")
    return key, value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="edi-directory",
        description="Query EDI standards directories (UN/EDIFACT, ISO9735, SAP IDoc)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Example usage:
  edi-directory -p d0052=D -p d0054=96A -p d0065=ORDERS show ORDERS:
  edi-directory -p d0002=4 names segments
  edi-directory -s I -p SAPTYPE=40 -p IDOCTYPE=ORDERS05 show sE1EDK01
  edi-directory -p d0052=D -p d0054=96A export output/
        """
    )
    parser.add_argument("--standard", "-s", default="E", help="Syntax standard: E (EDIFACT) or I (SAP IDoc)")
    parser.add_argument("--param", "-p", action="append", type=parse_param, default=[],
                        metavar="KEY=VALUE", help="Directory parameter, repeatable (e.g. d0052=D)")
    parser.add_argument("--config", "-c", default=None, help="Configuration file (default: edi_directory.yaml)")
    parser.add_argument("--logs", "-l", default=None, help="Log directory (default: from configuration)")
    parser.add_argument("--ndb-path", default=None, help="Directory search path (overrides EDI_NDB_PATH)")

    sub = parser.add_subparsers(dest="command", required=True)

    names = sub.add_parser("names", help="List the codes of a table")
    names.add_argument("table", choices=TABLE_CHOICES)

    show = sub.add_parser("show", help="Show the entries of a composite, segment, message or data element")
    show.add_argument("identifier", help="e.g. C082, 4457, NAD, ORDERS:, dBELNR, sE1EDK01")

    export = sub.add_parser("export", help="Write the directory to an Excel workbook")
    export.add_argument("output", help="Output .xlsx file or directory")

    serve = sub.add_parser("serve", help="Run the HTTP lookup API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8001)

    return parser


def _print_entries(directory, identifier: str) -> None:
    found = directory.lookup(identifier)
    if isinstance(found, DataElementProperties):
        print(f"{found.name}\t{found.format or ''}\t{found.description or ''}")
        return
    print(f"{found.name}\t{found.desc or ''}")
    for entry in found:
        print(f"  {entry.item_no}\t{entry.name}\t{entry.status}\t{entry.max_repeat}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the directory CLI."""
    args = build_parser().parse_args(argv)
    params: Dict[str, Any] = dict(args.param)

    try:
        settings = load_settings(args.config)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    logger = setup_logger(settings, log_dir=args.logs)

    registry = DirectoryRegistry(search_path=args.ndb_path, settings=settings)

    try:
        if args.command == "serve":
            import uvicorn
            from .api import create_app
            uvicorn.run(create_app(registry), host=args.host, port=args.port)
            return 0

        logger.debug(f"Directory request: {args.standard} {params}")
        directory = registry.create(args.standard, params)

        if args.command == "names":
            for name in sorted(getattr(directory, args.table)):
                print(name)
        elif args.command == "show":
            _print_entries(directory, args.identifier)
        elif args.command == "export":
            output_file = write_directory_workbook(directory, args.output)
            print(output_file)

        if directory.report.diagnostics:
            logger.info(f"{len(directory.report.diagnostics)} malformed lines in directory files")
        return 0

    except LookupNotFoundError as e:
        logger.error(f"Not found: {e}")
        return 1

    except DirectoryFileNotFoundError as e:
        logger.error(f"File not found: {e}")
        return 1

    except DirectoryError as e:
        logger.error(f"Directory error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
