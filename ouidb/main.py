"""
ouidb - Main Entry Point.

Looks up the vendor registered for MAC addresses in the Wireshark
manuf database, and imports/exports the pre-parsed binary form.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .core.config import Config, get_default_config_path
from .core.database import OuiDatabase
from .core.exceptions import InvalidMacAddress, OuiDbError
from .core.loader import load_database, load_export_file, write_export_file
from .core.logging_setup import setup_logging
from .core.models import OuiEntry


logger = logging.getLogger(__name__)


def format_result(mac: str, entry: Optional[OuiEntry]) -> str:
    """One line of human readable output for a lookup."""
    if entry is None:
        return f"{mac}  Unknown"

    text = entry.name_short
    if entry.name_long:
        text += f" / {entry.name_long}"
    if entry.comment:
        text += f" ({entry.comment})"
    return f"{mac}  {text}"


def print_stats(db: OuiDatabase):
    """Print entry counts per prefix length."""
    print("=" * 40)
    print("OUI Database Status")
    print("=" * 40)
    print(f"Total entries: {len(db)}")
    for length, count in db.prefix_length_counts().items():
        print(f"  /{length}: {count}")
    report = db.load_report
    if report is not None:
        print(f"Lines read: {report.lines_read}")
        print(f"Skipped lines: {report.skipped}")
        print(f"Duplicate blocks: {report.duplicates}")
    print("=" * 40)


def lookup_addresses(db: OuiDatabase, macs: List[str], as_json: bool = False) -> int:
    """
    Look up and print each address.

    Returns:
        0 if every address was valid, 1 otherwise
    """
    status = 0
    for mac in macs:
        try:
            entry = db.lookup(mac)
        except InvalidMacAddress as e:
            logger.error(str(e))
            status = 1
            continue

        if as_json:
            result = {"address": mac, "found": entry is not None}
            if entry is not None:
                result.update(entry.to_dict())
            print(json.dumps(result))
        else:
            print(format_result(mac, entry))
    return status


def parse_args(argv: Optional[List[str]] = None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Look up MAC address vendors in the Wireshark manuf database"
    )

    parser.add_argument(
        "macs",
        nargs="*",
        metavar="MAC",
        help="MAC addresses to look up"
    )

    parser.add_argument(
        "-c", "--config",
        default=None,
        help="Path to configuration file (YAML)"
    )

    parser.add_argument(
        "--manuf",
        default=None,
        help="Path to the manuf database file"
    )

    parser.add_argument(
        "--import",
        dest="import_path",
        default=None,
        help="Load the database from a binary export instead of manuf text"
    )

    parser.add_argument(
        "--export",
        dest="export_path",
        default=None,
        help="Write a binary export of the loaded database"
    )

    parser.add_argument(
        "--no-cache",
        action="store_true",
        help="Do not read or write the export cache"
    )

    parser.add_argument(
        "--stats",
        action="store_true",
        help="Print database statistics"
    )

    parser.add_argument(
        "--json",
        action="store_true",
        help="Output one JSON object per address"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging"
    )

    parser.add_argument(
        "--generate-config",
        action="store_true",
        help="Generate a sample configuration file"
    )

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    # Generate sample config if requested
    if args.generate_config:
        config = Config()
        config_path = "config/config.yaml"
        Path("config").mkdir(exist_ok=True)
        config.to_yaml(config_path)
        print(f"Generated sample configuration: {config_path}")
        return 0

    # Load configuration
    config_path = args.config or get_default_config_path()
    config = Config.from_yaml(config_path)
    setup_logging(config.logging, verbose=args.verbose)
    logger.debug(f"Loaded configuration from {config_path}")

    # Apply command line overrides
    if args.manuf:
        config.database.manuf_path = args.manuf
    if args.no_cache:
        config.cache.enabled = False

    try:
        if args.import_path:
            db = load_export_file(args.import_path)
        else:
            db = load_database(config)

        if args.export_path:
            write_export_file(db, args.export_path)
    except (OuiDbError, OSError) as e:
        logger.error(f"Could not load OUI database: {e}")
        return 1

    if args.stats:
        print_stats(db)

    return lookup_addresses(db, args.macs, as_json=args.json)


def run():
    """Entry point for the application."""
    sys.exit(main())


if __name__ == "__main__":
    run()
