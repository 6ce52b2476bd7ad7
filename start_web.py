#!/usr/bin/env python3
"""
Start the OUI vendor lookup API.

Usage:
    python start_web.py              # Start on port 8000
    python start_web.py --port 3000  # Custom port
"""

import argparse
import sys
from pathlib import Path

# Add the project root to path
sys.path.insert(0, str(Path(__file__).parent))

from ouidb.core.config import Config, get_default_config_path
from ouidb.core.logging_setup import setup_logging
from ouidb.web.api import start_web_server


def main():
    parser = argparse.ArgumentParser(
        description="OUI vendor lookup API"
    )

    parser.add_argument(
        "-c", "--config",
        default=None,
        help="Path to configuration file"
    )

    parser.add_argument(
        "-p", "--port",
        type=int,
        default=None,
        help="Web server port (default: 8000)"
    )

    parser.add_argument(
        "--host",
        default=None,
        help="Host to bind to (default: 0.0.0.0)"
    )

    parser.add_argument(
        "--manuf",
        default=None,
        help="Path to the manuf database file"
    )

    args = parser.parse_args()

    # Load config
    config_path = args.config or get_default_config_path()
    print(f"Loading configuration from: {config_path}")
    config = Config.from_yaml(config_path)
    setup_logging(config.logging)

    # Apply command line overrides
    if args.manuf:
        config.database.manuf_path = args.manuf
    if args.host:
        config.web.host = args.host
    if args.port:
        config.web.port = args.port

    print(f"\nStarting OUI Vendor Lookup API")
    print(f"=" * 60)
    print(f"API: http://{config.web.host}:{config.web.port}/api/lookup/<mac>")
    print(f"API Documentation: http://{config.web.host}:{config.web.port}/docs")
    print(f"=" * 60)
    print(f"\nManuf database: {config.database.manuf_path}")
    print(f"Export cache: {config.cache.db_path if config.cache.enabled else 'disabled'}")
    print(f"\nPress Ctrl+C to stop\n")

    # Start web server
    start_web_server(
        host=config.web.host,
        port=config.web.port,
        app_config=config,
    )


if __name__ == "__main__":
    main()
