"""Vendor lookups for MAC/EUI-48 addresses backed by the Wireshark manuf database."""

from .core import (
    OuiDatabase,
    OuiEntry,
    parse_line,
    parse_mac_address,
)

__version__ = "1.0.0"

__all__ = [
    "OuiDatabase",
    "OuiEntry",
    "parse_line",
    "parse_mac_address",
]
