"""Core module containing the manuf parser, prefix database and configuration."""

from .models import OuiEntry, LoadReport
from .parser import parse_line, parse_mac_address, format_entry
from .database import OuiDatabase
from .config import Config
from .exceptions import (
    OuiDbError,
    ParseError,
    MalformedPrefix,
    MissingName,
    InvalidMacAddress,
    ExportError,
    CorruptExportError,
    UnsupportedFormatVersion,
    EmptyDatabaseError,
)

__all__ = [
    "OuiEntry",
    "LoadReport",
    "parse_line",
    "parse_mac_address",
    "format_entry",
    "OuiDatabase",
    "Config",
    "OuiDbError",
    "ParseError",
    "MalformedPrefix",
    "MissingName",
    "InvalidMacAddress",
    "ExportError",
    "CorruptExportError",
    "UnsupportedFormatVersion",
    "EmptyDatabaseError",
]
