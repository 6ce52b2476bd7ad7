"""
Exception hierarchy for the OUI vendor database.

Per-line parse failures are absorbed while a database is built;
export and I/O failures propagate to the caller.
"""

from typing import Optional


class OuiDbError(Exception):
    """Base class for all ouidb errors."""


class ParseError(OuiDbError, ValueError):
    """A manuf line could not be turned into an entry."""

    def __init__(self, line: str, reason: str):
        self.line = line
        self.reason = reason
        super().__init__(f"{reason}: {line!r}")


class MalformedPrefix(ParseError):
    """The address prefix or its /bits mask is not valid."""


class MissingName(ParseError):
    """The line has a prefix but no short vendor name."""


class InvalidMacAddress(OuiDbError, ValueError):
    """A query address is not a 48-bit hardware address."""

    def __init__(self, value):
        self.value = value
        super().__init__(f"Invalid MAC address: {value!r}")


class ExportError(OuiDbError):
    """A binary export could not be decoded."""


class CorruptExportError(ExportError):
    """Bad magic, truncated data or trailing garbage in an export."""


class UnsupportedFormatVersion(ExportError):
    """The export carries a format version this build cannot read."""

    def __init__(self, version: int, supported: Optional[int] = None):
        self.version = version
        self.supported = supported
        message = f"Unsupported export format version {version}"
        if supported is not None:
            message += f" (supported: {supported})"
        super().__init__(message)


class EmptyDatabaseError(OuiDbError):
    """Every record line failed to parse, so nothing was loaded."""

    def __init__(self, skipped: int):
        self.skipped = skipped
        super().__init__(f"No valid entries loaded ({skipped} lines skipped)")
