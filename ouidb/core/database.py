"""
Prefix database for OUI vendor lookups.

Entries are indexed by prefix length, then by masked prefix. A lookup
masks the query address at every length present, longest first, and
returns the first hit. IEEE sub-divided blocks (/28, /36) therefore win
over the /24 they were carved out of.

The database is immutable once built and lookups never write to it, so
one instance can be shared freely between threads.
"""

import logging
import struct
from dataclasses import replace
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union

from .exceptions import (
    CorruptExportError,
    EmptyDatabaseError,
    ExportError,
    InvalidMacAddress,
    ParseError,
    UnsupportedFormatVersion,
)
from .models import ADDRESS_BITS, ADDRESS_MASK, LoadReport, OuiEntry, prefix_mask
from .parser import MacAddressLike, format_entry, parse_line, parse_mac_address


logger = logging.getLogger(__name__)

# Binary export layout (network byte order):
#   header: magic, format version, entry count
#   entry:  prefix u64, prefix_len u8, flags u8, then length-prefixed UTF-8
#           strings for name_short and each optional field flagged present
EXPORT_MAGIC = b"OUIDB"
EXPORT_VERSION = 1

_HEADER = struct.Struct("!5sHI")
_RECORD = struct.Struct("!QBB")
_STRING_LEN = struct.Struct("!H")

FLAG_NAME_LONG = 0x01
FLAG_COMMENT = 0x02

DEFAULT_MAX_ERRORS = 20

PrefixIndex = Dict[int, Dict[int, OuiEntry]]


def _normalize_entry(entry: OuiEntry) -> OuiEntry:
    if not 1 <= entry.prefix_len <= ADDRESS_BITS:
        raise ValueError(f"prefix_len out of range: {entry.prefix_len}")
    if not entry.name_short:
        raise ValueError("name_short must not be empty")
    masked = entry.prefix & ADDRESS_MASK & prefix_mask(entry.prefix_len)
    if masked != entry.prefix:
        return replace(entry, prefix=masked)
    return entry


def _insert(index: PrefixIndex, entry: OuiEntry) -> bool:
    """Add an entry unless its block is already taken. First one wins."""
    table = index.setdefault(entry.prefix_len, {})
    if entry.prefix in table:
        return False
    table[entry.prefix] = entry
    return True


def _pack_string(value: str, field_name: str) -> bytes:
    data = value.encode("utf-8")
    if len(data) > 0xFFFF:
        raise ExportError(f"{field_name} too long to export ({len(data)} bytes)")
    return _STRING_LEN.pack(len(data)) + data


def _unpack_string(view: memoryview, offset: int) -> Tuple[str, int]:
    (length,) = _STRING_LEN.unpack_from(view, offset)
    offset += _STRING_LEN.size
    end = offset + length
    if end > len(view):
        raise CorruptExportError("Truncated export: string runs past end of data")
    try:
        return bytes(view[offset:end]).decode("utf-8"), end
    except UnicodeDecodeError as e:
        raise CorruptExportError(f"Invalid UTF-8 in export: {e}") from e


class OuiDatabase:
    """
    Immutable longest-prefix-match index over manuf entries.

    Build one with :meth:`build` (manuf lines), :meth:`from_entries`,
    :meth:`from_file` or :meth:`deserialize`.
    """

    def __init__(self, index: Optional[PrefixIndex] = None, load_report: Optional[LoadReport] = None):
        index = index or {}
        self._index: PrefixIndex = {length: table for length, table in index.items() if table}
        self._lengths: Tuple[Tuple[int, int, Dict[int, OuiEntry]], ...] = tuple(
            (length, prefix_mask(length), self._index[length])
            for length in sorted(self._index, reverse=True)
        )
        self._count = sum(len(table) for table in self._index.values())
        self.load_report = load_report

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def build(cls, lines: Iterable[str], max_errors: int = DEFAULT_MAX_ERRORS) -> "OuiDatabase":
        """
        Build a database from manuf text lines.

        Malformed lines are skipped and recorded in ``load_report``; they
        never abort the load. When the same block appears more than once,
        the first entry read is kept.

        Args:
            lines: Any iterable of lines, consumed once
            max_errors: How many per-line errors to keep in the report

        Raises:
            EmptyDatabaseError: if record lines were present but none parsed
        """
        report = LoadReport()
        index: PrefixIndex = {}

        for line_number, line in enumerate(lines, start=1):
            report.lines_read = line_number
            try:
                entry = parse_line(line)
            except ParseError as e:
                report.skipped += 1
                if len(report.errors) < max_errors:
                    report.errors.append((line_number, str(e)))
                logger.debug(f"Skipping line {line_number}: {e}")
                continue

            if entry is None:
                continue

            if _insert(index, entry):
                report.entries += 1
            else:
                report.duplicates += 1
                logger.debug(f"Duplicate block on line {line_number}, keeping first: {format_entry(entry)}")

        if report.entries == 0 and report.skipped > 0:
            raise EmptyDatabaseError(report.skipped)

        logger.info(
            f"Loaded {report.entries} OUI entries from {report.lines_read} lines "
            f"({report.duplicates} duplicates)"
        )
        if report.skipped:
            logger.warning(f"Skipped {report.skipped} malformed lines while loading OUI database")

        return cls(index, load_report=report)

    @classmethod
    def from_entries(cls, entries: Iterable[OuiEntry]) -> "OuiDatabase":
        """Index already-parsed entries, keeping the first of any duplicate block."""
        index: PrefixIndex = {}
        for entry in entries:
            _insert(index, _normalize_entry(entry))
        return cls(index)

    @classmethod
    def from_text(cls, text: str, max_errors: int = DEFAULT_MAX_ERRORS) -> "OuiDatabase":
        return cls.build(text.splitlines(), max_errors=max_errors)

    @classmethod
    def from_file(cls, path: Union[str, Path], max_errors: int = DEFAULT_MAX_ERRORS) -> "OuiDatabase":
        """Build a database from a manuf file on disk."""
        path = Path(path)
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            db = cls.build(f, max_errors=max_errors)
        logger.info(f"Created OUI vendor database from file {path}")
        return db

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def lookup(self, address: MacAddressLike) -> Optional[OuiEntry]:
        """
        Find the most specific entry covering an address.

        Args:
            address: 48-bit int, 6 bytes, or a MAC address string

        Returns:
            The longest-prefix match, or None if no block covers the address

        Raises:
            InvalidMacAddress: if the address cannot be normalised
        """
        value = parse_mac_address(address)
        for _length, mask, table in self._lengths:
            entry = table.get(value & mask)
            if entry is not None:
                return entry
        return None

    def lookup_all(self, address: MacAddressLike) -> List[OuiEntry]:
        """Every entry covering an address, most specific first."""
        value = parse_mac_address(address)
        matches = []
        for _length, mask, table in self._lengths:
            entry = table.get(value & mask)
            if entry is not None:
                matches.append(entry)
        return matches

    def query_by_str(self, mac: str) -> Optional[OuiEntry]:
        return self.lookup(mac)

    def query_by_mac(self, mac: bytes) -> Optional[OuiEntry]:
        return self.lookup(mac)

    @property
    def prefix_lengths(self) -> Tuple[int, ...]:
        """Prefix lengths present, longest first."""
        return tuple(length for length, _mask, _table in self._lengths)

    def prefix_length_counts(self) -> Dict[int, int]:
        """Number of entries per prefix length."""
        return {length: len(table) for length, _mask, table in self._lengths}

    def is_empty(self) -> bool:
        return self._count == 0

    def __len__(self) -> int:
        return self._count

    def __iter__(self) -> Iterator[OuiEntry]:
        entries = [entry for table in self._index.values() for entry in table.values()]
        entries.sort(key=lambda e: (e.prefix, e.prefix_len))
        return iter(entries)

    def __contains__(self, address) -> bool:
        try:
            return self.lookup(address) is not None
        except InvalidMacAddress:
            return False

    def __repr__(self) -> str:
        return f"<OuiDatabase entries={self._count} lengths={list(self.prefix_lengths)}>"

    # ------------------------------------------------------------------
    # Binary export
    # ------------------------------------------------------------------

    def serialize(self) -> bytes:
        """Dump all entries into the versioned binary export format."""
        chunks = [_HEADER.pack(EXPORT_MAGIC, EXPORT_VERSION, self._count)]
        for entry in self:
            flags = 0
            if entry.name_long is not None:
                flags |= FLAG_NAME_LONG
            if entry.comment is not None:
                flags |= FLAG_COMMENT
            chunks.append(_RECORD.pack(entry.prefix, entry.prefix_len, flags))
            chunks.append(_pack_string(entry.name_short, "name_short"))
            if entry.name_long is not None:
                chunks.append(_pack_string(entry.name_long, "name_long"))
            if entry.comment is not None:
                chunks.append(_pack_string(entry.comment, "comment"))

        data = b"".join(chunks)
        logger.info(f"Created export of OUI vendor database ({self._count} entries, {len(data)} bytes)")
        return data

    @classmethod
    def deserialize(cls, blob: bytes) -> "OuiDatabase":
        """
        Rebuild a database from :meth:`serialize` output.

        Raises:
            UnsupportedFormatVersion: if the export was written by an unknown format version
            CorruptExportError: on bad magic, truncation or trailing data
        """
        view = memoryview(blob)
        if len(view) < _HEADER.size:
            raise CorruptExportError("Export too short to hold a header")

        magic, version, count = _HEADER.unpack_from(view, 0)
        if magic != EXPORT_MAGIC:
            raise CorruptExportError(f"Not an ouidb export (magic {magic!r})")
        if version != EXPORT_VERSION:
            raise UnsupportedFormatVersion(version, EXPORT_VERSION)

        offset = _HEADER.size
        entries = []
        try:
            for _ in range(count):
                prefix, prefix_len, flags = _RECORD.unpack_from(view, offset)
                offset += _RECORD.size

                if not 1 <= prefix_len <= ADDRESS_BITS or prefix & ~prefix_mask(prefix_len):
                    raise CorruptExportError(f"Invalid block in export: {prefix:#x}/{prefix_len}")

                name_short, offset = _unpack_string(view, offset)
                name_long = comment = None
                if flags & FLAG_NAME_LONG:
                    name_long, offset = _unpack_string(view, offset)
                if flags & FLAG_COMMENT:
                    comment, offset = _unpack_string(view, offset)

                entries.append(OuiEntry(prefix, prefix_len, name_short, name_long, comment))
        except struct.error as e:
            raise CorruptExportError(f"Truncated export: {e}") from e

        if offset != len(view):
            raise CorruptExportError(f"Unexpected {len(view) - offset} trailing bytes in export")
        if not all(e.name_short for e in entries):
            raise CorruptExportError("Export contains an entry without a short name")

        db = cls.from_entries(entries)
        logger.info(f"Created OUI vendor database from export ({len(db)} entries)")
        return db
