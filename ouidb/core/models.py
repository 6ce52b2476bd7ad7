"""
Data models for the OUI vendor database.

Addresses and prefixes are plain integers in a 48-bit space with the
prefix bits left-justified, so a /24 block for 00:00:0C is 0x00000C000000.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple


ADDRESS_BITS = 48
ADDRESS_MASK = (1 << ADDRESS_BITS) - 1


def prefix_mask(prefix_len: int) -> int:
    """Netmask selecting the top ``prefix_len`` bits of a 48-bit address."""
    return ADDRESS_MASK ^ (ADDRESS_MASK >> prefix_len)


def format_mac_address(address: int) -> str:
    """Render a 48-bit integer as AA:BB:CC:DD:EE:FF."""
    return ":".join(f"{b:02X}" for b in address.to_bytes(6, "big"))


@dataclass(frozen=True)
class OuiEntry:
    """One manuf record mapping an address block to its vendor."""

    prefix: int
    prefix_len: int
    name_short: str
    name_long: Optional[str] = None
    comment: Optional[str] = None

    @property
    def mask(self) -> int:
        """Netmask for this block."""
        return prefix_mask(self.prefix_len)

    @property
    def first_address(self) -> int:
        """Lowest address inside the block."""
        return self.prefix

    @property
    def last_address(self) -> int:
        """Highest address inside the block."""
        return self.prefix | (ADDRESS_MASK >> self.prefix_len)

    def covers(self, address: int) -> bool:
        return (address & self.mask) == self.prefix

    def to_dict(self) -> dict:
        """Convert entry to dictionary for serialization."""
        return {
            "prefix": format_mac_address(self.prefix),
            "prefix_len": self.prefix_len,
            "name_short": self.name_short,
            "name_long": self.name_long,
            "comment": self.comment,
        }


@dataclass
class LoadReport:
    """Outcome of building a database from manuf text."""

    lines_read: int = 0
    entries: int = 0
    skipped: int = 0
    duplicates: int = 0
    errors: List[Tuple[int, str]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return {
            "lines_read": self.lines_read,
            "entries": self.entries,
            "skipped": self.skipped,
            "duplicates": self.duplicates,
            "errors": [{"line": n, "error": e} for n, e in self.errors],
        }
