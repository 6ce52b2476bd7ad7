"""
Record parser for the Wireshark manuf database.

Each record line looks like::

    00:00:0C	Cisco	Cisco Systems, Inc
    00:1B:C5:00:00:00/36	Converging	Converging Systems Inc.
    00:50:C2:00:30:00/36	Bruel	Bruel & Kjaer	# legacy comment

Fields are tab separated in the upstream file. Lines without any tab are
split on whitespace instead: prefix, short name, then the rest of the line
as the long name. A ``#`` after the short name starts a comment; without
one, a fourth tab column is taken as the comment.
"""

import re
from typing import Optional, Tuple, Union

from .exceptions import InvalidMacAddress, MalformedPrefix, MissingName
from .models import ADDRESS_BITS, ADDRESS_MASK, OuiEntry, format_mac_address, prefix_mask


# An undecorated prefix is a classic 24-bit OUI
DEFAULT_PREFIX_LEN = 24

_DELIMITED_PREFIX_RE = re.compile(r"[0-9A-Fa-f]{2}(?:([:\-.])[0-9A-Fa-f]{2}(?:\1[0-9A-Fa-f]{2}){0,4})?")
_BARE_PREFIX_RE = re.compile(r"(?:[0-9A-Fa-f]{2}){1,6}")
_MASK_RE = re.compile(r"[0-9]{1,2}")
_SEPARATOR_RE = re.compile(r"[:\-.]")
_TABS_RE = re.compile(r"\t+")

_MAC_DELIMITED_RE = re.compile(r"[0-9A-Fa-f]{2}([:\-])(?:[0-9A-Fa-f]{2}\1){4}[0-9A-Fa-f]{2}")
_MAC_CISCO_RE = re.compile(r"[0-9A-Fa-f]{4}\.[0-9A-Fa-f]{4}\.[0-9A-Fa-f]{4}")
_MAC_BARE_RE = re.compile(r"[0-9A-Fa-f]{12}")
_NON_HEX_RE = re.compile(r"[^0-9A-Fa-f]")

MacAddressLike = Union[int, bytes, bytearray, str]


def parse_prefix(field: str, line: Optional[str] = None) -> Tuple[int, int]:
    """
    Parse a manuf prefix field such as ``00:00:0C`` or ``00:1B:C5:00:00:00/36``.

    Args:
        field: The prefix column, with an optional ``/bits`` suffix
        line: Full source line, used for error reporting

    Returns:
        ``(prefix, prefix_len)`` with the prefix left-justified in 48 bits
        and every bit past ``prefix_len`` cleared

    Raises:
        MalformedPrefix: if the bytes or the mask are not valid
    """
    source = field if line is None else line
    address, slash, bits = field.partition("/")

    if slash:
        if not _MASK_RE.fullmatch(bits):
            raise MalformedPrefix(source, f"Invalid prefix mask {bits!r}")
        prefix_len = int(bits)
        if not 1 <= prefix_len <= ADDRESS_BITS:
            raise MalformedPrefix(source, f"Prefix mask out of range: /{prefix_len}")
    else:
        prefix_len = DEFAULT_PREFIX_LEN

    if _DELIMITED_PREFIX_RE.fullmatch(address):
        hex_digits = _SEPARATOR_RE.sub("", address)
    elif _BARE_PREFIX_RE.fullmatch(address):
        hex_digits = address
    else:
        raise MalformedPrefix(source, f"Invalid address prefix {address!r}")

    byte_count = len(hex_digits) // 2
    value = int(hex_digits, 16) << (8 * (6 - byte_count))
    return value & prefix_mask(prefix_len), prefix_len


def _split_fields(body: str):
    # The prefix never contains whitespace; names are tab separated when
    # the line has tabs, and may hold spaces
    head = body.split(None, 1)
    if len(head) < 2:
        return head
    prefix, rest = head
    if "\t" in rest:
        fields = _TABS_RE.split(rest)
    else:
        fields = rest.split(None, 1)
    return [prefix] + [f.strip() for f in fields if f.strip()]


def parse_line(line: str) -> Optional[OuiEntry]:
    """
    Parse one line of the manuf database.

    Blank lines and ``#`` comment lines return None.

    Raises:
        MalformedPrefix: if the prefix column is not a valid address/mask
        MissingName: if there is no short name after the prefix
    """
    text = line.strip()
    if not text or text.startswith("#"):
        return None

    body, hash_sign, trailing = text.partition("#")
    fields = _split_fields(body)

    prefix, prefix_len = parse_prefix(fields[0], line)

    if len(fields) < 2:
        raise MissingName(line, "Missing vendor short name")

    name_long = fields[2] if len(fields) > 2 else None

    comment_parts = fields[3:]
    if hash_sign and trailing.strip():
        comment_parts.append(trailing.strip())

    return OuiEntry(
        prefix=prefix,
        prefix_len=prefix_len,
        name_short=fields[1],
        name_long=name_long,
        comment=" ".join(comment_parts) or None,
    )


def format_prefix(prefix: int, prefix_len: int) -> str:
    """Render a prefix the way manuf writes it (bare OUI for /24)."""
    if prefix_len == DEFAULT_PREFIX_LEN:
        return format_mac_address(prefix)[:8]
    return f"{format_mac_address(prefix)}/{prefix_len}"


def format_entry(entry: OuiEntry) -> str:
    """Turn an entry back into a manuf line."""
    fields = [format_prefix(entry.prefix, entry.prefix_len), entry.name_short]
    if entry.name_long:
        fields.append(entry.name_long)
    text = "\t".join(fields)
    if entry.comment:
        text += f"\t# {entry.comment}"
    return text


def parse_mac_address(value: MacAddressLike) -> int:
    """
    Normalise a hardware address to a 48-bit integer.

    Accepts an int in range, 6 raw bytes, or one of the usual text forms:
    ``AA:BB:CC:DD:EE:FF``, ``AA-BB-CC-DD-EE-FF``, ``AABB.CCDD.EEFF`` and
    ``AABBCCDDEEFF``.

    Raises:
        InvalidMacAddress: for anything else
    """
    if isinstance(value, bool):
        raise InvalidMacAddress(value)

    if isinstance(value, int):
        if 0 <= value <= ADDRESS_MASK:
            return value
        raise InvalidMacAddress(value)

    if isinstance(value, (bytes, bytearray)):
        if len(value) == 6:
            return int.from_bytes(value, "big")
        raise InvalidMacAddress(value)

    if isinstance(value, str):
        text = value.strip()
        if (
            _MAC_DELIMITED_RE.fullmatch(text)
            or _MAC_CISCO_RE.fullmatch(text)
            or _MAC_BARE_RE.fullmatch(text)
        ):
            return int(_NON_HEX_RE.sub("", text), 16)

    raise InvalidMacAddress(value)
