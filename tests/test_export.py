"""Tests for the binary export format."""

import struct

import pytest

from ouidb.core.database import EXPORT_MAGIC, EXPORT_VERSION, OuiDatabase
from ouidb.core.exceptions import CorruptExportError, ExportError, UnsupportedFormatVersion
from ouidb.core.models import OuiEntry

from .conftest import SAMPLE_ADDRESSES


def test_round_trip_answers_lookups_identically(sample_db):
    restored = OuiDatabase.deserialize(sample_db.serialize())

    assert len(restored) == len(sample_db)
    assert list(restored) == list(sample_db)
    for address in SAMPLE_ADDRESSES:
        assert restored.lookup(address) == sample_db.lookup(address)


def test_round_trip_keeps_optional_fields_and_unicode():
    db = OuiDatabase.from_entries([
        OuiEntry(0x00000C000000, 24, "Cisco"),
        OuiEntry(0x001BC5000000, 36, "Société", "Société Générale", "sub-block ✓"),
        OuiEntry(0x985AEB000000, 24, "Apple", None, "comment only"),
    ])
    restored = OuiDatabase.deserialize(db.serialize())
    assert list(restored) == list(db)
    assert restored.lookup("00:1B:C5:00:00:01").comment == "sub-block ✓"
    assert restored.lookup("98:5A:EB:00:00:01").name_long is None


def test_empty_database_round_trip():
    restored = OuiDatabase.deserialize(OuiDatabase().serialize())
    assert len(restored) == 0


def test_header_layout(sample_db):
    blob = sample_db.serialize()
    assert blob[:5] == EXPORT_MAGIC
    version, count = struct.unpack("!HI", blob[5:11])
    assert version == EXPORT_VERSION
    assert count == len(sample_db)


def test_deserialized_database_has_no_load_report(sample_db):
    assert OuiDatabase.deserialize(sample_db.serialize()).load_report is None


def test_unknown_version_fails_closed(sample_db):
    blob = bytearray(sample_db.serialize())
    blob[5:7] = struct.pack("!H", 99)

    with pytest.raises(UnsupportedFormatVersion) as exc_info:
        OuiDatabase.deserialize(bytes(blob))
    assert exc_info.value.version == 99
    assert exc_info.value.supported == EXPORT_VERSION


@pytest.mark.parametrize(
    "mangle",
    [
        lambda blob: b"",
        lambda blob: b"NOTDB" + blob[5:],
        lambda blob: blob[:-3],
        lambda blob: blob[:20],
        lambda blob: blob + b"\x00",
    ],
    ids=["empty", "bad-magic", "truncated-tail", "truncated-entry", "trailing-bytes"],
)
def test_corrupt_exports_are_rejected(sample_db, mangle):
    with pytest.raises(CorruptExportError):
        OuiDatabase.deserialize(mangle(sample_db.serialize()))


def test_invalid_block_is_rejected():
    blob = (
        struct.pack("!5sHI", EXPORT_MAGIC, EXPORT_VERSION, 1)
        + struct.pack("!QBB", 0x00000C000001, 24, 0)
        + struct.pack("!H", 5) + b"Cisco"
    )
    with pytest.raises(CorruptExportError):
        OuiDatabase.deserialize(blob)


def test_export_errors_share_a_base_class():
    assert issubclass(UnsupportedFormatVersion, ExportError)
    assert issubclass(CorruptExportError, ExportError)
