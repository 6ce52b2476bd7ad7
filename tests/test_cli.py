"""Tests for the ouidb command line."""

import json

import pytest

from ouidb.main import format_result, main
from ouidb.core.models import OuiEntry


@pytest.fixture
def base_args(tmp_path, manuf_file):
    return ["-c", str(tmp_path / "missing.yaml"), "--manuf", str(manuf_file), "--no-cache"]


def test_lookup_prints_vendor(base_args, capsys):
    assert main(base_args + ["00:00:0C:AB:CD:EF", "00:00:0C:01:0A:BC"]) == 0

    lines = capsys.readouterr().out.splitlines()
    assert lines == [
        "00:00:0C:AB:CD:EF  Cisco / Cisco Systems, Inc",
        "00:00:0C:01:0A:BC  CiscoSub / Cisco Sub-block",
    ]


def test_unknown_address(base_args, capsys):
    assert main(base_args + ["12:34:56:78:9A:BC"]) == 0
    assert capsys.readouterr().out.strip() == "12:34:56:78:9A:BC  Unknown"


def test_invalid_address_sets_exit_status(base_args, capsys):
    assert main(base_args + ["not-a-mac", "98:5A:EB:C6:F6:5D"]) == 1
    assert "98:5A:EB:C6:F6:5D  Apple / Apple, Inc." in capsys.readouterr().out


def test_json_output(base_args, capsys):
    assert main(base_args + ["--json", "00:00:18:00:20:01", "12:34:56:78:9A:BC"]) == 0

    found, missing = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
    assert found["found"] is True
    assert found["name_short"] == "WebsterC"
    assert found["comment"] == "Appletalk/Ethernet Gateway"
    assert missing == {"address": "12:34:56:78:9A:BC", "found": False}


def test_stats(base_args, capsys):
    assert main(base_args + ["--stats"]) == 0

    out = capsys.readouterr().out
    assert "Total entries: 8" in out
    assert "/36: 2" in out
    assert "Skipped lines: 1" in out


def test_export_then_import(base_args, tmp_path, capsys):
    export_path = tmp_path / "manuf.bin"
    assert main(base_args + ["--export", str(export_path)]) == 0
    assert export_path.exists()

    args = ["-c", str(tmp_path / "missing.yaml"), "--import", str(export_path), "1C:CA:E3:05:00:01"]
    assert main(args) == 0
    assert "DatalinkSas" in capsys.readouterr().out


def test_bad_import_fails(tmp_path):
    bad = tmp_path / "bad.bin"
    bad.write_bytes(b"not an export")
    assert main(["-c", str(tmp_path / "missing.yaml"), "--import", str(bad)]) == 1


def test_missing_manuf_fails(tmp_path):
    args = ["-c", str(tmp_path / "missing.yaml"), "--manuf", str(tmp_path / "nope.txt"), "--no-cache"]
    assert main(args) == 1


def test_generate_config(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert main(["--generate-config"]) == 0
    assert (tmp_path / "config" / "config.yaml").exists()


def test_format_result_with_comment():
    entry = OuiEntry(0x000018000000, 24, "WebsterC", None, "Gateway")
    assert format_result("00:00:18:00:20:01", entry) == "00:00:18:00:20:01  WebsterC (Gateway)"


def test_unreadable_cache_does_not_stop_lookups(tmp_path, manuf_file, monkeypatch, capsys):
    cache_path = tmp_path / "ouidb_cache.db"
    cache_path.write_bytes(b"not a database" * 100)
    monkeypatch.setenv("OUIDB_CACHE_PATH", str(cache_path))

    args = ["-c", str(tmp_path / "missing.yaml"), "--manuf", str(manuf_file), "00:00:0C:AB:CD:EF"]
    assert main(args) == 0
    assert capsys.readouterr().out.strip() == "00:00:0C:AB:CD:EF  Cisco / Cisco Systems, Inc"
