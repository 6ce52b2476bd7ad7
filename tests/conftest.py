"""Shared fixtures for the ouidb test suite."""

import pytest

from ouidb.core.config import Config
from ouidb.core.database import OuiDatabase


SAMPLE_MANUF = """\
# Wireshark manuf sample
00:00:0C\tCisco\tCisco Systems, Inc
00:00:0C:01:00:00/36\tCiscoSub\tCisco Sub-block
00:00:18\tWebsterC\tWebster Computer Corporation\t# Appletalk/Ethernet Gateway
00:1B:C5:00:00:00/36\tConverging\tConverging Systems Inc.
1C:CA:E3\tIEEERegi\tIEEE Registration Authority
1C:CA:E3:00:00:00/28\tDatalinkSas\tDalian DataLink S.A.S.
98:5A:EB\tApple\tApple, Inc.

garbage-data
FF:FF:FF:FF:FF:FF/48\tBroadcast
"""

# Addresses spanning every block in SAMPLE_MANUF plus uncovered space
SAMPLE_ADDRESSES = [
    "00:00:00:00:00:00",
    "00:00:0C:AB:CD:EF",
    "00:00:0C:01:0A:BC",
    "00:00:0C:01:1A:BC",
    "00:00:18:00:20:01",
    "00:1B:C5:00:0F:FF",
    "00:1B:C5:00:10:00",
    "1C:CA:E3:05:00:01",
    "1C:CA:E3:15:00:01",
    "98:5A:EB:C6:F6:5D",
    "12:34:56:78:9A:BC",
    "FF:FF:FF:FF:FF:FE",
    "FF:FF:FF:FF:FF:FF",
]

ENV_VARS = [
    "OUI_DB_PATH",
    "OUIDB_CACHE_ENABLED",
    "OUIDB_CACHE_PATH",
    "WEB_HOST",
    "WEB_PORT",
    "LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep host environment overrides out of config loading."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def sample_db():
    return OuiDatabase.from_text(SAMPLE_MANUF)


@pytest.fixture
def manuf_file(tmp_path):
    path = tmp_path / "manuf.txt"
    path.write_text(SAMPLE_MANUF, encoding="utf-8")
    return path


@pytest.fixture
def config(tmp_path, manuf_file):
    config = Config()
    config.database.manuf_path = str(manuf_file)
    config.cache.db_path = str(tmp_path / "cache" / "ouidb_cache.db")
    return config
