"""
Database loading helpers.

Wraps the pure OuiDatabase constructors with file access and the SQLite
export cache, so a restart deserialises the previous export instead of
re-parsing the manuf text.
"""

import logging
import sqlite3
from pathlib import Path
from typing import Optional, Union

from .cache import ExportCache
from .config import Config
from .database import OuiDatabase
from .exceptions import ExportError


logger = logging.getLogger(__name__)


def file_fingerprint(path: Union[str, Path]) -> str:
    """Cheap change detector for a source file (size and mtime)."""
    stat = Path(path).stat()
    return f"{stat.st_size}:{stat.st_mtime_ns}"


def load_database(config: Config, cache: Optional[ExportCache] = None) -> OuiDatabase:
    """
    Load the OUI database described by a Config.

    Uses the export cache when enabled and fresh; otherwise parses the
    manuf file and refreshes the cache. A cache that SQLite cannot open
    or query is logged and skipped.

    Args:
        config: Application configuration
        cache: Export cache to use (created from config when None)

    Returns:
        Loaded OuiDatabase

    Raises:
        OSError: if the manuf file cannot be read
        EmptyDatabaseError: if the manuf file holds no usable entries
    """
    manuf_path = Path(config.database.manuf_path).expanduser()
    source = str(manuf_path.resolve())
    fingerprint = file_fingerprint(manuf_path)

    if not config.cache.enabled:
        cache = None
    elif cache is None:
        try:
            cache = ExportCache(config.cache.db_path)
        except sqlite3.Error as e:
            logger.warning(f"Export cache at {config.cache.db_path} unavailable, parsing {source}: {e}")

    if cache is not None:
        try:
            blob = cache.load_export(source, fingerprint)
        except sqlite3.Error as e:
            logger.warning(f"Could not read export cache at {cache.db_path}, parsing {source}: {e}")
            cache = None
            blob = None

        if blob is not None:
            try:
                db = OuiDatabase.deserialize(blob)
                logger.info(f"Loaded {len(db)} OUI entries from cached export of {source}")
                return db
            except ExportError as e:
                logger.warning(f"Discarding unusable cached export for {source}: {e}")

    db = OuiDatabase.from_file(manuf_path, max_errors=config.database.max_reported_errors)

    if cache is not None:
        try:
            cache.save_export(source, fingerprint, db.serialize())
        except sqlite3.Error as e:
            logger.warning(f"Could not update export cache at {cache.db_path}: {e}")

    return db


def load_export_file(path: Union[str, Path]) -> OuiDatabase:
    """Load a database from a binary export written by write_export_file."""
    data = Path(path).read_bytes()
    logger.info(f"Importing OUI vendor database from {path}")
    return OuiDatabase.deserialize(data)


def write_export_file(db: OuiDatabase, path: Union[str, Path]):
    """Write a binary export of a database to disk."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(db.serialize())
    logger.info(f"Exported {len(db)} OUI entries to {path}")
