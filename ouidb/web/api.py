"""
FastAPI Web Server for OUI vendor lookups.

Provides a small REST API for:
- Single and batch MAC address lookups
- Database statistics
"""

import logging
from contextlib import asynccontextmanager
from typing import Dict, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
import uvicorn

from ..core.config import Config, get_default_config_path
from ..core.database import OuiDatabase
from ..core.exceptions import InvalidMacAddress, OuiDbError
from ..core.loader import load_database
from ..core.models import OuiEntry, format_mac_address
from ..core.parser import parse_mac_address


logger = logging.getLogger(__name__)

# Global state (will be initialized in lifespan)
oui_db: Optional[OuiDatabase] = None
config: Optional[Config] = None


# Pydantic models for API
class VendorInfo(BaseModel):
    prefix: str
    prefix_len: int
    name_short: str
    name_long: Optional[str] = None
    comment: Optional[str] = None


class LookupResult(BaseModel):
    address: str
    found: bool
    vendor: Optional[VendorInfo] = None
    error: Optional[str] = None


class BatchLookupRequest(BaseModel):
    addresses: List[str]


class DatabaseStats(BaseModel):
    entries: int
    prefix_lengths: Dict[int, int]
    skipped_lines: int = 0
    duplicate_blocks: int = 0


def _vendor_info(entry: OuiEntry) -> VendorInfo:
    return VendorInfo(**entry.to_dict())


def _require_db() -> OuiDatabase:
    if oui_db is None:
        raise HTTPException(status_code=503, detail="OUI database not loaded")
    return oui_db


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    global oui_db, config

    # Startup
    logger.info("Starting web server...")

    # Initialize with default config if not set
    if config is None:
        config_path = get_default_config_path()
        logger.info(f"Loading configuration from {config_path}")
        config = Config.from_yaml(config_path)

    if oui_db is None:
        try:
            oui_db = load_database(config)
        except (OuiDbError, OSError) as e:
            logger.error(f"Failed to load OUI database: {e}")

    logger.info("Web server started")

    yield

    # Shutdown
    logger.info("Web server shut down")


# Create FastAPI app
app = FastAPI(
    title="OUI Vendor Lookup",
    description="MAC address vendor lookups backed by the Wireshark manuf database",
    version="1.0.0",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# API Endpoints

@app.get("/api/health")
async def health():
    """Liveness check that also reports whether the database is loaded."""
    return {"status": "ok", "database_loaded": oui_db is not None}


@app.get("/api/stats", response_model=DatabaseStats)
async def get_stats():
    """Entry counts for the loaded database."""
    db = _require_db()
    report = db.load_report
    return DatabaseStats(
        entries=len(db),
        prefix_lengths=db.prefix_length_counts(),
        skipped_lines=report.skipped if report else 0,
        duplicate_blocks=report.duplicates if report else 0,
    )


@app.get("/api/lookup/{mac}", response_model=LookupResult)
async def lookup_mac(mac: str):
    """Look up the vendor for a single MAC address."""
    db = _require_db()

    try:
        address = parse_mac_address(mac)
    except InvalidMacAddress as e:
        raise HTTPException(status_code=400, detail=str(e))

    entry = db.lookup(address)
    if entry is None:
        raise HTTPException(status_code=404, detail=f"No vendor registered for {format_mac_address(address)}")

    return LookupResult(address=format_mac_address(address), found=True, vendor=_vendor_info(entry))


@app.post("/api/lookup", response_model=List[LookupResult])
async def lookup_batch(request: BatchLookupRequest):
    """Look up many addresses; invalid ones are reported per item."""
    db = _require_db()

    results = []
    for mac in request.addresses:
        try:
            address = parse_mac_address(mac)
        except InvalidMacAddress as e:
            results.append(LookupResult(address=mac, found=False, error=str(e)))
            continue

        entry = db.lookup(address)
        results.append(LookupResult(
            address=format_mac_address(address),
            found=entry is not None,
            vendor=_vendor_info(entry) if entry else None,
        ))
    return results


def start_web_server(
    host: str = "0.0.0.0",
    port: int = 8000,
    app_config: Optional[Config] = None,
):
    """Start the web server."""
    global config

    if app_config:
        config = app_config

    logger.info(f"Starting web server on http://{host}:{port}")

    uvicorn.run(
        app,
        host=host,
        port=port,
        log_level="info",
    )
