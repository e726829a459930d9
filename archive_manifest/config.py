from dotenv import load_dotenv
load_dotenv()

"""
config.py — Scan configuration.

Defaults come from the environment (or a .env file) and can be overridden
per run, e.g. by CLI flags:

  ARCHIVE_ROOT         content root to scan             (./Files)
  ARCHIVE_MANIFEST     manifest output path             (./manifest.json)
  ARCHIVE_STRICT       abort on multiple primary docs   (false)
  ARCHIVE_INTERACTIVE  confirm each rename on the tty   (false)
  ARCHIVE_MAX_DEPTH    traversal depth cap              (10)
"""

import os
import logging

from pydantic import BaseModel, Field

log = logging.getLogger(__name__)


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value.strip())
    except ValueError:
        log.warning(f"⚠️  {name}={value!r} is not an integer, using {default}")
        return default


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------
CONTENT_ROOT     = os.getenv("ARCHIVE_ROOT", "./Files")
MANIFEST_FILE    = os.getenv("ARCHIVE_MANIFEST", "./manifest.json")
STRICT_PRIMARY   = _env_flag("ARCHIVE_STRICT")
INTERACTIVE      = _env_flag("ARCHIVE_INTERACTIVE")
MAX_DEPTH        = _env_int("ARCHIVE_MAX_DEPTH", 10)

PRIMARY_EXT      = ".pdf"
SECONDARY_EXT    = ".mp3"
META_FILENAME    = "meta.json"


class ScanSettings(BaseModel):
    root: str = CONTENT_ROOT
    manifest_path: str = MANIFEST_FILE
    strict: bool = STRICT_PRIMARY
    interactive: bool = INTERACTIVE
    max_depth: int = Field(default=MAX_DEPTH, ge=1, le=100)
    primary_ext: str = Field(default=PRIMARY_EXT, pattern=r"^\.\w+$")
    secondary_ext: str = Field(default=SECONDARY_EXT, pattern=r"^\.\w+$")
    meta_filename: str = META_FILENAME
