"""
builder.py — End-to-end manifest build: scan → resolve renames → write.

Fatal errors (missing root, strict-mode conflicts, user quit) propagate
before anything is written, so a manifest on disk is always complete.
"""

import logging
from typing import Optional

from archive_manifest.config import ScanSettings
from archive_manifest.scanner import scan_tree
from archive_manifest.validator import ConfirmPolicy, auto_confirm, resolve_renames
from archive_manifest.writer import write_manifest

log = logging.getLogger(__name__)


def build_manifest(settings: Optional[ScanSettings] = None,
                   confirm: Optional[ConfirmPolicy] = None) -> dict:
    """
    Build and write the manifest.  *confirm* decides each pending rename;
    it defaults to renaming everything (batch mode).
    """
    settings = settings or ScanSettings()
    confirm = confirm or auto_confirm

    result = scan_tree(settings)

    pending = result.pending_renames
    if pending:
        log.info(f"🔧 {len(pending)} secondary file(s) to rename")
    rename_stats = resolve_renames(pending, confirm)

    total = write_manifest(result.tree, settings.manifest_path)

    log.info("✅ Manifest built successfully!")
    log.info(f"📊 Total entries: {total}")
    log.info(f"📄 Manifest saved to: {settings.manifest_path}")

    return {
        "status": "ok",
        "entries": total,
        "warnings": result.warning_count,
        "leaves_with_warnings": sum(1 for r in result.leaves if r.warnings),
        "renamed": rename_stats["renamed"],
        "rename_declined": rename_stats["declined"],
        "rename_failed": rename_stats["failed"],
        "depth_skipped": len(result.skipped),
        "invalid_names": len(result.invalid_names),
        "manifest_path": settings.manifest_path,
    }
