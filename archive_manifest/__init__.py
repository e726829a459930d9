"""archive-manifest: build manifest.json for the document archive browser."""

from archive_manifest.builder import build_manifest
from archive_manifest.config import ScanSettings
from archive_manifest.errors import (
    ArchiveManifestError,
    MultiplePrimaryConflict,
    RootNotFound,
    ScanAborted,
)
from archive_manifest.nodes import Branch, Document, Missing
from archive_manifest.scanner import scan_tree

__all__ = [
    "ArchiveManifestError",
    "Branch",
    "Document",
    "Missing",
    "MultiplePrimaryConflict",
    "RootNotFound",
    "ScanAborted",
    "ScanSettings",
    "build_manifest",
    "scan_tree",
]
