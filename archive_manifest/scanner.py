"""
scanner.py — Depth-first walk of the content root.

Each directory is classified as:
  • leaf    — directly holds a primary document or the metadata file
  • branch  — holds subdirectories only; scanned recursively
  • empty   — holds neither; recorded as an empty branch

`scan_directory` is a pure recursive function: every call returns its own
subtree and leaf reports, and the caller merges them.  No renames happen
during the walk; they are left as proposals on the leaf reports.
"""

import os
import logging
from dataclasses import dataclass, field

from archive_manifest.config import ScanSettings
from archive_manifest.errors import MultiplePrimaryConflict, RootNotFound
from archive_manifest.nodes import Branch
from archive_manifest.validator import LeafReport, has_extension, inspect_leaf, is_utf8_name

log = logging.getLogger(__name__)

LEAF = "leaf"
BRANCH = "branch"
EMPTY = "empty"


@dataclass
class ScanResult:
    tree: Branch = field(default_factory=Branch)
    leaves: list[LeafReport] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)   # branches past max_depth
    invalid_names: list[str] = field(default_factory=list)   # not valid UTF-8, left out

    @property
    def warning_count(self) -> int:
        return sum(len(r.warnings) for r in self.leaves)

    @property
    def pending_renames(self) -> list[LeafReport]:
        return [r for r in self.leaves if r.rename is not None]


def printable_name(name: str) -> str:
    """Undecodable bytes shown as \\xNN escapes."""
    return name.encode("utf-8", "surrogateescape").decode("utf-8", "backslashreplace")


def _icon(depth: int) -> str:
    if depth == 0:
        return "📚"
    if depth == 1:
        return "📖"
    return "📄"


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------

def classify_directory(dir_path: str, settings: ScanSettings) -> str:
    try:
        names = os.listdir(dir_path)
    except OSError as e:
        log.warning(f"⚠️  Error checking directory {dir_path}: {e}")
        return EMPTY

    has_dirs = False
    for name in names:
        full = os.path.join(dir_path, name)
        if os.path.isfile(full):
            if has_extension(name, settings.primary_ext) or name == settings.meta_filename:
                return LEAF
        elif os.path.isdir(full):
            has_dirs = True

    return BRANCH if has_dirs else EMPTY


# ---------------------------------------------------------------------------
# Walk
# ---------------------------------------------------------------------------

def scan_directory(dir_path: str,
                   settings: ScanSettings,
                   rel_path: str = "",
                   depth: int = 0) -> ScanResult:
    """Scan the subdirectories of *dir_path* and return their subtree."""
    result = ScanResult()

    try:
        subdirs = sorted(
            name for name in os.listdir(dir_path)
            if os.path.isdir(os.path.join(dir_path, name))
        )
    except OSError as e:
        log.warning(f"⚠️  Cannot read {dir_path}: {e}")
        return result

    indent = "  " * depth
    icon = _icon(depth)

    for name in subdirs:
        entry_path = os.path.join(dir_path, name)
        entry_rel = f"{rel_path}/{name}" if rel_path else name

        if not is_utf8_name(name):
            result.invalid_names.append(printable_name(entry_rel))
            log.warning(f"{indent}{icon} ⚠️ {printable_name(name)} "
                        f"(name is not valid UTF-8, left out of the manifest)")
            continue

        kind = classify_directory(entry_path, settings)

        if kind == LEAF:
            report = inspect_leaf(entry_path, entry_rel, settings)
            result.tree.children[name] = report.node
            result.leaves.append(report)
            warning_text = f" ({', '.join(report.warnings)})" if report.warnings else ""
            log.info(f"{indent}{icon} {report.status} {name}{warning_text}")

        elif kind == EMPTY:
            result.tree.children[name] = Branch()
            log.warning(f"{indent}{icon} ⚠️ {name} (empty directory)")

        elif depth + 1 >= settings.max_depth:
            result.tree.children[name] = Branch()
            result.skipped.append(entry_rel)
            log.warning(f"{indent}{icon} ⚠️ {name} "
                        f"(max depth {settings.max_depth} reached, not descending)")

        else:
            log.info(f"{indent}{icon} Processing: {name}")
            sub = scan_directory(entry_path, settings, entry_rel, depth + 1)
            result.tree.children[name] = sub.tree
            result.leaves.extend(sub.leaves)
            result.skipped.extend(sub.skipped)
            result.invalid_names.extend(sub.invalid_names)

    return result


def scan_tree(settings: ScanSettings) -> ScanResult:
    """
    Scan the content root named in *settings*.

    Raises RootNotFound if the root is not a directory, and in strict mode
    MultiplePrimaryConflict listing every leaf with more than one primary.
    """
    root = settings.root
    if not os.path.isdir(root):
        raise RootNotFound(root)

    log.info(f"🔍 Scanning {root}...")
    result = scan_directory(root, settings)

    if settings.strict:
        conflicts = {
            r.rel_path: r.primary_conflict
            for r in result.leaves if r.primary_conflict
        }
        if conflicts:
            raise MultiplePrimaryConflict(conflicts)

    return result
