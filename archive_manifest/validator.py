"""
validator.py — Leaf directory validation and secondary-file normalization.

For every leaf directory the validator decides the manifest value and
whether the audio companion needs renaming so it shares the document's stem:

  primary  secondary        result
  -------  ---------------  ---------------------------------------------
  0        any              Missing, warn "no primary file"
  1        0                Document
  1        1, stem differs  Document + RenameProposal
  1        1, stem matches  Document
  1        >1               Document, warn, no rename
  >1       any              first (sorted) Document, warn, conflict noted
                            (strict mode words the warning as a conflict)

Rename proposals are only *recorded* here.  `resolve_renames` runs them
through a confirmation policy afterwards and applies the confirmed ones.
"""

import os
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

from archive_manifest.config import ScanSettings
from archive_manifest.errors import ScanAborted
from archive_manifest.meta import MetaFileError, load_meta
from archive_manifest.nodes import ContentNode, Document, Missing

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------
class RenameDecision(str, Enum):
    CONFIRM = "confirm"
    DECLINE = "decline"
    QUIT = "quit"


@dataclass
class RenameProposal:
    directory: str
    old_name: str
    new_name: str
    rel_path: str = ""

    @property
    def old_path(self) -> str:
        return os.path.join(self.directory, self.old_name)

    @property
    def new_path(self) -> str:
        return os.path.join(self.directory, self.new_name)


@dataclass
class LeafReport:
    rel_path: str
    node: ContentNode
    warnings: list[str] = field(default_factory=list)
    rename: Optional[RenameProposal] = None
    primary_conflict: list[str] = field(default_factory=list)
    rename_resolved: bool = False

    @property
    def status(self) -> str:
        if self.warnings:
            return "⚠️"
        if self.rename is not None and not self.rename_resolved:
            return "📝"
        return "✅"


ConfirmPolicy = Callable[[RenameProposal], RenameDecision]


# ═══════════════════════════════════════════════════════════════════════════
# 1.  LEAF INSPECTION
# ═══════════════════════════════════════════════════════════════════════════

def list_files(dir_path: str) -> list[str]:
    """Regular files directly inside *dir_path*, sorted by codepoint."""
    return sorted(
        name for name in os.listdir(dir_path)
        if os.path.isfile(os.path.join(dir_path, name))
    )


def is_utf8_name(name: str) -> bool:
    """False for names os.listdir decoded with surrogateescape (not valid UTF-8)."""
    try:
        name.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def has_extension(filename: str, ext: str) -> bool:
    return filename.lower().endswith(ext.lower())


def expected_secondary_name(primary: str, secondary: str) -> str:
    """Secondary file renamed onto the primary's stem, keeping its own suffix."""
    return Path(primary).stem + Path(secondary).suffix


def check_meta(dir_path: str, settings: ScanSettings) -> Optional[str]:
    """Return a warning for a missing or unreadable metadata file, else None."""
    meta_path = os.path.join(dir_path, settings.meta_filename)
    if not os.path.isfile(meta_path):
        return f"missing {settings.meta_filename}"
    try:
        load_meta(meta_path)
    except MetaFileError as e:
        return f"invalid {settings.meta_filename}: {e}"
    return None


def inspect_leaf(dir_path: str, rel_path: str, settings: ScanSettings) -> LeafReport:
    """Decide the manifest value for one leaf directory."""
    all_files = list_files(dir_path)
    files = [f for f in all_files if is_utf8_name(f)]
    primaries = [f for f in files if has_extension(f, settings.primary_ext)]
    secondaries = [f for f in files if has_extension(f, settings.secondary_ext)]

    report = LeafReport(rel_path=rel_path, node=Missing())

    if len(files) < len(all_files):
        report.warnings.append(
            f"skipped {len(all_files) - len(files)} file name(s) that are not valid UTF-8"
        )

    meta_warning = check_meta(dir_path, settings)
    if meta_warning:
        report.warnings.append(meta_warning)

    if not primaries:
        report.warnings.append("no primary file")
        return report

    primary = primaries[0]
    report.node = Document(primary)

    if len(primaries) > 1:
        report.primary_conflict = primaries
        if settings.strict:
            report.warnings.append(
                f"conflict: {len(primaries)} primary files ({', '.join(primaries)})"
            )
            return report
        report.warnings.append(f"multiple primary files ({len(primaries)}), using first")
        if secondaries:
            report.warnings.append("secondary renaming skipped due to multiple primary files")
        return report

    if len(secondaries) == 1:
        secondary = secondaries[0]
        expected = expected_secondary_name(primary, secondary)
        if secondary != expected:
            report.rename = RenameProposal(
                directory=dir_path,
                old_name=secondary,
                new_name=expected,
                rel_path=rel_path,
            )
    elif len(secondaries) > 1:
        report.warnings.append(
            f"multiple secondary files ({len(secondaries)}), manual action needed"
        )

    return report


# ═══════════════════════════════════════════════════════════════════════════
# 2.  CONFIRMATION POLICIES
# ═══════════════════════════════════════════════════════════════════════════

def auto_confirm(proposal: RenameProposal) -> RenameDecision:
    """Batch mode: every rename goes ahead."""
    return RenameDecision.CONFIRM


_ANSWERS = {
    "y": RenameDecision.CONFIRM,
    "yes": RenameDecision.CONFIRM,
    "n": RenameDecision.DECLINE,
    "no": RenameDecision.DECLINE,
    "q": RenameDecision.QUIT,
    "quit": RenameDecision.QUIT,
}


def prompt_rename(input_fn: Optional[Callable[[str], str]] = None,
                  output_fn: Optional[Callable[[str], None]] = None,
                  max_attempts: int = 3) -> ConfirmPolicy:
    """
    Interactive mode: ask on the terminal before each rename.

    Unrecognized answers re-prompt up to *max_attempts* times and then count
    as a decline.  End of input counts as quit.
    """
    def confirm(proposal: RenameProposal) -> RenameDecision:
        ask = input_fn or input
        say = output_fn or print
        say(f"\n📝 {proposal.rel_path}")
        say(f"   rename \"{proposal.old_name}\" → \"{proposal.new_name}\"")
        for _ in range(max_attempts):
            try:
                answer = ask("   [y]es / [n]o / [q]uit: ")
            except EOFError:
                return RenameDecision.QUIT
            decision = _ANSWERS.get(answer.strip().lower())
            if decision is not None:
                return decision
            say(f"   Unrecognized answer: {answer.strip()!r}")
        say("   No valid answer, keeping the original name.")
        return RenameDecision.DECLINE

    return confirm


# ═══════════════════════════════════════════════════════════════════════════
# 3.  APPLYING RENAMES
# ═══════════════════════════════════════════════════════════════════════════

def apply_rename(proposal: RenameProposal) -> Optional[str]:
    """
    Rename the secondary file in place.  Returns None on success, or a
    message describing why the file was left untouched.
    """
    old_path, new_path = proposal.old_path, proposal.new_path
    try:
        # samefile covers case-only renames on case-insensitive filesystems
        if os.path.exists(new_path) and not os.path.samefile(old_path, new_path):
            return f"target exists: {proposal.new_name}"
        os.rename(old_path, new_path)
    except OSError as e:
        return f"{e.strerror or e}: {proposal.old_name}"
    return None


def resolve_renames(reports: list[LeafReport],
                    confirm: ConfirmPolicy = auto_confirm) -> dict:
    """
    Run every pending rename through *confirm* and apply the confirmed ones.
    Failures and declines become warnings on the leaf.  A quit answer raises
    ScanAborted straight away.
    """
    stats = {"renamed": 0, "declined": 0, "failed": 0}

    for report in reports:
        proposal = report.rename
        if proposal is None:
            continue

        decision = confirm(proposal)
        if decision == RenameDecision.QUIT:
            raise ScanAborted(f"Scan aborted by user at {proposal.rel_path}")
        report.rename_resolved = True

        if decision == RenameDecision.DECLINE:
            report.warnings.append("rename declined, secondary name kept")
            stats["declined"] += 1
            log.warning(f"{report.status} {proposal.rel_path}: rename declined, kept \"{proposal.old_name}\"")
            continue

        error = apply_rename(proposal)
        if error:
            report.warnings.append(f"failed to rename secondary: {error}")
            stats["failed"] += 1
            log.warning(f"{report.status} {proposal.rel_path}: failed to rename secondary: {error}")
        else:
            stats["renamed"] += 1
            log.info(f"{report.status} {proposal.rel_path}: renamed "
                     f"\"{proposal.old_name}\" → \"{proposal.new_name}\"")

    return stats
