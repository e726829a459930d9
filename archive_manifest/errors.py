"""Error types for archive-manifest.

Every error here is fatal: the run stops and no manifest is written.
"""


class ArchiveManifestError(Exception):
    """Base exception for all archive-manifest errors."""

    pass


class RootNotFound(ArchiveManifestError):
    """Content root does not exist or is not a directory."""

    def __init__(self, root):
        self.root = root
        super().__init__(f"Content root not found: {root}")


class MultiplePrimaryConflict(ArchiveManifestError):
    """Strict mode found leaf directories with more than one primary document.

    ``conflicts`` maps each leaf's relative path to its sorted primary files.
    """

    def __init__(self, conflicts: dict):
        self.conflicts = conflicts
        lines = ["Multiple primary documents found (strict mode):"]
        for rel, files in conflicts.items():
            for name in files:
                lines.append(f"  {rel}/{name}")
        super().__init__("\n".join(lines))


class ScanAborted(ArchiveManifestError):
    """User chose to quit during an interactive rename prompt."""

    def __init__(self, message: str = "Scan aborted by user"):
        super().__init__(message)
