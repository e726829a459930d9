"""Shared fixtures: a throwaway content root and matching settings."""

from pathlib import Path

import pytest

from archive_manifest.config import ScanSettings


def make_tree(base: Path, layout: dict) -> Path:
    """Create *layout* under *base*: dict values are directories, str values file contents."""
    base.mkdir(parents=True, exist_ok=True)
    for name, value in layout.items():
        path = base / name
        if isinstance(value, dict):
            make_tree(path, value)
        else:
            path.write_text(value, encoding="utf-8")
    return base


@pytest.fixture
def content_root(tmp_path) -> Path:
    root = tmp_path / "Files"
    root.mkdir()
    return root


@pytest.fixture
def settings(tmp_path, content_root) -> ScanSettings:
    return ScanSettings(
        root=str(content_root),
        manifest_path=str(tmp_path / "manifest.json"),
        strict=False,
        interactive=False,
        max_depth=10,
    )


@pytest.fixture
def build(content_root):
    def _build(layout: dict) -> Path:
        return make_tree(content_root, layout)
    return _build
