"""
writer.py — manifest.json persistence.

The manifest is written whole on every run: 2-space indented JSON, keys in
the order the scanner produced them, non-ASCII names kept as-is.
"""

import json
import os
import tempfile

from archive_manifest.nodes import Branch, count_leaves, node_from_json, node_to_json


def manifest_to_json(tree: Branch) -> str:
    return json.dumps(node_to_json(tree), indent=2, ensure_ascii=False)


def write_manifest(tree: Branch, path: str) -> int:
    """Overwrite *path* with the manifest.  Returns the number of leaves."""
    text = manifest_to_json(tree)
    directory = os.path.dirname(os.path.abspath(path))
    os.makedirs(directory, exist_ok=True)

    # readers never see a half-written file
    fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".manifest-", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        os.chmod(tmp_path, 0o644)   # mkstemp creates 0600; the manifest is served
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise

    return count_leaves(tree)


def load_manifest(path: str) -> Branch:
    """Load a manifest from disk back into content nodes."""
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"{path}: manifest root must be a JSON object")
    return node_from_json(data)
