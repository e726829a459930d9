"""
outline.py — Text outline of an existing manifest.

Titles are shown the way the browser shows them ("ki-seitzei_5785" →
"Ki Seitzei 5785").  Given the content root, each leaf is also checked
against the disk: the document must exist where the manifest says it is.
"""

import os
import re
from typing import Optional

from archive_manifest.nodes import Branch, ContentNode, Document

_WORD_START = re.compile(r"(^|[-_\s])(\w)")


def display_title(name: str) -> str:
    return _WORD_START.sub(lambda m: (" " if m.group(1) else "") + m.group(2).upper(), name)


def render_outline(tree: Branch, content_root: Optional[str] = None) -> list[str]:
    lines: list[str] = []
    _render(tree, (), content_root, lines)
    return lines


def _render(node: ContentNode, path: tuple, content_root: Optional[str], lines: list[str]):
    for name, child in node.children.items():
        indent = "  " * len(path)
        title = display_title(name)
        if isinstance(child, Branch):
            lines.append(f"{indent}▸ {title}")
            _render(child, path + (name,), content_root, lines)
        elif isinstance(child, Document):
            flag = ""
            if content_root is not None:
                doc_path = os.path.join(content_root, *path, name, child.filename)
                if not os.path.isfile(doc_path):
                    flag = "  ⚠️ missing on disk"
            lines.append(f"{indent}• {title} — {child.filename}{flag}")
        else:
            lines.append(f"{indent}• {title} — (no document)")
