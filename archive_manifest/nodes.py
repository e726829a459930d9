"""
nodes.py — Content Node model for the archive manifest.

A manifest is a tree mirroring the content root:
  • Branch   — a directory holding only subdirectories (JSON object)
  • Document — a leaf directory with its primary document (JSON string)
  • Missing  — a leaf directory with no primary document (JSON null)
"""

from dataclasses import dataclass, field
from typing import Union


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Document:
    filename: str


@dataclass(frozen=True)
class Missing:
    pass


@dataclass
class Branch:
    children: dict = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.children)


ContentNode = Union[Branch, Document, Missing]


# ---------------------------------------------------------------------------
# JSON conversion
# ---------------------------------------------------------------------------

def node_to_json(node: ContentNode):
    """Convert a node to the plain structure written to manifest.json."""
    if isinstance(node, Branch):
        return {name: node_to_json(child) for name, child in node.children.items()}
    if isinstance(node, Document):
        return node.filename
    if isinstance(node, Missing):
        return None
    raise TypeError(f"Not a content node: {node!r}")


def node_from_json(value) -> ContentNode:
    """Inverse of node_to_json. Key order of objects is kept as read."""
    if value is None:
        return Missing()
    if isinstance(value, str):
        return Document(value)
    if isinstance(value, dict):
        return Branch({name: node_from_json(child) for name, child in value.items()})
    raise ValueError(f"Unexpected manifest value: {value!r}")


# ---------------------------------------------------------------------------
# Traversal helpers
# ---------------------------------------------------------------------------

def iter_leaves(node: ContentNode, prefix: tuple = ()):
    """Yield (path_parts, leaf) for every Document/Missing under *node*."""
    if isinstance(node, Branch):
        for name, child in node.children.items():
            yield from iter_leaves(child, prefix + (name,))
    else:
        yield prefix, node


def count_leaves(node: ContentNode) -> int:
    return sum(1 for _ in iter_leaves(node))
