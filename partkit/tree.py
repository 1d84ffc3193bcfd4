"""Name lookups over generic trees of named nodes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, List, Optional, Protocol, TypeVar, runtime_checkable


@runtime_checkable
class NamedTree(Protocol):
    """Anything with a ``name`` and an iterable of child nodes."""

    name: str

    @property
    def children(self) -> Iterable["NamedTree"]:
        ...


N = TypeVar("N", bound=NamedTree)


@dataclass
class TreeNode:
    name: str
    children: List["TreeNode"] = field(default_factory=list)
    payload: Any = None

    def add(self, name: str, payload: Any = None) -> "TreeNode":
        child = TreeNode(name, payload=payload)
        self.children.append(child)
        return child

    def __repr__(self) -> str:
        return f"TreeNode({self.name!r}, children={len(self.children)})"


def find_first_by_name(root: N, name: str) -> Optional[N]:
    """Return the first node called ``name``, or ``None``.

    ``root`` itself is checked first, then its direct children, and only then
    is each child searched recursively in order.
    """

    if root.name == name:
        return root
    children = list(root.children)
    for child in children:
        if child.name == name:
            return child
    for child in children:
        found = find_first_by_name(child, name)
        if found is not None:
            return found
    return None


def find_all_by_name(root: N, name: str) -> List[N]:
    """Collect every node called ``name`` in depth-first pre-order."""

    matches: List[N] = []
    _collect(root, name, matches)
    return matches


def _collect(node: N, name: str, matches: List[N]) -> None:
    if node.name == name:
        matches.append(node)
    for child in node.children:
        _collect(child, name, matches)


def format_hierarchy(
    root: N, indent: str = "    ", describe: Optional[Callable[[N], str]] = None
) -> str:
    """One line per node, indented by depth; ``describe`` appends a note to each line."""

    lines: List[str] = []

    def _walk(node: N, depth: int) -> None:
        line = f"{indent * depth}{node.name}"
        if describe is not None:
            line = f"{line} ({describe(node)})"
        lines.append(line)
        for child in node.children:
            _walk(child, depth + 1)

    _walk(root, 0)
    return "\n".join(lines)


__all__ = [
    "NamedTree",
    "TreeNode",
    "find_first_by_name",
    "find_all_by_name",
    "format_hierarchy",
]
