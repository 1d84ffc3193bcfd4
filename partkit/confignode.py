"""Hierarchical ``NAME { key = value }`` configuration documents."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Tuple, Union

from .lexer import ConfigSyntaxError, Token, tokenize


class ConfigNode:
    """A named node holding ordered ``key = value`` pairs and child nodes.

    Keys may repeat; lookups by key return the first value, while
    :meth:`get_values` returns every value in document order.
    """

    def __init__(
        self,
        name: str = "root",
        values: Optional[List[Tuple[str, str]]] = None,
        nodes: Optional[List["ConfigNode"]] = None,
    ):
        self.name = name
        self.values: List[Tuple[str, str]] = list(values or [])
        self.nodes: List[ConfigNode] = list(nodes or [])

    @property
    def children(self) -> List["ConfigNode"]:
        return self.nodes

    def add_value(self, key: str, value: object) -> None:
        self.values.append((key, str(value)))

    def add_node(self, node: Union[str, "ConfigNode"]) -> "ConfigNode":
        if isinstance(node, str):
            node = ConfigNode(node)
        self.nodes.append(node)
        return node

    def get_value(self, key: str) -> Optional[str]:
        for k, v in self.values:
            if k == key:
                return v
        return None

    def get_values(self, key: str) -> List[str]:
        return [v for k, v in self.values if k == key]

    def has_value(self, key: str) -> bool:
        return any(k == key for k, _ in self.values)

    def set_value(self, key: str, value: object) -> None:
        """Replace the first ``key`` entry, appending it when absent."""

        for idx, (k, _) in enumerate(self.values):
            if k == key:
                self.values[idx] = (key, str(value))
                return
        self.add_value(key, value)

    def get_node(self, name: str) -> Optional["ConfigNode"]:
        for node in self.nodes:
            if node.name == name:
                return node
        return None

    def get_nodes(self, name: str) -> List["ConfigNode"]:
        return [node for node in self.nodes if node.name == name]

    def has_node(self, name: str) -> bool:
        return self.get_node(name) is not None

    def to_text(self, indent: str = "\t") -> str:
        """Serialise the node's contents (not its own header) to config text."""

        lines: List[str] = []
        self._write_body(lines, 0, indent)
        return "\n".join(lines)

    def _write_body(self, lines: List[str], depth: int, indent: str) -> None:
        pad = indent * depth
        for key, value in self.values:
            lines.append(f"{pad}{key} = {value}")
        for node in self.nodes:
            lines.append(f"{pad}{node.name}")
            lines.append(f"{pad}{{")
            node._write_body(lines, depth + 1, indent)
            lines.append(f"{pad}}}")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ConfigNode):
            return NotImplemented
        return (self.name, self.values, self.nodes) == (other.name, other.values, other.nodes)

    def __repr__(self) -> str:
        return f"ConfigNode({self.name!r}, values={len(self.values)}, nodes={len(self.nodes)})"


class Cursor:
    def __init__(self, tokens: List[Token]):
        self.toks = tokens
        self.i = 0

    def peek(self) -> Optional[Token]:
        return self.toks[self.i] if self.i < len(self.toks) else None

    def advance(self) -> Token:
        t = self.toks[self.i]
        self.i += 1
        return t

    def expect(self, *types: str) -> Token:
        t = self.peek()
        if t and t[0] in types:
            self.i += 1
            return t
        want = '|'.join(types)
        if t:
            raise ConfigSyntaxError(f'[line {t[2]}, col {t[3]}] expected {want}, got {t[0]}')
        raise ConfigSyntaxError(f'Unexpected end of input: expected {want}')


def _parse_body(cur: Cursor, node: ConfigNode, opened: Optional[Token]) -> None:
    while True:
        t = cur.peek()
        if t is None:
            if opened is None:
                return
            raise ConfigSyntaxError(
                f'[line {opened[2]}, col {opened[3]}] node {node.name!r} is never closed'
            )
        kind = t[0]
        if kind == 'RBRACE':
            if opened is None:
                raise ConfigSyntaxError(f'[line {t[2]}, col {t[3]}] unmatched "}}"')
            cur.advance()
            return
        if kind == 'KEY':
            cur.advance()
            value = cur.expect('VALUE')
            node.add_value(t[1], value[1])
        elif kind == 'NAME':
            cur.advance()
            brace = cur.expect('LBRACE')
            child = node.add_node(t[1])
            _parse_body(cur, child, brace)
        else:
            raise ConfigSyntaxError(f'[line {t[2]}, col {t[3]}] node body without a name')


def parse_config(text: str, name: str = "root") -> ConfigNode:
    """Parse config ``text`` into a root node called ``name``."""

    root = ConfigNode(name)
    _parse_body(Cursor(tokenize(text)), root, None)
    return root


def load_config(path: Union[str, Path]) -> ConfigNode:
    path = Path(path)
    return parse_config(path.read_text(encoding="utf-8"), name=path.stem)


__all__ = ["ConfigNode", "ConfigSyntaxError", "parse_config", "load_config"]
