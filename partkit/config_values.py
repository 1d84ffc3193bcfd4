"""Typed get-with-default accessors over :class:`~partkit.confignode.ConfigNode`.

Malformed values never raise: they are logged and the default is returned.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Sequence

import numpy as np

from .confignode import ConfigNode
from .curve import FloatCurve
from .vectors import VectorLike, as_vec3

logger = logging.getLogger(__name__)

_WS_RE = re.compile(r"\s+")


def _parse_bool(text: str) -> bool:
    lowered = text.strip().lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    raise ValueError(f"String '{text}' was not recognized as a valid Boolean.")


def get_string(node: ConfigNode, name: str, default: str = "") -> str:
    value = node.get_value(name)
    return default if value is None else value


def get_strings(node: ConfigNode, name: str) -> List[str]:
    return node.get_values(name)


def get_bool(node: ConfigNode, name: str, default: bool = False) -> bool:
    value = node.get_value(name)
    if value is None:
        return default
    try:
        return _parse_bool(value)
    except ValueError as exc:
        logger.warning("%s: %s", name, exc)
    return default


def get_bools(node: ConfigNode, name: str) -> List[bool]:
    """Parse every ``name`` entry; malformed entries are logged and dropped."""

    parsed: List[bool] = []
    for value in node.get_values(name):
        try:
            parsed.append(_parse_bool(value))
        except ValueError as exc:
            logger.warning("%s: %s", name, exc)
    return parsed


def get_int(node: ConfigNode, name: str, default: int = 0) -> int:
    value = node.get_value(name)
    if value is None:
        return default
    try:
        return int(value.strip())
    except ValueError as exc:
        logger.warning("%s: %s", name, exc)
    return default


def get_float(node: ConfigNode, name: str, default: float = 0.0) -> float:
    """Single-precision read; the result is rounded through ``float32``."""

    value = node.get_value(name)
    if value is None:
        return default
    try:
        return float(np.float32(float(value)))
    except ValueError as exc:
        logger.warning("%s: %s", name, exc)
    return default


def get_double(node: ConfigNode, name: str, default: float = 0.0) -> float:
    value = node.get_value(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError as exc:
        logger.warning("%s: %s", name, exc)
    return default


def get_floats(
    node: ConfigNode, name: str, default: Optional[Sequence[float]] = None
) -> List[float]:
    """Read a comma-separated list such as ``1, 2.5, 3``."""

    fallback = list(default) if default is not None else []
    value = node.get_value(name)
    if not value or not value.strip():
        return fallback
    try:
        return [float(part) for part in value.split(",")]
    except ValueError as exc:
        logger.warning("%s: could not parse float list %r: %s", name, value, exc)
    return fallback


def get_vector3(
    node: ConfigNode, name: str, default: Optional[VectorLike] = None
) -> np.ndarray:
    fallback = as_vec3(default)
    value = node.get_value(name)
    if value is None:
        if default is None:
            logger.warning("No value for name: %s found in config node: %s", name, node.name)
        return fallback
    parts = value.split(",")
    if len(parts) < 3:
        logger.warning(
            "ERROR parsing values for Vector3 from input: %s. found less than 3 values, "
            "cannot create Vector3",
            value,
        )
        return fallback
    try:
        return np.array([float(part) for part in parts[:3]])
    except ValueError as exc:
        logger.warning("ERROR parsing values for Vector3 from input: %s. %s", value, exc)
    return fallback


def get_curve(
    node: ConfigNode, name: str, default: Optional[FloatCurve] = None
) -> FloatCurve:
    """Read a ``name { key = t v [in out] ... }`` block into a :class:`FloatCurve`.

    Without the block, ``default`` is copied; without a default, the linear
    0 -> 1 curve is returned.
    """

    curve_node = node.get_node(name)
    if curve_node is None:
        if default is not None:
            return default.copy()
        logger.info("No curve node %s in config node %s, using linear default", name, node.name)
        return FloatCurve.linear()

    curve = FloatCurve()
    for entry in curve_node.get_values("key"):
        tokens = _WS_RE.split(entry.strip())
        try:
            if len(tokens) > 2:
                if len(tokens) < 4:
                    raise ValueError(f"expected 2 or 4 numbers, got {len(tokens)}")
                a, b, c, d = (float(tok) for tok in tokens[:4])
                curve.add(a, b, c, d)
            else:
                if len(tokens) < 2:
                    raise ValueError(f"expected 2 or 4 numbers, got {len(tokens)}")
                a, b = float(tokens[0]), float(tokens[1])
                curve.add(a, b)
        except ValueError as exc:
            logger.warning("%s: skipping malformed curve key %r: %s", name, entry, exc)
    return curve


__all__ = [
    "get_string",
    "get_strings",
    "get_bool",
    "get_bools",
    "get_int",
    "get_float",
    "get_double",
    "get_floats",
    "get_vector3",
    "get_curve",
]
