"""Keyframed float curves with cubic Hermite interpolation."""

from __future__ import annotations

import bisect
from dataclasses import dataclass
from typing import Iterable, List, Optional, Union

import numpy as np


@dataclass
class Keyframe:
    time: float
    value: float
    in_tangent: float = 0.0
    out_tangent: float = 0.0
    smooth: bool = False  # tangents are recomputed from the neighbours


class FloatCurve:
    """Piecewise curve through keyframes, clamped outside the key range.

    Keys added without tangents get smooth tangents (the slope between their
    neighbours, one-sided at the ends), so a curve through ``(0, 0)`` and
    ``(1, 1)`` is the straight line between them.
    """

    def __init__(self, keys: Optional[Iterable[Keyframe]] = None):
        self._keys: List[Keyframe] = []
        for key in keys or []:
            if key.smooth:
                self.add(key.time, key.value)
            else:
                self.add(key.time, key.value, key.in_tangent, key.out_tangent)

    @classmethod
    def linear(cls) -> "FloatCurve":
        curve = cls()
        curve.add(0.0, 0.0)
        curve.add(1.0, 1.0)
        return curve

    @property
    def keys(self) -> List[Keyframe]:
        return list(self._keys)

    @property
    def min_time(self) -> float:
        return self._keys[0].time if self._keys else 0.0

    @property
    def max_time(self) -> float:
        return self._keys[-1].time if self._keys else 0.0

    def __len__(self) -> int:
        return len(self._keys)

    def add(
        self,
        time: float,
        value: float,
        in_tangent: Optional[float] = None,
        out_tangent: Optional[float] = None,
    ) -> None:
        """Insert a key; a key already at ``time`` is replaced."""

        smooth = in_tangent is None and out_tangent is None
        key = Keyframe(
            float(time),
            float(value),
            float(in_tangent or 0.0),
            float(out_tangent if out_tangent is not None else (in_tangent or 0.0)),
            smooth,
        )
        times = [k.time for k in self._keys]
        idx = bisect.bisect_left(times, key.time)
        if idx < len(self._keys) and self._keys[idx].time == key.time:
            self._keys[idx] = key
        else:
            self._keys.insert(idx, key)
        self._smooth_tangents()

    def _smooth_tangents(self) -> None:
        keys = self._keys
        count = len(keys)
        for idx, key in enumerate(keys):
            if not key.smooth:
                continue
            if count < 2:
                slope = 0.0
            elif idx == 0:
                slope = _slope(keys[0], keys[1])
            elif idx == count - 1:
                slope = _slope(keys[-2], keys[-1])
            else:
                slope = _slope(keys[idx - 1], keys[idx + 1])
            key.in_tangent = key.out_tangent = slope

    def evaluate(self, time: float) -> float:
        keys = self._keys
        if not keys:
            return 0.0
        if time <= keys[0].time:
            return keys[0].value
        if time >= keys[-1].time:
            return keys[-1].value
        idx = bisect.bisect_right([k.time for k in keys], time)
        return _hermite(keys[idx - 1], keys[idx], time)

    def sample(self, times: Union[Iterable[float], np.ndarray]) -> np.ndarray:
        return np.array([self.evaluate(float(t)) for t in np.asarray(times, dtype=float).ravel()])

    def copy(self) -> "FloatCurve":
        """Copy keyframe by keyframe, freezing the current tangents."""

        clone = FloatCurve()
        for key in self._keys:
            clone.add(key.time, key.value, key.in_tangent, key.out_tangent)
        return clone

    def __repr__(self) -> str:
        keys = ", ".join(f"({k.time:g}, {k.value:g})" for k in self._keys)
        return f"FloatCurve([{keys}])"


def _slope(a: Keyframe, b: Keyframe) -> float:
    dt = b.time - a.time
    if dt == 0.0:
        return 0.0
    return (b.value - a.value) / dt


def _hermite(k0: Keyframe, k1: Keyframe, time: float) -> float:
    dt = k1.time - k0.time
    s = (time - k0.time) / dt
    s2 = s * s
    s3 = s2 * s
    h00 = 2.0 * s3 - 3.0 * s2 + 1.0
    h10 = s3 - 2.0 * s2 + s
    h01 = -2.0 * s3 + 3.0 * s2
    h11 = s3 - s2
    return h00 * k0.value + h10 * dt * k0.out_tangent + h01 * k1.value + h11 * dt * k1.in_tangent


__all__ = ["Keyframe", "FloatCurve"]
