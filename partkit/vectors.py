"""Vector and transform helpers shared by the assembly modules."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence, Union

import numpy as np
from scipy.spatial.transform import Rotation

VectorLike = Union[np.ndarray, Sequence[float]]


def as_vec3(value: Optional[VectorLike]) -> np.ndarray:
    """Return ``value`` as a fresh float64 array of shape ``(3,)``."""

    if value is None:
        return np.zeros(3)
    arr = np.array(value, dtype=float)
    if arr.shape != (3,):
        raise ValueError(f"expected a 3-component vector, got shape {arr.shape}")
    return arr


def format_vec3(value: VectorLike, precision: int = 4) -> str:
    x, y, z = (float(v) for v in value)
    return f"({x:.{precision}g}, {y:.{precision}g}, {z:.{precision}g})"


def _as_rotation(value: Union[Rotation, Iterable[float], None]) -> Rotation:
    if value is None:
        return Rotation.identity()
    if isinstance(value, Rotation):
        return value
    quat = np.array(value, dtype=float)
    if quat.shape != (4,):
        raise ValueError("rotation must be a scipy Rotation or an (x, y, z, w) quaternion")
    return Rotation.from_quat(quat)


@dataclass
class Transform:
    """World placement of a part: position, orientation and uniform scale."""

    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    rotation: Rotation = field(default_factory=Rotation.identity)
    scale: float = 1.0

    def __post_init__(self) -> None:
        self.position = as_vec3(self.position)
        self.rotation = _as_rotation(self.rotation)
        self.scale = float(self.scale)

    def transform_point(self, local: VectorLike) -> np.ndarray:
        """Map a point from local space into world space."""

        return self.position + self.rotation.apply(as_vec3(local) * self.scale)

    def transform_direction(self, local: VectorLike) -> np.ndarray:
        return self.rotation.apply(as_vec3(local))

    def inverse_transform_point(self, world: VectorLike) -> np.ndarray:
        offset = as_vec3(world) - self.position
        return self.rotation.inv().apply(offset) / self.scale

    def translate(self, offset: VectorLike) -> None:
        self.position = self.position + as_vec3(offset)


@dataclass
class RayHit:
    hit: np.ndarray
    found: bool
    distance: Optional[float] = None  # ray parameter t; None when the ray is parallel


def intersect_ray_plane(
    ray_origin: VectorLike,
    ray_direction: VectorLike,
    plane_point: VectorLike,
    plane_normal: VectorLike,
) -> RayHit:
    """Intersect an infinite ray line with a plane.

    A ray parallel to the plane only hits when its origin lies on the plane, in
    which case ``plane_point`` is reported. Hits behind the origin (``t < 0``)
    are returned as found; callers wanting forward-only hits check
    ``distance >= 0``.
    """

    origin = as_vec3(ray_origin)
    direction = as_vec3(ray_direction)
    point = as_vec3(plane_point)
    normal = as_vec3(plane_normal)

    denom = float(np.dot(direction, normal))
    offset = float(np.dot(point - origin, normal))
    if denom == 0.0:
        if offset == 0.0:
            return RayHit(hit=point, found=True)
        return RayHit(hit=np.zeros(3), found=False)
    t = offset / denom
    return RayHit(hit=origin + t * direction, found=True, distance=t)


__all__ = [
    "VectorLike",
    "as_vec3",
    "format_vec3",
    "Transform",
    "RayHit",
    "intersect_ray_plane",
]
