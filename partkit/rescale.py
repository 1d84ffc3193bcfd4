"""Scale-aware repositioning of attach points and the parts joined to them.

When a part's uniform scale changes, each of its attach points moves
proportionally. For a user-initiated change the joint is then kept closed:
a child neighbour is carried along with the point, while for any other
neighbour (normally the parent) the rescaled part moves the opposite way and
the assembly root is shifted back so the assembly as a whole stays put.
Every move carries the moved part's whole subtree along with it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Union

import numpy as np

from .assembly import Assembly, AttachPoint, Part
from .logging_utils import apply_debug_logging
from .settings import get_settings
from .vectors import format_vec3

logger = logging.getLogger(__name__)

MOVED_NEIGHBOR = "neighbor"
MOVED_SELF = "self"


@dataclass
class PointUpdate:
    """What happened to one attach point during a rescale."""

    point: str
    previous_position: np.ndarray
    position: np.ndarray
    delta: np.ndarray
    world_delta: Optional[np.ndarray] = None
    moved: Optional[str] = None  # MOVED_NEIGHBOR, MOVED_SELF or None
    neighbor: Optional[int] = None
    root_compensated: bool = False


@dataclass
class RescaleReport:
    part: int
    previous_scale: float
    new_scale: float
    updates: List[PointUpdate] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def moved_parts(self) -> bool:
        return any(update.moved is not None for update in self.updates)


def rescale_attach_point(
    assembly: Assembly,
    part: Union[int, Part],
    point: AttachPoint,
    previous_scale: float,
    new_scale: float,
    user_initiated: bool,
    report: Optional[RescaleReport] = None,
) -> PointUpdate:
    """Rescale a single attach point of ``part``.

    ``previous_scale`` must be positive; zero is not guarded and fails with a
    division error.
    """

    owner = assembly.part(part)
    previous = point.position.copy()
    ratio = new_scale / previous_scale
    new_position = previous * ratio
    delta = new_position - previous
    point.position = new_position
    point.original_position = new_position.copy()
    update = PointUpdate(point.name, previous, new_position.copy(), delta)

    if not user_initiated or point.attached_part is None:
        return update

    world_delta = owner.transform.transform_point(delta) - owner.transform.position
    update.world_delta = world_delta
    update.neighbor = point.attached_part
    neighbor = assembly.get(point.attached_part)

    if neighbor is not None and neighbor.parent == owner.handle:
        neighbor.local_position = neighbor.local_position + delta
        assembly.translate(neighbor, world_delta)
        update.moved = MOVED_NEIGHBOR
        logger.debug(
            "Moved child %s by %s at point %s", neighbor.name, format_vec3(world_delta), point.name
        )
        return update

    if neighbor is None:
        message = (
            f"attach point {point.name!r} on {owner.name!r} links to unknown part "
            f"{point.attached_part}; moving the part itself"
        )
        logger.warning(message)
        if report is not None:
            report.warnings.append(message)

    owner.local_position = owner.local_position - delta
    assembly.translate(owner, -world_delta)
    update.moved = MOVED_SELF
    logger.debug("Moved %s by %s at point %s", owner.name, format_vec3(-world_delta), point.name)

    if get_settings().compensate_root:
        root = assembly.local_root(owner)
        if root is not None and root.handle != owner.handle:
            assembly.translate(root, world_delta)
            update.root_compensated = True
    return update


def rescale_attachments(
    assembly: Assembly,
    part: Union[int, Part],
    previous_scale: float,
    new_scale: float,
    user_initiated: bool,
) -> RescaleReport:
    """Rescale every attach point of ``part`` from ``previous_scale`` to ``new_scale``.

    The surface point is processed first, then the regular points in their
    stored order. Only a ``user_initiated`` change moves neighbours or the
    part itself; point positions are always updated.
    """

    owner = assembly.part(part)
    report = RescaleReport(owner.handle, float(previous_scale), float(new_scale))
    for point in owner.all_attach_points():
        report.updates.append(
            rescale_attach_point(
                assembly, owner, point, previous_scale, new_scale, user_initiated, report
            )
        )
    logger.info(
        "Rescaled %d attach point(s) on %s: %g -> %g",
        len(report.updates),
        owner.name,
        previous_scale,
        new_scale,
    )
    return report


def rescale_part(
    assembly: Assembly,
    part: Union[int, Part],
    new_scale: float,
    user_initiated: bool = True,
) -> RescaleReport:
    """Rescale ``part`` from its recorded scale and remember ``new_scale``."""

    owner = assembly.part(part)
    report = rescale_attachments(assembly, owner, owner.scale, new_scale, user_initiated)
    owner.scale = float(new_scale)
    return report


apply_debug_logging(globals(), logger=logger)


__all__ = [
    "MOVED_NEIGHBOR",
    "MOVED_SELF",
    "PointUpdate",
    "RescaleReport",
    "rescale_attach_point",
    "rescale_attachments",
    "rescale_part",
]
