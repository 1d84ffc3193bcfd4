"""Arena-backed assembly graph of parts, attach points and part modules.

Parts live in :attr:`Assembly.parts` and are addressed by their integer
``handle`` (their index in that list). Parent links and attach-point
neighbour links hold handles rather than references, so a link to a part
that no longer resolves is simply stale instead of keeping anything alive.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Type, TypeVar, Union

import numpy as np

from .vectors import Transform, VectorLike, as_vec3

logger = logging.getLogger(__name__)

M = TypeVar("M", bound="PartModule")


class AssemblyError(LookupError):
    """Raised when a handle or attach point cannot be resolved."""


@dataclass(eq=False)
class AttachPoint:
    name: str
    position: np.ndarray
    original_position: Optional[np.ndarray] = None
    attached_part: Optional[int] = None  # neighbour handle, non-owning

    def __post_init__(self) -> None:
        self.position = as_vec3(self.position)
        if self.original_position is None:
            self.original_position = self.position.copy()
        else:
            self.original_position = as_vec3(self.original_position)


class PartModule:
    """A component hosted by a part; ``part`` is set when the module is added."""

    def __init__(self, name: Optional[str] = None):
        self.name = name or type(self).__name__
        self.part: Optional[int] = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, part={self.part})"


class GroupController(PartModule):
    """The per-part controller carrying the group tag.

    ``group`` is kept as text, the way it arrives from part configs and UI
    fields; it is parsed when groups are discovered.
    """

    def __init__(self, group: Union[str, int] = "0", name: Optional[str] = None):
        super().__init__(name)
        self.group = str(group)

    @property
    def group_id(self) -> int:
        return int(self.group)


@dataclass(eq=False)
class Part:
    handle: int
    name: str
    transform: Transform = field(default_factory=Transform)
    scale: float = 1.0
    local_position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    original_local_position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    parent: Optional[int] = None
    surface_point: Optional[AttachPoint] = None
    attach_points: List[AttachPoint] = field(default_factory=list)
    modules: List[PartModule] = field(default_factory=list)

    @property
    def position(self) -> np.ndarray:
        return self.transform.position

    def add_attach_point(self, name: str, position: VectorLike) -> AttachPoint:
        point = AttachPoint(name, as_vec3(position))
        self.attach_points.append(point)
        return point

    def set_surface_point(self, position: VectorLike, name: str = "srfAttach") -> AttachPoint:
        self.surface_point = AttachPoint(name, as_vec3(position))
        return self.surface_point

    def all_attach_points(self) -> List[AttachPoint]:
        """Surface point first (when present), then regular points in stored order."""

        points: List[AttachPoint] = []
        if self.surface_point is not None:
            points.append(self.surface_point)
        points.extend(self.attach_points)
        return points

    def find_attach_point(self, name: str) -> Optional[AttachPoint]:
        for point in self.all_attach_points():
            if point.name == name:
                return point
        return None

    def add_module(self, module: M) -> M:
        module.part = self.handle
        self.modules.append(module)
        return module

    def find_module(self, kind: Type[M]) -> Optional[M]:
        for module in self.modules:
            if isinstance(module, kind):
                return module
        return None

    def find_modules(self, kind: Type[M]) -> List[M]:
        return [module for module in self.modules if isinstance(module, kind)]

    def __repr__(self) -> str:
        return f"Part({self.handle}, {self.name!r}, parent={self.parent})"


class Assembly:
    """Ordered collection of parts forming a vessel or an in-progress construct."""

    def __init__(self, name: str = "assembly"):
        self.name = name
        self.parts: List[Part] = []
        self.root: Optional[int] = None

    def __iter__(self) -> Iterator[Part]:
        return iter(self.parts)

    def __len__(self) -> int:
        return len(self.parts)

    def add_part(
        self,
        name: str,
        position: Optional[VectorLike] = None,
        rotation=None,
        scale: float = 1.0,
    ) -> Part:
        """Append a part; the first part added becomes the root."""

        part = Part(
            handle=len(self.parts),
            name=name,
            transform=Transform(as_vec3(position), rotation),
            scale=float(scale),
        )
        self.parts.append(part)
        if self.root is None:
            self.root = part.handle
        return part

    def get(self, handle: Optional[int]) -> Optional[Part]:
        if handle is None or not 0 <= handle < len(self.parts):
            return None
        return self.parts[handle]

    def part(self, handle: Union[int, Part]) -> Part:
        if isinstance(handle, Part):
            handle = handle.handle
        found = self.get(handle)
        if found is None:
            raise AssemblyError(f"no part with handle {handle} in {self.name!r}")
        return found

    def attach(
        self,
        child: Union[int, Part],
        parent: Union[int, Part],
        parent_point: Optional[str] = None,
        child_point: Optional[str] = None,
    ) -> None:
        """Make ``child`` a child of ``parent``, optionally through named attach points.

        The parent's point records the child as its neighbour and the child's
        point records the parent, mirroring how both sides of a joint see
        each other.
        """

        child_part = self.part(child)
        parent_part = self.part(parent)
        child_part.parent = parent_part.handle
        child_part.local_position = parent_part.transform.inverse_transform_point(child_part.position)
        child_part.original_local_position = child_part.local_position.copy()
        for owner, point_name, neighbour in (
            (parent_part, parent_point, child_part),
            (child_part, child_point, parent_part),
        ):
            if point_name is None:
                continue
            point = owner.find_attach_point(point_name)
            if point is None:
                raise AssemblyError(f"part {owner.name!r} has no attach point {point_name!r}")
            point.attached_part = neighbour.handle
        logger.debug("Attached %s to %s", child_part, parent_part)

    def children(self, handle: Union[int, Part]) -> List[Part]:
        parent = self.part(handle)
        return [part for part in self.parts if part.parent == parent.handle]

    def subtree(self, handle: Union[int, Part]) -> List[Part]:
        """``handle`` and everything attached below it, parents before children."""

        top = self.part(handle)
        found = [top]
        seen = {top.handle}
        idx = 0
        while idx < len(found):
            for child in self.children(found[idx]):
                if child.handle not in seen:
                    seen.add(child.handle)
                    found.append(child)
            idx += 1
        return found

    def translate(self, handle: Union[int, Part], offset: VectorLike) -> List[Part]:
        """Move ``handle`` by ``offset`` in world space, carrying its whole subtree.

        Local positions are untouched; callers adjust the moved part's own
        bookkeeping when it changes relative to its parent.
        """

        moved = self.subtree(handle)
        for part in moved:
            part.transform.translate(offset)
        return moved

    def local_root(self, handle: Union[int, Part]) -> Optional[Part]:
        """Walk parent links to the top of ``handle``'s sub-assembly.

        Returns ``None`` when a parent link is stale or cyclic, i.e. there is
        no identifiable root.
        """

        part = self.part(handle)
        seen = {part.handle}
        while part.parent is not None:
            parent = self.get(part.parent)
            if parent is None or parent.handle in seen:
                return None
            seen.add(parent.handle)
            part = parent
        return part


__all__ = [
    "AssemblyError",
    "AttachPoint",
    "PartModule",
    "GroupController",
    "Part",
    "Assembly",
]
