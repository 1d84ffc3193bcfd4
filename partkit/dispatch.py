"""Apply an operation to every module of a controller group.

Group membership is not stored anywhere: it is rediscovered on each call by
scanning the parts of the active assembly for a :class:`GroupController`
whose group tag matches. Which assembly is scanned depends on the runtime
context passed in by the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Generic, Iterable, List, Optional, Type, TypeVar, Union

from .assembly import Assembly, GroupController, Part, PartModule
from .logging_utils import apply_debug_logging
from .settings import get_settings

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=PartModule)
C = TypeVar("C", bound=GroupController)

UNGROUPED = 0


@dataclass(frozen=True)
class Simulating:
    """A live vessel is running; its part list is scanned."""

    vessel: Assembly


@dataclass(frozen=True)
class Editing:
    """An assembly is being built; the construct's part list is scanned."""

    construct: Assembly


@dataclass(frozen=True)
class Inactive:
    pass


RuntimeContext = Union[Simulating, Editing, Inactive]


@dataclass
class GroupScan(Generic[M]):
    group_id: int
    members: List[M] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


@dataclass
class DispatchFailure:
    component: PartModule
    error: Exception

    def __str__(self) -> str:
        return f"{self.component!r}: {type(self.error).__name__}: {self.error}"


@dataclass
class DispatchReport:
    group_id: int
    invoked: List[PartModule] = field(default_factory=list)
    failures: List[DispatchFailure] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures and not self.warnings


def collect_group_members(
    parts: Iterable[Part], group_id: int, capability: Type[M]
) -> GroupScan[M]:
    """Scan ``parts`` in order for modules of ``capability`` in group ``group_id``.

    Each part's first :class:`GroupController` decides membership; a part
    without one is skipped. Every ``capability`` module of a matching part is
    collected in module order. A tag that is not an integer is reported in
    ``warnings`` and the scan moves on.
    """

    scan: GroupScan[M] = GroupScan(group_id)
    for part in parts:
        controller = part.find_module(GroupController)
        if controller is None:
            continue
        try:
            tag = controller.group_id
        except ValueError as exc:
            message = f"part {part.name!r} has a malformed group tag {controller.group!r}: {exc}"
            logger.warning(message)
            scan.warnings.append(message)
            continue
        if tag == group_id:
            scan.members.extend(part.find_modules(capability))
    logger.debug("Group %d scan found %d member(s)", group_id, len(scan.members))
    return scan


def discover_group(context: RuntimeContext, group_id: int, capability: Type[M]) -> GroupScan[M]:
    if isinstance(context, Simulating):
        return collect_group_members(context.vessel, group_id, capability)
    if isinstance(context, Editing):
        if get_settings().edit_discovery:
            return collect_group_members(context.construct, group_id, capability)
        logger.debug("Edit-mode discovery disabled; group %d has no members", group_id)
    return GroupScan(group_id)


def _invoke(
    report: DispatchReport, component: PartModule, operation: Callable[[M], object]
) -> bool:
    try:
        operation(component)
    except Exception as exc:
        logger.exception("Group %d operation failed on %r", report.group_id, component)
        report.failures.append(DispatchFailure(component, exc))
        return False
    report.invoked.append(component)
    return True


def dispatch_grouped(
    component: M,
    group_id: int,
    operation: Callable[[M], object],
    context: RuntimeContext,
    capability: Optional[Type[M]] = None,
) -> DispatchReport:
    """Run ``operation`` on ``component``'s group, or on ``component`` alone.

    A ``group_id`` of zero or below means ungrouped: only ``component`` is
    touched and nothing is scanned. Otherwise every module of the same type
    in the group is visited in part-list order; ``capability`` picks the
    module type collected from each member part and defaults to
    ``type(component)``. Failures are recorded in the report and never stop
    the remaining invocations.
    """

    report = DispatchReport(group_id)
    if group_id <= UNGROUPED:
        _invoke(report, component, operation)
        return report

    scan = discover_group(context, group_id, capability or type(component))
    report.warnings.extend(scan.warnings)
    for member in scan.members:
        _invoke(report, member, operation)
    return report


def dispatch_grouped_controllers(
    controller: C,
    group_id: int,
    operation: Callable[[C], object],
    context: RuntimeContext,
    refresh: Optional[Callable[[Part], object]] = None,
    capability: Optional[Type[C]] = None,
) -> DispatchReport:
    """Controller variant of :func:`dispatch_grouped`.

    After each invocation the owning part is passed to ``refresh`` so its
    interactive controls can re-read model state. Refresh errors are logged
    and recorded as warnings.
    """

    report = DispatchReport(group_id)
    if group_id <= UNGROUPED:
        _invoke(report, controller, operation)
        return report

    assembly = _context_assembly(context)
    scan = discover_group(context, group_id, capability or type(controller))
    report.warnings.extend(scan.warnings)
    do_refresh = refresh is not None and get_settings().refresh_after_dispatch
    for member in scan.members:
        _invoke(report, member, operation)
        if not do_refresh:
            continue
        part = assembly.get(member.part) if assembly is not None else None
        if part is None:
            continue
        try:
            refresh(part)
        except Exception as exc:
            logger.warning("Refresh failed for part %r: %s", part.name, exc)
            report.warnings.append(f"refresh failed for part {part.name!r}: {exc}")
    return report


def _context_assembly(context: RuntimeContext) -> Optional[Assembly]:
    if isinstance(context, Simulating):
        return context.vessel
    if isinstance(context, Editing):
        return context.construct
    return None


apply_debug_logging(globals(), logger=logger)


__all__ = [
    "UNGROUPED",
    "Simulating",
    "Editing",
    "Inactive",
    "RuntimeContext",
    "GroupScan",
    "DispatchFailure",
    "DispatchReport",
    "collect_group_members",
    "discover_group",
    "dispatch_grouped",
    "dispatch_grouped_controllers",
]
