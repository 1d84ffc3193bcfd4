"""Process-wide behaviour switches for rescaling and group dispatch."""

from __future__ import annotations

import copy
from dataclasses import dataclass


@dataclass
class PartkitSettings:
    # move the assembly root back when a non-root part shifts to keep its parent still
    compensate_root: bool = True
    # discover group members while an assembly is being edited
    edit_discovery: bool = True
    # call the refresh hook after each controller-group operation
    refresh_after_dispatch: bool = True


_SETTINGS = PartkitSettings()


def get_settings() -> PartkitSettings:
    return copy.deepcopy(_SETTINGS)


def set_settings(settings: PartkitSettings) -> None:
    global _SETTINGS
    _SETTINGS = copy.deepcopy(settings)


def reset_settings() -> None:
    set_settings(PartkitSettings())
