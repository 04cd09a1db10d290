"""
Show Scheduler Models Package.

Catalog input:
    - Track: Library row offered to the model
    - ScheduleRequest: Instructions plus optional duration/genre/energy hints

Intermediate:
    - ModelSongSelection, ModelBreakSpec, NormalizedSelection

Output:
    - ScheduleItem, GeneratedSchedule
    - ItemKind, ScheduleState (Enums)
"""

from .core import (
    ItemKind,
    ScheduleState,
    Track,
    ScheduleRequest,
    ModelSongSelection,
    ModelBreakSpec,
    NormalizedSelection,
    ScheduleItem,
    GeneratedSchedule,
)

__all__ = [
    "ItemKind",
    "ScheduleState",
    "Track",
    "ScheduleRequest",
    "ModelSongSelection",
    "ModelBreakSpec",
    "NormalizedSelection",
    "ScheduleItem",
    "GeneratedSchedule",
]
