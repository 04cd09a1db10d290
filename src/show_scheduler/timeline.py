"""
Timeline assembly.

Walks the normalized song list in order, inserting each break directly
after the song whose 1-based position it names, and stamps every item with
start/end clock positions from a running elapsed-seconds counter.
"""

import logging
from typing import List

from .duration import format_duration_display, format_time, parse_duration_to_seconds
from .models import (
    GeneratedSchedule,
    ItemKind,
    NormalizedSelection,
    ScheduleItem,
)

logger = logging.getLogger(__name__)


def assemble(selection: NormalizedSelection) -> GeneratedSchedule:
    """Build a timed schedule from a normalized selection.

    Breaks sharing a position are emitted in list order. Breaks whose
    afterTrack does not match any song position never fire.

    Args:
        selection: Model or fallback selection

    Returns:
        GeneratedSchedule whose items are back-to-back from "0:00"
    """
    current_time = 0
    items: List[ScheduleItem] = []

    for position, song in enumerate(selection.selected_songs, start=1):
        duration_seconds = parse_duration_to_seconds(song.duration_raw)
        items.append(
            ScheduleItem(
                id=song.id,
                title=song.title,
                artist=song.artist,
                duration_display=format_duration_display(duration_seconds),
                duration_seconds=duration_seconds,
                start_time=format_time(current_time),
                end_time=format_time(current_time + duration_seconds),
                kind=song.kind,
                notes=song.selection_reason,
            )
        )
        current_time += duration_seconds

        for spec in selection.breaks:
            if spec.after_track != position:
                continue
            break_seconds = parse_duration_to_seconds(spec.duration_raw)
            items.append(
                ScheduleItem(
                    id=f"break_{position}",
                    title=spec.break_type,
                    artist="",
                    duration_display=format_duration_display(break_seconds),
                    duration_seconds=break_seconds,
                    start_time=format_time(current_time),
                    end_time=format_time(current_time + break_seconds),
                    kind=ItemKind.BREAK,
                    notes=spec.notes,
                )
            )
            current_time += break_seconds

    song_count = len(selection.selected_songs)
    dropped = [spec for spec in selection.breaks if not 1 <= spec.after_track <= song_count]
    if dropped:
        logger.warning(
            f"Dropped {len(dropped)} break(s) with afterTrack outside 1-{song_count}: "
            f"{[spec.after_track for spec in dropped]}"
        )

    logger.info(
        f"Assembled schedule '{selection.title}': {len(items)} items, "
        f"{format_time(current_time)} total"
    )

    return GeneratedSchedule(
        title=selection.title,
        total_duration_display=format_time(current_time),
        total_duration_seconds=current_time,
        items=items,
        break_specs=list(selection.breaks),
    )
