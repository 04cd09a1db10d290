"""
Persist-as-playlist.

Writes a schedule into the store as a new playlist row plus one entry row
per item, then records the entry count on the playlist. There is no
rollback: a failure part-way leaves whatever was already written.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List

from src.supabase_store import StoreError, SupabaseClient

from .exceptions import PersistenceError
from .models import GeneratedSchedule, ItemKind, ScheduleItem

logger = logging.getLogger(__name__)

PLAYLISTS_TABLE = "playlists"
ENTRIES_TABLE = "playlist_entries"

CATEGORY_BY_KIND = {
    ItemKind.SONG: "Music",
    ItemKind.INTERSTITIAL: "Interstitial",
    ItemKind.BREAK: "Break",
}


@dataclass
class PersistedPlaylist:
    """Identifiers written by persist_as_playlist."""
    playlist_id: Any
    name: str
    entry_count: int


def build_playlist_row(schedule: GeneratedSchedule) -> Dict[str, Any]:
    return {
        "name": schedule.title,
        "description": f"AI Generated Schedule - {schedule.total_duration_display} total duration",
        "song_count": 0,
    }


def build_entry_rows(playlist_id: Any, items: List[ScheduleItem]) -> List[Dict[str, Any]]:
    """Map schedule items onto the playlist_entries schema (1-based positions)."""
    return [
        {
            "playlist_id": playlist_id,
            "title": item.title,
            "artist": item.artist,
            "runs": item.duration_display,
            "position": position,
            "category": CATEGORY_BY_KIND[item.kind],
            "notes": item.notes or "",
            "start_time": item.start_time,
            "end_time": item.end_time,
        }
        for position, item in enumerate(items, start=1)
    ]


async def persist_as_playlist(schedule: GeneratedSchedule, store: SupabaseClient) -> PersistedPlaylist:
    """
    Save a schedule as a new playlist with one entry per item.

    Args:
        schedule: Schedule (possibly edited) to save
        store: Store client

    Returns:
        PersistedPlaylist with the new playlist id and entry count

    Raises:
        PersistenceError: If any store write fails
    """
    logger.info(f"Saving schedule '{schedule.title}' as playlist ({len(schedule.items)} items)")

    try:
        created = await store.insert(PLAYLISTS_TABLE, build_playlist_row(schedule))
        if not created or "id" not in created[0]:
            raise PersistenceError(f"Store did not return the new playlist for '{schedule.title}'")
        playlist_id = created[0]["id"]

        entries = build_entry_rows(playlist_id, schedule.items)
        if entries:
            await store.insert(ENTRIES_TABLE, entries)

        await store.update(PLAYLISTS_TABLE, {"song_count": len(entries)}, {"id": playlist_id})

    except StoreError as e:
        logger.error(f"Could not save schedule '{schedule.title}': {e}", exc_info=True)
        raise PersistenceError(f"Could not save schedule '{schedule.title}': {e.message}") from e

    logger.info(f"Saved schedule '{schedule.title}' as playlist {playlist_id} with {len(entries)} entries")
    return PersistedPlaylist(playlist_id=playlist_id, name=schedule.title, entry_count=len(entries))
