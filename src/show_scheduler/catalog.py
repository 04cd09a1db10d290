"""
Catalog candidate fetching.

One bounded read of the music library. A failed read degrades to an empty
candidate list; generation continues without library grounding.

Chat questions about the library get a smaller snapshot (a few playlists
and tracks) read the same way.
"""

import logging
from typing import Any, Dict, List, Optional

from src.supabase_store import SupabaseClient, StoreError

from .config import MAX_CATALOG_LIMIT
from .models import Track

logger = logging.getLogger(__name__)

CATALOG_TABLE = "playlist_entries"
CATALOG_COLUMNS = "*, playlists(name)"

PLAYLISTS_TABLE = "playlists"
SUMMARY_PLAYLIST_LIMIT = 10
SUMMARY_TRACK_LIMIT = 20

# Chat questions that get a library snapshot in the prompt
LIBRARY_QUESTION_KEYWORDS = ("playlist", "library", "stats")


async def fetch_candidates(store: SupabaseClient, limit: int = MAX_CATALOG_LIMIT) -> List[Track]:
    """Fetch up to `limit` library tracks in catalog order.

    Args:
        store: Store client
        limit: Maximum rows, capped at 1000

    Returns:
        Tracks, or an empty list when the store cannot be read.
    """
    limit = max(1, min(limit, MAX_CATALOG_LIMIT))

    try:
        rows = await store.select(CATALOG_TABLE, columns=CATALOG_COLUMNS, limit=limit)
    except StoreError as e:
        logger.warning(f"Catalog unavailable, continuing without library context: {e}")
        return []

    tracks = []
    for row in rows:
        if not isinstance(row, dict):
            continue
        tracks.append(Track.from_row(row))

    logger.info(f"Fetched {len(tracks)} catalog candidates (limit {limit})")
    return tracks


def wants_library_summary(message: str) -> bool:
    """True when a chat message asks about playlists, the library or stats."""
    lowered = message.lower()
    return any(keyword in lowered for keyword in LIBRARY_QUESTION_KEYWORDS)


async def fetch_library_summary(store: SupabaseClient) -> Optional[Dict[str, Any]]:
    """Small snapshot of the library for answering chat questions.

    Returns:
        {"playlists", "recentSongs", "playlistCount", "songCount"}, or None
        when the store cannot be read.
    """
    try:
        playlist_rows = await store.select(
            PLAYLISTS_TABLE, columns="name, song_count", limit=SUMMARY_PLAYLIST_LIMIT
        )
        track_rows = await store.select(CATALOG_TABLE, columns="*", limit=SUMMARY_TRACK_LIMIT)
    except StoreError as e:
        logger.warning(f"Library summary unavailable: {e}")
        return None

    playlists = [
        {"name": row.get("name"), "songCount": row.get("song_count")}
        for row in playlist_rows
        if isinstance(row, dict)
    ]
    recent_songs = []
    for row in track_rows:
        if not isinstance(row, dict):
            continue
        track = Track.from_row(row)
        recent_songs.append({"title": track.title, "artist": track.artist, "category": track.category})

    return {
        "playlists": playlists,
        "recentSongs": recent_songs,
        "playlistCount": len(playlists),
        "songCount": len(recent_songs),
    }
