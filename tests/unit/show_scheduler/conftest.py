"""
Shared fixtures for show scheduler unit tests.
"""

import json
from typing import List
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from src.show_scheduler.models import (
    ModelBreakSpec,
    ModelSongSelection,
    NormalizedSelection,
    Track,
)
from src.supabase_store import StoreConfig, SupabaseClient


@pytest.fixture
def three_tracks() -> List[Track]:
    """Tracks a, b, c running 3:00, 2:30 and 4:15."""
    return [
        Track(id="a", title="Song A", artist="Artist A", duration_raw="3:00", category="Rock"),
        Track(id="b", title="Song B", artist="Artist B", duration_raw="2:30", category="Rock"),
        Track(id="c", title="Song C", artist="Artist C", duration_raw="4:15", category="Pop"),
    ]


@pytest.fixture
def many_tracks() -> List[Track]:
    """Fifteen tracks, each 200 seconds long."""
    return [
        Track(id=f"t{i}", title=f"Track {i}", artist=f"Artist {i}", duration_raw=200)
        for i in range(1, 16)
    ]


@pytest.fixture
def abc_selection() -> NormalizedSelection:
    return NormalizedSelection(
        title="Morning Rock",
        selected_songs=[
            ModelSongSelection(id="a", title="Song A", artist="Artist A", duration_raw="3:00", selection_reason="Opener"),
            ModelSongSelection(id="b", title="Song B", artist="Artist B", duration_raw="2:30", selection_reason="Builds"),
            ModelSongSelection(id="c", title="Song C", artist="Artist C", duration_raw="4:15", selection_reason="Peak"),
        ],
    )


@pytest.fixture
def station_id_break() -> ModelBreakSpec:
    return ModelBreakSpec(after_track=2, duration_raw="2:00", break_type="Station ID", notes="Top of segment ID")


@pytest.fixture
def model_payload_text() -> str:
    """Model answer wrapped in chatter and a code fence."""
    payload = {
        "title": "Morning Rock",
        "selectedSongs": [
            {"id": "a", "title": "Song A", "artist": "Artist A", "duration": "3:00", "reason": "Opener"},
            {"id": "b", "title": "Song B", "artist": "Artist B", "duration": "2:30", "reason": "Builds"},
            {"id": "c", "title": "Song C", "artist": "Artist C", "duration": "4:15", "reason": "Peak"},
        ],
        "breaks": [{"afterTrack": 2, "duration": "2:00", "type": "Station ID", "notes": "Legal ID"}],
        "notes": "Rock all morning",
    }
    return f"Sure! Here is your show:\n```json\n{json.dumps(payload)}\n```\nEnjoy."


@pytest.fixture
def catalog_rows() -> list:
    """Raw playlist_entries rows as the store returns them."""
    return [
        {"id": "a", "Title": "Song A", "Artist": "Artist A", "Runs": "3:00", "Catergory": "Rock",
         "playlists": {"name": "Rock Library"}},
        {"id": "b", "Title": "Song B", "Artist": "Artist B", "Runs": "2:30", "Catergory": "Rock",
         "playlists": {"name": "Rock Library"}},
        {"id": "c", "Title": "Song C", "Artist": "Artist C", "Runs": "4:15", "Catergory": "Pop",
         "playlists": {"name": "Pop Library"}},
    ]


@pytest.fixture
def mock_store(catalog_rows):
    """Store double whose select() returns the three catalog rows."""
    store = MagicMock(spec=SupabaseClient)
    store.select = AsyncMock(return_value=catalog_rows)
    store.insert = AsyncMock()
    store.update = AsyncMock(return_value=[])
    store.ping = AsyncMock(return_value=True)
    return store


@pytest.fixture
def mock_model(model_payload_text):
    """Model double returning the Morning Rock payload."""
    model = MagicMock()
    model.complete = AsyncMock(return_value=model_payload_text)
    model.chat_reply = AsyncMock(return_value="Happy to help with your library!")
    return model


@pytest.fixture
def gateway_page_store():
    """Real store client whose every request gets a 200 HTML gateway page."""
    config = StoreConfig(url="https://abc.supabase.co", anon_key="eyJhbGciOiJIUzI1NiJ9.test")
    transport = httpx.MockTransport(lambda request: httpx.Response(200, text="<html>gateway</html>"))
    return SupabaseClient(config, transport=transport)
