"""
Model response parsing.

Extracts the JSON object from free-form model text, coerces it into a
NormalizedSelection and, when nothing usable comes back, builds the
deterministic first-N-candidates fallback. parse_model_output never raises.
"""

import json
import logging
import re
from typing import Any, Dict, List, Optional, Sequence

from .exceptions import ModelOutputError
from .models import (
    ItemKind,
    ModelBreakSpec,
    ModelSongSelection,
    NormalizedSelection,
    Track,
)

logger = logging.getLogger(__name__)

FALLBACK_TRACK_COUNT = 10
FALLBACK_TITLE = "Library Fallback Schedule"
FALLBACK_REASON = "Selected from available library"
FALLBACK_NOTES = (
    "The scheduling assistant was unavailable or returned an unreadable answer. "
    "This schedule lists the first tracks in your library; review it before airing."
)
DEFAULT_TITLE = "AI Generated Schedule"
DEFAULT_BREAK_TYPE = "Break"

_INTEGER = re.compile(r'-?[0-9]+')


def extract_json_object(text: Optional[str]) -> Dict[str, Any]:
    """Decode the span from the first '{' to the last '}' of the text.

    Raises:
        ModelOutputError: No braces, invalid JSON, or not a JSON object
    """
    if not text:
        raise ModelOutputError("Model returned no text")

    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        raise ModelOutputError("No JSON object found in model response")

    try:
        data = json.loads(text[start:end + 1])
    except json.JSONDecodeError as e:
        raise ModelOutputError(f"Invalid JSON in model response: {e}") from e

    if not isinstance(data, dict):
        raise ModelOutputError("Model JSON is not an object")
    return data


def _text(value: Any, default: str = "") -> str:
    if value is None:
        return default
    value = str(value).strip()
    return value or default


def _coerce_position(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    # ASCII digits only ("²" passes str.isdigit but not int)
    if isinstance(value, str) and _INTEGER.fullmatch(value.strip()):
        return int(value.strip())
    return None


def _normalize_song(
    entry: Any, position: int, candidates_by_id: Dict[str, Track]
) -> Optional[ModelSongSelection]:
    if not isinstance(entry, dict):
        return None

    raw_id = _text(entry.get("id"))
    title = _text(entry.get("title"))
    if not raw_id and not title:
        return None

    track_id = raw_id or f"song_{position}"
    candidate = candidates_by_id.get(track_id)

    duration_raw = entry.get("duration")
    if (duration_raw is None or duration_raw == "") and candidate is not None:
        duration_raw = candidate.duration_raw

    if not title:
        title = candidate.title if candidate else "Unknown Title"
    artist = _text(entry.get("artist")) or (candidate.artist if candidate else "Unknown Artist")

    kind = ItemKind.INTERSTITIAL if _text(entry.get("type")).lower() == "interstitial" else ItemKind.SONG

    return ModelSongSelection(
        id=track_id,
        title=title,
        artist=artist,
        duration_raw=duration_raw,
        selection_reason=_text(entry.get("reason") or entry.get("selectionReason")),
        kind=kind,
    )


def _normalize_break(entry: Any) -> Optional[ModelBreakSpec]:
    if not isinstance(entry, dict):
        return None

    after_track = _coerce_position(entry.get("afterTrack"))
    if after_track is None:
        return None

    return ModelBreakSpec(
        after_track=after_track,
        duration_raw=entry.get("duration"),
        break_type=_text(entry.get("type"), DEFAULT_BREAK_TYPE),
        notes=_text(entry.get("notes")),
    )


def normalize_payload(data: Dict[str, Any], candidates: Sequence[Track] = ()) -> NormalizedSelection:
    """Coerce a decoded model object into a NormalizedSelection.

    Malformed song/break entries are dropped and missing optional fields get
    safe defaults.

    An empty selectedSongs list is kept as an empty selection.

    Raises:
        ModelOutputError: selectedSongs missing, not a list, or none of its entries usable
    """
    songs_raw = data.get("selectedSongs")
    if not isinstance(songs_raw, list):
        raise ModelOutputError("Model JSON has no selectedSongs list")

    candidates_by_id = {track.id: track for track in candidates}

    songs: List[ModelSongSelection] = []
    for entry in songs_raw:
        song = _normalize_song(entry, len(songs) + 1, candidates_by_id)
        if song is None:
            logger.debug(f"Dropping malformed song entry: {entry!r}")
            continue
        songs.append(song)

    if songs_raw and not songs:
        raise ModelOutputError("Model JSON selected no usable songs")

    breaks_raw = data.get("breaks")
    breaks: List[ModelBreakSpec] = []
    if isinstance(breaks_raw, list):
        for entry in breaks_raw:
            spec = _normalize_break(entry)
            if spec is None:
                logger.debug(f"Dropping malformed break entry: {entry!r}")
                continue
            breaks.append(spec)

    return NormalizedSelection(
        title=_text(data.get("title"), DEFAULT_TITLE),
        selected_songs=songs,
        breaks=breaks,
        notes=_text(data.get("notes")),
    )


def build_fallback_selection(candidates: Sequence[Track]) -> NormalizedSelection:
    """First FALLBACK_TRACK_COUNT candidates, in catalog order, with no breaks."""
    songs = [
        ModelSongSelection(
            id=track.id,
            title=track.title,
            artist=track.artist,
            duration_raw=track.duration_raw,
            selection_reason=FALLBACK_REASON,
        )
        for track in list(candidates)[:FALLBACK_TRACK_COUNT]
    ]

    return NormalizedSelection(
        title=FALLBACK_TITLE,
        selected_songs=songs,
        breaks=[],
        notes=FALLBACK_NOTES,
        degraded=True,
    )


def parse_model_output(text: Optional[str], candidates: Sequence[Track]) -> NormalizedSelection:
    """Parse model text into a NormalizedSelection, falling back when unusable.

    Args:
        text: Raw model text, or None when the model call failed
        candidates: Catalog candidates that were offered to the model

    Returns:
        The model's selection, or the degraded fallback selection.
    """
    try:
        data = extract_json_object(text)
        selection = normalize_payload(data, candidates)
    except ModelOutputError as e:
        logger.warning(f"Model output unusable, using library fallback: {e}")
        return build_fallback_selection(candidates)

    logger.debug(
        f"Parsed model selection '{selection.title}': "
        f"{len(selection.selected_songs)} songs, {len(selection.breaks)} breaks"
    )
    return selection
