"""
Core data models for natural-language show schedule generation.

Entities:
    - Track: Library row offered to the model as a catalog candidate
    - ScheduleRequest: One generation request (instructions plus optional hints)
    - ModelSongSelection / ModelBreakSpec: Normalized model (or fallback) output
    - NormalizedSelection: Ordered song/break lists prior to timeline assembly
    - ScheduleItem: One timed entry of a schedule
    - GeneratedSchedule: Complete timed schedule
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from ..exceptions import InvalidRequestError


# ============================================================================
# Enumerations
# ============================================================================


class ItemKind(Enum):
    """What a schedule item is."""
    SONG = "song"
    INTERSTITIAL = "interstitial"
    BREAK = "break"


class ScheduleState(Enum):
    """Lifecycle of a registered schedule copy."""
    ASSEMBLED = "assembled"
    FAILED_DEGRADED = "failed_degraded"
    DIRTY = "dirty"
    PERSISTED = "persisted"


# ============================================================================
# Catalog input
# ============================================================================


def _first_present(row: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        value = row.get(key)
        if value is not None and value != "":
            return value
    return default


@dataclass(frozen=True)
class Track:
    """Library track offered to the model. Never mutated by the scheduler."""
    id: str
    title: str
    artist: str
    duration_raw: Any = None
    category: Optional[str] = None
    intro: Optional[Any] = None
    ending: Optional[Any] = None
    year: Optional[Any] = None
    playlist_name: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> 'Track':
        """Build a Track from a playlist_entries row.

        Column names in imported spreadsheets vary in case and spelling
        ("Title"/"title", "Catergory"/"Category", "Runs"/"duration").
        """
        playlist = row.get("playlists")
        nested_name = playlist.get("name") if isinstance(playlist, dict) else None

        return cls(
            id=str(_first_present(row, "id", "ID", default="")),
            title=str(_first_present(row, "Title", "title", default="Unknown Title")),
            artist=str(_first_present(row, "Artist", "artist", default="Unknown Artist")),
            duration_raw=_first_present(row, "Runs", "runs", "Duration", "duration", "Runtime", "runtime"),
            category=_first_present(row, "Catergory", "Category", "category"),
            intro=_first_present(row, "Intro", "intro"),
            ending=_first_present(row, "Ending", "ending"),
            year=_first_present(row, "Year", "year"),
            playlist_name=_first_present(row, "playlist_name") or nested_name,
        )

    def to_prompt_dict(self) -> Dict[str, Any]:
        """Compact projection embedded in the model prompt."""
        return {
            "id": self.id,
            "title": self.title,
            "artist": self.artist,
            "duration": self.duration_raw,
            "category": self.category,
            "intro": self.intro,
            "ending": self.ending,
            "year": self.year,
            "playlist": self.playlist_name,
        }


@dataclass(frozen=True)
class ScheduleRequest:
    """A single schedule generation request."""
    instructions: str
    duration_hint: Optional[str] = None
    genre_hint: Optional[str] = None
    energy_hint: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.instructions, str) or not self.instructions.strip():
            raise InvalidRequestError("Please describe what kind of show you want")

    @classmethod
    def from_message(cls, message: str, context: Optional[Dict[str, Any]] = None) -> 'ScheduleRequest':
        """Build a request from a chat message and its optional context hints."""
        context = context or {}

        def hint(key: str) -> Optional[str]:
            value = context.get(key)
            if value is None:
                return None
            value = str(value).strip()
            return value or None

        return cls(
            instructions=message.strip() if isinstance(message, str) else message,
            duration_hint=hint("duration"),
            genre_hint=hint("genre"),
            energy_hint=hint("energy"),
        )


# ============================================================================
# Normalized model output
# ============================================================================


@dataclass(frozen=True)
class ModelSongSelection:
    """One track chosen by the model (or by the fallback)."""
    id: str
    title: str
    artist: str
    duration_raw: Any
    selection_reason: str = ""
    kind: ItemKind = ItemKind.SONG


@dataclass(frozen=True)
class ModelBreakSpec:
    """A break to insert after the song at 1-based position `after_track`."""
    after_track: int
    duration_raw: Any
    break_type: str = "Break"
    notes: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "afterTrack": self.after_track,
            "duration": "" if self.duration_raw is None else str(self.duration_raw),
            "type": self.break_type,
            "notes": self.notes,
        }


@dataclass
class NormalizedSelection:
    """Parsed (or fallback) song and break lists, ready for timeline assembly."""
    title: str
    selected_songs: List[ModelSongSelection]
    breaks: List[ModelBreakSpec] = field(default_factory=list)
    notes: str = ""
    degraded: bool = False


# ============================================================================
# Output
# ============================================================================


@dataclass(frozen=True)
class ScheduleItem:
    """A timed entry of a schedule."""
    id: str
    title: str
    artist: str
    duration_display: str
    duration_seconds: int
    start_time: str
    end_time: str
    kind: ItemKind
    notes: Optional[str] = None

    def __post_init__(self) -> None:
        if self.duration_seconds < 0:
            raise ValueError("duration_seconds must be >= 0")

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "title": self.title,
            "artist": self.artist,
            "duration": self.duration_display,
            "durationSeconds": self.duration_seconds,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "type": self.kind.value,
        }
        if self.notes is not None:
            data["notes"] = self.notes
        return data


@dataclass
class GeneratedSchedule:
    """Complete timed schedule produced by timeline assembly."""
    title: str
    total_duration_display: str
    total_duration_seconds: int
    items: List[ScheduleItem] = field(default_factory=list)
    break_specs: List[ModelBreakSpec] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Wire form used by the HTTP API and JSON export."""
        return {
            "title": self.title,
            "totalDuration": self.total_duration_display,
            "totalDurationSeconds": self.total_duration_seconds,
            "items": [item.to_dict() for item in self.items],
            "breaks": [spec.to_dict() for spec in self.break_specs],
        }
