"""
Editable schedule copies for the dashboard.

Each generated schedule is registered under a new id and edited through
this workspace. Edits and deletes never retime other items and never
change the schedule totals: the start/end times written at generation are
kept as-is (a known limitation of the editor).

Sessions expire after `ttl_seconds` without access, and the least recently
used session is evicted once `max_sessions` is exceeded.
"""

import copy
import dataclasses
import json
import logging
import re
import time
import uuid
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Tuple

from src.supabase_store import SupabaseClient

from .duration import format_duration_display, parse_duration_to_seconds
from .exceptions import (
    InvalidEditError,
    ScheduleItemNotFoundError,
    ScheduleNotFoundError,
)
from .models import GeneratedSchedule, ScheduleItem, ScheduleState
from .playlist_sync import PersistedPlaylist, persist_as_playlist

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = frozenset({"title", "artist", "duration", "notes"})
DEFAULT_SESSION_TTL_SECONDS = 3600
DEFAULT_MAX_SESSIONS = 100


@dataclass
class ScheduleSession:
    """One editable schedule copy and where it is in its lifecycle."""
    schedule_id: str
    schedule: GeneratedSchedule
    state: ScheduleState
    degraded: bool = False
    persisted_playlist_id: Optional[Any] = None
    last_access: float = field(default_factory=time.time)

    def is_expired(self, ttl_seconds: float, now: float) -> bool:
        """True when the session has not been touched for `ttl_seconds`."""
        return now - self.last_access > ttl_seconds


def export_filename(title: str) -> str:
    """Download name: non-alphanumerics replaced by "_", lowercased."""
    return f"{re.sub(r'[^a-z0-9]', '_', title, flags=re.IGNORECASE).lower()}_schedule.json"


def export_schedule(schedule: GeneratedSchedule) -> Tuple[str, str]:
    """Serialize a schedule for download.

    Returns:
        (filename, pretty-printed JSON document)
    """
    return export_filename(schedule.title), json.dumps(schedule.to_dict(), indent=2)


class ScheduleWorkspace:
    """In-memory registry of editable schedules keyed by schedule id.

    Not safe for concurrent access from several threads; the API runs it on
    a single event loop.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_SESSION_TTL_SECONDS,
        max_sessions: int = DEFAULT_MAX_SESSIONS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Args:
            ttl_seconds: Idle time after which a session is dropped
            max_sessions: Sessions kept before the least recently used is evicted
            clock: Time source in seconds

        Raises:
            ValueError: If ttl_seconds or max_sessions is not positive
        """
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        if max_sessions <= 0:
            raise ValueError("max_sessions must be positive")

        self.ttl_seconds = ttl_seconds
        self.max_sessions = max_sessions
        self._clock = clock
        self._sessions: "OrderedDict[str, ScheduleSession]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def _evict(self) -> None:
        now = self._clock()
        expired = [sid for sid, session in self._sessions.items() if session.is_expired(self.ttl_seconds, now)]
        for schedule_id in expired:
            del self._sessions[schedule_id]
        if expired:
            logger.debug(f"Expired {len(expired)} idle schedule(s)")

        while len(self._sessions) > self.max_sessions:
            schedule_id, _ = self._sessions.popitem(last=False)
            logger.debug(f"Evicted least recently used schedule {schedule_id}")

    def register(self, schedule: GeneratedSchedule, degraded: bool = False) -> ScheduleSession:
        """Take an independent copy of a generated schedule and start tracking it."""
        session = ScheduleSession(
            schedule_id=str(uuid.uuid4()),
            schedule=copy.deepcopy(schedule),
            state=ScheduleState.FAILED_DEGRADED if degraded else ScheduleState.ASSEMBLED,
            degraded=degraded,
            last_access=self._clock(),
        )
        self._sessions[session.schedule_id] = session
        self._evict()
        logger.debug(f"Registered schedule {session.schedule_id} ({session.state.value})")
        return session

    def get(self, schedule_id: str) -> ScheduleSession:
        self._evict()
        try:
            session = self._sessions[schedule_id]
        except KeyError:
            raise ScheduleNotFoundError(schedule_id) from None
        session.last_access = self._clock()
        self._sessions.move_to_end(schedule_id)
        return session

    def edit_item(self, schedule_id: str, item_id: str, fields: Dict[str, Any]) -> ScheduleItem:
        """
        Edit title/artist/duration/notes of every item with `item_id`.

        A new duration updates that item's duration only; start/end times
        of this and later items stay unchanged.

        Returns:
            The first updated item

        Raises:
            ScheduleNotFoundError: Unknown schedule id
            ScheduleItemNotFoundError: No item with that id
            InvalidEditError: Unknown field names
        """
        unknown = set(fields) - EDITABLE_FIELDS
        if unknown:
            raise InvalidEditError(f"Cannot edit field(s): {', '.join(sorted(unknown))}")

        session = self.get(schedule_id)
        changes: Dict[str, Any] = {}
        for name in ("title", "artist", "notes"):
            if name in fields:
                changes[name] = "" if fields[name] is None else str(fields[name])
        if "duration" in fields:
            seconds = parse_duration_to_seconds(fields["duration"])
            changes["duration_seconds"] = seconds
            changes["duration_display"] = format_duration_display(seconds)

        updated: Optional[ScheduleItem] = None
        items = session.schedule.items
        for index, item in enumerate(items):
            if item.id != item_id:
                continue
            items[index] = dataclasses.replace(item, **changes)
            updated = updated or items[index]

        if updated is None:
            raise ScheduleItemNotFoundError(item_id)

        self._mark_dirty(session)
        logger.info(f"Edited item {item_id} in schedule {schedule_id}: {sorted(fields)}")
        return updated

    def delete_item(self, schedule_id: str, item_id: str) -> int:
        """
        Remove every item with `item_id`, without retiming.

        Returns:
            Number of items removed

        Raises:
            ScheduleNotFoundError: Unknown schedule id
            ScheduleItemNotFoundError: No item with that id
        """
        session = self.get(schedule_id)
        before = len(session.schedule.items)
        session.schedule.items = [item for item in session.schedule.items if item.id != item_id]
        removed = before - len(session.schedule.items)

        if not removed:
            raise ScheduleItemNotFoundError(item_id)

        self._mark_dirty(session)
        logger.info(f"Deleted {removed} item(s) {item_id} from schedule {schedule_id}")
        return removed

    def export(self, schedule_id: str) -> Tuple[str, str]:
        return export_schedule(self.get(schedule_id).schedule)

    async def persist(self, schedule_id: str, store: SupabaseClient) -> PersistedPlaylist:
        """Save the current copy as a playlist.

        Raises:
            ScheduleNotFoundError: Unknown schedule id
            PersistenceError: Store write failed (state is left unchanged)
        """
        session = self.get(schedule_id)
        result = await persist_as_playlist(session.schedule, store)
        session.state = ScheduleState.PERSISTED
        session.persisted_playlist_id = result.playlist_id
        return result

    @staticmethod
    def _mark_dirty(session: ScheduleSession) -> None:
        session.state = ScheduleState.DIRTY
