"""
Unit tests for the editable schedule workspace.
"""

import json
from unittest.mock import AsyncMock

import pytest

from src.show_scheduler.exceptions import (
    InvalidEditError,
    PersistenceError,
    ScheduleItemNotFoundError,
    ScheduleNotFoundError,
)
from src.show_scheduler.models import ModelSongSelection, ScheduleState
from src.show_scheduler.timeline import assemble
from src.show_scheduler.workspace import ScheduleWorkspace, export_filename, export_schedule
from src.supabase_store import StoreConnectionError


@pytest.fixture
def schedule(abc_selection, station_id_break):
    abc_selection.breaks = [station_id_break]
    return assemble(abc_selection)


@pytest.fixture
def workspace():
    return ScheduleWorkspace()


class TestRegister:

    def test_register_copies_schedule(self, workspace, schedule):
        session = workspace.register(schedule)
        schedule.items.clear()

        assert len(workspace.get(session.schedule_id).schedule.items) == 4
        assert session.state == ScheduleState.ASSEMBLED
        assert len(workspace) == 1

    def test_degraded_state(self, workspace, schedule):
        session = workspace.register(schedule, degraded=True)
        assert session.state == ScheduleState.FAILED_DEGRADED
        assert session.degraded is True

    def test_unknown_schedule(self, workspace):
        with pytest.raises(ScheduleNotFoundError):
            workspace.get("nope")


class TestEditItem:

    def test_edit_title(self, workspace, schedule):
        session = workspace.register(schedule)
        item = workspace.edit_item(session.schedule_id, "b", {"title": "Renamed"})

        assert item.title == "Renamed"
        assert session.schedule.items[1].title == "Renamed"
        assert session.state == ScheduleState.DIRTY

    def test_duration_edit_does_not_retime(self, workspace, schedule):
        session = workspace.register(schedule)
        item = workspace.edit_item(session.schedule_id, "a", {"duration": "4:00"})

        assert item.duration_seconds == 240
        assert item.duration_display == "4:00"
        assert item.start_time == "0:00"
        assert item.end_time == "3:00"
        assert session.schedule.items[1].start_time == "3:00"
        assert session.schedule.total_duration_seconds == 705

    def test_duplicate_ids_all_edited(self, workspace, abc_selection):
        abc_selection.selected_songs.append(
            ModelSongSelection(id="a", title="Song A", artist="Artist A", duration_raw="3:00")
        )
        session = workspace.register(assemble(abc_selection))

        workspace.edit_item(session.schedule_id, "a", {"notes": "Replay"})

        assert [item.notes for item in session.schedule.items if item.id == "a"] == ["Replay", "Replay"]

    def test_unknown_field(self, workspace, schedule):
        session = workspace.register(schedule)
        with pytest.raises(InvalidEditError):
            workspace.edit_item(session.schedule_id, "a", {"start_time": "1:00"})
        assert session.state == ScheduleState.ASSEMBLED

    def test_unknown_item(self, workspace, schedule):
        session = workspace.register(schedule)
        with pytest.raises(ScheduleItemNotFoundError):
            workspace.edit_item(session.schedule_id, "zz", {"title": "x"})


class TestDeleteItem:

    def test_delete_keeps_other_times(self, workspace, schedule):
        session = workspace.register(schedule)
        removed = workspace.delete_item(session.schedule_id, "break_2")

        assert removed == 1
        assert [item.id for item in session.schedule.items] == ["a", "b", "c"]
        assert session.schedule.items[2].start_time == "7:30"
        assert session.schedule.total_duration_display == "11:45"
        assert session.state == ScheduleState.DIRTY

    def test_delete_unknown(self, workspace, schedule):
        session = workspace.register(schedule)
        with pytest.raises(ScheduleItemNotFoundError):
            workspace.delete_item(session.schedule_id, "zz")


class TestExport:

    def test_filename(self):
        assert export_filename("Morning Rock: Vol 2!") == "morning_rock__vol_2__schedule.json"

    def test_document(self, schedule):
        filename, document = export_schedule(schedule)
        data = json.loads(document)

        assert filename == "morning_rock_schedule.json"
        assert data["title"] == "Morning Rock"
        assert len(data["items"]) == 4
        assert '\n  "title"' in document

    def test_export_reflects_edits(self, workspace, schedule):
        session = workspace.register(schedule)
        workspace.delete_item(session.schedule_id, "c")
        _, document = workspace.export(session.schedule_id)
        assert [item["id"] for item in json.loads(document)["items"]] == ["a", "b", "break_2"]


class TestPersist:

    @pytest.mark.asyncio
    async def test_persist_marks_session(self, workspace, schedule, mock_store):
        mock_store.insert = AsyncMock(side_effect=[[{"id": 9}], [{}] * 4])
        session = workspace.register(schedule)

        result = await workspace.persist(session.schedule_id, mock_store)

        assert result.playlist_id == 9
        assert session.state == ScheduleState.PERSISTED
        assert session.persisted_playlist_id == 9

    @pytest.mark.asyncio
    async def test_failed_persist_leaves_state(self, workspace, schedule, mock_store):
        mock_store.insert = AsyncMock(side_effect=StoreConnectionError("connection", "down"))
        session = workspace.register(schedule)
        workspace.edit_item(session.schedule_id, "a", {"title": "x"})

        with pytest.raises(PersistenceError):
            await workspace.persist(session.schedule_id, mock_store)
        assert session.state == ScheduleState.DIRTY


class FakeClock:
    """Manually advanced time source."""

    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


class TestEviction:

    def test_idle_session_expires(self, schedule):
        clock = FakeClock()
        workspace = ScheduleWorkspace(ttl_seconds=60, clock=clock)
        session = workspace.register(schedule)

        clock.now += 61
        with pytest.raises(ScheduleNotFoundError):
            workspace.get(session.schedule_id)
        assert len(workspace) == 0

    def test_access_refreshes_ttl(self, schedule):
        clock = FakeClock()
        workspace = ScheduleWorkspace(ttl_seconds=60, clock=clock)
        session = workspace.register(schedule)

        clock.now += 50
        workspace.get(session.schedule_id)
        clock.now += 50
        assert workspace.get(session.schedule_id) is session

    def test_expired_sessions_dropped_on_register(self, schedule):
        clock = FakeClock()
        workspace = ScheduleWorkspace(ttl_seconds=60, clock=clock)
        workspace.register(schedule)
        workspace.register(schedule)

        clock.now += 120
        workspace.register(schedule)
        assert len(workspace) == 1

    def test_least_recently_used_evicted(self, schedule):
        workspace = ScheduleWorkspace(max_sessions=2, clock=FakeClock())
        first = workspace.register(schedule)
        second = workspace.register(schedule)
        workspace.get(first.schedule_id)

        third = workspace.register(schedule)

        assert len(workspace) == 2
        assert workspace.get(first.schedule_id) is first
        assert workspace.get(third.schedule_id) is third
        with pytest.raises(ScheduleNotFoundError):
            workspace.get(second.schedule_id)

    @pytest.mark.parametrize("kwargs", [{"ttl_seconds": 0}, {"max_sessions": 0}])
    def test_invalid_limits(self, kwargs):
        with pytest.raises(ValueError):
            ScheduleWorkspace(**kwargs)
