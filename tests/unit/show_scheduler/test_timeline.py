"""
Unit tests for timeline assembly.
"""

import logging

from src.show_scheduler.models import (
    ItemKind,
    ModelBreakSpec,
    ModelSongSelection,
    NormalizedSelection,
)
from src.show_scheduler.timeline import assemble


def _song(track_id, duration, kind=ItemKind.SONG):
    return ModelSongSelection(id=track_id, title=f"Title {track_id}", artist="Artist", duration_raw=duration, kind=kind)


class TestAssembleSongs:

    def test_three_songs_back_to_back(self, abc_selection):
        schedule = assemble(abc_selection)

        assert [item.start_time for item in schedule.items] == ["0:00", "3:00", "5:30"]
        assert [item.end_time for item in schedule.items] == ["3:00", "5:30", "9:45"]
        assert [item.duration_display for item in schedule.items] == ["3:00", "2:30", "4:15"]
        assert schedule.total_duration_seconds == 585
        assert schedule.total_duration_display == "9:45"
        assert schedule.title == "Morning Rock"

    def test_reason_becomes_notes(self, abc_selection):
        schedule = assemble(abc_selection)
        assert schedule.items[0].notes == "Opener"
        assert schedule.items[0].kind == ItemKind.SONG

    def test_garbage_duration_is_zero_length(self):
        selection = NormalizedSelection(title="T", selected_songs=[_song("a", "3:00"), _song("x", "soon"), _song("b", 60)])
        schedule = assemble(selection)

        garbage = schedule.items[1]
        assert garbage.duration_seconds == 0
        assert garbage.duration_display == "-"
        assert garbage.start_time == garbage.end_time == "3:00"
        assert schedule.items[2].start_time == "3:00"
        assert schedule.total_duration_seconds == 240

    def test_hour_boundary_formatting(self):
        selection = NormalizedSelection(title="Long", selected_songs=[_song("a", "59:00"), _song("b", "2:00")])
        schedule = assemble(selection)

        assert schedule.items[1].start_time == "59:00"
        assert schedule.items[1].end_time == "1:01:00"
        assert schedule.total_duration_display == "1:01:00"

    def test_interstitial_kind_preserved(self):
        selection = NormalizedSelection(title="T", selected_songs=[_song("p", "0:30", ItemKind.INTERSTITIAL)])
        assert assemble(selection).items[0].kind == ItemKind.INTERSTITIAL

    def test_empty_selection(self):
        schedule = assemble(NormalizedSelection(title="Empty", selected_songs=[]))
        assert schedule.items == []
        assert schedule.total_duration_seconds == 0
        assert schedule.total_duration_display == "0:00"


class TestAssembleBreaks:

    def test_break_after_second_track(self, abc_selection, station_id_break):
        abc_selection.breaks = [station_id_break]
        schedule = assemble(abc_selection)

        assert [item.id for item in schedule.items] == ["a", "b", "break_2", "c"]
        brk = schedule.items[2]
        assert brk.kind == ItemKind.BREAK
        assert brk.title == "Station ID"
        assert brk.artist == ""
        assert brk.start_time == "5:30"
        assert brk.end_time == "7:30"
        assert brk.notes == "Top of segment ID"
        assert schedule.items[3].start_time == "7:30"
        assert schedule.total_duration_seconds == 705

    def test_breaks_at_same_position_keep_order(self, abc_selection):
        abc_selection.breaks = [
            ModelBreakSpec(after_track=1, duration_raw="0:30", break_type="Station ID"),
            ModelBreakSpec(after_track=1, duration_raw="1:00", break_type="News"),
        ]
        schedule = assemble(abc_selection)

        assert [item.title for item in schedule.items[1:3]] == ["Station ID", "News"]
        assert schedule.items[1].end_time == schedule.items[2].start_time == "3:30"

    def test_break_after_last_track(self, abc_selection):
        abc_selection.breaks = [ModelBreakSpec(after_track=3, duration_raw="1:00")]
        schedule = assemble(abc_selection)

        assert schedule.items[-1].id == "break_3"
        assert schedule.total_duration_display == "10:45"

    def test_out_of_range_break_never_fires(self, abc_selection, caplog):
        abc_selection.breaks = [
            ModelBreakSpec(after_track=0, duration_raw="1:00"),
            ModelBreakSpec(after_track=9, duration_raw="1:00"),
        ]
        with caplog.at_level(logging.WARNING):
            schedule = assemble(abc_selection)

        assert all(item.kind != ItemKind.BREAK for item in schedule.items)
        assert schedule.total_duration_seconds == 585
        assert len(schedule.break_specs) == 2
        assert "Dropped 2 break(s)" in caplog.text

    def test_contiguous_items(self, abc_selection, station_id_break):
        abc_selection.breaks = [station_id_break]
        items = assemble(abc_selection).items
        for previous, current in zip(items, items[1:]):
            assert previous.end_time == current.start_time


def test_to_dict_wire_shape(abc_selection, station_id_break):
    abc_selection.breaks = [station_id_break]
    data = assemble(abc_selection).to_dict()

    assert data["totalDuration"] == "11:45"
    assert data["items"][2] == {
        "id": "break_2",
        "title": "Station ID",
        "artist": "",
        "duration": "2:00",
        "durationSeconds": 120,
        "startTime": "5:30",
        "endTime": "7:30",
        "type": "break",
        "notes": "Top of segment ID",
    }
    assert data["breaks"] == [
        {"afterTrack": 2, "duration": "2:00", "type": "Station ID", "notes": "Top of segment ID"}
    ]


def test_total_is_sum_of_item_durations(abc_selection, station_id_break):
    abc_selection.breaks = [station_id_break, ModelBreakSpec(after_track=1, duration_raw=45)]
    schedule = assemble(abc_selection)

    assert len(schedule.items) == 5
    assert schedule.items[0].start_time == "0:00"
    assert schedule.total_duration_seconds == sum(item.duration_seconds for item in schedule.items)
