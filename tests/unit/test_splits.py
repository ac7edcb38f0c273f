"""Unit tests for split suggestions."""

from __future__ import annotations

from billverify.pipeline.splits import SPLIT_REASON, split_segments, suggest_split


class TestSplitSegments:
    def test_connectors(self):
        assert split_segments(
            "Draft motion to compel and review opposing counsel's production"
        ) == ["Draft motion to compel", "review opposing counsel's production"]

    def test_semicolons_and_phrases(self):
        assert split_segments(
            "Revise settlement agreement; call with client as well as follow up letter"
        ) == ["Revise settlement agreement", "call with client", "follow up letter"]

    def test_short_segments_dropped(self):
        assert split_segments("Draft brief and call") == ["Draft brief"]

    def test_connector_inside_word_ignored(self):
        assert split_segments("Research standing doctrine") == ["Research standing doctrine"]


class TestSuggestSplit:
    def test_even_split(self, make_entry):
        entry = make_entry(
            hours=3.0,
            description=(
                "Draft motion to compel; review production documents; "
                "call with client regarding status"
            ),
        )
        split = suggest_split(entry)

        assert split.reason == SPLIT_REASON
        assert [p.description for p in split.entries] == [
            "Draft motion to compel",
            "review production documents",
            "call with client regarding status",
        ]
        assert [p.hours for p in split.entries] == [1.0, 1.0, 1.0]

    def test_part_hours_rounded_to_tenth(self, make_entry):
        entry = make_entry(
            hours=2.0,
            description="Draft motion to compel; review production documents; call with client",
        )
        assert [p.hours for p in suggest_split(entry).entries] == [0.7, 0.7, 0.7]

    def test_short_entry_not_split(self, make_entry):
        entry = make_entry(
            hours=0.5, description="Draft motion to compel and review production documents"
        )
        assert suggest_split(entry) is None

    def test_one_hour_qualifies(self, make_entry):
        entry = make_entry(
            hours=1.0, description="Draft motion to compel and review production documents"
        )
        assert len(suggest_split(entry).entries) == 2

    def test_single_task_not_split(self, make_entry):
        assert suggest_split(make_entry(hours=4.0)) is None
