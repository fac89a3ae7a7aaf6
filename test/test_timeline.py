"""
Tests for the timeline: record/image pairing, cursor wraparound, branching.
"""

from pathlib import Path

import pytest

from astro.orientation import Orientation
from session.errors import EmptyTimeline
from session.frame_generator import FrameRecord
from session.timeline import Timeline, TimelineEntry

from conftest import FakeLoader


def make_record(index):
    return FrameRecord(
        frame_index=index,
        orientation=Orientation(0, float(index), 0),
        attitude=None,
        stars=(),
        correspondences=(),
        image_path=Path(f"frame_{index:04d}.png"),
    )


def make_timeline(n):
    return Timeline(TimelineEntry(make_record(i), f"img{i}") for i in range(n))


class TestLoad:

    def test_load_pairs_records_and_images(self):
        timeline = Timeline.load([make_record(i) for i in range(3)], FakeLoader())
        assert len(timeline) == 3
        assert len(timeline.records) == len(timeline.images)
        assert timeline.images[1] == "image:frame_0001.png"
        assert timeline.cursor == 0

    def test_failed_image_drops_record(self):
        loader = FakeLoader(broken={"frame_0001.png"})
        timeline = Timeline.load([make_record(i) for i in range(4)], loader)

        assert [r.frame_index for r in timeline.records] == [0, 2, 3]
        assert timeline.images == ("image:frame_0000.png", "image:frame_0002.png", "image:frame_0003.png")


class TestMove:

    def test_forward_wraps(self):
        t = make_timeline(3)
        assert [t.move(+1) for _ in range(3)] == [1, 2, 0]

    def test_backward_wraps(self):
        t = make_timeline(3)
        assert t.move(-1) == 2

    def test_single_frame_stays(self):
        t = make_timeline(1)
        assert t.move(+1) == 0
        assert t.move(-1) == 0

    def test_empty_raises(self):
        with pytest.raises(EmptyTimeline):
            Timeline().move(+1)
        assert Timeline().current is None


class TestBranch:

    def test_branch_at_end_appends(self):
        t = make_timeline(3)
        t.move(-1)
        dropped = t.branch(TimelineEntry(make_record(9), "new"))

        assert dropped == 0
        assert len(t) == 4
        assert t.cursor == 3
        assert t.current.image == "new"

    def test_branch_truncates_after_cursor(self):
        t = make_timeline(5)
        t.move(+1)
        dropped = t.branch(TimelineEntry(make_record(9), "new"))

        assert dropped == 3
        assert [r.frame_index for r in t.records] == [0, 1, 9]
        assert t.images == ("img0", "img1", "new")
        assert t.cursor == 2

    def test_branch_on_empty(self):
        t = Timeline()
        t.branch(TimelineEntry(make_record(0), "new"))
        assert len(t) == 1
        assert t.cursor == 0
