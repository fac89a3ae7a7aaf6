"""
Tests for the interactive session state machine.

Covers navigation wraparound, append-or-truncate on extend, failed extends
leaving the session untouched and the HUD / star index refresh.
"""

import numpy as np
import pytest

from astro.orientation import Orientation, OrientationRange
from session.commands import (
    NAVIGATE_NEXT,
    NAVIGATE_PREV,
    adjust_dec,
    adjust_ra,
    adjust_roll,
    command_for_key,
    CommandKind,
)
from session.debug_session import DebugSession, SessionState, attitude_text
from session.star_index import UNMATCHED

from conftest import FakeEngine, FakeLoader


RANGE = OrientationRange(ra_min=0, ra_max=40)


def start(make_builder, engine=None, loader=None, frames=5):
    engine = engine or FakeEngine()
    loader = loader or FakeLoader()
    return DebugSession.start(make_builder(engine), RANGE, frames, loader)


def assert_aligned(session):
    t = session.timeline
    assert len(t.records) == len(t.images)
    if len(t):
        assert 0 <= t.cursor < len(t)


class TestStart:

    def test_start_state(self, make_builder):
        s = start(make_builder)

        assert len(s.timeline) == 5
        assert s.timeline.cursor == 0
        assert s.state is SessionState.IDLE
        assert s.target == Orientation(roll=0, ra=40, dec=0)
        assert s.frame_count == 5
        assert_aligned(s)

    def test_broken_image_dropped(self, make_builder):
        s = start(make_builder, loader=FakeLoader(broken={"frame_0003.png"}))
        assert [r.frame_index for r in s.timeline.records] == [0, 1, 2, 4]
        assert_aligned(s)

    def test_hud_and_index_ready(self, make_builder):
        s = start(make_builder)
        assert s.hud_text == "RA: 0.000000 DE: 0.000000 Roll: 0.000000"
        assert list(s.star_index) == [10, UNMATCHED, 12]


class TestNavigate:

    def test_next_wraps_to_first(self, make_builder):
        s = start(make_builder)
        for _ in range(4):
            s.dispatch(NAVIGATE_NEXT)
        assert s.timeline.cursor == 4
        s.dispatch(NAVIGATE_NEXT)
        assert s.timeline.cursor == 0

    def test_prev_wraps_to_last(self, make_builder):
        s = start(make_builder)
        s.dispatch(NAVIGATE_PREV)
        assert s.timeline.cursor == 4
        assert s.hud_text.startswith("RA: 40.000000")

    def test_single_frame_no_op(self, make_builder):
        s = start(make_builder, frames=1)
        assert s.dispatch(NAVIGATE_NEXT) is False
        assert s.dispatch(NAVIGATE_PREV) is False
        assert s.timeline.cursor == 0


class TestExtend:

    def test_extend_at_end_appends(self, make_builder):
        s = start(make_builder)
        s.dispatch(NAVIGATE_PREV)

        assert s.dispatch(adjust_ra(+2)) is True

        assert len(s.timeline) == 6
        assert s.timeline.cursor == 5
        assert s.current_record.orientation == Orientation(roll=0, ra=42, dec=0)
        assert s.frame_count == 6
        assert_aligned(s)

    def test_extend_truncates_future(self, make_builder):
        """Length 3, cursor 0, extend: frames 1 and 2 dropped, new one appended."""
        s = start(make_builder, frames=3)

        assert s.dispatch(adjust_dec(-2)) is True

        assert len(s.timeline) == 2
        assert s.timeline.cursor == 1
        assert s.timeline.records[0].frame_index == 0
        assert s.frame_count == 2
        assert_aligned(s)

    @pytest.mark.parametrize("cursor", [0, 1, 2, 3])
    def test_truncate_length_is_cursor_plus_two(self, make_builder, cursor):
        s = start(make_builder)
        for _ in range(cursor):
            s.dispatch(NAVIGATE_NEXT)

        s.dispatch(adjust_roll(+5))

        assert len(s.timeline) == cursor + 2
        assert s.timeline.cursor == cursor + 1

    def test_new_frame_index_follows_kept_frames(self, make_builder):
        s = start(make_builder)
        s.dispatch(NAVIGATE_NEXT)
        s.dispatch(adjust_ra(+2))
        assert s.current_record.frame_index == 2
        assert s.current_record.image_path.name == "frame_0002.png"

    def test_target_accumulates(self, make_builder):
        s = start(make_builder)
        s.dispatch(adjust_ra(+2))
        s.dispatch(adjust_ra(+2))
        s.dispatch(adjust_roll(-5))
        s.dispatch(adjust_dec(+2))

        assert s.target.ra == pytest.approx(44)
        assert s.target.roll == pytest.approx(355)
        assert s.target.dec == pytest.approx(2)
        assert s.current_record.orientation == s.target

    def test_pipeline_failure_changes_nothing(self, make_builder):
        # calls 0..4 are the sweep, call 5 is the extend
        s = start(make_builder, engine=FakeEngine(empty_on_calls={5}))
        s.dispatch(NAVIGATE_NEXT)
        before = (s.timeline.records, s.timeline.images, s.timeline.cursor, s.target, s.frame_count, s.hud_text)

        assert s.dispatch(adjust_ra(+2)) is False

        after = (s.timeline.records, s.timeline.images, s.timeline.cursor, s.target, s.frame_count, s.hud_text)
        assert after == before
        assert s.state is SessionState.IDLE

    def test_write_failure_changes_nothing(self, make_builder):
        s = start(make_builder, engine=FakeEngine(unwritable_on_calls={5}))
        before = (s.timeline.records, s.timeline.cursor, s.target, s.frame_count, s.hud_text)

        assert s.dispatch(adjust_dec(-2)) is False

        assert (s.timeline.records, s.timeline.cursor, s.target, s.frame_count, s.hud_text) == before
        assert s.state is SessionState.IDLE

    def test_image_failure_changes_nothing(self, make_builder):
        loader = FakeLoader()
        s = start(make_builder, loader=loader)
        s.dispatch(NAVIGATE_PREV)
        loader.broken.add("frame_0005.png")

        assert s.dispatch(adjust_ra(+2)) is False
        assert len(s.timeline) == 5
        assert s.timeline.cursor == 4
        assert s.target == Orientation(roll=0, ra=40, dec=0)
        assert_aligned(s)

    def test_index_cache_follows_new_frame(self, make_builder):
        s = start(make_builder)
        s.star_index = np.empty(0, dtype=int)
        s.dispatch(adjust_ra(+2))
        assert list(s.star_index) == [10, UNMATCHED, 12]


class TestCommands:

    def test_key_bindings(self):
        assert command_for_key("Right") == NAVIGATE_NEXT
        assert command_for_key("Left") == NAVIGATE_PREV
        assert command_for_key("A") == adjust_ra(+2)
        assert command_for_key("D") == adjust_ra(-2)
        assert command_for_key("W") == adjust_dec(-2)
        assert command_for_key("S") == adjust_dec(+2)
        assert command_for_key("Q") == adjust_roll(-5)
        assert command_for_key("E") == adjust_roll(+5)
        assert command_for_key("X") is None

    def test_navigation_flag(self):
        assert NAVIGATE_NEXT.is_navigation
        assert not adjust_roll(5).is_navigation
        assert adjust_roll(5).kind is CommandKind.ADJUST_ROLL


def test_attitude_text_unknown():
    assert attitude_text(None) == "Attitude is UNKNOWN"
