"""
Unit tests for the region-selection state machine
"""

import pytest

from src.markdownocr.core.geometry import Point, Rect
from src.markdownocr.core.selection import (
    Button,
    CancelKey,
    Effect,
    Phase,
    PointerDown,
    PointerMove,
    PointerUp,
    RegionSelector,
    SelectionState,
    transition,
)
from src.markdownocr.errors import SelectionCancelled


def drag(selector, start, end):
    """Press at `start`, move to `end`, release at `end`."""
    selector.handle(PointerDown(Point(*start)))
    selector.handle(PointerMove(Point(*end)))
    return selector.handle(PointerUp(Point(*end)))


class TestNormalization:
    """The derived rectangle does not depend on drag direction"""

    @pytest.mark.parametrize("start, end", [
        ((100, 100), (300, 160)),  # down-right
        ((300, 100), (100, 160)),  # down-left
        ((100, 160), (300, 100)),  # up-right
        ((300, 160), (100, 100)),  # up-left
    ])
    def test_all_drag_directions_give_same_rect(self, start, end):
        selector = RegionSelector()
        selector.handle(PointerDown(Point(*start)))
        selector.handle(PointerMove(Point(*end)))
        assert selector.rect == Rect(100, 100, 200, 60)

    def test_rect_from_points_is_symmetric(self):
        a, b = Point(17, 250), Point(3, 9)
        assert Rect.from_points(a, b) == Rect.from_points(b, a) == Rect(3, 9, 14, 241)

    def test_rect_tracks_every_move(self):
        selector = RegionSelector()
        selector.handle(PointerDown(Point(50, 50)))
        selector.handle(PointerMove(Point(80, 90)))
        assert selector.rect == Rect(50, 50, 30, 40)
        selector.handle(PointerMove(Point(20, 10)))
        assert selector.rect == Rect(20, 10, 30, 40)


class TestCommitThreshold:
    """Both sides must be strictly larger than the minimum size"""

    def test_six_by_six_commits(self):
        selector = RegionSelector(min_size=5)
        effects = drag(selector, (10, 10), (16, 16))
        assert effects == (Effect.COMMIT,)
        assert selector.phase is Phase.COMMITTED
        assert selector.result() == Rect(10, 10, 6, 6)

    @pytest.mark.parametrize("end", [(14, 100), (100, 14), (15, 100), (100, 15)])
    def test_four_or_five_cancels(self, end):
        selector = RegionSelector(min_size=5)
        effects = drag(selector, (10, 10), end)
        assert effects == (Effect.CANCEL,)
        assert selector.phase is Phase.CANCELLED
        assert selector.rect is None

    def test_click_without_drag_cancels(self):
        selector = RegionSelector()
        selector.handle(PointerDown(Point(40, 40)))
        selector.handle(PointerUp(Point(40, 40)))
        assert selector.phase is Phase.CANCELLED

    def test_release_position_is_used(self):
        selector = RegionSelector()
        selector.handle(PointerDown(Point(0, 0)))
        selector.handle(PointerMove(Point(3, 3)))
        selector.handle(PointerUp(Point(50, 40)))
        assert selector.result() == Rect(0, 0, 50, 40)


class TestCancellation:
    """Secondary button and cancel key abort before commit"""

    def test_secondary_button_while_selecting(self):
        selector = RegionSelector()
        selector.handle(PointerDown(Point(10, 10)))
        selector.handle(PointerMove(Point(200, 200)))
        effects = selector.handle(PointerDown(Point(200, 200), Button.SECONDARY))
        assert effects == (Effect.CANCEL,)
        assert selector.phase is Phase.CANCELLED
        with pytest.raises(SelectionCancelled):
            selector.result()

    def test_secondary_button_while_idle(self):
        selector = RegionSelector()
        selector.handle(PointerDown(Point(10, 10), Button.SECONDARY))
        assert selector.phase is Phase.CANCELLED

    @pytest.mark.parametrize("prepare", [False, True])
    def test_cancel_key(self, prepare):
        selector = RegionSelector()
        if prepare:
            selector.handle(PointerDown(Point(10, 10)))
        assert selector.handle(CancelKey()) == (Effect.CANCEL,)
        assert selector.phase is Phase.CANCELLED


class TestTransitions:
    """Edge cases of the transition function"""

    def test_press_starts_selecting_with_empty_rect(self):
        state, effects = transition(SelectionState(), PointerDown(Point(5, 7)))
        assert state.phase is Phase.SELECTING
        assert state.anchor == state.current == Point(5, 7)
        assert state.rect.is_empty()
        assert effects == (Effect.REDRAW,)

    def test_move_emits_redraw(self):
        state, _ = transition(SelectionState(), PointerDown(Point(5, 7)))
        _, effects = transition(state, PointerMove(Point(9, 9)))
        assert effects == (Effect.REDRAW,)

    @pytest.mark.parametrize("event", [
        PointerMove(Point(1, 1)),
        PointerUp(Point(1, 1)),
        PointerDown(Point(1, 1), Button.OTHER),
    ])
    def test_idle_ignores_unrelated_events(self, event):
        state = SelectionState()
        assert transition(state, event) == (state, ())

    def test_second_primary_press_is_ignored(self):
        state, _ = transition(SelectionState(), PointerDown(Point(5, 5)))
        assert transition(state, PointerDown(Point(50, 50))) == (state, ())

    @pytest.mark.parametrize("event", [
        PointerDown(Point(1, 1)),
        PointerDown(Point(1, 1), Button.SECONDARY),
        PointerMove(Point(500, 500)),
        PointerUp(Point(500, 500)),
        CancelKey(),
    ])
    def test_terminal_phases_ignore_everything(self, event):
        committed = RegionSelector()
        drag(committed, (0, 0), (100, 100))
        cancelled = RegionSelector()
        cancelled.handle(CancelKey())

        for selector in (committed, cancelled):
            before = selector.state
            assert selector.handle(event) == ()
            assert selector.state == before

    def test_result_while_in_progress_raises(self):
        selector = RegionSelector()
        with pytest.raises(RuntimeError):
            selector.result()
        selector.handle(PointerDown(Point(0, 0)))
        with pytest.raises(RuntimeError):
            selector.result()

    def test_rect_only_defined_while_selecting_or_committed(self):
        selector = RegionSelector()
        assert selector.rect is None
        selector.handle(PointerDown(Point(0, 0)))
        assert selector.rect is not None
