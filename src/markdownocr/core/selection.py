# -*- coding: utf-8 -*-
"""
src/markdownocr/core/selection.py

The interactive region-selection state machine.

Pointer events coming from the capture overlay are turned into plain event
objects and fed to `transition`, which returns the next `SelectionState` and
the side effects the overlay has to perform (repaint, commit, cancel). Keeping
this free of Qt makes every transition testable without a display.

    IDLE --primary down--> SELECTING --move--> SELECTING
    SELECTING --primary up--> COMMITTED   (width and height > minimum)
    SELECTING --primary up--> CANCELLED   (otherwise)
    IDLE/SELECTING --secondary down or cancel key--> CANCELLED

COMMITTED and CANCELLED are terminal.
"""

import enum
import logging
from dataclasses import dataclass, field, replace
from typing import Optional, Tuple, Union

from ..config import DEFAULT_MIN_SELECTION_SIZE
from ..errors import SelectionCancelled
from .geometry import Point, Rect

logger = logging.getLogger(__name__)


class Phase(enum.Enum):
    IDLE = "idle"
    SELECTING = "selecting"
    COMMITTED = "committed"
    CANCELLED = "cancelled"


class Button(enum.Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"
    OTHER = "other"


class Effect(enum.Enum):
    REDRAW = "redraw"
    COMMIT = "commit"
    CANCEL = "cancel"


@dataclass(frozen=True)
class PointerDown:
    point: Point
    button: Button = Button.PRIMARY


@dataclass(frozen=True)
class PointerMove:
    point: Point


@dataclass(frozen=True)
class PointerUp:
    point: Point
    button: Button = Button.PRIMARY


@dataclass(frozen=True)
class CancelKey:
    pass


Event = Union[PointerDown, PointerMove, PointerUp, CancelKey]
Effects = Tuple[Effect, ...]

_EMPTY_RECT = Rect(0, 0, 0, 0)
_ORIGIN = Point(0, 0)


@dataclass(frozen=True)
class SelectionState:
    phase: Phase = Phase.IDLE
    anchor: Point = _ORIGIN
    current: Point = _ORIGIN
    rect: Rect = field(default=_EMPTY_RECT)

    @property
    def is_terminal(self) -> bool:
        return self.phase in (Phase.COMMITTED, Phase.CANCELLED)

    @property
    def has_rect(self) -> bool:
        """The derived rectangle is only meaningful while selecting or once committed."""
        return self.phase in (Phase.SELECTING, Phase.COMMITTED)


def transition(
    state: SelectionState,
    event: Event,
    min_size: int = DEFAULT_MIN_SELECTION_SIZE,
) -> Tuple[SelectionState, Effects]:
    """
    Computes the next selection state for a single input event.

    Args:
        state (SelectionState): The current state.
        event (Event): The pointer or keyboard event to apply.
        min_size (int): Width and height must both exceed this value for the
                        selection to be committed.

    Returns:
        A tuple of the new state and the effects the caller should perform.
        Events that have no meaning in the current phase return the state
        unchanged with no effects.
    """
    if state.is_terminal:
        return state, ()

    if isinstance(event, CancelKey) or (
        isinstance(event, PointerDown) and event.button is Button.SECONDARY
    ):
        return replace(state, phase=Phase.CANCELLED, rect=_EMPTY_RECT), (Effect.CANCEL,)

    if state.phase is Phase.IDLE:
        if isinstance(event, PointerDown) and event.button is Button.PRIMARY:
            new_state = SelectionState(
                phase=Phase.SELECTING,
                anchor=event.point,
                current=event.point,
                rect=_EMPTY_RECT,
            )
            return new_state, (Effect.REDRAW,)
        return state, ()

    # Phase.SELECTING
    if isinstance(event, PointerMove):
        new_state = replace(
            state,
            current=event.point,
            rect=Rect.from_points(state.anchor, event.point),
        )
        return new_state, (Effect.REDRAW,)

    if isinstance(event, PointerUp) and event.button is Button.PRIMARY:
        rect = Rect.from_points(state.anchor, event.point)
        if rect.exceeds(min_size):
            return replace(state, phase=Phase.COMMITTED, current=event.point, rect=rect), (Effect.COMMIT,)
        logger.info(f"Selection {rect.width}x{rect.height} is too small, cancelling.")
        return replace(state, phase=Phase.CANCELLED, current=event.point, rect=_EMPTY_RECT), (Effect.CANCEL,)

    return state, ()


class RegionSelector:
    """
    Holds the single selection of a process run and applies events to it.

    The overlay widget owns one instance and forwards every mouse and key
    event through `handle`.
    """

    def __init__(self, min_size: int = DEFAULT_MIN_SELECTION_SIZE):
        self.min_size = min_size
        self.state = SelectionState()

    def handle(self, event: Event) -> Effects:
        self.state, effects = transition(self.state, event, self.min_size)
        if Effect.COMMIT in effects:
            logger.info(f"Selection committed: {self.state.rect}")
        elif Effect.CANCEL in effects:
            logger.info("Selection cancelled.")
        return effects

    @property
    def phase(self) -> Phase:
        return self.state.phase

    @property
    def rect(self) -> Optional[Rect]:
        """The derived rectangle, or None when the phase does not have one."""
        return self.state.rect if self.state.has_rect else None

    @property
    def is_finished(self) -> bool:
        return self.state.is_terminal

    def result(self) -> Rect:
        """
        Returns the committed rectangle.

        Raises:
            SelectionCancelled: If the selection ended in the cancelled phase.
            RuntimeError: If the selection has not finished yet.
        """
        if self.state.phase is Phase.COMMITTED:
            return self.state.rect
        if self.state.phase is Phase.CANCELLED:
            raise SelectionCancelled()
        raise RuntimeError(f"Selection is still in progress (phase: {self.state.phase.value})")
