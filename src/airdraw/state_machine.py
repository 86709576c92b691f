"""
Interaction state machine.
Turns one landmark frame at a time into drawing, menu and clear actions.

Modes:
- IDLE: no hand, or hand outside the safe zone
- HOVER: hand present, not drawing, menu closed
- DRAWING: confirmed pinch, menu closed
- MENU: menu open
"""
from dataclasses import dataclass, field, replace
from enum import Enum, auto
from typing import List, Optional, Tuple
import math
import random

from .geometry import (
    INDEX_PIP, INDEX_TIP, LandmarkSet, Point,
    detect_open_palm, detect_victory, hand_size, is_finger_extended,
    is_in_safe_zone, pinch_midpoint, pinch_ratio,
)
from .menu import DwellSelector, ElementRects, apply_selection
from .particles import Particle, step_particles
from .position_filter import SpeedAdaptiveFilter
from .scheduler import FRAME_INTERVAL_MS
from .strokes import DrawingPath, StrokeAccumulator, ToolSettings

PINCH_START_RATIO = 0.09
PINCH_END_RATIO = 0.14      # Higher than start: hysteresis
PINCH_DEBOUNCE_FRAMES = 3
OPEN_PALM_FRAMES = 5
MENU_COOLDOWN_MS = 1000.0


class Mode(Enum):
    IDLE = auto()
    HOVER = auto()
    DRAWING = auto()
    MENU = auto()


class EventType(Enum):
    STROKE_STARTED = auto()
    STROKE_FINISHED = auto()
    MENU_OPENED = auto()
    MENU_CLOSED = auto()
    CLEARED = auto()
    SELECTED = auto()


@dataclass(frozen=True)
class InteractionEvent:
    type: EventType
    element_id: Optional[str] = None


@dataclass
class FrameInput:
    """Everything one tick feeds into the state machine."""
    landmarks: Optional[LandmarkSet]
    width: float
    height: float
    now_ms: float
    dt_ms: float = FRAME_INTERVAL_MS
    element_rects: ElementRects = field(default_factory=dict)


@dataclass(frozen=True)
class RenderState:
    """Read-only snapshot handed to the renderer."""
    mode: Mode
    paths: Tuple[DrawingPath, ...]
    current_stroke: Tuple[Point, ...]
    particles: Tuple[Particle, ...]
    cursor: Optional[Point]
    menu_open: bool
    tools: ToolSettings
    hovered_id: Optional[str]
    dwell_progress: float
    pinch_ratio: float
    events: Tuple[InteractionEvent, ...]


@dataclass
class InteractionState:
    """
    The single mutable record of the interaction.
    Owned and mutated only by update().
    """
    mode: Mode = Mode.IDLE
    pinch_in_frames: int = 0
    pinch_out_frames: int = 0
    open_palm_frames: int = 0
    menu_open: bool = False
    last_toggle_ms: Optional[float] = None
    pinch_ratio: float = math.inf
    tools: ToolSettings = field(default_factory=ToolSettings)
    strokes: StrokeAccumulator = field(default_factory=StrokeAccumulator)
    selector: DwellSelector = field(default_factory=DwellSelector)
    position_filter: SpeedAdaptiveFilter = field(default_factory=SpeedAdaptiveFilter)
    particles: List[Particle] = field(default_factory=list)
    events: List[InteractionEvent] = field(default_factory=list)
    rng: random.Random = field(default_factory=random.Random, repr=False)

    @property
    def cursor(self) -> Optional[Point]:
        """Smoothed cursor in pixels (None while tracking is lost)."""
        return self.position_filter.value

    def snapshot(self) -> RenderState:
        return RenderState(
            mode=self.mode,
            paths=self.strokes.paths,
            current_stroke=self.strokes.current,
            particles=tuple(replace(p) for p in self.particles),
            cursor=self.cursor,
            menu_open=self.menu_open,
            tools=replace(self.tools),
            hovered_id=self.selector.hovered_id,
            dwell_progress=self.selector.progress_fraction,
            pinch_ratio=self.pinch_ratio,
            events=tuple(self.events),
        )


def update(state: InteractionState, frame: FrameInput) -> InteractionState:
    """
    Advance the interaction by one frame.

    Order: particles -> detection -> safe zone -> smoothing -> global
    gestures -> mode logic.

    Args:
        state: Current state (mutated in place and returned)
        frame: Inputs for this tick

    Returns:
        The updated state
    """
    state.events = []

    if state.particles:
        state.particles = step_particles(state.particles, frame.height)

    # 1. Detection
    landmarks = frame.landmarks
    if landmarks is None:
        _lose_tracking(state)
        return state

    ratio = pinch_ratio(landmarks, hand_size(landmarks))
    state.pinch_ratio = ratio

    # Menu uses the index tip for direct pointing, drawing uses the pinch midpoint
    if state.menu_open:
        tip = landmarks[INDEX_TIP]
        raw = Point(tip[0], tip[1])
    else:
        raw = pinch_midpoint(landmarks)

    # 2. Safe zone
    if not is_in_safe_zone(raw):
        _lose_tracking(state)
        return state

    # 3. Smoothing (the only normalized -> pixel conversion)
    cursor = state.position_filter(Point(raw.x * frame.width, raw.y * frame.height))

    # 4. Global gestures
    if state.mode != Mode.DRAWING:
        if _cooldown_elapsed(state, frame.now_ms):
            if detect_open_palm(landmarks):
                state.open_palm_frames += 1
                if state.open_palm_frames > OPEN_PALM_FRAMES:
                    _toggle_menu(state, frame.now_ms)
            else:
                state.open_palm_frames = 0

        if not state.menu_open and detect_victory(landmarks):
            _dissolve(state)
            if state.mode == Mode.IDLE:
                state.mode = Mode.HOVER
            return state

    # 5. Mode logic
    if state.menu_open:
        state.mode = Mode.MENU
        # Only the index finger is checked; requiring curled fingers caused misses
        if is_finger_extended(landmarks, INDEX_TIP, INDEX_PIP):
            selected = state.selector.update(cursor, frame.element_rects, frame.dt_ms)
            if selected is not None and apply_selection(state.tools, selected):
                state.events.append(InteractionEvent(EventType.SELECTED, selected))
        else:
            state.selector.clear()
    elif state.mode == Mode.DRAWING:
        _continue_stroke(state, ratio, cursor)
    else:
        _await_pinch(state, ratio, cursor)

    return state


def _cooldown_elapsed(state: InteractionState, now_ms: float) -> bool:
    if state.last_toggle_ms is None:
        return True
    return now_ms - state.last_toggle_ms > MENU_COOLDOWN_MS


def _await_pinch(state: InteractionState, ratio: float, cursor: Point) -> None:
    """IDLE/HOVER: debounce pinch entry."""
    if ratio < PINCH_START_RATIO:
        state.pinch_in_frames += 1
        if state.pinch_in_frames > PINCH_DEBOUNCE_FRAMES:
            state.strokes.start_stroke(cursor)
            state.pinch_in_frames = 0
            state.pinch_out_frames = PINCH_DEBOUNCE_FRAMES
            state.mode = Mode.DRAWING
            state.events.append(InteractionEvent(EventType.STROKE_STARTED))
            return
    else:
        state.pinch_in_frames = 0
    state.mode = Mode.HOVER


def _continue_stroke(state: InteractionState, ratio: float, cursor: Point) -> None:
    """DRAWING: append while pinched, debounce the release."""
    if ratio > PINCH_END_RATIO:
        state.pinch_out_frames -= 1
        if state.pinch_out_frames < 0:
            _finish_stroke(state)
            state.pinch_out_frames = 0
            state.mode = Mode.HOVER
    else:
        state.pinch_out_frames = PINCH_DEBOUNCE_FRAMES
        state.strokes.add_point(cursor)


def _finish_stroke(state: InteractionState) -> None:
    if state.strokes.end_stroke(state.tools) is not None:
        state.events.append(InteractionEvent(EventType.STROKE_FINISHED))


def _lose_tracking(state: InteractionState) -> None:
    """No usable hand: close any stroke and drop to IDLE."""
    _finish_stroke(state)
    state.mode = Mode.IDLE
    state.position_filter.reset()
    state.pinch_in_frames = 0
    state.pinch_out_frames = 0
    state.open_palm_frames = 0
    state.selector.clear()


def _toggle_menu(state: InteractionState, now_ms: float) -> None:
    state.menu_open = not state.menu_open
    state.last_toggle_ms = now_ms
    state.open_palm_frames = 0
    state.pinch_in_frames = 0
    state.selector.clear()
    _finish_stroke(state)

    if state.menu_open:
        state.mode = Mode.MENU
        state.events.append(InteractionEvent(EventType.MENU_OPENED))
    else:
        state.mode = Mode.HOVER
        state.events.append(InteractionEvent(EventType.MENU_CLOSED))


def _dissolve(state: InteractionState) -> None:
    particles = state.strokes.dissolve(state.rng)
    if particles:
        state.particles.extend(particles)
        state.events.append(InteractionEvent(EventType.CLEARED))
