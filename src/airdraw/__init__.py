"""
AirDraw Core

Gesture interpretation and interaction state machine for hand-drawn input.
No camera, model or UI dependencies.
"""
from .config import Config, load_config
from .geometry import Point
from .menu import ELEMENT_IDS, Rect
from .scheduler import InferenceGate, LandmarkMailbox, TickClock
from .state_machine import (
    EventType,
    FrameInput,
    InteractionEvent,
    InteractionState,
    Mode,
    RenderState,
    update,
)
from .strokes import DrawingPath, ToolSettings, ToolType

__all__ = [
    'Config',
    'load_config',
    'Point',
    'ELEMENT_IDS',
    'Rect',
    'InferenceGate',
    'LandmarkMailbox',
    'TickClock',
    'EventType',
    'FrameInput',
    'InteractionEvent',
    'InteractionState',
    'Mode',
    'RenderState',
    'update',
    'DrawingPath',
    'ToolSettings',
    'ToolType',
]
