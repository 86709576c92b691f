"""
AirDraw UI Module

PyQt5 drawing canvas and gesture menu.
"""
from .canvas_window import CanvasWindow, DrawingCanvas
from .toolbar import Toolbar

__all__ = [
    'CanvasWindow',
    'DrawingCanvas',
    'Toolbar',
]
