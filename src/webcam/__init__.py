"""
AirDraw Webcam Module

Camera capture, MediaPipe hand tracking and the interaction worker.
"""
from .hand_tracker import HandTracker, TrackedHand
from .worker import WebcamWorker

__all__ = [
    'HandTracker',
    'TrackedHand',
    'WebcamWorker',
]
