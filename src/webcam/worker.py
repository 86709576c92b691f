"""
Background worker for the interaction loop.
Runs in a separate QThread so drawing never blocks the UI.
"""
import threading
import time
from typing import Dict, Tuple
from PyQt5.QtCore import QObject, pyqtSignal

from airdraw.menu import Rect
from airdraw.scheduler import InferenceGate, LandmarkMailbox, TickClock
from airdraw.state_machine import EventType, FrameInput, InteractionState, update
from .hand_tracker import HandTracker

EVENT_MESSAGES = {
    EventType.MENU_OPENED: "Menu opened",
    EventType.MENU_CLOSED: "Menu closed",
    EventType.CLEARED: "Canvas cleared",
}


class WebcamWorker(QObject):
    """
    Owns the interaction state and runs the 30Hz tick loop.
    Landmark detection runs on its own thread and never stalls a tick.
    """
    # Signals
    state_ready = pyqtSignal(object)  # Emits RenderState
    frame_ready = pyqtSignal(object)  # Emits numpy array (BGR camera frame)
    error = pyqtSignal(str)
    finished = pyqtSignal()

    def __init__(self, config, parent=None):
        super().__init__(parent)
        self._config = config
        self._stop_requested = threading.Event()
        self._mailbox = LandmarkMailbox()

        # Viewport and menu rects published by the UI thread
        self._layout_lock = threading.Lock()
        self._viewport: Tuple[float, float] = (float(config.camera.width), float(config.camera.height))
        self._element_rects: Dict[str, Rect] = {}

    def set_layout(self, width: float, height: float, rects: dict) -> None:
        """Publish canvas size and menu element rectangles (called from the UI thread)."""
        with self._layout_lock:
            self._viewport = (float(width), float(height))
            self._element_rects = dict(rects)

    def _layout(self):
        with self._layout_lock:
            return self._viewport, self._element_rects

    def start_process(self):
        """Main processing loop. Runs in worker thread."""
        # stop_process() may land before the thread's started signal
        if self._stop_requested.is_set():
            self.finished.emit()
            return

        try:
            with HandTracker(self._config) as tracker, \
                    InferenceGate(tracker.get_landmarks, self._mailbox) as gate:
                self._run_loop(tracker, gate)
        except RuntimeError as e:
            self.error.emit(str(e))
        except Exception as e:
            self.error.emit(f"Worker Exception: {str(e)}")
        finally:
            self._mailbox.clear()
            self.finished.emit()

    def _run_loop(self, tracker: HandTracker, gate: InferenceGate):
        clock = TickClock()
        state = InteractionState()
        show_camera = self._config.ui.show_camera
        debug_overlay = self._config.ui.debug_overlay

        while not self._stop_requested.is_set():
            now_ms = time.perf_counter() * 1000.0
            if not clock.ready(now_ms):
                self._stop_requested.wait(clock.time_until_next(now_ms) / 1000.0)
                continue

            # 1. Ask for a new detection (skipped while one is in flight)
            gate.submit()

            # 2. Feed the latest detection into the state machine
            hand = self._mailbox.read()
            (width, height), rects = self._layout()
            frame = FrameInput(
                landmarks=hand.landmarks if hand is not None else None,
                width=width,
                height=height,
                now_ms=now_ms,
                dt_ms=clock.elapsed_ms,
                element_rects=rects,
            )
            update(state, frame)
            self._report_events(state)

            # 3. Publish
            self.state_ready.emit(state.snapshot())

            if show_camera:
                if debug_overlay:
                    image = tracker.get_debug_frame(hand)
                else:
                    image = tracker.get_frame()
                if image is not None:
                    self.frame_ready.emit(image)

    def _report_events(self, state: InteractionState):
        for event in state.events:
            if event.type == EventType.SELECTED:
                print(f"Action: Selected {event.element_id}")
            elif event.type in EVENT_MESSAGES:
                print(f"Action: {EVENT_MESSAGES[event.type]}")

    def stop_process(self):
        """Signal the loop to stop; resources are released in the worker thread."""
        self._stop_requested.set()
