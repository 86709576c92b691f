"""
Camera capture and hand landmark detection (MediaPipe Tasks API).

Frames are mirrored before detection so landmark x matches the
selfie view shown on the canvas.
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, List, Sequence, Tuple
import threading
import time
import cv2
import numpy as np
import mediapipe as mp

from airdraw.config import Config

BaseOptions = mp.tasks.BaseOptions
HandLandmarker = mp.tasks.vision.HandLandmarker
HandLandmarkerOptions = mp.tasks.vision.HandLandmarkerOptions
VisionRunningMode = mp.tasks.vision.RunningMode

MODEL_URL = "https://storage.googleapis.com/mediapipe-models/hand_landmarker/hand_landmarker/float16/1/hand_landmarker.task"
DEFAULT_MODEL_PATH = Path(__file__).parent.parent.parent / "models" / "hand_landmarker.task"

# Wrist-to-tip chains per finger, plus the knuckle line across the palm
FINGER_CHAINS = [
    (0, 1, 2, 3, 4),
    (0, 5, 6, 7, 8),
    (0, 9, 10, 11, 12),
    (0, 13, 14, 15, 16),
    (0, 17, 18, 19, 20),
    (5, 9, 13, 17),
]
SKELETON_COLOR = (0, 255, 0)
LABEL_COLOR = (255, 255, 255)


@dataclass
class TrackedHand:
    """
    First detected hand of a frame.

    Attributes:
        landmarks: 21 (x, y, z) tuples, x/y normalized to the mirrored frame
        handedness: 'Left' or 'Right' as reported by MediaPipe
        score: Handedness confidence 0-1
    """
    landmarks: List[Tuple[float, float, float]]
    handedness: str
    score: float


def hand_label(hand: TrackedHand) -> str:
    return f"{hand.handedness} {hand.score:.2f}"


def draw_skeleton(frame: np.ndarray, landmarks: Sequence[Tuple[float, float, float]]) -> None:
    """Draw joints and bones onto a BGR frame in place."""
    h, w = frame.shape[:2]
    pixels = [(int(x * w), int(y * h)) for x, y, _ in landmarks]
    for chain in FINGER_CHAINS:
        for a, b in zip(chain, chain[1:]):
            cv2.line(frame, pixels[a], pixels[b], SKELETON_COLOR, 2)
    for px in pixels:
        cv2.circle(frame, px, 4, SKELETON_COLOR, -1)


class HandTracker:
    """
    Owns the camera and the hand landmarker (VIDEO mode).

    get_landmarks() runs on the inference thread while the tick thread
    reads the last frame, so the frame slot is lock-protected.

        with HandTracker(config) as tracker:
            hand = tracker.get_landmarks()
    """

    def __init__(self, config: Config, model_path: Optional[Path] = None):
        """
        Args:
            config: AirDraw configuration (camera and mediapipe sections)
            model_path: Override for the hand_landmarker.task file
        """
        self._camera = config.camera
        self._detection = config.mediapipe
        if model_path is None and self._detection.model_path:
            model_path = self._detection.model_path
        self._model_path = Path(model_path) if model_path else DEFAULT_MODEL_PATH

        self._cap: Optional[cv2.VideoCapture] = None
        self._landmarker: Optional[HandLandmarker] = None

        self._frame_lock = threading.Lock()
        self._last_frame: Optional[np.ndarray] = None
        self._frame_count = 0
        self._clock_origin = 0.0
        self._last_timestamp_ms = -1

    @property
    def is_running(self) -> bool:
        return self._cap is not None and self._landmarker is not None

    @property
    def frame_count(self) -> int:
        return self._frame_count

    def start(self) -> bool:
        """
        Open the camera and load the model.

        Returns:
            True on success. On failure the cause is printed and nothing stays open.
        """
        if self.is_running:
            return True

        if not self._model_path.exists():
            print(f"ERROR: Model file not found: {self._model_path}")
            print(f"Download from: {MODEL_URL}")
            return False

        self._cap = self._open_camera()
        if self._cap is None:
            return False

        self._landmarker = self._create_landmarker()
        if self._landmarker is None:
            self._cap.release()
            self._cap = None
            return False

        self._clock_origin = time.perf_counter()
        self._last_timestamp_ms = -1
        return True

    def _open_camera(self) -> Optional[cv2.VideoCapture]:
        cam = self._camera
        cap = cv2.VideoCapture(cam.device_id)
        if not cap.isOpened():
            print(f"ERROR: Could not open camera {cam.device_id}")
            cap.release()
            return None

        cap.set(cv2.CAP_PROP_FRAME_WIDTH, cam.width)
        cap.set(cv2.CAP_PROP_FRAME_HEIGHT, cam.height)
        cap.set(cv2.CAP_PROP_FPS, cam.fps)
        return cap

    def _create_landmarker(self) -> Optional[HandLandmarker]:
        det = self._detection
        options = HandLandmarkerOptions(
            base_options=BaseOptions(model_asset_path=str(self._model_path)),
            running_mode=VisionRunningMode.VIDEO,
            num_hands=det.max_num_hands,
            min_hand_detection_confidence=det.min_detection_confidence,
            min_hand_presence_confidence=det.min_presence_confidence,
            min_tracking_confidence=det.min_tracking_confidence,
        )
        try:
            return HandLandmarker.create_from_options(options)
        except (RuntimeError, ValueError) as e:
            print(f"ERROR: Could not create hand landmarker: {e}")
            return None

    def stop(self) -> None:
        """Release the model and the camera."""
        landmarker, self._landmarker = self._landmarker, None
        if landmarker is not None:
            landmarker.close()

        cap, self._cap = self._cap, None
        if cap is not None:
            cap.release()

        with self._frame_lock:
            self._last_frame = None

    def __enter__(self) -> "HandTracker":
        if not self.start():
            raise RuntimeError("Could not start hand tracker (camera or model unavailable)")
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

    def _next_timestamp_ms(self) -> int:
        # VIDEO mode rejects timestamps that do not strictly increase
        ts = int((time.perf_counter() - self._clock_origin) * 1000)
        ts = max(ts, self._last_timestamp_ms + 1)
        self._last_timestamp_ms = ts
        return ts

    def get_landmarks(self) -> Optional[TrackedHand]:
        """
        Grab one frame and run detection on it.

        Returns:
            The first hand, or None if no frame or no hand.
        """
        cap, landmarker = self._cap, self._landmarker
        if cap is None or landmarker is None:
            return None

        ok, frame = cap.read()
        if not ok:
            return None
        self._frame_count += 1

        if self._camera.mirror:
            frame = cv2.flip(frame, 1)
        with self._frame_lock:
            self._last_frame = frame

        rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        image = mp.Image(image_format=mp.ImageFormat.SRGB, data=rgb)
        result = landmarker.detect_for_video(image, self._next_timestamp_ms())

        if not result.hand_landmarks:
            return None

        category = result.handedness[0][0]
        return TrackedHand(
            landmarks=[(lm.x, lm.y, lm.z) for lm in result.hand_landmarks[0]],
            handedness=category.category_name,
            score=category.score,
        )

    def get_frame(self) -> Optional[np.ndarray]:
        """Most recent (mirrored) BGR frame, shared with the capture thread."""
        with self._frame_lock:
            return self._last_frame

    def get_debug_frame(self, hand: Optional[TrackedHand] = None) -> Optional[np.ndarray]:
        """Copy of the most recent frame with the hand skeleton drawn on it."""
        frame = self.get_frame()
        if frame is None:
            return None
        frame = frame.copy()
        if hand is not None:
            draw_skeleton(frame, hand.landmarks)
            h, w = frame.shape[:2]
            wrist_x, wrist_y, _ = hand.landmarks[0]
            cv2.putText(
                frame, hand_label(hand), (int(wrist_x * w) + 10, int(wrist_y * h) + 20),
                cv2.FONT_HERSHEY_SIMPLEX, 0.5, LABEL_COLOR, 1,
            )
        return frame
