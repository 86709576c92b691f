"""
AirDraw settings, read from config.yaml.

Only the application shell is configurable (camera, detector, window).
Gesture thresholds are constants in the interaction core.
"""
from dataclasses import MISSING, dataclass, field, fields, is_dataclass
from pathlib import Path
from typing import Optional, Union
import yaml

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[2] / "config.yaml"


@dataclass
class CameraConfig:
    device_id: int = 0
    width: int = 640
    height: int = 480
    fps: int = 30
    mirror: bool = True            # Selfie view: flip frames horizontally


@dataclass
class MediaPipeConfig:
    model_path: Optional[str] = None   # None: models/hand_landmarker.task
    max_num_hands: int = 1
    min_detection_confidence: float = 0.75   # Strict to reduce ghost hands
    min_presence_confidence: float = 0.75
    min_tracking_confidence: float = 0.75


@dataclass
class UIConfig:
    fullscreen: bool = True
    show_camera: bool = True
    debug_overlay: bool = False


@dataclass
class Config:
    camera: CameraConfig = field(default_factory=CameraConfig)
    mediapipe: MediaPipeConfig = field(default_factory=MediaPipeConfig)
    ui: UIConfig = field(default_factory=UIConfig)


def _build(cls, data: Optional[dict], where: str):
    """Instantiate a (nested) config dataclass from a YAML mapping, skipping unknown keys."""
    if data is None:
        data = {}
    elif not isinstance(data, dict):
        print(f"Config: ignoring {where.rstrip('.') or 'file'} (expected a mapping, got {type(data).__name__})")
        data = {}
    kwargs = {}
    for f in fields(cls):
        if f.name not in data:
            continue
        value = data[f.name]
        nested = f.default_factory
        if nested is not MISSING and is_dataclass(nested):
            value = _build(nested, value, f"{where}{f.name}.")
        kwargs[f.name] = value

    unknown = set(data) - set(kwargs)
    if unknown:
        print(f"Config: ignoring unknown keys {', '.join(where + k for k in sorted(unknown))}")
    return cls(**kwargs)


def load_config(config_path: Optional[Union[str, Path]] = None) -> Config:
    """
    Load settings from YAML.

    Args:
        config_path: File to read. Defaults to config.yaml in the project root.

    Returns:
        Config with defaults for anything the file leaves out
        (all defaults if the file does not exist).
    """
    path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
    if not path.exists():
        return Config()

    with open(path, 'r') as f:
        data = yaml.safe_load(f)

    return _build(Config, data, "")
