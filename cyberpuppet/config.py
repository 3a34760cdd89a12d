"""
Configuration management for the gesture puppet system.
"""
import math
import yaml
from pathlib import Path
from typing import Optional, Dict, Any
from dataclasses import dataclass, field, fields


@dataclass
class CameraConfig:
    """Camera configuration settings."""
    index: int = 0
    width: int = 640
    height: int = 480
    fps: int = 30


@dataclass
class MediaPipeConfig:
    """MediaPipe Hands configuration settings."""
    max_num_hands: int = 1
    model_complexity: int = 1
    min_detection_confidence: float = 0.8
    min_tracking_confidence: float = 0.8


@dataclass
class ClassifierConfig:
    """Geometric margins for the per-frame classifier (normalized units)."""
    extend_margin: float = 0.02  # tip above PIP joint
    dip_margin: float = 0.01  # tip above DIP joint
    curl_margin: float = 0.02  # tip below PIP joint
    thumb_fold_margin: float = 0.05  # tip may sit this far below the IP joint


@dataclass
class ConfirmationConfig:
    """Debounce settings: `threshold` identical labels out of the last `capacity`."""
    capacity: int = 5
    threshold: int = 3


@dataclass
class AnimationConfig:
    """Avatar motion constants. Rates are per second."""
    idle_amplitude: float = 0.1
    idle_frequency: float = 0.5
    jump_rate: float = 8.0
    jump_height: float = 2.0
    spin_duration: float = 0.6
    spin_rate: float = 20.0
    clap_rate: float = 15.0
    clap_amplitude: float = 0.6
    clap_offset: float = 0.4
    clap_lift: float = -0.3
    wave_rate: float = 12.0
    wave_amplitude: float = 0.7
    wave_offset: float = -0.6
    wave_lift: float = -0.5
    raise_angle: float = -math.pi / 2
    raise_spread: float = 0.2
    raise_rate: float = 15.0
    arm_return_rate: float = 12.0
    vertical_return_rate: float = 8.0
    travel_speed: float = 5.0
    travel_limit: float = 2.5
    depth_return_rate: float = 6.0
    depth_snap: float = 0.05
    snap_epsilon: float = 1e-3


@dataclass
class FeedbackConfig:
    """Spoken feedback settings."""
    sound_enabled: bool = True
    phrases: Dict[str, str] = field(default_factory=lambda: {
        "yay": "yay",
        "peace": "peace bro",
        "love": "i love you",
        "wave": "hi buddy",
        "rock": "yo yo",
        "thumbsup": "good job",
        "fist": "come on fight",
    })


@dataclass
class DisplayConfig:
    """Display configuration settings."""
    window_name: str = "Cyber Puppet"
    show_landmarks: bool = True
    show_cursor: bool = True
    show_avatar: bool = True


@dataclass
class Cfg:
    """Main configuration class."""
    camera: CameraConfig = field(default_factory=CameraConfig)
    mediapipe: MediaPipeConfig = field(default_factory=MediaPipeConfig)
    classifier: ClassifierConfig = field(default_factory=ClassifierConfig)
    confirmation: ConfirmationConfig = field(default_factory=ConfirmationConfig)
    animation: AnimationConfig = field(default_factory=AnimationConfig)
    feedback: FeedbackConfig = field(default_factory=FeedbackConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)


def load_config(path: Optional[str] = None) -> Cfg:
    """
    Load configuration from YAML file.

    Args:
        path: Path to config file. If None, uses config.default.yaml

    Returns:
        Configuration object with all settings
    """
    if path is None:
        # Use default config file in project root
        project_root = Path(__file__).parent.parent
        path = project_root / "config.default.yaml"

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r') as f:
        data = yaml.safe_load(f)

    return _dict_to_config(data or {})


def _section(cls, data: Optional[Dict[str, Any]]):
    """Build one config section, keeping defaults for keys the file omits."""
    data = data or {}
    known = {f.name for f in fields(cls)}
    unknown = set(data) - known
    if unknown:
        raise ValueError(f"Unknown {cls.__name__} keys: {sorted(unknown)}")
    return cls(**data)


def _dict_to_config(data: Dict[str, Any]) -> Cfg:
    """Convert dictionary to configuration object."""
    feedback_data = dict(data.get('feedback') or {})
    phrases = FeedbackConfig().phrases
    phrases.update(feedback_data.pop('phrases', None) or {})
    feedback = _section(FeedbackConfig, feedback_data)
    feedback.phrases = phrases

    return Cfg(
        camera=_section(CameraConfig, data.get('camera')),
        mediapipe=_section(MediaPipeConfig, data.get('mediapipe')),
        classifier=_section(ClassifierConfig, data.get('classifier')),
        confirmation=_section(ConfirmationConfig, data.get('confirmation')),
        animation=_section(AnimationConfig, data.get('animation')),
        feedback=feedback,
        display=_section(DisplayConfig, data.get('display')),
    )
