"""
Type definitions for the gesture puppet system.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, List, Optional, Protocol, Tuple, runtime_checkable

import numpy as np


NUM_LANDMARKS = 21


class GestureLabel(Enum):
    """Discrete gesture classification.

    NONE means "no confident gesture". It is also what the pipeline reports
    when no hand is visible.
    """

    LOVE = "love"
    YAY = "yay"
    PEACE = "peace"
    THUMBSUP = "thumbsup"
    FIST = "fist"
    WAVE = "wave"
    ROCK = "rock"
    NONE = "none"


# Status-line text for each confirmed gesture
DISPLAY_LABELS = {
    GestureLabel.YAY: "🎉 Yay",
    GestureLabel.PEACE: "✌️ Peace Bro",
    GestureLabel.LOVE: "❤️ I Love You",
    GestureLabel.WAVE: "👋 Hi Buddy",
    GestureLabel.ROCK: "🤘 Yo Yo",
    GestureLabel.THUMBSUP: "👍 Good Job",
    GestureLabel.FIST: "✊ Come On Fight",
}


class HandLandmarkIndex:
    """MediaPipe hand landmark indices.

    21 landmarks per hand as defined by MediaPipe Hands.
    """

    WRIST = 0
    THUMB_CMC = 1
    THUMB_MCP = 2
    THUMB_IP = 3
    THUMB_TIP = 4
    INDEX_FINGER_MCP = 5
    INDEX_FINGER_PIP = 6
    INDEX_FINGER_DIP = 7
    INDEX_FINGER_TIP = 8
    MIDDLE_FINGER_MCP = 9
    MIDDLE_FINGER_PIP = 10
    MIDDLE_FINGER_DIP = 11
    MIDDLE_FINGER_TIP = 12
    RING_FINGER_MCP = 13
    RING_FINGER_PIP = 14
    RING_FINGER_DIP = 15
    RING_FINGER_TIP = 16
    PINKY_MCP = 17
    PINKY_PIP = 18
    PINKY_DIP = 19
    PINKY_TIP = 20


@dataclass(frozen=True)
class Landmark:
    """A single normalized hand landmark."""
    x: float
    y: float
    z: float = 0.0


@dataclass(eq=False)
class HandPose:
    """
    The 21 landmarks of one hand for one detection tick.

    Attributes:
        points: Array of shape (21, 3) with (x, y, z) per landmark. x and y
            are normalized image coordinates in [0, 1], z is relative depth.
    """
    points: np.ndarray

    def __post_init__(self):
        self.points = np.asarray(self.points, dtype=float)
        if self.points.shape != (NUM_LANDMARKS, 3):
            raise ValueError(
                f"HandPose needs shape ({NUM_LANDMARKS}, 3), got {self.points.shape}"
            )

    @classmethod
    def from_landmarks(cls, landmarks: Iterable[Any]) -> "HandPose":
        """
        Build a pose from landmark-like values.

        Accepts Landmark objects, (x, y) or (x, y, z) tuples, or anything with
        x/y/z attributes such as MediaPipe's NormalizedLandmark.

        Raises:
            ValueError: if there are not exactly 21 usable landmarks
        """
        rows = []
        for lm in landmarks:
            if hasattr(lm, "x") and hasattr(lm, "y"):
                rows.append((lm.x, lm.y, getattr(lm, "z", 0.0)))
            else:
                values = tuple(lm)
                if len(values) == 2:
                    values = values + (0.0,)
                if len(values) != 3:
                    raise ValueError(f"Landmark must have 2 or 3 coordinates, got {len(values)}")
                rows.append(values)
        return cls(points=np.array(rows, dtype=float).reshape(-1, 3))

    def landmark(self, index: int) -> Landmark:
        x, y, z = self.points[index]
        return Landmark(float(x), float(y), float(z))

    def to_list(self) -> List[Tuple[float, float, float]]:
        """Plain (x, y, z) tuples for overlay drawing."""
        return [tuple(float(v) for v in row) for row in self.points]

    def __len__(self) -> int:
        return NUM_LANDMARKS


@dataclass
class Pose:
    """
    Continuous avatar pose recomputed every render tick.

    Arm rotations are split into a lift axis (x) and a swing axis (z).
    """
    y: float = 0.0  # vertical offset
    z: float = 0.0  # depth offset, positive is away from the viewer
    yaw: float = 0.0  # body rotation around the vertical axis
    left_arm_x: float = 0.0
    left_arm_z: float = 0.0
    right_arm_x: float = 0.0
    right_arm_z: float = 0.0

    def copy(self) -> "Pose":
        return Pose(**self.__dict__)


@dataclass
class GestureFrame:
    """Result of pushing one detection tick through the gesture pipeline."""
    raw: GestureLabel
    confirmed: GestureLabel
    changed: bool  # confirmed label differs from the previous tick
    landmarks: Optional[List[Tuple[float, float, float]]] = None
    cursor: Optional[Tuple[float, float]] = field(default=None)


@runtime_checkable
class SpeakerProto(Protocol):
    """Abstract protocol for speech backends used by gesture feedback."""

    async def speak(self, text: str) -> None:
        """Say the given text."""
        ...
