"""
Gesture recognition: per-frame classification and temporal confirmation.
"""
import logging
from collections import deque
from typing import Any, Iterable, Optional, Tuple

from .config import Cfg, ClassifierConfig, ConfirmationConfig
from .landmarks import cursor_position, finger_states
from .types import GestureFrame, GestureLabel, HandPose

logger = logging.getLogger(__name__)


def as_hand_pose(landmarks: Any) -> Optional[HandPose]:
    """Coerce landmark input to a HandPose, or None if it is unusable."""
    if landmarks is None:
        return None
    if isinstance(landmarks, HandPose):
        return landmarks
    try:
        return HandPose.from_landmarks(landmarks)
    except (TypeError, ValueError):
        return None


def classify(pose: Any, cfg: Optional[ClassifierConfig] = None) -> GestureLabel:
    """
    Classify a single frame of landmarks.

    Rules are checked top to bottom and every rule constrains all five
    digits, so at most one can match. Anything else is NONE.

    Args:
        pose: HandPose, a sequence of 21 landmarks, or None
        cfg: Classifier margins

    Returns:
        The matching gesture, or GestureLabel.NONE
    """
    hand = as_hand_pose(pose)
    if hand is None:
        return GestureLabel.NONE

    states = finger_states(hand, cfg)
    thumb = states.thumb
    index, middle, ring, pinky = states.extended
    all_curled = all(states.curled)

    if all_curled and not thumb:
        return GestureLabel.FIST

    if thumb and all_curled:
        return GestureLabel.THUMBSUP

    if not thumb and index and not middle and not ring and not pinky:
        return GestureLabel.YAY

    if not thumb and index and middle and not ring and not pinky:
        return GestureLabel.PEACE

    if not thumb and index and middle and ring and not pinky:
        return GestureLabel.LOVE

    if not thumb and index and not middle and not ring and pinky:
        return GestureLabel.ROCK

    if thumb and index and middle and ring and pinky:
        return GestureLabel.WAVE

    return GestureLabel.NONE


class ConfirmationFilter:
    """
    Debounces the raw per-frame label stream.

    A label is confirmed once the most recent `threshold` observations agree
    on it. Single-frame misclassifications never reach the confirmed output.
    """

    def __init__(self, capacity: int = 5, threshold: int = 3):
        if threshold < 1:
            raise ValueError(f"threshold must be at least 1, got {threshold}")
        if threshold > capacity:
            raise ValueError(f"threshold ({threshold}) cannot exceed capacity ({capacity})")
        self.capacity = capacity
        self.threshold = threshold
        self.history: deque[GestureLabel] = deque(maxlen=capacity)
        self.confirmed = GestureLabel.NONE

    @classmethod
    def from_config(cls, cfg: ConfirmationConfig) -> "ConfirmationFilter":
        return cls(capacity=cfg.capacity, threshold=cfg.threshold)

    def observe(self, raw: GestureLabel) -> GestureLabel:
        """
        Add one raw label and return the confirmed label.

        Args:
            raw: Classifier output for this frame

        Returns:
            The currently confirmed label, changed or not
        """
        self.history.append(raw)

        if len(self.history) >= self.threshold:
            recent = list(self.history)[-self.threshold:]
            if all(label == recent[0] for label in recent) and recent[0] != self.confirmed:
                logger.debug(f"Confirmed {recent[0].value} (was {self.confirmed.value})")
                self.confirmed = recent[0]

        return self.confirmed

    def reset(self) -> None:
        """Forget all history; the confirmed label drops to NONE."""
        self.history.clear()
        self.confirmed = GestureLabel.NONE


class GestureProcessor:
    """
    Main gesture processor: classifier and confirmation filter per detection tick.
    """

    def __init__(self, cfg: Optional[Cfg] = None):
        """Initialize gesture processor with configuration."""
        self.cfg = cfg or Cfg()
        self.filter = ConfirmationFilter.from_config(self.cfg.confirmation)
        self.last_confirmed = GestureLabel.NONE

    def process_frame(self, landmarks: Optional[Iterable[Any]],
                      frame_wh: Tuple[int, int] = (1, 1)) -> GestureFrame:
        """
        Process one detection tick.

        Args:
            landmarks: Hand landmarks (None if no hand detected)
            frame_wh: Dimensions used for the cursor position (width, height)

        Returns:
            GestureFrame with raw and confirmed labels. `changed` marks a
            transition of the confirmed label since the previous tick.
        """
        if landmarks is None:
            if self.filter.history:
                logger.debug("Hand lost, resetting gesture confirmation")
            self.filter.reset()
            raw = GestureLabel.NONE
            points = None
            cursor = None
        else:
            if not isinstance(landmarks, HandPose):
                landmarks = list(landmarks)
            pose = as_hand_pose(landmarks)
            raw = classify(pose, self.cfg.classifier)
            self.filter.observe(raw)
            if pose is not None:
                points = pose.to_list()
                cursor = cursor_position(pose, frame_wh)
            else:
                points = list(landmarks)
                cursor = None

        confirmed = self.filter.confirmed
        changed = confirmed != self.last_confirmed
        if changed:
            logger.info(f"Gesture: {self.last_confirmed.value} -> {confirmed.value}")
        self.last_confirmed = confirmed

        return GestureFrame(raw=raw, confirmed=confirmed, changed=changed,
                            landmarks=points, cursor=cursor)

    def reset(self) -> GestureFrame:
        """
        Drop all gesture state, e.g. when tracking is switched off.

        Returns the same frame a lost hand produces, so callers still see the
        transition back to NONE.
        """
        return self.process_frame(None)
