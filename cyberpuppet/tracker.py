"""
Hand landmark detection using MediaPipe, plus the landmark overlay.
"""
import cv2
import mediapipe as mp
import numpy as np
from typing import Optional, List, Sequence, Tuple

from .config import MediaPipeConfig
from .types import HandPose, HandLandmarkIndex as L


# Bones drawn between landmarks
HAND_CONNECTIONS = (
    (L.WRIST, L.THUMB_CMC), (L.THUMB_CMC, L.THUMB_MCP),
    (L.THUMB_MCP, L.THUMB_IP), (L.THUMB_IP, L.THUMB_TIP),
    (L.WRIST, L.INDEX_FINGER_MCP), (L.INDEX_FINGER_MCP, L.INDEX_FINGER_PIP),
    (L.INDEX_FINGER_PIP, L.INDEX_FINGER_DIP), (L.INDEX_FINGER_DIP, L.INDEX_FINGER_TIP),
    (L.MIDDLE_FINGER_MCP, L.MIDDLE_FINGER_PIP),
    (L.MIDDLE_FINGER_PIP, L.MIDDLE_FINGER_DIP), (L.MIDDLE_FINGER_DIP, L.MIDDLE_FINGER_TIP),
    (L.RING_FINGER_MCP, L.RING_FINGER_PIP),
    (L.RING_FINGER_PIP, L.RING_FINGER_DIP), (L.RING_FINGER_DIP, L.RING_FINGER_TIP),
    (L.WRIST, L.PINKY_MCP), (L.PINKY_MCP, L.PINKY_PIP),
    (L.PINKY_PIP, L.PINKY_DIP), (L.PINKY_DIP, L.PINKY_TIP),
    (L.INDEX_FINGER_MCP, L.MIDDLE_FINGER_MCP),
    (L.MIDDLE_FINGER_MCP, L.RING_FINGER_MCP),
    (L.RING_FINGER_MCP, L.PINKY_MCP),
)


class HandsTracker:
    """Hand landmark tracker using MediaPipe Hands."""

    def __init__(self, cfg: Optional[MediaPipeConfig] = None):
        """
        Initialize the hands tracker.

        Args:
            cfg: MediaPipe settings (hand count, model complexity, confidences)
        """
        cfg = cfg or MediaPipeConfig()
        self.mp_hands = mp.solutions.hands
        self.hands = self.mp_hands.Hands(
            static_image_mode=False,
            max_num_hands=cfg.max_num_hands,
            model_complexity=cfg.model_complexity,
            min_detection_confidence=cfg.min_detection_confidence,
            min_tracking_confidence=cfg.min_tracking_confidence
        )

    def process(self, frame_bgr: np.ndarray) -> Optional[HandPose]:
        """
        Process a frame and return hand landmarks.

        Args:
            frame_bgr: Input frame in BGR format

        Returns:
            HandPose of the first detected hand, or None if no hand detected
        """
        # Convert BGR to RGB for MediaPipe
        frame_rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)

        results = self.hands.process(frame_rgb)

        if results.multi_hand_landmarks:
            hand_landmarks = results.multi_hand_landmarks[0]
            return HandPose.from_landmarks(hand_landmarks.landmark)

        return None

    def close(self) -> None:
        """Release the MediaPipe graph."""
        self.hands.close()


def draw_landmarks(frame: np.ndarray, landmarks: Sequence[Tuple[float, ...]],
                   mirrored: bool = False) -> np.ndarray:
    """
    Draw hand landmarks on the frame.

    Args:
        frame: Input frame
        landmarks: (x, y[, z]) coordinates in [0..1] range
        mirrored: Flip x to match a mirrored preview

    Returns:
        Frame with landmarks drawn
    """
    height, width = frame.shape[:2]

    points: List[Tuple[int, int]] = []
    for lm in landmarks:
        x = 1.0 - lm[0] if mirrored else lm[0]
        points.append((int(x * width), int(lm[1] * height)))

    if len(points) > L.PINKY_TIP:
        for a, b in HAND_CONNECTIONS:
            cv2.line(frame, points[a], points[b], (200, 100, 0), 1)

    for i, (px, py) in enumerate(points):
        cv2.circle(frame, (px, py), 3, (255, 255, 0), -1)
        cv2.putText(frame, str(i), (px + 5, py - 5), cv2.FONT_HERSHEY_SIMPLEX, 0.3, (255, 255, 255), 1)

    return frame
