"""
Hand landmark geometry: finger extension tests on a single HandPose.

Image y grows downward, so "above" means a smaller y value.
"""
from dataclasses import dataclass
from typing import Optional, Tuple

from .config import ClassifierConfig
from .types import HandPose, HandLandmarkIndex as L


# (tip, dip, pip) for index, middle, ring, pinky
FINGER_JOINTS = (
    (L.INDEX_FINGER_TIP, L.INDEX_FINGER_DIP, L.INDEX_FINGER_PIP),
    (L.MIDDLE_FINGER_TIP, L.MIDDLE_FINGER_DIP, L.MIDDLE_FINGER_PIP),
    (L.RING_FINGER_TIP, L.RING_FINGER_DIP, L.RING_FINGER_PIP),
    (L.PINKY_TIP, L.PINKY_DIP, L.PINKY_PIP),
)


@dataclass(frozen=True)
class FingerStates:
    """Extension state of every digit for one pose.

    `extended` and `curled` are ordered index, middle, ring, pinky. A finger can
    be neither (half bent), which the rule table treats as not matching either.
    """
    thumb: bool
    extended: Tuple[bool, bool, bool, bool]
    curled: Tuple[bool, bool, bool, bool]


def finger_extended(pose: HandPose, tip: int, dip: int, pip: int,
                    cfg: ClassifierConfig) -> bool:
    """
    Check whether a finger points up.

    The tip must clear the PIP joint by `extend_margin` and the DIP joint by
    `dip_margin`.
    """
    ys = pose.points[:, 1]
    return (ys[tip] < ys[pip] - cfg.extend_margin and
            ys[tip] < ys[dip] - cfg.dip_margin)


def finger_curled(pose: HandPose, tip: int, pip: int, cfg: ClassifierConfig) -> bool:
    """Check whether a finger is folded: tip below its PIP joint by `curl_margin`."""
    ys = pose.points[:, 1]
    return ys[tip] > ys[pip] + cfg.curl_margin


def thumb_extended(pose: HandPose, cfg: ClassifierConfig) -> bool:
    """
    Check whether the thumb is out.

    The thumb flexes sideways, so it counts as extended when its tip sits
    further from the wrist horizontally than its MCP joint (splayed) and the
    tip is not folded down below the IP joint.
    """
    pts = pose.points
    wrist_x = pts[L.WRIST, 0]
    splayed = abs(pts[L.THUMB_TIP, 0] - wrist_x) > abs(pts[L.THUMB_MCP, 0] - wrist_x)
    not_folded = pts[L.THUMB_TIP, 1] <= pts[L.THUMB_IP, 1] + cfg.thumb_fold_margin
    return bool(splayed and not_folded)


def finger_states(pose: HandPose, cfg: Optional[ClassifierConfig] = None) -> FingerStates:
    """Evaluate every digit of a pose."""
    cfg = cfg or ClassifierConfig()
    extended = tuple(bool(finger_extended(pose, tip, dip, pip, cfg))
                     for tip, dip, pip in FINGER_JOINTS)
    curled = tuple(bool(finger_curled(pose, tip, pip, cfg))
                   for tip, _, pip in FINGER_JOINTS)
    return FingerStates(thumb=thumb_extended(pose, cfg), extended=extended, curled=curled)


def cursor_position(pose: HandPose, frame_wh: Tuple[int, int] = (1, 1)) -> Tuple[float, float]:
    """
    Map the index fingertip to screen coordinates.

    The camera preview is mirrored, so x is flipped.

    Args:
        pose: Hand pose
        frame_wh: Target dimensions (width, height)

    Returns:
        (x, y) in target pixels
    """
    width, height = frame_wh
    tip = pose.landmark(L.INDEX_FINGER_TIP)
    return ((1.0 - tip.x) * width, tip.y * height)
