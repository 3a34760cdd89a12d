"""
Synthetic hand landmark fixtures.

A right hand seen upright by the camera: wrist at the bottom, fingers pointing
up, thumb on the left of the image.
"""
from typing import List, Tuple

WRIST = (0.5, 0.9, 0.0)

# x of index, middle, ring, pinky
FINGER_X = (0.44, 0.5, 0.56, 0.62)

# MCP, PIP, DIP, TIP heights
EXTENDED_Y = (0.6, 0.5, 0.42, 0.35)
CURLED_Y = (0.6, 0.5, 0.55, 0.6)
HALF_BENT_Y = (0.6, 0.5, 0.5, 0.49)

# CMC, MCP, IP, TIP
THUMB_OUT = ((0.42, 0.82, 0.0), (0.38, 0.75, 0.0), (0.34, 0.68, 0.0), (0.30, 0.62, 0.0))
THUMB_TUCKED = ((0.45, 0.82, 0.0), (0.43, 0.75, 0.0), (0.42, 0.7, 0.0), (0.46, 0.72, 0.0))
# Splayed sideways but with the tip folded down past the IP joint
THUMB_FOLDED = ((0.42, 0.82, 0.0), (0.38, 0.75, 0.0), (0.34, 0.68, 0.0), (0.28, 0.80, 0.0))


def make_hand(thumb, fingers: Tuple[str, str, str, str]) -> List[Tuple[float, float, float]]:
    """
    Build 21 landmarks.

    Args:
        thumb: True for a splayed thumb, False for a tucked one, or the four
            thumb points (CMC, MCP, IP, TIP)
        fingers: "up", "down" or "half" for index, middle, ring, pinky

    Returns:
        List of 21 (x, y, z) tuples in MediaPipe order
    """
    heights = {"up": EXTENDED_Y, "down": CURLED_Y, "half": HALF_BENT_Y}
    points = [WRIST]
    if thumb is True:
        thumb = THUMB_OUT
    elif thumb is False:
        thumb = THUMB_TUCKED
    points.extend(thumb)
    for x, state in zip(FINGER_X, fingers):
        points.extend((x, y, 0.0) for y in heights[state])
    return points


GESTURE_HANDS = {
    "fist": make_hand(False, ("down", "down", "down", "down")),
    "thumbsup": make_hand(True, ("down", "down", "down", "down")),
    "yay": make_hand(False, ("up", "down", "down", "down")),
    "peace": make_hand(False, ("up", "up", "down", "down")),
    "love": make_hand(False, ("up", "up", "up", "down")),
    "rock": make_hand(False, ("up", "down", "down", "up")),
    "wave": make_hand(True, ("up", "up", "up", "up")),
}
