"""
Cyber Puppet

Reads hand landmarks from a webcam, recognizes gestures with geometric rules,
debounces them over a few frames, and drives an animated puppet whose motion
follows the confirmed gesture.
"""

__version__ = "0.1.0"

from .types import GestureLabel, HandLandmarkIndex, Landmark, HandPose, Pose, GestureFrame, SpeakerProto
from .config import load_config, Cfg
from .gestures import classify, ConfirmationFilter, GestureProcessor
from .animation import AnimationStateMachine, AnimationState, MotionVariant
from .feedback import GestureFeedback, MockSpeaker

__all__ = [
    "GestureLabel",
    "HandLandmarkIndex",
    "Landmark",
    "HandPose",
    "Pose",
    "GestureFrame",
    "SpeakerProto",
    "load_config",
    "Cfg",
    "classify",
    "ConfirmationFilter",
    "GestureProcessor",
    "AnimationStateMachine",
    "AnimationState",
    "MotionVariant",
    "GestureFeedback",
    "MockSpeaker",
]
