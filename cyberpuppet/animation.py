"""
Avatar animation driven by confirmed gestures.

Gesture changes are edge-triggered events (`on_gesture_change`); pose
integration is time-driven (`advance`) and runs every render tick whether or
not a detection happened in between.
"""
import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .config import AnimationConfig
from .types import GestureLabel, Pose

logger = logging.getLogger(__name__)


class MotionVariant(Enum):
    """Mutually exclusive avatar motions."""
    IDLE = "idle"
    JUMP = "jump"
    SPIN = "spin"
    RAISE_ARMS = "raise_arms"
    WAVE = "wave"
    MOVE_BACK = "move_back"
    MOVE_FORWARD = "move_forward"
    CLAP = "clap"


GESTURE_MOTIONS = {
    GestureLabel.YAY: MotionVariant.JUMP,
    GestureLabel.PEACE: MotionVariant.SPIN,
    GestureLabel.LOVE: MotionVariant.RAISE_ARMS,
    GestureLabel.WAVE: MotionVariant.WAVE,
    GestureLabel.ROCK: MotionVariant.MOVE_BACK,
    GestureLabel.FIST: MotionVariant.MOVE_FORWARD,
    GestureLabel.THUMBSUP: MotionVariant.CLAP,
}


@dataclass
class AnimationState:
    """Per-avatar animation state."""
    gesture: GestureLabel = GestureLabel.NONE
    motion: MotionVariant = MotionVariant.IDLE
    phase: float = 0.0  # radians for periodic motions, seconds for spin
    elapsed: float = 0.0
    pose: Pose = field(default_factory=Pose)


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def _approach(value: float, target: float, factor: float, snap: float) -> float:
    value = lerp(value, target, factor)
    if abs(value - target) <= snap:
        return target
    return value


def _sanitize_delta(delta) -> float:
    try:
        delta = float(delta)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(delta) or delta <= 0.0:
        return 0.0
    return delta


class AnimationStateMachine:
    """
    Maps confirmed gestures to avatar motions and integrates the pose.

    Only one motion drives a pose channel at a time. Channels the active
    motion does not claim decay back to neutral, except yaw, which stays
    wherever the last spin left it.
    """

    def __init__(self, cfg: Optional[AnimationConfig] = None):
        self.cfg = cfg or AnimationConfig()
        self.state = AnimationState()

    @property
    def motion(self) -> MotionVariant:
        return self.state.motion

    @property
    def pose(self) -> Pose:
        return self.state.pose.copy()

    def on_gesture_change(self, gesture: GestureLabel) -> None:
        """
        Switch motion for a newly confirmed gesture.

        Any running motion is dropped first. NONE returns the avatar to idle.
        """
        state = self.state
        if gesture == state.gesture:
            return

        state.gesture = gesture
        state.motion = GESTURE_MOTIONS.get(gesture, MotionVariant.IDLE)
        state.phase = 0.0
        logger.debug(f"Motion -> {state.motion.value} ({gesture.value})")

    def advance(self, delta: float) -> Pose:
        """
        Advance the animation by `delta` seconds of wall-clock time.

        Non-positive or non-finite deltas count as no elapsed time.

        Returns:
            A copy of the updated pose
        """
        delta = _sanitize_delta(delta)
        if delta == 0.0:
            return self.pose

        state = self.state
        state.elapsed += delta

        motion = state.motion
        vertical = depth = left_arm = right_arm = False

        if motion is MotionVariant.JUMP:
            self._jump(delta)
            vertical = True
        elif motion is MotionVariant.SPIN:
            self._spin(delta)
        elif motion is MotionVariant.RAISE_ARMS:
            self._raise_arms(delta)
            left_arm = right_arm = True
        elif motion is MotionVariant.WAVE:
            self._wave(delta)
            right_arm = True
        elif motion is MotionVariant.CLAP:
            self._clap(delta)
            left_arm = right_arm = True
        elif motion in (MotionVariant.MOVE_BACK, MotionVariant.MOVE_FORWARD):
            self._travel(delta, motion)
            depth = True

        if not vertical:
            self._settle_vertical(delta)
        if not depth:
            self._settle_depth(delta)
        self._settle_arms(delta, left=not left_arm, right=not right_arm)

        return self.pose

    # ========== Motions ==========

    def _jump(self, delta: float) -> None:
        cfg, state = self.cfg, self.state
        state.phase += delta * cfg.jump_rate
        if state.phase < math.pi:
            state.pose.y = math.sin(state.phase) * cfg.jump_height
        else:
            state.pose.y = 0.0
            state.motion = MotionVariant.IDLE
            state.phase = 0.0

    def _spin(self, delta: float) -> None:
        cfg, state = self.cfg, self.state
        state.phase += delta
        if state.phase < cfg.spin_duration:
            state.pose.yaw += delta * cfg.spin_rate
        else:
            state.motion = MotionVariant.IDLE
            state.phase = 0.0

    def _raise_arms(self, delta: float) -> None:
        cfg, pose = self.cfg, self.state.pose
        t = min(1.0, delta * cfg.raise_rate)
        pose.left_arm_x = lerp(pose.left_arm_x, cfg.raise_angle, t)
        pose.right_arm_x = lerp(pose.right_arm_x, cfg.raise_angle, t)
        pose.left_arm_z = lerp(pose.left_arm_z, cfg.raise_spread, t)
        pose.right_arm_z = lerp(pose.right_arm_z, -cfg.raise_spread, t)

    def _wave(self, delta: float) -> None:
        cfg, state = self.cfg, self.state
        state.phase += delta * cfg.wave_rate
        state.pose.right_arm_z = math.sin(state.phase) * cfg.wave_amplitude + cfg.wave_offset
        state.pose.right_arm_x = cfg.wave_lift

    def _clap(self, delta: float) -> None:
        cfg, state = self.cfg, self.state
        state.phase += delta * cfg.clap_rate
        angle = math.sin(state.phase) * cfg.clap_amplitude
        state.pose.left_arm_z = angle + cfg.clap_offset
        state.pose.right_arm_z = -angle - cfg.clap_offset
        state.pose.left_arm_x = cfg.clap_lift
        state.pose.right_arm_x = cfg.clap_lift

    def _travel(self, delta: float, motion: MotionVariant) -> None:
        cfg, pose = self.cfg, self.state.pose
        step = delta * cfg.travel_speed
        if motion is MotionVariant.MOVE_BACK:
            pose.z = min(pose.z + step, cfg.travel_limit)
        else:
            pose.z = max(pose.z - step, -cfg.travel_limit)

    # ========== Unclaimed channels ==========

    def _settle_vertical(self, delta: float) -> None:
        cfg, state = self.cfg, self.state
        t = min(1.0, delta * cfg.vertical_return_rate)
        if state.gesture is GestureLabel.NONE:
            # Idle float
            target = math.sin(state.elapsed * cfg.idle_frequency) * cfg.idle_amplitude
            state.pose.y = lerp(state.pose.y, target, t)
        else:
            state.pose.y = _approach(state.pose.y, 0.0, t, cfg.snap_epsilon)

    def _settle_depth(self, delta: float) -> None:
        cfg, pose = self.cfg, self.state.pose
        if abs(pose.z) > cfg.depth_snap:
            pose.z = lerp(pose.z, 0.0, min(1.0, delta * cfg.depth_return_rate))
        else:
            pose.z = 0.0

    def _settle_arms(self, delta: float, left: bool, right: bool) -> None:
        cfg, pose = self.cfg, self.state.pose
        t = min(1.0, delta * cfg.arm_return_rate)
        if left:
            pose.left_arm_x = _approach(pose.left_arm_x, 0.0, t, cfg.snap_epsilon)
            pose.left_arm_z = _approach(pose.left_arm_z, 0.0, t, cfg.snap_epsilon)
        if right:
            pose.right_arm_x = _approach(pose.right_arm_x, 0.0, t, cfg.snap_epsilon)
            pose.right_arm_z = _approach(pose.right_arm_z, 0.0, t, cfg.snap_epsilon)
