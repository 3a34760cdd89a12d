"""
Test cases for the gesture-driven animation state machine.
"""
import math
import unittest
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from cyberpuppet.animation import AnimationStateMachine, MotionVariant
from cyberpuppet.config import AnimationConfig
from cyberpuppet.types import GestureLabel, Pose


def run_for(machine: AnimationStateMachine, seconds: float, step: float = 1 / 60) -> Pose:
    """Advance in fixed steps and return the last pose."""
    pose = machine.pose
    for _ in range(int(round(seconds / step))):
        pose = machine.advance(step)
    return pose


class TestAnimationBasics(unittest.TestCase):

    def setUp(self):
        self.cfg = AnimationConfig()
        self.machine = AnimationStateMachine(self.cfg)

    def test_starts_idle(self):
        self.assertEqual(self.machine.motion, MotionVariant.IDLE)
        self.assertEqual(self.machine.pose, Pose())

    def test_zero_delta_leaves_pose_unchanged(self):
        self.machine.on_gesture_change(GestureLabel.THUMBSUP)
        run_for(self.machine, 0.3)
        before = self.machine.pose
        phase = self.machine.state.phase
        for _ in range(10):
            self.assertEqual(self.machine.advance(0), before)
        self.assertEqual(self.machine.state.phase, phase)

    def test_invalid_delta_is_ignored(self):
        self.machine.on_gesture_change(GestureLabel.YAY)
        run_for(self.machine, 0.1)
        before = self.machine.pose
        phase = self.machine.state.phase
        for delta in (-0.5, float("nan"), float("inf"), None):
            self.assertEqual(self.machine.advance(delta), before)
        self.assertEqual(self.machine.state.phase, phase)

    def test_returned_pose_is_a_copy(self):
        pose = self.machine.advance(0.1)
        pose.y = 99.0
        self.assertNotEqual(self.machine.pose.y, 99.0)

    def test_gesture_mapping(self):
        expected = {
            GestureLabel.YAY: MotionVariant.JUMP,
            GestureLabel.PEACE: MotionVariant.SPIN,
            GestureLabel.LOVE: MotionVariant.RAISE_ARMS,
            GestureLabel.WAVE: MotionVariant.WAVE,
            GestureLabel.ROCK: MotionVariant.MOVE_BACK,
            GestureLabel.FIST: MotionVariant.MOVE_FORWARD,
            GestureLabel.THUMBSUP: MotionVariant.CLAP,
            GestureLabel.NONE: MotionVariant.IDLE,
        }
        for gesture, motion in expected.items():
            with self.subTest(gesture=gesture):
                machine = AnimationStateMachine(self.cfg)
                machine.on_gesture_change(gesture)
                self.assertEqual(machine.motion, motion)

    def test_idle_float(self):
        """With no gesture the avatar bobs gently around zero."""
        heights = [run_for(self.machine, 0.5).y for _ in range(8)]
        self.assertTrue(any(abs(h) > 0.01 for h in heights))
        self.assertTrue(all(abs(h) <= self.cfg.idle_amplitude + 1e-9 for h in heights))


class TestJump(unittest.TestCase):

    def setUp(self):
        self.machine = AnimationStateMachine()
        self.machine.on_gesture_change(GestureLabel.YAY)

    def test_jump_rises(self):
        pose = self.machine.advance(0.1)
        self.assertAlmostEqual(pose.y, math.sin(0.8) * 2.0)

    def test_jump_self_terminates(self):
        """Past the half-sine the offset is exactly zero and stays there."""
        for _ in range(5):
            pose = self.machine.advance(0.1)
        self.assertEqual(pose.y, 0.0)
        self.assertEqual(self.machine.motion, MotionVariant.IDLE)

        for _ in range(30):
            pose = self.machine.advance(0.1)
            self.assertEqual(pose.y, 0.0)
        self.assertEqual(self.machine.motion, MotionVariant.IDLE)

    def test_repeated_gesture_does_not_retrigger(self):
        run_for(self.machine, 1.0)
        self.machine.on_gesture_change(GestureLabel.YAY)
        self.assertEqual(self.machine.motion, MotionVariant.IDLE)

    def test_jump_again_after_other_gesture(self):
        run_for(self.machine, 1.0)
        self.machine.on_gesture_change(GestureLabel.NONE)
        self.machine.on_gesture_change(GestureLabel.YAY)
        self.assertEqual(self.machine.motion, MotionVariant.JUMP)

    def test_clap_takes_over_from_jump(self):
        """Switching mid-jump leaves no jump height once the clap runs."""
        self.machine.advance(0.1)
        self.assertGreater(self.machine.pose.y, 1.0)

        self.machine.on_gesture_change(GestureLabel.THUMBSUP)
        self.assertEqual(self.machine.motion, MotionVariant.CLAP)
        self.assertEqual(self.machine.state.phase, 0.0)

        pose = run_for(self.machine, 2.0)
        self.assertEqual(pose.y, 0.0)
        self.assertEqual(self.machine.motion, MotionVariant.CLAP)


class TestSpin(unittest.TestCase):

    def test_spin_stops_and_keeps_yaw(self):
        cfg = AnimationConfig()
        machine = AnimationStateMachine(cfg)
        machine.on_gesture_change(GestureLabel.PEACE)

        pose = run_for(machine, 1.0, step=0.05)
        self.assertEqual(machine.motion, MotionVariant.IDLE)
        self.assertGreater(pose.yaw, 0.0)
        self.assertLessEqual(pose.yaw, cfg.spin_duration * cfg.spin_rate + 1e-9)

        machine.on_gesture_change(GestureLabel.NONE)
        later = run_for(machine, 2.0)
        self.assertEqual(later.yaw, pose.yaw)


class TestArms(unittest.TestCase):

    def setUp(self):
        self.cfg = AnimationConfig()
        self.machine = AnimationStateMachine(self.cfg)

    def test_raise_arms_reaches_target(self):
        self.machine.on_gesture_change(GestureLabel.LOVE)
        pose = run_for(self.machine, 2.0)
        self.assertAlmostEqual(pose.left_arm_x, self.cfg.raise_angle, places=4)
        self.assertAlmostEqual(pose.right_arm_x, self.cfg.raise_angle, places=4)
        self.assertAlmostEqual(pose.left_arm_z, self.cfg.raise_spread, places=4)
        self.assertAlmostEqual(pose.right_arm_z, -self.cfg.raise_spread, places=4)
        self.assertEqual(self.machine.motion, MotionVariant.RAISE_ARMS)

    def test_arms_return_after_gesture_ends(self):
        self.machine.on_gesture_change(GestureLabel.LOVE)
        run_for(self.machine, 1.0)
        self.machine.on_gesture_change(GestureLabel.NONE)

        first = self.machine.advance(1 / 60)
        self.assertLess(first.left_arm_x, -0.5)  # smoothed, not snapped

        pose = run_for(self.machine, 2.0)
        self.assertEqual((pose.left_arm_x, pose.left_arm_z, pose.right_arm_x, pose.right_arm_z),
                         (0.0, 0.0, 0.0, 0.0))

    def test_clap_is_mirrored(self):
        self.machine.on_gesture_change(GestureLabel.THUMBSUP)
        for _ in range(20):
            pose = self.machine.advance(1 / 60)
            self.assertAlmostEqual(pose.left_arm_z, -pose.right_arm_z)
            self.assertEqual(pose.left_arm_x, self.cfg.clap_lift)

    def test_wave_drives_right_arm_only(self):
        self.machine.on_gesture_change(GestureLabel.LOVE)
        run_for(self.machine, 1.0)
        self.machine.on_gesture_change(GestureLabel.WAVE)

        pose = run_for(self.machine, 2.0)
        self.assertEqual(pose.right_arm_x, self.cfg.wave_lift)
        low = self.cfg.wave_offset - self.cfg.wave_amplitude
        high = self.cfg.wave_offset + self.cfg.wave_amplitude
        self.assertTrue(low - 1e-9 <= pose.right_arm_z <= high + 1e-9)
        # Left arm is unclaimed and has settled
        self.assertEqual((pose.left_arm_x, pose.left_arm_z), (0.0, 0.0))


class TestTravel(unittest.TestCase):

    def setUp(self):
        self.cfg = AnimationConfig()
        self.machine = AnimationStateMachine(self.cfg)

    def test_move_back_is_clamped(self):
        self.machine.on_gesture_change(GestureLabel.ROCK)
        pose = self.machine.advance(0.1)
        self.assertAlmostEqual(pose.z, 0.5)
        pose = run_for(self.machine, 3.0)
        self.assertEqual(pose.z, self.cfg.travel_limit)

    def test_move_forward_is_clamped(self):
        self.machine.on_gesture_change(GestureLabel.FIST)
        pose = run_for(self.machine, 3.0)
        self.assertEqual(pose.z, -self.cfg.travel_limit)

    def test_depth_returns_to_center(self):
        self.machine.on_gesture_change(GestureLabel.ROCK)
        run_for(self.machine, 1.0)
        self.machine.on_gesture_change(GestureLabel.NONE)

        first = self.machine.advance(1 / 60)
        self.assertGreater(first.z, 1.0)
        pose = run_for(self.machine, 3.0)
        self.assertEqual(pose.z, 0.0)


if __name__ == '__main__':
    unittest.main()
