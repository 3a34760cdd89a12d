"""
Main application: webcam hand gestures drive an animated puppet.
"""
import asyncio
import logging
import math
import sys
import time
from typing import Optional

import cv2
import numpy as np

from .animation import AnimationStateMachine
from .config import load_config
from .feedback import ElevenLabsSpeaker, GestureFeedback, MockSpeaker
from .gestures import GestureProcessor
from .tracker import HandsTracker, draw_landmarks
from .types import DISPLAY_LABELS, GestureFrame, Pose

logger = logging.getLogger(__name__)


class PuppetApp:
    """Main application class for the gesture puppet."""

    def __init__(self, config_path: Optional[str] = None, use_speech: bool = False,
                 muted: bool = False):
        """Initialize the application with configuration."""
        self.config = load_config(config_path)
        self.tracker = HandsTracker(self.config.mediapipe)
        self.gesture_processor = GestureProcessor(self.config)
        self.animator = AnimationStateMachine(self.config.animation)

        speaker = MockSpeaker()
        if use_speech:
            try:
                speaker = ElevenLabsSpeaker()
                print("🔊 Using Eleven Labs speech")
            except (ImportError, RuntimeError) as e:
                print(f"⚠️  Speech not available ({e}), using mock speaker")
        self.feedback = GestureFeedback(self.config.feedback, speaker)
        if muted and self.feedback.sound_enabled:
            self.feedback.toggle_sound()

        # Initialize camera
        self.cap = cv2.VideoCapture(self.config.camera.index)
        self.cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.config.camera.width)
        self.cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.config.camera.height)
        self.cap.set(cv2.CAP_PROP_FPS, self.config.camera.fps)

        if not self.cap.isOpened():
            raise RuntimeError(f"Failed to open camera {self.config.camera.index}")

    async def run(self):
        """Run the main application loop."""
        display = self.config.display
        print(f"Starting {display.window_name}")
        print("🎯 Gestures:")
        print("  - Index = Jump, Index+Middle = Spin, Index+Middle+Ring = Raise arms")
        print("  - Open hand = Wave, Thumbs up = Clap")
        print("  - Index+Pinky = Move back, Fist = Move forward")
        print("Press 's' to toggle sound, 'q' to quit")

        last_tick = time.perf_counter()

        while True:
            ret, frame = self.cap.read()
            if not ret:
                print("Failed to read frame from camera")
                break

            pose_landmarks = self.tracker.process(frame)

            # Preview is mirrored like a selfie camera
            frame = cv2.flip(frame, 1)
            frame_wh = (frame.shape[1], frame.shape[0])

            result = self.gesture_processor.process_frame(pose_landmarks, frame_wh)
            if result.changed:
                self.animator.on_gesture_change(result.confirmed)
            await self.feedback.notify(result.confirmed)
            # Yield so speech tasks run between frames
            await asyncio.sleep(0)

            now = time.perf_counter()
            avatar = self.animator.advance(now - last_tick)
            last_tick = now

            self._draw_status(frame, result)

            if display.show_avatar:
                frame = np.hstack([frame, render_avatar(avatar, frame.shape[0])])

            cv2.imshow(display.window_name, frame)

            key = cv2.waitKey(1) & 0xFF
            if key == ord('q'):
                break
            if key == ord('s'):
                self.feedback.toggle_sound()

        # Cleanup
        await self.feedback.drain()
        self.tracker.close()
        self.cap.release()
        cv2.destroyAllWindows()

    def _draw_status(self, frame: np.ndarray, result: GestureFrame) -> None:
        display = self.config.display

        if result.landmarks is not None:
            if display.show_landmarks:
                draw_landmarks(frame, result.landmarks, mirrored=True)
            if display.show_cursor and result.cursor is not None:
                cx, cy = (int(v) for v in result.cursor)
                cv2.circle(frame, (cx, cy), 10, (255, 212, 0), 2)
            status_text = f"Hand: raw={result.raw.value}"
        else:
            status_text = "No hand detected"

        label = DISPLAY_LABELS.get(result.confirmed)
        gesture_status = f"Gesture: {label}" if label else "No gesture detected"
        sound_status = "Sound: on" if self.feedback.sound_enabled else "Sound: muted"

        cv2.putText(frame, status_text, (10, 30), cv2.FONT_HERSHEY_SIMPLEX, 0.7, (255, 255, 255), 2)
        cv2.putText(frame, gesture_status, (10, 60), cv2.FONT_HERSHEY_SIMPLEX, 0.6,
                    (0, 255, 0) if label else (0, 0, 255), 2)
        cv2.putText(frame, sound_status, (10, 90), cv2.FONT_HERSHEY_SIMPLEX, 0.5, (255, 255, 255), 1)
        cv2.putText(frame, "Press 'q' to quit", (10, frame.shape[0] - 20),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.5, (255, 255, 255), 1)

    def __del__(self):
        """Cleanup resources."""
        if hasattr(self, 'cap') and self.cap.isOpened():
            self.cap.release()


def render_avatar(pose: Pose, height: int, width: int = 320) -> np.ndarray:
    """
    Draw a schematic front view of the puppet.

    Depth scales the figure and yaw narrows the torso. Each arm is drawn at
    its swing plus lift angle, measured outward from hanging straight down.
    """
    panel = np.full((height, width, 3), (46, 26, 26), dtype=np.uint8)

    scale = 60.0 / (1.0 + 0.25 * pose.z)
    cx = width // 2
    cy = int(height * 0.6 - pose.y * scale)

    half_w = max(2, int(0.6 * scale * abs(math.cos(pose.yaw))))
    half_h = int(0.9 * scale)
    cv2.rectangle(panel, (cx - half_w, cy - half_h), (cx + half_w, cy + half_h), (255, 212, 0), 2)
    cv2.circle(panel, (cx, cy - half_h - int(0.5 * scale)), int(0.5 * scale), (255, 212, 0), 2)

    arm_len = 1.2 * scale
    for side, lift, swing in ((-1, pose.left_arm_x, pose.left_arm_z),
                              (1, pose.right_arm_x, pose.right_arm_z)):
        shoulder = (cx + side * half_w, cy - int(0.6 * scale))
        # Left swing is positive outward, right swing negative
        theta = -side * swing - lift
        hand = (int(shoulder[0] + side * arm_len * math.sin(theta)),
                int(shoulder[1] + arm_len * math.cos(theta)))
        cv2.line(panel, shoulder, hand, (255, 255, 255), 3)

    cv2.putText(panel, f"y={pose.y:+.2f} z={pose.z:+.2f} yaw={pose.yaw:.1f}", (10, 20),
                cv2.FONT_HERSHEY_SIMPLEX, 0.45, (255, 255, 255), 1)
    return panel


async def main():
    """Entry point for the application."""
    logging.basicConfig(level=logging.INFO)

    args = sys.argv[1:]
    config_path = None
    if "--config" in args:
        position = args.index("--config")
        if position + 1 >= len(args):
            print("Usage: cyberpuppet [--config PATH] [--mute] [--speech]")
            return
        config_path = args[position + 1]

    app = None
    try:
        app = PuppetApp(config_path=config_path,
                        use_speech="--speech" in args,
                        muted="--mute" in args)
        await app.run()
    except KeyboardInterrupt:
        print("\nApplication interrupted by user")
    except (RuntimeError, FileNotFoundError, ValueError) as e:
        print(f"Error: {e}")


def run():
    """Console script entry point."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\nApplication interrupted by user")


if __name__ == "__main__":
    run()
