"""
Spoken feedback for confirmed gesture transitions.
"""
import asyncio
import functools
import logging
import os
from typing import List, Optional, Set

from .config import FeedbackConfig
from .types import GestureLabel, SpeakerProto

logger = logging.getLogger(__name__)


class MockSpeaker:
    """Mock speaker that logs phrases instead of saying them."""

    def __init__(self):
        """Initialize the mock speaker."""
        self.spoken: List[str] = []

    async def speak(self, text: str) -> None:
        """Record the phrase instead of playing it."""
        self.spoken.append(text)
        logger.info(f"[MockSpeaker] Speak: {text!r} (call #{len(self.spoken)})")

    def reset_counters(self) -> None:
        """Forget recorded phrases for testing."""
        self.spoken.clear()


class ElevenLabsSpeaker:
    """
    Speaker backed by Eleven Labs text to speech.

    Requires the `speech` extra and ELEVEN_LABS_API_KEY in the environment or
    a .env file. Synthesis and playback block, so they run in a worker thread.
    """

    def __init__(self, api_key: Optional[str] = None,
                 voice_id: str = "JBFqnCBsd6RMkjVDRZzb",
                 model_id: str = "eleven_turbo_v2_5"):
        from dotenv import load_dotenv
        from elevenlabs import ElevenLabs

        load_dotenv()
        api_key = api_key or os.getenv("ELEVEN_LABS_API_KEY")
        if not api_key:
            raise RuntimeError("ELEVEN_LABS_API_KEY not found")

        self.client = ElevenLabs(api_key=api_key)
        self.voice_id = voice_id
        self.model_id = model_id

    def _say(self, text: str) -> None:
        from elevenlabs.play import play

        audio_generator = self.client.text_to_speech.convert(
            text=text,
            voice_id=self.voice_id,
            model_id=self.model_id,
            output_format="mp3_22050_32",
        )
        play(b"".join(audio_generator))

    async def speak(self, text: str) -> None:
        await asyncio.to_thread(self._say, text)


class GestureFeedback:
    """
    Speaks a phrase once for every newly confirmed gesture.

    Going back to NONE re-arms the dispatcher, so showing the same gesture
    again after the hand left is announced again.
    """

    def __init__(self, cfg: Optional[FeedbackConfig] = None,
                 speaker: Optional[SpeakerProto] = None):
        self.cfg = cfg or FeedbackConfig()
        self.speaker = speaker if speaker is not None else MockSpeaker()
        self.sound_enabled = self.cfg.sound_enabled
        self.previous = GestureLabel.NONE
        self.pending: Set[asyncio.Task] = set()

    def toggle_sound(self) -> bool:
        """Flip sound on or off and return the new setting."""
        self.sound_enabled = not self.sound_enabled
        logger.info(f"Sound {'enabled' if self.sound_enabled else 'muted'}")
        return self.sound_enabled

    def phrase_for(self, gesture: GestureLabel) -> Optional[str]:
        return self.cfg.phrases.get(gesture.value)

    async def notify(self, gesture: GestureLabel) -> Optional[str]:
        """
        React to the confirmed gesture for this tick.

        Speech runs as a background task; this returns without waiting for
        playback.

        Args:
            gesture: Confirmed gesture (may be unchanged since the last call)

        Returns:
            The phrase that was started, or None
        """
        if gesture == self.previous:
            return None
        self.previous = gesture

        if gesture is GestureLabel.NONE or not self.sound_enabled:
            return None

        phrase = self.phrase_for(gesture)
        if not phrase:
            return None

        task = asyncio.create_task(self.speaker.speak(phrase))
        self.pending.add(task)
        task.add_done_callback(functools.partial(self._on_spoken, phrase))
        return phrase

    def _on_spoken(self, phrase: str, task: "asyncio.Task[None]") -> None:
        self.pending.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"Failed to speak {phrase!r}: {error}")

    async def drain(self) -> None:
        """Wait for phrases still playing."""
        if self.pending:
            await asyncio.gather(*self.pending, return_exceptions=True)
