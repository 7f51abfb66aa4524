"""Text-to-speech capability."""

import logging
from abc import ABC, abstractmethod

from openai import OpenAI, OpenAIError

from src.errors import SynthesisError
from src.speech.audio_files import temporary_audio_file

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "tts-1"
DEFAULT_VOICE = "alloy"


class SpeechSynthesizer(ABC):
    """Interface for text → audio."""

    audio_format = "mp3"

    @abstractmethod
    def synthesize(self, text: str) -> bytes:
        """Return encoded audio of text being spoken.

        Raises:
            SynthesisError: If the backend fails.
        """
        ...


class OpenAISpeechSynthesizer(SpeechSynthesizer):
    """OpenAI text-to-speech.

    Audio is streamed to a temporary file and read back, so a dropped
    stream never leaves a half-written buffer in memory or on disk.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = DEFAULT_MODEL,
        voice: str = DEFAULT_VOICE,
        audio_format: str = "mp3",
        client: OpenAI | None = None,
        timeout: float | None = None,
    ):
        self._client = client or OpenAI(api_key=api_key or None, timeout=timeout, max_retries=0)
        self._model = model
        self._voice = voice
        self.audio_format = audio_format

    def synthesize(self, text: str) -> bytes:
        if not text or not text.strip():
            raise SynthesisError("Text to synthesize must not be empty")
        with temporary_audio_file(suffix=f".{self.audio_format}") as path:
            try:
                with self._client.audio.speech.with_streaming_response.create(
                    model=self._model,
                    voice=self._voice,
                    input=text,
                    response_format=self.audio_format,
                ) as response:
                    response.stream_to_file(path)
            except OpenAIError as e:
                raise SynthesisError(f"Speech synthesis failed: {e}") from e
            audio = path.read_bytes()
        if not audio:
            raise SynthesisError("Speech synthesis returned no audio")
        logger.info("Synthesized %d bytes of %s audio", len(audio), self.audio_format)
        return audio
