"""Speech-to-text capability."""

import logging
from abc import ABC, abstractmethod

from openai import OpenAI, OpenAIError

from src.errors import TranscriptionError
from src.speech.audio_files import suffix_for, temporary_audio_file

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "whisper-1"


class Transcriber(ABC):
    """Interface for audio → text."""

    @abstractmethod
    def transcribe(self, audio: bytes, filename: str = "question.webm") -> str:
        """Return the transcript of audio.

        Args:
            audio: Encoded audio bytes.
            filename: Original name, used to infer the audio format.

        Raises:
            TranscriptionError: If the backend fails.
        """
        ...


class WhisperTranscriber(Transcriber):
    """OpenAI Whisper transcription.

    The upload is spooled to a temporary file first, matching how recorder
    uploads arrive; the file is removed on every exit path.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = DEFAULT_MODEL,
        language: str | None = None,
        client: OpenAI | None = None,
        timeout: float | None = None,
    ):
        self._client = client or OpenAI(api_key=api_key or None, timeout=timeout, max_retries=0)
        self._model = model
        self._language = language

    def transcribe(self, audio: bytes, filename: str = "question.webm") -> str:
        if not audio:
            raise TranscriptionError("No audio to transcribe")
        kwargs = {"model": self._model}
        if self._language:
            kwargs["language"] = self._language
        with temporary_audio_file(audio, suffix=suffix_for(filename)) as path:
            try:
                with open(path, "rb") as handle:
                    response = self._client.audio.transcriptions.create(file=handle, **kwargs)
            except OpenAIError as e:
                raise TranscriptionError(f"Whisper transcription failed: {e}") from e
        text = (response.text or "").strip()
        logger.info("Transcription: %s", text)
        return text
