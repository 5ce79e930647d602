"""TranscriptionClient — abstract base for speech-to-text backends."""
from abc import ABC, abstractmethod

from src.transcription.types import AudioFile, TranscriptionResult


class TranscriptionClient(ABC):
    @abstractmethod
    async def transcribe(self, model: str, audio: AudioFile) -> TranscriptionResult:
        """Send one request and normalize the reply. Raises TranscriptionError."""
        ...
