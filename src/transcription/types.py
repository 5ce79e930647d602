"""Request / result shapes shared by every transcription provider."""
from dataclasses import dataclass
from enum import Enum
from typing import Final, Union

from src.constants import NOT_AVAILABLE_TEXT, PROVIDER_GEMINI, PROVIDER_OPENAI


class Provider(str, Enum):
    OPENAI = PROVIDER_OPENAI
    GEMINI = PROVIDER_GEMINI

    @classmethod
    def parse(cls, name: str) -> "Provider | None":
        try:
            return cls(name.strip().lower())
        except ValueError:
            return None


class _NotAvailable:
    """Marker for a statistic the provider cannot report (distinct from zero)."""

    _instance: "_NotAvailable | None" = None

    def __new__(cls) -> "_NotAvailable":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NOT_AVAILABLE"

    def __str__(self) -> str:
        return NOT_AVAILABLE_TEXT


NOT_AVAILABLE: Final = _NotAvailable()


@dataclass(frozen=True)
class AudioFile:
    data: bytes
    filename: str
    mime_type: str | None = None


@dataclass(frozen=True)
class TranscriptionRequest:
    provider: Provider
    model: str
    api_key: str
    audio: AudioFile


@dataclass(frozen=True)
class TranscriptionResult:
    transcription: str
    duration_seconds: Union[float, _NotAvailable]
    cost_usd: Union[str, _NotAvailable]


# ── decoded provider responses ────────────────────────────────────────────────


@dataclass(frozen=True)
class Segment:
    start: float
    end: float
    text: str


@dataclass(frozen=True)
class SegmentedTranscript:
    """OpenAI verbose_json: total duration plus ordered timed segments."""

    duration: float
    segments: tuple[Segment, ...]


@dataclass(frozen=True)
class GeneratedTranscript:
    """Gemini: free-form text of the first candidate."""

    text: str
