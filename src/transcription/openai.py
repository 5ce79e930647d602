"""OpenAITranscriptionClient — OpenAI audio transcription with segment timestamps."""
import io
import logging
from typing import Any

from openai import APIConnectionError, APIStatusError, AsyncOpenAI

from src.constants import (
    DEFAULT_AUDIO_FILENAME,
    MSG_NETWORK_ERROR,
    MSG_OPENAI_UNKNOWN_ERROR,
    OPENAI_RESPONSE_FORMAT,
    OPENAI_TIMESTAMP_GRANULARITIES,
)
from src.transcription.client import TranscriptionClient
from src.transcription.errors import DecodingError, NetworkError, ProviderError
from src.transcription.formatting import estimate_cost, format_segments
from src.transcription.types import (
    AudioFile,
    Segment,
    SegmentedTranscript,
    TranscriptionResult,
)

logger = logging.getLogger(__name__)


def _field(obj: Any, name: str) -> Any:
    match obj:
        case dict():
            return obj.get(name)
        case _:
            return getattr(obj, name, None)


def decode_verbose_json(response: Any) -> SegmentedTranscript:
    """Validate a verbose_json reply (SDK model or plain dict) in one step."""
    duration = _field(response, "duration")
    raw_segments = _field(response, "segments")
    match (duration, raw_segments):
        case (int() | float(), list() | tuple()):
            pass
        case _:
            raise DecodingError("OpenAI response is missing duration or segments")
    try:
        segments = tuple(
            Segment(
                start=float(_field(s, "start")),
                end=float(_field(s, "end")),
                text=str(_field(s, "text") or ""),
            )
            for s in raw_segments
        )
    except (TypeError, ValueError) as exc:
        raise DecodingError(f"Malformed OpenAI segment: {exc}") from exc
    return SegmentedTranscript(duration=float(duration), segments=segments)


def _error_message(exc: APIStatusError) -> str:
    match exc.body:
        case {"message": str() as m} if m:
            return m
        case {"error": {"message": str() as m}} if m:
            return m
        case _:
            return MSG_OPENAI_UNKNOWN_ERROR


class OpenAITranscriptionClient(TranscriptionClient):

    def __init__(self, api_key: str) -> None:
        self._api_key = api_key

    async def transcribe(self, model: str, audio: AudioFile) -> TranscriptionResult:
        client = AsyncOpenAI(api_key=self._api_key)
        audio_file = io.BytesIO(audio.data)
        audio_file.name = audio.filename or DEFAULT_AUDIO_FILENAME
        try:
            response = await client.audio.transcriptions.create(
                model=model,
                file=audio_file,
                response_format=OPENAI_RESPONSE_FORMAT,
                timestamp_granularities=OPENAI_TIMESTAMP_GRANULARITIES,
            )
        except APIStatusError as exc:
            logger.error("OpenAI returned %s", exc.status_code)
            raise ProviderError(_error_message(exc), exc.status_code) from exc
        except APIConnectionError as exc:
            raise NetworkError(MSG_NETWORK_ERROR % ("OpenAI", exc)) from exc

        decoded = decode_verbose_json(response)
        return TranscriptionResult(
            transcription=format_segments(decoded.segments),
            duration_seconds=decoded.duration,
            cost_usd=estimate_cost(decoded.duration, model),
        )


async def transcribe_with_openai(api_key: str, model: str, audio: AudioFile) -> TranscriptionResult:
    return await OpenAITranscriptionClient(api_key).transcribe(model, audio)
