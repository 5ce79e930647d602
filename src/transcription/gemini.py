"""GeminiTranscriptionClient — Gemini generation prompted to write subtitles."""
import logging
from typing import Any

import httpx
from google import genai
from google.genai import errors, types

from src.constants import (
    GEMINI_DEFAULT_MIME_TYPE,
    GEMINI_PROMPT,
    GEMINI_TEMPERATURE,
    MSG_GEMINI_UNKNOWN_ERROR,
    MSG_NETWORK_ERROR,
)
from src.transcription.client import TranscriptionClient
from src.transcription.errors import DecodingError, NetworkError, ProviderError
from src.transcription.types import (
    NOT_AVAILABLE,
    AudioFile,
    GeneratedTranscript,
    TranscriptionResult,
)

logger = logging.getLogger(__name__)


def decode_generation(response: Any) -> GeneratedTranscript:
    """First candidate's first text part, or DecodingError — never an empty fallback."""
    candidates = getattr(response, "candidates", None)
    match candidates:
        case [first, *_]:
            pass
        case _:
            raise DecodingError("Gemini response contains no candidates")
    content = getattr(first, "content", None)
    parts = getattr(content, "parts", None) if content is not None else None
    match parts:
        case [part, *_]:
            pass
        case _:
            raise DecodingError("Gemini candidate contains no content parts")
    match getattr(part, "text", None):
        case str() as text:
            return GeneratedTranscript(text=text)
        case _:
            raise DecodingError("Gemini content part contains no text")


def build_contents(audio: AudioFile) -> list[types.Content]:
    """Prompt + whole audio file as one inline part (base64 on the wire)."""
    return [
        types.Content(
            role="user",
            parts=[
                types.Part.from_text(text=GEMINI_PROMPT),
                types.Part.from_bytes(
                    data=audio.data,
                    mime_type=audio.mime_type or GEMINI_DEFAULT_MIME_TYPE,
                ),
            ],
        )
    ]


class GeminiTranscriptionClient(TranscriptionClient):

    def __init__(self, api_key: str) -> None:
        self._api_key = api_key

    async def transcribe(self, model: str, audio: AudioFile) -> TranscriptionResult:
        client = genai.Client(api_key=self._api_key)
        try:
            response = await client.aio.models.generate_content(
                model=model,
                contents=build_contents(audio),
                config=types.GenerateContentConfig(temperature=GEMINI_TEMPERATURE),
            )
        except errors.APIError as exc:
            logger.error("Gemini returned %s", exc.code)
            raise ProviderError(exc.message or MSG_GEMINI_UNKNOWN_ERROR, exc.code) from exc
        except (httpx.TransportError, OSError) as exc:
            raise NetworkError(MSG_NETWORK_ERROR % ("Gemini", exc)) from exc

        decoded = decode_generation(response)
        # Gemini bills per token and does not report the audio length.
        return TranscriptionResult(
            transcription=decoded.text,
            duration_seconds=NOT_AVAILABLE,
            cost_usd=NOT_AVAILABLE,
        )


async def transcribe_with_gemini(api_key: str, model: str, audio: AudioFile) -> TranscriptionResult:
    return await GeminiTranscriptionClient(api_key).transcribe(model, audio)
