"""Provider adapters: request shape, normalization, error translation."""
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import openai
import pytest
from google.genai import errors as genai_errors

from src.constants import (
    GEMINI_PROMPT,
    GEMINI_TEMPERATURE,
    MSG_GEMINI_UNKNOWN_ERROR,
    MSG_OPENAI_UNKNOWN_ERROR,
)
from src.transcription.client import TranscriptionClient
from src.transcription.errors import DecodingError, NetworkError, ProviderError
from src.transcription.gemini import (
    GeminiTranscriptionClient,
    decode_generation,
    transcribe_with_gemini,
)
from src.transcription.openai import (
    OpenAITranscriptionClient,
    decode_verbose_json,
    transcribe_with_openai,
)
from src.transcription.types import NOT_AVAILABLE, AudioFile

OPENAI_URL = "https://api.openai.com/v1/audio/transcriptions"


def make_audio() -> AudioFile:
    return AudioFile(data=b"fake-audio-data", filename="talk.mp3", mime_type="audio/mpeg")


def verbose_response(duration: float, texts: list[str]) -> SimpleNamespace:
    segments = [
        SimpleNamespace(start=float(i * 10), end=float(i * 10 + 9.5), text=f" {t} ")
        for i, t in enumerate(texts)
    ]
    return SimpleNamespace(duration=duration, segments=segments, text=" ".join(texts))


def mock_openai_returning(response=None, side_effect=None) -> MagicMock:
    mock_openai = MagicMock()
    mock_openai.audio.transcriptions.create = AsyncMock(
        return_value=response, side_effect=side_effect
    )
    return mock_openai


def gemini_response(text: str) -> SimpleNamespace:
    part = SimpleNamespace(text=text)
    candidate = SimpleNamespace(content=SimpleNamespace(parts=[part]))
    return SimpleNamespace(candidates=[candidate])


def mock_genai_returning(response=None, side_effect=None) -> MagicMock:
    mock_client = MagicMock()
    mock_client.aio.models.generate_content = AsyncMock(
        return_value=response, side_effect=side_effect
    )
    return mock_client


def test_clients_implement_abc():
    assert issubclass(OpenAITranscriptionClient, TranscriptionClient)
    assert issubclass(GeminiTranscriptionClient, TranscriptionClient)


# ── OpenAI ────────────────────────────────────────────────────────────────────


async def test_openai_requests_verbose_json_with_segments():
    mock_openai = mock_openai_returning(verbose_response(20, ["hi", "there"]))

    with patch("src.transcription.openai.AsyncOpenAI", return_value=mock_openai) as mock_cls:
        await transcribe_with_openai("sk-test", "whisper-1", make_audio())

    mock_cls.assert_called_once_with(api_key="sk-test")
    kwargs = mock_openai.audio.transcriptions.create.call_args.kwargs
    assert kwargs["model"] == "whisper-1"
    assert kwargs["response_format"] == "verbose_json"
    assert kwargs["timestamp_granularities"] == ["segment"]
    assert kwargs["file"].name == "talk.mp3"
    assert kwargs["file"].read() == b"fake-audio-data"


async def test_openai_ninety_second_file_two_segments():
    mock_openai = mock_openai_returning(verbose_response(90, ["hello", "world"]))

    with patch("src.transcription.openai.AsyncOpenAI", return_value=mock_openai):
        result = await transcribe_with_openai("sk-test", "whisper-1", make_audio())

    assert result.transcription == (
        "0\n00:00:00,000 --> 00:00:09,500\nhello"
        "\n\n"
        "1\n00:00:10,000 --> 00:00:19,500\nworld"
    )
    assert result.duration_seconds == 90
    assert result.cost_usd == "0.00900"


async def test_openai_accepts_plain_dict_response():
    response = {
        "duration": 120,
        "segments": [{"start": 0, "end": 1.5, "text": "only"}],
    }
    mock_openai = mock_openai_returning(response)

    with patch("src.transcription.openai.AsyncOpenAI", return_value=mock_openai):
        result = await transcribe_with_openai("sk-test", "whisper-1", make_audio())

    assert result.transcription == "0\n00:00:00,000 --> 00:00:01,500\nonly"
    assert result.cost_usd == "0.01200"


async def test_openai_status_error_surfaces_provider_message():
    request = httpx.Request("POST", OPENAI_URL)
    response = httpx.Response(401, request=request)
    exc = openai.AuthenticationError(
        "Error code: 401", response=response, body={"message": "Incorrect API key provided"}
    )
    mock_openai = mock_openai_returning(side_effect=exc)

    with patch("src.transcription.openai.AsyncOpenAI", return_value=mock_openai):
        with pytest.raises(ProviderError) as info:
            await transcribe_with_openai("sk-bad", "whisper-1", make_audio())

    assert info.value.message == "Incorrect API key provided"
    assert info.value.status_code == 401


async def test_openai_status_error_without_message_uses_fallback():
    request = httpx.Request("POST", OPENAI_URL)
    response = httpx.Response(500, request=request)
    exc = openai.InternalServerError("Error code: 500", response=response, body=None)
    mock_openai = mock_openai_returning(side_effect=exc)

    with patch("src.transcription.openai.AsyncOpenAI", return_value=mock_openai):
        with pytest.raises(ProviderError, match=MSG_OPENAI_UNKNOWN_ERROR):
            await transcribe_with_openai("sk-test", "whisper-1", make_audio())


async def test_openai_connection_error_becomes_network_error():
    exc = openai.APIConnectionError(request=httpx.Request("POST", OPENAI_URL))
    mock_openai = mock_openai_returning(side_effect=exc)

    with patch("src.transcription.openai.AsyncOpenAI", return_value=mock_openai):
        with pytest.raises(NetworkError):
            await transcribe_with_openai("sk-test", "whisper-1", make_audio())


def test_decode_verbose_json_missing_segments_raises():
    with pytest.raises(DecodingError):
        decode_verbose_json(SimpleNamespace(duration=10.0, segments=None))


def test_decode_verbose_json_missing_duration_raises():
    with pytest.raises(DecodingError):
        decode_verbose_json({"segments": []})


def test_decode_verbose_json_bad_segment_raises():
    with pytest.raises(DecodingError):
        decode_verbose_json({"duration": 5, "segments": [{"start": None, "end": 1, "text": "x"}]})


async def test_openai_identical_responses_give_identical_text():
    mock_openai = mock_openai_returning(verbose_response(42.25, ["a", "b", "c"]))

    with patch("src.transcription.openai.AsyncOpenAI", return_value=mock_openai):
        first = await transcribe_with_openai("sk-test", "whisper-1", make_audio())
        second = await transcribe_with_openai("sk-test", "whisper-1", make_audio())

    assert first.transcription.encode() == second.transcription.encode()


# ── Gemini ────────────────────────────────────────────────────────────────────


async def test_gemini_sends_prompt_and_inline_audio():
    mock_client = mock_genai_returning(gemini_response("0\n00:00:00,000 --> 00:00:01,000\nhi"))

    with patch("src.transcription.gemini.genai.Client", return_value=mock_client) as mock_cls:
        await transcribe_with_gemini("g-key", "gemini-2.5-flash", make_audio())

    mock_cls.assert_called_once_with(api_key="g-key")
    kwargs = mock_client.aio.models.generate_content.call_args.kwargs
    assert kwargs["model"] == "gemini-2.5-flash"
    assert kwargs["config"].temperature == GEMINI_TEMPERATURE
    parts = kwargs["contents"][0].parts
    assert parts[0].text == GEMINI_PROMPT
    assert parts[1].inline_data.data == b"fake-audio-data"
    assert parts[1].inline_data.mime_type == "audio/mpeg"


async def test_gemini_defaults_mime_type_when_unknown():
    mock_client = mock_genai_returning(gemini_response("text"))
    audio = AudioFile(data=b"x", filename="clip", mime_type=None)

    with patch("src.transcription.gemini.genai.Client", return_value=mock_client):
        await transcribe_with_gemini("g-key", "gemini-2.5-pro", audio)

    parts = mock_client.aio.models.generate_content.call_args.kwargs["contents"][0].parts
    assert parts[1].inline_data.mime_type == "audio/mp3"


async def test_gemini_returns_text_verbatim_and_marks_stats_unavailable():
    raw = "1\n00:00:00,000 --> 00:00:02,000\n  Hola  \n"
    mock_client = mock_genai_returning(gemini_response(raw))

    with patch("src.transcription.gemini.genai.Client", return_value=mock_client):
        result = await transcribe_with_gemini("g-key", "gemini-2.5-pro", make_audio())

    assert result.transcription == raw
    assert result.duration_seconds is NOT_AVAILABLE
    assert result.cost_usd is NOT_AVAILABLE
    assert result.cost_usd != 0
    assert result.cost_usd != ""
    assert str(result.cost_usd) == "N/A"


async def test_gemini_api_error_surfaces_provider_message():
    exc = genai_errors.ClientError(
        400, {"error": {"message": "API key not valid.", "status": "INVALID_ARGUMENT"}}
    )
    mock_client = mock_genai_returning(side_effect=exc)

    with patch("src.transcription.gemini.genai.Client", return_value=mock_client):
        with pytest.raises(ProviderError) as info:
            await transcribe_with_gemini("bad", "gemini-2.5-pro", make_audio())

    assert info.value.message == "API key not valid."
    assert info.value.status_code == 400


async def test_gemini_api_error_without_message_uses_fallback():
    exc = genai_errors.ServerError(503, {})
    mock_client = mock_genai_returning(side_effect=exc)

    with patch("src.transcription.gemini.genai.Client", return_value=mock_client):
        with pytest.raises(ProviderError, match=MSG_GEMINI_UNKNOWN_ERROR):
            await transcribe_with_gemini("g-key", "gemini-2.5-pro", make_audio())


async def test_gemini_transport_error_becomes_network_error():
    mock_client = mock_genai_returning(side_effect=httpx.ConnectError("no route"))

    with patch("src.transcription.gemini.genai.Client", return_value=mock_client):
        with pytest.raises(NetworkError):
            await transcribe_with_gemini("g-key", "gemini-2.5-pro", make_audio())


def test_decode_generation_no_candidates_raises():
    with pytest.raises(DecodingError):
        decode_generation(SimpleNamespace(candidates=None))
    with pytest.raises(DecodingError):
        decode_generation(SimpleNamespace(candidates=[]))


def test_decode_generation_no_parts_raises():
    candidate = SimpleNamespace(content=SimpleNamespace(parts=[]))
    with pytest.raises(DecodingError):
        decode_generation(SimpleNamespace(candidates=[candidate]))


def test_decode_generation_part_without_text_raises():
    candidate = SimpleNamespace(content=SimpleNamespace(parts=[SimpleNamespace(text=None)]))
    with pytest.raises(DecodingError):
        decode_generation(SimpleNamespace(candidates=[candidate]))
