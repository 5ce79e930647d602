"""SessionController — one transcription attempt per trigger, transport-agnostic."""
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum

from src.constants import (
    ELAPSED_DECIMALS,
    MSG_ALREADY_RUNNING,
    MSG_COST_USD,
    MSG_DURATION_SECONDS,
    MSG_MISSING_INPUT,
    MSG_STATS,
    MSG_STATUS_DONE,
    MSG_STATUS_ERROR,
    MSG_TRANSCRIBE_DONE,
    MSG_TRANSCRIBE_FAILED,
    MSG_TRANSCRIBE_START,
)
from src.settings_store import Settings, SettingsStore
from src.transcription.client import TranscriptionClient
from src.transcription.errors import TranscriptionError, ValidationError
from src.transcription.gemini import GeminiTranscriptionClient
from src.transcription.openai import OpenAITranscriptionClient
from src.transcription.types import (
    NOT_AVAILABLE,
    AudioFile,
    Provider,
    TranscriptionRequest,
    TranscriptionResult,
)

logger = logging.getLogger(__name__)

ClientFactory = Callable[[Provider, str], TranscriptionClient]
StartHook = Callable[[TranscriptionRequest], Awaitable[None]]


class SessionState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


# ── pure helpers (module-level so tests can import them directly) ──────────────


def make_client(provider: Provider, api_key: str) -> TranscriptionClient:
    match provider:
        case Provider.OPENAI:
            return OpenAITranscriptionClient(api_key)
        case Provider.GEMINI:
            return GeminiTranscriptionClient(api_key)


def _format_duration(duration: object) -> str:
    match duration:
        case float() | int() if float(duration).is_integer():
            return MSG_DURATION_SECONDS % int(duration)
        case float() | int():
            return MSG_DURATION_SECONDS % duration
        case _:
            return str(NOT_AVAILABLE)


def _format_cost(cost: object) -> str:
    match cost:
        case str():
            return MSG_COST_USD % cost
        case _:
            return str(NOT_AVAILABLE)


@dataclass(frozen=True)
class TranscriptionStats:
    elapsed_seconds: str
    duration: str
    cost: str

    @classmethod
    def from_result(cls, result: TranscriptionResult, elapsed: float) -> "TranscriptionStats":
        return cls(
            elapsed_seconds=f"{elapsed:.{ELAPSED_DECIMALS}f}",
            duration=_format_duration(result.duration_seconds),
            cost=_format_cost(result.cost_usd),
        )

    def render(self) -> str:
        return MSG_STATS % (self.elapsed_seconds, self.duration, self.cost)


@dataclass(frozen=True)
class TranscriptionOutcome:
    state: SessionState
    status: str
    transcript: str | None = None
    stats: TranscriptionStats | None = None

    @property
    def succeeded(self) -> bool:
        return self.state is SessionState.SUCCEEDED


# ── controller ────────────────────────────────────────────────────────────────


class SessionController:
    """Owns the current Settings and the selected audio; the store is touched only on load/save."""

    def __init__(
        self,
        store: SettingsStore,
        client_factory: ClientFactory = make_client,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self._store = store
        self._client_factory = client_factory
        self._clock = clock
        self._settings = store.load_settings()
        self._state = SessionState.IDLE
        self._audio: AudioFile | None = None
        self._outcome: TranscriptionOutcome | None = None

    # ── settings ──────────────────────────────────────────────────────────────

    @property
    def settings(self) -> Settings:
        return self._settings

    def select_provider(self, provider: Provider) -> Settings:
        self._settings = self._settings.with_provider(provider)
        self._store.save_settings(self._settings)
        return self._settings

    def select_model(self, model: str) -> Settings:
        self._settings = self._settings.with_model(model)
        self._store.save_settings(self._settings)
        return self._settings

    def save_api_key(self, provider: Provider, key: str) -> Settings:
        self._settings = self._settings.with_api_key(provider, key)
        self._store.save_settings(self._settings)
        return self._settings

    # ── audio / results ───────────────────────────────────────────────────────

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def audio(self) -> AudioFile | None:
        return self._audio

    def select_audio(self, audio: AudioFile) -> None:
        self._audio = audio

    @property
    def last_outcome(self) -> TranscriptionOutcome | None:
        return self._outcome

    @property
    def last_transcript(self) -> str:
        match self._outcome:
            case TranscriptionOutcome(transcript=str() as text):
                return text
            case _:
                return ""

    # ── transcription ─────────────────────────────────────────────────────────

    def build_request(self, audio: AudioFile | None = None) -> TranscriptionRequest:
        """Check preconditions for the selected provider. Raises ValidationError."""
        match self._state:
            case SessionState.RUNNING:
                raise ValidationError(MSG_ALREADY_RUNNING)
            case _:
                pass
        settings = self._settings
        audio = audio or self._audio
        api_key = settings.api_key().strip()
        match (api_key, audio):
            case ("", _) | (_, None):
                raise ValidationError(MSG_MISSING_INPUT)
            case _:
                return TranscriptionRequest(
                    provider=settings.provider,
                    model=settings.model,
                    api_key=api_key,
                    audio=audio,
                )

    async def transcribe(
        self, audio: AudioFile | None = None, on_start: StartHook | None = None
    ) -> TranscriptionOutcome:
        """Run one attempt: IDLE → RUNNING → SUCCEEDED | FAILED → IDLE.

        ValidationError is raised before anything changes (missing key / audio,
        or another attempt still running). Every other failure becomes a FAILED
        outcome with an "Error: ..." status.

        on_start is awaited once the session is RUNNING and before the provider
        is called, so concurrent triggers are rejected while it runs.
        """
        request = self.build_request(audio)

        self._state = SessionState.RUNNING
        self._outcome = None
        logger.info(
            MSG_TRANSCRIBE_START,
            request.provider.value,
            request.model,
            len(request.audio.data),
        )
        match on_start:
            case None:
                pass
            case hook:
                try:
                    await hook(request)
                except BaseException:
                    self._state = SessionState.IDLE
                    raise
        start = self._clock()
        try:
            client = self._client_factory(request.provider, request.api_key)
            result = await client.transcribe(request.model, request.audio)
        except TranscriptionError as exc:
            logger.error(MSG_TRANSCRIBE_FAILED, exc.message)
            outcome = TranscriptionOutcome(
                state=SessionState.FAILED, status=MSG_STATUS_ERROR % exc.message
            )
        except Exception as exc:
            logger.exception(MSG_TRANSCRIBE_FAILED, exc)
            outcome = TranscriptionOutcome(
                state=SessionState.FAILED, status=MSG_STATUS_ERROR % exc
            )
        else:
            stats = TranscriptionStats.from_result(result, self._clock() - start)
            logger.info(MSG_TRANSCRIBE_DONE, stats.elapsed_seconds)
            outcome = TranscriptionOutcome(
                state=SessionState.SUCCEEDED,
                status=MSG_STATUS_DONE,
                transcript=result.transcription,
                stats=stats,
            )
        finally:
            self._state = SessionState.IDLE

        self._outcome = outcome
        return outcome
