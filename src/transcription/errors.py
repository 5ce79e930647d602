"""Failure kinds surfaced by the transcription adapters and the session."""


class TranscriptionError(Exception):
    """Base class — message is what the user sees after "Error:"."""

    @property
    def message(self) -> str:
        return str(self)


class ValidationError(TranscriptionError):
    """Missing API key / audio, or an attempt already running. Nothing is sent."""


class NetworkError(TranscriptionError):
    """The provider could not be reached."""


class ProviderError(TranscriptionError):
    """The provider answered with a non-success status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class DecodingError(TranscriptionError):
    """The provider answered, but not in the expected shape."""
