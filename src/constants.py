"""All magic values live here — no inline literals anywhere else."""

# Telegram chat-action re-send interval (seconds).
# A chat action expires after ~5 s, so we refresh every 4 s.
TELEGRAM_ACTION_INTERVAL: float = 4.0
TELEGRAM_MESSAGE_LIMIT = 4096

# Providers / models
PROVIDER_OPENAI = "openai"
PROVIDER_GEMINI = "gemini"
DEFAULT_PROVIDER = PROVIDER_OPENAI

MODELS: dict[str, tuple[tuple[str, str], ...]] = {
    PROVIDER_OPENAI: (
        ("whisper-1", "Whisper-1 (recommended, most compatible)"),
        ("gpt-4o", "GPT-4o (higher quality, requires access)"),
    ),
    PROVIDER_GEMINI: (
        ("gemini-2.5-pro", "Gemini 2.5 Pro (best quality)"),
        ("gemini-2.5-flash", "Gemini 2.5 Flash (fast and efficient)"),
        ("gemini-2.5-flash-lite-preview-06-17", "Gemini 2.5 Flash Lite (experimental)"),
    ),
}

# USD per minute of audio. Gemini bills per token, so it has no time-based rate.
PRICING: dict[str, float] = {
    "whisper-1": 0.006,
    "gpt-4o": 0.015,
    "gemini-2.5-pro": 0,
    "gemini-2.5-flash": 0,
    "gemini-2.5-flash-lite-preview-06-17": 0,
}

# OpenAI request options
OPENAI_RESPONSE_FORMAT = "verbose_json"
OPENAI_TIMESTAMP_GRANULARITIES = ["segment"]

# Gemini request options
GEMINI_TEMPERATURE = 0.2
GEMINI_DEFAULT_MIME_TYPE = "audio/mp3"
GEMINI_PROMPT = (
    "Your task is to produce high-quality, accurate subtitles suitable for the "
    "audience, faithfully capturing the dialogue. Number each segment, assign its "
    "timestamp and transcribe what is said. Do not stop until you are finished and "
    "do not skip any dialogue. The exact output format must be:\n\n"
    "SEGMENT NUMBER\n"
    "START_TIMESTAMP --> END_TIMESTAMP\n"
    "DIALOGUE TRANSCRIPTION"
)

# Result formatting
NOT_AVAILABLE_TEXT = "N/A"
COST_DECIMALS = 5
ELAPSED_DECIMALS = 2
DEFAULT_AUDIO_FILENAME = "audio.mp3"
VOICE_FILENAME = "voice.ogg"
EXPORT_FILENAME = "transcript.txt"

# Settings store keys (one entry per provider key plus the last selection)
STORE_KEY_SUFFIX = "ApiKey"
STORE_SELECTED_PROVIDER = "selectedProvider"
STORE_SELECTED_MODEL = "selectedModel"

# Provider fallback error messages
MSG_OPENAI_UNKNOWN_ERROR = "Unknown error from the OpenAI API"
MSG_GEMINI_UNKNOWN_ERROR = "Unknown error from the Gemini API"
MSG_NETWORK_ERROR = "Could not reach %s: %s"

# Log messages
MSG_BOT_STARTING = "Starting transcription bot…"
MSG_BLOCKED_CHAT = "Blocked update from chat_id: %s"
MSG_SEND_FAIL = "Telegram send failed: %s"
MSG_TRANSCRIBE_START = "→ %s (%s), %d bytes"
MSG_TRANSCRIBE_DONE = "✓ Transcribed in %ss"
MSG_TRANSCRIBE_FAILED = "✗ Transcription failed: %s"

# User-facing messages
MSG_MISSING_INPUT = "Please make sure you have an API key saved and an audio file selected."
MSG_ALREADY_RUNNING = "A transcription is already in progress — please wait for it to finish."
MSG_STATUS_PROCESSING = "Audio sent. Waiting for a response from %s… (this may take a while)"
MSG_STATUS_DONE = "Transcription complete!"
MSG_STATUS_ERROR = "Error: %s"
MSG_STATS = (
    "Processing time: %s seconds\n"
    "Audio duration: %s\n"
    "Estimated cost (USD): %s"
)
MSG_DURATION_SECONDS = "%s seconds"
MSG_COST_USD = "$%s"
MSG_EMPTY_TRANSCRIPT = "(empty transcript)"

MSG_AUDIO_SELECTED = "Audio selected: %s — send /transcribe to start."
MSG_AUDIO_DOWNLOAD_FAILED = "Could not download the audio file — please try again."
MSG_NOTHING_TO_EXPORT = "Nothing to export yet — run /transcribe first."

MSG_KEY_SAVED = "API key for %s saved successfully!"
MSG_KEY_EMPTY = "Please enter a %s API key."
MSG_KEY_USAGE = "Usage: /key <openai|gemini> <api-key>"
MSG_UNKNOWN_PROVIDER = "Unknown provider: %s (choose openai or gemini)"
MSG_UNKNOWN_MODEL = "Unknown model for %s: %s"

MSG_PROVIDER_SET = "Provider set to %s.\n\n%s"
MSG_MODEL_SET = "Model set to %s."
MSG_MODEL_LIST_HEADER = "Models for %s (current: %s):"
MSG_MODEL_LIST_ITEM = "  %s %s — %s"

CMD_START = "start"
CMD_HELP = "help"
CMD_PROVIDER = "provider"
CMD_MODEL = "model"
CMD_KEY = "key"
CMD_STATUS = "status"
CMD_TRANSCRIBE = "transcribe"
CMD_EXPORT = "export"

MSG_STATUS = (
    "Status\n"
    "  Provider : %s\n"
    "  Model    : %s\n"
    "  OpenAI   : %s\n"
    "  Gemini   : %s\n"
    "  Audio    : %s\n"
)
MSG_KEY_NOT_SAVED = "no key"
MSG_KEY_MASKED = "saved"
MSG_NO_AUDIO = "none selected"

MSG_HELP = (
    "transcript-bot — audio to subtitles from your chat\n"
    "\n"
    "Commands:\n"
    "  /help                       — show this message\n"
    "  /status                     — current settings at a glance\n"
    "  /provider <openai|gemini>   — choose the transcription provider\n"
    "  /model <id>                 — choose a model for the provider\n"
    "  /key <openai|gemini> <key>  — save an API key\n"
    "  /transcribe                 — transcribe the selected audio\n"
    "  /export                     — download the last transcript\n"
    "\n"
    "Send an audio file or voice note to select it.\n"
)
