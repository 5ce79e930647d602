"""TelegramClient — chat front end for the session controller via python-telegram-bot."""
import io
import logging
from typing import Any, Awaitable, Callable, Optional

from telegram import Message, Update
from telegram.ext import Application, CommandHandler, ContextTypes
from telegram.ext import MessageHandler as TGMessageHandler
from telegram.ext import filters

from src.bot_client import BotClient
from src.config import Config
from src.constants import (
    CMD_EXPORT,
    CMD_HELP,
    CMD_KEY,
    CMD_MODEL,
    CMD_PROVIDER,
    CMD_START,
    CMD_STATUS,
    CMD_TRANSCRIBE,
    DEFAULT_AUDIO_FILENAME,
    MODELS,
    MSG_AUDIO_DOWNLOAD_FAILED,
    MSG_AUDIO_SELECTED,
    MSG_BLOCKED_CHAT,
    MSG_EMPTY_TRANSCRIPT,
    MSG_HELP,
    MSG_KEY_MASKED,
    MSG_KEY_NOT_SAVED,
    MSG_KEY_SAVED,
    MSG_KEY_USAGE,
    MSG_MODEL_LIST_HEADER,
    MSG_MODEL_LIST_ITEM,
    MSG_MODEL_SET,
    MSG_NO_AUDIO,
    MSG_NOTHING_TO_EXPORT,
    MSG_PROVIDER_SET,
    MSG_SEND_FAIL,
    MSG_STATUS,
    MSG_STATUS_PROCESSING,
    MSG_UNKNOWN_PROVIDER,
    TELEGRAM_MESSAGE_LIMIT,
    VOICE_FILENAME,
)
from src.export import export_transcript, split_message
from src.session import SessionController, TranscriptionOutcome
from src.settings_store import Settings
from src.telegram.typing import TelegramActivityIndicator
from src.transcription.errors import ValidationError
from src.transcription.types import AudioFile, Provider, TranscriptionRequest

logger = logging.getLogger(__name__)

# callback signature: (sender, args, update) -> None
CommandCallback = Callable[[str, str, Update], Awaitable[None]]


# ── pure renderers (module-level so tests can import them directly) ────────────


def mask_key(key: str) -> str:
    match len(key):
        case 0:
            return MSG_KEY_NOT_SAVED
        case n if n <= 8:
            return MSG_KEY_MASKED
        case _:
            return f"{key[:3]}…{key[-4:]}"


def render_models(settings: Settings) -> str:
    lines = [MSG_MODEL_LIST_HEADER % (settings.provider.value, settings.model)]
    lines += [
        MSG_MODEL_LIST_ITEM % ("•" if model_id == settings.model else "◦", model_id, label)
        for model_id, label in MODELS[settings.provider.value]
    ]
    return "\n".join(lines)


def render_status(settings: Settings, audio: AudioFile | None) -> str:
    return MSG_STATUS % (
        settings.provider.value,
        settings.model,
        mask_key(settings.api_key(Provider.OPENAI)),
        mask_key(settings.api_key(Provider.GEMINI)),
        audio.filename if audio else MSG_NO_AUDIO,
    )


class TelegramClient(BotClient):

    def __init__(self, config: Config, controller: SessionController) -> None:
        self._token = config.telegram_bot_token
        self._allowed_chat_id = config.allowed_chat_id
        self._controller = controller
        self._app: Optional[Application] = None

    # ── BotClient interface ───────────────────────────────────────────────────

    def run(self) -> None:
        self._app = Application.builder().token(self._token).concurrent_updates(True).build()
        commands: dict[str, CommandCallback] = {
            CMD_START: self._on_help,
            CMD_HELP: self._on_help,
            CMD_STATUS: self._on_status,
            CMD_PROVIDER: self._on_provider,
            CMD_MODEL: self._on_model,
            CMD_KEY: self._on_key,
            CMD_TRANSCRIBE: self._on_transcribe,
            CMD_EXPORT: self._on_export,
        }
        for name, callback in commands.items():
            self._app.add_handler(CommandHandler(name, self._make_handler(callback)))
        self._app.add_handler(
            TGMessageHandler(
                filters.AUDIO | filters.VOICE | filters.Document.AUDIO,
                self._make_handler(self._on_audio),
            )
        )
        self._app.run_polling()

    async def send_message(self, to: str, text: str) -> bool:
        match self._app:
            case None:
                logger.error("send_message called before run()")
                return False
            case app:
                try:
                    for chunk in split_message(text, TELEGRAM_MESSAGE_LIMIT):
                        await app.bot.send_message(chat_id=int(to), text=chunk)
                    return True
                except Exception as exc:
                    logger.error(MSG_SEND_FAIL, exc)
                    return False

    async def send_document(self, to: str, filename: str, content: io.BytesIO) -> bool:
        match self._app:
            case None:
                logger.error("send_document called before run()")
                return False
            case app:
                try:
                    await app.bot.send_document(chat_id=int(to), document=content, filename=filename)
                    return True
                except Exception as exc:
                    logger.error(MSG_SEND_FAIL, exc)
                    return False

    # ── helpers (also used in tests) ─────────────────────────────────────────

    def _is_allowed(self, update: Update) -> bool:
        if update.effective_chat is None:
            return False
        return str(update.effective_chat.id).strip() == self._allowed_chat_id

    @staticmethod
    def _parse_key_args(args: str) -> tuple[Provider, str] | None:
        """Parse '<provider> <api-key>' → (provider, key) or None."""
        parts = args.strip().split(None, 1)
        match parts:
            case [name, key] if Provider.parse(name) is not None:
                return (Provider.parse(name), key.strip())
            case _:
                return None

    @staticmethod
    def _audio_attachment(message: Message | None) -> tuple[Any, str, str | None] | None:
        """Return (telegram file-like, filename, mime type) for an audio upload."""
        match message:
            case None:
                return None
            case _:
                pass
        if message.audio is not None:
            a = message.audio
            return (a, a.file_name or DEFAULT_AUDIO_FILENAME, a.mime_type)
        if message.voice is not None:
            v = message.voice
            return (v, VOICE_FILENAME, v.mime_type)
        if message.document is not None:
            d = message.document
            return (d, d.file_name or DEFAULT_AUDIO_FILENAME, d.mime_type)
        return None

    # ── internal handler factory ──────────────────────────────────────────────

    def _make_handler(self, callback: CommandCallback) -> Callable:
        async def _handler(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
            match self._is_allowed(update):
                case False:
                    chat_id = update.effective_chat.id if update.effective_chat else "?"
                    logger.warning(MSG_BLOCKED_CHAT, chat_id)
                    return
                case True:
                    pass
            sender = str(update.effective_chat.id)
            args = " ".join(context.args or [])
            await callback(sender, args, update)

        return _handler

    # ── callbacks ─────────────────────────────────────────────────────────────

    async def _on_help(self, sender: str, args: str, update: Update) -> None:
        await self.send_message(sender, MSG_HELP)

    async def _on_status(self, sender: str, args: str, update: Update) -> None:
        await self.send_message(
            sender, render_status(self._controller.settings, self._controller.audio)
        )

    async def _on_provider(self, sender: str, args: str, update: Update) -> None:
        match args.strip():
            case "":
                await self.send_message(sender, render_models(self._controller.settings))
            case name:
                match Provider.parse(name):
                    case None:
                        await self.send_message(sender, MSG_UNKNOWN_PROVIDER % name)
                    case provider:
                        settings = self._controller.select_provider(provider)
                        await self.send_message(
                            sender,
                            MSG_PROVIDER_SET % (provider.value, render_models(settings)),
                        )

    async def _on_model(self, sender: str, args: str, update: Update) -> None:
        match args.strip():
            case "":
                await self.send_message(sender, render_models(self._controller.settings))
            case model:
                try:
                    self._controller.select_model(model)
                except ValidationError as exc:
                    await self.send_message(sender, exc.message)
                    return
                await self.send_message(sender, MSG_MODEL_SET % model)

    async def _on_key(self, sender: str, args: str, update: Update) -> None:
        match self._parse_key_args(args):
            case None:
                await self.send_message(sender, MSG_KEY_USAGE)
                return
            case (provider, key):
                pass
        await self._delete_quietly(update.message)
        try:
            self._controller.save_api_key(provider, key)
        except ValidationError as exc:
            await self.send_message(sender, exc.message)
            return
        await self.send_message(sender, MSG_KEY_SAVED % provider.value)

    async def _on_audio(self, sender: str, args: str, update: Update) -> None:
        match self._audio_attachment(update.message):
            case None:
                return
            case (attachment, filename, mime_type):
                try:
                    tg_file = await attachment.get_file()
                    data = bytes(await tg_file.download_as_bytearray())
                except Exception:
                    logger.exception("Audio download failed")
                    await self.send_message(sender, MSG_AUDIO_DOWNLOAD_FAILED)
                    return
                self._controller.select_audio(
                    AudioFile(data=data, filename=filename, mime_type=mime_type)
                )
                await self.send_message(sender, MSG_AUDIO_SELECTED % filename)

    async def _on_transcribe(self, sender: str, args: str, update: Update) -> None:
        indicator = TelegramActivityIndicator(self._app.bot)

        async def announce(request: TranscriptionRequest) -> None:
            await self.send_message(sender, MSG_STATUS_PROCESSING % request.provider.value)
            await indicator.start(sender)

        try:
            outcome = await self._controller.transcribe(on_start=announce)
        except ValidationError as exc:
            await self.send_message(sender, exc.message)
            return
        finally:
            await indicator.stop(sender)
        await self._deliver(sender, outcome)

    async def _on_export(self, sender: str, args: str, update: Update) -> None:
        match export_transcript(self._controller.last_transcript):
            case None:
                await self.send_message(sender, MSG_NOTHING_TO_EXPORT)
            case (filename, content):
                await self.send_document(sender, filename, content)

    async def _deliver(self, sender: str, outcome: TranscriptionOutcome) -> None:
        await self.send_message(sender, outcome.status)
        match outcome:
            case TranscriptionOutcome(transcript=str() as text, stats=stats) if stats:
                await self.send_message(sender, text.strip() or MSG_EMPTY_TRANSCRIPT)
                await self.send_message(sender, stats.render())
            case _:
                pass

    @staticmethod
    async def _delete_quietly(message: Message | None) -> None:
        match message:
            case None:
                return
            case _:
                pass
        try:
            await message.delete()
        except Exception as exc:
            logger.debug("Could not delete key message: %s", exc)
