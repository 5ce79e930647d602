"""Telegram "typing…" indicator, re-sent every few seconds while an attempt runs."""
import asyncio
import logging

from telegram import Bot
from telegram.constants import ChatAction

from src.bot_client import ActivityIndicator
from src.constants import TELEGRAM_ACTION_INTERVAL

logger = logging.getLogger(__name__)


async def _keep_typing(bot: Bot, chat_id: int, stop: asyncio.Event) -> None:
    # Telegram clears a chat action after ~5s or at the next message.
    while not stop.is_set():
        try:
            await bot.send_chat_action(chat_id=chat_id, action=ChatAction.TYPING)
        except Exception as exc:
            logger.debug("Chat action for %s failed: %s", chat_id, exc)
        try:
            await asyncio.wait_for(stop.wait(), timeout=TELEGRAM_ACTION_INTERVAL)
        except asyncio.TimeoutError:
            pass


class TelegramActivityIndicator(ActivityIndicator):
    """One indicator per attempt. The chat is bound at start()."""

    def __init__(self, bot: Bot) -> None:
        self._bot = bot
        self._stop_event: asyncio.Event | None = None
        self._task: asyncio.Task | None = None

    @property
    def active(self) -> bool:
        return self._task is not None

    async def start(self, to: str) -> None:
        await self.stop(to)
        self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(_keep_typing(self._bot, int(to), self._stop_event))

    async def stop(self, to: str) -> None:
        if self._stop_event is not None:
            self._stop_event.set()
            self._stop_event = None

        task, self._task = self._task, None
        match task:
            case None:
                return
            case _:
                task.cancel()
                try:
                    await task
                except asyncio.CancelledError:
                    pass
