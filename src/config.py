from dataclasses import dataclass
from pathlib import Path
from typing import Optional
import os
from dotenv import load_dotenv

from src.settings_store import DEFAULT_STORE_PATH


@dataclass(frozen=True)
class Config:
    telegram_bot_token: str
    allowed_chat_id: str
    log_level: str
    settings_store_path: Path

    @classmethod
    def from_env(cls) -> "Config":
        load_dotenv()

        token = os.getenv("TELEGRAM_BOT_TOKEN")
        chat_id = os.getenv("ALLOWED_CHAT_ID")
        log_level = os.getenv("LOG_LEVEL", "INFO")
        store_path = os.getenv("SETTINGS_STORE_PATH") or None

        return cls._validate(
            telegram_bot_token=token,
            allowed_chat_id=chat_id,
            log_level=log_level,
            settings_store_path=Path(store_path) if store_path else DEFAULT_STORE_PATH,
        )

    @staticmethod
    def _validate(
        telegram_bot_token: Optional[str],
        allowed_chat_id: Optional[str],
        log_level: str,
        settings_store_path: Path,
    ) -> "Config":
        match telegram_bot_token:
            case None | "":
                raise ValueError("TELEGRAM_BOT_TOKEN must be set in .env")
            case _:
                pass

        match allowed_chat_id:
            case None | "":
                raise ValueError("ALLOWED_CHAT_ID must be set in .env")
            case _:
                pass

        return Config(
            telegram_bot_token=telegram_bot_token,
            allowed_chat_id=allowed_chat_id.strip(),
            log_level=log_level,
            settings_store_path=settings_store_path,
        )
