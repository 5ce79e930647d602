"""Entry point — wires Config → SettingsStore → SessionController → TelegramClient."""
import logging

from rich.logging import RichHandler

from src.config import Config
from src.constants import MSG_BOT_STARTING
from src.session import SessionController
from src.settings_store import SettingsStore
from src.telegram.client import TelegramClient


def _setup_logging(level: str) -> None:
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    list(map(root.removeHandler, root.handlers[:]))
    root.addHandler(RichHandler(rich_tracebacks=True))
    # httpx logs every provider request at INFO.
    logging.getLogger("httpx").setLevel(logging.WARNING)


def main() -> None:
    config = Config.from_env()
    _setup_logging(config.log_level)

    logger = logging.getLogger(__name__)
    logger.info(MSG_BOT_STARTING)

    controller = SessionController(SettingsStore(config.settings_store_path))
    client = TelegramClient(config, controller)
    client.run()


if __name__ == "__main__":
    main()
