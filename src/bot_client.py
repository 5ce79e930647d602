"""Abstract interfaces for the chat transport."""
import io
from abc import ABC, abstractmethod


class ActivityIndicator(ABC):
    @abstractmethod
    async def start(self, to: str) -> None: ...

    @abstractmethod
    async def stop(self, to: str) -> None: ...


class BotClient(ABC):
    @abstractmethod
    def run(self) -> None: ...

    @abstractmethod
    async def send_message(self, to: str, text: str) -> bool: ...

    @abstractmethod
    async def send_document(self, to: str, filename: str, content: io.BytesIO) -> bool: ...
