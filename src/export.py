"""Transcript export — plain-text file ready to hand to the chat transport."""
import io

from src.constants import EXPORT_FILENAME


def export_transcript(text: str, filename: str = EXPORT_FILENAME) -> tuple[str, io.BytesIO] | None:
    match text.strip():
        case "":
            return None
        case _:
            buffer = io.BytesIO(text.encode("utf-8"))
            buffer.name = filename
            return filename, buffer


def split_message(text: str, limit: int) -> list[str]:
    """Split on line boundaries into chunks of at most `limit` characters."""
    chunks: list[str] = []
    current = ""
    for line in text.splitlines(keepends=True):
        while len(line) > limit:
            if current:
                chunks.append(current)
                current = ""
            chunks.append(line[:limit])
            line = line[limit:]
        if len(current) + len(line) > limit:
            chunks.append(current)
            current = ""
        current += line
    if current:
        chunks.append(current)
    return chunks
