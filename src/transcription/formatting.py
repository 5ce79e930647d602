"""Pure helpers turning decoded responses into the common result shape."""
from src.constants import COST_DECIMALS, PRICING
from src.transcription.types import Segment


def format_timestamp(seconds: float) -> str:
    """75.5 → '00:01:15,500' (subtitle convention, comma before millis)."""
    total_ms = int(round(seconds * 1000))
    hours, rem = divmod(total_ms, 3_600_000)
    minutes, rem = divmod(rem, 60_000)
    secs, millis = divmod(rem, 1000)
    return f"{hours:02d}:{minutes:02d}:{secs:02d},{millis:03d}"


def format_segment(index: int, segment: Segment) -> str:
    return (
        f"{index}\n"
        f"{format_timestamp(segment.start)} --> {format_timestamp(segment.end)}\n"
        f"{segment.text.strip()}"
    )


def format_segments(segments: tuple[Segment, ...] | list[Segment]) -> str:
    return "\n\n".join(format_segment(i, s) for i, s in enumerate(segments))


def estimate_cost(duration_seconds: float, model: str) -> str:
    """Per-minute price for the model (0 when unpriced), 5 decimal places."""
    rate = PRICING.get(model, 0)
    return f"{(duration_seconds / 60) * rate:.{COST_DECIMALS}f}"
