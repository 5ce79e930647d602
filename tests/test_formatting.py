from src.transcription.formatting import (
    estimate_cost,
    format_segment,
    format_segments,
    format_timestamp,
)
from src.transcription.types import Segment


# ── timestamps ────────────────────────────────────────────────────────────────


def test_format_timestamp_minutes_and_millis():
    assert format_timestamp(75.5) == "00:01:15,500"


def test_format_timestamp_zero():
    assert format_timestamp(0) == "00:00:00,000"


def test_format_timestamp_hours():
    assert format_timestamp(3723.042) == "01:02:03,042"


def test_format_timestamp_uses_comma_separator():
    assert "," in format_timestamp(1.25)
    assert "." not in format_timestamp(1.25)


# ── segments ──────────────────────────────────────────────────────────────────


def test_format_segment_block_layout():
    block = format_segment(3, Segment(start=1.0, end=2.5, text="  hello there "))
    assert block == "3\n00:00:01,000 --> 00:00:02,500\nhello there"


def test_format_segments_one_block_per_segment():
    segments = [
        Segment(start=0.0, end=1.0, text="one"),
        Segment(start=1.0, end=2.0, text="two"),
        Segment(start=2.0, end=3.0, text="three"),
    ]

    text = format_segments(segments)
    blocks = text.split("\n\n")

    assert len(blocks) == 3
    assert [b.split("\n")[0] for b in blocks] == ["0", "1", "2"]


def test_format_segments_empty_list_gives_empty_text():
    assert format_segments([]) == ""


# ── cost ──────────────────────────────────────────────────────────────────────


def test_estimate_cost_whisper_two_minutes():
    assert estimate_cost(120, "whisper-1") == "0.01200"


def test_estimate_cost_gpt4o_rate():
    assert estimate_cost(60, "gpt-4o") == "0.01500"


def test_estimate_cost_unknown_model_is_zero():
    assert estimate_cost(600, "some-new-model") == "0.00000"
