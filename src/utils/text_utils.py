"""
Text utility functions for rendering call transcripts into email text.
"""
from typing import Optional, Sequence

from src.config import NO_DURATION_TEXT, NO_SUMMARY_TEXT, NO_TRANSCRIPT_TEXT, TRANSCRIPT_HEADER
from src.models.notification import TranscriptTurn, WebhookEvent


def format_transcript(turns: Optional[Sequence[TranscriptTurn]]) -> str:
    """
    Render transcript turns as readable text.

    Each turn becomes "ROLE: message", turns are separated by a blank line
    and the block starts with a header line. An empty or missing transcript
    yields a fixed placeholder line.

    Args:
        turns: Ordered transcript turns

    Returns:
        str: The formatted transcript
    """
    if not turns:
        return NO_TRANSCRIPT_TEXT

    blocks = [f"{turn.role.upper()}: {turn.message}" for turn in turns]
    return TRANSCRIPT_HEADER + "\n\n" + "\n\n".join(blocks)


def format_call_duration(seconds: Optional[float]) -> str:
    """Render a call duration in seconds, or "N/A" when unknown."""
    if seconds is None:
        return NO_DURATION_TEXT
    if float(seconds).is_integer():
        return f"{int(seconds)} seconds"
    return f"{seconds:.1f} seconds"


def build_notification_body(event: WebhookEvent) -> str:
    """Email text for a processed call: summary, duration, then transcript."""
    summary = (event.transcript_summary or "").strip() or NO_SUMMARY_TEXT
    return (
        f"Conversation ID: {event.conversation_id}\n"
        f"Call duration: {format_call_duration(event.call_duration_seconds)}\n"
        f"\n"
        f"Summary:\n{summary}\n"
        f"\n"
        f"{format_transcript(event.transcript_turns)}\n"
    )
