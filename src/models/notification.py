"""
Request-scoped domain models for the post-call pipeline.

Everything here lives for one webhook invocation and is never persisted.
"""
from typing import Optional
from pydantic import BaseModel, Field


class TranscriptTurn(BaseModel):
    """One spoken turn: who said what."""
    role: str
    message: str


class WebhookEvent(BaseModel):
    """A verified, validated post_call_transcription event."""
    type: str
    conversation_id: str = Field(..., min_length=1)
    transcript_turns: list[TranscriptTurn] = []
    transcript_summary: Optional[str] = None
    call_duration_seconds: Optional[float] = None


class AudioAsset(BaseModel):
    """The MP3 recording of a conversation."""
    conversation_id: str
    content: bytes
    content_type: str = "audio/mpeg"

    @property
    def filename(self) -> str:
        return f"conversation-{self.conversation_id}.mp3"


class NotificationMessage(BaseModel):
    """Email built once per processed event, sent at most once."""
    subject: str
    body_text: str
    attachment: AudioAsset
