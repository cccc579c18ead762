"""
Webhook payload models.

These mirror the ElevenLabs post-call webhook body. Only the fields the
mailer uses are declared; everything else in the payload is ignored.
"""
from typing import Optional
from pydantic import BaseModel


class ElevenLabsTranscriptTurn(BaseModel):
    """A single turn of the conversation transcript."""
    role: str = "unknown"  # "agent" or "user"
    message: Optional[str] = None  # None for tool-call turns
    time_in_call_secs: Optional[float] = None


class ElevenLabsCallMetadata(BaseModel):
    """Call metadata block."""
    call_duration_secs: Optional[float] = None


class ElevenLabsAnalysis(BaseModel):
    """Post-call analysis block."""
    transcript_summary: Optional[str] = None
    call_successful: Optional[str] = None


class ElevenLabsWebhookData(BaseModel):
    """Data object from ElevenLabs post-call webhook."""
    agent_id: Optional[str] = None
    conversation_id: Optional[str] = None
    status: Optional[str] = None
    transcript: Optional[list[ElevenLabsTranscriptTurn]] = None
    metadata: Optional[ElevenLabsCallMetadata] = None
    analysis: Optional[ElevenLabsAnalysis] = None


class ElevenLabsWebhookPayload(BaseModel):
    """Full payload from ElevenLabs post-call webhook."""
    type: str  # "post_call_transcription", "post_call_audio", "call_initiation_failure"
    event_timestamp: Optional[int] = None
    data: ElevenLabsWebhookData = ElevenLabsWebhookData()
