"""
Parse a verified webhook body into a WebhookEvent.

Only runs after the signature check has passed on the same bytes.
"""
import json
import logging

from pydantic import ValidationError

from src.config import POST_CALL_TRANSCRIPTION
from src.exceptions import (
    MalformedPayloadError,
    MissingConversationIdError,
    UnsupportedEventTypeError,
)
from src.models.notification import TranscriptTurn, WebhookEvent
from src.models.webhook import ElevenLabsWebhookPayload

logger = logging.getLogger(__name__)


def parse_webhook_event(raw_body: bytes) -> WebhookEvent:
    """
    Parse and validate a post_call_transcription webhook.

    Transcript, summary and call duration are optional; turns without a
    text message (tool calls) are dropped.

    Raises:
        MalformedPayloadError: Body is not a JSON object or has the wrong shape
        UnsupportedEventTypeError: type is absent or not post_call_transcription
        MissingConversationIdError: data.conversation_id absent or empty
    """
    try:
        payload_dict = json.loads(raw_body)
    except (ValueError, RecursionError) as e:
        # Oversized integer literals raise a plain ValueError, deep nesting a RecursionError
        raise MalformedPayloadError(str(e))

    if not isinstance(payload_dict, dict):
        raise MalformedPayloadError("expected a JSON object")

    # Checked before model validation so foreign event shapes are reported as unsupported
    event_type = payload_dict.get("type")
    if event_type != POST_CALL_TRANSCRIPTION:
        raise UnsupportedEventTypeError(event_type if isinstance(event_type, str) else None)

    try:
        payload = ElevenLabsWebhookPayload(**payload_dict)
    except ValidationError as e:
        raise MalformedPayloadError(f"{e.error_count()} validation error(s)")

    data = payload.data
    conversation_id = (data.conversation_id or "").strip()
    if not conversation_id:
        raise MissingConversationIdError()

    turns = [
        TranscriptTurn(role=turn.role, message=turn.message.strip())
        for turn in data.transcript or []
        if turn.message and turn.message.strip()
    ]

    return WebhookEvent(
        type=payload.type,
        conversation_id=conversation_id,
        transcript_turns=turns,
        transcript_summary=data.analysis.transcript_summary if data.analysis else None,
        call_duration_seconds=data.metadata.call_duration_secs if data.metadata else None,
    )
