"""
Service layer for the post-call webhook pipeline.
"""
from .raw_body import RawBodyReader, BufferedBodyReader, StreamingBodyReader
from .signature import (
    SignedRequest,
    ParsedSignature,
    parse_signature_header,
    compute_signature,
    verify_signature,
    verify_signed_request,
)
from .payload_parser import parse_webhook_event
from .elevenlabs_audio_service import ElevenLabsAudioService
from .email_service import EmailService
from .webhook_handler import HandlerState, WebhookResult, PostCallWebhookHandler

__all__ = [
    "RawBodyReader",
    "BufferedBodyReader",
    "StreamingBodyReader",
    "SignedRequest",
    "ParsedSignature",
    "parse_signature_header",
    "compute_signature",
    "verify_signature",
    "verify_signed_request",
    "parse_webhook_event",
    "ElevenLabsAudioService",
    "EmailService",
    "HandlerState",
    "WebhookResult",
    "PostCallWebhookHandler",
]
