"""
Call mailer models.

This module re-exports all model classes for convenient importing.
"""

# Webhook payload models
from .webhook import (
    ElevenLabsTranscriptTurn,
    ElevenLabsCallMetadata,
    ElevenLabsAnalysis,
    ElevenLabsWebhookData,
    ElevenLabsWebhookPayload,
)

# Pipeline models
from .notification import (
    TranscriptTurn,
    WebhookEvent,
    AudioAsset,
    NotificationMessage,
)

__all__ = [
    # Webhook
    "ElevenLabsTranscriptTurn",
    "ElevenLabsCallMetadata",
    "ElevenLabsAnalysis",
    "ElevenLabsWebhookData",
    "ElevenLabsWebhookPayload",
    # Pipeline
    "TranscriptTurn",
    "WebhookEvent",
    "AudioAsset",
    "NotificationMessage",
]
