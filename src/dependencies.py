"""
FastAPI dependency injection factories.

This module provides the shared, process-wide service instances used by
the routers. Tests replace them through app.dependency_overrides.
"""
from typing import Optional
from fastapi import Depends

from src.config import Settings, get_settings
from src.services import ElevenLabsAudioService, EmailService, PostCallWebhookHandler


# Global service instances (created lazily, closed during app shutdown)
_audio_service: Optional[ElevenLabsAudioService] = None
_email_service: Optional[EmailService] = None


def get_audio_service(settings: Settings = Depends(get_settings)) -> ElevenLabsAudioService:
    """Get or create the ElevenLabs audio service singleton."""
    global _audio_service
    if _audio_service is None:
        _audio_service = ElevenLabsAudioService.from_settings(settings)
    return _audio_service


def get_email_service(settings: Settings = Depends(get_settings)) -> EmailService:
    """Get or create the email service singleton."""
    global _email_service
    if _email_service is None:
        _email_service = EmailService.from_settings(settings)
    return _email_service


def get_webhook_handler(
    settings: Settings = Depends(get_settings),
    audio_service: ElevenLabsAudioService = Depends(get_audio_service),
    email_service: EmailService = Depends(get_email_service),
) -> PostCallWebhookHandler:
    """Get a post-call webhook handler wired to the shared services."""
    return PostCallWebhookHandler.from_settings(settings, audio_service, email_service)


async def close_services():
    """Release service resources on shutdown."""
    global _audio_service, _email_service
    if _audio_service is not None:
        await _audio_service.aclose()
        _audio_service = None
    _email_service = None
