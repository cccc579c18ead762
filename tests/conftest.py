"""
Pytest fixtures for the call mailer tests.

These fixtures provide signed webhook bodies and in-memory stand-ins for
the ElevenLabs audio API and the mail server.
"""
import hashlib
import hmac
import json
import time
from typing import Optional

import pytest

from src.config import Settings
from src.exceptions import AudioFetchError, DeliveryError
from src.models import AudioAsset, NotificationMessage

WEBHOOK_SECRET = "wsec_test_3f9a1c"
CONVERSATION_ID = "conv_01jx7k2m3n4p5q6r"
FAKE_MP3 = b"ID3\x04\x00\x00\x00\x00\x00\x00fake-mp3-frames"


class FakeAudioService:
    """Records fetches; returns FAKE_MP3 or raises the configured error."""

    def __init__(self, error: Optional[Exception] = None):
        self.error = error
        self.fetched: list[str] = []

    async def fetch_audio(self, conversation_id: str) -> AudioAsset:
        self.fetched.append(conversation_id)
        if self.error is not None:
            raise self.error
        return AudioAsset(conversation_id=conversation_id, content=FAKE_MP3)


class FakeEmailService:
    """Records sent notifications; raises the configured error instead of sending."""

    recipient = "calls@example.com"

    def __init__(self, error: Optional[Exception] = None):
        self.error = error
        self.sent: list[NotificationMessage] = []
        self.attempts = 0

    async def send(self, notification: NotificationMessage):
        self.attempts += 1
        if self.error is not None:
            raise self.error
        self.sent.append(notification)


def sign(body: bytes, timestamp: int, secret: str = WEBHOOK_SECRET) -> str:
    """Build an elevenlabs-signature header value for body."""
    digest = hmac.new(
        secret.encode(), str(timestamp).encode() + b"." + body, hashlib.sha256
    ).hexdigest()
    return f"t={timestamp},v0={digest}"


def make_payload(
    conversation_id: str = CONVERSATION_ID,
    event_type: str = "post_call_transcription",
    transcript: Optional[list] = None,
) -> dict:
    """A post-call webhook body shaped like the ones ElevenLabs sends."""
    if transcript is None:
        transcript = [
            {"role": "agent", "message": "Hi, thanks for calling. How can I help?", "time_in_call_secs": 0},
            {"role": "user", "message": "I'd like to book a viewing for Saturday.", "time_in_call_secs": 4},
        ]
    return {
        "type": event_type,
        "event_timestamp": 1739537297,
        "data": {
            "agent_id": "agent_7b2c",
            "conversation_id": conversation_id,
            "status": "done",
            "transcript": transcript,
            "metadata": {"start_time_unix_secs": 1739537200, "call_duration_secs": 22},
            "analysis": {
                "transcript_summary": "Caller booked a Saturday viewing.",
                "call_successful": "success",
            },
        },
    }


def encode(payload: dict) -> bytes:
    return json.dumps(payload).encode("utf-8")


@pytest.fixture
def now() -> int:
    """Fixed clock so signatures and replay windows are deterministic."""
    return int(time.time())


@pytest.fixture
def settings() -> Settings:
    return Settings(
        webhook_secret=WEBHOOK_SECRET,
        elevenlabs_api_key="xi_test_key",
        elevenlabs_api_base_url="https://api.elevenlabs.test",
        email_user="calls@example.com",
        email_password="app-password",
        email_to="calls@example.com",
    )


@pytest.fixture
def audio_service() -> FakeAudioService:
    return FakeAudioService()


@pytest.fixture
def email_service() -> FakeEmailService:
    return FakeEmailService()


@pytest.fixture
def failing_audio_service() -> FakeAudioService:
    return FakeAudioService(error=AudioFetchError(CONVERSATION_ID, upstream_status=500))


@pytest.fixture
def failing_email_service() -> FakeEmailService:
    return FakeEmailService(error=DeliveryError("SMTPServerDisconnected"))
