"""
Configuration module for the ElevenLabs call mailer.
Centralizes environment variables, logging setup, and constants.
"""
import os
import logging
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

# Load .env file for local development
load_dotenv()

# ============================================================================
# Environment Configuration
# ============================================================================

# Environment identifier (production, staging, development, etc.)
ENVIRONMENT = os.environ.get("ENVIRONMENT", "production")

# ============================================================================
# Logging Configuration
# ============================================================================

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# ============================================================================
# Application Constants
# ============================================================================

# The only ElevenLabs event this service acts on
POST_CALL_TRANSCRIPTION = "post_call_transcription"

# Header carrying "t=<unix-seconds>,v0=<hex hmac>"
SIGNATURE_HEADER = "elevenlabs-signature"

# Signed timestamps older than this are rejected as replays (30 minutes)
REPLAY_WINDOW_SECONDS = 30 * 60

DEFAULT_ELEVENLABS_API_BASE_URL = "https://api.elevenlabs.io"
DEFAULT_SMTP_HOST = "smtp.gmail.com"
DEFAULT_SMTP_PORT = 465

EMAIL_SUBJECT = "Your ElevenLabs Conversation Audio"
NO_SUMMARY_TEXT = "No summary available."
NO_DURATION_TEXT = "N/A"
NO_TRANSCRIPT_TEXT = "No transcript available."
TRANSCRIPT_HEADER = "Conversation Transcript:"


# ============================================================================
# Settings
# ============================================================================

def _optional_int(name: str) -> Optional[int]:
    value = os.environ.get(name, "").strip()
    return int(value) if value else None


def _mask(value: str) -> str:
    if not value:
        return "NOT SET"
    if len(value) <= 4:
        return "****"
    return f"{value[:2]}****{value[-2:]}"


class Settings(BaseModel):
    """Process-wide configuration, read once at startup and never mutated."""

    webhook_secret: str = ""
    elevenlabs_api_key: str = ""
    elevenlabs_api_base_url: str = DEFAULT_ELEVENLABS_API_BASE_URL
    audio_fetch_timeout_seconds: float = 30.0
    signature_max_future_skew_seconds: Optional[int] = None

    email_user: str = ""
    email_password: str = ""
    email_to: str = ""
    smtp_host: str = DEFAULT_SMTP_HOST
    smtp_port: int = DEFAULT_SMTP_PORT

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables."""
        email_user = os.environ.get("EMAIL_USER", "")
        return cls(
            webhook_secret=os.environ.get("ELEVENLABS_WEBHOOK_SECRET", ""),
            elevenlabs_api_key=os.environ.get("ELEVENLABS_API_KEY", ""),
            elevenlabs_api_base_url=os.environ.get(
                "ELEVENLABS_API_BASE_URL", DEFAULT_ELEVENLABS_API_BASE_URL
            ),
            audio_fetch_timeout_seconds=float(os.environ.get("AUDIO_FETCH_TIMEOUT_SECONDS", "30")),
            signature_max_future_skew_seconds=_optional_int("SIGNATURE_MAX_FUTURE_SKEW_SECONDS"),
            email_user=email_user,
            email_password=os.environ.get("EMAIL_PASS", ""),
            # Without EMAIL_TO the mailbox mails itself
            email_to=os.environ.get("EMAIL_TO", "") or email_user,
            smtp_host=os.environ.get("SMTP_HOST", DEFAULT_SMTP_HOST),
            smtp_port=int(os.environ.get("SMTP_PORT", str(DEFAULT_SMTP_PORT))),
        )

    def missing_required(self) -> list[str]:
        """Return the environment variable names of required settings that are empty."""
        required = {
            "ELEVENLABS_WEBHOOK_SECRET": self.webhook_secret,
            "ELEVENLABS_API_KEY": self.elevenlabs_api_key,
            "EMAIL_USER": self.email_user,
            "EMAIL_PASS": self.email_password,
        }
        return [name for name, value in required.items() if not value]

    def redacted(self) -> dict[str, str]:
        """Masked view of the settings, safe to print or log."""
        return {
            "ELEVENLABS_WEBHOOK_SECRET": _mask(self.webhook_secret),
            "ELEVENLABS_API_KEY": _mask(self.elevenlabs_api_key),
            "ELEVENLABS_API_BASE_URL": self.elevenlabs_api_base_url,
            "EMAIL_USER": self.email_user or "NOT SET",
            "EMAIL_PASS": _mask(self.email_password),
            "EMAIL_TO": self.email_to or "NOT SET",
            "SMTP_HOST": f"{self.smtp_host}:{self.smtp_port}",
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings.from_env()


def validate_settings(settings: Settings) -> Settings:
    """
    Startup validation: fail fast when a required secret is absent.

    Raises:
        RuntimeError: Listing every missing environment variable
    """
    missing = settings.missing_required()
    if missing:
        raise RuntimeError(
            f"Missing required environment variables: {', '.join(missing)}"
        )
    logger.info(f"Configuration loaded for environment={ENVIRONMENT}")
    return settings
