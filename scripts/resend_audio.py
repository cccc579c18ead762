"""
Script to fetch a conversation's recording and email it again.

Useful when a webhook was accepted with a soft error (audio not ready yet,
mail server down) and the recording still needs to reach the inbox.

Usage:
    python scripts/resend_audio.py <conversation_id>

Example:
    python scripts/resend_audio.py conv_01jx7k2m3n4p5q6r7s8t9v0w
"""

import asyncio
import sys
import os
import logging

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv
load_dotenv()

from src.config import EMAIL_SUBJECT, get_settings, validate_settings
from src.exceptions import CallMailerException
from src.models import NotificationMessage
from src.services import ElevenLabsAudioService, EmailService

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

RESEND_BODY_TEXT = "Attached is your conversation audio."


async def resend_audio(conversation_id: str) -> bool:
    """Fetch the recording for one conversation and mail it without a transcript."""
    settings = validate_settings(get_settings())
    audio_service = ElevenLabsAudioService.from_settings(settings)
    email_service = EmailService.from_settings(settings)

    try:
        audio = await audio_service.fetch_audio(conversation_id)
        await email_service.send(
            NotificationMessage(
                subject=EMAIL_SUBJECT,
                body_text=RESEND_BODY_TEXT,
                attachment=audio,
            )
        )
    except CallMailerException as e:
        logger.error(f"Resend failed for {conversation_id}: {e.message}")
        return False
    finally:
        await audio_service.aclose()

    logger.info(f"Recording for {conversation_id} sent to {email_service.recipient}")
    return True


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("Usage: python scripts/resend_audio.py <conversation_id>")
        sys.exit(1)

    ok = asyncio.run(resend_audio(sys.argv[1]))
    sys.exit(0 if ok else 1)
