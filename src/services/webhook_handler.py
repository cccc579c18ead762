"""
Post-call webhook orchestration.

Runs one ElevenLabs post_call_transcription callback through a fixed
sequence of steps and maps every outcome to an HTTP status and JSON body:

    RECEIVING_BODY -> VERIFYING -> PARSING -> FORMATTING
        -> FETCHING_AUDIO -> NOTIFYING -> RESPONDED

Rejections (auth, parse) stop before any outbound call. Failures of the
audio fetch or the email send are reported as a 200 "soft error" so that
ElevenLabs does not disable the webhook after a transient outage.
"""
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional

from fastapi import status

from src.config import EMAIL_SUBJECT, Settings
from src.exceptions import AuthError, BodyReadError, CallMailerException, ParseError
from src.models.notification import NotificationMessage
from src.services.elevenlabs_audio_service import ElevenLabsAudioService
from src.services.email_service import EmailService
from src.services.payload_parser import parse_webhook_event
from src.services.raw_body import RawBodyReader
from src.services.signature import verify_signature
from src.utils.text_utils import build_notification_body

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Webhook processed successfully"
SOFT_ERROR_MESSAGE = "Processed with errors"


class HandlerState(str, Enum):
    RECEIVING_BODY = "receiving_body"
    VERIFYING = "verifying"
    PARSING = "parsing"
    FORMATTING = "formatting"
    FETCHING_AUDIO = "fetching_audio"
    NOTIFYING = "notifying"
    RESPONDED = "responded"


@dataclass
class WebhookResult:
    """Terminal outcome of one webhook invocation."""
    status_code: int
    body: dict[str, Any]
    # Step that failed, None on full success
    failed_state: Optional[HandlerState] = None
    conversation_id: Optional[str] = None
    notification: Optional[NotificationMessage] = None
    state: HandlerState = field(default=HandlerState.RESPONDED, init=False)

    @property
    def is_soft_error(self) -> bool:
        return self.status_code == status.HTTP_200_OK and self.failed_state is not None


class PostCallWebhookHandler:
    """
    Verifies, parses and processes ElevenLabs post-call webhooks.

    Holds no per-request state; one instance serves every request.
    """

    def __init__(
        self,
        webhook_secret: str,
        audio_service: ElevenLabsAudioService,
        email_service: EmailService,
        max_future_skew_seconds: Optional[int] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.webhook_secret = webhook_secret
        self.audio_service = audio_service
        self.email_service = email_service
        self.max_future_skew_seconds = max_future_skew_seconds
        self.clock = clock

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        audio_service: ElevenLabsAudioService,
        email_service: EmailService,
    ) -> "PostCallWebhookHandler":
        return cls(
            webhook_secret=settings.webhook_secret,
            audio_service=audio_service,
            email_service=email_service,
            max_future_skew_seconds=settings.signature_max_future_skew_seconds,
        )

    @staticmethod
    def _reject(state: HandlerState, exc: CallMailerException) -> WebhookResult:
        return WebhookResult(
            status_code=exc.status_code,
            body={"error": exc.message},
            failed_state=state,
        )

    @staticmethod
    def _soft_error(state: HandlerState, conversation_id: str, error: str) -> WebhookResult:
        return WebhookResult(
            status_code=status.HTTP_200_OK,
            body={"message": SOFT_ERROR_MESSAGE, "error": error},
            failed_state=state,
            conversation_id=conversation_id,
        )

    async def handle(
        self,
        body_reader: RawBodyReader,
        signature_header: Optional[str],
        now: Optional[float] = None,
    ) -> WebhookResult:
        """
        Process one webhook request.

        Args:
            body_reader: Source of the exact request body bytes
            signature_header: Value of the elevenlabs-signature header, if any
            now: Unix time used for the replay window (defaults to the handler clock)

        Returns:
            WebhookResult: Always returned, never raises
        """
        state = HandlerState.RECEIVING_BODY
        try:
            raw_body = await body_reader.read()
        except BodyReadError as e:
            logger.error(f"Webhook body could not be read: {e.message}")
            return self._reject(state, e)

        state = HandlerState.VERIFYING
        try:
            verify_signature(
                raw_body,
                signature_header,
                self.webhook_secret,
                now=self.clock() if now is None else now,
                max_future_skew_seconds=self.max_future_skew_seconds,
            )
        except AuthError as e:
            logger.warning(f"Rejected ElevenLabs webhook: {e.message}")
            return self._reject(state, e)

        state = HandlerState.PARSING
        try:
            event = parse_webhook_event(raw_body)
        except ParseError as e:
            logger.warning(f"Ignoring ElevenLabs webhook: {e.message}")
            return self._reject(state, e)

        conversation_id = event.conversation_id
        logger.info(
            f"ElevenLabs webhook received: type={event.type}, conversation_id={conversation_id}, "
            f"turns={len(event.transcript_turns)}"
        )

        state = HandlerState.FORMATTING
        body_text = build_notification_body(event)

        state = HandlerState.FETCHING_AUDIO
        try:
            audio = await self.audio_service.fetch_audio(conversation_id)
        except CallMailerException as e:
            # No audio, no email: the notification always carries the recording
            logger.error(f"Audio fetch failed for {conversation_id}, email not sent: {e.message}")
            return self._soft_error(state, conversation_id, e.message)
        except Exception as e:
            logger.exception(f"Unexpected error fetching audio for {conversation_id}")
            return self._soft_error(state, conversation_id, f"Failed to fetch audio: {type(e).__name__}")

        notification = NotificationMessage(
            subject=EMAIL_SUBJECT,
            body_text=body_text,
            attachment=audio,
        )

        state = HandlerState.NOTIFYING
        try:
            await self.email_service.send(notification)
        except CallMailerException as e:
            logger.error(f"Email delivery failed for {conversation_id}: {e.message}")
            return self._soft_error(state, conversation_id, e.message)
        except Exception as e:
            logger.exception(f"Unexpected error sending email for {conversation_id}")
            return self._soft_error(state, conversation_id, f"Failed to send email: {type(e).__name__}")

        logger.info(f"✅ Post-call notification sent for conversation {conversation_id}")
        return WebhookResult(
            status_code=status.HTTP_200_OK,
            body={"message": SUCCESS_MESSAGE},
            conversation_id=conversation_id,
            notification=notification,
        )
