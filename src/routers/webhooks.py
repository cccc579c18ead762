"""
Webhook endpoint for ElevenLabs post-call callbacks.
"""
import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from src.config import SIGNATURE_HEADER
from src.dependencies import get_webhook_handler
from src.services import PostCallWebhookHandler, StreamingBodyReader

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Webhooks"])

WEBHOOK_PATH = "/webhook/elevenlabs"


@router.post(WEBHOOK_PATH)
async def elevenlabs_webhook(
    request: Request,
    handler: PostCallWebhookHandler = Depends(get_webhook_handler),
):
    """
    Handle ElevenLabs post-call webhooks.

    1. Reads the raw body (no JSON parsing before verification)
    2. Validates the HMAC signature and the 30 minute replay window
    3. Parses the post_call_transcription event
    4. Fetches the call recording from ElevenLabs
    5. Emails the recording with the formatted transcript

    Responses:
    - 200 {"message": "Webhook processed successfully"}
    - 200 {"message": "Processed with errors", "error": ...} when audio or email failed
    - 400 malformed or unsupported event
    - 401 missing, malformed or invalid signature
    - 403 expired signature
    - 500 body could not be read
    """
    # Headers are case-insensitive in Starlette
    signature = request.headers.get(SIGNATURE_HEADER)

    result = await handler.handle(StreamingBodyReader(request.stream()), signature)

    logger.info(
        f"[webhook/elevenlabs] response: status={result.status_code}, "
        f"failed_state={result.failed_state.value if result.failed_state else None}"
    )
    return JSONResponse(status_code=result.status_code, content=result.body)


@router.api_route(
    WEBHOOK_PATH,
    methods=["GET", "HEAD", "PUT", "PATCH", "DELETE", "OPTIONS"],
    include_in_schema=False,
)
async def elevenlabs_webhook_method_not_allowed():
    """Reject anything but POST on the webhook path."""
    return JSONResponse(
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        content={"error": "Only POST requests allowed"},
        headers={"Allow": "POST"},
    )
