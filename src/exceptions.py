"""
Custom exception classes and error handling.

This module provides the error taxonomy of the webhook pipeline and the
handlers that turn it into consistent JSON error responses.
"""
import logging
from typing import Any, Dict, Optional
from fastapi import Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class CallMailerException(Exception):
    """Base exception for all call mailer errors."""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class BodyReadError(CallMailerException):
    """Raised when the request body stream fails before completion."""

    def __init__(self, message: str = "Failed to read request body", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_500_INTERNAL_SERVER_ERROR, details)


# =============================================================================
# Authentication
# =============================================================================

class AuthError(CallMailerException):
    """Raised when a webhook cannot be proven to come from ElevenLabs."""

    def __init__(
        self,
        message: str = "Invalid signature",
        status_code: int = status.HTTP_401_UNAUTHORIZED,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, status_code, details)


class MissingSignatureError(AuthError):
    """Raised when the signature header is absent."""

    def __init__(self, message: str = "Missing signature header"):
        super().__init__(message)


class MalformedSignatureError(AuthError):
    """Raised when the signature header lacks a usable t= or v0= token."""

    def __init__(self, message: str = "Malformed signature header"):
        super().__init__(message)


class SignatureExpiredError(AuthError):
    """Raised when the signed timestamp falls outside the replay window."""

    def __init__(self, message: str = "Request expired"):
        super().__init__(message, status.HTTP_403_FORBIDDEN)


class InvalidSignatureError(AuthError):
    """Raised when the recomputed digest does not match."""

    def __init__(self, message: str = "Invalid signature"):
        super().__init__(message)


# =============================================================================
# Payload
# =============================================================================

class ParseError(CallMailerException):
    """Raised when a verified body is not a processable event."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_400_BAD_REQUEST, details)


class MalformedPayloadError(ParseError):
    """Raised when the body is not valid JSON or has the wrong shape."""

    def __init__(self, reason: str):
        super().__init__(f"Invalid payload: {reason}")
        self.reason = reason


class UnsupportedEventTypeError(ParseError):
    """Raised for event types this service does not handle."""

    def __init__(self, event_type: Optional[str]):
        super().__init__(f"Unsupported event type: {event_type}")
        self.event_type = event_type


class MissingConversationIdError(ParseError):
    """Raised when data.conversation_id is absent or empty."""

    def __init__(self):
        super().__init__("Missing conversation_id")


# =============================================================================
# Recoverable downstream failures
# =============================================================================

class AudioFetchError(CallMailerException):
    """Raised when the conversation audio could not be retrieved."""

    def __init__(self, conversation_id: str, upstream_status: Optional[int] = None, reason: str = ""):
        if upstream_status is not None:
            message = f"Failed to fetch audio (HTTP {upstream_status})"
        else:
            message = f"Failed to fetch audio: {reason or 'network error'}"
        super().__init__(message, status.HTTP_502_BAD_GATEWAY)
        self.conversation_id = conversation_id
        self.upstream_status = upstream_status


class DeliveryError(CallMailerException):
    """Raised when the notification email could not be delivered."""

    def __init__(self, reason: str):
        super().__init__(f"Failed to send email: {reason}", status.HTTP_502_BAD_GATEWAY)
        self.reason = reason


# =============================================================================
# Exception Handlers
# =============================================================================

async def call_mailer_exception_handler(request: Request, exc: CallMailerException) -> JSONResponse:
    """Handle CallMailerException instances."""
    content: Dict[str, Any] = {"error": exc.message}
    if exc.details:
        content["details"] = exc.details
    return JSONResponse(status_code=exc.status_code, content=content)


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle uncaught exceptions."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"}
    )


def register_exception_handlers(app):
    """
    Register all custom exception handlers with the FastAPI app.

    Call this during app initialization:
        from src.exceptions import register_exception_handlers
        register_exception_handlers(app)
    """
    app.add_exception_handler(CallMailerException, call_mailer_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
