"""
ElevenLabs Audio Service - conversation recording retrieval.

Downloads the MP3 recording of a finished Conversational AI call:
GET {base_url}/v1/convai/conversations/{conversation_id}/audio
"""
import logging
from typing import Optional
from urllib.parse import quote

import httpx

from src.config import Settings
from src.exceptions import AudioFetchError
from src.models.notification import AudioAsset

logger = logging.getLogger(__name__)


class ElevenLabsAudioService:
    """
    Service for fetching conversation audio from the ElevenLabs API.

    A single GET per call, no retries: the webhook sender owns retrying.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.elevenlabs.io",
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        if not api_key:
            raise RuntimeError("ELEVENLABS_API_KEY environment variable is required")

        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    @classmethod
    def from_settings(cls, settings: Settings) -> "ElevenLabsAudioService":
        return cls(
            api_key=settings.elevenlabs_api_key,
            base_url=settings.elevenlabs_api_base_url,
            timeout=settings.audio_fetch_timeout_seconds,
        )

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    def audio_url(self, conversation_id: str) -> str:
        return f"{self.base_url}/v1/convai/conversations/{quote(conversation_id, safe='')}/audio"

    async def fetch_audio(self, conversation_id: str) -> AudioAsset:
        """
        Fetch the recording for a conversation.

        Args:
            conversation_id: ElevenLabs conversation id

        Returns:
            AudioAsset with the raw MP3 bytes

        Raises:
            AudioFetchError: Non-2xx status, timeout or connection failure
        """
        url = self.audio_url(conversation_id)
        client = self._get_client()

        try:
            response = await client.get(
                url,
                headers={"xi-api-key": self.api_key},
                timeout=self.timeout,
            )
        except httpx.TimeoutException:
            logger.error(f"Timeout fetching audio for conversation {conversation_id}")
            raise AudioFetchError(conversation_id, reason="timeout")
        except httpx.RequestError as e:
            logger.error(f"Error fetching audio for conversation {conversation_id}: {e}")
            raise AudioFetchError(conversation_id, reason=type(e).__name__)

        if not response.is_success:
            logger.error(
                f"ElevenLabs audio API error for conversation {conversation_id}: "
                f"{response.status_code}"
            )
            raise AudioFetchError(conversation_id, upstream_status=response.status_code)

        content = response.content
        logger.info(f"Fetched audio for conversation {conversation_id} ({len(content)} bytes)")
        return AudioAsset(
            conversation_id=conversation_id,
            content=content,
            content_type=response.headers.get("content-type", "audio/mpeg").split(";")[0] or "audio/mpeg",
        )

    async def aclose(self):
        """Close the underlying HTTP client if this service created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
