"""
Audio Transcription Module
===========================
Turns a WhatsApp voice note into text with the Whisper transcription API.

Voice notes arrive either inline (already decrypted bytes) or as a
provider media URL. Twilio media URLs require HTTP basic auth with the
account SID / auth token, which is applied whenever they are configured.

Any failure raises TranscriptionError. The pipeline never falls through
to text analysis with empty content. The overall deadline is enforced by
the caller, not here.
"""

import logging

import requests

from guardian import config
from guardian.schemas import AudioPayload

logger = logging.getLogger(__name__)

MEDIA_DOWNLOAD_TIMEOUT = 20
TRANSCRIPTION_HTTP_TIMEOUT = 60


class TranscriptionError(RuntimeError):
    """The voice note could not be transcribed."""


class Transcriber:

    def __init__(self, http=requests):
        self.http = http

    def _download(self, url: str) -> bytes:
        auth = None
        if config.TWILIO_ACCOUNT_SID and config.TWILIO_AUTH_TOKEN:
            auth = (config.TWILIO_ACCOUNT_SID, config.TWILIO_AUTH_TOKEN)

        response = self.http.get(url, auth=auth, timeout=MEDIA_DOWNLOAD_TIMEOUT)
        response.raise_for_status()
        return response.content

    def transcribe(self, audio: AudioPayload) -> str:
        """
        Transcribe a voice note.

        Args:
            audio: Inline bytes or media URL

        Returns:
            Transcribed text (never empty)

        Raises:
            TranscriptionError: On download, API or empty-result failure
        """
        if not config.OPENAI_API_KEY:
            raise TranscriptionError("OPENAI_API_KEY not set")

        try:
            data = audio.data if audio.data else self._download(audio.url)
        except requests.exceptions.RequestException as e:
            status = getattr(getattr(e, "response", None), "status_code", "?")
            logger.error(f"Audio download failed (status {status}): {e}")
            raise TranscriptionError("audio download failed") from e

        try:
            response = self.http.post(
                f"{config.OPENAI_API_URL.rstrip('/')}/audio/transcriptions",
                headers={"Authorization": f"Bearer {config.OPENAI_API_KEY}"},
                files={"file": ("audio.ogg", data, audio.content_type)},
                data={"model": config.WHISPER_MODEL, "response_format": "text"},
                timeout=TRANSCRIPTION_HTTP_TIMEOUT,
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            logger.error(f"Whisper transcription failed: {e}")
            raise TranscriptionError("transcription request failed") from e

        text = (response.text or "").strip()
        if not text:
            raise TranscriptionError("transcription produced no text")

        logger.info(f"Audio transcribed — {len(text)} chars")
        return text
