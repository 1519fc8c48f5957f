"""
Pydantic Schema Definitions
============================
Defines the data model shared by the router, the background pipeline and
the webhook.

IncomingMessage:     One inbound WhatsApp message, built at the transport
                     boundary and consumed once.
AnalysisOutcome:     Verdict produced by the content analyzer.
InteractionContext:  Pending-feedback record kept per sender.
ComposedResponse:    User-facing verdict text plus its short summary label.
WebhookRequest/Ack:  HTTP body sent by the transport and our reply.

All domain models are frozen. Nothing downstream mutates them.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Intent(str, Enum):
    """Closed set of purposes an inbound message can have."""

    GREETING = "GREETING"
    HELP_REQUEST = "HELP_REQUEST"
    FEEDBACK_POSITIVE = "FEEDBACK_POSITIVE"
    FEEDBACK_NEGATIVE = "FEEDBACK_NEGATIVE"
    ANALYSIS_REQUEST = "ANALYSIS_REQUEST"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, value) -> "Intent":
        """Map a classifier label to an Intent; anything unrecognised is UNKNOWN."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            return cls.UNKNOWN


class AudioPayload(BaseModel):
    """Voice note attached to a message: inline bytes or a media URL."""
    model_config = ConfigDict(frozen=True)

    data: Optional[bytes] = Field(default=None, description="Raw audio bytes")
    url: Optional[str] = Field(default=None, description="Provider media URL to download")
    content_type: str = Field(default="audio/ogg", description="MIME type of the audio")

    @model_validator(mode="after")
    def _require_source(self):
        if not self.data and not self.url:
            raise ValueError("audio payload needs either data or url")
        return self


class IncomingMessage(BaseModel):
    """A single inbound message from one sender."""
    model_config = ConfigDict(frozen=True)

    sender_id: str = Field(description="Opaque sender identity (e.g. whatsapp:+5959...)")
    text: str = Field(default="", description="Message text, possibly empty")
    audio: Optional[AudioPayload] = Field(default=None, description="Attached voice note")


class AnalysisOutcome(BaseModel):
    """Structured verdict for one piece of content."""
    model_config = ConfigDict(frozen=True)

    is_scam: bool = False
    is_fake_news: bool = False
    has_virus: bool = False
    is_verified_true: bool = False
    reason: str = Field(default="", description="Free-text explanation for the user")


class InteractionContext(BaseModel):
    """Links a delivered analysis to its sender until they answer sí/no."""
    model_config = ConfigDict(frozen=True)

    original_message: str = Field(description="Raw text, or tagged transcription for audio")
    analysis_summary: str = Field(description="Short verdict label, e.g. 'Estafa Detectada.'")


class ComposedResponse(BaseModel):
    """Output of the response composer."""
    model_config = ConfigDict(frozen=True)

    response_text: str
    analysis_summary: str


class WebhookRequest(BaseModel):
    """
    Inbound message as posted by the WhatsApp transport.

    Audio arrives either as a provider media URL or inline as base64.
    """
    model_config = ConfigDict(populate_by_name=True)

    sender: str = Field(alias="from", description="Sender identity")
    body: str = Field(default="", description="Message text")
    audioUrl: Optional[str] = Field(default=None, description="Media URL of a voice note")
    audioBase64: Optional[str] = Field(default=None, description="Base64-encoded voice note")
    audioContentType: Optional[str] = Field(default=None, description="MIME type of the voice note")


class WebhookAck(BaseModel):
    """Response returned to the transport."""
    status: str = Field(description="Always 'received' once the message is accepted")
