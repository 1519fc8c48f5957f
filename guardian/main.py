"""
Guardián Digital — Main Application
=====================================
FastAPI webhook for a WhatsApp security-advisory bot. Users forward
suspicious messages, links or voice notes; the bot tells them whether it
is a scam, fake news or a malicious link, and asks if that was useful.

Endpoints:
    GET  /          — Health check
    POST /webhook   — Inbound message from the WhatsApp transport (primary)
    POST /          — Alias

Architecture:
    1. Webhook validates the API key and builds an IncomingMessage
    2. IntentRouter replies synchronously (greeting, help, feedback, or
       an "analyzing..." acknowledgment) well inside the transport timeout
    3. Analysis requests continue on a background thread:
       transcribe → analyze → compose → deliver as a new message
    4. The verdict leaves a per-sender context so a later "sí"/"no" is
       logged against the analysis it refers to
"""

import base64
import binascii
import logging
import traceback
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from guardian import config
from guardian.context_store import InteractionContextStore
from guardian.core.analyzer import ContentAnalyzer
from guardian.core.feedback import FeedbackCoordinator
from guardian.core.intent_classifier import IntentClassifier
from guardian.core.orchestrator import BackgroundAnalysisOrchestrator
from guardian.core.router import IntentRouter
from guardian.core.transcriber import Transcriber
from guardian.database.feedback_store import FeedbackRecorder
from guardian.messaging.sender import MessageSender
from guardian.schemas import AudioPayload, IncomingMessage, WebhookAck, WebhookRequest
from guardian.security import verify_api_key

# Configure logging for production visibility
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)


# ---------- WIRING ----------
# Services are created once per process; the context store must be shared
# by every request so feedback finds the analysis it answers.

context_store = InteractionContextStore(ttl_seconds=config.CONTEXT_TTL_SECONDS)
message_sender = MessageSender()
feedback_recorder = FeedbackRecorder()

orchestrator = BackgroundAnalysisOrchestrator(
    transcriber=Transcriber(),
    analyzer=ContentAnalyzer(),
    sender=message_sender,
    store=context_store,
    survey_url=config.SURVEY_URL,
    transcription_timeout=config.TRANSCRIPTION_TIMEOUT_SECONDS,
    analysis_timeout=config.ANALYSIS_TIMEOUT_SECONDS,
)

intent_router = IntentRouter(
    classifier=IntentClassifier(),
    orchestrator=orchestrator,
    feedback=FeedbackCoordinator(context_store, feedback_recorder, message_sender),
    sender=message_sender,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Guardián Digital ready")
    yield
    logger.info("Guardián Digital shutting down")


app = FastAPI(
    title="Guardián Digital",
    description="WhatsApp bot that checks messages for scams, fake news and malicious links",
    version="2.0.0",
    lifespan=lifespan,
)


# ---------- GLOBAL EXCEPTION HANDLER ----------
# The transport retries webhooks that fail; a retry would re-run the
# analysis and message the user twice, so internal errors still answer 200.

@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {exc}")
    logger.error(traceback.format_exc())
    return JSONResponse(status_code=200, content={"status": "received"})


# ---------- HEALTH CHECK ----------

@app.get("/")
def health_check():
    """Health check endpoint for deployment pings."""
    return {"status": "running", "service": "Guardián Digital"}


# ---------- HELPERS ----------

def to_incoming_message(data: WebhookRequest) -> IncomingMessage:
    """
    Convert the transport payload into an IncomingMessage.

    Inline base64 audio is decoded here; undecodable audio is dropped
    with a warning and the message is handled as text.
    """
    audio = None

    if data.audioBase64:
        try:
            raw = base64.b64decode(data.audioBase64, validate=True)
            audio = AudioPayload(data=raw, content_type=data.audioContentType or "audio/ogg")
        except (binascii.Error, ValueError) as e:
            logger.warning(f"[WEBHOOK {data.sender}] Ignoring undecodable audio: {e}")
    elif data.audioUrl:
        audio = AudioPayload(url=data.audioUrl, content_type=data.audioContentType or "audio/ogg")

    return IncomingMessage(sender_id=data.sender, text=data.body or "", audio=audio)


# ---------- WEBHOOK ----------

@app.post("/", response_model=WebhookAck)
@app.post("/webhook", response_model=WebhookAck)
def webhook_endpoint(data: WebhookRequest, api_key: str = Depends(verify_api_key)):
    """
    Accept one inbound message and route it.

    The reply to the user is sent through the MessageSender, not in this
    HTTP response; the transport only needs to know we accepted it.
    """
    message = to_incoming_message(data)
    logger.info(f"[WEBHOOK {message.sender_id}] Message received "
                f"(chars={len(message.text)}, audio={message.audio is not None})")

    intent_router.handle(message)

    return WebhookAck(status="received")
