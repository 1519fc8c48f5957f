"""
Intent Router
==============
Single entry point for every inbound message.

Steps:
    1. Voice note → acknowledge and launch the background pipeline. Audio
       always means a fresh analysis, even if a sí/no was pending.
    2. "sí" / "si" / "no" → feedback, without calling the classifier.
    3. Anything else → IntentClassifier (fail-open to analysis).
    4. Dispatch: greeting / help reply directly, feedback goes to the
       FeedbackCoordinator, analysis acknowledges and launches the
       pipeline. UNKNOWN is analyzed.

Each call sends exactly one message synchronously. The pipeline is never
awaited here; it delivers its verdict later as a separate message.
"""

import logging
import traceback
import unicodedata

from guardian.core.feedback import FeedbackCoordinator
from guardian.messages import ANALYSIS_ACK_TEXT, AUDIO_ACK_TEXT, GREETING_TEXT, HELP_TEXT
from guardian.schemas import IncomingMessage, Intent

logger = logging.getLogger(__name__)

AFFIRMATIVE_TOKENS = frozenset({"sí", "si"})
NEGATIVE_TOKENS = frozenset({"no"})


def normalize(text: str) -> str:
    """NFC-compose, lowercase and trim; the form the fast feedback rules compare."""
    return unicodedata.normalize("NFC", text or "").lower().strip()


class IntentRouter:

    def __init__(self, classifier, orchestrator, feedback: FeedbackCoordinator, sender):
        """
        Args:
            classifier: Object with classify(text) -> Intent
            orchestrator: Object with launch(sender_id, text, audio)
            feedback: FeedbackCoordinator for sí/no replies
            sender: Object with send(sender_id, text)
        """
        self.classifier = classifier
        self.orchestrator = orchestrator
        self.feedback = feedback
        self.sender = sender

    # ---------- INTENT ----------

    def resolve_intent(self, text: str) -> Intent:
        """
        Determine the intent of a text message.

        Fast rules first, then the classifier. Classifier errors fall back
        to ANALYSIS_REQUEST.
        """
        normalized = normalize(text)

        if normalized in AFFIRMATIVE_TOKENS:
            return Intent.FEEDBACK_POSITIVE
        if normalized in NEGATIVE_TOKENS:
            return Intent.FEEDBACK_NEGATIVE

        try:
            return Intent.parse(self.classifier.classify(text))
        except Exception as e:
            logger.error(f"[ROUTER] Classifier error, defaulting to analysis: {e}")
            return Intent.ANALYSIS_REQUEST

    # ---------- ENTRY POINT ----------

    def handle(self, message: IncomingMessage) -> None:
        """Route one inbound message. Errors are logged, never raised."""
        sender_id = message.sender_id
        try:
            if message.audio is not None:
                logger.info(f"[ROUTER {sender_id}] Voice note received — starting analysis")
                self.sender.send(sender_id, AUDIO_ACK_TEXT)
                self.orchestrator.launch(sender_id, message.text, message.audio)
                return

            if not message.text.strip():
                logger.info(f"[ROUTER {sender_id}] Empty message — sending help")
                self.sender.send(sender_id, HELP_TEXT)
                return

            intent = self.resolve_intent(message.text)
            logger.info(f"[ROUTER {sender_id}] Intent: {intent.value}")
            self._dispatch(intent, message)

        except Exception as e:
            logger.error(f"[ROUTER {sender_id}] Dispatch error: {e}")
            logger.error(traceback.format_exc())

    def _dispatch(self, intent: Intent, message: IncomingMessage) -> None:
        if intent is Intent.GREETING:
            self.sender.send(message.sender_id, GREETING_TEXT)
        elif intent is Intent.HELP_REQUEST:
            self.sender.send(message.sender_id, HELP_TEXT)
        elif intent is Intent.FEEDBACK_POSITIVE:
            self.feedback.record(message.sender_id, True)
        elif intent is Intent.FEEDBACK_NEGATIVE:
            self.feedback.record(message.sender_id, False)
        else:
            self._handle_analysis(message)

    def _handle_analysis(self, message: IncomingMessage) -> None:
        self.sender.send(message.sender_id, ANALYSIS_ACK_TEXT)
        self.orchestrator.launch(message.sender_id, message.text, None)
