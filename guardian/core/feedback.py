"""
Feedback Coordinator
=====================
Closes the feedback loop when a sender answers "sí" / "no" to the
"¿Te fue útil?" prompt appended to every analysis.

The reply the user sees never depends on storage: recorder failures are
logged and the thank-you / apology is sent anyway.
"""

import logging

from guardian.context_store import InteractionContextStore
from guardian.messages import (
    FEEDBACK_APOLOGY_TEXT,
    FEEDBACK_CLARIFICATION_TEXT,
    FEEDBACK_THANKS_TEXT,
)

logger = logging.getLogger(__name__)


class FeedbackCoordinator:

    def __init__(self, store: InteractionContextStore, recorder, sender):
        """
        Args:
            store: Pending-feedback context store
            recorder: Object with record(sender_id, original_message,
                      analysis_summary, was_helpful)
            sender: Object with send(sender_id, text)
        """
        self.store = store
        self.recorder = recorder
        self.sender = sender

    def record(self, sender_id: str, was_helpful: bool) -> None:
        """
        Consume the sender's pending context and log their answer.

        With no pending context the user gets a clarification and the
        recorder is not called.
        """
        context = self.store.take(sender_id)

        if context is None:
            logger.info(f"[FEEDBACK {sender_id}] No pending analysis — sending clarification")
            self.sender.send(sender_id, FEEDBACK_CLARIFICATION_TEXT)
            return

        try:
            self.recorder.record(
                sender_id,
                context.original_message,
                context.analysis_summary,
                was_helpful,
            )
            logger.info(f"[FEEDBACK {sender_id}] Recorded helpful={was_helpful} "
                        f"for '{context.analysis_summary}'")
        except Exception as e:
            logger.error(f"[FEEDBACK {sender_id}] Recorder failed: {e}")

        reply = FEEDBACK_THANKS_TEXT if was_helpful else FEEDBACK_APOLOGY_TEXT
        self.sender.send(sender_id, reply)
