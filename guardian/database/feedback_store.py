"""
Feedback Storage Module
========================
Persists sí/no feedback to the Postgres `feedback` table:

    feedback(user_id, message_content, analysis_result, was_helpful)

Best-effort from the user's point of view: errors propagate to the
FeedbackCoordinator, which logs them and still thanks the user. Without
DATABASE_URL the recorder only logs.
"""

import logging

import psycopg

from guardian import config

logger = logging.getLogger(__name__)

INSERT_FEEDBACK = """
    INSERT INTO feedback (user_id, message_content, analysis_result, was_helpful)
    VALUES (%s, %s, %s, %s)
"""

CONNECT_TIMEOUT = 10


class FeedbackRecorder:

    def __init__(self, database_url: str = ""):
        self.database_url = database_url or config.DATABASE_URL
        if not self.database_url:
            logger.warning("DATABASE_URL not set — feedback will only be logged")

    def record(self, sender_id: str, original_message: str,
               analysis_summary: str, was_helpful: bool) -> None:
        """
        Insert one feedback row.

        Args:
            sender_id: WhatsApp sender identity
            original_message: Analyzed text (or tagged transcription)
            analysis_summary: Verdict label, e.g. 'Estafa Detectada.'
            was_helpful: The user's answer
        """
        if not self.database_url:
            logger.info(f"[FEEDBACK DB] Skipped (no database): user={sender_id}, "
                        f"result='{analysis_summary}', helpful={was_helpful}")
            return

        with psycopg.connect(self.database_url, connect_timeout=CONNECT_TIMEOUT) as conn:
            conn.execute(INSERT_FEEDBACK, (sender_id, original_message, analysis_summary, was_helpful))

        logger.info(f"[FEEDBACK DB] Saved feedback for {sender_id}")
