"""
Background Analysis Orchestrator
=================================
Runs the slow path for one analysis request, outside the webhook call:

    transcribe (audio only) → analyze → compose → store context → deliver

Architecture:
    1. launch() starts run() on a daemon thread and returns immediately;
       the webhook has already acknowledged the user.
    2. Transcription and analysis each run on their own short-lived daemon
       thread, joined with a timeout. The clock starts when the step starts,
       never behind another sender's step. On expiry the step is abandoned:
       its late result, if any, is discarded.
    3. A verdict with an empty reason counts as a failed analysis.
    4. The sender's feedback context is stored (overwriting any older
       unanswered one) before the verdict is delivered, so a fast "sí"
       always finds it.
    5. Every failure ends with exactly one plain-language message to the
       user. Nothing is retried and nothing escapes run().
"""

import logging
import threading
import traceback

from guardian.context_store import InteractionContextStore
from guardian.core.analyzer import AnalysisError
from guardian.core.composer import compose
from guardian.messages import (
    ANALYSIS_FAILED_TEXT,
    ANALYSIS_TIMEOUT_TEXT,
    AUDIO_FAILED_TEXT,
    AUDIO_TIMEOUT_TEXT,
    FEEDBACK_PROMPT,
    SURVEY_TEMPLATE,
    TRANSCRIPTION_TAG,
)
from guardian.schemas import AudioPayload, InteractionContext

logger = logging.getLogger(__name__)


class StepTimeout(Exception):
    """A pipeline step did not finish before its deadline."""


class BackgroundAnalysisOrchestrator:

    def __init__(self, transcriber, analyzer, sender, store: InteractionContextStore,
                 survey_url: str = "", transcription_timeout: float = 45,
                 analysis_timeout: float | None = 60):
        """
        Args:
            transcriber: Object with transcribe(audio) -> str
            analyzer: Object with analyze(text) -> AnalysisOutcome
            sender: Object with send(sender_id, text)
            store: Pending-feedback context store
            survey_url: Appended to every verdict when non-empty
            transcription_timeout: Seconds allowed for transcription
            analysis_timeout: Seconds allowed for analysis; None or 0 = unbounded
        """
        self.transcriber = transcriber
        self.analyzer = analyzer
        self.sender = sender
        self.store = store
        self.survey_url = (survey_url or "").strip()
        self.transcription_timeout = transcription_timeout
        self.analysis_timeout = analysis_timeout

    # ---------- LIFECYCLE ----------

    def launch(self, sender_id: str, text: str, audio: AudioPayload | None = None) -> threading.Thread:
        """Start run() on a daemon thread. The caller never waits for it."""
        t = threading.Thread(
            target=self.run,
            args=(sender_id, text, audio),
            daemon=True,
            name=f"analysis-{sender_id}",
        )
        t.start()
        logger.info(f"[PIPELINE {sender_id}] Launched (audio={audio is not None})")
        return t

    # ---------- HELPERS ----------

    def _with_deadline(self, fn, arg, timeout: float | None):
        if not timeout:
            return fn(arg)

        name = getattr(fn, "__name__", "step")
        outcome = {}

        def _target():
            try:
                outcome["result"] = fn(arg)
            except Exception as e:
                outcome["error"] = e

        # Own thread per step: never queued behind an abandoned one
        worker = threading.Thread(target=_target, daemon=True, name=f"pipeline-{name}")
        worker.start()
        worker.join(timeout=timeout)

        if worker.is_alive():
            raise StepTimeout(f"{name} exceeded {timeout}s")
        if "error" in outcome:
            raise outcome["error"]
        return outcome.get("result")

    def _notify(self, sender_id: str, text: str) -> None:
        try:
            self.sender.send(sender_id, text)
        except Exception as e:
            logger.error(f"[PIPELINE {sender_id}] Delivery failed: {e}")

    def build_final_message(self, response_text: str) -> str:
        """Verdict + feedback prompt (+ survey link when configured)."""
        parts = [response_text, FEEDBACK_PROMPT]
        if self.survey_url:
            parts.append(SURVEY_TEMPLATE.format(url=self.survey_url))
        return "\n\n".join(parts)

    # ---------- PIPELINE ----------

    def run(self, sender_id: str, text: str, audio: AudioPayload | None = None) -> None:
        """
        Execute the full pipeline for one request. Never raises.

        Args:
            sender_id: Who to deliver the verdict to
            text: Message text (ignored for analysis when audio is present)
            audio: Optional voice note to transcribe first
        """
        try:
            self._run_pipeline(sender_id, text, audio)
        except Exception as e:
            logger.error(f"[PIPELINE {sender_id}] Unexpected error: {e}")
            logger.error(traceback.format_exc())
            self._notify(sender_id, ANALYSIS_FAILED_TEXT)

    def _run_pipeline(self, sender_id: str, text: str, audio: AudioPayload | None) -> None:
        content = text
        original_message = text

        # ---------- TRANSCRIPTION ----------

        if audio is not None:
            try:
                transcription = self._with_deadline(
                    self.transcriber.transcribe, audio, self.transcription_timeout
                )
            except StepTimeout as e:
                logger.warning(f"[PIPELINE {sender_id}] Transcription timed out: {e}")
                self._notify(sender_id, AUDIO_TIMEOUT_TEXT)
                return
            except Exception as e:
                logger.error(f"[PIPELINE {sender_id}] Transcription failed: {e}")
                self._notify(sender_id, AUDIO_FAILED_TEXT)
                return

            if not transcription or not transcription.strip():
                logger.error(f"[PIPELINE {sender_id}] Transcription returned no text")
                self._notify(sender_id, AUDIO_FAILED_TEXT)
                return

            content = transcription
            original_message = f"{TRANSCRIPTION_TAG} {transcription}"

        # ---------- ANALYSIS ----------

        try:
            outcome = self._with_deadline(self.analyzer.analyze, content, self.analysis_timeout)
            if not outcome.reason or not outcome.reason.strip():
                raise AnalysisError("analyzer returned an empty reason")
        except StepTimeout as e:
            logger.warning(f"[PIPELINE {sender_id}] Analysis timed out: {e}")
            self._notify(sender_id, ANALYSIS_TIMEOUT_TEXT)
            return
        except Exception as e:
            logger.error(f"[PIPELINE {sender_id}] Analysis failed: {e}")
            self._notify(sender_id, ANALYSIS_FAILED_TEXT)
            return

        # ---------- COMPOSE, STORE, DELIVER ----------

        composed = compose(outcome)

        self.store.put(sender_id, InteractionContext(
            original_message=original_message,
            analysis_summary=composed.analysis_summary,
        ))

        logger.info(f"[PIPELINE {sender_id}] Delivering verdict: {composed.analysis_summary}")
        self._notify(sender_id, self.build_final_message(composed.response_text))
