"""Shared fixtures: fake collaborators for the conversational core."""

import os
import threading

# guardian.config refuses to import without an API key
os.environ.setdefault("API_KEY", "test-api-key")

import pytest

from guardian.context_store import InteractionContextStore
from guardian.schemas import AnalysisOutcome, Intent


class FakeSender:
    def __init__(self, fail: bool = False):
        self.sent: list[tuple[str, str]] = []
        self.fail = fail
        self._lock = threading.Lock()

    def send(self, sender_id, text):
        with self._lock:
            self.sent.append((sender_id, text))
        if self.fail:
            raise ConnectionError("transport down")
        return True

    def texts_for(self, sender_id):
        return [text for sid, text in self.sent if sid == sender_id]


class FakeClassifier:
    def __init__(self, intent=Intent.ANALYSIS_REQUEST, error: Exception | None = None):
        self.intent = intent
        self.error = error
        self.calls: list[str] = []

    def classify(self, text):
        self.calls.append(text)
        if self.error:
            raise self.error
        return self.intent


class FakeAnalyzer:
    def __init__(self, outcome: AnalysisOutcome | None = None, error: Exception | None = None,
                 delay: threading.Event | None = None):
        self.outcome = outcome or AnalysisOutcome(reason="No encontré señales de riesgo.")
        self.error = error
        self.delay = delay
        self.calls: list[str] = []

    def analyze(self, text):
        self.calls.append(text)
        if self.delay is not None:
            self.delay.wait(5)
        if self.error:
            raise self.error
        return self.outcome


class FakeTranscriber:
    def __init__(self, text="Hola, te llamo del banco, necesito tu clave.",
                 error: Exception | None = None, block: threading.Event | None = None):
        self.text = text
        self.error = error
        self.block = block
        self.calls = []

    def transcribe(self, audio):
        self.calls.append(audio)
        if self.block is not None:
            self.block.wait(5)
        if self.error:
            raise self.error
        return self.text


class FakeRecorder:
    def __init__(self, error: Exception | None = None):
        self.records: list[tuple] = []
        self.error = error

    def record(self, sender_id, original_message, analysis_summary, was_helpful):
        self.records.append((sender_id, original_message, analysis_summary, was_helpful))
        if self.error:
            raise self.error


class FakeOrchestrator:
    def __init__(self):
        self.launches: list[tuple] = []

    def launch(self, sender_id, text, audio=None):
        self.launches.append((sender_id, text, audio))


@pytest.fixture
def store():
    return InteractionContextStore()


@pytest.fixture
def sender():
    return FakeSender()


@pytest.fixture
def recorder():
    return FakeRecorder()
