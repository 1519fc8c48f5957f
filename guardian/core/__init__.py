"""
Core Modules
=============
Contains the conversational core:
- router.py            — Intent routing for every inbound message
- orchestrator.py      — Background transcribe → analyze → deliver pipeline
- composer.py          — Prioritized verdict text + summary label
- feedback.py          — sí/no feedback correlation
- intent_classifier.py — LLM intent classification (fail-open)
- analyzer.py          — Scam / fake-news / virus analysis
- transcriber.py       — Whisper voice-note transcription
"""
