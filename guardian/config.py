"""
Configuration Module
=====================
Loads environment variables from .env file for:
- API_KEY: Shared secret the WhatsApp transport sends in X-API-Key
- OPENAI_API_KEY: Key for the OpenAI-compatible chat + Whisper endpoints
- GOOGLE_API_KEY / GOOGLE_SEARCH_ENGINE_ID: Custom Search fact-check context
- VIRUSTOTAL_API_KEY: URL reputation lookups
- TWILIO_*: Outbound WhatsApp delivery and media download credentials
- DATABASE_URL: Postgres DSN for the feedback table
- SURVEY_URL: Optional survey link appended to every analysis response

Timeouts are in seconds. CONTEXT_TTL_SECONDS=0 keeps pending feedback
contexts until they are answered or replaced.

Raises RuntimeError at startup if required variables are missing,
preventing the app from starting in an unconfigured state.
"""

import os
from dotenv import load_dotenv

load_dotenv()

API_KEY: str = os.getenv("API_KEY", "")

OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
OPENAI_API_URL: str = os.getenv("OPENAI_API_URL", "https://api.openai.com/v1")
OPENAI_MODEL: str = os.getenv("OPENAI_MODEL", "gpt-3.5-turbo")
WHISPER_MODEL: str = os.getenv("WHISPER_MODEL", "whisper-1")

GOOGLE_API_KEY: str = os.getenv("GOOGLE_API_KEY", "")
GOOGLE_SEARCH_ENGINE_ID: str = os.getenv("GOOGLE_SEARCH_ENGINE_ID", "")
VIRUSTOTAL_API_KEY: str = os.getenv("VIRUSTOTAL_API_KEY", "")

TWILIO_ACCOUNT_SID: str = os.getenv("TWILIO_ACCOUNT_SID", "")
TWILIO_AUTH_TOKEN: str = os.getenv("TWILIO_AUTH_TOKEN", "")
TWILIO_WHATSAPP_NUMBER: str = os.getenv("TWILIO_WHATSAPP_NUMBER", "")

DATABASE_URL: str = os.getenv("DATABASE_URL", "")

SURVEY_URL: str = os.getenv("SURVEY_URL", "").strip()

TRANSCRIPTION_TIMEOUT_SECONDS: float = float(os.getenv("TRANSCRIPTION_TIMEOUT_SECONDS", "45"))
ANALYSIS_TIMEOUT_SECONDS: float = float(os.getenv("ANALYSIS_TIMEOUT_SECONDS", "60"))
CONTEXT_TTL_SECONDS: float = float(os.getenv("CONTEXT_TTL_SECONDS", "86400"))

if not API_KEY:
    raise RuntimeError("API_KEY not set in environment — check .env file")

# Every other key is optional: the collaborator that needs it logs a warning
# and degrades (no fact-check context, no virus lookup, no delivery, no DB).
