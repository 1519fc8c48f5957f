"""
Intent Classification Module
=============================
Classifies the purpose of a text message with a JSON-mode LLM call.

Fail-open: any failure (no API key, timeout, quota, non-JSON answer)
yields ANALYSIS_REQUEST: when unsure, analyze. Unrecognised labels come
back as UNKNOWN, which the router also sends to analysis.

The one-word "sí"/"no" shortcut lives in the router, before this module
is ever called.
"""

import logging

from guardian.llm.llm_client import call_llm_json
from guardian.schemas import Intent

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """
Clasifica la intención del usuario en una de las siguientes categorías:
GREETING, ANALYSIS_REQUEST, FEEDBACK_POSITIVE, FEEDBACK_NEGATIVE, HELP_REQUEST, UNKNOWN.

- GREETING: Saludos como "hola", "buenos días", "qué tal".
- ANALYSIS_REQUEST: Cualquier texto, enlace o audio que el usuario envíe para ser analizado.
  Es la intención por defecto si no encaja en otra.
- FEEDBACK_POSITIVE: Respuestas afirmativas a la pregunta de si el análisis fue útil,
  como "sí", "me sirvió", "gracias".
- FEEDBACK_NEGATIVE: Respuestas negativas como "no", "no me sirvió".
- HELP_REQUEST: Peticiones de ayuda como "¿qué haces?", "ayuda", "info".
- UNKNOWN: No se entiende la petición.

Responde únicamente con un objeto JSON en el formato:
{ "intent": "CATEGORIA" }
"""


class IntentClassifier:

    def classify(self, text: str) -> Intent:
        """
        Classify a message.

        Args:
            text: Message text

        Returns:
            Intent (ANALYSIS_REQUEST when classification is unavailable)
        """
        messages = [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": f'Mensaje del usuario: "{text}"'}
        ]

        try:
            result = call_llm_json(messages, temperature=0, max_tokens=30, timeout=10)
        except Exception as e:
            logger.error(f"Intent classification error: {e}")
            return Intent.ANALYSIS_REQUEST

        if not result or "intent" not in result:
            logger.warning("Intent classifier unavailable — defaulting to ANALYSIS_REQUEST")
            return Intent.ANALYSIS_REQUEST

        intent = Intent.parse(result["intent"])
        logger.info(f"Intent classified as {intent.value}")
        return intent
