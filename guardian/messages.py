"""
User-Facing Texts
==================
Every fixed message the bot sends, in one place. The bot talks Spanish.
Failure texts are plain language; no exception strings ever reach a user.
"""

# ---------- DIRECT REPLIES ----------

GREETING_TEXT = (
    "¡Hola! 👋 Soy Guardián Digital, tu asistente de seguridad.\n\n"
    "Envíame cualquier mensaje, enlace o audio que te parezca sospechoso "
    "y te diré si es una estafa, una noticia falsa o un enlace peligroso."
)

HELP_TEXT = (
    "ℹ️ *¿Cómo te ayudo?*\n\n"
    "1. Reenvíame el mensaje, enlace o audio que recibiste.\n"
    "2. Lo analizo en busca de estafas, noticias falsas y virus.\n"
    "3. Te respondo con un veredicto y una recomendación.\n\n"
    "Después puedes responder 'sí' o 'no' para contarme si te fue útil."
)

# ---------- ACKNOWLEDGMENTS ----------

ANALYSIS_ACK_TEXT = "🔎 Recibido. Estoy analizando tu mensaje, te respondo en un momento..."

AUDIO_ACK_TEXT = "🎙️ Recibí tu audio. Lo estoy transcribiendo y analizando, dame un momento..."

# ---------- FEEDBACK ----------

FEEDBACK_PROMPT = "*¿Te fue útil este análisis? Responde 'sí' o 'no'.*"

SURVEY_TEMPLATE = "📝 ¿Nos ayudas a mejorar? Responde esta breve encuesta: {url}"

FEEDBACK_THANKS_TEXT = "¡Gracias por tu feedback! Me ayuda a mejorar. 😊"

FEEDBACK_APOLOGY_TEXT = "Lamento no haber sido de ayuda. Gracias por tu feedback, lo usaré para aprender. 👍"

FEEDBACK_CLARIFICATION_TEXT = (
    "No tengo ningún análisis reciente pendiente de tu opinión. "
    "Envíame un mensaje, enlace o audio y lo reviso por ti."
)

# ---------- PIPELINE FAILURES ----------

AUDIO_TIMEOUT_TEXT = (
    "⏱️ Tu audio tardó demasiado en procesarse. "
    "Intenta enviar un audio más corto o escribe el mensaje como texto."
)

AUDIO_FAILED_TEXT = (
    "🎙️ No pude entender tu audio. "
    "Intenta enviarlo de nuevo o escribe el mensaje como texto."
)

ANALYSIS_TIMEOUT_TEXT = (
    "⏱️ El análisis está tardando más de lo normal. "
    "Por favor, vuelve a enviarme el mensaje en unos minutos."
)

ANALYSIS_FAILED_TEXT = (
    "😕 No pude analizar tu mensaje en este momento. "
    "Por favor, inténtalo de nuevo más tarde."
)

# ---------- TRANSCRIPTION PROVENANCE ----------

TRANSCRIPTION_TAG = "[Audio transcrito]"
