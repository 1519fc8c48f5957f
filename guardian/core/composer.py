"""
Response Composer
==================
Turns an AnalysisOutcome into the user-facing verdict and a short summary
label used for feedback logging.

Severity ranking, top to bottom:

1. **Virus**: sole verdict; scam / fake-news flags are not shown at all.
2. **Scam and/or fake news**: titles stacked (scam first), one reason.
3. **Verified true**: informational verdict.
4. **Safe**: nothing detected.

The analyzer's reason is always included verbatim, exactly once.
Pure: no I/O, no state.
"""

from guardian.schemas import AnalysisOutcome, ComposedResponse

VIRUS_TITLE = "☣️ ¡Peligro de Virus!"
VIRUS_ADVICE = "El enlace podría ser malicioso. Te recomiendo no abrirlo ni descargar nada."
VIRUS_SUMMARY = "Peligro de Virus Detectado."

SCAM_TITLE = "⚠️ ¡Alerta de Estafa!"
SCAM_SUMMARY = "Estafa Detectada."

FAKE_NEWS_TITLE = "📰 ¡Noticia Falsa Detectada!"
FAKE_NEWS_SUMMARY = "Noticia Falsa Detectada."

VERIFIED_TITLE = "✅ Información verificada."
VERIFIED_SUMMARY = "Información Verificada."

SAFE_TITLE = "✅ Tu mensaje parece seguro."
SAFE_SUMMARY = "Mensaje Seguro."


def compose(outcome: AnalysisOutcome) -> ComposedResponse:
    """
    Build the prioritized verdict for an analysis outcome.

    Args:
        outcome: Verdict flags plus the analyzer's free-text reason

    Returns:
        ComposedResponse with response_text and analysis_summary
    """
    reason = outcome.reason

    if outcome.has_virus:
        return ComposedResponse(
            response_text=f"{VIRUS_TITLE} {VIRUS_ADVICE}\n\n{reason}",
            analysis_summary=VIRUS_SUMMARY,
        )

    titles = []
    summaries = []
    if outcome.is_scam:
        titles.append(SCAM_TITLE)
        summaries.append(SCAM_SUMMARY)
    if outcome.is_fake_news:
        titles.append(FAKE_NEWS_TITLE)
        summaries.append(FAKE_NEWS_SUMMARY)

    if titles:
        return ComposedResponse(
            response_text="\n".join(titles) + f"\n\n{reason}",
            analysis_summary=" ".join(summaries),
        )

    if outcome.is_verified_true:
        return ComposedResponse(
            response_text=f"{VERIFIED_TITLE} {reason}",
            analysis_summary=VERIFIED_SUMMARY,
        )

    return ComposedResponse(
        response_text=f"{SAFE_TITLE} {reason}",
        analysis_summary=SAFE_SUMMARY,
    )
