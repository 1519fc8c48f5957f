"""
Content Analysis Module
========================
Produces an AnalysisOutcome for a piece of text using two independent
checks that run concurrently:

1. **Scam / fake-news check** (LLM): Optionally grounded with Google
   Custom Search snippets, then a JSON-mode verdict with isScam,
   isFakeNews, isVerifiedTrue and a user-facing Spanish reason.

2. **Virus check** (VirusTotal): Every http(s) URL in the text, capped at
   4 per message to respect the public API quota, looked up in the URL
   report endpoint. Any positive detection flags the message.

The LLM check is mandatory. If it cannot produce a verdict the analysis
fails with AnalysisError. The virus check is best-effort: lookup errors
are logged and that URL is treated as clean.
"""

import re
import logging
from concurrent.futures import ThreadPoolExecutor

import requests

from guardian import config
from guardian.llm.llm_client import LLMQuotaExceeded, call_llm_json
from guardian.schemas import AnalysisOutcome

logger = logging.getLogger(__name__)

URL_PATTERN = re.compile(r"https?://\S+")
MAX_URLS_PER_MESSAGE = 4

VIRUSTOTAL_URL_REPORT = "https://www.virustotal.com/vtapi/v2/url/report"
VIRUSTOTAL_TIMEOUT = 10

GOOGLE_SEARCH_URL = "https://www.googleapis.com/customsearch/v1"
GOOGLE_SEARCH_TIMEOUT = 10

FACT_CHECK_UNAVAILABLE = "La verificación de hechos externa no está disponible en este momento."

SYSTEM_PROMPT = """
Actúa como un experto en ciberseguridad y un meticuloso verificador de hechos (fact-checker).
Tu tarea es analizar el mensaje que te envía el usuario.

Instrucciones:
1. Análisis de Estafa (Scam): Evalúa el mensaje en busca de indicadores de estafa
   (phishing, ofertas irreales, urgencia, suplantación de identidad, pedidos de datos o dinero).
2. Análisis de Noticia Falsa (Fake News): Usando el Contexto de Búsqueda Web proporcionado,
   determina si el mensaje contiene desinformación. Si el contexto contradice el mensaje,
   es probable que sea una noticia falsa.
3. Información Verificada: Si el contexto confirma claramente lo que dice el mensaje,
   márcalo como verificado.
4. Razonamiento: En "analysisSteps", razona paso a paso tus conclusiones.
5. Veredicto Final: La "reason" debe ser una explicación clara y unificada para el usuario
   final en español. Si no hay peligro, indícalo.

Responde únicamente con un objeto JSON estricto:
{
    "analysisSteps": "razonamiento paso a paso",
    "isScam": true o false,
    "isFakeNews": true o false,
    "isVerifiedTrue": true o false,
    "reason": "explicación para el usuario final en español"
}
"""


class AnalysisError(RuntimeError):
    """The analyzer could not produce a verdict."""


def extract_urls(text: str) -> list[str]:
    """Return every http(s) URL in text, in order of appearance."""
    return URL_PATTERN.findall(text or "")


class ContentAnalyzer:

    def __init__(self, http=requests):
        """
        Args:
            http: Object exposing get() like the requests module
        """
        self.http = http

    # ---------- PUBLIC ----------

    def analyze(self, text: str) -> AnalysisOutcome:
        """
        Analyze text for scams, fake news and malicious links.

        Args:
            text: Message text (or audio transcription)

        Returns:
            AnalysisOutcome with flags and reason

        Raises:
            AnalysisError: If the LLM verdict is unavailable
        """
        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="analysis") as pool:
            verdict_future = pool.submit(self.check_scam_and_fake_news, text)
            virus_future = pool.submit(self.check_for_viruses, text)
            verdict = verdict_future.result()
            has_virus = virus_future.result()

        outcome = AnalysisOutcome(
            is_scam=bool(verdict.get("isScam")),
            is_fake_news=bool(verdict.get("isFakeNews")),
            has_virus=bool(has_virus),
            is_verified_true=bool(verdict.get("isVerifiedTrue")),
            reason=str(verdict.get("reason") or "").strip(),
        )
        logger.info(f"Analysis result: scam={outcome.is_scam}, fakeNews={outcome.is_fake_news}, "
                    f"virus={outcome.has_virus}, verified={outcome.is_verified_true}")
        return outcome

    # ---------- SCAM / FAKE NEWS ----------

    def get_fact_check_context(self, query: str) -> str:
        """
        Fetch the top 3 Google Custom Search snippets for the message.

        Always returns a string, a fixed notice when search is not
        configured or fails.
        """
        if not config.GOOGLE_API_KEY or not config.GOOGLE_SEARCH_ENGINE_ID:
            logger.info("Google Custom Search not configured — skipping fact-check context")
            return FACT_CHECK_UNAVAILABLE

        try:
            response = self.http.get(
                GOOGLE_SEARCH_URL,
                params={
                    "key": config.GOOGLE_API_KEY,
                    "cx": config.GOOGLE_SEARCH_ENGINE_ID,
                    "q": f"{query[:200]} es real o falso",
                },
                timeout=GOOGLE_SEARCH_TIMEOUT,
            )
            response.raise_for_status()
            items = response.json().get("items") or []
        except Exception as e:
            logger.error(f"Google Custom Search error: {e}")
            return "Error al realizar la búsqueda para verificación de hechos."

        if not items:
            return "No se encontraron resultados de búsqueda para verificar la información."

        snippets = "\n".join(
            f'Fuente {i + 1}: "{item.get("snippet", "")}"'
            for i, item in enumerate(items[:3])
        )
        return f"Resultados de búsqueda para verificación:\n{snippets}"

    def check_scam_and_fake_news(self, text: str) -> dict:
        """
        Ask the LLM for a scam / fake-news verdict.

        Raises:
            AnalysisError: If the LLM is unavailable or returns no JSON
        """
        fact_check_context = self.get_fact_check_context(text)

        messages = [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": (
                f"Contexto de Búsqueda Web:\n{fact_check_context}\n\n"
                f'Mensaje del Usuario a Analizar:\n"{text}"'
            )}
        ]

        try:
            result = call_llm_json(messages, temperature=0.2, max_tokens=600, timeout=30)
        except LLMQuotaExceeded as e:
            logger.error(f"Analysis LLM quota exhausted: {e}")
            raise AnalysisError("LLM quota exhausted") from e

        if result is None:
            raise AnalysisError("LLM verdict unavailable")

        return result

    # ---------- VIRUS ----------

    def check_for_viruses(self, text: str) -> bool:
        """
        Look up each URL in VirusTotal; True on the first positive.

        Errors (timeouts, 204 not-yet-scanned, 429 quota) are logged and
        that URL is skipped.
        """
        urls = extract_urls(text)
        if not urls:
            return False

        if not config.VIRUSTOTAL_API_KEY:
            logger.warning("VIRUSTOTAL_API_KEY not set — skipping URL reputation check")
            return False

        for url in urls[:MAX_URLS_PER_MESSAGE]:
            try:
                response = self.http.get(
                    VIRUSTOTAL_URL_REPORT,
                    params={"apikey": config.VIRUSTOTAL_API_KEY, "resource": url},
                    timeout=VIRUSTOTAL_TIMEOUT,
                )
                if response.status_code in (204, 429):
                    logger.info(f"VirusTotal skipped {url} (status {response.status_code})")
                    continue
                response.raise_for_status()
                positives = response.json().get("positives") or 0
            except requests.exceptions.Timeout:
                logger.error(f"VirusTotal timeout for {url}")
                continue
            except Exception as e:
                logger.error(f"VirusTotal error for {url}: {e}")
                continue

            if positives > 0:
                logger.info(f"Malicious URL detected by VirusTotal: {url} ({positives} positives)")
                return True

        return False
