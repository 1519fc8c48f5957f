"""LLM Client Module
==================
Thin wrapper over an OpenAI-compatible chat completions API used by the
intent classifier and the content analyzer.

Both callers ask for a strict JSON object, so the client requests
JSON mode and hands back a parsed dict. Markdown fences or stray prose
around the object are tolerated.

Exports:
    call_llm()       — Raw completion text, or None on any failure.
    call_llm_json()  — Parsed JSON dict, or None on failure / non-JSON.
    extract_json()   — Best-effort JSON object extraction from model text.
"""

import json
import re
import logging

import requests

from guardian import config

logger = logging.getLogger(__name__)


class LLMQuotaExceeded(RuntimeError):
    """Provider answered 429 / insufficient_quota."""


def _call_provider(api_url: str, api_key: str, model: str,
                   messages: list[dict[str, str]], temperature: float,
                   max_tokens: int, timeout: int, json_mode: bool) -> str | None:
    """
    Generic OpenAI-compatible API call.

    Returns the generated text, or None if the call fails for any reason
    (server error, timeout, empty answer). A rate limit / exhausted quota
    raises LLMQuotaExceeded so callers can tell it apart.
    """
    headers = {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json"
    }

    payload = {
        "model": model,
        "messages": messages,
        "temperature": temperature,
        "max_tokens": max_tokens
    }
    if json_mode:
        payload["response_format"] = {"type": "json_object"}

    try:
        response = requests.post(f"{api_url.rstrip('/')}/chat/completions",
                                 headers=headers, json=payload, timeout=timeout)

        if response.status_code == 429:
            retry_after = response.headers.get("retry-after", "?")
            logger.warning(f"{model} rate limited (429), retry-after={retry_after}")
            raise LLMQuotaExceeded(f"{model} rate limited")

        if response.status_code >= 500:
            logger.warning(f"{model} server error ({response.status_code})")
            return None

        response.raise_for_status()

        content = (response.json()["choices"][0]["message"]["content"] or "").strip()

        if not content:
            logger.warning(f"{model} returned empty response")
            return None

        return content

    except requests.exceptions.Timeout:
        logger.warning(f"{model} timeout ({timeout}s)")
        return None

    except requests.exceptions.RequestException as e:
        logger.error(f"{model} request failed: {e}")
        return None

    except (KeyError, IndexError, ValueError) as e:
        logger.error(f"{model} malformed response: {e}")
        return None


def call_llm(messages: list[dict[str, str]], temperature: float = 0.2,
             max_tokens: int = 500, timeout: int = 30, json_mode: bool = False) -> str | None:
    """
    Send a chat completion to the configured provider.

    Args:
        messages: List of message dicts with 'role' and 'content'
        temperature: Sampling temperature (0.0-1.0)
        max_tokens: Completion budget
        timeout: HTTP timeout in seconds
        json_mode: Ask the provider for a JSON object response

    Returns:
        Generated text, or None if unavailable
    """
    if not config.OPENAI_API_KEY:
        logger.warning("OPENAI_API_KEY not set — LLM call skipped")
        return None

    return _call_provider(
        config.OPENAI_API_URL, config.OPENAI_API_KEY, config.OPENAI_MODEL,
        messages, temperature,
        max_tokens=max_tokens, timeout=timeout, json_mode=json_mode
    )


def extract_json(text: str) -> dict | None:
    """
    Robustly extract a JSON object from LLM output, handling cases where
    the model wraps it in a markdown code block or explanatory text.

    Args:
        text: Raw LLM response text

    Returns:
        Parsed dict if valid, None otherwise
    """
    if not text:
        return None

    try:
        parsed = json.loads(text)
        return parsed if isinstance(parsed, dict) else None
    except (json.JSONDecodeError, TypeError):
        pass

    code_match = re.search(r'```(?:json)?\s*(\{.*?\})\s*```', text, re.DOTALL)
    if code_match:
        try:
            return json.loads(code_match.group(1))
        except json.JSONDecodeError:
            pass

    brace_match = re.search(r'\{.*\}', text, re.DOTALL)
    if brace_match:
        try:
            return json.loads(brace_match.group())
        except json.JSONDecodeError:
            pass

    return None


def call_llm_json(messages: list[dict[str, str]], **kwargs) -> dict | None:
    """call_llm in JSON mode, parsed. None when unavailable or not JSON."""
    raw_output = call_llm(messages, json_mode=True, **kwargs)
    result = extract_json(raw_output)
    if raw_output and result is None:
        logger.warning(f"LLM returned non-JSON output: {raw_output[:200]}")
    return result
