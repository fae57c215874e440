"""Gemini generateContent call used by the generation endpoint."""
import logging

import requests

from math_calendar.errors import EmptyTextError, UpstreamError

logger = logging.getLogger(__name__)

GEMINI_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"


def extract_text(result) -> str:
    """Pull the generated text out of a generateContent response body.

    Accepts a top-level ``text`` field or the usual
    ``candidates[0].content.parts[*].text`` shape. Returns "" when neither
    holds any text.
    """
    if not isinstance(result, dict):
        return ""
    if isinstance(result.get("text"), str):
        return result["text"]
    candidates = result.get("candidates")
    if not isinstance(candidates, list) or not candidates or not isinstance(candidates[0], dict):
        return ""
    content = candidates[0].get("content")
    if not isinstance(content, dict):
        return ""
    parts = content.get("parts")
    if not isinstance(parts, list):
        return ""
    return "".join(
        p["text"] for p in parts if isinstance(p, dict) and isinstance(p.get("text"), str)
    )


def generate_text(prompt: str, api_key: str, model: str, timeout: int = 30,
                  session: requests.Session | None = None) -> str:
    """Send one prompt upstream and return its non-empty text; raise UpstreamError otherwise."""
    http = session or requests
    body = {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}
    try:
        r = http.post(
            GEMINI_URL.format(model=model),
            params={"key": api_key},
            json=body,
            timeout=timeout,
        )
        r.raise_for_status()
        result = r.json()
    except (requests.RequestException, ValueError) as e:
        raise UpstreamError(f"Failed to fetch from Gemini: {e}") from e
    text = extract_text(result)
    if not text.strip():
        raise EmptyTextError("Gemini returned empty text")
    return text
