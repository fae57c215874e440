"""Client side of the hint/explanation service."""
import logging
import threading
from dataclasses import dataclass
from enum import Enum

import requests

from math_calendar.errors import UpstreamError

logger = logging.getLogger(__name__)

MAX_PROMPT_CHARS = 800


class PromptKind(Enum):
    HINT = "hint"
    EXPLANATION = "explanation"
    FUN_FACT = "fun_fact"

    @property
    def template(self) -> str:
        return _TEMPLATES[self]

    @property
    def fallback(self) -> str:
        return _FALLBACKS[self]

    @property
    def path(self) -> str:
        return "/api/gemini/explain" if self is PromptKind.EXPLANATION else "/api/gemini"

    def format(self, context: "PromptContext") -> str:
        return self.template.format(
            question=context.question,
            topic=context.topic,
            answer=context.answer,
            mathematician=context.mathematician,
            theme=context.theme,
        )


_TEMPLATES = {
    PromptKind.HINT: (
        "Give a short, kid-friendly hint (no answers) for this math question. "
        "Question: {question}. Topic: {topic}. Do not reveal the answer."
    ),
    PromptKind.EXPLANATION: (
        "Give a kid-friendly explanation and the correct answer for this math question. "
        "Question: {question}. Topic: {topic}. Correct answer: {answer}. "
        "Keep it short and encouraging."
    ),
    PromptKind.FUN_FACT: (
        "Share a fun, 1-2 sentence fact about {mathematician} and the theme {theme}, for kids."
    ),
}

_FALLBACKS = {
    PromptKind.HINT: "⚠️ Hint not available right now. Try again!",
    PromptKind.EXPLANATION: "⚠️ Explanation not available right now. Try again!",
    PromptKind.FUN_FACT: "⚠️ Context not available right now. Try again!",
}


@dataclass(frozen=True)
class PromptContext:
    topic: str = ""
    question: str = ""
    answer: str = ""
    mathematician: str = ""
    theme: str = ""


def truncate_prompt(prompt: str, limit: int = MAX_PROMPT_CHARS) -> str:
    return prompt[:limit]


def build_prompt(kind: PromptKind, context: PromptContext) -> str:
    return truncate_prompt(kind.format(context))


class GatewayClient:
    """Posts prompts to the generation endpoint of the calendar service."""

    def __init__(self, base_url: str, timeout: int = 30, session: requests.Session | None = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def request_text(self, prompt: str, kind: PromptKind = PromptKind.HINT) -> str:
        """Return the generated text or raise UpstreamError."""
        url = self.base_url + kind.path
        try:
            r = self.session.post(url, json={"prompt": truncate_prompt(prompt)}, timeout=self.timeout)
            r.raise_for_status()
            body = r.json()
        except (requests.RequestException, ValueError) as e:
            raise UpstreamError(f"{kind.value} request failed: {e}") from e
        text = body.get("text") if isinstance(body, dict) else None
        if not isinstance(text, str) or not text.strip():
            raise UpstreamError(f"{kind.value} response had no text")
        return text

    def ask(self, kind: PromptKind, prompt: str) -> str:
        """Like request_text, but any failure becomes the kind's fallback message."""
        try:
            return self.request_text(prompt, kind)
        except UpstreamError as e:
            logger.warning("Gateway error: %s", e)
            return kind.fallback

    def submit(self, ticket, kind: PromptKind, prompt: str, callback) -> threading.Thread:
        """Run ``ask`` on a daemon thread and hand ``(ticket, text)`` to ``callback``."""
        def worker():
            callback(ticket, self.ask(kind, prompt))

        thread = threading.Thread(target=worker, daemon=True)
        thread.start()
        return thread
