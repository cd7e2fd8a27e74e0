"""
LLM provider for /chat. Returns a JSON string: {"answer": str, "company_ids": [int, ...]}.

When ENV=test (or EMBED_PROVIDER=deterministic / PYTEST_CURRENT_TEST), uses
DeterministicChatProvider (no network). Otherwise OpenAI chat completions (CHAT_MODEL).
The OpenAI client is created lazily on first generate().
"""

import json
import logging
import os
from typing import Any, Protocol, runtime_checkable

logger = logging.getLogger(__name__)

DEFAULT_CHAT_MODEL = "gpt-4o-mini"

# Prompt requires strict JSON output, no prose outside
CHAT_SYSTEM_PROMPT = """You answer questions about Y Combinator companies using ONLY the companies provided.
Return ONLY a valid JSON object: {"answer": "<answer text>", "company_ids": [<id of each company you relied on>]}.
Rules: cite only ids from the provided companies. If none of them answer the question, say so. No markdown fences."""


@runtime_checkable
class LLMProvider(Protocol):
    """Protocol for chat answer generation. Returns raw JSON string only."""

    def generate(self, question: str, companies: list[dict[str, Any]]) -> str:
        ...


class DeterministicChatProvider:
    """
    Deterministic provider for tests. No network.
    Summarizes the first three companies and cites them.
    """

    def generate(self, question: str, companies: list[dict[str, Any]]) -> str:
        picked = companies[:3]
        lines = [f"{c['name']}: {c.get('one_liner') or 'no description'}" for c in picked]
        draft = {
            "answer": "Relevant companies: " + "; ".join(lines) if lines else "No relevant companies.",
            "company_ids": [c["company_id"] for c in picked],
        }
        return json.dumps(draft, ensure_ascii=False)


class OpenAIChatProvider:
    """OpenAI chat completions in JSON mode."""

    def __init__(self, model: str | None = None) -> None:
        self.model = model or os.getenv("CHAT_MODEL", "").strip() or DEFAULT_CHAT_MODEL
        self._client = None

    def _get_client(self):
        if self._client is None:
            api_key = os.getenv("OPENAI_API_KEY", "").strip()
            if not api_key:
                raise RuntimeError("OPENAI_API_KEY is required for /chat. Set ENV=test for the offline provider.")
            from openai import OpenAI

            self._client = OpenAI(api_key=api_key)
        return self._client

    def generate(self, question: str, companies: list[dict[str, Any]]) -> str:
        context = json.dumps(companies, ensure_ascii=False)
        response = self._get_client().chat.completions.create(
            model=self.model,
            temperature=0.2,
            response_format={"type": "json_object"},
            messages=[
                {"role": "system", "content": CHAT_SYSTEM_PROMPT},
                {"role": "user", "content": f"Question: {question}\n\nCompanies:\n{context}"},
            ],
        )
        return response.choices[0].message.content or ""


_provider: LLMProvider | None = None


def _use_deterministic() -> bool:
    env = (os.getenv("ENV") or os.getenv("ENVIRONMENT") or "").lower()
    if env == "test" or os.getenv("PYTEST_CURRENT_TEST"):
        return True
    return (os.getenv("EMBED_PROVIDER") or "").lower().strip() == "deterministic"


def get_llm_provider(*, force_refresh: bool = False) -> LLMProvider:
    """
    Return the active LLM provider. Lazy-initialized.

    force_refresh: if True, re-resolve provider (for tests).
    """
    global _provider
    if force_refresh:
        _provider = None
    if _provider is None:
        if _use_deterministic():
            _provider = DeterministicChatProvider()
            logger.info("Using deterministic chat provider")
        else:
            _provider = OpenAIChatProvider()
            logger.info("Using OpenAI chat provider model=%s", _provider.model)
    return _provider
