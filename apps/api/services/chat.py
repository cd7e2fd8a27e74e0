"""Question answering over the company corpus.

Retrieval is the semantic ranking used by /semantic-search (same filters, same
order); the top-K companies are the only context the LLM sees and the only ids
a citation may reference.
"""

import json
import logging
from typing import Any

from apps.api.schemas.requests import SearchFilters, SearchParams
from apps.api.schemas.responses import ChatCitation, ChatResponse
from apps.api.services.llm_provider import get_llm_provider
from apps.api.services.search import rank_companies
from apps.api.utils.json_fields import parse_json_array

logger = logging.getLogger(__name__)

DESCRIPTION_MAX = 600
NO_MATCH_ANSWER = "No matching companies were found for this question with the current filters."


def _extract_json(text: str) -> str | None:
    """Extract JSON object from LLM response. Handles wrapped markdown/code blocks."""
    s = text.strip()
    if s.startswith("```"):
        lines = s.split("\n")[1:]
        if lines and lines[-1].strip() == "```":
            lines = lines[:-1]
        s = "\n".join(lines).strip()
    start = s.find("{")
    end = s.rfind("}") + 1
    if start >= 0 and end > start:
        return s[start:end]
    return None


def _context_item(company: Any, score: float) -> dict[str, Any]:
    return {
        "company_id": company.id,
        "name": company.name,
        "one_liner": company.one_liner,
        "description": (company.long_description or "")[:DESCRIPTION_MAX],
        "batch": company.batch,
        "industry": company.industry,
        "tags": parse_json_array(company.tags),
        "website": company.website,
        "score": round(score, 4),
    }


def _parse_draft(raw: str) -> tuple[str, list[int]]:
    """(answer, cited ids) from the provider output. Unparseable output is used as plain text."""
    extracted = _extract_json(raw or "")
    if extracted:
        try:
            data = json.loads(extracted)
        except json.JSONDecodeError as e:
            logger.warning("Chat draft parse failed: %s", e)
        else:
            if isinstance(data, dict):
                ids = [i for i in data.get("company_ids") or [] if isinstance(i, int)]
                return str(data.get("answer") or "").strip(), ids
    return (raw or "").strip(), []


def answer_company_question(question: str, filters: SearchFilters | None = None, top_k: int = 8) -> ChatResponse:
    """Answer a question from the top_k semantically closest companies matching filters."""
    params = SearchParams(query=question, filters=filters or SearchFilters())
    retrieved = rank_companies(params)[:top_k]
    if not retrieved:
        return ChatResponse(answer=NO_MATCH_ANSWER, citations=[])

    context = [_context_item(c, score) for c, score in retrieved]
    answer, cited_ids = _parse_draft(get_llm_provider().generate(question, context))

    by_id = {c.id: (c, score) for c, score in retrieved}
    citations: list[ChatCitation] = []
    seen: set[int] = set()
    for company_id in cited_ids:
        if company_id in by_id and company_id not in seen:
            seen.add(company_id)
            company, score = by_id[company_id]
            citations.append(ChatCitation(company_id=company_id, name=company.name, score=round(score, 4)))
    dropped = len([i for i in cited_ids if i not in by_id])
    if dropped:
        logger.warning("Dropped %d citations to companies outside the retrieved set", dropped)
    return ChatResponse(answer=answer or NO_MATCH_ANSWER, citations=citations)
