"""Chat endpoint: POST /chat."""

from fastapi import APIRouter

from apps.api.schemas.requests import ChatRequest
from apps.api.schemas.responses import ChatResponse
from apps.api.services.chat import answer_company_question

router = APIRouter()


@router.post("/chat", response_model=ChatResponse)
async def chat(body: ChatRequest) -> ChatResponse:
    """Answer a question from the top-K semantically matching companies. Citations reference those companies only."""
    return answer_company_question(body.question, body.filters, body.top_k)
