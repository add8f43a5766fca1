from fastapi import APIRouter, Depends
from pydantic import BaseModel
from grammar_assistant.api.deps import get_assistant
from grammar_assistant.models.report import ReadabilityScore
from grammar_assistant.models.suggestion import CheckResult, Suggestion
from grammar_assistant.services.analyze import GrammarAssistant

router = APIRouter(tags=["check"])


class TextIn(BaseModel):
    text: str


class ApplyIn(BaseModel):
    text: str
    suggestion: Suggestion


@router.post("/check", response_model=CheckResult)
def check(body: TextIn, assistant: GrammarAssistant = Depends(get_assistant)):
    return assistant.quick_check(body.text)


@router.post("/check/ai", response_model=CheckResult)
async def check_ai(body: TextIn, assistant: GrammarAssistant = Depends(get_assistant)):
    return await assistant.ai_check(body.text)


@router.post("/readability")
def readability(body: TextIn, assistant: GrammarAssistant = Depends(get_assistant)):
    score: ReadabilityScore = assistant.readability(body.text)
    return {**score.model_dump(), "level": score.level}


@router.post("/apply")
def apply(body: ApplyIn, assistant: GrammarAssistant = Depends(get_assistant)):
    updated = assistant.apply_suggestion(body.text, body.suggestion)
    if updated is None:
        return {"text": body.text, "applied": False}
    return {"text": updated, "applied": True}
