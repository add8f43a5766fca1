from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from grammar_assistant.api.deps import get_assistant
from grammar_assistant.services.analyze import GrammarAssistant

router = APIRouter(tags=["rewrite"])


class RewriteIn(BaseModel):
    text: str
    style: str = "professional"


@router.post("/rewrite")
async def rewrite(body: RewriteIn, assistant: GrammarAssistant = Depends(get_assistant)):
    if not body.text.strip():
        raise HTTPException(status_code=400, detail="Please enter some text to rewrite")
    if not assistant.ai.is_configured:
        raise HTTPException(status_code=503, detail="AI not configured")
    rewritten = await assistant.rewrite(body.text, body.style)
    if rewritten is None:
        raise HTTPException(status_code=502, detail="Failed to generate rewrite. Please try again.")
    # the caller accepts it through /history/accept
    return {"style": body.style, "original_text": body.text, "rewritten_text": rewritten}
