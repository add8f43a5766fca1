from typing import List
from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from grammar_assistant.api.deps import get_assistant
from grammar_assistant.models.report import HistoryEntry, StatisticsReport
from grammar_assistant.services.analyze import GrammarAssistant

router = APIRouter(tags=["history"])


class AcceptIn(BaseModel):
    original_text: str
    corrected_text: str


@router.post("/history/accept", response_model=HistoryEntry)
def accept(body: AcceptIn, assistant: GrammarAssistant = Depends(get_assistant)):
    return assistant.accept(body.original_text, body.corrected_text)


@router.post("/history/undo")
def undo(assistant: GrammarAssistant = Depends(get_assistant)):
    entry = assistant.undo()
    if entry is None:
        raise HTTPException(status_code=404, detail="Nothing to undo")
    # restore the text as it was before the correction
    return {"text": entry.original_text, "entry": entry, "can_redo": assistant.history.can_redo}


@router.post("/history/redo")
def redo(assistant: GrammarAssistant = Depends(get_assistant)):
    entry = assistant.redo()
    if entry is None:
        raise HTTPException(status_code=404, detail="Nothing to redo")
    return {"text": entry.corrected_text, "entry": entry, "can_undo": assistant.history.can_undo}


@router.get("/history", response_model=List[HistoryEntry])
def history(
    limit: int = Query(10, ge=1, le=50, description="Most recent entries to return"),
    assistant: GrammarAssistant = Depends(get_assistant),
):
    return assistant.history.entries(limit)


@router.get("/stats", response_model=StatisticsReport)
def stats(
    top: int = Query(5, ge=1, le=50),
    assistant: GrammarAssistant = Depends(get_assistant),
):
    return assistant.report(top)
