from typing import Optional
from fastapi import FastAPI
from grammar_assistant.api.routes_check import router as check_router
from grammar_assistant.api.routes_rewrite import router as rewrite_router
from grammar_assistant.api.routes_history import router as history_router
from grammar_assistant.middleware.limits import BodySizeLimitMiddleware
from grammar_assistant.services.analyze import GrammarAssistant, build_assistant


def create_app(assistant: Optional[GrammarAssistant] = None) -> FastAPI:
    app = FastAPI(title="GrammarAssistant")
    app.state.assistant = assistant if assistant is not None else build_assistant()

    app.add_middleware(BodySizeLimitMiddleware)

    @app.get("/health")
    def health():
        a = app.state.assistant
        return {
            "status": "ok",
            "spell_checker": type(a.spell_checker).__name__,
            "ai_configured": a.ai.is_configured,
        }

    app.include_router(check_router)
    app.include_router(rewrite_router)
    app.include_router(history_router)
    return app


app = create_app()
