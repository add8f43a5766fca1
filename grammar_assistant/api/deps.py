from fastapi import Request
from grammar_assistant.services.analyze import GrammarAssistant


def get_assistant(request: Request) -> GrammarAssistant:
    return request.app.state.assistant
