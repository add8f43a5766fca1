# grammar_assistant/services/llm.py
import json
import os
import re
import logging
from pathlib import Path
from typing import List, Optional, Union

from openai import (
    AsyncOpenAI,
    APIConnectionError,
    APIStatusError,
    APITimeoutError,
    OpenAIError,
    RateLimitError,
)
from pydantic import BaseModel, ConfigDict

from grammar_assistant.core import config
from grammar_assistant.models.suggestion import Suggestion
from grammar_assistant.services.corrector import CORRECTION_MESSAGE

log = logging.getLogger("llm")

SYSTEM = (
    "You are a professional grammar and writing assistant. "
    "Analyze the provided text and provide corrections.\n"
    "CRITICAL: You MUST include a 'corrected_text' field with the fully corrected "
    "version of the entire input text.\n"
    "Return ONLY JSON with this exact shape:\n"
    '{"corrected_text": str, "issues": [{"issue": str, "explanation": str, '
    '"original": str, "replacement": str}]}\n'
    "'original' must be the EXACT text from the input that needs changing.\n"
    'If the text is perfect: {"corrected_text": "<exact original text>", "issues": []}'
)

CORRECT_ONLY = (
    "You are a grammar correction assistant. Return ONLY the corrected version of the text "
    "with all grammar, spelling, and punctuation errors fixed. Do not add explanations or comments."
)

# tolerate a truncated/invalid payload that still names the corrected text
_CORRECTED_FIELD = re.compile(r'"corrected_text"\s*:\s*"((?:[^"\\]|\\.)*)"', re.DOTALL)


class _Tagged(BaseModel):
    model_config = ConfigDict(frozen=True)


class AIOk(_Tagged):
    suggestions: List[Suggestion]


class RateLimited(_Tagged):
    detail: str = ""


class TransportError(_Tagged):
    detail: str


class ParseFallback(_Tagged):
    raw_text: str
    corrected_text: Optional[str] = None


class NotConfigured(_Tagged):
    pass


AIResult = Union[AIOk, RateLimited, TransportError, ParseFallback, NotConfigured]


def load_api_key(path: str = config.API_KEY_FILE) -> Optional[str]:
    """Key from ``OPENROUTER_API_KEY``, else the first non-blank content of ``path``."""
    key = os.getenv("OPENROUTER_API_KEY", "").strip()
    if key:
        return key
    try:
        key = Path(path).read_text(encoding="utf-8").strip()
    except OSError:
        return None
    return key or None


def _extract_json(text: str) -> dict:
    start, end = text.find("{"), text.rfind("}")
    if start < 0 or end <= start:
        raise ValueError("No JSON object in model output")
    data = json.loads(text[start:end + 1])
    if not isinstance(data, dict):
        raise ValueError("Model output was not a JSON object")
    return data


def _field(issue: dict, name: str) -> str:
    value = issue.get(name)
    return "" if value is None else str(value)


def _issue_suggestion(issue: dict, original_text: str) -> Suggestion:
    message = _field(issue, "issue") or "Grammar/Style issue"
    detail = _field(issue, "explanation")
    original = _field(issue, "original")
    replacement = _field(issue, "replacement")
    if original and replacement:
        detail += f"\n\n'{original}' → '{replacement}'"

    start = original_text.lower().find(original.lower()) if original else -1
    if start < 0:
        return Suggestion(message=f"AI: {message}", detail=detail)
    return Suggestion(
        message=f"AI: {message}",
        detail=detail,
        start_index=start,
        length=len(original),
        replacement_text=None if issue.get("replacement") is None else replacement,
    )


def parse_response(content: str, original_text: str = "") -> AIResult:
    """Turn the model's reply into suggestions.

    The JSON object may be wrapped in prose or markdown; the outermost brace
    pair is parsed. Anything unparseable becomes a ParseFallback carrying the
    raw reply.
    """
    try:
        data = _extract_json(content)
    except ValueError:
        m = _CORRECTED_FIELD.search(content)
        salvaged = None
        if m:
            try:
                salvaged = json.loads(f'"{m.group(1)}"') or None
            except ValueError:
                salvaged = None
        log.warning("Unparseable AI response (%d chars)", len(content))
        return ParseFallback(raw_text=content, corrected_text=salvaged)

    suggestions: List[Suggestion] = []
    corrected = data.get("corrected_text")
    if isinstance(corrected, str) and corrected.strip() and corrected.strip() != original_text.strip():
        suggestions.append(Suggestion(
            message=CORRECTION_MESSAGE,
            detail="Apply corrections to replace your text with the corrected version",
            corrected_text=corrected,
        ))

    issues = data.get("issues")
    if not isinstance(issues, list):
        issues = []
    for issue in issues:
        if not isinstance(issue, dict):
            continue
        try:
            suggestions.append(_issue_suggestion(issue, original_text))
        except (TypeError, ValueError) as e:
            log.warning("Skipping malformed AI issue: %s", e)
    if not issues and not suggestions:
        suggestions.append(Suggestion(message="✓ No issues found", detail="Your text is grammatically correct!"))
    return AIOk(suggestions=suggestions)


def outcome_suggestions(result: AIResult) -> List[Suggestion]:
    """Every provider outcome as ordinary suggestions; nothing is raised."""
    match result:
        case AIOk(suggestions=suggestions):
            return list(suggestions)
        case NotConfigured():
            return [Suggestion(
                message="AI not configured",
                detail=(f"Create an '{config.API_KEY_FILE}' file (or set OPENROUTER_API_KEY) with your "
                        "OpenRouter API key to enable AI-powered suggestions\n"
                        "Get your key at: https://openrouter.ai/keys"),
            )]
        case RateLimited(detail=detail):
            return [Suggestion(
                message="AI service rate limited",
                detail=("Too many requests were sent to the AI service. Wait a moment and try again, "
                        "or check the credits on your OpenRouter account: https://openrouter.ai/credits"
                        + (f"\n\n{detail}" if detail else "")),
            )]
        case TransportError(detail=detail):
            return [Suggestion(
                message="Could not connect to AI service",
                detail=(f"Error: {detail}\n\nCheck your network connection and that your "
                        "OpenRouter account has credits: https://openrouter.ai/credits"),
            )]
        case ParseFallback(raw_text=raw, corrected_text=corrected):
            out: List[Suggestion] = []
            if corrected:
                out.append(Suggestion(
                    message=CORRECTION_MESSAGE,
                    detail="Apply corrections to replace your text",
                    corrected_text=corrected,
                ))
            out.append(Suggestion(message="AI Analysis", detail=raw))
            return out
        case _:
            raise TypeError(f"Unknown AI result: {result!r}")


def _is_rate_limit(err: APIStatusError) -> bool:
    if err.status_code == 429:
        return True
    body = str(err.body or err.message or "").lower()
    return "rate" in body and "limit" in body


class AIProvider:
    """Grammar check and rewrite against an OpenAI-compatible chat endpoint.

    Each provider owns its client; an empty key leaves it unconfigured and
    every call degrades instead of going to the network.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = config.AI_MODEL,
        base_url: str = config.AI_BASE_URL,
        timeout: float = config.AI_TIMEOUT,
        max_retries: int = config.AI_MAX_RETRIES,
    ):
        self.api_key = (api_key or "").strip() or None
        self.model = model
        self._client: Optional[AsyncOpenAI] = None
        if self.api_key:
            self._client = AsyncOpenAI(
                api_key=self.api_key,
                base_url=base_url,
                timeout=timeout,
                max_retries=max_retries,
                default_headers=config.AI_HEADERS,
            )

    @property
    def is_configured(self) -> bool:
        return self._client is not None

    async def _chat(self, system: str, user: str, temperature: float = 0.3, max_tokens: int = 1000) -> str:
        log.info("LLM chat call model=%s, chars=%d", self.model, len(user))
        resp = await self._client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            temperature=temperature,
            max_tokens=max_tokens,
        )
        if not resp.choices:
            return ""
        return resp.choices[0].message.content or ""

    async def check_text(self, text: str) -> AIResult:
        if not self.is_configured:
            return NotConfigured()
        if not text or not text.strip():
            return AIOk(suggestions=[])

        try:
            content = await self._chat(SYSTEM, f"Please check this text:\n\n{text}")
        except RateLimitError as e:
            log.warning("AI provider rate limited: %s", e)
            return RateLimited(detail=str(e))
        except APIStatusError as e:
            if _is_rate_limit(e):
                log.warning("AI provider rate limited: %s", e)
                return RateLimited(detail=str(e))
            log.warning("AI provider error %s: %s", e.status_code, e)
            return TransportError(detail=f"API error {e.status_code}: {e.message}")
        except (APIConnectionError, APITimeoutError) as e:
            log.warning("AI provider unreachable: %s", e)
            return TransportError(detail=str(e))
        except OpenAIError as e:
            log.warning("AI provider failure: %s", e)
            return TransportError(detail=str(e))

        result = parse_response(content, text)
        if isinstance(result, AIOk) and not any(s.corrected_text for s in result.suggestions):
            fixes = [s for s in result.suggestions if s.message.startswith("AI:")]
            if len(fixes) > 1:
                corrected = await self.corrected_text_only(text)
                if corrected and corrected.strip() != text.strip():
                    lead = Suggestion(
                        message=CORRECTION_MESSAGE,
                        detail="Apply corrections to replace your text",
                        corrected_text=corrected,
                    )
                    result = AIOk(suggestions=[lead] + list(result.suggestions))
        return result

    async def corrected_text_only(self, text: str) -> Optional[str]:
        try:
            out = await self._chat(CORRECT_ONLY, text)
        except OpenAIError as e:
            log.info("Corrected-text request failed: %s", e)
            return None
        return out.strip() or None

    async def rewrite_text(self, text: str, style: str) -> Optional[str]:
        if not self.is_configured or not text or not text.strip():
            return None
        prompt = config.REWRITE_STYLES.get(style.lower(), config.DEFAULT_REWRITE_PROMPT)
        system = f"{prompt} Return ONLY the rewritten text without any explanations, comments, or quotation marks around it."
        try:
            out = (await self._chat(system, text, temperature=0.7, max_tokens=2000)).strip()
        except OpenAIError as e:
            log.warning("Rewrite failed: %s", e)
            return None
        if len(out) >= 2 and out.startswith('"') and out.endswith('"'):
            out = out[1:-1]
        return out or None

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
