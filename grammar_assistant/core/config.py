import os

MAX_TEXT_BYTES = 1 * 1024 * 1024  # 1 MB soft cap on request bodies

# Spell-check dictionary (Hunspell word list + affix rules)
DICTIONARY_DIR = os.getenv("DICTIONARY_DIR", "dictionaries")
DICTIONARY_NAME = os.getenv("DICTIONARY_NAME", "en_US")
MAX_SUGGESTIONS = 5           # alternatives listed per misspelling
MIN_WORD_LENGTH = 2           # shorter tokens are not spell-checked

# Rule engine
CONTEXT_RADIUS = 20  # characters shown either side of a match

# AI correction/rewrite provider (OpenAI-compatible endpoint)
API_KEY_FILE = os.getenv("API_KEY_FILE", "api-key.txt")
AI_BASE_URL = os.getenv("AI_BASE_URL", "https://openrouter.ai/api/v1")
AI_MODEL = os.getenv("AI_MODEL", "openai/gpt-4o-mini")
AI_TIMEOUT = float(os.getenv("AI_TIMEOUT", "60"))
AI_MAX_RETRIES = int(os.getenv("AI_MAX_RETRIES", "2"))
AI_HEADERS = {
    "HTTP-Referer": "https://github.com/grammar-assistant",
    "X-Title": "Grammar Assistant",
}

REWRITE_STYLES = {
    "professional": "Rewrite this text in a professional, business-appropriate tone. Keep it clear and polished.",
    "casual": "Rewrite this text in a casual, conversational tone. Make it friendly and approachable.",
    "formal": "Rewrite this text in a formal, academic tone. Use proper language and structure.",
    "concise": "Rewrite this text to be more concise. Remove unnecessary words while keeping the meaning.",
    "elaborate": "Rewrite this text with more detail and elaboration. Expand on the ideas presented.",
    "friendly": "Rewrite this text in a warm, friendly tone. Make it personable and engaging.",
    "academic": "Rewrite this text in an academic style. Use scholarly language and proper citations format if applicable.",
}
DEFAULT_REWRITE_PROMPT = "Rewrite this text to improve its clarity and flow."

# Result cache
CACHE_TTL_SECONDS = 24 * 60 * 60
CACHE_CAPACITY = 100

# Undo/redo history
HISTORY_MAX = 50
