import re

_SECRET_PATTERNS = (
    # Query params like apiKey=, api_key=, key= (Gemini), token=, secret=
    (re.compile(r"(?i)\b(api[_-]?key|key|token|secret)=([^&\s\"']+)"), r"\1=***REDACTED***"),
    # X-Api-Key / x-goog-api-key headers echoed in errors
    (re.compile(r"(?i)(x-(?:goog-)?api-key['\"]?\s*[:=]\s*['\"]?)[A-Za-z0-9._\-]+"), r"\1***REDACTED***"),
    # Authorization: Bearer <token>, with or without the header name
    (re.compile(r"(?i)Bearer\s+[A-Za-z0-9._\-]+"), "Bearer ***REDACTED***"),
    # Raw OpenAI/DeepSeek style keys
    (re.compile(r"\bsk-[A-Za-z0-9]{16,}\b"), "sk-***REDACTED***"),
)


def redact_secrets(text: str) -> str:
    """Redact API keys and bearer tokens from logs and error strings."""
    if not isinstance(text, str):
        return text
    for pattern, replacement in _SECRET_PATTERNS:
        text = pattern.sub(replacement, text)
    return text


def is_configured_key(value) -> bool:
    """Return True if a key is set and is not an obvious placeholder."""
    if not value or not str(value).strip():
        return False
    upper = str(value).strip().upper()
    return not upper.startswith("YOUR_") and upper not in {"CHANGEME", "PLACEHOLDER"}
