"""Static spam heuristics for free-text submissions.

Checks run in order and stop at the first failure:

1. empty or whitespace-only text
2. spam keywords (case-insensitive substring match)
3. suspicious patterns: throwaway-TLD links, card-like digit groups,
   three or more links, long runs of one character
4. excessive capitalization
"""

from __future__ import annotations

import re

from smartconnect.security.models import ContentVerdict

# ---------------------------------------------------------------------------
# Keyword / pattern lists
# ---------------------------------------------------------------------------

SPAM_KEYWORDS: list[str] = [
    "viagra", "cialis", "casino", "lottery", "winner", "congratulations",
    "click here", "free money", "earn $$$", "make money fast", "bitcoin",
    "crypto investment", "get rich", "limited offer", "act now",
    "weight loss", "diet pills", "male enhancement",
]

_SPAM_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"https?://[^\s]+\.(xyz|tk|ml|ga|cf)", re.IGNORECASE),
    re.compile(r"\b\d{4}[-.\s]?\d{4}[-.\s]?\d{4}[-.\s]?\d{4}\b"),
    re.compile(r"(?:http.*){3,}", re.IGNORECASE),
    re.compile(r"(.)\1{10,}"),
]

_UPPER = re.compile(r"[A-Z]")
_LETTER = re.compile(r"[A-Za-z]")

CAPS_RATIO_LIMIT = 0.5
CAPS_MIN_LETTERS = 10


# ---------------------------------------------------------------------------
# Checks
# ---------------------------------------------------------------------------


def _check_keywords(text: str) -> str | None:
    lowered = text.lower()
    for keyword in SPAM_KEYWORDS:
        if keyword in lowered:
            return f"Spam keyword detected: {keyword}"
    return None


def _check_patterns(text: str) -> str | None:
    for pattern in _SPAM_PATTERNS:
        if pattern.search(text):
            return "Suspicious pattern detected in content"
    return None


def _check_capitalization(text: str) -> str | None:
    letters = len(_LETTER.findall(text))
    if letters < CAPS_MIN_LETTERS:
        return None
    if len(_UPPER.findall(text)) / letters > CAPS_RATIO_LIMIT:
        return "Excessive capitalization detected"
    return None


def validate_content(text: str | None) -> ContentVerdict:
    """Run the static spam checks against *text*."""
    if not text or not text.strip():
        return ContentVerdict(is_valid=False, reason="Empty content")

    for check in (_check_keywords, _check_patterns, _check_capitalization):
        reason = check(text)
        if reason:
            return ContentVerdict(is_valid=False, reason=reason)

    return ContentVerdict(is_valid=True)
