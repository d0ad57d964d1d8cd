"""AI spam classification for complaints and community issues.

The classifier is opaque: whatever the model says is taken as a verdict.
Only the consuming policy lives here -- reject when the model is confident
enough -- and any failure fails open so a model outage never blocks
citizens from filing complaints.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Optional

from smartconnect.llm.client import LLMClient
from smartconnect.llm.prompts import (
    COMMUNITY_SPAM_PROMPT,
    COMMUNITY_SPAM_SYSTEM_PROMPT,
    COMPLAINT_SPAM_PROMPT,
    COMPLAINT_SPAM_SYSTEM_PROMPT,
)

logger = logging.getLogger(__name__)

SPAM_CATEGORIES = ("legitimate", "spam", "fake", "irrelevant", "abusive")

REJECT_CONFIDENCE = 0.7

_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


@dataclass
class SpamVerdict:
    """Classifier output."""

    is_spam: bool
    confidence: float
    reason: str
    category: str = "legitimate"

    def should_reject(self, threshold: float = REJECT_CONFIDENCE) -> bool:
        return self.is_spam and self.confidence > threshold


def _fail_open(subject: str) -> SpamVerdict:
    return SpamVerdict(
        is_spam=False,
        confidence=0.0,
        reason=f"Error during spam detection, allowing {subject} by default",
        category="legitimate",
    )


def parse_verdict(raw: str) -> SpamVerdict:
    """Parse the model's JSON answer; raises ``ValueError`` when malformed."""
    text = _FENCE.sub("", raw.strip())
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Classifier returned invalid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError("Classifier response is not a JSON object")

    try:
        confidence = float(data.get("confidence") or 0)
    except (TypeError, ValueError):
        confidence = 0.0
    category = str(data.get("category") or "legitimate").lower()
    if category not in SPAM_CATEGORIES:
        category = "spam" if data.get("isSpam") else "legitimate"

    return SpamVerdict(
        is_spam=bool(data.get("isSpam", False)),
        confidence=max(0.0, min(1.0, confidence)),
        reason=str(data.get("reason") or ""),
        category=category,
    )


class SpamClassifier:
    """Asks an LLM whether a civic submission is spam."""

    def __init__(self, client: Optional[LLMClient] = None) -> None:
        self._client = client or LLMClient()

    @property
    def configured(self) -> bool:
        return self._client.configured

    def classify_complaint(
        self, title: str, description: str, category: str, location: str = ""
    ) -> SpamVerdict:
        prompt = COMPLAINT_SPAM_PROMPT.format(
            title=title, description=description, category=category, location=location
        )
        return self._classify(prompt, COMPLAINT_SPAM_SYSTEM_PROMPT, "complaint", title)

    def classify_community_issue(
        self, title: str, description: str, category: str
    ) -> SpamVerdict:
        prompt = COMMUNITY_SPAM_PROMPT.format(
            title=title, description=description, category=category
        )
        return self._classify(prompt, COMMUNITY_SPAM_SYSTEM_PROMPT, "post", title)

    def _classify(self, prompt: str, system_prompt: str, subject: str, title: str) -> SpamVerdict:
        if not self._client.configured:
            return _fail_open(subject)
        try:
            response = self._client.complete(prompt=prompt, system_prompt=system_prompt)
            verdict = parse_verdict(response.content)
        except Exception:
            logger.exception("Spam detection failed for %r", title)
            return _fail_open(subject)

        logger.info(
            "Spam detection result for %r: %s (%.2f confidence)",
            title,
            "SPAM" if verdict.is_spam else "LEGITIMATE",
            verdict.confidence,
        )
        return verdict
