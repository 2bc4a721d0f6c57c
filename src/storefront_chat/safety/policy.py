from __future__ import annotations

import logging
from typing import Iterable

from storefront_chat.safety.types import CategorySeverity, SafetyCategory, SafetyVerdict

logger = logging.getLogger(__name__)

# Lowest severity the classifier reports for actually harmful content.
MIN_FLAGGED_SEVERITY = 2

# Checked in this order; the first flagged category wins.
CATEGORY_REASONS = {
    SafetyCategory.HATE: "hate speech",
    SafetyCategory.SELF_HARM: "self-harm",
    SafetyCategory.SEXUAL: "sexual content",
    SafetyCategory.VIOLENCE: "violence",
}


def evaluate_severities(
    scores: Iterable[CategorySeverity],
    *,
    threshold: int = MIN_FLAGGED_SEVERITY,
) -> SafetyVerdict:
    worst: dict[SafetyCategory, int] = {}
    for item in scores:
        worst[item.category] = max(worst.get(item.category, 0), int(item.severity or 0))

    for category, reason in CATEGORY_REASONS.items():
        if worst.get(category, 0) >= threshold:
            logger.warning("Content flagged: %s", category.value)
            return SafetyVerdict(is_safe=False, reason=reason)
    return SafetyVerdict.safe()
