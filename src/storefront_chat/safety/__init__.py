from storefront_chat.safety.base import SafetyClassifier
from storefront_chat.safety.policy import MIN_FLAGGED_SEVERITY, evaluate_severities
from storefront_chat.safety.types import CategorySeverity, SafetyCategory, SafetyVerdict

__all__ = [
    "SafetyClassifier",
    "SafetyCategory",
    "CategorySeverity",
    "SafetyVerdict",
    "MIN_FLAGGED_SEVERITY",
    "evaluate_severities",
]
