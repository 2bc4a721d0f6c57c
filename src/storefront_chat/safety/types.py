from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class SafetyCategory(str, Enum):
    HATE = "Hate"
    SELF_HARM = "SelfHarm"
    SEXUAL = "Sexual"
    VIOLENCE = "Violence"


@dataclass(frozen=True)
class CategorySeverity:
    category: SafetyCategory
    severity: int = 0


@dataclass(frozen=True)
class SafetyVerdict:
    is_safe: bool
    reason: str = ""

    @classmethod
    def safe(cls) -> "SafetyVerdict":
        return cls(is_safe=True)
