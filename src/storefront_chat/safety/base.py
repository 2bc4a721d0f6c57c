from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from storefront_chat.safety.types import CategorySeverity


class SafetyClassifier(ABC):
    name: str

    @abstractmethod
    async def analyze(self, text: str) -> Sequence[CategorySeverity]:
        """Return per-category severity scores for ``text``."""
        raise NotImplementedError

    async def aclose(self) -> None:
        return None
