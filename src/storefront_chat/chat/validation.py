from __future__ import annotations

from storefront_chat.chat.errors import EmptyInput, TooLong

MAX_MESSAGE_LENGTH = 1000


def validate_message(raw: str | None, *, max_length: int = MAX_MESSAGE_LENGTH) -> str:
    """Trim ``raw`` and reject it when empty or longer than ``max_length``."""
    message = (raw or "").strip()
    if not message:
        raise EmptyInput()
    if len(message) > max_length:
        raise TooLong(len(message), max_length)
    return message
