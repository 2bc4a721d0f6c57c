from __future__ import annotations


class ChatError(Exception):
    """
    Classified failure of a chat request.

    ``str(exc)`` is the full detail for server-side logs; ``client_message`` is
    what the HTTP client gets to see.
    """

    code: str = "chat_error"
    status_code: int = 500
    default_message: str = "An unexpected error occurred. Please try again later."
    expose_detail: bool = False

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)

    @property
    def client_message(self) -> str:
        return str(self) if self.expose_detail else self.default_message


class EmptyInput(ChatError):
    code = "empty_input"
    status_code = 400
    default_message = "Message cannot be empty"
    expose_detail = True


class TooLong(ChatError):
    code = "message_too_long"
    status_code = 400
    expose_detail = True

    def __init__(self, length: int, max_length: int):
        self.length = length
        self.max_length = max_length
        super().__init__(
            f"Message is too long ({length} characters). "
            f"Maximum {max_length} characters allowed."
        )


class UpstreamFailure(ChatError):
    code = "upstream_failure"
    status_code = 500
    default_message = "Failed to get a chat response. Please try again later."

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"Failed to get chat response: {detail}")


class UnexpectedFailure(ChatError):
    code = "unexpected_failure"
    status_code = 500
