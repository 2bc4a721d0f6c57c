from storefront_chat.chat.errors import (
    ChatError,
    EmptyInput,
    TooLong,
    UnexpectedFailure,
    UpstreamFailure,
)
from storefront_chat.chat.pipeline import ChatPipeline, ChatReply
from storefront_chat.chat.validation import MAX_MESSAGE_LENGTH, validate_message

__all__ = [
    "ChatError",
    "EmptyInput",
    "TooLong",
    "UpstreamFailure",
    "UnexpectedFailure",
    "ChatPipeline",
    "ChatReply",
    "MAX_MESSAGE_LENGTH",
    "validate_message",
]
