import argparse
import asyncio
import json
import logging

from storefront_chat.api.deps import close_chat_pipeline, get_chat_pipeline
from storefront_chat.chat.errors import ChatError
from storefront_chat.chat.validation import validate_message


async def main():
    logging.basicConfig(
        level=logging.INFO,
        format="%(message)s",
    )
    parser = argparse.ArgumentParser(description="Send one message through the chat pipeline with real Azure calls.")
    parser.add_argument("--text", type=str, required=True, help="User message")
    parser.add_argument("--safety-only", action="store_true", help="Only run the content safety check")
    args = parser.parse_args()

    pipeline = get_chat_pipeline()
    try:
        message = validate_message(args.text)
        if args.safety_only:
            verdict = await pipeline.check_content_safety(message, trace_id="chat-local")
            print(json.dumps({"is_safe": verdict.is_safe, "reason": verdict.reason}, ensure_ascii=False))
            return
        reply = await pipeline.run(message, trace_id="chat-local")
        print(json.dumps({"response": reply.text, "blocked": reply.blocked}, ensure_ascii=False))
    except ChatError as exc:
        print(json.dumps({"error": str(exc), "code": exc.code}, ensure_ascii=False))
    finally:
        await close_chat_pipeline()


if __name__ == "__main__":
    asyncio.run(main())
