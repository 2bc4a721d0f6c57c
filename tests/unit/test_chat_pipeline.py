import pytest

from storefront_chat.chat.errors import UnexpectedFailure, UpstreamFailure
from storefront_chat.chat.pipeline import FALLBACK_TEXT, REFUSAL_TEXT, SYSTEM_PROMPT, ChatPipeline
from storefront_chat.llm.errors import LLMRateLimited, LLMUnavailable
from storefront_chat.safety.types import CategorySeverity, SafetyCategory
from tests.conftest import FakeLLMProvider, FakeSafetyClassifier


@pytest.mark.asyncio
async def test_run_without_safety_returns_completion_text():
    provider = FakeLLMProvider(script=["Hello!"])
    pipeline = ChatPipeline(completion=provider, model="gpt-test")

    reply = await pipeline.run("Hi there")

    assert reply.text == "Hello!"
    assert not reply.blocked
    assert len(provider.calls) == 1
    req = provider.calls[0]
    assert req.model == "gpt-test"
    assert [(m.role, m.content) for m in req.messages] == [
        ("system", SYSTEM_PROMPT),
        ("user", "Hi there"),
    ]


@pytest.mark.asyncio
async def test_unsafe_violence_short_circuits_completion():
    provider = FakeLLMProvider(script=["should not be used"])
    safety = FakeSafetyClassifier(
        scores=[
            CategorySeverity(SafetyCategory.HATE, 0),
            CategorySeverity(SafetyCategory.VIOLENCE, 2),
        ]
    )
    pipeline = ChatPipeline(completion=provider, model="gpt-test", safety=safety)

    reply = await pipeline.run("something violent")

    assert reply.text == REFUSAL_TEXT
    assert reply.blocked
    assert safety.calls == ["something violent"]
    assert len(provider.calls) == 0


@pytest.mark.asyncio
async def test_low_severity_passes_through():
    provider = FakeLLMProvider(script=["Sure!"])
    safety = FakeSafetyClassifier(scores=[CategorySeverity(SafetyCategory.VIOLENCE, 1)])
    pipeline = ChatPipeline(completion=provider, model="gpt-test", safety=safety)

    reply = await pipeline.run("what's your return policy?")

    assert reply.text == "Sure!"
    assert len(provider.calls) == 1


@pytest.mark.asyncio
async def test_safety_error_fails_open():
    provider = FakeLLMProvider(script=["Hello!"])
    safety = FakeSafetyClassifier(error=ConnectionError("moderation down"))
    pipeline = ChatPipeline(completion=provider, model="gpt-test", safety=safety)

    reply = await pipeline.run("Hi")

    assert reply.text == "Hello!"
    assert len(safety.calls) == 1
    assert len(provider.calls) == 1


@pytest.mark.asyncio
async def test_safety_timeout_fails_open_and_still_completes():
    provider = FakeLLMProvider(script=["Hello!"])
    safety = FakeSafetyClassifier(delay_s=5.0)
    pipeline = ChatPipeline(
        completion=provider,
        model="gpt-test",
        safety=safety,
        timeout_s=10.0,
        safety_timeout_s=0.05,
    )

    reply = await pipeline.run("Hi")

    assert reply.text == "Hello!"
    assert len(safety.calls) == 1
    assert len(provider.calls) == 1


@pytest.mark.asyncio
async def test_check_content_safety_without_classifier_is_safe():
    pipeline = ChatPipeline(completion=FakeLLMProvider(), model="gpt-test")
    verdict = await pipeline.check_content_safety("anything")
    assert verdict.is_safe
    assert verdict.reason == ""


@pytest.mark.asyncio
@pytest.mark.parametrize("content", [None, ""])
async def test_missing_text_returns_fallback(content):
    provider = FakeLLMProvider(script=[content])
    pipeline = ChatPipeline(completion=provider, model="gpt-test")

    reply = await pipeline.run("Hi")

    assert reply.text == FALLBACK_TEXT


@pytest.mark.asyncio
async def test_transport_error_becomes_upstream_failure():
    provider = FakeLLMProvider(script=[LLMUnavailable("boom")])
    pipeline = ChatPipeline(completion=provider, model="gpt-test")

    with pytest.raises(UpstreamFailure) as e:
        await pipeline.run("Hi")

    assert "boom" in str(e.value)
    assert e.value.detail == "boom"
    assert isinstance(e.value.__cause__, LLMUnavailable)
    assert "boom" not in e.value.client_message


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "exc",
    [ConnectionError("boom"), OSError("boom"), TimeoutError("boom"), LLMUnavailable("boom")],
)
async def test_transport_errors_keep_their_message(exc):
    provider = FakeLLMProvider(script=[exc])
    pipeline = ChatPipeline(completion=provider, model="gpt-test")

    with pytest.raises(UpstreamFailure) as e:
        await pipeline.run("Hi")

    assert "boom" in str(e.value)
    assert "timed out after" not in str(e.value)
    assert e.value.__cause__ is exc


@pytest.mark.asyncio
async def test_upstream_failure_is_not_retried():
    provider = FakeLLMProvider(script=[LLMRateLimited("429 too many requests"), "late"])
    pipeline = ChatPipeline(completion=provider, model="gpt-test")

    with pytest.raises(UpstreamFailure):
        await pipeline.run("Hi")

    assert len(provider.calls) == 1


@pytest.mark.asyncio
async def test_completion_timeout_becomes_upstream_failure():
    provider = FakeLLMProvider(script=["too slow"], delay_s=5.0)
    pipeline = ChatPipeline(completion=provider, model="gpt-test", timeout_s=0.05)

    with pytest.raises(UpstreamFailure) as e:
        await pipeline.run("Hi")

    assert "timed out" in str(e.value)


@pytest.mark.asyncio
async def test_deadline_is_shared_between_calls():
    provider = FakeLLMProvider(script=["Hello!"])
    safety = FakeSafetyClassifier(delay_s=0.05)
    pipeline = ChatPipeline(completion=provider, model="gpt-test", safety=safety, timeout_s=10.0)

    await pipeline.run("Hi")

    assert provider.calls[0].timeout_s is not None
    assert provider.calls[0].timeout_s < 10.0


@pytest.mark.asyncio
async def test_unclassified_error_becomes_unexpected_failure():
    provider = FakeLLMProvider(script=[KeyError("choices")])
    pipeline = ChatPipeline(completion=provider, model="gpt-test")

    with pytest.raises(UnexpectedFailure) as e:
        await pipeline.run("Hi")

    assert e.value.status_code == 500
    assert e.value.client_message == "An unexpected error occurred. Please try again later."


@pytest.mark.asyncio
async def test_aclose_closes_both_providers():
    provider = FakeLLMProvider()
    safety = FakeSafetyClassifier()
    pipeline = ChatPipeline(completion=provider, model="gpt-test", safety=safety)

    await pipeline.aclose()

    assert provider.closed
    assert safety.closed


def test_is_configured_depends_on_model():
    assert ChatPipeline(completion=FakeLLMProvider(), model="gpt-4o-mini").is_configured()
    assert not ChatPipeline(completion=FakeLLMProvider(), model="").is_configured()
