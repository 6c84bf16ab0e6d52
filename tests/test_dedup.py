from __future__ import annotations

import asyncio

import pytest

from gptranslate.config import Settings
from gptranslate.dedup import DedupGate, fingerprint
from gptranslate.errors import DuplicateRequest, TransportError
from gptranslate.models import TranslationResult
from gptranslate.orchestrator import TranslationService
from gptranslate.translate.base import TranslationProvider


class FakeClock:
    def __init__(self, now: float = 100.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class BlockingProvider(TranslationProvider):
    name = "blocking"

    def __init__(self) -> None:
        super().__init__(Settings())
        self.started = asyncio.Event()
        self.proceed = asyncio.Event()
        self.calls = 0

    async def translate(self, text: str) -> TranslationResult:
        self.calls += 1
        self.started.set()
        await self.proceed.wait()
        return TranslationResult(detected_language="French", translated_text="Hello world", target_language="English")


class FlakyProvider(TranslationProvider):
    name = "flaky"

    def __init__(self) -> None:
        super().__init__(Settings())
        self.calls = 0

    async def translate(self, text: str) -> TranslationResult:
        self.calls += 1
        if self.calls == 1:
            raise TransportError("flaky", 503, "unavailable")
        return TranslationResult(detected_language="French", translated_text="Hello world", target_language="English")


def test_fingerprint_uses_length_and_prefix() -> None:
    text = "x" * 80
    assert fingerprint(text) == (80, "x" * 50)
    assert fingerprint(text) == fingerprint("x" * 50 + "x" * 30)
    assert fingerprint("Bonjour") != fingerprint("Bonjour!")


def test_concurrent_duplicate_is_rejected_without_second_call() -> None:
    provider = BlockingProvider()
    service = TranslationService(Settings(), gate=DedupGate(), provider=provider)

    async def scenario() -> None:
        first = asyncio.create_task(service.translate("Bonjour le monde"))
        await provider.started.wait()
        with pytest.raises(DuplicateRequest):
            await service.translate("Bonjour le monde")
        provider.proceed.set()
        response = await first
        assert response.translated_text == "Hello world"

    asyncio.run(scenario())
    assert provider.calls == 1


def test_requests_outside_window_both_proceed() -> None:
    clock = FakeClock()
    gate = DedupGate(clock=clock)

    key, started = gate.register("Bonjour le monde")
    clock.advance(0.6)
    second_key, second_started = gate.register("Bonjour le monde")

    assert key == second_key
    assert second_started > started


def test_request_inside_window_is_duplicate() -> None:
    clock = FakeClock()
    gate = DedupGate(clock=clock)
    gate.register("Bonjour le monde")
    clock.advance(0.2)
    with pytest.raises(DuplicateRequest):
        gate.register("Bonjour le monde")


def test_service_calls_spaced_beyond_window_both_reach_provider() -> None:
    clock = FakeClock()
    provider = BlockingProvider()
    service = TranslationService(Settings(), gate=DedupGate(clock=clock), provider=provider)

    async def scenario() -> None:
        first = asyncio.create_task(service.translate("Bonjour le monde"))
        await provider.started.wait()
        clock.advance(0.6)
        second = asyncio.create_task(service.translate("Bonjour le monde"))
        await asyncio.sleep(0)
        provider.proceed.set()
        responses = await asyncio.gather(first, second)
        assert [response.translated_text for response in responses] == ["Hello world", "Hello world"]

    asyncio.run(scenario())
    assert provider.calls == 2


def test_failure_releases_fingerprint() -> None:
    provider = FlakyProvider()
    gate = DedupGate()
    service = TranslationService(Settings(), gate=gate, provider=provider)

    with pytest.raises(TransportError):
        asyncio.run(service.translate("Bonjour le monde"))
    assert len(gate) == 0

    response = asyncio.run(service.translate("Bonjour le monde"))
    assert response.translated_text == "Hello world"
    assert provider.calls == 2


def test_stale_release_keeps_newer_claim() -> None:
    clock = FakeClock()
    gate = DedupGate(clock=clock)
    key, first_started = gate.register("Bonjour le monde")
    clock.advance(0.6)
    gate.register("Bonjour le monde")

    gate.release(key, first_started)

    assert len(gate) == 1
    clock.advance(0.1)
    with pytest.raises(DuplicateRequest):
        gate.register("Bonjour le monde")


def test_old_entries_are_purged() -> None:
    clock = FakeClock()
    gate = DedupGate(clock=clock)
    gate.register("first request text")
    gate.register("second request text")
    assert len(gate) == 2

    clock.advance(5.1)
    gate.register("third request text")

    assert len(gate) == 1


def test_hold_releases_on_exit() -> None:
    gate = DedupGate()
    with gate.hold("Bonjour le monde"):
        assert len(gate) == 1
    assert len(gate) == 0
