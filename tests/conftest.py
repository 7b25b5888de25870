"""
Shared fixtures. No test touches the network: providers are stubs and
requests is patched wherever a real adapter is exercised.
"""

import os

# Ensure env vars are set before importing anything that triggers app imports
os.environ.setdefault("INTERCOM_TOKEN", "test-intercom-token")
os.environ.setdefault("INTERCOM_ADMIN_ID", "123456")
os.environ.setdefault("TRANSLATOR_ENABLED", "true")
os.environ.setdefault("TARGET_LANGUAGE", "en")
os.environ.setdefault("SKIP_LANGUAGES", "en,ru")
os.environ.setdefault("TRANSLATION_PROVIDERS", "google,libretranslate,mymemory")

import pytest

from app.config import Settings
from app.services.language_classifier import LanguageClassifier
from app.services.language_registry import LanguageRegistry
from app.services.translation_providers import (
    ProviderError,
    ProviderTranslation,
    TranslationProvider,
)
from app.services.translation_service import ProviderHealth, TranslationOrchestrator
from app.services.translation_validator import TranslationValidator
from app.services.ttl_cache import TTLCache


class FakeClock:
    """Manually advanced clock for TTL and cool-down tests."""

    def __init__(self, start: float = 1000.0):
        self.current = start

    def now(self) -> float:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += seconds


class StubProvider(TranslationProvider):
    """
    Scripted provider. Each entry of `responses` is either a string (the
    translation), a ProviderTranslation, or an exception instance to raise.
    The last entry repeats once the script runs out.
    """

    def __init__(self, name: str, responses=None, supported=None):
        super().__init__(timeout=1.0)
        self.name = name
        self.responses = list(responses or [])
        self.supported = supported
        self.calls = []

    def supports(self, source):
        return self.supported is None or source in self.supported

    def _translate(self, text, source, target):
        self.calls.append((text, source, target))
        if not self.responses:
            raise ProviderError(f"{self.name}: no scripted response")
        response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(response, Exception):
            raise response
        if isinstance(response, ProviderTranslation):
            return response
        return ProviderTranslation(text=response)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def registry():
    return LanguageRegistry()


@pytest.fixture
def classifier(registry):
    return LanguageClassifier(registry, skip_languages={"en", "ru"})


@pytest.fixture
def make_settings():
    """Settings with test defaults; keyword overrides per test."""
    def _make(**overrides):
        values = {
            "intercom_token": "test-intercom-token",
            "intercom_admin_id": "123456",
            "skip_languages": frozenset({"en", "ru"}),
        }
        values.update(overrides)
        return Settings(**values)
    return _make


@pytest.fixture
def make_orchestrator(clock, classifier):
    """Build a TranslationOrchestrator around the given stub providers."""
    def _make(providers, **overrides):
        options = {
            "target_language": "en",
            "skip_languages": {"en", "ru"},
            "negative_ttl": 600,
            "retries": 1,
        }
        options.update(overrides)
        cache = TTLCache(clock, default_ttl=3600)
        health = ProviderHealth(clock, failure_threshold=3, cooldown=60, backoff_base=30, backoff_max=900)
        return TranslationOrchestrator(
            providers=providers,
            classifier=classifier,
            validator=TranslationValidator(),
            cache=cache,
            health=health,
            **options,
        )
    return _make


@pytest.fixture
def make_provider():
    def _make(name, responses=None, supported=None):
        return StubProvider(name, responses, supported)
    return _make
