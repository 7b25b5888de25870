"""
TranslationOrchestrator: turns a normalized message into an accepted translation.

Per call the message goes through:
    SKIPPED          language in skip-list / equals target -> None
    CACHE_HIT        cached result (or cached negative sentinel -> None)
    PROVIDER_ATTEMPT walk the provider list in order
    ACCEPTED         first response that passes validation -> cache + return
    EXHAUSTED        every provider failed -> cache negative sentinel, None
"""

import logging
import threading
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from app.models.translation_models import CacheSentinel, TranslationResult
from app.services.language_registry import AUTO
from app.services.translation_providers import (
    ProviderError,
    ProviderTimeoutError,
    RateLimitedError,
    TranslationProvider,
)

logger = logging.getLogger(__name__)


# =================================================================
#  PROVIDER HEALTH
# =================================================================

@dataclass
class _ProviderState:
    consecutive_failures: int = 0
    rate_limit_strikes: int = 0
    cooldown_until: float = 0.0


class ProviderHealth:
    """
    Cool-down bookkeeping per provider, for the lifetime of the process.

    - Rate limits back off exponentially (base * 2^(n-1), capped).
    - N consecutive ordinary failures park the provider for a fixed cool-down.
    - Any accepted translation resets the provider.
    """

    def __init__(self, clock, failure_threshold: int = 3, cooldown: float = 60.0,
                 backoff_base: float = 30.0, backoff_max: float = 900.0):
        self._clock = clock
        self.failure_threshold = failure_threshold
        self.cooldown = cooldown
        self.backoff_base = backoff_base
        self.backoff_max = backoff_max
        self._states: Dict[str, _ProviderState] = {}
        self._lock = threading.Lock()

    def _state(self, name: str) -> _ProviderState:
        if name not in self._states:
            self._states[name] = _ProviderState()
        return self._states[name]

    def is_available(self, name: str) -> bool:
        with self._lock:
            return self._clock.now() >= self._state(name).cooldown_until

    def cooldown_remaining(self, name: str) -> float:
        with self._lock:
            return max(0.0, self._state(name).cooldown_until - self._clock.now())

    def record_success(self, name: str) -> None:
        with self._lock:
            self._states[name] = _ProviderState()

    def record_failure(self, name: str) -> None:
        with self._lock:
            state = self._state(name)
            state.consecutive_failures += 1
            if state.consecutive_failures >= self.failure_threshold:
                state.cooldown_until = self._clock.now() + self.cooldown
                state.consecutive_failures = 0
                logger.warning("Provider %s unhealthy, cooling down for %.0fs", name, self.cooldown)

    def record_rate_limit(self, name: str, retry_after: Optional[float] = None) -> float:
        """Start (or extend) the back-off. Returns the delay applied."""
        with self._lock:
            state = self._state(name)
            state.rate_limit_strikes += 1
            delay = min(self.backoff_base * (2 ** (state.rate_limit_strikes - 1)), self.backoff_max)
            if retry_after and retry_after > delay:
                delay = retry_after
            state.cooldown_until = self._clock.now() + delay
            logger.warning("Provider %s rate limited, backing off %.0fs (strike %s)", name, delay, state.rate_limit_strikes)
            return delay


# =================================================================
#  ORCHESTRATOR
# =================================================================

class TranslationOrchestrator:

    CACHE_KEY_CHARS = 500

    def __init__(self, providers: List[TranslationProvider], classifier, validator, cache, health: ProviderHealth,
                 target_language: str = "en", skip_languages: Iterable[str] = (),
                 negative_ttl: Optional[float] = None, retries: int = 1):
        self.providers = list(providers)
        self.classifier = classifier
        self.validator = validator
        self.cache = cache
        self.health = health
        self.target_language = target_language
        self.skip_languages = frozenset(skip_languages) | {target_language}
        self.negative_ttl = negative_ttl
        self.retries = retries

    # =================================================================
    #  PUBLIC ENTRY POINT
    # =================================================================

    def translate(self, text: str, lang_hint: str = AUTO) -> Optional[TranslationResult]:
        """Translate text into the target language, or None (skip, negative cache, exhaustion)."""
        if not text or not text.strip():
            return None

        # --- 1. Effective source language ---
        source = lang_hint or AUTO
        if source == AUTO:
            source = self.classifier.detect(text)

        # --- 2. Skip gate ---
        if self.is_skipped(source):
            logger.info("SKIPPED: source language %s needs no translation", source)
            return None

        # --- 3. Cache probe ---
        key = self.cache_key(text, source)
        cached = self.cache.get(key)
        if cached is not None:
            if isinstance(cached, CacheSentinel):
                logger.info("CACHE_HIT (negative: %s)", cached.value)
                return None
            logger.info("CACHE_HIT (%s -> %s)", cached.source_lang, cached.target_lang)
            return cached

        # --- 4. Provider chain ---
        for provider in self.providers:
            outcome = self._try_provider(provider, text, source)
            if outcome is None:
                continue
            if isinstance(outcome, CacheSentinel):
                self.cache.set(key, outcome, ttl=self.negative_ttl)
                return None
            self.cache.set(key, outcome)
            logger.info("ACCEPTED from %s (%s -> %s)", provider.name, outcome.source_lang, outcome.target_lang)
            return outcome

        # --- 5. Exhausted ---
        logger.warning("EXHAUSTED: no provider produced a usable translation for '%s...'", text[:40])
        self.cache.set(key, CacheSentinel.UNTRANSLATABLE, ttl=self.negative_ttl)
        return None

    def is_skipped(self, language: str) -> bool:
        return language in self.skip_languages

    def cache_key(self, text: str, source: str) -> tuple:
        return (source, text.strip()[:self.CACHE_KEY_CHARS])

    # =================================================================
    #  PROVIDER ATTEMPT
    # =================================================================

    def _try_provider(self, provider: TranslationProvider, text: str, source: str):
        """TranslationResult, a CacheSentinel, or None to move on to the next provider."""
        name = provider.name

        if not self.health.is_available(name):
            logger.info("Provider %s cooling down (%.0fs left), skipping", name, self.health.cooldown_remaining(name))
            return None
        if not provider.supports(source):
            logger.debug("Provider %s does not support source '%s'", name, source)
            return None

        response = None
        for attempt in range(self.retries + 1):
            try:
                logger.info("PROVIDER_ATTEMPT %s (source=%s, try %s)", name, source, attempt + 1)
                response = provider.attempt(text, source, self.target_language)
                break
            except RateLimitedError as e:
                self.health.record_rate_limit(name, e.retry_after)
                return None
            except ProviderTimeoutError as e:
                logger.warning("Provider %s timed out: %s", name, e)
                self.health.record_failure(name)
                return None
            except ProviderError as e:
                logger.warning("Provider %s failed: %s", name, e)
                if e.retryable and attempt < self.retries:
                    continue
                self.health.record_failure(name)
                return None

        if response is None:
            return None

        detected = self.classifier.registry.resolve(response.detected_language) if response.detected_language else None

        # Provider says the text is already in a language we do not translate
        if source == AUTO and detected and detected != AUTO and self.is_skipped(detected):
            logger.info("Provider %s detected %s: already readable, caching as such", name, detected)
            self.health.record_success(name)
            return CacheSentinel.ALREADY_TARGET

        rejection = self.validator.check(text, response.text, self.target_language)
        if rejection:
            logger.warning("Provider %s response rejected (%s)", name, rejection)
            self.health.record_failure(name)
            return None

        self.health.record_success(name)

        source_lang = source
        if source == AUTO and detected and detected != AUTO:
            source_lang = detected

        return TranslationResult(
            text=response.text,
            source_lang=source_lang,
            target_lang=self.target_language,
            provider=name,
        )
