"""
Translation providers: one adapter per remote translation backend.

Every adapter exposes the same surface so the orchestrator can walk them as a
plain ordered list:

    provider.supports(source) -> bool
    provider.attempt(text, source, target) -> ProviderTranslation

Failures are raised as ProviderError subclasses; adapters never validate the
quality of the translation themselves (see TranslationValidator).
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

import requests
from langchain_core.messages import HumanMessage, SystemMessage

from app.models.translation_models import TranslationOutput
from app.services.llm_client import get_chat_model, get_llm_api_key

logger = logging.getLogger(__name__)


# --- RESULT & ERRORS ---

@dataclass
class ProviderTranslation:
    """Raw provider answer, before validation."""
    text: str
    detected_language: Optional[str] = None


class ProviderError(Exception):
    """Provider failed. retryable=True for transient server-side errors."""

    def __init__(self, message: str, retryable: bool = False):
        super().__init__(message)
        self.retryable = retryable


class ProviderTimeoutError(ProviderError):
    pass


class RateLimitedError(ProviderError):
    """HTTP 429 or a quota message. retry_after in seconds when the server says so."""

    def __init__(self, message: str, retry_after: Optional[float] = None):
        super().__init__(message, retryable=False)
        self.retry_after = retry_after


def _parse_retry_after(response) -> Optional[float]:
    value = response.headers.get("Retry-After") if response is not None else None
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def _check_response(response, provider_name: str):
    """Translate HTTP status codes into provider errors."""
    if response.status_code == 429:
        raise RateLimitedError(f"{provider_name}: rate limited (429)", _parse_retry_after(response))
    if response.status_code >= 500:
        raise ProviderError(f"{provider_name}: server error {response.status_code}", retryable=True)
    if response.status_code >= 400:
        raise ProviderError(f"{provider_name}: HTTP {response.status_code} {response.text[:200]}")


def _parse_json(response, provider_name: str):
    try:
        return response.json()
    except ValueError:
        raise ProviderError(f"{provider_name}: malformed JSON response")


class TranslationProvider:
    """Base adapter. Subclasses implement _translate()."""

    name = "base"

    def __init__(self, timeout: float = 8.0):
        self.timeout = timeout

    def supports(self, source: str) -> bool:
        return True

    def attempt(self, text: str, source: str, target: str) -> ProviderTranslation:
        try:
            return self._translate(text, source, target)
        except requests.Timeout:
            raise ProviderTimeoutError(f"{self.name}: timed out after {self.timeout}s")
        except requests.RequestException as e:
            raise ProviderError(f"{self.name}: network error: {e}", retryable=True)

    def _translate(self, text: str, source: str, target: str) -> ProviderTranslation:
        raise NotImplementedError

    def __repr__(self):
        return f"<{type(self).__name__} {self.name}>"


# =================================================================
#  HTTP PROVIDERS
# =================================================================

class GoogleTranslateProvider(TranslationProvider):
    """Unofficial translate.googleapis.com endpoint (client=gtx), no key needed."""

    name = "google"
    URL = "https://translate.googleapis.com/translate_a/single"

    def _translate(self, text, source, target):
        params = {
            "client": "gtx",
            "sl": source,
            "tl": target,
            "dt": "t",
            "q": text,
        }
        response = requests.get(self.URL, params=params, timeout=self.timeout)
        _check_response(response, self.name)
        data = _parse_json(response, self.name)

        # [[["Hello", "Hola", ...], ...], null, "es", ...]
        if not isinstance(data, list) or not data or not isinstance(data[0], list):
            raise ProviderError(f"{self.name}: unexpected response shape")

        segments = [seg[0] for seg in data[0] if isinstance(seg, list) and seg and isinstance(seg[0], str)]
        detected = data[2] if len(data) > 2 and isinstance(data[2], str) else None
        return ProviderTranslation(text="".join(segments).strip(), detected_language=detected)


class LibreTranslateProvider(TranslationProvider):
    """LibreTranslate-compatible endpoint: {q, source, target, format} -> {translatedText}."""

    name = "libretranslate"

    def __init__(self, url: str, api_key: Optional[str] = None, timeout: float = 8.0):
        super().__init__(timeout)
        self.url = url
        self.api_key = api_key

    def _translate(self, text, source, target):
        payload = {
            "q": text,
            "source": source,
            "target": target,
            "format": "text",
        }
        if self.api_key:
            payload["api_key"] = self.api_key

        response = requests.post(self.url, json=payload, timeout=self.timeout)
        _check_response(response, self.name)
        data = _parse_json(response, self.name)

        if not isinstance(data, dict):
            raise ProviderError(f"{self.name}: unexpected response shape")
        if data.get("error"):
            raise ProviderError(f"{self.name}: {data['error']}")

        detected = None
        detected_info = data.get("detectedLanguage")
        if isinstance(detected_info, dict):
            detected = detected_info.get("language")

        return ProviderTranslation(text=(data.get("translatedText") or "").strip(), detected_language=detected)


class MyMemoryProvider(TranslationProvider):
    """MyMemory public API. Needs an explicit source language."""

    name = "mymemory"
    URL = "https://api.mymemory.translated.net/get"

    def __init__(self, email: Optional[str] = None, timeout: float = 8.0):
        super().__init__(timeout)
        self.email = email

    def supports(self, source):
        return bool(source) and source != "auto"

    def _translate(self, text, source, target):
        params = {
            "q": text,
            "langpair": f"{source}|{target}",
        }
        if self.email:
            params["de"] = self.email

        response = requests.get(self.URL, params=params, timeout=self.timeout)
        _check_response(response, self.name)
        data = _parse_json(response, self.name)

        if not isinstance(data, dict):
            raise ProviderError(f"{self.name}: unexpected response shape")

        # MyMemory answers HTTP 200 with the real status inside the body
        status = str(data.get("responseStatus", "200"))
        details = str(data.get("responseDetails") or "")
        if status == "429" or data.get("quotaFinished") or "MYMEMORY WARNING" in details.upper():
            raise RateLimitedError(f"{self.name}: quota exhausted ({details[:80]})")
        if status != "200":
            raise ProviderError(f"{self.name}: status {status} {details[:120]}", retryable=status.startswith("5"))

        translated = (data.get("responseData") or {}).get("translatedText") or ""
        return ProviderTranslation(text=translated.strip(), detected_language=None)


# =================================================================
#  LLM PROVIDER
# =================================================================

class LLMTranslationProvider(TranslationProvider):
    """Chat model (Gemini/OpenAI via LangChain) with structured output."""

    name = "llm"

    SYSTEM_PROMPT = (
        "You are a translation engine for customer support messages. "
        "Translate the user's message into {target}. "
        "Reply ONLY with the translation, keep names, numbers and order ids unchanged, "
        "and report the ISO 639-1 code of the original language."
    )

    def __init__(self, timeout: float = 8.0, model_factory: Callable = get_chat_model):
        super().__init__(timeout)
        self._model_factory = model_factory
        self._model = None

    def _get_model(self):
        if self._model is None:
            self._model = self._model_factory(structured_output=TranslationOutput, timeout=self.timeout)
        return self._model

    def _translate(self, text, source, target):
        messages = [SystemMessage(content=self.SYSTEM_PROMPT.format(target=target))]
        if source and source != "auto":
            messages.append(SystemMessage(content=f"The message is written in '{source}'."))
        messages.append(HumanMessage(content=text))

        try:
            output = self._get_model().invoke(messages)
        except Exception as e:
            error_text = str(e).lower()
            if "429" in error_text or "rate limit" in error_text or "quota" in error_text:
                raise RateLimitedError(f"{self.name}: {e}")
            if "timeout" in type(e).__name__.lower() or "timed out" in error_text:
                raise ProviderTimeoutError(f"{self.name}: {e}")
            raise ProviderError(f"{self.name}: {e}")

        if not isinstance(output, TranslationOutput):
            raise ProviderError(f"{self.name}: no structured output")

        return ProviderTranslation(
            text=output.translated_text.strip(),
            detected_language=output.detected_language or None,
        )


# --- FACTORY ---

def build_providers(settings) -> List[TranslationProvider]:
    """Provider instances in the configured order. Unknown names are skipped."""
    providers: List[TranslationProvider] = []
    timeout = settings.provider_timeout

    for name in settings.provider_order:
        if name == "google":
            providers.append(GoogleTranslateProvider(timeout=timeout))
        elif name == "libretranslate":
            providers.append(LibreTranslateProvider(settings.libretranslate_url, settings.libretranslate_api_key, timeout=timeout))
        elif name == "mymemory":
            providers.append(MyMemoryProvider(settings.mymemory_email, timeout=timeout))
        elif name == "llm":
            if get_llm_api_key():
                providers.append(LLMTranslationProvider(timeout=timeout))
            else:
                logger.warning("Provider 'llm' configured but no LLM API key found, skipping")
        else:
            logger.warning("Unknown translation provider '%s' ignored", name)

    logger.info("Translation providers: %s", [p.name for p in providers])
    return providers
