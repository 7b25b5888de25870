"""
Settings: process configuration read once from the environment (.env supported).
Built by app.dependencies at startup; a ConfigError there stops the process.
"""

import os
from dataclasses import dataclass, field
from typing import Optional, Tuple, FrozenSet

from dotenv import load_dotenv

from app.services.language_registry import AUTO, LanguageRegistry

load_dotenv()


DEFAULT_PROVIDERS = "google,libretranslate,mymemory"


class ConfigError(RuntimeError):
    """Missing or malformed configuration. Fatal at startup."""


def _get_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _get_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {value!r}")


def _get_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        return float(value)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {value!r}")


def _get_list(name: str, default: str) -> Tuple[str, ...]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        raw = default
    return tuple(item.strip().lower() for item in raw.split(",") if item.strip())


def _get_language(name: str, label: str, registry: LanguageRegistry) -> str:
    """Canonical code for a language label ("English", "pt-BR", "ru")."""
    code = registry.resolve(label)
    if not code or code == AUTO:
        raise ConfigError(f"{name}: unknown language {label!r}")
    return code


@dataclass(frozen=True)
class Settings:
    # Intercom
    intercom_token: str = ""
    intercom_admin_id: str = ""
    intercom_api_url: str = "https://api.intercom.io"
    intercom_api_version: str = "2.11"
    intercom_timeout: float = 10.0

    # Behaviour
    enabled: bool = True
    target_language: str = "en"
    skip_languages: FrozenSet[str] = field(default_factory=lambda: frozenset({"en", "ru"}))
    trust_content_detection: bool = False
    min_words: int = 3
    min_chars: int = 8
    debug: bool = False

    # Providers
    provider_order: Tuple[str, ...] = ("google", "libretranslate", "mymemory")
    provider_timeout: float = 8.0
    provider_retries: int = 1
    provider_failure_threshold: int = 3
    provider_cooldown: float = 60.0
    rate_limit_backoff: float = 30.0
    rate_limit_backoff_max: float = 900.0
    libretranslate_url: str = "https://libretranslate.com/translate"
    libretranslate_api_key: Optional[str] = None
    mymemory_email: Optional[str] = None

    # Caches
    cache_ttl: float = 21600.0
    negative_cache_ttl: float = 1800.0
    cache_max_entries: int = 5000
    dedupe_window: float = 60.0

    @property
    def auth_header(self) -> str:
        token = self.intercom_token.strip()
        if token.lower().startswith("bearer "):
            return token
        return f"Bearer {token}"

    @classmethod
    def from_env(cls) -> "Settings":
        """Read every setting from the environment and validate required ones."""
        enabled = _get_bool("TRANSLATOR_ENABLED", True)
        token = (os.getenv("INTERCOM_TOKEN") or "").strip()
        admin_id = (os.getenv("INTERCOM_ADMIN_ID") or "").strip()

        if enabled:
            missing = [name for name, value in (("INTERCOM_TOKEN", token), ("INTERCOM_ADMIN_ID", admin_id)) if not value]
            if missing:
                raise ConfigError(f"Missing required settings: {', '.join(missing)}")

        registry = LanguageRegistry()
        target = _get_language("TARGET_LANGUAGE", os.getenv("TARGET_LANGUAGE") or "en", registry)
        skip = {_get_language("SKIP_LANGUAGES", label, registry) for label in _get_list("SKIP_LANGUAGES", "en,ru")}
        skip.add(target)

        settings = cls(
            intercom_token=token,
            intercom_admin_id=admin_id,
            intercom_api_url=(os.getenv("INTERCOM_API_URL") or "https://api.intercom.io").rstrip("/"),
            intercom_api_version=os.getenv("INTERCOM_API_VERSION") or "2.11",
            intercom_timeout=_get_float("INTERCOM_TIMEOUT_SECONDS", 10.0),
            enabled=enabled,
            target_language=target,
            skip_languages=frozenset(skip),
            trust_content_detection=_get_bool("TRUST_CONTENT_DETECTION", False),
            min_words=_get_int("MIN_WORDS", 3),
            min_chars=_get_int("MIN_CHARS", 8),
            debug=_get_bool("DEBUG", False),
            provider_order=_get_list("TRANSLATION_PROVIDERS", DEFAULT_PROVIDERS),
            provider_timeout=_get_float("PROVIDER_TIMEOUT_SECONDS", 8.0),
            provider_retries=_get_int("PROVIDER_RETRIES", 1),
            provider_failure_threshold=_get_int("PROVIDER_FAILURE_THRESHOLD", 3),
            provider_cooldown=_get_float("PROVIDER_COOLDOWN_SECONDS", 60.0),
            rate_limit_backoff=_get_float("RATE_LIMIT_BACKOFF_SECONDS", 30.0),
            rate_limit_backoff_max=_get_float("RATE_LIMIT_BACKOFF_MAX_SECONDS", 900.0),
            libretranslate_url=os.getenv("LIBRETRANSLATE_URL") or "https://libretranslate.com/translate",
            libretranslate_api_key=os.getenv("LIBRETRANSLATE_API_KEY") or None,
            mymemory_email=os.getenv("MYMEMORY_EMAIL") or None,
            cache_ttl=_get_float("CACHE_TTL_SECONDS", 21600.0),
            negative_cache_ttl=_get_float("NEGATIVE_CACHE_TTL_SECONDS", 1800.0),
            cache_max_entries=_get_int("CACHE_MAX_ENTRIES", 5000),
            dedupe_window=_get_float("DEDUPE_WINDOW_SECONDS", 60.0),
        )

        if not settings.provider_order:
            raise ConfigError("TRANSLATION_PROVIDERS must list at least one provider")
        if settings.provider_retries < 0:
            raise ConfigError("PROVIDER_RETRIES must be >= 0")

        return settings
