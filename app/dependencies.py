from app.config import Settings
from app.services.clock import SystemClock
from app.services.language_registry import LanguageRegistry
from app.services.language_classifier import LanguageClassifier
from app.services.duplicate_suppressor import DuplicateSuppressor
from app.services.ttl_cache import TTLCache
from app.services.translation_validator import TranslationValidator
from app.services.translation_providers import build_providers
from app.services.translation_service import ProviderHealth, TranslationOrchestrator
from app.services.intercom_service import IntercomService
from app.services.note_publisher import NotePublisher
from app.services.dispatcher_service import WebhookDispatcher

# Raises ConfigError on missing credentials: the app refuses to start
settings = Settings.from_env()

# Initialize Singletons
clock = SystemClock()
language_registry = LanguageRegistry()
classifier = LanguageClassifier(
    language_registry,
    skip_languages=settings.skip_languages,
    trust_content_detection=settings.trust_content_detection,
)
duplicate_suppressor = DuplicateSuppressor(clock, window_seconds=settings.dedupe_window)
translation_cache = TTLCache(clock, default_ttl=settings.cache_ttl, max_entries=settings.cache_max_entries)
provider_health = ProviderHealth(
    clock,
    failure_threshold=settings.provider_failure_threshold,
    cooldown=settings.provider_cooldown,
    backoff_base=settings.rate_limit_backoff,
    backoff_max=settings.rate_limit_backoff_max,
)
intercom_service = IntercomService(settings)

# Translator (provider chain + cache)
translator = TranslationOrchestrator(
    providers=build_providers(settings),
    classifier=classifier,
    validator=TranslationValidator(),
    cache=translation_cache,
    health=provider_health,
    target_language=settings.target_language,
    skip_languages=settings.skip_languages,
    negative_ttl=settings.negative_cache_ttl,
    retries=settings.provider_retries,
)

# Dispatcher (webhook pipeline)
dispatcher = WebhookDispatcher(
    settings=settings,
    suppressor=duplicate_suppressor,
    classifier=classifier,
    translator=translator,
    publisher=NotePublisher(intercom_service),
)
