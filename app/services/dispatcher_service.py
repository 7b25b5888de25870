"""
WebhookDispatcher: Full translation pipeline for one Intercom event, decoupled from HTTP.
Runs after the webhook has been acknowledged; nothing here reaches the caller.
"""

import logging
import re
from enum import Enum

from app.services import text_normalizer
from app.services.payload_service import InboundEvent

logger = logging.getLogger(__name__)


ALLOWED_TOPICS = frozenset({"conversation.user.created", "conversation.user.replied"})

# Short acknowledgements never worth a translation note
ACKNOWLEDGEMENTS = frozenset({
    "ok", "okay", "ok thanks", "ok thank you", "thanks", "thank you", "thx", "ty",
    "yes", "no", "hi", "hello", "bye",
    "merci", "merci beaucoup", "danke", "danke schön", "gracias", "muchas gracias",
    "obrigado", "obrigada", "grazie", "спасибо", "большое спасибо", "дякую", "ок", "да", "нет",
})

_PUNCT_RE = re.compile(r'[\s!?.,;:)(\-…]+')
# Scripts written without spaces: each character counts as a word
_CJK_RE = re.compile(r'[\u3040-\u30ff\u3400-\u4dbf\u4e00-\u9fff\uac00-\ud7af\u0e00-\u0e7f]')


class DispatchOutcome(str, Enum):
    DISABLED = "disabled"
    IGNORED_TOPIC = "ignored_topic"
    MISSING_CONVERSATION = "missing_conversation"
    EMPTY_MESSAGE = "empty_message"
    TOO_SHORT = "too_short"
    DUPLICATE = "duplicate"
    NOT_TRANSLATED = "not_translated"
    PUBLISHED = "published"
    PUBLISH_FAILED = "publish_failed"


def count_words(text: str) -> int:
    cjk_chars = len(_CJK_RE.findall(text))
    other_words = len(_CJK_RE.sub(" ", text).split())
    return cjk_chars + other_words


def is_acknowledgement(text: str) -> bool:
    key = _PUNCT_RE.sub(" ", text.lower()).strip()
    return key in ACKNOWLEDGEMENTS


class WebhookDispatcher:
    """Sequences normalizer -> dedupe -> classifier -> translator -> publisher."""

    def __init__(self, settings, suppressor, classifier, translator, publisher):
        self.enabled = settings.enabled
        self.min_words = settings.min_words
        self.min_chars = settings.min_chars
        self.suppressor = suppressor
        self.classifier = classifier
        self.translator = translator
        self.publisher = publisher

    # =================================================================
    #  PUBLIC ENTRY POINT
    # =================================================================

    def handle(self, event: InboundEvent) -> DispatchOutcome:
        """Process one event. Never raises."""
        try:
            return self._process(event)
        except Exception:
            logger.exception("Unhandled error processing conversation %s", event.conversation_id or "?")
            return DispatchOutcome.NOT_TRANSLATED

    def passes_content_gate(self, text: str) -> bool:
        """Minimum size gate: very short messages are intentionally never translated."""
        if len(text) < self.min_chars:
            return False
        if count_words(text) < self.min_words:
            return False
        if is_acknowledgement(text):
            return False
        return True

    # =================================================================
    #  PIPELINE
    # =================================================================

    def _process(self, event: InboundEvent) -> DispatchOutcome:
        # --- STEP 1: Kill switch ---
        if not self.enabled:
            logger.info("Translator disabled - event discarded")
            return DispatchOutcome.DISABLED

        # --- STEP 2: Topic filter ---
        if event.topic not in ALLOWED_TOPICS:
            logger.info("Topic '%s' not supported - skipping", event.topic)
            return DispatchOutcome.IGNORED_TOPIC

        conversation_id = event.conversation_id
        if not conversation_id:
            logger.warning("Missing conversation ID - skipping")
            return DispatchOutcome.MISSING_CONVERSATION

        # --- STEP 3: Normalize ---
        message = text_normalizer.normalize(event.raw_body)
        if not message:
            logger.info("No message text in conversation %s", conversation_id)
            return DispatchOutcome.EMPTY_MESSAGE

        logger.info("Webhook processed: %s | %s | hint=%s", event.topic, conversation_id, event.language_hint)
        logger.info("   %s...", message[:80])

        # --- STEP 4: Content gate ---
        if not self.passes_content_gate(message):
            logger.info("Message too short to translate: '%s'", message[:40])
            return DispatchOutcome.TOO_SHORT

        # --- STEP 5: De-duplication ---
        if not self.suppressor.should_process(conversation_id, message):
            return DispatchOutcome.DUPLICATE

        # --- STEP 6: Language ---
        language = self.classifier.classify(message, event.language_hint)

        # --- STEP 7: Translate ---
        result = self.translator.translate(message, language)
        if result is None:
            logger.info("No translation for conversation %s (language=%s)", conversation_id, language)
            return DispatchOutcome.NOT_TRANSLATED

        # --- STEP 8: Publish ---
        if self.publisher.publish(conversation_id, result):
            return DispatchOutcome.PUBLISHED
        return DispatchOutcome.PUBLISH_FAILED
