"""
NotePublisher: renders an accepted translation as an Intercom note and posts it.
Best-effort: the webhook was acknowledged long ago, so failures are only logged.
"""

import logging

from app.models.translation_models import TranslationResult

logger = logging.getLogger(__name__)


def format_note(result: TranslationResult) -> str:
    """Note body: language tags (source first) followed by the verbatim translation."""
    return f"📝 Translation ({result.source_lang} → {result.target_lang}):\n{result.text}"


class NotePublisher:

    def __init__(self, intercom_service):
        self.intercom = intercom_service

    def publish(self, conversation_id: str, result: TranslationResult) -> bool:
        body = format_note(result)
        try:
            response = self.intercom.post_note(conversation_id, body)
        except Exception as e:
            logger.error("Unexpected error publishing note for %s: %s", conversation_id, e)
            return False

        if response is None:
            logger.error("Translation note NOT published for conversation %s", conversation_id)
            return False

        logger.info("Translation note published for conversation %s (%s -> %s)",
                    conversation_id, result.source_lang, result.target_lang)
        return True
