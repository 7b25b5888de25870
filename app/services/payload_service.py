"""
PayloadService: Extracts the fields the translator needs from an Intercom webhook.
Handles the different places Intercom puts the message body and language.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Dict, Any
from app.utils.helpers import get_nested_value, get_first_value

logger = logging.getLogger(__name__)


# --- BODY LOCATIONS (relative to data.item) ---

# conversation.user.replied: the newest part only, never the opening message
_REPLY_BODY_PATHS = [
    ['conversation_parts', 'conversation_parts', -1, 'body'],
    ['conversation_parts', -1, 'body'],
    ['part', 'body'],
]

# conversation.user.created (and anything else): the opening message
_CREATED_BODY_PATHS = [
    ['source', 'body'],
    ['conversation_message', 'body'],
    ['body'],
]

REPLY_TOPIC = 'conversation.user.replied'

# --- LANGUAGE HINT LOCATIONS (relative to data.item) ---

_LANGUAGE_PATHS = [
    ['custom_attributes', 'Language'],
    ['custom_attributes', 'language'],
    ['language'],
    ['source', 'author', 'language'],
    ['user', 'language_override'],
    ['contacts', 'contacts', 0, 'language_override'],
]


@dataclass
class InboundEvent:
    """Normalized data extracted from an Intercom webhook payload."""
    topic: str = ""
    conversation_id: str = ""
    raw_body: str = ""
    language_hint: Optional[str] = None

    # Raw payload (kept for debugging)
    raw_payload: Dict[str, Any] = field(default_factory=dict)


def extract_webhook_data(raw_body: Any) -> InboundEvent:
    """
    Extract topic, conversation id, message body and language hint.
    Never raises: missing fields are left empty for the dispatcher to ignore.
    """
    if not isinstance(raw_body, dict):
        logger.warning("Webhook body is not a JSON object - ignoring")
        return InboundEvent()

    event = InboundEvent(raw_payload=raw_body)
    event.topic = raw_body.get('topic') or ''

    item = get_nested_value(raw_body, ['data', 'item'])
    if not isinstance(item, dict):
        logger.info("Webhook without data.item (topic=%s)", event.topic)
        return event

    conversation_id = item.get('id')
    event.conversation_id = str(conversation_id) if conversation_id else ''

    body_paths = _REPLY_BODY_PATHS if event.topic == REPLY_TOPIC else _CREATED_BODY_PATHS
    body = get_first_value(item, body_paths)
    event.raw_body = body if isinstance(body, str) else ''

    hint = get_first_value(item, _LANGUAGE_PATHS)
    event.language_hint = hint.strip() if isinstance(hint, str) else None

    logger.debug("Extracted event: topic=%s conversation=%s hint=%s body_len=%s",
                 event.topic, event.conversation_id, event.language_hint, len(event.raw_body))
    return event
