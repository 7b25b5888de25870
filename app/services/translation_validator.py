import difflib
import logging
import re
from collections import Counter
from typing import Optional

logger = logging.getLogger(__name__)


_WHITESPACE_RE = re.compile(r'\s+')
_TOKEN_RE = re.compile(r'\w+', re.UNICODE)
_REPEATED_TOKEN_RE = re.compile(r'\b(\w+)\b(?:\W+\1\b){4,}', re.IGNORECASE | re.UNICODE)

# Boilerplate leaked by free translation backends instead of a translation
_KNOWN_ERROR_PATTERNS = [
    re.compile(r'MYMEMORY WARNING', re.IGNORECASE),
    re.compile(r'QUERY LENGTH LIMIT EXCEEDED', re.IGNORECASE),
    re.compile(r'INVALID SOURCE LANGUAGE', re.IGNORECASE),
    re.compile(r'INVALID TARGET LANGUAGE', re.IGNORECASE),
    re.compile(r'PLEASE SELECT TWO DISTINCT LANGUAGES', re.IGNORECASE),
    re.compile(r'NO QUERY SPECIFIED', re.IGNORECASE),
    re.compile(r'YOU USED ALL AVAILABLE FREE TRANSLATIONS', re.IGNORECASE),
    re.compile(r'<\s*(?:!doctype|html|head|body)\b', re.IGNORECASE),
]

# Whole-response errors: the entire answer is a status line, not a sentence
_ERROR_RESPONSE_PATTERNS = [
    re.compile(r'^\s*(?:\d{3}\s*)?too many requests[.!]?\s*$', re.IGNORECASE),
    re.compile(r'^\s*(?:http\s*)?\d{3}\s*[-:]?\s*(?:bad gateway|service unavailable|internal server error|gateway time-?out)[.!]?\s*$', re.IGNORECASE),
]

# Backend "Error: ..." answers. A source opening with its own label
# ("Fehler: ...", "Erreur : ...") legitimately translates to the same prefix
_ERROR_PREFIX_RE = re.compile(r'^\s*(?:error|exception)\s*:', re.IGNORECASE)
_LABEL_PREFIX_RE = re.compile(r'^\s*\w+\s*:', re.UNICODE)

LATIN_SCRIPT_TARGETS = frozenset({
    "en", "es", "pt", "fr", "de", "it", "nl", "pl", "cs", "sk", "ro", "hu", "hr",
    "tr", "sv", "no", "da", "fi", "et", "lv", "lt", "uz", "az", "vi", "id", "ms", "tl",
})


class TranslationValidator:
    """
    Validation policy for provider responses.

    Each rule is a static method returning True when the response FAILS it.
    check() runs them in order and returns the first failing rule name.
    """

    SIMILARITY_THRESHOLD = 0.90    # difflib ratio input vs output
    MAX_EXPANSION_RATIO = 6.0      # CJK -> English legitimately grows a lot
    EXPANSION_SLACK_CHARS = 60
    REPETITION_MIN_TOKENS = 8

    def check(self, source_text: str, translated: Optional[str], target_lang: str = "en") -> Optional[str]:
        """Name of the first rule the response fails, or None if acceptable."""
        if self.is_empty(translated):
            logger.warning("Translation rejected by rule 'empty'")
            return "empty"

        rules = (
            ("echo", lambda: self.is_echo(source_text, translated)),
            ("known_error", lambda: self.is_known_error(source_text, translated)),
            ("repetition", lambda: self.is_repetition(source_text, translated)),
            ("length_expansion", lambda: self.is_length_expansion(source_text, translated)),
            ("similarity", lambda: self.is_similarity(source_text, translated)),
            ("untranslated_script", lambda: self.is_untranslated_script(translated, target_lang)),
        )
        for name, failed in rules:
            if failed():
                logger.warning("Translation rejected by rule '%s': '%s...'", name, translated[:40])
                return name
        return None

    # --- Rules ---

    @staticmethod
    def is_empty(translated: Optional[str]) -> bool:
        return not translated or not translated.strip()

    @staticmethod
    def is_echo(source_text: str, translated: str) -> bool:
        def squash(value: str) -> str:
            return _WHITESPACE_RE.sub("", value or "").casefold()
        return squash(source_text) == squash(translated)

    @staticmethod
    def is_known_error(source_text: str, translated: str) -> bool:
        for pattern in _KNOWN_ERROR_PATTERNS:
            # Only boilerplate the customer did not write themselves
            if pattern.search(translated) and not pattern.search(source_text or ""):
                return True

        if any(pattern.match(translated) for pattern in _ERROR_RESPONSE_PATTERNS):
            return True

        return bool(_ERROR_PREFIX_RE.match(translated) and not _LABEL_PREFIX_RE.match(source_text or ""))

    @staticmethod
    def is_repetition(source_text: str, translated: str) -> bool:
        if _REPEATED_TOKEN_RE.search(translated) and not _REPEATED_TOKEN_RE.search(source_text or ""):
            return True

        tokens = [t.casefold() for t in _TOKEN_RE.findall(translated)]
        if len(tokens) < TranslationValidator.REPETITION_MIN_TOKENS:
            return False
        _, top_count = Counter(tokens).most_common(1)[0]
        return top_count / len(tokens) > 0.5

    @staticmethod
    def is_length_expansion(source_text: str, translated: str) -> bool:
        source_len = len((source_text or "").strip())
        output_len = len(translated.strip())
        return (
            output_len > source_len * TranslationValidator.MAX_EXPANSION_RATIO
            and output_len - source_len > TranslationValidator.EXPANSION_SLACK_CHARS
        )

    @staticmethod
    def is_similarity(source_text: str, translated: str) -> bool:
        """Providers that silently echo (almost) the same text back."""
        ratio = difflib.SequenceMatcher(None, (source_text or "").lower(), translated.lower()).ratio()
        logger.debug("Similarity check: %.2f (threshold: %.2f)", ratio, TranslationValidator.SIMILARITY_THRESHOLD)
        return ratio > TranslationValidator.SIMILARITY_THRESHOLD

    @staticmethod
    def is_untranslated_script(translated: Optional[str], target_lang: str) -> bool:
        """For Latin-script targets, output written mostly in another script."""
        if target_lang not in LATIN_SCRIPT_TARGETS or not translated:
            return False
        letters = [ch for ch in translated if ch.isalpha()]
        if not letters:
            return False
        non_latin = sum(1 for ch in letters if ord(ch) > 0x024F and not 0x1E00 <= ord(ch) <= 0x1EFF)
        return non_latin / len(letters) > 0.5
