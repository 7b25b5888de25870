"""
LanguageClassifier: best-guess source language for an inbound message.

Two signals:
- The language label Intercom attaches to the conversation/contact (hint).
- Local statistical detection on the text (langdetect, no network).

Policy: a recognised hint wins. A hint that maps to a skip-list language is a
hard "do not translate", even when content override is switched on.
"""

import logging
from typing import Iterable, Optional

from langdetect import DetectorFactory, LangDetectException, detect_langs

from app.services.language_registry import AUTO, LanguageRegistry

logger = logging.getLogger(__name__)

# langdetect is randomised; a fixed seed keeps detections stable across runs
DetectorFactory.seed = 0


class LanguageClassifier:

    MIN_DETECTION_CHARS = 20      # letters; below this langdetect guesses
    MIN_DETECTION_CONFIDENCE = 0.80

    def __init__(self, registry: LanguageRegistry, skip_languages: Iterable[str] = (),
                 trust_content_detection: bool = False):
        self.registry = registry
        self.skip_languages = frozenset(skip_languages)
        self.trust_content_detection = trust_content_detection

    # =================================================================
    #  PUBLIC ENTRY POINTS
    # =================================================================

    def classify(self, text: str, hint: Optional[str] = None) -> str:
        """Return a LanguageCode for text, using hint first."""
        hinted = self.registry.resolve(hint)
        if hint and hinted is None:
            logger.info("Unrecognised language hint '%s', falling back to detection", hint)

        if hinted and hinted != AUTO:
            if hinted in self.skip_languages:
                logger.info("Hint '%s' -> %s (skip-list)", hint, hinted)
                return hinted
            if not self.trust_content_detection:
                logger.info("Hint '%s' -> %s", hint, hinted)
                return hinted

        detected = self.detect(text)

        if hinted and hinted != AUTO:
            # Content override: only a confident detection replaces the hint
            if detected != AUTO and detected != hinted:
                logger.info("Content override: hint %s replaced by detected %s", hinted, detected)
                return detected
            return hinted

        return detected

    def detect(self, text: str) -> str:
        """Statistical detection. Returns AUTO when undetermined."""
        if not text:
            return AUTO

        letters = sum(1 for ch in text if ch.isalpha())
        if letters < self.MIN_DETECTION_CHARS:
            logger.debug("Text too short for detection (%s letters)", letters)
            return AUTO

        try:
            candidates = detect_langs(text.replace("\n", " "))
        except LangDetectException as e:
            logger.debug("langdetect failed: %s", e)
            return AUTO

        if not candidates:
            return AUTO

        best = candidates[0]
        if best.prob < self.MIN_DETECTION_CONFIDENCE:
            logger.info("Low-confidence detection %s (%.2f), treating as auto", best.lang, best.prob)
            return AUTO

        code = self.registry.resolve(best.lang)
        if not code:
            logger.info("Detected language '%s' not in registry", best.lang)
            return AUTO

        logger.info("Detected language: %s (%.2f)", code, best.prob)
        return code
