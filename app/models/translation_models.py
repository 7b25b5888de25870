from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class TranslationResult(BaseModel):
    """An accepted translation, as cached and as published in the note."""

    model_config = ConfigDict(frozen=True)

    text: str
    source_lang: str
    target_lang: str
    provider: str = ""


class CacheSentinel(str, Enum):
    """Negative cache values: the text is known not to produce a usable translation."""

    ALREADY_TARGET = "already_target"
    UNTRANSLATABLE = "untranslatable"


class TranslationOutput(BaseModel):
    """
    Structured output requested from the LLM translation provider.
    """
    translated_text: str = Field(
        description="The message translated into the target language. Only the translation: no notes, quotes or explanations."
    )
    detected_language: str = Field(
        default="",
        description="ISO 639-1 code of the language the original message is written in (e.g. 'fr', 'zh'). Empty if unsure."
    )
