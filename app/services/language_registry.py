"""
LanguageRegistry: Single source of truth for language label <-> canonical code mappings.
Every LanguageCode used by the app comes from this table ("auto" = unknown).
"""

import re


AUTO = "auto"

_LANGUAGE_DATA = {
    "en": {"name": "English", "aliases": ["english", "inglés", "anglais", "английский"]},
    "ru": {"name": "Russian", "aliases": ["russian", "русский", "ruso", "russe"]},
    "uk": {"name": "Ukrainian", "aliases": ["ukrainian", "українська", "украинский", "ua"]},
    "be": {"name": "Belarusian", "aliases": ["belarusian", "беларуская"]},
    "es": {"name": "Spanish", "aliases": ["spanish", "español", "espanol", "castellano"]},
    "pt": {"name": "Portuguese", "aliases": ["portuguese", "português", "portugues"]},
    "fr": {"name": "French", "aliases": ["french", "français", "francais"]},
    "de": {"name": "German", "aliases": ["german", "deutsch"]},
    "it": {"name": "Italian", "aliases": ["italian", "italiano"]},
    "nl": {"name": "Dutch", "aliases": ["dutch", "nederlands", "flemish"]},
    "pl": {"name": "Polish", "aliases": ["polish", "polski"]},
    "cs": {"name": "Czech", "aliases": ["czech", "čeština", "cestina"]},
    "sk": {"name": "Slovak", "aliases": ["slovak", "slovenčina"]},
    "ro": {"name": "Romanian", "aliases": ["romanian", "română", "romana"]},
    "hu": {"name": "Hungarian", "aliases": ["hungarian", "magyar"]},
    "bg": {"name": "Bulgarian", "aliases": ["bulgarian", "български"]},
    "sr": {"name": "Serbian", "aliases": ["serbian", "српски", "srpski"]},
    "hr": {"name": "Croatian", "aliases": ["croatian", "hrvatski"]},
    "el": {"name": "Greek", "aliases": ["greek", "ελληνικά"]},
    "tr": {"name": "Turkish", "aliases": ["turkish", "türkçe", "turkce"]},
    "sv": {"name": "Swedish", "aliases": ["swedish", "svenska"]},
    "no": {"name": "Norwegian", "aliases": ["norwegian", "norsk", "nb", "nn", "bokmål"]},
    "da": {"name": "Danish", "aliases": ["danish", "dansk"]},
    "fi": {"name": "Finnish", "aliases": ["finnish", "suomi"]},
    "et": {"name": "Estonian", "aliases": ["estonian", "eesti"]},
    "lv": {"name": "Latvian", "aliases": ["latvian", "latviešu"]},
    "lt": {"name": "Lithuanian", "aliases": ["lithuanian", "lietuvių"]},
    "kk": {"name": "Kazakh", "aliases": ["kazakh", "қазақ"]},
    "uz": {"name": "Uzbek", "aliases": ["uzbek", "o'zbek", "oʻzbek"]},
    "ka": {"name": "Georgian", "aliases": ["georgian", "ქართული"]},
    "hy": {"name": "Armenian", "aliases": ["armenian", "հայերեն"]},
    "az": {"name": "Azerbaijani", "aliases": ["azerbaijani", "azərbaycan"]},
    "he": {"name": "Hebrew", "aliases": ["hebrew", "עברית", "iw"]},
    "ar": {"name": "Arabic", "aliases": ["arabic", "العربية"]},
    "fa": {"name": "Persian", "aliases": ["persian", "farsi", "فارسی"]},
    "hi": {"name": "Hindi", "aliases": ["hindi", "हिन्दी"]},
    "bn": {"name": "Bengali", "aliases": ["bengali", "bangla", "বাংলা"]},
    "ur": {"name": "Urdu", "aliases": ["urdu", "اردو"]},
    "th": {"name": "Thai", "aliases": ["thai", "ไทย"]},
    "vi": {"name": "Vietnamese", "aliases": ["vietnamese", "tiếng việt"]},
    "id": {"name": "Indonesian", "aliases": ["indonesian", "bahasa indonesia", "in"]},
    "ms": {"name": "Malay", "aliases": ["malay", "bahasa melayu"]},
    "tl": {"name": "Filipino", "aliases": ["filipino", "tagalog", "fil"]},
    "zh": {"name": "Chinese", "aliases": ["chinese", "中文", "汉语", "漢語", "mandarin", "cantonese", "zh-cn", "zh-tw"]},
    "ja": {"name": "Japanese", "aliases": ["japanese", "日本語"]},
    "ko": {"name": "Korean", "aliases": ["korean", "한국어"]},
}

# "Chinese (Simplified)", "Portuguese (Brazil)", "English - US"
_QUALIFIER_RE = re.compile(r'\s*[\(\[].*?[\)\]]\s*|\s+-\s+.*$')
# "zh-Hant", "pt_BR", "en-US"
_REGION_TAG_RE = re.compile(r'^([a-z]{2,3})[-_][a-z0-9]{2,8}$')


class LanguageRegistry:
    """Lookup table for free-form language labels."""

    def __init__(self):
        self._data = _LANGUAGE_DATA
        self._alias_map: dict[str, str] | None = None

    # --- Lookups by code ---

    def is_known(self, code: str) -> bool:
        return code in self._data

    def get_name(self, code: str) -> str:
        """Human-readable language name. Falls back to the code itself."""
        cfg = self._data.get(code)
        return cfg["name"] if cfg else code

    def get_all_codes(self) -> list[str]:
        return list(self._data.keys())

    # --- Lookups by label ---

    def resolve(self, label: str | None) -> str | None:
        """
        Map a free-form label to a canonical 2-letter code.

        Returns AUTO for "auto"/"unknown" style labels and None when the label
        is not recognised.
        """
        if not label or not isinstance(label, str):
            return None

        key = label.strip().lower()
        if not key:
            return None
        if key in ("auto", "unknown", "und", "undetermined", "detect"):
            return AUTO

        alias_map = self.get_alias_map()
        if key in alias_map:
            return alias_map[key]

        stripped = _QUALIFIER_RE.sub("", key).strip()
        if stripped and stripped in alias_map:
            return alias_map[stripped]

        match = _REGION_TAG_RE.match(key)
        if match and match.group(1) in alias_map:
            return alias_map[match.group(1)]

        return None

    # --- Bulk maps (cached on first call) ---

    def get_alias_map(self) -> dict[str, str]:
        """Lowercase code/name/alias -> canonical code."""
        if self._alias_map is None:
            self._alias_map = {}
            for code, cfg in self._data.items():
                self._alias_map[code] = code
                self._alias_map[cfg["name"].lower()] = code
                for alias in cfg["aliases"]:
                    self._alias_map[alias] = code
        return self._alias_map
