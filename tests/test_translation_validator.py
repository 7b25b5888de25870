"""
Each validation rule on its own, then check() end to end.
"""

import pytest

from app.services.translation_validator import TranslationValidator


@pytest.fixture
def validator():
    return TranslationValidator()


class TestRules:

    def test_empty(self):
        assert TranslationValidator.is_empty("") is True
        assert TranslationValidator.is_empty("   ") is True
        assert TranslationValidator.is_empty(None) is True
        assert TranslationValidator.is_empty("Hello") is False

    def test_echo_ignores_case_and_whitespace(self):
        assert TranslationValidator.is_echo("Hola amigo", "  hola   AMIGO ") is True
        assert TranslationValidator.is_echo("Hola amigo", "Hello friend") is False

    def test_known_error_strings(self):
        leaked = "MYMEMORY WARNING: YOU USED ALL AVAILABLE FREE TRANSLATIONS FOR TODAY."
        assert TranslationValidator.is_known_error("Hola, necesito ayuda", leaked) is True
        assert TranslationValidator.is_known_error("Hola", "QUERY LENGTH LIMIT EXCEEDED. MAX ALLOWED QUERY : 500 CHARS") is True
        assert TranslationValidator.is_known_error("Hola", "<html><body>502 Bad Gateway</body></html>") is True
        assert TranslationValidator.is_known_error("Hola", "Error: invalid request") is True

    def test_known_error_written_by_customer_is_allowed(self):
        source = "Error: la aplicación no abre"
        assert TranslationValidator.is_known_error(source, "Error: the app does not open") is False

    def test_translated_error_label_is_allowed(self):
        assert TranslationValidator.is_known_error(
            "Fehler: Ich kann mich nicht einloggen", "Error: I cannot log in"
        ) is False
        assert TranslationValidator.is_known_error(
            "Erreur : le paiement a échoué", "Error: the payment failed"
        ) is False

    def test_too_many_requests_only_as_whole_response(self):
        assert TranslationValidator.is_known_error("Hola", "429 Too Many Requests") is True
        assert TranslationValidator.is_known_error("Hola", "Too many requests.") is True
        assert TranslationValidator.is_known_error(
            "Recibo demasiadas solicitudes de su equipo",
            "I get too many requests from your team",
        ) is False

    def test_bare_gateway_status_line(self):
        assert TranslationValidator.is_known_error("Hola", "502 Bad Gateway") is True

    def test_repeated_token_run(self):
        assert TranslationValidator.is_repetition("Hola", "the the the the the the") is True

    def test_dominant_token(self):
        spam = "ok yes ok ok no ok ok ok ok"
        assert TranslationValidator.is_repetition("Vale", spam) is True

    def test_normal_sentence_is_not_repetition(self):
        assert TranslationValidator.is_repetition(
            "Mi pedido no ha llegado todavía",
            "My order has not arrived yet and I am still waiting for it",
        ) is False

    def test_length_expansion(self):
        assert TranslationValidator.is_length_expansion("Hola", "x" * 200) is True
        assert TranslationValidator.is_length_expansion("你好", "Hello there") is False

    def test_similarity_catches_near_echo(self):
        source = "Hello, I have a problem with my order"
        assert TranslationValidator.is_similarity(source, "Hello, I have a problem with my order.") is True

    def test_similarity_allows_real_translation(self):
        assert TranslationValidator.is_similarity(
            "Bonjour, j'ai un problème avec ma commande",
            "Hello, I have a problem with my order",
        ) is False

    def test_untranslated_script(self):
        assert TranslationValidator.is_untranslated_script("Привет, как дела?", "en") is True
        assert TranslationValidator.is_untranslated_script("Hello, how are you?", "en") is False
        assert TranslationValidator.is_untranslated_script("Xin chào, bạn khỏe không?", "vi") is False

    def test_untranslated_script_ignored_for_non_latin_target(self):
        assert TranslationValidator.is_untranslated_script("Привет", "ru") is False


class TestCheck:

    def test_accepts_good_translation(self, validator):
        assert validator.check(
            "Bonjour, j'ai un problème avec ma commande",
            "Hello, I have a problem with my order",
            "en",
        ) is None

    def test_accepts_translated_error_report(self, validator):
        assert validator.check(
            "Fehler: Ich kann mich nicht in mein Konto einloggen",
            "Error: I cannot log into my account",
            "en",
        ) is None

    @pytest.mark.parametrize("source,translated,rule", [
        ("Hola amigo mío", "", "empty"),
        ("Hola amigo mío", "Hola amigo mío", "echo"),
        ("Hola amigo mío", "MYMEMORY WARNING: quota", "known_error"),
        ("Hola amigo mío", "friend friend friend friend friend friend", "repetition"),
        ("Hola", "Hello " + "and more text " * 20, "length_expansion"),
        ("Thank you so much for the help!", "Thank you so much for the help", "similarity"),
        ("Спасибо большое за помощь", "Спасибо, большое спасибо за помощь", "untranslated_script"),
    ])
    def test_first_failing_rule_is_reported(self, validator, source, translated, rule):
        assert validator.check(source, translated, "en") == rule
