"""
IntercomService.post_note and NotePublisher, with requests.post mocked.
"""

import json
from unittest.mock import MagicMock, patch

import requests

from app.models.translation_models import TranslationResult
from app.services.intercom_service import IntercomService
from app.services.note_publisher import NotePublisher, format_note


RESULT = TranslationResult(
    text="Hello, I have a problem with my order",
    source_lang="fr",
    target_lang="en",
    provider="google",
)


def _ok_response(json_data=None):
    response = MagicMock()
    response.status_code = 200
    response.raise_for_status.return_value = None
    response.json.return_value = json_data if json_data is not None else {"type": "conversation", "id": "42"}
    return response


# ---------------------------------------------------------------------------
# IntercomService
# ---------------------------------------------------------------------------

class TestPostNote:

    @patch("app.services.intercom_service.requests.post")
    def test_request_shape(self, mock_post, make_settings):
        mock_post.return_value = _ok_response()
        service = IntercomService(make_settings(intercom_api_url="https://api.intercom.io", intercom_timeout=7.0))

        result = service.post_note("42", "📝 Translation (fr → en):\nHello")

        assert result == {"type": "conversation", "id": "42"}
        args, kwargs = mock_post.call_args
        assert args[0] == "https://api.intercom.io/conversations/42/reply"
        assert kwargs["timeout"] == 7.0
        assert kwargs["headers"]["Authorization"] == "Bearer test-intercom-token"
        assert kwargs["headers"]["Intercom-Version"] == "2.11"
        assert kwargs["headers"]["Content-Type"] == "application/json"

        payload = json.loads(kwargs["data"].decode("utf-8"))
        assert payload == {
            "message_type": "note",
            "type": "admin",
            "admin_id": "123456",
            "body": "📝 Translation (fr → en):\nHello",
        }

    @patch("app.services.intercom_service.requests.post")
    def test_non_ascii_is_sent_unescaped(self, mock_post, make_settings):
        mock_post.return_value = _ok_response()

        IntercomService(make_settings()).post_note("42", "→ Привет")

        assert "→ Привет".encode("utf-8") in mock_post.call_args.kwargs["data"]

    @patch("app.services.intercom_service.requests.post")
    def test_existing_bearer_prefix_is_kept(self, mock_post, make_settings):
        mock_post.return_value = _ok_response()

        IntercomService(make_settings(intercom_token="Bearer abc")).post_note("42", "x")

        assert mock_post.call_args.kwargs["headers"]["Authorization"] == "Bearer abc"

    @patch("app.services.intercom_service.requests.post")
    def test_http_error_returns_none(self, mock_post, make_settings):
        response = MagicMock()
        response.text = '{"errors":[{"code":"unauthorized"}]}'
        response.raise_for_status.side_effect = requests.HTTPError("401 Client Error")
        mock_post.return_value = response

        assert IntercomService(make_settings()).post_note("42", "x") is None

    @patch("app.services.intercom_service.requests.post")
    def test_timeout_returns_none(self, mock_post, make_settings):
        mock_post.side_effect = requests.Timeout()
        assert IntercomService(make_settings()).post_note("42", "x") is None

    @patch("app.services.intercom_service.requests.post")
    def test_connection_error_returns_none(self, mock_post, make_settings):
        mock_post.side_effect = requests.ConnectionError("refused")
        assert IntercomService(make_settings()).post_note("42", "x") is None

    @patch("app.services.intercom_service.requests.post")
    def test_non_json_success_is_still_success(self, mock_post, make_settings):
        response = _ok_response()
        response.json.side_effect = ValueError("no json")
        mock_post.return_value = response

        assert IntercomService(make_settings()).post_note("42", "x") == {}


# ---------------------------------------------------------------------------
# NotePublisher
# ---------------------------------------------------------------------------

class TestNotePublisher:

    def test_format_note(self):
        assert format_note(RESULT) == "📝 Translation (fr → en):\nHello, I have a problem with my order"

    def test_format_note_keeps_translation_verbatim(self):
        result = TranslationResult(text="  line one\nline <two>  ", source_lang="de", target_lang="en")
        assert format_note(result).endswith("\n  line one\nline <two>  ")

    def test_publish_success(self):
        intercom = MagicMock()
        intercom.post_note.return_value = {"id": "42"}

        assert NotePublisher(intercom).publish("42", RESULT) is True
        intercom.post_note.assert_called_once_with("42", format_note(RESULT))

    def test_publish_failure_returns_false(self):
        intercom = MagicMock()
        intercom.post_note.return_value = None

        assert NotePublisher(intercom).publish("42", RESULT) is False

    def test_publish_unexpected_exception_returns_false(self):
        intercom = MagicMock()
        intercom.post_note.side_effect = RuntimeError("boom")

        assert NotePublisher(intercom).publish("42", RESULT) is False
