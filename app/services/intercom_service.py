import json
import logging

import requests

logger = logging.getLogger(__name__)


class IntercomService:
    """
    Intercom REST client. Only what the translator needs: posting admin notes.
    """

    def __init__(self, settings):
        self.base_url = settings.intercom_api_url
        self.admin_id = settings.intercom_admin_id
        self.timeout = settings.intercom_timeout
        self._auth_header = settings.auth_header
        self._api_version = settings.intercom_api_version

    def _headers(self) -> dict:
        return {
            'Authorization': self._auth_header,
            'Intercom-Version': self._api_version,
            'Content-Type': 'application/json',
            'Accept': 'application/json'
        }

    def post_note(self, conversation_id: str, body: str) -> dict | None:
        """
        Add an internal note to a conversation (only visible to teammates).

        Returns:
            dict with the updated conversation, or None on any failure
        """
        url = f"{self.base_url}/conversations/{conversation_id}/reply"

        payload = {
            "message_type": "note",
            "type": "admin",
            "admin_id": self.admin_id,
            "body": body,
        }

        response = None
        try:
            logger.info("Posting note to conversation %s...", conversation_id)
            # ensure_ascii=False keeps non-Latin text readable in the request body
            response = requests.post(
                url,
                headers=self._headers(),
                data=json.dumps(payload, ensure_ascii=False).encode('utf-8'),
                timeout=self.timeout,
            )
            response.raise_for_status()
            logger.info("Note added to conversation %s", conversation_id)
            return response.json()
        except requests.Timeout:
            logger.error("Timed out posting note to conversation %s", conversation_id)
            return None
        except requests.RequestException as e:
            logger.error("Error posting note to Intercom: %s", e)
            if response is not None:
                logger.error("Detail: %s", response.text[:500])
            return None
        except ValueError:
            # 2xx with a non-JSON body: the note was still accepted
            logger.warning("Intercom returned a non-JSON body for conversation %s", conversation_id)
            return {}
