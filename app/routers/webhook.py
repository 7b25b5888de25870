"""
Webhook Router: thin HTTP layer
=================================
Intercom webhook endpoint. Acknowledges immediately and hands the event to
WebhookDispatcher as a background task.
"""

import json
import logging

from fastapi import APIRouter, BackgroundTasks, Request
from fastapi.responses import JSONResponse

from app.dependencies import dispatcher, settings
from app.services.payload_service import extract_webhook_data

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/webhook")
@router.post("/intercom-webhook")
async def receive_webhook(request: Request, background_tasks: BackgroundTasks):
    """
    Intercom webhook (conversation.user.created / conversation.user.replied).
    Always 200 once the event is accepted; translation happens after the response.
    """
    try:
        raw_body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError, ValueError):
        logger.warning("Webhook with malformed JSON body - ignoring")
        return {"status": "ignored", "reason": "invalid json"}

    try:
        if settings.debug:
            logger.debug("Incoming webhook: %s", json.dumps(raw_body, ensure_ascii=False)[:4000])

        event = extract_webhook_data(raw_body)
        background_tasks.add_task(dispatcher.handle, event)
    except Exception:
        logger.exception("Error accepting webhook")
        return JSONResponse(status_code=500, content={"status": "error"})

    return {"status": "accepted"}


@router.get("/webhook")
@router.get("/intercom-webhook")
def verify_webhook():
    """Liveness / verification probe."""
    return {"status": "ok"}
