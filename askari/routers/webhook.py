"""
WhatsApp Webhook Router - inbound messages relayed by Twilio.

Twilio POSTs ``Body`` and ``From`` (form-encoded; JSON is accepted too
for local testing) and expects TwiML back. Every request gets exactly one
``<Message>`` in a ``<Response>`` envelope, even when processing fails.

Flow:
=====
    Body ──▶ IntentService.process ──▶ sanitize ──▶ MessagingResponse
"""

import logging
import re

from fastapi import APIRouter, Depends, Request, Response
from twilio.twiml.messaging_response import MessagingResponse

from askari.deps import get_intent_service
from askari.services.intent_service import IntentService


logger = logging.getLogger("askari.routers.webhook")

router = APIRouter(tags=["webhook"])

FALLBACK_REPLY = "Sorry, I encountered an error. Please try again."

# Characters outside the XML 1.0 Char production
XML_INVALID_CHARS = re.compile(
    "[^\u0009\u000A\u000D\u0020-\uD7FF\uE000-\uFFFD\U00010000-\U0010FFFF]"
)


def sanitize_for_xml(text: str) -> str:
    """Drop characters that cannot appear in an XML document.

    Markup characters (``<``, ``&``...) are left alone; TwiML escapes them.
    """
    return XML_INVALID_CHARS.sub("", text)


def build_twiml(message: str) -> str:
    twiml = MessagingResponse()
    twiml.message(sanitize_for_xml(message))
    return str(twiml)


async def read_inbound(request: Request) -> dict:
    """Body/From from a form-encoded or JSON request."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        payload = await request.json()
        return payload if isinstance(payload, dict) else {}
    form = await request.form()
    return dict(form)


@router.post("/webhook")
async def whatsapp_webhook(
    request: Request,
    service: IntentService = Depends(get_intent_service),
):
    """
    Reply to one inbound WhatsApp message with TwiML.

    Always answers 200 with ``text/xml``; failures produce the generic
    fallback reply.
    """
    try:
        inbound = await read_inbound(request)
        body = str(inbound.get("Body") or "").strip()
        sender = inbound.get("From") or "unknown"
        logger.info(f"Message from {sender}: {body[:100]!r}")

        result = await service.process(body)
        reply = result.message
        logger.info(f"Replying to {sender} ({result.intent_type.value}, {result.processing_time_ms:.0f}ms)")

    except Exception as e:
        logger.error(f"Webhook error: {e}", exc_info=True)
        reply = FALLBACK_REPLY

    return Response(content=build_twiml(reply), media_type="text/xml")
