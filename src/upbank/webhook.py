"""
Helpers for receiving Up Bank webhook deliveries.

Up signs every delivery with HMAC-SHA256 over the raw request body, keyed by
the secret returned when the webhook was registered, and sends the hex digest
in the ``X-Up-Authenticity-Signature`` header.
"""

from __future__ import annotations

import hashlib
import hmac
import json
import logging
from dataclasses import dataclass
from http import HTTPStatus
from typing import Mapping, Optional, Union

from requests.structures import CaseInsensitiveDict

from .core.models import WebhookEventType

__all__ = [
    "SIGNATURE_HEADER",
    "WebhookReply",
    "compute_signature",
    "handle_webhook_request",
    "verify_signature",
]

SIGNATURE_HEADER = "X-Up-Authenticity-Signature"

Body = Union[bytes, str]


def _as_bytes(value: Body) -> bytes:
    return value.encode("utf-8") if isinstance(value, str) else value


def compute_signature(body: Body, secret_key: str) -> str:
    return hmac.new(secret_key.encode("utf-8"), _as_bytes(body), hashlib.sha256).hexdigest()


def verify_signature(body: Body, signature: str, secret_key: str) -> bool:
    expected = compute_signature(body, secret_key)
    return hmac.compare_digest(
        expected.encode("ascii"), signature.strip().lower().encode("utf-8")
    )


@dataclass(frozen=True)
class WebhookReply:
    status: int
    body: str = ""


def _event_type(body: Body) -> Optional[str]:
    try:
        payload = json.loads(_as_bytes(body))
        return payload["data"]["attributes"]["eventType"]
    except (ValueError, KeyError, TypeError):
        return None


def handle_webhook_request(
    method: str,
    headers: Mapping[str, str],
    body: Body,
    secret_key: Optional[str],
) -> WebhookReply:
    """
    Authenticate a webhook delivery and acknowledge ``PING`` events.

    ``GET`` is answered with 200 so the endpoint can be probed; anything other
    than ``POST`` is rejected.
    """
    method = method.upper()
    if method == "GET":
        return WebhookReply(HTTPStatus.OK)
    if method != "POST":
        logging.warning("Received webhook request with method %s", method)
        return WebhookReply(HTTPStatus.BAD_REQUEST, "POST only")

    signature = CaseInsensitiveDict(headers).get(SIGNATURE_HEADER)
    if signature is None:
        logging.warning("No '%s' header in webhook request", SIGNATURE_HEADER)
        return WebhookReply(HTTPStatus.BAD_REQUEST, "missing signature")

    if not secret_key or not secret_key.strip():
        logging.error("Webhook secret key is empty or not configured")
        return WebhookReply(HTTPStatus.INTERNAL_SERVER_ERROR, "receiver misconfigured")

    if not verify_signature(body, signature, secret_key):
        logging.warning("Authenticity check of webhook request failed")
        return WebhookReply(HTTPStatus.BAD_REQUEST, "invalid signature")

    event_type = _event_type(body)
    if event_type is None:
        logging.warning("Webhook request body is not a webhook event")
        return WebhookReply(HTTPStatus.BAD_REQUEST, "malformed event")

    if event_type == WebhookEventType.PING.value:
        logging.info("Received PING event")
        return WebhookReply(HTTPStatus.OK, "pong")

    logging.warning("Unhandled webhook event: %s", event_type)
    return WebhookReply(HTTPStatus.INTERNAL_SERVER_ERROR, f"unhandled event {event_type}")
