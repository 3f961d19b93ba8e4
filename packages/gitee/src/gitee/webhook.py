"""Webhook event mapping for the Gitee hooks API."""

import logging
from collections.abc import Iterable
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_WEBHOOK_EVENTS = ("push",)

# Event name -> Gitee hook flag
EVENT_FLAGS = {
    "push": "push_events",
    "release": "tag_push_events",
    "pull_request": "merge_requests_events",
    "issues": "issues_events",
}


def build_webhook_payload(
    url: str,
    secret: str | None = None,
    events: Iterable[str] | None = None,
) -> dict[str, Any]:
    """
    Build the request parameters for creating or updating a webhook.

    Args:
        url: Callback URL
        secret: Signing password (enables encryption_type=1)
        events: Event names; unknown names are logged and skipped

    Returns:
        Parameter dict with every known event flag set
    """
    payload: dict[str, Any] = {
        "url": url,
        "encryption_type": 1 if secret else None,
        "password": secret,
    }
    payload.update({flag: False for flag in EVENT_FLAGS.values()})

    for event in DEFAULT_WEBHOOK_EVENTS if events is None else events:
        flag = EVENT_FLAGS.get(event)
        if flag is None:
            logger.error("not supported event: %s", event)
            continue
        payload[flag] = True

    return payload
