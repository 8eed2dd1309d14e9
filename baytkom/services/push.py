# baytkom/services/push.py
import json
import logging
from typing import Optional

from pywebpush import webpush, WebPushException

from baytkom.core.config import settings

log = logging.getLogger(__name__)

PUSH_SENT = "sent"
PUSH_FAILED = "failed"
PUSH_GONE = "gone"  # the push service no longer knows this subscription

DEFAULT_ICON = "/icon-192.png"


def push_enabled() -> bool:
    return bool(settings.vapid_public_key and settings.vapid_private_key)


def build_payload(
    title: str,
    body: Optional[str] = None,
    url: Optional[str] = None,
    tag: Optional[str] = None,
    badge_count: int = 0,
) -> dict:
    return {
        "title": title,
        "body": body or "",
        "icon": DEFAULT_ICON,
        "data": {"url": url or "/"},
        "tag": tag or "default",
        "badgeCount": badge_count,
    }


def send_push(endpoint: str, p256dh: str, auth: str, payload: dict) -> str:
    """
    Fire-and-forget Web Push. Never raises.
    """
    if not push_enabled():
        return PUSH_FAILED
    try:
        webpush(
            subscription_info={"endpoint": endpoint, "keys": {"p256dh": p256dh, "auth": auth}},
            data=json.dumps(payload, ensure_ascii=False),
            vapid_private_key=settings.vapid_private_key,
            vapid_claims={"sub": settings.vapid_subject},
            ttl=60 * 60 * 24,
        )
        return PUSH_SENT
    except WebPushException as e:
        status = getattr(e.response, "status_code", None)
        if status in (404, 410):
            log.info("push subscription gone (%s): %s", status, endpoint[:60])
            return PUSH_GONE
        log.warning("push failed (%s): %s", status, e)
        return PUSH_FAILED
    except Exception as e:
        log.warning("push failed: %s", e)
        return PUSH_FAILED
