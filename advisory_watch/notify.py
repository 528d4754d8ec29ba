"""Send advisory notifications to a Google Chat webhook."""

import logging
from datetime import timezone, tzinfo
from typing import Any, Dict, List, Optional, Sequence

import requests
from dateutil import parser as date_parser
from dateutil import tz

from .errors import NotifyError, TransportError
from .models import Advisory

logger = logging.getLogger(__name__)

SEVERITY_MARKERS = {
    "critical": "🔴",
    "high": "🟠",
    "medium": "🟡",
    "low": "🟢",
}
DEFAULT_MARKER = "⚠️"
PUBLISHED_FORMAT = "%Y-%m-%d %H:%M:%S %Z"


def severity_marker(severity: Optional[str]) -> str:
    """Map a severity to its marker; anything unrecognised gets the default."""
    return SEVERITY_MARKERS.get((severity or "").lower(), DEFAULT_MARKER)


def format_published(published_at: Optional[str], zone: Optional[tzinfo] = None) -> str:
    """Render an ISO-8601 timestamp in ``zone`` (local time when omitted)."""
    if not published_at:
        return "unknown"
    try:
        parsed = date_parser.isoparse(published_at)
    except (ValueError, TypeError) as e:
        logger.warning(f"Failed to parse date '{published_at}': {e}")
        return published_at
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(zone or tz.tzlocal()).strftime(PUBLISHED_FORMAT)


def build_card(advisory: Advisory, zone: Optional[tzinfo] = None) -> Dict[str, Any]:
    severity = (advisory.severity or "unknown").upper()
    return {
        "header": {
            "title": f"{severity_marker(advisory.severity)} {advisory.summary or ''}",
            "subtitle": f"Severity: {severity}",
        },
        "sections": [
            {
                "widgets": [
                    {
                        "textParagraph": {
                            "text": (
                                f"<b>GHSA ID:</b> {advisory.ghsa_id}<br>"
                                f"<b>Published:</b> {format_published(advisory.published_at, zone)}"
                            )
                        }
                    },
                    {
                        "buttons": [
                            {
                                "textButton": {
                                    "text": "View details",
                                    "onClick": {"openLink": {"url": advisory.html_url or ""}},
                                }
                            }
                        ]
                    },
                ]
            }
        ],
    }


def build_message(
    advisories: Sequence[Advisory],
    repo: str,
    zone: Optional[tzinfo] = None,
) -> Dict[str, Any]:
    """Batch every advisory into a single Google Chat card message."""
    count = len(advisories)
    noun = "advisory" if count == 1 else "advisories"
    return {
        "text": f"🚨 {count} new security {noun} found for {repo}!",
        "cards": [build_card(adv, zone) for adv in advisories],
    }


def send_google_chat(
    advisories: List[Advisory],
    webhook_url: Optional[str],
    repo: str,
    zone: Optional[tzinfo] = None,
    timeout: float = 30,
) -> bool:
    """
    Post new advisories to Google Chat in one request.

    Args:
        advisories: Advisories to announce
        webhook_url: Incoming webhook URL; notification is skipped when empty
        repo: Repository name used in the summary line
        zone: Timezone for publish times
        timeout: Seconds to wait for the webhook

    Returns:
        True if the message was sent, False if no webhook is configured

    Raises:
        TransportError: The request never got a response
        NotifyError: The webhook answered with a status other than 200
    """
    if not webhook_url:
        logger.warning("GOOGLE_CHAT_WEBHOOK is not set, skipping notification")
        return False

    message = build_message(advisories, repo, zone)
    headers = {"Content-Type": "application/json; charset=UTF-8"}

    try:
        response = requests.post(webhook_url, headers=headers, json=message, timeout=timeout)
    except requests.exceptions.RequestException as e:
        logger.error(f"Google Chat request error: {e}")
        raise TransportError(f"Webhook request failed: {e}") from e

    if response.status_code != 200:
        logger.error(f"Google Chat rejected notification: {response.status_code}")
        raise NotifyError(response.status_code, response.text)

    logger.info(f"Sent Google Chat notification for {len(advisories)} advisories")
    return True
