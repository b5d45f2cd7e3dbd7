"""Plain-text (+ optional HTML) email via the Resend HTTP API."""
import logging
from typing import Any, Dict, Optional

import requests

from config import settings

logger = logging.getLogger(__name__)

RESEND_API_URL = "https://api.resend.com/emails"


class EmailSendError(RuntimeError):
    pass


def send_email(
    to_email: str,
    subject: str,
    text_body: str,
    html_body: Optional[str] = None,
    api_key: Optional[str] = None,
    from_email: Optional[str] = None,
) -> Optional[Dict[str, Any]]:
    """Send one email. Returns the Resend response, or None if no API key is set.

    Transport and API errors raise EmailSendError.
    """
    api_key = api_key if api_key is not None else settings.RESEND_API_KEY
    if not api_key:
        logger.warning("RESEND_API_KEY not set; skipping email send.")
        return None

    to_email = (to_email or "").strip()
    if not to_email:
        raise EmailSendError("to_email is empty")

    data = {
        "from": from_email or settings.ALERT_FROM_EMAIL,
        "to": [to_email],
        "subject": subject,
        "text": text_body,
    }
    if html_body:
        data["html"] = html_body

    headers = {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
    }

    logger.info(f"Sending email to {to_email}...")
    try:
        resp = requests.post(RESEND_API_URL, json=data, headers=headers, timeout=10)
        resp.raise_for_status()
    except requests.RequestException as e:
        body = ""
        if getattr(e, "response", None) is not None:
            body = (e.response.text or "")[:500]
        logger.error(f"Failed to send email: {e} {body}".rstrip())
        raise EmailSendError(f"Resend request failed: {e}") from e

    logger.info("Email sent successfully.")
    try:
        return resp.json()
    except ValueError:
        return {}
