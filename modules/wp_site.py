"""Site identity: home URL, admin contact and the report date.

Env settings win; otherwise values are read from the WordPress options table,
the same place home_url() / get_option('admin_email') read them from.
"""
import logging
from datetime import datetime, timezone
from typing import Optional

from config import settings

logger = logging.getLogger(__name__)


def get_option(db, name: str, default: str = "", prefix: Optional[str] = None) -> str:
    table = f"{settings.WP_TABLE_PREFIX if prefix is None else prefix}options"
    rows = db.query(
        f"SELECT option_value FROM {table} WHERE option_name = %(name)s LIMIT 1",
        {"name": name},
    )
    if not rows or rows[0].get("option_value") in (None, ""):
        return default
    return str(rows[0]["option_value"])


def home_url(db) -> str:
    if settings.SITE_HOME_URL:
        return settings.SITE_HOME_URL
    url = get_option(db, "home")
    if not url:
        logger.warning("No home URL in env or options table")
    return url


def admin_email(db) -> str:
    if settings.ALERT_EMAIL:
        return settings.ALERT_EMAIL
    return get_option(db, "admin_email")


def current_date() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%d")
