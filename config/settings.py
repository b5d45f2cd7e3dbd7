"""Central configuration for the dev URL search job.
Override via environment variables where possible, and fall back to a local
JSON secrets file that is never committed to git.
"""
import os
import json
from pathlib import Path
from typing import Optional


def _load_local_secrets() -> dict:
    """Load optional local secrets from config/local_secrets.json (untracked).

    Shape is a simple key/value mapping, typically using the same keys as
    environment variables, e.g.:

        {
          "CLICKHOUSE_PASSWORD": "…",
          "RESEND_API_KEY": "…"
        }
    """
    path = Path(__file__).with_name("local_secrets.json")
    if not path.exists():
        return {}
    try:
        with path.open("r") as f:
            return json.load(f)
    except Exception:
        # Fail closed: if the file is malformed, ignore it rather than crash
        return {}


_LOCAL_SECRETS = _load_local_secrets()


def get_secret(name: str, default: str = "") -> str:
    """Return a secret from env or local_secrets.json.

    Priority:
      1. Environment variable `name`
      2. Entry in config/local_secrets.json using the same key
      3. Provided default
    """
    if name in os.environ:
        return os.environ[name]
    return _LOCAL_SECRETS.get(name, default)


def _env_list(name: str, default: list) -> list:
    raw = os.getenv(name)
    if not raw:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


# WordPress table prefix ($table_prefix in wp-config.php)
WP_TABLE_PREFIX = os.getenv("WP_TABLE_PREFIX", "wp_")

# LIKE operands; '%' markers are stripped for in-memory matching
DEV_URL_PATTERNS = _env_list("DEV_URL_PATTERNS", ["%.wpengine.com%", "%.wpenginepowered.com%"])

# Home URLs containing any of these are staging/dev installs
NON_PRODUCTION_HOST_FRAGMENTS = _env_list(
    "NON_PRODUCTION_HOST_FRAGMENTS", ["wpengine.com", "wpenginepowered.com"]
)

DEV_URL_ROW_LIMIT = int(os.getenv("DEV_URL_ROW_LIMIT", "30"))
DEV_URL_URLS_PER_ROW = int(os.getenv("DEV_URL_URLS_PER_ROW", "5"))
DEV_URL_SNIPPET_LEN = int(os.getenv("DEV_URL_SNIPPET_LEN", "160"))

DEFAULT_TABLES_AND_COLUMNS = {
    f"{WP_TABLE_PREFIX}posts": ["post_excerpt", "post_content", "guid"],
    f"{WP_TABLE_PREFIX}postmeta": ["meta_value"],
    f"{WP_TABLE_PREFIX}options": ["option_value"],
    f"{WP_TABLE_PREFIX}redirection_items": ["action_data"],
}


def _load_tables_and_columns(path: Optional[Path] = None) -> dict:
    """Load table -> columns overrides from config/dev_url_tables.json

    A bare string value names a single column.
    """
    path = path or Path(__file__).with_name("dev_url_tables.json")
    if not path.exists():
        return dict(DEFAULT_TABLES_AND_COLUMNS)
    try:
        with path.open("r") as f:
            data = json.load(f)
            if isinstance(data, dict):
                tables = {}
                for table, cols in data.items():
                    if isinstance(cols, str):
                        cols = [cols]
                    tables[str(table)] = [str(c) for c in cols]
                return tables
            return dict(DEFAULT_TABLES_AND_COLUMNS)
    except Exception:
        return dict(DEFAULT_TABLES_AND_COLUMNS)


DEV_URL_TABLES_AND_COLUMNS = _load_tables_and_columns()

# Site identity. Empty values are resolved from wp_options at run time.
SITE_HOME_URL = os.getenv("SITE_HOME_URL", "")
ALERT_EMAIL = os.getenv("ALERT_EMAIL", "")
ALERT_FROM_EMAIL = os.getenv("ALERT_FROM_EMAIL", "Dev URL Monitors <alerts@resend.dev>")
RESEND_API_KEY = get_secret("RESEND_API_KEY")

# Cron event name used to tag the crontab entry
DEV_URL_SEARCH_EVENT = "daily_dev_url_search_event"

# ClickHouse connection. The WordPress schema is attached as a MySQL-engine
# database, e.g. CREATE DATABASE wordpress ENGINE = MySQL('db:3306', 'wp', ...)
# NOTE: passwords are expected to come from environment variables or
# config/local_secrets.json (never hardcoded in the repo).
CLICKHOUSE_CONFIG = {
    "host": os.getenv("CLICKHOUSE_HOST", "localhost"),
    "port": int(os.getenv("CLICKHOUSE_PORT", "9000")),
    "user": os.getenv("CLICKHOUSE_USER", "default"),
    "password": get_secret("CLICKHOUSE_PASSWORD", ""),
    "secure": os.getenv("CLICKHOUSE_SECURE", "false").lower() == "true",
    "database": os.getenv("CLICKHOUSE_DATABASE", "wordpress"),
}
