from typing import Iterable, Optional

from config.settings import NON_PRODUCTION_HOST_FRAGMENTS


def is_production(home_url: str, denylist: Optional[Iterable[str]] = None) -> bool:
    """False when the site's home URL contains a staging/dev host fragment.

    Plain case-sensitive substring test, so 'https://mysite.wpengine.com' and
    'https://notwpengine.com.example' both count as non-production.
    """
    fragments = NON_PRODUCTION_HOST_FRAGMENTS if denylist is None else denylist
    home_url = home_url or ""
    return not any(fragment in home_url for fragment in fragments)
