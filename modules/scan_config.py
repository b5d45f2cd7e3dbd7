"""Immutable run configuration for the dev URL scan."""
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from config import settings
from modules.snippets import strip_wildcards


@dataclass(frozen=True)
class TableSpec:
    table: str
    columns: Tuple[str, ...]


@dataclass(frozen=True)
class ScanConfig:
    patterns: Tuple[str, ...]
    tables: Tuple[TableSpec, ...]
    row_limit: int = 30
    url_limit: int = 5
    snippet_len: int = 160
    # Host fragments an extracted URL must contain; defaults to the stripped patterns
    url_markers: Tuple[str, ...] = field(default=())
    skip_failed_tables: bool = False

    def __post_init__(self):
        if not self.url_markers:
            markers = tuple(m for m in (strip_wildcards(p) for p in self.patterns) if m)
            object.__setattr__(self, "url_markers", markers)


def table_specs(tables_and_columns: Dict[str, List[str]]) -> Tuple[TableSpec, ...]:
    return tuple(TableSpec(table, tuple(columns)) for table, columns in tables_and_columns.items())


def load_scan_config(
    tables_and_columns: Optional[Dict[str, List[str]]] = None,
    skip_failed_tables: bool = False,
) -> ScanConfig:
    """Build a ScanConfig from config.settings (env / local JSON overrides)."""
    return ScanConfig(
        patterns=tuple(settings.DEV_URL_PATTERNS),
        tables=table_specs(tables_and_columns or settings.DEV_URL_TABLES_AND_COLUMNS),
        row_limit=settings.DEV_URL_ROW_LIMIT,
        url_limit=settings.DEV_URL_URLS_PER_ROW,
        snippet_len=settings.DEV_URL_SNIPPET_LEN,
        skip_failed_tables=skip_failed_tables,
    )
