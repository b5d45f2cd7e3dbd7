"""Scan WordPress tables for dev-host URL references.

For every configured (table, column):
  - skip the table if it does not exist (plugin tables such as
    redirection_items are optional),
  - COUNT rows whose column LIKEs any pattern,
  - fetch up to row_limit of them and describe each with its dev URLs,
    a context snippet and a table-specific identifier.

The grand total is the sum of the COUNTs, not of the fetched rows.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Tuple

from modules.row_formatter import RowKind, resolve_row_kind
from modules.scan_config import ScanConfig
from modules.snippets import snippet_from_patterns, snippet_from_url
from modules.url_extract import dedupe_urls, extract_urls

logger = logging.getLogger(__name__)

NO_URLS_PLACEHOLDER = "(not parsed; see snippet)"


@dataclass
class RowEntry:
    identifier: str
    urls: List[str]
    snippet: str

    def format(self) -> str:
        urls = ", ".join(self.urls) if self.urls else NO_URLS_PLACEHOLDER
        return f"- {self.identifier}\n  URLs: {urls}\n  Snippet: {self.snippet}"


@dataclass
class ReportSection:
    table: str
    column: str
    total: int
    row_limit: int
    rows: List[RowEntry] = field(default_factory=list)

    def header_lines(self) -> List[str]:
        return [
            f"{self.table}.{self.column}",
            f"Total matches: {self.total} (showing up to {self.row_limit})",
        ]

    def format(self) -> str:
        return "\n".join(self.header_lines() + [row.format() for row in self.rows])


@dataclass
class ScanReport:
    sections: List[ReportSection] = field(default_factory=list)
    total: int = 0
    errors: List[str] = field(default_factory=list)

    def __bool__(self) -> bool:
        return bool(self.sections)


def build_where(column: str, patterns: Tuple[str, ...]) -> Tuple[str, Dict[str, Any]]:
    """`(col LIKE %(p0)s OR col LIKE %(p1)s ...)` plus its bound params."""
    clauses = []
    params: Dict[str, Any] = {}
    for i, pattern in enumerate(patterns):
        key = f"p{i}"
        clauses.append(f"{column} LIKE %({key})s")
        params[key] = pattern
    return "(" + " OR ".join(clauses) + ")", params


def build_row_entry(row: Mapping[str, Any], column: str, kind: RowKind, config: ScanConfig) -> RowEntry:
    value = row.get(column)
    text = value if isinstance(value, str) else ("" if value is None else str(value))

    urls = dedupe_urls(extract_urls(text, config.url_markers), config.url_limit)
    if urls:
        snippet = snippet_from_url(text, urls[0], config.snippet_len)
    else:
        snippet = snippet_from_patterns(text, config.patterns, config.snippet_len)

    return RowEntry(identifier=kind.identify(row), urls=urls, snippet=snippet)


def scan_column(db, table: str, column: str, kind: RowKind, config: ScanConfig):
    """Return a ReportSection for one column, or None when nothing matches."""
    where, params = build_where(column, config.patterns)

    total = db.count(f"SELECT count(*) FROM {table} WHERE {where}", params)
    if not total:
        return None

    fields = ", ".join(kind.select_fields(column))
    rows = db.query(
        f"SELECT {fields} FROM {table} WHERE {where} LIMIT {int(config.row_limit)}", params
    )

    section = ReportSection(table=table, column=column, total=int(total), row_limit=config.row_limit)
    for row in rows:
        section.rows.append(build_row_entry(row, column, kind, config))
    logger.info(f"{table}.{column}: {total} matches ({len(section.rows)} detailed)")
    return section


def scan_table(
    db, table: str, columns: Tuple[str, ...], config: ScanConfig, errors: List[str]
) -> List[ReportSection]:
    if not db.table_exists(table):
        logger.debug(f"Table {table} does not exist. Skipping.")
        return []

    kind = resolve_row_kind(table)
    sections = []
    for column in columns:
        try:
            section = scan_column(db, table, column, kind, config)
        except Exception as e:
            if not config.skip_failed_tables:
                raise
            logger.exception(f"Scan failed for {table}.{column}")
            errors.append(f"{table}.{column}: {e}")
            continue
        if section is not None:
            sections.append(section)
    return sections


def scan_tables(db, config: ScanConfig) -> ScanReport:
    """Run the scan over every configured table, in configuration order.

    `db` provides table_exists(name), count(sql, params) and query(sql, params).
    Query errors propagate unless config.skip_failed_tables is set, in which
    case the failing table (or column) is logged, recorded in report.errors
    and skipped; sections already built for that table are kept.
    """
    report = ScanReport()
    for table_spec in config.tables:
        try:
            sections = scan_table(db, table_spec.table, table_spec.columns, config, report.errors)
        except Exception as e:
            if not config.skip_failed_tables:
                raise
            logger.exception(f"Scan failed for {table_spec.table}")
            report.errors.append(f"{table_spec.table}: {e}")
            continue

        for section in sections:
            report.sections.append(section)
            report.total += section.total
    return report
