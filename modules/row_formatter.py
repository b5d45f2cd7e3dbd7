"""Per-table row identity: which extra fields to fetch and how to label a row.

Each known WordPress table shape is a RowKind. A table resolves to exactly one
kind by name suffix (so 'wp_posts' and 'wp_2_posts' both hit POSTS); anything
unknown falls back to DEFAULT_KIND. Add new shapes to ROW_KINDS.
"""
from dataclasses import dataclass
from typing import Any, Callable, List, Mapping, Tuple

from modules.snippets import trim_text

TITLE_MAX_LEN = 80


def _field(row: Mapping[str, Any], name: str) -> str:
    value = row.get(name)
    if value is None:
        return ""
    return str(value)


def _post_identifier(row: Mapping[str, Any]) -> str:
    title = trim_text(_field(row, "post_title"), TITLE_MAX_LEN) or "(no title)"
    return (
        f"Post ID {_field(row, 'ID')} "
        f"[type={_field(row, 'post_type')}, status={_field(row, 'post_status')}, title=\"{title}\"]"
    )


def _postmeta_identifier(row: Mapping[str, Any]) -> str:
    return (
        f"Meta ID {_field(row, 'meta_id')} "
        f"[post_id={_field(row, 'post_id')}, meta_key=\"{_field(row, 'meta_key')}\"]"
    )


def _redirection_identifier(row: Mapping[str, Any]) -> str:
    return (
        f"Redirection ID {_field(row, 'id')} "
        f"[action_type={_field(row, 'action_type')}, action_code={_field(row, 'action_code')}]"
    )


@dataclass(frozen=True)
class RowKind:
    name: str
    table_suffix: str
    fields: Tuple[str, ...]
    identify: Callable[[Mapping[str, Any]], str]

    def select_fields(self, column: str) -> List[str]:
        fields = [column]
        for name in self.fields:
            if name not in fields:
                fields.append(name)
        return fields


POSTS = RowKind("posts", "posts", ("ID", "post_title", "post_type", "post_status"), _post_identifier)
POSTMETA = RowKind("postmeta", "postmeta", ("meta_id", "post_id", "meta_key"), _postmeta_identifier)
REDIRECTION = RowKind(
    "redirection", "redirection_items", ("id", "action_type", "action_code"), _redirection_identifier
)
DEFAULT_KIND = RowKind("default", "", (), lambda row: "Match")

ROW_KINDS: List[RowKind] = [POSTS, POSTMETA, REDIRECTION]


def resolve_row_kind(table: str) -> RowKind:
    bare = table.rsplit(".", 1)[-1]
    for kind in ROW_KINDS:
        if bare.endswith(kind.table_suffix):
            return kind
    return DEFAULT_KIND


def select_fields(table: str, column: str) -> List[str]:
    return resolve_row_kind(table).select_fields(column)


def format_identifier(table: str, row: Mapping[str, Any]) -> str:
    return resolve_row_kind(table).identify(row)
