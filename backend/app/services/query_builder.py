# app/services/query_builder.py
"""
Assembles the parameterized SELECT behind the search endpoints.

Only identifiers that already passed ``AllowList.validate`` are interpolated
into the SQL text (placeholders cannot stand in for table or column names).
Every value, including the LIKE patterns and the limit, is bound as a
positional ``$n`` argument.
"""

from typing import Any, List, Sequence

from app.models.search import SearchQuery
from app.services.allow_list import AllowListEntry


class _Args:
    """Collects bound values and hands out their $n placeholders."""

    def __init__(self) -> None:
        self.values: List[Any] = []

    def bind(self, value: Any) -> str:
        self.values.append(value)
        return f"${len(self.values)}"


# user text is matched literally; backslash is the LIKE escape character
ESCAPE_CLAUSE = "ESCAPE '\\'"


def escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def contains_pattern(text: str) -> str:
    return f"%{escape_like(text)}%"


def build_where(
    search_columns: Sequence[str], terms: Sequence[str], args: _Args, match_all: bool = True
) -> str:
    """One OR-group per term across the search columns; groups joined with AND (or OR)."""
    groups = []
    for term in terms:
        pattern = contains_pattern(term)
        parts = [f"{col} ILIKE {args.bind(pattern)} {ESCAPE_CLAUSE}" for col in search_columns]
        groups.append("(" + " OR ".join(parts) + ")")
    if not groups:
        return "1=1"
    joiner = " AND " if match_all else " OR "
    return joiner.join(groups)


def build_order_by(search_columns: Sequence[str], query_text: str, args: _Args) -> str:
    """
    Rank rows by which search column contains the whole query text.

    The i-th search column gets rank i, no match gets len(search_columns)+1,
    ties break on the first search column ascending.
    """
    exact = contains_pattern(query_text.strip().lower())
    whens = [
        f"WHEN LOWER({col}) LIKE LOWER({args.bind(exact)}) {ESCAPE_CLAUSE} THEN {rank}"
        for rank, col in enumerate(search_columns, start=1)
    ]
    fallback = len(search_columns) + 1
    case = "CASE " + " ".join(whens) + f" ELSE {fallback} END"
    return f"{case}, {search_columns[0]} ASC"


def build_search_query(
    entry: AllowListEntry,
    fields: Sequence[str],
    terms: Sequence[str],
    query_text: str,
    limit: int,
    *,
    fuzzy: bool = False,
) -> SearchQuery:
    """
    Build the statement for one search.

    ``fields`` must already be validated against ``entry``; ``terms`` come
    from ``prepare_search_terms``. With ``fuzzy`` a row only needs to match
    one term instead of all of them.
    """
    args = _Args()
    select_cols = ", ".join(fields)
    where_clause = build_where(entry.search_columns, terms, args, match_all=not fuzzy)
    order_clause = build_order_by(entry.search_columns, query_text, args)
    limit_placeholder = args.bind(limit)

    sql = (
        f"SELECT {select_cols}"
        f" FROM {entry.model}"
        f" WHERE {where_clause}"
        f" ORDER BY {order_clause}"
        f" LIMIT {limit_placeholder}"
    )
    return SearchQuery(sql=sql, args=args.values)
