from typing import Optional

MIN_LIMIT = 1
MAX_LIMIT = 50


def escape_cql_literal(value: str) -> str:
    """
    Escape a value for use inside a double-quoted CQL string literal.
    Example: escape_cql_literal('say "hi"') -> 'say \\"hi\\"'
    """
    return value.replace("\\", "\\\\").replace('"', '\\"')


def clamp_limit(limit: Optional[int], default: int = 10) -> int:
    if limit is None:
        limit = default
    return max(MIN_LIMIT, min(int(limit), MAX_LIMIT))


def build_page_search_cql(query: str, space_key: Optional[str] = None) -> str:
    """
    Build the CQL used by keyword page search.
    Always restricts to pages; adds an exact space filter and a title-or-text
    match only when the respective inputs are present.
    """
    parts = ["type=page"]
    if space_key:
        parts.append(f'space="{escape_cql_literal(space_key)}"')
    text = (query or "").strip()
    if text:
        literal = escape_cql_literal(text)
        parts.append(f'(title~"{literal}" OR text~"{literal}")')
    return " AND ".join(parts)


__all__ = [
    "MIN_LIMIT",
    "MAX_LIMIT",
    "escape_cql_literal",
    "clamp_limit",
    "build_page_search_cql",
]
