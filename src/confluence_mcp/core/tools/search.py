from __future__ import annotations

from typing import Annotated, List, Optional

from pydantic import Field

from confluence_mcp.core.client import DEFAULT_SEARCH_EXPAND, ConfluenceClient
from confluence_mcp.core.models import Page


async def search_pages(
    client: ConfluenceClient,
    query: Annotated[str, Field(description="Search keywords")] = "",
    spaceKey: Annotated[  # noqa: N803
        Optional[str],
        Field(description="Space key (uses CONF_DEFAULT_SPACE if omitted)"),
    ] = None,
    limit: Annotated[
        int, Field(ge=1, le=25, description="Max results to return (default 10, max 25)")
    ] = 10,
) -> List[Page]:
    """
    Search Confluence pages by keyword in title or text.
    Returns id, type, title, spaceKey, url and version for each result.
    """
    return await client.search_pages(query, spaceKey, limit)


async def execute_raw_search(
    client: ConfluenceClient,
    query: Annotated[
        str,
        Field(
            min_length=1,
            description='Raw CQL expression, sent as-is (e.g. type=page AND label="howto")',
        ),
    ],
    limit: Annotated[
        int, Field(ge=1, le=50, description="Max results to return (default 10, max 50)")
    ] = 10,
    expand: Annotated[
        Optional[str],
        Field(description=f"Comma-separated expand fields (default: {DEFAULT_SEARCH_EXPAND})"),
    ] = None,
) -> List[Page]:
    """
    Run a raw CQL search. The caller is responsible for quoting and escaping
    literals in the expression.
    """
    return await client.execute_cql_search(
        query, limit=limit, expand=expand or DEFAULT_SEARCH_EXPAND
    )
