from __future__ import annotations

from typing import Annotated, Optional

from pydantic import Field

from confluence_mcp.core.client import DEFAULT_PAGE_EXPAND, ConfluenceClient
from confluence_mcp.core.models import Page, PageDetail

PageId = Annotated[str, Field(min_length=1, description="Confluence page ID")]
StorageBody = Annotated[
    str, Field(description="Page body in Confluence storage format (XHTML)")
]


async def get_page(
    client: ConfluenceClient,
    pageId: PageId,  # noqa: N803
    expand: Annotated[
        Optional[str],
        Field(description=f"Comma-separated expand fields (default: {DEFAULT_PAGE_EXPAND})"),
    ] = None,
) -> PageDetail:
    """
    Get a Confluence page by ID.
    Returns id, title, spaceKey, url, version and bodyStorageValue (storage XHTML).
    """
    return await client.get_page(pageId, expand)


async def create_page(
    client: ConfluenceClient,
    title: Annotated[str, Field(min_length=1, description="Title of the new page")],
    bodyStorageValue: StorageBody,  # noqa: N803
    spaceKey: Annotated[  # noqa: N803
        Optional[str],
        Field(description="Space key (uses CONF_DEFAULT_SPACE if omitted)"),
    ] = None,
    parentId: Annotated[  # noqa: N803
        Optional[str], Field(description="ID of the parent page, if any")
    ] = None,
) -> Page:
    """Create a new Confluence page. Returns id, title, spaceKey, url, version."""
    return await client.create_page(
        title=title,
        body_storage_value=bodyStorageValue,
        space_key=spaceKey,
        parent_id=parentId,
    )


async def update_page(
    client: ConfluenceClient,
    pageId: PageId,  # noqa: N803
    bodyStorageValue: StorageBody,  # noqa: N803
    title: Annotated[
        Optional[str], Field(description="New page title (keeps current title if omitted)")
    ] = None,
    minorEdit: Annotated[  # noqa: N803
        bool,
        Field(description="Whether this is a minor edit (default true, suppresses notifications)"),
    ] = True,
    message: Annotated[
        Optional[str], Field(description="Version message / change comment")
    ] = None,
) -> Page:
    """
    Update a Confluence page's content.
    The version number is incremented automatically from the current page.
    """
    return await client.update_page(
        page_id=pageId,
        body_storage_value=bodyStorageValue,
        title=title,
        minor_edit=minorEdit,
        message=message,
    )
