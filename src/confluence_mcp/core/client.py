from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from .config import ConfluenceConfig
from .cql import build_page_search_cql, clamp_limit
from .errors import ConfluenceConfigurationError
from .links import SiteUrls
from .models import CurrentUser, Page, PageDetail
from .transport import ConfluenceTransport, RetryConfig, SleepFunc

DEFAULT_SEARCH_EXPAND = "space,version"
DEFAULT_PAGE_EXPAND = "body.storage,version,space"


class ConfluenceClient:
    """
    Content client for the Confluence REST API (Cloud and Server/Data Center).
    - Owns URL construction per deployment mode and CQL building
    - Maps upstream content JSON to Page / PageDetail / CurrentUser
    - Delegates HTTP, retries and error translation to ConfluenceTransport
    """

    def __init__(
        self,
        config: ConfluenceConfig,
        *,
        transport: Optional[ConfluenceTransport] = None,
        retry: Optional[RetryConfig] = None,
        sleep: Optional[SleepFunc] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.config = config
        self.urls = SiteUrls.for_mode(config.base_url, config.mode)
        self.default_space = config.default_space
        self.log = logger or logging.getLogger("confluence_mcp.client")
        self.transport = transport or ConfluenceTransport(
            auth_header=config.auth_header,
            timeout_seconds=config.timeout_seconds,
            retry=retry,
            sleep=sleep,
        )

    @property
    def base_url(self) -> str:
        return self.config.base_url

    async def aclose(self) -> None:
        await self.transport.aclose()

    async def __aenter__(self) -> "ConfluenceClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    def _content_url(self, page_id: Optional[str] = None) -> str:
        if page_id is None:
            return self.urls.api("content")
        return self.urls.api(f"content/{quote(str(page_id), safe='')}")

    # --- Identity ---------------------------------------------------------- #

    async def get_current_user(self) -> CurrentUser:
        payload = await self.transport.get(
            self.urls.api("user/current"), tool="get_current_user"
        )
        return CurrentUser.from_payload(payload)

    # --- Search ------------------------------------------------------------ #

    async def search_pages(
        self, query: str, space_key: Optional[str] = None, limit: int = 10
    ) -> List[Page]:
        cql = build_page_search_cql(query, space_key or self.default_space)
        return await self.execute_cql_search(
            cql, limit=limit, expand=DEFAULT_SEARCH_EXPAND
        )

    async def execute_cql_search(
        self,
        cql: str,
        limit: int = 10,
        expand: Optional[str] = DEFAULT_SEARCH_EXPAND,
    ) -> List[Page]:
        """Run a raw CQL expression. The expression is sent verbatim."""
        params: Dict[str, Any] = {"cql": cql, "limit": clamp_limit(limit)}
        if expand:
            params["expand"] = expand

        payload = await self.transport.get(
            self.urls.api("content/search"), params=params, tool="search"
        )
        results = payload.get("results") or []
        return [
            Page.from_content(item, self.urls)
            for item in results
            if isinstance(item, dict) and item.get("id")
        ]

    # --- Pages ------------------------------------------------------------- #

    async def get_page(self, page_id: str, expand: Optional[str] = None) -> PageDetail:
        payload = await self.transport.get(
            self._content_url(page_id),
            params={"expand": expand or DEFAULT_PAGE_EXPAND},
            tool="get_page",
        )
        return PageDetail.from_content(payload, self.urls)

    async def create_page(
        self,
        *,
        title: str,
        body_storage_value: str,
        space_key: Optional[str] = None,
        parent_id: Optional[str] = None,
    ) -> Page:
        space = space_key or self.default_space
        if not space:
            raise ConfluenceConfigurationError(
                "No space key given and CONF_DEFAULT_SPACE is not set; "
                "pass spaceKey to create a page."
            )

        body: Dict[str, Any] = {
            "type": "page",
            "title": title,
            "space": {"key": space},
            "body": {
                "storage": {
                    "value": body_storage_value,
                    "representation": "storage",
                }
            },
        }
        if parent_id:
            body["ancestors"] = [{"id": str(parent_id)}]

        payload = await self.transport.post(
            self._content_url(), json=body, tool="create_page"
        )
        self.log.info("Created page %s in space %s", payload.get("id"), space)
        return Page.from_content(payload, self.urls)

    async def update_page(
        self,
        *,
        page_id: str,
        body_storage_value: str,
        title: Optional[str] = None,
        minor_edit: bool = True,
        message: Optional[str] = None,
    ) -> Page:
        """
        Replace a page body, bumping the version number.

        Notes:
        - Read-modify-write: the current version is fetched first. A concurrent
          edit in between makes the PUT fail with 409, which is not retried.
        """
        current = await self.get_page(page_id, expand="version,space")
        new_version = (current.version or 0) + 1

        version: Dict[str, Any] = {"number": new_version, "minorEdit": minor_edit}
        if message:
            version["message"] = message

        body: Dict[str, Any] = {
            "id": str(page_id),
            "type": current.type or "page",
            "title": title or current.title,
            "version": version,
            "body": {
                "storage": {
                    "value": body_storage_value,
                    "representation": "storage",
                }
            },
        }

        payload = await self.transport.put(
            self._content_url(page_id), json=body, tool="update_page"
        )
        # an empty 2xx body still means the write went through
        page = Page.from_content(
            {**payload, "id": payload.get("id") or str(page_id)}, self.urls
        )
        if not page.title:
            page = page.model_copy(update={"title": body["title"]})
        if page.version is None:
            page = page.model_copy(update={"version": new_version})
        return page


__all__ = [
    "ConfluenceClient",
    "DEFAULT_SEARCH_EXPAND",
    "DEFAULT_PAGE_EXPAND",
]
