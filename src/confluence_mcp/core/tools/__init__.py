"""
Tool namespace for confluence-mcp.

Every public coroutine here whose first parameter is ``client`` is discovered
and registered by :mod:`confluence_mcp.core.registry`.
"""

from .pages import create_page, get_page, update_page
from .search import execute_raw_search, search_pages
from .users import get_current_user

__all__ = [
    "get_current_user",
    "search_pages",
    "execute_raw_search",
    "get_page",
    "create_page",
    "update_page",
]
