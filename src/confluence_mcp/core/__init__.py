"""Core domain surface for confluence-mcp (transport-agnostic)."""

from .client import ConfluenceClient
from .config import ConfigResult, ConfluenceConfig, load_config
from .cql import build_page_search_cql, clamp_limit, escape_cql_literal
from .errors import (
    ConfluenceApiError,
    ConfluenceClientError,
    ConfluenceConfigurationError,
    ConfluenceParseError,
    ConfluenceRequestFailedError,
    sanitize,
)
from .links import SiteUrls
from .models import CurrentUser, Page, PageDetail
from .registry import (
    discover_tool_modules,
    iter_tool_functions,
    register_discovered_tools,
)
from .results import ToolResult
from .transport import ConfluenceTransport, RetryConfig

__all__ = [
    # Client / transport
    "ConfluenceClient",
    "ConfluenceTransport",
    "RetryConfig",
    "SiteUrls",
    # Config
    "ConfluenceConfig",
    "ConfigResult",
    "load_config",
    # Models
    "Page",
    "PageDetail",
    "CurrentUser",
    # CQL
    "build_page_search_cql",
    "clamp_limit",
    "escape_cql_literal",
    # Exceptions
    "ConfluenceClientError",
    "ConfluenceApiError",
    "ConfluenceRequestFailedError",
    "ConfluenceParseError",
    "ConfluenceConfigurationError",
    "sanitize",
    # Registry
    "ToolResult",
    "discover_tool_modules",
    "iter_tool_functions",
    "register_discovered_tools",
]
