"""confluence_mcp package exports."""

from .core import (
    ConfigResult,
    ConfluenceApiError,
    ConfluenceClient,
    ConfluenceClientError,
    ConfluenceConfig,
    ConfluenceConfigurationError,
    ConfluenceParseError,
    ConfluenceRequestFailedError,
    ConfluenceTransport,
    CurrentUser,
    Page,
    PageDetail,
    RetryConfig,
    load_config,
    register_discovered_tools,
)

__version__ = "0.1.0"

__all__ = [
    "ConfluenceClient",
    "ConfluenceTransport",
    "RetryConfig",
    "ConfluenceConfig",
    "ConfigResult",
    "load_config",
    "Page",
    "PageDetail",
    "CurrentUser",
    "ConfluenceClientError",
    "ConfluenceApiError",
    "ConfluenceRequestFailedError",
    "ConfluenceParseError",
    "ConfluenceConfigurationError",
    "register_discovered_tools",
]
