from __future__ import annotations

import re

_BASIC_RE = re.compile(r"Basic\s+[A-Za-z0-9+/=]+", re.IGNORECASE)
_BEARER_RE = re.compile(r"Bearer\s+\S+", re.IGNORECASE)

_FRIENDLY_STATUS = {
    400: "Invalid request parameters",
    401: "Authentication failed - check CONF_USERNAME and CONF_PASSWORD / CONF_TOKEN",
    403: "Permission denied - the authenticated user lacks access to this resource",
    404: "Resource not found - the requested page or space does not exist",
    409: "Version conflict - the page was edited concurrently, retry with the latest version",  # noqa: E501
}


def sanitize(text: str) -> str:
    """Redact Basic/Bearer credentials from text before it is surfaced."""
    if not text:
        return ""
    text = _BASIC_RE.sub("Basic ***", text)
    return _BEARER_RE.sub("Bearer ***", text)


def friendly_status(status: int) -> str:
    return _FRIENDLY_STATUS.get(status, "Confluence API error")


class ConfluenceClientError(Exception):
    """Base error for client failures."""


class ConfluenceApiError(ConfluenceClientError):
    """Upstream answered with a non-2xx status."""

    def __init__(self, *, status: int, status_text: str, body: str = ""):
        self.status = status
        self.status_text = status_text
        self.body = sanitize(body)
        super().__init__(
            f"{friendly_status(status)} (HTTP {status} {status_text}): {self.body}"
        )


class ConfluenceRequestFailedError(ConfluenceClientError):
    """No response was received, even after retries."""


class ConfluenceParseError(ConfluenceClientError):
    pass


class ConfluenceConfigurationError(ConfluenceClientError):
    """A call cannot proceed with the current configuration (e.g. no space key)."""


__all__ = [
    "ConfluenceClientError",
    "ConfluenceApiError",
    "ConfluenceRequestFailedError",
    "ConfluenceParseError",
    "ConfluenceConfigurationError",
    "sanitize",
    "friendly_status",
]
