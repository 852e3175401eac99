"""Startup configuration: environment variables -> validated ConfluenceConfig.

Resolution never raises and never exits. It returns a ConfigResult and the
entry point decides to terminate when the result carries an error.
"""

from __future__ import annotations

import base64
import logging
import os
from dataclasses import dataclass, field
from typing import Mapping, Optional
from urllib.parse import urlparse

MODE_CLOUD = "cloud"
MODE_SERVER = "server"

AUTH_AUTO = "auto"
AUTH_BASIC = "basic"
AUTH_BEARER = "bearer"

DEFAULT_TIMEOUT_SECONDS = 15.0

log = logging.getLogger("confluence_mcp.config")

_MODE_ALIASES = {
    "cloud": MODE_CLOUD,
    "server": MODE_SERVER,
    "dc": MODE_SERVER,
    "datacenter": MODE_SERVER,
    "data-center": MODE_SERVER,
}
_AUTH_MODES = (AUTH_AUTO, AUTH_BASIC, AUTH_BEARER)


class ConfigError(ValueError):
    """Raised internally when an environment value is missing or invalid."""


@dataclass(frozen=True)
class ConfluenceConfig:
    base_url: str
    mode: str
    auth_mode: str
    auth_header: str = field(repr=False)
    username: Optional[str] = None
    default_space: Optional[str] = None
    log_level: str = "INFO"
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    @property
    def is_cloud(self) -> bool:
        return self.mode == MODE_CLOUD


@dataclass(frozen=True)
class ConfigResult:
    config: Optional[ConfluenceConfig] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.config is not None and self.error is None


def _get(env: Mapping[str, str], name: str) -> Optional[str]:
    value = (env.get(name) or "").strip()
    return value or None


def basic_auth_header(username: str, secret: str) -> str:
    encoded = base64.b64encode(f"{username}:{secret}".encode("utf-8")).decode("ascii")
    return f"Basic {encoded}"


def bearer_auth_header(token: str) -> str:
    return f"Bearer {token}"


def normalize_mode(raw: Optional[str]) -> str:
    if raw is None:
        return MODE_SERVER
    mode = _MODE_ALIASES.get(raw.lower())
    if mode is None:
        raise ConfigError(
            f"CONF_MODE must be one of cloud, server, dc, datacenter, data-center "
            f"(got {raw!r})."
        )
    return mode


def normalize_auth_mode(raw: Optional[str]) -> str:
    if raw is None:
        return AUTH_AUTO
    auth_mode = raw.lower()
    if auth_mode not in _AUTH_MODES:
        raise ConfigError(
            f"CONF_AUTH_MODE must be one of auto, basic, bearer (got {raw!r})."
        )
    return auth_mode


def _validate_base_url(raw: Optional[str]) -> str:
    if raw is None:
        raise ConfigError("Required environment variable CONF_BASE_URL is not set.")
    parsed = urlparse(raw)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ConfigError(
            f"CONF_BASE_URL must be an absolute http(s) URL (got {raw!r})."
        )
    return raw.rstrip("/")


def _parse_timeout(raw: Optional[str]) -> float:
    if raw is None:
        return DEFAULT_TIMEOUT_SECONDS
    try:
        value = float(raw)
    except ValueError:
        raise ConfigError(
            f"CONF_TIMEOUT_SECONDS must be a number (got {raw!r})."
        ) from None
    if value <= 0:
        raise ConfigError(f"CONF_TIMEOUT_SECONDS must be positive (got {raw!r}).")
    return value


def resolve_auth(
    *,
    mode: str,
    auth_mode: str,
    username: Optional[str],
    token: Optional[str],
    password: Optional[str],
) -> tuple[str, str]:
    """Return (resolved auth mode, Authorization header value)."""
    if mode == MODE_CLOUD:
        if auth_mode == AUTH_BEARER:
            log.warning(
                "CONF_AUTH_MODE=bearer is ignored with CONF_MODE=cloud; using Basic auth"
            )
        if not username:
            raise ConfigError("CONF_MODE=cloud requires CONF_USERNAME (account email).")
        secret = token or password
        if not secret:
            raise ConfigError(
                "CONF_MODE=cloud requires CONF_TOKEN (API token) or CONF_PASSWORD."
            )
        return AUTH_BASIC, basic_auth_header(username, secret)

    if auth_mode == AUTH_BEARER:
        if not token:
            raise ConfigError("CONF_AUTH_MODE=bearer requires CONF_TOKEN.")
        return AUTH_BEARER, bearer_auth_header(token)

    if auth_mode == AUTH_BASIC:
        if not username:
            raise ConfigError("CONF_AUTH_MODE=basic requires CONF_USERNAME.")
        secret = password or token
        if not secret:
            raise ConfigError(
                "CONF_AUTH_MODE=basic requires CONF_PASSWORD or CONF_TOKEN."
            )
        return AUTH_BASIC, basic_auth_header(username, secret)

    # auto
    if token:
        return AUTH_BEARER, bearer_auth_header(token)
    if username and password:
        return AUTH_BASIC, basic_auth_header(username, password)
    if password and not username:
        raise ConfigError("CONF_PASSWORD is set but CONF_USERNAME is missing.")
    raise ConfigError(
        "Either CONF_TOKEN, or CONF_USERNAME together with CONF_PASSWORD, must be set."
    )


def build_config(env: Mapping[str, str]) -> ConfluenceConfig:
    """Build a config from a mapping, raising ConfigError on invalid input."""
    base_url = _validate_base_url(_get(env, "CONF_BASE_URL"))
    mode = normalize_mode(_get(env, "CONF_MODE"))
    requested_auth = normalize_auth_mode(_get(env, "CONF_AUTH_MODE"))
    username = _get(env, "CONF_USERNAME")

    auth_mode, auth_header = resolve_auth(
        mode=mode,
        auth_mode=requested_auth,
        username=username,
        token=_get(env, "CONF_TOKEN"),
        password=_get(env, "CONF_PASSWORD"),
    )

    return ConfluenceConfig(
        base_url=base_url,
        mode=mode,
        auth_mode=auth_mode,
        auth_header=auth_header,
        username=username,
        default_space=_get(env, "CONF_DEFAULT_SPACE"),
        log_level=(_get(env, "CONF_LOG_LEVEL") or "INFO").upper(),
        timeout_seconds=_parse_timeout(_get(env, "CONF_TIMEOUT_SECONDS")),
    )


def load_config(environ: Optional[Mapping[str, str]] = None) -> ConfigResult:
    """Startup validation phase: resolve configuration from the environment."""
    env = os.environ if environ is None else environ
    try:
        return ConfigResult(config=build_config(env))
    except ConfigError as exc:
        return ConfigResult(error=str(exc))


__all__ = [
    "ConfluenceConfig",
    "ConfigResult",
    "ConfigError",
    "MODE_CLOUD",
    "MODE_SERVER",
    "AUTH_AUTO",
    "AUTH_BASIC",
    "AUTH_BEARER",
    "DEFAULT_TIMEOUT_SECONDS",
    "basic_auth_header",
    "bearer_auth_header",
    "build_config",
    "load_config",
    "normalize_mode",
    "normalize_auth_mode",
    "resolve_auth",
]
