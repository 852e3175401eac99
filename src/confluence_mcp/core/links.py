from dataclasses import dataclass
from typing import Any, Dict, Optional

from .config import MODE_CLOUD


def get_link(payload: Dict[str, Any], relation: str) -> Optional[str]:
    """
    Safely retrieves a link value from the _links dictionary.
    Example: get_link(page_json, 'webui') -> '/spaces/DOC/pages/42/Home'
    """
    if not isinstance(payload, dict):
        return None
    links = payload.get("_links")
    if not isinstance(links, dict):
        return None
    value = links.get(relation)
    return value if isinstance(value, str) and value else None


def _is_absolute(link: str) -> bool:
    return link.startswith("http://") or link.startswith("https://")


@dataclass(frozen=True)
class SiteUrls:
    """Per-deployment URL bases.

    Cloud sites serve the wiki under ``/wiki`` on the site root; Server/Data
    Center serves it directly under the configured base URL (which may itself
    carry a context path such as ``/confluence``).
    """

    mode: str
    site_base: str
    ui_base: str
    api_base: str

    @classmethod
    def for_mode(cls, base_url: str, mode: str) -> "SiteUrls":
        base = base_url.rstrip("/")
        if mode == MODE_CLOUD:
            if base.endswith("/wiki"):
                base = base[: -len("/wiki")]
            ui_base = f"{base}/wiki"
            return cls(
                mode=mode,
                site_base=base,
                ui_base=ui_base,
                api_base=f"{ui_base}/rest/api",
            )
        return cls(mode=mode, site_base=base, ui_base=base, api_base=f"{base}/rest/api")

    @property
    def is_cloud(self) -> bool:
        return self.mode == MODE_CLOUD

    def api(self, path: str) -> str:
        return f"{self.api_base}/{path.lstrip('/')}"

    def view_page_url(self, page_id: str) -> str:
        return f"{self.ui_base}/pages/viewpage.action?pageId={page_id}"

    def resolve_webui(self, webui: Optional[str], page_id: str) -> str:
        if not webui:
            return self.view_page_url(page_id)
        if _is_absolute(webui):
            return webui
        path = webui if webui.startswith("/") else f"/{webui}"
        if self.is_cloud and (path == "/wiki" or path.startswith("/wiki/")):
            return f"{self.site_base}{path}"
        return f"{self.ui_base}{path}"

    def page_url(self, payload: Dict[str, Any], page_id: str) -> str:
        return self.resolve_webui(get_link(payload, "webui"), page_id)


__all__ = ["SiteUrls", "get_link"]
