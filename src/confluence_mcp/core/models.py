from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from .links import SiteUrls


def _nested(payload: Dict[str, Any], *keys: str) -> Any:
    cur: Any = payload
    for key in keys:
        if not isinstance(cur, dict):
            return None
        cur = cur.get(key)
    return cur


def _opt_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    s = str(value)
    return s or None


class Page(BaseModel):
    id: str = Field(min_length=1)
    type: str = "page"
    title: str = ""
    space_key: str = Field(default="", alias="spaceKey")
    url: str
    version: Optional[int] = None

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @staticmethod
    def _fields_from(payload: Dict[str, Any], urls: SiteUrls) -> Dict[str, Any]:
        page_id = str(payload.get("id") or "")
        version = _nested(payload, "version", "number")
        return {
            "id": page_id,
            "type": payload.get("type") or "page",
            "title": payload.get("title") or "",
            "space_key": _nested(payload, "space", "key") or "",
            "url": urls.page_url(payload, page_id),
            "version": version if isinstance(version, int) else None,
        }

    @classmethod
    def from_content(cls, payload: Dict[str, Any], urls: SiteUrls) -> "Page":
        return cls(**cls._fields_from(payload, urls))


class PageDetail(Page):
    body_storage_value: str = Field(default="", alias="bodyStorageValue")

    @classmethod
    def from_content(cls, payload: Dict[str, Any], urls: SiteUrls) -> "PageDetail":
        body = _nested(payload, "body", "storage", "value")
        return cls(
            **cls._fields_from(payload, urls),
            body_storage_value=body if isinstance(body, str) else "",
        )


class CurrentUser(BaseModel):
    id: str = ""
    account_id: Optional[str] = Field(default=None, alias="accountId")
    username: Optional[str] = None
    user_key: Optional[str] = Field(default=None, alias="userKey")
    display_name: Optional[str] = Field(default=None, alias="displayName")
    email: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "CurrentUser":
        account_id = _opt_str(payload.get("accountId"))
        user_key = _opt_str(payload.get("userKey"))
        username = _opt_str(payload.get("username"))
        return cls(
            id=account_id or user_key or username or "",
            account_id=account_id,
            username=username,
            user_key=user_key,
            display_name=_opt_str(payload.get("displayName") or payload.get("publicName")),
            email=_opt_str(payload.get("email")),
        )


__all__ = ["Page", "PageDetail", "CurrentUser"]
