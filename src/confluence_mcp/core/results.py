"""Error-as-value envelope returned by every tool invocation."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from mcp.types import CallToolResult, TextContent
from pydantic import BaseModel

from .errors import sanitize


def to_jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    if isinstance(value, dict):
        return {k: to_jsonable(v) for k, v in value.items()}
    return value


@dataclass(frozen=True)
class ToolResult:
    ok: bool
    text: str

    @classmethod
    def success(cls, payload: Any) -> "ToolResult":
        return cls(ok=True, text=json.dumps(to_jsonable(payload), indent=2))

    @classmethod
    def failure(cls, exc: BaseException) -> "ToolResult":
        message = str(exc) or type(exc).__name__
        return cls(ok=False, text=sanitize(message))

    def to_call_result(self) -> CallToolResult:
        return CallToolResult(
            content=[TextContent(type="text", text=self.text)],
            isError=not self.ok,
        )


__all__ = ["ToolResult", "to_jsonable"]
