from __future__ import annotations

import importlib
import inspect
import logging
import pkgutil
from types import ModuleType
from typing import Callable, Iterable, List, Set, get_type_hints

from mcp.types import CallToolResult

from .client import ConfluenceClient
from .observability import log_event
from .results import ToolResult

log = logging.getLogger("confluence_mcp.core.registry")


# --- Discovery helpers ----------------------------------------------------- #


def discover_tool_modules(
    package_name: str = "confluence_mcp.core.tools",
) -> List[ModuleType]:
    """Import all modules under the given tools package, skipping failures."""
    modules: List[ModuleType] = []
    base_pkg = importlib.import_module(package_name)

    for finder in pkgutil.iter_modules(base_pkg.__path__, base_pkg.__name__ + "."):
        name = finder.name
        try:
            module = importlib.import_module(name)
            modules.append(module)
        except Exception as exc:  # pragma: no cover - logged, not fatal
            log.error("Failed importing tool module %s: %s", name, exc)
            continue

    return modules


def iter_tool_functions(module: ModuleType) -> Iterable[Callable]:
    """Yield public coroutine functions whose first parameter is 'client'."""
    for _, func in inspect.getmembers(module, inspect.iscoroutinefunction):
        if func.__name__.startswith("_"):
            continue
        if func.__module__ != module.__name__:
            # Skip imported functions
            continue

        params = list(inspect.signature(func).parameters.values())
        if not params or params[0].name != "client":
            log.debug(
                "Skipping %s.%s: first parameter must be 'client'",
                module.__name__,
                func.__name__,
            )
            continue

        yield func


# --- Wrapping / registration ---------------------------------------------- #


def _wrap_tool(
    func: Callable, client_provider: Callable[[], ConfluenceClient]
) -> Callable:
    """
    Return a wrapper that injects the client, hides it from the signature and
    converts every outcome into a CallToolResult. Nothing raised by the tool
    escapes the wrapper.
    """
    original_sig = inspect.signature(func)
    # include_extras keeps Annotated[..., Field(...)] so bounds reach the schema
    type_hints = get_type_hints(func, include_extras=True)

    new_params = []
    for i, (name, param) in enumerate(original_sig.parameters.items()):
        if i == 0 and name == "client":
            continue  # drop injected client
        ann = type_hints.get(name, param.annotation)
        new_params.append(param.replace(annotation=ann))

    new_sig = inspect.Signature(
        parameters=new_params, return_annotation=CallToolResult
    )
    tool_name = func.__name__

    async def wrapped(*args, **kwargs) -> CallToolResult:
        try:
            client = client_provider()
            payload = await func(client, *args, **kwargs)
            result = ToolResult.success(payload)
        except Exception as exc:
            log_event(
                "tool_failed",
                log,
                level=logging.WARNING,
                tool=tool_name,
                error_type=type(exc).__name__,
            )
            result = ToolResult.failure(exc)
        return result.to_call_result()

    wrapped.__name__ = func.__name__
    wrapped.__doc__ = func.__doc__
    wrapped.__module__ = func.__module__
    wrapped.__signature__ = new_sig  # type: ignore[attr-defined]
    return wrapped


def register_discovered_tools(
    app,
    client_provider: Callable[[], ConfluenceClient] | ConfluenceClient,
    modules: List[ModuleType] | None = None,
) -> List[str]:
    """Register discovered tools on an app that exposes a .tool decorator."""
    if isinstance(client_provider, ConfluenceClient):
        _client = client_provider

        def client_provider():
            return _client

    if not hasattr(app, "tool"):
        raise TypeError("app must expose a 'tool' decorator")

    modules = modules or discover_tool_modules()
    seen_names: Set[str] = set()
    registered: List[str] = []

    for module in modules:
        for func in iter_tool_functions(module):
            name = func.__name__
            if name in seen_names:
                raise ValueError(f"Duplicate tool name detected: {name}")

            wrapped = _wrap_tool(func, client_provider)
            description = inspect.cleandoc(func.__doc__) if func.__doc__ else None
            app.tool(name=name, description=description, structured_output=False)(
                wrapped
            )
            seen_names.add(name)
            registered.append(name)
            log.info("Registered tool: %s (%s)", name, module.__name__)

    return registered


__all__ = [
    "discover_tool_modules",
    "iter_tool_functions",
    "register_discovered_tools",
]
