#!/usr/bin/env python3
"""
Guard the transport-agnostic core package.

Fails when a module under src/confluence_mcp/core/:
- imports a server/transport module or loads .env files itself
- calls print(), since stdout carries the MCP stdio protocol
"""

from __future__ import annotations

import ast
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parent.parent
CORE_DIR = REPO_ROOT / "src" / "confluence_mcp" / "core"

FORBIDDEN_PREFIXES = (
    "mcp.server",
    "fastmcp",
    "dotenv",
    "confluence_mcp.transports",
)


def is_forbidden(module: str) -> bool:
    return any(
        module == prefix or module.startswith(prefix + ".")
        for prefix in FORBIDDEN_PREFIXES
    )


def scan_file(path: Path) -> list[str]:
    errors: list[str] = []
    tree = ast.parse(path.read_text())
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            names = [alias.name for alias in node.names]
        elif isinstance(node, ast.ImportFrom):
            names = [node.module] if node.module and node.level == 0 else []
        elif (
            isinstance(node, ast.Call)
            and isinstance(node.func, ast.Name)
            and node.func.id == "print"
        ):
            errors.append(f"{path}:{node.lineno}: print() writes to stdout")
            continue
        else:
            continue
        errors.extend(
            f"{path}: forbidden import '{mod}'" for mod in names if is_forbidden(mod)
        )
    return errors


def main() -> int:
    violations: list[str] = []
    for py_file in sorted(CORE_DIR.rglob("*.py")):
        violations.extend(scan_file(py_file))

    for v in violations:
        print(v, file=sys.stderr)
    return 1 if violations else 0


if __name__ == "__main__":
    sys.exit(main())
