import importlib.util
from pathlib import Path

SCRIPT = Path(__file__).resolve().parent.parent / "scripts" / "check_core_imports.py"


def _load_guard():
    spec = importlib.util.spec_from_file_location("check_core_imports", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    assert spec.loader is not None  # for mypy
    spec.loader.exec_module(module)
    return module


def test_core_import_guard_passes():
    assert _load_guard().main() == 0, "core import guard failed"


def test_guard_flags_server_imports_and_print(tmp_path):
    bad = tmp_path / "bad.py"
    bad.write_text(
        "from mcp.server.fastmcp import FastMCP\n"
        "import dotenv\n"
        "from mcp.types import TextContent\n"
        "print('hello')\n"
    )

    errors = _load_guard().scan_file(bad)

    assert len(errors) == 3
    assert any("mcp.server.fastmcp" in e for e in errors)
    assert any("'dotenv'" in e for e in errors)
    assert any("print()" in e for e in errors)
