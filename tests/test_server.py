import pytest
from confluence_mcp.core.client import ConfluenceClient
from confluence_mcp.transports.stdio import main as stdio_main


def test_main_exits_with_diagnostic_on_invalid_config(monkeypatch, capsys):
    monkeypatch.setattr(stdio_main, "load_dotenv", lambda *a, **k: None)
    monkeypatch.delenv("CONF_BASE_URL", raising=False)

    with pytest.raises(SystemExit) as exc:
        stdio_main.main()

    assert exc.value.code == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "CONF_BASE_URL" in captured.err


@pytest.mark.asyncio
async def test_build_app_registers_tools(server_config):
    async with ConfluenceClient(server_config) as client:
        app = stdio_main.build_app(client)
        names = {t.name for t in await app.list_tools()}

    assert "update_page" in names
    assert len(names) == 6


def test_main_serves_with_resolved_config(monkeypatch):
    monkeypatch.setattr(stdio_main, "load_dotenv", lambda *a, **k: None)
    monkeypatch.setattr(stdio_main, "setup_logging", lambda level: None)
    for name in ("CONF_MODE", "CONF_AUTH_MODE", "CONF_USERNAME", "CONF_PASSWORD"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.delenv("CONF_TIMEOUT_SECONDS", raising=False)
    monkeypatch.setenv("CONF_BASE_URL", "https://wiki.example.com")
    monkeypatch.setenv("CONF_TOKEN", "T")

    served = []

    async def fake_serve(config):
        served.append(config)

    monkeypatch.setattr(stdio_main, "serve", fake_serve)

    stdio_main.main()

    assert [c.auth_header for c in served] == ["Bearer T"]
