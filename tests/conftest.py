import pytest
from confluence_mcp.core.client import ConfluenceClient
from confluence_mcp.core.config import build_config

SERVER_BASE = "https://wiki.example.com"
CLOUD_SITE = "https://acme.atlassian.net"


@pytest.fixture
def server_config():
    return build_config(
        {
            "CONF_BASE_URL": SERVER_BASE + "/",
            "CONF_TOKEN": "server-pat",
            "CONF_DEFAULT_SPACE": "DOC",
        }
    )


@pytest.fixture
def cloud_config():
    return build_config(
        {
            "CONF_BASE_URL": CLOUD_SITE,
            "CONF_MODE": "cloud",
            "CONF_USERNAME": "ada@example.com",
            "CONF_TOKEN": "cloud-token",
        }
    )


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def fake_sleep(sleeps):
    async def _sleep(delay: float) -> None:
        sleeps.append(delay)

    return _sleep


@pytest.fixture
def client(server_config, fake_sleep):
    return ConfluenceClient(server_config, sleep=fake_sleep)


@pytest.fixture
def cloud_client(cloud_config, fake_sleep):
    return ConfluenceClient(cloud_config, sleep=fake_sleep)
