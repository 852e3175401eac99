from __future__ import annotations

from confluence_mcp.core.client import ConfluenceClient
from confluence_mcp.core.models import CurrentUser


async def get_current_user(client: ConfluenceClient) -> CurrentUser:
    """
    Return the user the server is authenticated as.

    Notes:
    - `id` is accountId on Cloud and userKey (or username) on Server/Data Center.
    - email is only present when the instance exposes it to this user.
    """
    return await client.get_current_user()
