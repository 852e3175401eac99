"""Transport adapters (stdio) for confluence-mcp."""
