"""Read-only MCP tools over the cached catalog."""
