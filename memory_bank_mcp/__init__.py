"""MCP tool server for the memory bank."""
