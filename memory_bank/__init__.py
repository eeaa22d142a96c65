"""Memory bank: versioned project files served over REST and MCP."""

__version__ = "1.0.0"
