"""Version information for figma-mcp."""

__version__ = "0.1.0"
