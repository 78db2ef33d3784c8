# figma-mcp - Model Context Protocol server

from .version import __version__

__all__ = ["__version__"]
