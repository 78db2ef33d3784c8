"""Allow running figma-mcp as ``python -m figma_mcp``."""

from figma_mcp.cli.main import main

if __name__ == "__main__":
    main()
