"""
Entry point for running the cflat LSP server as a module.

Usage:
    python -m cflat.lsp
    python -m cflat.lsp --tcp --port 2087
"""

from cflat.lsp.server import main

if __name__ == "__main__":
    main()
