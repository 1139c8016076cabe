"""
cflat Language Server Protocol (LSP) implementation.

Gives editors live syntax errors and an outline of the functions in a
cflat document.

Usage:
    # Start the LSP server (stdio mode)
    cflat-lsp

    # Or run as a module
    python -m cflat.lsp
"""

from cflat.lsp.server import CFlatLanguageServer, create_server, main

__all__ = [
    "CFlatLanguageServer",
    "create_server",
    "main",
]
