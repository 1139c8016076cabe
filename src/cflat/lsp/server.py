"""
cflat Language Server Protocol (LSP) Server.

Implements a small LSP server for cflat using pygls:

- Document synchronization (open, change, save, close)
- Diagnostics (the first lexical or syntax error)
- Document symbols (outline of function declarations)

Usage:
    # Start the server in stdio mode (for IDE integration)
    cflat-lsp

    # Start in TCP mode (for debugging)
    cflat-lsp --tcp --port 2087
"""

import argparse
import logging
from typing import Optional

from lsprotocol import types
from pygls.lsp.server import LanguageServer

from cflat import __version__
from cflat.compiler import ParseResult
from cflat.lsp.diagnostics import DiagnosticProvider
from cflat.lsp.symbols import get_document_symbols

logger = logging.getLogger("cflat-lsp")


class CFlatLanguageServer(LanguageServer):
    """
    Language Server Protocol implementation for cflat.

    Each open document is re-parsed on every change; the latest result is
    cached per URI to answer outline requests.
    """

    def __init__(self) -> None:
        super().__init__(
            name="cflat-lsp",
            version=f"v{__version__}",
        )

        # uri -> most recent parse
        self._results: dict[str, ParseResult] = {}

        self._register_handlers()

    def _register_handlers(self) -> None:
        """Register all LSP request and notification handlers."""
        self.feature(types.TEXT_DOCUMENT_DID_OPEN)(self._on_did_open)
        self.feature(types.TEXT_DOCUMENT_DID_CHANGE)(self._on_did_change)
        self.feature(types.TEXT_DOCUMENT_DID_SAVE)(self._on_did_save)
        self.feature(types.TEXT_DOCUMENT_DID_CLOSE)(self._on_did_close)

        self.feature(types.TEXT_DOCUMENT_DOCUMENT_SYMBOL)(self._on_document_symbol)

        self.feature(types.INITIALIZED)(self._on_initialized)
        self.feature(types.SHUTDOWN)(self._on_shutdown)

    def analyze_document(self, uri: str, text: str) -> list[types.Diagnostic]:
        """Parse a document, cache the result and return its diagnostics."""
        provider = DiagnosticProvider(text, uri)
        diagnostics = provider.get_diagnostics()
        if provider.result is not None:
            self._results[uri] = provider.result
        return diagnostics

    def get_result(self, uri: str) -> Optional[ParseResult]:
        return self._results.get(uri)

    def _publish_diagnostics(self, uri: str, diagnostics: list[types.Diagnostic]) -> None:
        """Publish diagnostics to the client."""
        self.text_document_publish_diagnostics(
            types.PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
        )

    def _reanalyze(self, uri: str) -> None:
        doc = self.workspace.get_text_document(uri)
        if doc is None:
            return
        self._publish_diagnostics(uri, self.analyze_document(uri, doc.source))

    # =========================================================================
    # Document Synchronization
    # =========================================================================

    def _on_did_open(self, params: types.DidOpenTextDocumentParams) -> None:
        document = params.text_document
        logger.info("Document opened: %s", document.uri)
        self._publish_diagnostics(
            document.uri, self.analyze_document(document.uri, document.text)
        )

    def _on_did_change(self, params: types.DidChangeTextDocumentParams) -> None:
        logger.debug("Document changed: %s", params.text_document.uri)
        self._reanalyze(params.text_document.uri)

    def _on_did_save(self, params: types.DidSaveTextDocumentParams) -> None:
        logger.info("Document saved: %s", params.text_document.uri)
        self._reanalyze(params.text_document.uri)

    def _on_did_close(self, params: types.DidCloseTextDocumentParams) -> None:
        uri = params.text_document.uri
        logger.info("Document closed: %s", uri)

        self._results.pop(uri, None)
        self._publish_diagnostics(uri, [])

    # =========================================================================
    # Document Symbols
    # =========================================================================

    def _on_document_symbol(
        self, params: types.DocumentSymbolParams
    ) -> list[types.DocumentSymbol] | None:
        """Handle document symbols request (for outline view)."""
        result = self.get_result(params.text_document.uri)
        if result is None or result.program is None:
            return None
        return get_document_symbols(result.program)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def _on_initialized(self, params: types.InitializedParams) -> None:  # noqa: ARG002
        logger.info("cflat Language Server initialized")

    def _on_shutdown(self, params: None) -> None:  # noqa: ARG002
        logger.info("Shutting down cflat Language Server")


def create_server() -> CFlatLanguageServer:
    """Create a configured language server instance."""
    return CFlatLanguageServer()


def main(argv: Optional[list[str]] = None) -> None:
    """
    Main entry point for the cflat language server.

    Starts the server in stdio mode for IDE integration, or over TCP.
    """
    parser = argparse.ArgumentParser(
        description="cflat Language Server",
        prog="cflat-lsp",
    )
    parser.add_argument(
        "--tcp",
        action="store_true",
        help="Start server in TCP mode instead of stdio",
    )
    parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host to bind to in TCP mode (default: 127.0.0.1)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=2087,
        help="Port to listen on in TCP mode (default: 2087)",
    )
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error"],
        default="info",
        help="Logging level (default: info)",
    )

    args = parser.parse_args(argv)

    # stdout carries the protocol in stdio mode, so logs go to stderr
    logging.basicConfig(
        level=logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    logger.setLevel(getattr(logging, args.log_level.upper()))

    server = create_server()

    if args.tcp:
        logger.info("Starting cflat LSP in TCP mode on %s:%s", args.host, args.port)
        server.start_tcp(args.host, args.port)
    else:
        logger.info("Starting cflat LSP in stdio mode")
        server.start_io()


if __name__ == "__main__":
    main()
