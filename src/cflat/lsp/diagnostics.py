"""
Diagnostic generation for cflat LSP.

This module converts front-end errors into LSP-compatible diagnostic
messages for display in editors. Parsing stops at the first error, so a
document carries at most one diagnostic.
"""

from lsprotocol import types

from cflat.compiler import ParseResult, parse_source
from cflat.utils.diagnostics import Diagnostic as CompilerDiagnostic
from cflat.utils.diagnostics import DiagnosticLevel
from cflat.utils.errors import CFlatError

SOURCE_NAME = "cflat"


class DiagnosticProvider:
    """
    Generates LSP diagnostics from cflat source code.

    Runs the lexer and parser and reports the first error, preferring the
    rich diagnostic (with its notes and hints) when one was recorded.
    """

    def __init__(self, source: str, uri: str) -> None:
        """
        Initialize the diagnostic provider.

        Args:
            source: The cflat source code to analyze
            uri: The document URI for location information
        """
        self.source = source
        self.uri = uri
        self.result: ParseResult | None = None
        self._diagnostics: list[types.Diagnostic] = []

    def get_diagnostics(self) -> list[types.Diagnostic]:
        """
        Get all diagnostics for the document.

        Returns:
            An empty list for a valid document, else a single error
        """
        self._diagnostics = []
        self.result = parse_source(self.source, self.uri)

        if self.result:
            return self._diagnostics

        if self.result.diagnostics:
            self._add_compiler_diagnostic(self.result.diagnostics[0])
        elif self.result.error is not None:
            self._add_cflat_error(self.result.error)

        return self._diagnostics

    def _add_cflat_error(self, error: CFlatError) -> None:
        """Add a plain front-end error as an LSP diagnostic."""
        line = 0
        character = 0

        if error.location:
            line = max(0, error.location.line - 1)  # Convert to 0-indexed
            character = max(0, error.location.column - 1)

        diagnostic = types.Diagnostic(
            range=types.Range(
                start=types.Position(line=line, character=character),
                end=types.Position(line=line, character=character + 1),
            ),
            message=error.message,
            severity=types.DiagnosticSeverity.Error,
            source=SOURCE_NAME,
        )

        self._diagnostics.append(diagnostic)

    def _add_compiler_diagnostic(self, diag: CompilerDiagnostic) -> None:
        """
        Add a rich compiler diagnostic as an LSP diagnostic.

        Args:
            diag: The compiler diagnostic
        """
        severity_map = {
            DiagnosticLevel.ERROR: types.DiagnosticSeverity.Error,
            DiagnosticLevel.WARNING: types.DiagnosticSeverity.Warning,
            DiagnosticLevel.NOTE: types.DiagnosticSeverity.Information,
            DiagnosticLevel.HELP: types.DiagnosticSeverity.Hint,
        }
        severity = severity_map.get(diag.level, types.DiagnosticSeverity.Error)

        line = 0
        character = 0
        end_line = 0
        end_character = 1

        span = diag.primary_span
        if span is not None:
            line = max(0, span.start_line - 1)
            character = max(0, span.start_col - 1)
            end_line = max(0, span.end_line - 1)
            end_character = max(0, span.end_col - 1)

        # Build message with notes and helps
        message_parts = [diag.message]
        for note in diag.notes:
            message_parts.append(f"note: {note}")
        for help_msg in diag.helps:
            message_parts.append(f"help: {help_msg}")

        diagnostic = types.Diagnostic(
            range=types.Range(
                start=types.Position(line=line, character=character),
                end=types.Position(line=end_line, character=end_character),
            ),
            message="\n".join(message_parts),
            severity=severity,
            source=SOURCE_NAME,
            code=diag.code,
        )

        self._diagnostics.append(diagnostic)


def get_diagnostics_for_document(source: str, uri: str) -> list[types.Diagnostic]:
    """
    Convenience function to get diagnostics for a document.

    Args:
        source: The cflat source code
        uri: The document URI

    Returns:
        List of LSP diagnostics
    """
    provider = DiagnosticProvider(source, uri)
    return provider.get_diagnostics()
