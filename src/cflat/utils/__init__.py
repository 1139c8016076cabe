"""
cflat Utilities Package.

Common utilities for error handling, source locations, and diagnostics.
"""

from cflat.utils.diagnostics import (
    Diagnostic,
    # Builder and emitter
    DiagnosticBuilder,
    DiagnosticEmitter,
    DiagnosticLabel,
    # Core diagnostic types
    DiagnosticLevel,
    # Error codes
    ErrorCode,
    SourceSpan,
    create_missing_token_diagnostic,
    create_unclosed_delimiter_diagnostic,
    create_unexpected_character_diagnostic,
    # Helper functions for common diagnostics
    create_unexpected_token_diagnostic,
    create_unterminated_string_diagnostic,
    # String similarity utilities
    levenshtein_distance,
    suggest_similar,
)
from cflat.utils.errors import (
    CFlatError,
    LexerError,
    ParserError,
    SourceLoadError,
    SourceLocation,
)

__all__ = [
    # Errors
    "CFlatError",
    "LexerError",
    "ParserError",
    "SourceLoadError",
    "SourceLocation",
    # Error codes
    "ErrorCode",
    # Core diagnostic types
    "DiagnosticLevel",
    "SourceSpan",
    "DiagnosticLabel",
    "Diagnostic",
    # Builder and emitter
    "DiagnosticBuilder",
    "DiagnosticEmitter",
    # String similarity utilities
    "levenshtein_distance",
    "suggest_similar",
    # Helper functions
    "create_unexpected_token_diagnostic",
    "create_unclosed_delimiter_diagnostic",
    "create_missing_token_diagnostic",
    "create_unexpected_character_diagnostic",
    "create_unterminated_string_diagnostic",
]
