"""
cflat Compiler Package.

This package contains the front-end components:
- Lexer: Tokenizes cflat source code
- Parser: Produces an Abstract Syntax Tree from tokens
- AST: Node definitions for the syntax tree
- ASTPrinter: Debug dumps of tokens and trees

and the pipeline entry points `parse_source` and `parse_file`, which turn
source text into a ParseResult. Errors are raised internally and handed to
callers as values: a failed parse never carries a partial tree.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from cflat.compiler.ast_nodes import Program
from cflat.compiler.ast_printer import ASTPrinter, format_ast, format_tokens
from cflat.compiler.lexer import Lexer
from cflat.compiler.parser import Parser
from cflat.compiler.tokens import Token, TokenCategory
from cflat.utils.diagnostics import (
    Diagnostic,
    DiagnosticEmitter,
    DiagnosticLevel,
    ErrorCode,
    SourceSpan,
    create_unexpected_character_diagnostic,
    create_unterminated_string_diagnostic,
)
from cflat.utils.errors import CFlatError, LexerError, ParserError, SourceLoadError

logger = logging.getLogger(__name__)


@dataclass
class ParseResult:
    """
    Outcome of running the front end over one source unit.

    Attributes:
        success: True when lexing and parsing both completed
        program: The parsed tree, or None on failure
        error: The first error encountered, or None on success
        tokens: The token list, when lexing succeeded
        diagnostics: Rich diagnostics describing the failure, if any
    """

    success: bool
    program: Optional[Program] = None
    error: Optional[CFlatError] = None
    tokens: list[Token] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.success

    @property
    def message(self) -> str:
        """The failure message, or an empty string on success."""
        if self.error is None:
            return ""
        return self.error.message

    def render_diagnostics(self, source: str, use_color: bool = True) -> str:
        """Render the diagnostics against `source`, falling back to the plain error."""
        if self.diagnostics:
            return "\n\n".join(d.render(source, use_color) for d in self.diagnostics)
        if self.error is not None:
            return str(self.error)
        return ""


def _lexer_diagnostic(
    error: LexerError, source: str, filename: str
) -> Optional[Diagnostic]:
    location = error.location
    if location is None:
        return None

    emitter = DiagnosticEmitter(source, filename)
    span = SourceSpan.from_location(location.line, location.column, 1, filename)
    if error.message.startswith("Unterminated"):
        return create_unterminated_string_diagnostic(emitter, span)
    char = source[location.offset] if location.offset < len(source) else ""
    return create_unexpected_character_diagnostic(emitter, char, span)


def parse_source(source: str, filename: str = "<input>") -> ParseResult:
    """
    Tokenize and parse cflat source text.

    Args:
        source: The full program text
        filename: Name used in error locations and diagnostics

    Returns:
        A ParseResult; check `success` (or truthiness) before using `program`.
    """
    started = time.perf_counter()

    try:
        tokens = Lexer(source, filename).tokenize()
    except LexerError as e:
        logger.debug("Lexing %s failed: %s", filename, e.message)
        diagnostic = _lexer_diagnostic(e, source, filename)
        return ParseResult(
            success=False,
            error=e,
            diagnostics=[diagnostic] if diagnostic else [],
        )
    lexed = time.perf_counter()

    parser = Parser(tokens, source, filename)
    try:
        program = parser.parse()
    except ParserError as e:
        logger.debug("Parsing %s failed: %s", filename, e.message)
        return ParseResult(
            success=False,
            error=e,
            tokens=tokens,
            diagnostics=parser.get_diagnostics(),
        )
    except RecursionError:
        # Only reachable when the caller is already deep in the stack
        error = ParserError("Nesting too deep")
        logger.debug("Parsing %s failed: %s", filename, error.message)
        diagnostic = Diagnostic(ErrorCode.E0206, DiagnosticLevel.ERROR, error.message)
        return ParseResult(success=False, error=error, tokens=tokens, diagnostics=[diagnostic])
    parsed = time.perf_counter()

    logger.debug(
        "Parsed %s: %d tokens, %d functions (lex %.2fms, parse %.2fms)",
        filename,
        len(tokens),
        len(program.declarations),
        (lexed - started) * 1000,
        (parsed - lexed) * 1000,
    )
    return ParseResult(success=True, program=program, tokens=tokens)


def load_source(path: Union[str, Path]) -> str:
    """
    Read program text from disk as UTF-8.

    Raises:
        SourceLoadError: If the file is missing, unreadable or not UTF-8.
    """
    path = Path(path)
    if not path.is_file():
        raise SourceLoadError("Source file not found", str(path))
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SourceLoadError(f"Cannot read source file ({e})", str(path)) from e


def parse_file(path: Union[str, Path]) -> ParseResult:
    """Load `path` and parse it; load failures become an unsuccessful result."""
    try:
        source = load_source(path)
    except SourceLoadError as e:
        logger.debug("Loading %s failed: %s", path, e)
        diagnostic = Diagnostic(ErrorCode.E0401, DiagnosticLevel.ERROR, str(e))
        return ParseResult(success=False, error=e, diagnostics=[diagnostic])
    return parse_source(source, str(path))


__all__ = [
    "ASTPrinter",
    "Lexer",
    "ParseResult",
    "Parser",
    "Program",
    "Token",
    "TokenCategory",
    "format_ast",
    "format_tokens",
    "load_source",
    "parse_file",
    "parse_source",
]
