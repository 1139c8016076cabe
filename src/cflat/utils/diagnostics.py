"""
Rust-like Rich Error Diagnostics for cflat.

Turns lexer and parser failures into diagnostics with source context and,
where one is obvious, a help line.

Example output:
    error[E0203]: expected ';' after function call
      --> example.cf:3:14
       |
     3 |     whlie(x) {
       |              ^
       |
       = help: did you mean 'while'?
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional


# =============================================================================
# Error Codes Catalog
# =============================================================================


class ErrorCode:
    """
    Catalog of error codes for cflat diagnostics.

    - E01xx: Lexical errors
    - E02xx: Syntax errors
    - E04xx: Source loading errors
    """

    # Lexical errors: E01xx
    E0101 = "E0101"  # unexpected character
    E0102 = "E0102"  # unterminated string

    # Syntax errors: E02xx
    E0201 = "E0201"  # unexpected token
    E0202 = "E0202"  # unclosed delimiter
    E0203 = "E0203"  # missing token
    E0204 = "E0204"  # invalid expression
    E0205 = "E0205"  # invalid statement
    E0206 = "E0206"  # nesting too deep

    # Source loading: E04xx
    E0401 = "E0401"  # source file not readable


# =============================================================================
# Diagnostic Types
# =============================================================================


class DiagnosticLevel(Enum):
    """Severity level of a diagnostic message."""

    ERROR = "error"
    WARNING = "warning"
    NOTE = "note"
    HELP = "help"

    def color_code(self) -> str:
        """Get ANSI color code for this level."""
        colors = {
            DiagnosticLevel.ERROR: "\033[91m",  # Red
            DiagnosticLevel.WARNING: "\033[93m",  # Yellow
            DiagnosticLevel.NOTE: "\033[96m",  # Cyan
            DiagnosticLevel.HELP: "\033[92m",  # Green
        }
        return colors.get(self, "")


@dataclass(frozen=True, slots=True)
class SourceSpan:
    """
    A span of source code.

    Attributes:
        start_line: 1-indexed starting line number
        start_col: 1-indexed starting column number
        end_line: 1-indexed ending line number
        end_col: 1-indexed ending column number (exclusive)
        filename: Filename for display
    """

    start_line: int
    start_col: int
    end_line: int
    end_col: int
    filename: str = "<input>"

    @classmethod
    def from_location(
        cls, line: int, col: int, length: int = 1, filename: str = "<input>"
    ) -> "SourceSpan":
        """Create a span from a single location with a given length."""
        return cls(
            start_line=line,
            start_col=col,
            end_line=line,
            end_col=col + max(1, length),
            filename=filename,
        )

    def __str__(self) -> str:
        return f"{self.filename}:{self.start_line}:{self.start_col}"

    @property
    def is_multiline(self) -> bool:
        return self.start_line != self.end_line

    @property
    def length(self) -> int:
        """Get the length of the span on a single line."""
        if self.is_multiline:
            return 1
        return max(1, self.end_col - self.start_col)


@dataclass(slots=True)
class DiagnosticLabel:
    """
    A label pointing to a span of source code.

    Attributes:
        span: The source span this label points to
        message: Optional message shown next to the underline
        is_primary: Primary labels underline with ^, secondary with -
    """

    span: SourceSpan
    message: str = ""
    is_primary: bool = True


@dataclass
class Diagnostic:
    """
    A rich diagnostic message with source context.

    Attributes:
        code: Error code (e.g., "E0201")
        level: Severity level
        message: The main diagnostic message
        labels: Source code labels
        notes: Additional notes
        helps: Help messages
    """

    code: str
    level: DiagnosticLevel
    message: str
    labels: list[DiagnosticLabel] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)
    helps: list[str] = field(default_factory=list)

    @property
    def primary_span(self) -> Optional[SourceSpan]:
        """The span of the primary label, if any."""
        if not self.labels:
            return None
        return next((l for l in self.labels if l.is_primary), self.labels[0]).span

    def render(self, source_code: str, use_color: bool = True) -> str:
        """
        Render this diagnostic as a formatted string.

        Args:
            source_code: The source text the spans point into
            use_color: Whether to use ANSI color codes

        Returns:
            A formatted multi-line string representation
        """
        lines: list[str] = []
        source_lines = source_code.splitlines()

        reset = "\033[0m" if use_color else ""
        bold = "\033[1m" if use_color else ""
        level_color = self.level.color_code() if use_color else ""
        blue = "\033[94m" if use_color else ""
        green = "\033[92m" if use_color else ""

        level_str = self.level.value
        if self.code:
            header = (
                f"{level_color}{bold}{level_str}[{self.code}]{reset}: {bold}{self.message}{reset}"
            )
        else:
            header = f"{level_color}{bold}{level_str}{reset}: {bold}{self.message}{reset}"
        lines.append(header)

        primary = self.primary_span
        if primary is not None:
            lines.append(f"  {blue}-->{reset} {primary}")

        if self.labels and source_lines:
            lines.append(f"   {blue}|{reset}")

            labels_by_line: dict[int, list[DiagnosticLabel]] = {}
            for label in self.labels:
                labels_by_line.setdefault(label.span.start_line, []).append(label)

            for line_num in sorted(labels_by_line):
                if 1 <= line_num <= len(source_lines):
                    source_line = source_lines[line_num - 1]
                    lines.append(f"{blue}{line_num:3} |{reset} {source_line}")

                    for label in labels_by_line[line_num]:
                        underline_char = "^" if label.is_primary else "-"
                        underline_color = level_color if label.is_primary else blue

                        padding = " " * (label.span.start_col - 1)
                        underline = underline_char * label.span.length

                        underline_line = (
                            f"   {blue}|{reset} {padding}{underline_color}{underline}{reset}"
                        )
                        if label.message:
                            underline_line += f" {underline_color}{label.message}{reset}"
                        lines.append(underline_line)

            lines.append(f"   {blue}|{reset}")

        for note in self.notes:
            lines.append(f"   {blue}={reset} {bold}note:{reset} {note}")

        for help_msg in self.helps:
            lines.append(f"   {blue}={reset} {green}help:{reset} {help_msg}")

        return "\n".join(lines)

    def to_dict(self) -> dict:
        """JSON-friendly representation, used by `cflat check --json`."""
        span = self.primary_span
        return {
            "code": self.code,
            "level": self.level.value,
            "message": self.message,
            "file": span.filename if span else None,
            "line": span.start_line if span else None,
            "column": span.start_col if span else None,
            "notes": list(self.notes),
            "helps": list(self.helps),
        }


# =============================================================================
# Diagnostic Builder (Fluent API)
# =============================================================================


class DiagnosticBuilder:
    """
    Fluent builder for constructing Diagnostic objects.

        emitter.error("E0203", "expected ';'", span)
            .help("did you mean 'while'?")
            .emit()
    """

    def __init__(
        self,
        emitter: "DiagnosticEmitter",
        code: str,
        level: DiagnosticLevel,
        message: str,
        primary_span: Optional[SourceSpan] = None,
    ) -> None:
        self._emitter = emitter
        self._code = code
        self._level = level
        self._message = message
        self._labels: list[DiagnosticLabel] = []
        self._notes: list[str] = []
        self._helps: list[str] = []

        if primary_span:
            self._labels.append(DiagnosticLabel(primary_span, "", True))

    def secondary_label(self, span: SourceSpan, message: str = "") -> "DiagnosticBuilder":
        """Add a secondary label."""
        self._labels.append(DiagnosticLabel(span, message, False))
        return self

    def note(self, message: str) -> "DiagnosticBuilder":
        self._notes.append(message)
        return self

    def help(self, message: str) -> "DiagnosticBuilder":
        self._helps.append(message)
        return self

    def build(self) -> Diagnostic:
        """Build the diagnostic without emitting."""
        return Diagnostic(
            code=self._code,
            level=self._level,
            message=self._message,
            labels=self._labels,
            notes=self._notes,
            helps=self._helps,
        )

    def emit(self) -> Diagnostic:
        """Build and emit the diagnostic to the emitter."""
        diagnostic = self.build()
        self._emitter.add_diagnostic(diagnostic)
        return diagnostic


# =============================================================================
# Diagnostic Emitter
# =============================================================================


class DiagnosticEmitter:
    """
    Collects and renders diagnostics for a source file.

    Usage:
        emitter = DiagnosticEmitter(source, "example.cf")
        emitter.error(ErrorCode.E0201, "unexpected token", span).emit()
        print(emitter.render_all())
    """

    def __init__(self, source: str, filename: str = "<input>") -> None:
        self.source = source
        self.filename = filename
        self.diagnostics: list[Diagnostic] = []

    def add_diagnostic(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(diagnostic)

    def error(
        self, code: str, message: str, span: Optional[SourceSpan] = None
    ) -> DiagnosticBuilder:
        """Create an error diagnostic builder."""
        return DiagnosticBuilder(self, code, DiagnosticLevel.ERROR, message, span)

    def render_all(self, use_color: bool = True) -> str:
        """Render all diagnostics as a single string."""
        return "\n\n".join(d.render(self.source, use_color) for d in self.diagnostics)


# =============================================================================
# String Similarity (Levenshtein Distance)
# =============================================================================


def levenshtein_distance(s1: str, s2: str) -> int:
    """
    Calculate the Levenshtein (edit) distance between two strings.

    Args:
        s1: First string
        s2: Second string

    Returns:
        The minimum number of single-character insertions, deletions or
        substitutions turning one string into the other
    """
    if len(s1) < len(s2):
        return levenshtein_distance(s2, s1)

    if len(s2) == 0:
        return len(s1)

    previous_row = list(range(len(s2) + 1))

    for i, c1 in enumerate(s1):
        current_row = [i + 1]
        for j, c2 in enumerate(s2):
            insertions = previous_row[j + 1] + 1
            deletions = current_row[j] + 1
            substitutions = previous_row[j] + (c1 != c2)
            current_row.append(min(insertions, deletions, substitutions))
        previous_row = current_row

    return previous_row[-1]


def suggest_similar(
    name: str,
    candidates: Iterable[str],
    max_distance: int = 2,
    max_suggestions: int = 3,
) -> list[str]:
    """
    Find names close to `name` for "did you mean?" hints.

    Args:
        name: The name to find suggestions for
        candidates: Valid names to compare against
        max_distance: Maximum edit distance to consider
        max_suggestions: Maximum number of suggestions to return

    Returns:
        Similar names, closest first
    """
    scored = []
    for candidate in candidates:
        if candidate == name:
            continue
        if abs(len(candidate) - len(name)) > max_distance:
            continue

        distance = levenshtein_distance(name.lower(), candidate.lower())
        if distance <= max_distance:
            scored.append((candidate, distance))

    scored.sort(key=lambda x: (x[1], x[0]))

    return [candidate for candidate, _ in scored[:max_suggestions]]


# =============================================================================
# Helper Functions for Common Diagnostics
# =============================================================================


def create_unexpected_token_diagnostic(
    emitter: DiagnosticEmitter,
    expected: str,
    found: str,
    span: SourceSpan,
) -> Diagnostic:
    """Create a diagnostic for an unexpected token."""
    return emitter.error(
        ErrorCode.E0201,
        f"expected {expected}, found {found}",
        span,
    ).emit()


def create_missing_token_diagnostic(
    emitter: DiagnosticEmitter,
    message: str,
    span: SourceSpan,
    hint: Optional[str] = None,
) -> Diagnostic:
    """Create a diagnostic for a required token that is absent."""
    builder = emitter.error(ErrorCode.E0203, message, span)
    if hint:
        builder.help(hint)
    return builder.emit()


def create_unclosed_delimiter_diagnostic(
    emitter: DiagnosticEmitter,
    delimiter: str,
    open_span: SourceSpan,
    error_span: SourceSpan,
) -> Diagnostic:
    """Create a diagnostic for an unclosed delimiter."""
    builder = emitter.error(
        ErrorCode.E0202,
        f"unclosed delimiter '{delimiter}'",
        error_span,
    )
    builder.secondary_label(open_span, f"unclosed '{delimiter}' starts here")
    builder.help(f"add matching closing '{_matching_delimiter(delimiter)}'")
    return builder.emit()


def create_unexpected_character_diagnostic(
    emitter: DiagnosticEmitter,
    char: str,
    span: SourceSpan,
) -> Diagnostic:
    """Create a diagnostic for a character no token can start with."""
    return emitter.error(
        ErrorCode.E0101,
        f"unexpected character {char!r}",
        span,
    ).emit()


def create_unterminated_string_diagnostic(
    emitter: DiagnosticEmitter,
    span: SourceSpan,
) -> Diagnostic:
    """Create a diagnostic for a string literal that runs into end of input."""
    builder = emitter.error(ErrorCode.E0102, "unterminated string literal", span)
    builder.note("the string runs to the end of the input")
    builder.help("add a closing '\"'")
    return builder.emit()


def _matching_delimiter(opening: str) -> str:
    matches = {"(": ")", "[": "]", "{": "}"}
    return matches.get(opening, opening)


__all__ = [
    "ErrorCode",
    "DiagnosticLevel",
    "SourceSpan",
    "DiagnosticLabel",
    "Diagnostic",
    "DiagnosticBuilder",
    "DiagnosticEmitter",
    "levenshtein_distance",
    "suggest_similar",
    "create_unexpected_token_diagnostic",
    "create_missing_token_diagnostic",
    "create_unclosed_delimiter_diagnostic",
    "create_unexpected_character_diagnostic",
    "create_unterminated_string_diagnostic",
]
