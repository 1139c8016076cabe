"""
cflat Lexer (Tokenizer).

Transforms cflat source text into a list of classified tokens in a single
left-to-right pass with one character of lookahead.
"""

import logging
from typing import Iterator, Optional

from cflat.compiler.tokens import (
    BOOLEAN_LITERALS,
    KEYWORDS,
    OPERATORS,
    PUNCTUATORS,
    Token,
    TokenCategory,
)
from cflat.utils.errors import LexerError, SourceLocation

logger = logging.getLogger(__name__)

_DIGITS = "0123456789"
_WHITESPACE = " \t\n\r\v\f"


def _is_letter(char: Optional[str]) -> bool:
    return char is not None and char.isascii() and char.isalpha()


def _is_digit(char: Optional[str]) -> bool:
    return char is not None and char in _DIGITS


class Lexer:
    """
    Tokenizer for cflat source code.

    The lexer recognizes:
    - Identifiers, keywords and the boolean literals `true`/`false`
    - Integer and float literals (no sign, no exponent)
    - Operators, extended by maximal munch (`+=` is one token)
    - Punctuators
    - Double-quoted string literals, taken verbatim

    Any other character aborts the scan with a LexerError.

    Usage:
        lexer = Lexer(source_code)
        tokens = lexer.tokenize()
    """

    def __init__(self, source: str, filename: Optional[str] = None) -> None:
        """
        Initialize the lexer with source code.

        Args:
            source: The cflat source text to tokenize
            filename: Optional filename for error reporting
        """
        self.source = source
        self.filename = filename
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: list[Token] = []

        # Start of the current line, for error context
        self._line_start = 0

    @property
    def _current_char(self) -> Optional[str]:
        """Return the current character or None if at end."""
        if self.pos >= len(self.source):
            return None
        return self.source[self.pos]

    @property
    def _peek_char(self) -> Optional[str]:
        """Return the next character without consuming it."""
        peek_pos = self.pos + 1
        if peek_pos >= len(self.source):
            return None
        return self.source[peek_pos]

    def _location(self) -> SourceLocation:
        """Create a SourceLocation for the current position."""
        return SourceLocation(
            line=self.line,
            column=self.column,
            offset=self.pos,
            filename=self.filename,
        )

    def _line_text(self, line_start: int) -> str:
        end = self.source.find("\n", line_start)
        if end == -1:
            end = len(self.source)
        return self.source[line_start:end]

    def _current_line_text(self) -> str:
        """Extract the current line of source for error messages."""
        return self._line_text(self._line_start)

    def _advance(self) -> str:
        """Consume and return the current character."""
        char = self.source[self.pos]
        self.pos += 1

        if char == "\n":
            self.line += 1
            self.column = 1
            self._line_start = self.pos
        else:
            self.column += 1

        return char

    def _skip_whitespace(self) -> None:
        while self._current_char is not None and self._current_char in _WHITESPACE:
            self._advance()

    def _read_word(self) -> Token:
        """
        Read an identifier, keyword or boolean literal.

        Words start with a letter and continue with letters and digits.
        """
        start_loc = self._location()
        chars = [self._advance()]

        while _is_letter(self._current_char) or _is_digit(self._current_char):
            chars.append(self._advance())

        word = "".join(chars)

        if word in BOOLEAN_LITERALS:
            return Token(TokenCategory.BOOLEAN_LITERAL, word, start_loc)
        if word in KEYWORDS:
            return Token(TokenCategory.KEYWORD, word, start_loc)
        return Token(TokenCategory.IDENTIFIER, word, start_loc)

    def _read_number(self) -> Token:
        """
        Read an integer or float literal.

        A `.` only belongs to the number when a digit follows it, so `12.`
        is the integer `12` followed by the punctuator `.`.
        """
        start_loc = self._location()
        chars: list[str] = []

        while _is_digit(self._current_char):
            chars.append(self._advance())

        if self._current_char == "." and _is_digit(self._peek_char):
            chars.append(self._advance())
            while _is_digit(self._current_char):
                chars.append(self._advance())
            return Token(TokenCategory.FLOAT_LITERAL, "".join(chars), start_loc)

        return Token(TokenCategory.INTEGER_LITERAL, "".join(chars), start_loc)

    def _read_munched(self, table: frozenset[str], category: TokenCategory) -> Token:
        """Read the longest run of characters that stays a member of `table`."""
        start_loc = self._location()
        value = self._advance()

        while self._current_char is not None and value + self._current_char in table:
            value += self._advance()

        return Token(category, value, start_loc)

    def _read_string(self) -> Token:
        """
        Read a string literal.

        Characters are taken verbatim up to the next `"`; there are no
        escape sequences. The quotes are not part of the token value.
        """
        start_loc = self._location()
        start_line = self._line_start
        self._advance()  # opening quote

        chars: list[str] = []
        while True:
            if self._current_char is None:
                raise LexerError(
                    "Unterminated string literal",
                    start_loc,
                    self._line_text(start_line),
                )
            if self._current_char == '"':
                self._advance()  # closing quote
                break
            chars.append(self._advance())

        return Token(TokenCategory.STRING_LITERAL, "".join(chars), start_loc)

    def _next_token(self) -> Optional[Token]:
        """
        Extract the next token from the source.

        Returns:
            The next token, or None at end of source.
        """
        self._skip_whitespace()

        char = self._current_char
        if char is None:
            return None

        if _is_letter(char):
            return self._read_word()

        if _is_digit(char):
            return self._read_number()

        if char in OPERATORS:
            return self._read_munched(OPERATORS, TokenCategory.OPERATOR)

        if char in PUNCTUATORS:
            return self._read_munched(PUNCTUATORS, TokenCategory.PUNCTUATOR)

        if char == '"':
            return self._read_string()

        raise LexerError(
            f"Unexpected character: {char!r}",
            self._location(),
            self._current_line_text(),
        )

    def tokenize(self) -> list[Token]:
        """
        Tokenize the entire source.

        Returns:
            All tokens in source order. No end-of-input token is appended.

        Raises:
            LexerError: On an unrecognized character or an unterminated string.
        """
        self.tokens = []
        self.pos = 0
        self.line = 1
        self.column = 1
        self._line_start = 0

        while True:
            token = self._next_token()
            if token is None:
                break
            self.tokens.append(token)

        logger.debug("Tokenized %s: %d tokens", self.filename or "<input>", len(self.tokens))
        return self.tokens

    def __iter__(self) -> Iterator[Token]:
        if not self.tokens:
            self.tokenize()
        return iter(self.tokens)


def tokenize(source: str, filename: Optional[str] = None) -> list[Token]:
    """
    Convenience function to tokenize source code.

    Args:
        source: cflat source text
        filename: Optional filename for error reporting

    Returns:
        List of tokens
    """
    return Lexer(source, filename).tokenize()
