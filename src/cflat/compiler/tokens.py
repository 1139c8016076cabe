"""
Token definitions for the cflat lexer.

This module defines the token categories recognized by the cflat language
and the fixed lexeme tables (keywords, operators, punctuators) the lexer
classifies against. Only membership in these tables matters.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional

from cflat.utils.errors import SourceLocation


class TokenCategory(Enum):
    """Enumeration of all token categories in cflat."""

    PUNCTUATOR = auto()
    KEYWORD = auto()
    IDENTIFIER = auto()
    OPERATOR = auto()

    # Literals
    INTEGER_LITERAL = auto()
    FLOAT_LITERAL = auto()
    BOOLEAN_LITERAL = auto()
    STRING_LITERAL = auto()

    # Reserved; no scanning rule produces these
    LINE_COMMENT = auto()
    BLOCK_COMMENT = auto()
    UNKNOWN = auto()

    # Parser-side end-of-input sentinel, never produced by the lexer
    END_OF_INPUT = auto()


KEYWORDS: frozenset[str] = frozenset({
    "let",
    "var",
    "const",
    "function",
    "return",
    "true",
    "false",
    "if",
    "else",
    "for",
    "while",
    "break",
    "continue",
})

BOOLEAN_LITERALS: frozenset[str] = frozenset({"true", "false"})

OPERATORS: frozenset[str] = frozenset({
    "=",
    "!",
    "+",
    "-",
    "*",
    "/",
    "%",
    "+=",
    "-=",
    "*=",
    "/=",
    "%=",
    "==",
    "!=",
    "<",
    "<=",
    ">",
    ">=",
})

PUNCTUATORS: frozenset[str] = frozenset({
    ";",
    ".",
    ",",
    "(",
    ")",
    "{",
    "}",
    "[",
    "]",
})

# Operators that start an assignment statement when they follow an identifier
ASSIGNMENT_OPERATORS: frozenset[str] = frozenset({"=", "+=", "-=", "*=", "/=", "%="})

# Compound assignment -> the binary operator it desugars to
COMPOUND_ASSIGNMENT_OPERATORS: dict[str, str] = {
    "+=": "+",
    "-=": "-",
    "*=": "*",
    "/=": "/",
    "%=": "%",
}

# Return type accepted for functions that return nothing
VOID_TYPE = "void"

# Contextual word introducing a cast suffix; lexed as an identifier
CAST_KEYWORD = "as"


@dataclass(frozen=True, slots=True)
class Token:
    """
    A single classified token.

    Attributes:
        category: The category of this token
        value: The exact matched text (string literals exclude their quotes)
        location: Source location of the first character; ignored by equality
    """

    category: TokenCategory
    value: str
    location: Optional[SourceLocation] = field(default=None, compare=False)

    def __repr__(self) -> str:
        if self.location is not None:
            return f"Token({self.category.name}, {self.value!r}, {self.location})"
        return f"Token({self.category.name}, {self.value!r})"

    @property
    def is_literal(self) -> bool:
        """Check if this token is an integer, float, boolean or string literal."""
        return self.category in {
            TokenCategory.INTEGER_LITERAL,
            TokenCategory.FLOAT_LITERAL,
            TokenCategory.BOOLEAN_LITERAL,
            TokenCategory.STRING_LITERAL,
        }

    @property
    def is_type_name(self) -> bool:
        """
        Check if this token can name a type.

        No primitive type names are reserved, so any identifier (including
        `void`) is accepted where a type is expected.
        """
        return self.category == TokenCategory.IDENTIFIER

    @property
    def is_end(self) -> bool:
        return self.category == TokenCategory.END_OF_INPUT

    def is_lexeme(self, *values: str) -> bool:
        """
        Check if this token's text is one of `values`.

        String literals never match: `"}"` is data, not a closing brace.
        """
        return self.category != TokenCategory.STRING_LITERAL and self.value in values
