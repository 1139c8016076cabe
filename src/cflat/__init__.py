"""
cflat - front end for a small C-like scripting language.

Turns program text into a syntax tree of function declarations: a
maximal-munch tokenizer feeds a recursive descent parser, and the first
lexical or syntax error aborts the parse.
"""

from cflat.compiler import ParseResult, parse_file, parse_source
from cflat.compiler.lexer import Lexer
from cflat.compiler.parser import Parser

__version__ = "0.1.0"
__all__ = [
    "parse_source",
    "parse_file",
    "ParseResult",
    "Lexer",
    "Parser",
]
