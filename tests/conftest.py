"""
Pytest configuration and shared fixtures for cflat tests.
"""

import pytest

from cflat.compiler import ParseResult
from cflat.compiler import parse_source as run_parse_source
from cflat.compiler.ast_nodes import ASTNode, FunctionDeclaration, Program
from cflat.compiler.lexer import Lexer
from cflat.compiler.parser import Parser
from cflat.compiler.tokens import Token


@pytest.fixture
def lexer_factory():
    """Factory fixture for creating lexers."""

    def _create_lexer(source: str, filename: str = "test.cf") -> Lexer:
        return Lexer(source, filename)

    return _create_lexer


@pytest.fixture
def parser_factory(lexer_factory):
    """Factory fixture for creating parsers from source."""

    def _create_parser(source: str) -> Parser:
        lexer = lexer_factory(source)
        tokens = lexer.tokenize()
        return Parser(tokens, source, "test.cf")

    return _create_parser


@pytest.fixture
def tokenize(lexer_factory):
    """Fixture to tokenize source code."""

    def _tokenize(source: str) -> list[Token]:
        lexer = lexer_factory(source)
        return lexer.tokenize()

    return _tokenize


@pytest.fixture
def parse(parser_factory):
    """Fixture to parse source code into AST."""

    def _parse(source: str) -> Program:
        parser = parser_factory(source)
        return parser.parse()

    return _parse


@pytest.fixture
def parse_source():
    """Fixture running the whole front end, returning a ParseResult."""

    def _parse_source(source: str) -> ParseResult:
        return run_parse_source(source, "test.cf")

    return _parse_source


@pytest.fixture
def parse_body(parse):
    """
    Parse statements wrapped in `void main() { ... }`.

    Returns the statements of the body block.
    """

    def _parse_body(body: str) -> tuple[ASTNode, ...]:
        program = parse(f"void main() {{ {body} }}")
        function: FunctionDeclaration = program.declarations[0]
        return function.body.statements

    return _parse_body


@pytest.fixture
def parse_expr(parse_body):
    """Parse a single expression through `return <expr>;`."""

    def _parse_expr(expr: str) -> ASTNode:
        (statement,) = parse_body(f"return {expr};")
        return statement.expr

    return _parse_expr
