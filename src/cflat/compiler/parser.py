"""
cflat Parser.

A recursive descent parser that turns the lexer's token list into an
Abstract Syntax Tree. Expressions are parsed through a cascade of
precedence levels, one method per level, lowest binding first:

    equality     == !=
    comparison   < <= > >=
    cast         expr as Type   (repeatable suffix)
    term         + -
    factor       * /
    remainder    %
    unary        - !            (prefix, nests right to left)
    primary      literals, calls, variables, ( expr )

Every binary level is left-associative. Errors are fatal: the first
structural violation raises ParserError and nothing built so far is
returned.

Blocks, parenthesized groups, call arguments and prefix operators may nest
at most MAX_NESTING_DEPTH levels deep; deeper input is rejected with a
ParserError rather than exhausting the interpreter stack.
"""

import logging
from typing import Callable, Optional

from cflat.compiler.ast_nodes import (
    ASTNode,
    BinaryOperation,
    BinaryOperator,
    BooleanLiteral,
    CastOperation,
    ConditionalStatement,
    EmptyStatement,
    FloatLiteral,
    FunctionCall,
    FunctionDeclaration,
    IntegerLiteral,
    Program,
    ReturnStatement,
    ScopeDeclaration,
    StringLiteral,
    UnaryOperation,
    UnaryOperator,
    VariableAssignment,
    VariableCall,
    VariableDeclaration,
    WhileLoopStatement,
)
from cflat.compiler.tokens import (
    ASSIGNMENT_OPERATORS,
    CAST_KEYWORD,
    COMPOUND_ASSIGNMENT_OPERATORS,
    KEYWORDS,
    Token,
    TokenCategory,
)
from cflat.utils.diagnostics import (
    Diagnostic,
    DiagnosticEmitter,
    ErrorCode,
    SourceSpan,
    create_missing_token_diagnostic,
    create_unclosed_delimiter_diagnostic,
    create_unexpected_token_diagnostic,
    suggest_similar,
)
from cflat.utils.errors import ParserError, SourceLocation

logger = logging.getLogger(__name__)

# Statement keywords worth suggesting when an identifier looks like a typo
STATEMENT_KEYWORDS: tuple[str, ...] = ("if", "else", "while", "return")

# Each level of expression grouping costs about fifteen Python frames
MAX_NESTING_DEPTH = 48


class Parser:
    """
    Recursive descent parser for cflat.

    Parses a list of tokens into a Program of function declarations.

    Usage:
        parser = Parser(tokens)
        program = parser.parse()
    """

    def __init__(self, tokens: list[Token], source: str = "",
                 filename: str = "<input>") -> None:
        """
        Initialize the parser.

        Args:
            tokens: List of tokens from the lexer
            source: Optional source text, enables rich diagnostics
            filename: Optional filename for error reporting
        """
        self.tokens = tokens
        self.pos = 0
        self._depth = 0
        self._source = source
        self._filename = filename
        self._emitter: Optional[DiagnosticEmitter] = None
        self.diagnostics: list[Diagnostic] = []
        self._end = Token(TokenCategory.END_OF_INPUT, "", self._end_location())

        if source:
            self._emitter = DiagnosticEmitter(source, filename)

    def _end_location(self) -> Optional[SourceLocation]:
        """Location just past the last token, used by the end-of-input sentinel."""
        if not self.tokens:
            return SourceLocation(1, 1, 0, self._filename)
        last = self.tokens[-1]
        if last.location is None:
            return None
        width = len(last.value)
        if last.category == TokenCategory.STRING_LITERAL:
            width += 2
        return SourceLocation(
            line=last.location.line,
            column=last.location.column + width,
            offset=last.location.offset + width,
            filename=last.location.filename,
        )

    # -------------------------------------------------------------------------
    # Cursor primitives
    # -------------------------------------------------------------------------

    def _lookahead(self, offset: int) -> Token:
        """Token `offset` places after the cursor, or the end sentinel."""
        pos = self.pos + offset
        if pos >= len(self.tokens):
            return self._end
        return self.tokens[pos]

    def _peek(self) -> Token:
        """The current token."""
        return self._lookahead(0)

    def _next(self) -> Token:
        """The token after the current one."""
        return self._lookahead(1)

    def _is_at_end(self) -> bool:
        return self.pos >= len(self.tokens)

    def _advance(self) -> Token:
        """Consume and return the current token. Never moves past the end."""
        token = self._peek()
        if not self._is_at_end():
            self.pos += 1
        return token

    def _check(self, *values: str) -> bool:
        """Check if the current token's text is one of `values`."""
        return self._peek().is_lexeme(*values)

    def _match(self, *values: str) -> bool:
        """Consume the current token if its text is one of `values`."""
        if self._check(*values):
            self._advance()
            return True
        return False

    def _match_next(self, *values: str) -> bool:
        """Check the following token's text without moving."""
        return self._next().is_lexeme(*values)

    def _consume(self, value: str, message: str, hint: Optional[str] = None) -> Token:
        """Consume the current token if its text is `value`, else raise."""
        if self._check(value):
            return self._advance()
        raise self._error_missing(message, hint)

    def _consume_identifier(self, message: str) -> Token:
        if self._peek().category == TokenCategory.IDENTIFIER:
            return self._advance()
        raise self._error_unexpected(message, expected="identifier")

    def _consume_type_name(self, message: str) -> Token:
        if self._peek().is_type_name:
            return self._advance()
        raise self._error_unexpected(message, expected="type name")

    # -------------------------------------------------------------------------
    # Errors
    # -------------------------------------------------------------------------

    def _describe(self, token: Token) -> str:
        if token.is_end:
            return "end of input"
        if token.category == TokenCategory.STRING_LITERAL:
            return f'"{token.value}"'
        return f"'{token.value}'"

    def _span(self, token: Token) -> Optional[SourceSpan]:
        if token.location is None:
            return None
        width = len(token.value) or 1
        if token.category == TokenCategory.STRING_LITERAL:
            width += 2
        return SourceSpan.from_location(
            token.location.line, token.location.column, width, self._filename
        )

    def _error(self, message: str, code: str = ErrorCode.E0201) -> ParserError:
        """Create a parser error at the current token, recording a diagnostic."""
        token = self._peek()
        span = self._span(token)
        if self._emitter is not None and span is not None:
            self.diagnostics.append(self._emitter.error(code, message, span).emit())
        return ParserError(message, token.location)

    def _error_unexpected(self, message: str, expected: str) -> ParserError:
        token = self._peek()
        span = self._span(token)
        if self._emitter is not None and span is not None:
            self.diagnostics.append(
                create_unexpected_token_diagnostic(
                    self._emitter, expected, self._describe(token), span
                )
            )
        return ParserError(f"{message}, found {self._describe(token)}", token.location)

    def _error_missing(self, message: str, hint: Optional[str] = None) -> ParserError:
        token = self._peek()
        span = self._span(token)
        if self._emitter is not None and span is not None:
            self.diagnostics.append(
                create_missing_token_diagnostic(self._emitter, message, span, hint)
            )
        return ParserError(message, token.location)

    def _error_unclosed(self, delimiter: str, open_token: Token) -> ParserError:
        token = self._peek()
        error_span = self._span(token)
        open_span = self._span(open_token)
        if self._emitter is not None and error_span is not None and open_span is not None:
            self.diagnostics.append(
                create_unclosed_delimiter_diagnostic(
                    self._emitter, delimiter, open_span, error_span
                )
            )
        return ParserError("Expected '}' to close block", token.location)

    def _enter_nesting(self) -> None:
        """Open one nesting level; callers close it with `self._depth -= 1`."""
        if self._depth >= MAX_NESTING_DEPTH:
            raise self._error(
                f"Nesting too deep (more than {MAX_NESTING_DEPTH} levels)", ErrorCode.E0206
            )
        self._depth += 1

    def get_diagnostics(self) -> list[Diagnostic]:
        """Get the rich diagnostics recorded while parsing."""
        return self.diagnostics

    def render_diagnostics(self, use_color: bool = True) -> str:
        """Render recorded diagnostics as formatted text."""
        if self._emitter:
            return self._emitter.render_all(use_color)
        return ""

    # -------------------------------------------------------------------------
    # Program
    # -------------------------------------------------------------------------

    def parse(self) -> Program:
        """
        Parse the entire token list.

        Returns:
            The Program holding every top-level function declaration.

        Raises:
            ParserError: On the first syntax error.
        """
        self._depth = 0
        declarations: list[FunctionDeclaration] = []
        while not self._is_at_end():
            declarations.append(self._parse_global_statement())

        logger.debug("Parsed %d function declaration(s)", len(declarations))
        return Program(tuple(declarations))

    def _parse_global_statement(self) -> FunctionDeclaration:
        """
        Parse a top-level statement. Only function declarations are allowed:

            Type name ( ...
        """
        return_type = self._peek()
        if (
            return_type.is_type_name
            and self._next().category == TokenCategory.IDENTIFIER
            and self._lookahead(2).is_lexeme("(")
        ):
            self._advance()
            return self._parse_function_declaration(return_type)
        raise self._error("Unexpected global statement encountered", ErrorCode.E0205)

    def _parse_function_declaration(self, return_type: Token) -> FunctionDeclaration:
        """
        Parse the rest of a function declaration after its return type.

        Handles:
            int32 add(int32 a, int32 b) { ... }
            void tick() { ... }
        """
        name = self._consume_identifier("Expected function name")
        self._consume("(", "Expected '(' after function name")

        param_types: list[str] = []
        param_identifiers: list[str] = []
        if not self._check(")"):
            while True:
                param_types.append(self._consume_type_name("Expected parameter type").value)
                param_identifiers.append(
                    self._consume_identifier("Expected parameter name").value
                )
                if not self._match(","):
                    break
        self._consume(")", "Expected ')' after parameters")

        body = self._parse_statement()

        return FunctionDeclaration(
            return_type=return_type.value,
            identifier=name.value,
            param_types=tuple(param_types),
            param_identifiers=tuple(param_identifiers),
            body=body,
            location=return_type.location,
        )

    # -------------------------------------------------------------------------
    # Statements
    # -------------------------------------------------------------------------

    def _parse_statement(self) -> ASTNode:
        """Parse a single statement."""
        token = self._peek()

        if token.is_lexeme("{", "if", "else", "while"):
            self._enter_nesting()
            if token.is_lexeme("{"):
                statement: ASTNode = self._parse_scope()
            elif token.is_lexeme("while"):
                statement = self._parse_while()
            else:
                statement = self._parse_conditional()
            self._depth -= 1
            return statement
        if token.is_lexeme("return"):
            return self._parse_return()

        if token.category == TokenCategory.IDENTIFIER:
            if self._match_next(*ASSIGNMENT_OPERATORS):
                return self._parse_assignment()
            if self._match_next("("):
                return self._parse_call_statement()

        if (
            token.is_type_name
            and self._next().category == TokenCategory.IDENTIFIER
            and self._lookahead(2).is_lexeme("=")
        ):
            return self._parse_variable_declaration()

        if token.is_lexeme(";"):
            self._advance()
            return EmptyStatement(location=token.location)

        return self._parse_expression_statement()

    def _parse_scope(self) -> ScopeDeclaration:
        """
        Parse a block.

        Handles:
            { stmt1 stmt2 ... }
        """
        open_brace = self._advance()  # consume '{'

        statements: list[ASTNode] = []
        while not self._check("}"):
            if self._is_at_end():
                raise self._error_unclosed("{", open_brace)
            statements.append(self._parse_statement())

        self._consume("}", "Expected '}' to close block")
        return ScopeDeclaration(tuple(statements), location=open_brace.location)

    def _parse_conditional(self) -> ConditionalStatement:
        """
        Parse an if statement.

        Handles:
            if (cond) stmt
            if (cond) stmt else stmt
        """
        keyword = self._advance()  # consume 'if' (or a stray 'else')
        self._consume("(", f"Expected '(' after '{keyword.value}'")
        condition = self._parse_expression()
        self._consume(")", "Expected ')' after condition")

        pass_statement = self._parse_statement()
        fail_statement: Optional[ASTNode] = None
        if self._match("else"):
            fail_statement = self._parse_statement()

        return ConditionalStatement(
            condition=condition,
            pass_statement=pass_statement,
            fail_statement=fail_statement,
            location=keyword.location,
        )

    def _parse_while(self) -> WhileLoopStatement:
        """
        Parse a while loop.

        Handles:
            while (cond) stmt
        """
        keyword = self._advance()  # consume 'while'
        self._consume("(", "Expected '(' after 'while'")
        condition = self._parse_expression()
        self._consume(")", "Expected ')' after condition")
        body = self._parse_statement()

        return WhileLoopStatement(condition=condition, body=body, location=keyword.location)

    def _parse_return(self) -> ReturnStatement:
        """Parse `return;` or `return expr;`."""
        keyword = self._advance()  # consume 'return'

        expr: ASTNode
        if self._check(";"):
            expr = EmptyStatement(location=self._peek().location)
        else:
            expr = self._parse_expression()
        self._consume(";", "Expected ';' after return statement")

        return ReturnStatement(expr, location=keyword.location)

    def _parse_assignment(self) -> VariableAssignment:
        """
        Parse an assignment, desugaring compound operators.

        Handles:
            x = expr;
            x += expr;    stored as x = x + expr
        """
        name = self._advance()
        operator = self._advance()
        value = self._parse_expression()
        self._consume(";", "Expected ';' after assignment")

        if operator.value in COMPOUND_ASSIGNMENT_OPERATORS:
            value = BinaryOperation(
                left=VariableCall(name.value, location=name.location),
                op=BinaryOperator(COMPOUND_ASSIGNMENT_OPERATORS[operator.value]),
                right=value,
                location=operator.location,
            )

        return VariableAssignment(name.value, value, location=name.location)

    def _parse_call_statement(self) -> FunctionCall:
        """Parse `name(args);`."""
        call = self._parse_call()
        self._consume(
            ";",
            "Expected ';' after function call",
            hint=self._keyword_hint(call.identifier),
        )
        return call

    def _parse_variable_declaration(self) -> VariableDeclaration:
        """
        Parse a typed declaration.

        Handles:
            int32 x = expr;
        """
        type_name = self._advance()
        name = self._advance()
        self._consume("=", "Expected '=' in declaration")
        value = self._parse_expression()
        self._consume(";", "Expected ';' after declaration")

        return VariableDeclaration(
            type_name=type_name.value,
            identifier=name.value,
            value=value,
            location=type_name.location,
        )

    def _parse_expression_statement(self) -> ASTNode:
        """Parse an expression used as a statement. The `;` is required."""
        expr = self._parse_expression()
        self._consume(";", "Expected ';' after expression")
        return expr

    def _keyword_hint(self, word: str) -> Optional[str]:
        matches = suggest_similar(word, STATEMENT_KEYWORDS, max_distance=2, max_suggestions=1)
        if matches and word not in KEYWORDS:
            return f"did you mean '{matches[0]}'?"
        return None

    # -------------------------------------------------------------------------
    # Expressions
    # -------------------------------------------------------------------------

    def _parse_expression(self) -> ASTNode:
        """Parse an expression (entry point of the precedence cascade)."""
        return self._parse_equality()

    def _parse_binary_level(
        self, operators: tuple[str, ...], operand: Callable[[], ASTNode]
    ) -> ASTNode:
        """Parse one left-associative level: operand (op operand)*."""
        expr = operand()

        while self._check(*operators):
            operator = self._advance()
            right = operand()
            expr = BinaryOperation(
                left=expr,
                op=BinaryOperator(operator.value),
                right=right,
                location=operator.location,
            )

        return expr

    def _parse_equality(self) -> ASTNode:
        return self._parse_binary_level(("==", "!="), self._parse_comparison)

    def _parse_comparison(self) -> ASTNode:
        return self._parse_binary_level(("<", "<=", ">", ">="), self._parse_cast)

    def _parse_cast(self) -> ASTNode:
        """
        Parse cast suffixes. Binds looser than arithmetic:

            a + b as int32    parses as    (a + b) as int32
        """
        expr = self._parse_term()

        while self._check(CAST_KEYWORD):
            keyword = self._advance()
            target = self._consume_type_name(f"Expected type name after '{CAST_KEYWORD}'")
            expr = CastOperation(expr, target.value, location=keyword.location)

        return expr

    def _parse_term(self) -> ASTNode:
        return self._parse_binary_level(("+", "-"), self._parse_factor)

    def _parse_factor(self) -> ASTNode:
        return self._parse_binary_level(("*", "/"), self._parse_remainder)

    def _parse_remainder(self) -> ASTNode:
        return self._parse_binary_level(("%",), self._parse_unary)

    def _parse_unary(self) -> ASTNode:
        """Parse prefix `-` and `!`; they nest (`--x`, `!!x`)."""
        operators: list[Token] = []
        while self._check("-", "!"):
            self._enter_nesting()
            operators.append(self._advance())

        expr = self._parse_primary()
        self._depth -= len(operators)
        for operator in reversed(operators):
            expr = UnaryOperation(
                UnaryOperator(operator.value), expr, location=operator.location
            )
        return expr

    def _parse_primary(self) -> ASTNode:
        """Parse literals, calls, variable references and grouping."""
        token = self._peek()

        if token.category == TokenCategory.INTEGER_LITERAL:
            self._advance()
            return IntegerLiteral(token.value, location=token.location)
        if token.category == TokenCategory.FLOAT_LITERAL:
            self._advance()
            return FloatLiteral(token.value, location=token.location)
        if token.category == TokenCategory.BOOLEAN_LITERAL:
            self._advance()
            return BooleanLiteral(token.value == "true", location=token.location)
        if token.category == TokenCategory.STRING_LITERAL:
            self._advance()
            return StringLiteral(token.value, location=token.location)

        if token.category == TokenCategory.IDENTIFIER:
            if self._match_next("("):
                self._enter_nesting()
                call = self._parse_call()
                self._depth -= 1
                return call
            self._advance()
            return VariableCall(token.value, location=token.location)

        if self._check("("):
            self._enter_nesting()
            self._advance()
            expr = self._parse_expression()
            self._consume(")", "Expected ')' after expression")
            self._depth -= 1
            return expr

        if token.is_end:
            raise self._error("Unexpected end of input", ErrorCode.E0204)
        raise self._error(f"Unexpected token '{token.value}'", ErrorCode.E0204)

    def _parse_call(self) -> FunctionCall:
        """
        Parse `name(arg, ...)` without a trailing `;`.

        A single trailing comma before `)` is tolerated.
        """
        name = self._advance()
        self._advance()  # consume '('

        args: list[ASTNode] = []
        while not self._check(")"):
            args.append(self._parse_expression())
            if not self._check(")"):
                self._consume(",", "Expected ',' or ')' in argument list")
        self._consume(")", "Expected ')' after arguments")

        return FunctionCall(name.value, tuple(args), location=name.location)


def parse(tokens: list[Token]) -> Program:
    """
    Convenience function to parse tokens into an AST.

    Args:
        tokens: List of tokens from the lexer

    Returns:
        The root Program node
    """
    return Parser(tokens).parse()
