"""
Abstract Syntax Tree (AST) node definitions for cflat.

The node set is closed: the grammar is fixed, so every construct the parser
can produce has a class here. Nodes are immutable and children are held in
tuples, which makes the tree a strict tree built bottom-up. A node only ever
reaches its parent fully constructed.

Literal nodes keep the source text; numeric interpretation belongs to the
evaluator. Source locations are carried for error reporting but ignored by
equality, so two trees compare equal when their structure does.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from cflat.utils.errors import SourceLocation


def _location_field() -> Any:
    return field(default=None, compare=False, repr=False, kw_only=True)


class ASTNode(ABC):
    """Base class for all AST nodes."""

    location: Optional[SourceLocation]

    @abstractmethod
    def accept(self, visitor: "ASTVisitor") -> Any:
        """Accept a visitor for tree traversal."""
        pass


class ASTVisitor(ABC):
    """
    Visitor pattern base class for AST traversal.

    Implement this to build AST consumers (printers, the evaluator, ...).
    """

    def visit(self, node: ASTNode) -> Any:
        """Dispatch to the appropriate visit method."""
        return node.accept(self)


class Statement(ASTNode):
    """Base class for statements."""

    pass


class Expression(ASTNode):
    """Base class for expressions. A bare expression may also stand as a statement."""

    pass


# -----------------------------------------------------------------------------
# Operators
# -----------------------------------------------------------------------------


class BinaryOperator(Enum):
    """Binary operators; values are the source spelling."""

    # Equality
    EQ = "=="
    NE = "!="

    # Comparison
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="

    # Arithmetic
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    MOD = "%"

    def __str__(self) -> str:
        return self.value


class UnaryOperator(Enum):
    """Prefix operators; values are the source spelling."""

    NEG = "-"
    NOT = "!"

    def __str__(self) -> str:
        return self.value


# -----------------------------------------------------------------------------
# Literals
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class IntegerLiteral(Expression):
    """An integer literal, stored as written (e.g. "42")."""

    text: str
    location: Optional[SourceLocation] = _location_field()

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_integer_literal(self)


@dataclass(frozen=True, slots=True)
class FloatLiteral(Expression):
    """A float literal, stored as written (e.g. "12.5")."""

    text: str
    location: Optional[SourceLocation] = _location_field()

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_float_literal(self)


@dataclass(frozen=True, slots=True)
class BooleanLiteral(Expression):
    """`true` or `false`."""

    value: bool
    location: Optional[SourceLocation] = _location_field()

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_boolean_literal(self)


@dataclass(frozen=True, slots=True)
class StringLiteral(Expression):
    """A string literal; `text` excludes the quotes."""

    text: str
    location: Optional[SourceLocation] = _location_field()

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_string_literal(self)


# -----------------------------------------------------------------------------
# Expressions
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class VariableCall(Expression):
    """
    A reference to a variable.

    Example:
        total
    """

    identifier: str
    location: Optional[SourceLocation] = _location_field()

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_variable_call(self)


@dataclass(frozen=True, slots=True)
class FunctionCall(Expression, Statement):
    """
    A call by name. Used both inside expressions and as a statement.

    Example:
        add(1, x * 2)
    """

    identifier: str
    args: tuple[ASTNode, ...] = ()
    location: Optional[SourceLocation] = _location_field()

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_function_call(self)


@dataclass(frozen=True, slots=True)
class BinaryOperation(Expression):
    """
    A binary operation.

    Example:
        a + b, x <= 10
    """

    left: ASTNode
    op: BinaryOperator
    right: ASTNode
    location: Optional[SourceLocation] = _location_field()

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_binary_operation(self)


@dataclass(frozen=True, slots=True)
class UnaryOperation(Expression):
    """
    A prefix operation.

    Example:
        -x, !done
    """

    op: UnaryOperator
    operand: ASTNode
    location: Optional[SourceLocation] = _location_field()

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_unary_operation(self)


@dataclass(frozen=True, slots=True)
class CastOperation(Expression):
    """
    A cast to a named type.

    Example:
        (a + b) as int32
    """

    operand: ASTNode
    target_type: str
    location: Optional[SourceLocation] = _location_field()

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_cast_operation(self)


# -----------------------------------------------------------------------------
# Statements
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class EmptyStatement(Statement):
    """A lone `;`, or the missing value of a bare `return;`."""

    location: Optional[SourceLocation] = _location_field()

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_empty_statement(self)


@dataclass(frozen=True, slots=True)
class VariableDeclaration(Statement):
    """
    A typed variable declaration. The type is kept as its name only.

    Example:
        int32 count = 0;
    """

    type_name: str
    identifier: str
    value: ASTNode
    location: Optional[SourceLocation] = _location_field()

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_variable_declaration(self)


@dataclass(frozen=True, slots=True)
class VariableAssignment(Statement):
    """
    An assignment. Compound forms arrive already desugared, so `x += 1`
    is stored as `x = x + 1`.
    """

    identifier: str
    value: ASTNode
    location: Optional[SourceLocation] = _location_field()

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_variable_assignment(self)


@dataclass(frozen=True, slots=True)
class ScopeDeclaration(Statement):
    """
    A block of statements forming a lexical scope.

    Example:
        { int32 x = 1; x += 2; }
    """

    statements: tuple[ASTNode, ...] = ()
    location: Optional[SourceLocation] = _location_field()

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_scope_declaration(self)


@dataclass(frozen=True, slots=True)
class ConditionalStatement(Statement):
    """
    An if statement with an optional else branch.

    Example:
        if (x > 0) { return x; } else { return -x; }
    """

    condition: ASTNode
    pass_statement: ASTNode
    fail_statement: Optional[ASTNode] = None
    location: Optional[SourceLocation] = _location_field()

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_conditional_statement(self)


@dataclass(frozen=True, slots=True)
class WhileLoopStatement(Statement):
    """
    A while loop.

    Example:
        while (i < 10) { i += 1; }
    """

    condition: ASTNode
    body: ASTNode
    location: Optional[SourceLocation] = _location_field()

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_while_loop_statement(self)


@dataclass(frozen=True, slots=True)
class ReturnStatement(Statement):
    """A return statement. `expr` is an EmptyStatement for a bare `return;`."""

    expr: ASTNode
    location: Optional[SourceLocation] = _location_field()

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_return_statement(self)


@dataclass(frozen=True, slots=True)
class FunctionDeclaration(Statement):
    """
    A top-level function declaration.

    Example:
        int32 add(int32 a, int32 b) { return a + b; }

    Attributes:
        return_type: Name of the return type (`void` or any identifier)
        identifier: Function name
        param_types: Parameter type names, parallel to `param_identifiers`
        param_identifiers: Parameter names
        body: The body statement, usually a ScopeDeclaration
    """

    return_type: str
    identifier: str
    param_types: tuple[str, ...]
    param_identifiers: tuple[str, ...]
    body: ASTNode
    location: Optional[SourceLocation] = _location_field()

    def __post_init__(self) -> None:
        if len(self.param_types) != len(self.param_identifiers):
            raise ValueError(
                f"function '{self.identifier}' has {len(self.param_types)} parameter "
                f"types but {len(self.param_identifiers)} parameter names"
            )

    @property
    def parameters(self) -> tuple[tuple[str, str], ...]:
        """(type, name) pairs in declaration order."""
        return tuple(zip(self.param_types, self.param_identifiers))

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_function_declaration(self)


# -----------------------------------------------------------------------------
# Program (Root Node)
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Program(ASTNode):
    """
    The root of a parsed source unit: its function declarations in order.
    """

    declarations: tuple[FunctionDeclaration, ...] = ()
    location: Optional[SourceLocation] = _location_field()

    def function(self, name: str) -> Optional[FunctionDeclaration]:
        """Find a declaration by name (first match)."""
        for declaration in self.declarations:
            if declaration.identifier == name:
                return declaration
        return None

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_program(self)


# -----------------------------------------------------------------------------
# Visitor with default implementations
# -----------------------------------------------------------------------------


class BaseASTVisitor(ASTVisitor):
    """
    Base visitor with default implementations that traverse children.

    Subclass this and override specific visit_* methods as needed.
    """

    def visit_program(self, node: Program) -> Any:
        for declaration in node.declarations:
            self.visit(declaration)

    def visit_function_declaration(self, node: FunctionDeclaration) -> Any:
        self.visit(node.body)

    # Statements
    def visit_empty_statement(self, node: EmptyStatement) -> Any:
        pass

    def visit_variable_declaration(self, node: VariableDeclaration) -> Any:
        self.visit(node.value)

    def visit_variable_assignment(self, node: VariableAssignment) -> Any:
        self.visit(node.value)

    def visit_scope_declaration(self, node: ScopeDeclaration) -> Any:
        for stmt in node.statements:
            self.visit(stmt)

    def visit_conditional_statement(self, node: ConditionalStatement) -> Any:
        self.visit(node.condition)
        self.visit(node.pass_statement)
        if node.fail_statement is not None:
            self.visit(node.fail_statement)

    def visit_while_loop_statement(self, node: WhileLoopStatement) -> Any:
        self.visit(node.condition)
        self.visit(node.body)

    def visit_return_statement(self, node: ReturnStatement) -> Any:
        self.visit(node.expr)

    # Expressions
    def visit_function_call(self, node: FunctionCall) -> Any:
        for arg in node.args:
            self.visit(arg)

    def visit_variable_call(self, node: VariableCall) -> Any:
        pass

    def visit_binary_operation(self, node: BinaryOperation) -> Any:
        self.visit(node.left)
        self.visit(node.right)

    def visit_unary_operation(self, node: UnaryOperation) -> Any:
        self.visit(node.operand)

    def visit_cast_operation(self, node: CastOperation) -> Any:
        self.visit(node.operand)

    # Literals
    def visit_integer_literal(self, node: IntegerLiteral) -> Any:
        pass

    def visit_float_literal(self, node: FloatLiteral) -> Any:
        pass

    def visit_boolean_literal(self, node: BooleanLiteral) -> Any:
        pass

    def visit_string_literal(self, node: StringLiteral) -> Any:
        pass
