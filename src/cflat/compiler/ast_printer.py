"""
Debug dumps of tokens and syntax trees.

Used by `cflat tokens` and `cflat ast`. The output format is meant for
people reading it, not for other tools.
"""

from typing import Iterable

from cflat.compiler.ast_nodes import (
    ASTNode,
    BaseASTVisitor,
    BinaryOperation,
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
    VariableAssignment,
    VariableCall,
    VariableDeclaration,
    WhileLoopStatement,
)
from cflat.compiler.tokens import Token

INDENT = "  "


class ASTPrinter(BaseASTVisitor):
    """
    Renders a tree one node per line, children indented by two spaces.

    Example:
        FunctionDeclaration int32 add(int32 a, int32 b)
          ScopeDeclaration
            ReturnStatement
              BinaryOperation +
                VariableCall a
                VariableCall b
    """

    def __init__(self) -> None:
        self._lines: list[str] = []
        self._depth = 0

    def render(self, node: ASTNode) -> str:
        self._lines = []
        self._depth = 0
        self.visit(node)
        return "\n".join(self._lines)

    def _emit(self, text: str) -> None:
        self._lines.append(f"{INDENT * self._depth}{text}")

    def _child(self, node: ASTNode, label: str = "") -> None:
        self._depth += 1
        if label:
            self._emit(label)
            self._depth += 1
            self.visit(node)
            self._depth -= 1
        else:
            self.visit(node)
        self._depth -= 1

    def visit_program(self, node: Program) -> None:
        self._emit(f"Program ({len(node.declarations)} declarations)")
        for declaration in node.declarations:
            self._child(declaration)

    def visit_function_declaration(self, node: FunctionDeclaration) -> None:
        params = ", ".join(f"{ptype} {name}" for ptype, name in node.parameters)
        self._emit(f"FunctionDeclaration {node.return_type} {node.identifier}({params})")
        self._child(node.body)

    def visit_empty_statement(self, node: EmptyStatement) -> None:
        self._emit("EmptyStatement")

    def visit_variable_declaration(self, node: VariableDeclaration) -> None:
        self._emit(f"VariableDeclaration {node.type_name} {node.identifier}")
        self._child(node.value)

    def visit_variable_assignment(self, node: VariableAssignment) -> None:
        self._emit(f"VariableAssignment {node.identifier}")
        self._child(node.value)

    def visit_scope_declaration(self, node: ScopeDeclaration) -> None:
        self._emit("ScopeDeclaration")
        for stmt in node.statements:
            self._child(stmt)

    def visit_conditional_statement(self, node: ConditionalStatement) -> None:
        self._emit("ConditionalStatement")
        self._child(node.condition, "condition:")
        self._child(node.pass_statement, "then:")
        if node.fail_statement is not None:
            self._child(node.fail_statement, "else:")

    def visit_while_loop_statement(self, node: WhileLoopStatement) -> None:
        self._emit("WhileLoopStatement")
        self._child(node.condition, "condition:")
        self._child(node.body, "body:")

    def visit_return_statement(self, node: ReturnStatement) -> None:
        self._emit("ReturnStatement")
        if not isinstance(node.expr, EmptyStatement):
            self._child(node.expr)

    def visit_function_call(self, node: FunctionCall) -> None:
        self._emit(f"FunctionCall {node.identifier}")
        for arg in node.args:
            self._child(arg)

    def visit_variable_call(self, node: VariableCall) -> None:
        self._emit(f"VariableCall {node.identifier}")

    def visit_binary_operation(self, node: BinaryOperation) -> None:
        self._emit(f"BinaryOperation {node.op}")
        self._child(node.left)
        self._child(node.right)

    def visit_unary_operation(self, node: UnaryOperation) -> None:
        self._emit(f"UnaryOperation {node.op}")
        self._child(node.operand)

    def visit_cast_operation(self, node: CastOperation) -> None:
        self._emit(f"CastOperation as {node.target_type}")
        self._child(node.operand)

    def visit_integer_literal(self, node: IntegerLiteral) -> None:
        self._emit(f"IntegerLiteral {node.text}")

    def visit_float_literal(self, node: FloatLiteral) -> None:
        self._emit(f"FloatLiteral {node.text}")

    def visit_boolean_literal(self, node: BooleanLiteral) -> None:
        self._emit(f"BooleanLiteral {'true' if node.value else 'false'}")

    def visit_string_literal(self, node: StringLiteral) -> None:
        self._emit(f'StringLiteral "{node.text}"')


def format_ast(node: ASTNode) -> str:
    """Render `node` and its subtree as indented text."""
    return ASTPrinter().render(node)


def format_tokens(tokens: Iterable[Token]) -> str:
    """One `(category): 'value'` line per token."""
    return "\n".join(
        f"({token.category.name.lower()}): '{token.value}'" for token in tokens
    )
