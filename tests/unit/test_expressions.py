"""
Unit tests for expression parsing: precedence, associativity and primaries.
"""

import pytest

from cflat.compiler.ast_nodes import (
    BinaryOperation,
    BinaryOperator,
    BooleanLiteral,
    CastOperation,
    FloatLiteral,
    FunctionCall,
    IntegerLiteral,
    StringLiteral,
    UnaryOperation,
    UnaryOperator,
    VariableCall,
)
from cflat.utils.errors import ParserError


def binop(left, op: str, right) -> BinaryOperation:
    return BinaryOperation(left, BinaryOperator(op), right)


def var(name: str) -> VariableCall:
    return VariableCall(name)


def num(text: str) -> IntegerLiteral:
    return IntegerLiteral(text)


class TestPrecedence:
    """Each level binds tighter than the one before it."""

    def test_multiplication_over_addition(self, parse_expr):
        assert parse_expr("1 + 2 * 3") == binop(num("1"), "+", binop(num("2"), "*", num("3")))

    def test_grouping_overrides_precedence(self, parse_expr):
        assert parse_expr("(1 + 2) * 3") == binop(binop(num("1"), "+", num("2")), "*", num("3"))

    def test_comparison_over_equality(self, parse_expr):
        assert parse_expr("a < b == c > d") == binop(
            binop(var("a"), "<", var("b")), "==", binop(var("c"), ">", var("d"))
        )

    def test_addition_over_comparison(self, parse_expr):
        assert parse_expr("a + 1 <= b") == binop(binop(var("a"), "+", num("1")), "<=", var("b"))

    def test_remainder_binds_tighter_than_multiplication(self, parse_expr):
        assert parse_expr("a * b % c") == binop(var("a"), "*", binop(var("b"), "%", var("c")))

    def test_unary_binds_tightest(self, parse_expr):
        assert parse_expr("-x * y") == binop(
            UnaryOperation(UnaryOperator.NEG, var("x")), "*", var("y")
        )

    def test_remainder_over_unary_operand(self, parse_expr):
        assert parse_expr("-a % b") == binop(
            UnaryOperation(UnaryOperator.NEG, var("a")), "%", var("b")
        )


class TestAssociativity:
    """Binary levels fold to the left."""

    def test_subtraction(self, parse_expr):
        assert parse_expr("1 - 2 - 3") == binop(binop(num("1"), "-", num("2")), "-", num("3"))

    def test_division(self, parse_expr):
        assert parse_expr("a / b / c") == binop(binop(var("a"), "/", var("b")), "/", var("c"))

    def test_equality(self, parse_expr):
        assert parse_expr("a == b != c") == binop(binop(var("a"), "==", var("b")), "!=", var("c"))

    def test_remainder(self, parse_expr):
        assert parse_expr("a % b % c") == binop(binop(var("a"), "%", var("b")), "%", var("c"))

    @pytest.mark.parametrize("op", ["+", "-", "*", "/", "%", "<", "<=", ">", ">=", "==", "!="])
    def test_every_operator_maps_to_its_enum(self, parse_expr, op):
        assert parse_expr(f"a {op} b").op == BinaryOperator(op)


class TestCast:
    """The `as` suffix sits between comparison and addition."""

    def test_cast_wraps_sum(self, parse_expr):
        assert parse_expr("a + b as int32") == CastOperation(
            binop(var("a"), "+", var("b")), "int32"
        )

    def test_comparison_wraps_cast(self, parse_expr):
        assert parse_expr("a < b as int32") == binop(
            var("a"), "<", CastOperation(var("b"), "int32")
        )

    def test_cast_chain(self, parse_expr):
        assert parse_expr("x as int32 as float64") == CastOperation(
            CastOperation(var("x"), "int32"), "float64"
        )

    def test_grouped_cast_in_product(self, parse_expr):
        assert parse_expr("(x as float64) * 2") == binop(
            CastOperation(var("x"), "float64"), "*", num("2")
        )

    def test_cast_target_must_be_a_type_name(self, parse_expr):
        with pytest.raises(ParserError, match="Expected type name after 'as'"):
            parse_expr("x as 5")


class TestUnary:
    """Prefix operators are right-recursive."""

    def test_double_negation(self, parse_expr):
        assert parse_expr("--x") == UnaryOperation(
            UnaryOperator.NEG, UnaryOperation(UnaryOperator.NEG, var("x"))
        )

    def test_double_not(self, parse_expr):
        assert parse_expr("!!done") == UnaryOperation(
            UnaryOperator.NOT, UnaryOperation(UnaryOperator.NOT, var("done"))
        )

    def test_negated_group(self, parse_expr):
        assert parse_expr("-(a + b)") == UnaryOperation(
            UnaryOperator.NEG, binop(var("a"), "+", var("b"))
        )


class TestPrimary:
    """Literals, calls, variables and grouping."""

    def test_integer_keeps_text(self, parse_expr):
        assert parse_expr("007") == IntegerLiteral("007")

    def test_float(self, parse_expr):
        assert parse_expr("12.5") == FloatLiteral("12.5")

    @pytest.mark.parametrize("text, value", [("true", True), ("false", False)])
    def test_boolean(self, parse_expr, text, value):
        assert parse_expr(text) == BooleanLiteral(value)

    def test_string(self, parse_expr):
        assert parse_expr('"hello world"') == StringLiteral("hello world")

    def test_variable(self, parse_expr):
        assert parse_expr("count") == VariableCall("count")

    def test_call_without_arguments(self, parse_expr):
        assert parse_expr("now()") == FunctionCall("now", ())

    def test_nested_calls(self, parse_expr):
        assert parse_expr("f(1, g(x) + 2)") == FunctionCall(
            "f", (num("1"), binop(FunctionCall("g", (var("x"),)), "+", num("2")))
        )

    def test_call_tolerates_trailing_comma(self, parse_expr):
        assert parse_expr("f(1, 2,)") == FunctionCall("f", (num("1"), num("2")))

    def test_call_rejects_leading_comma(self, parse_expr):
        with pytest.raises(ParserError, match="Unexpected token ','"):
            parse_expr("f(,)")

    def test_call_needs_separators(self, parse_expr):
        with pytest.raises(ParserError, match="Expected ',' or '\\)' in argument list"):
            parse_expr("f(1 2)")

    def test_unclosed_group(self, parse_expr):
        with pytest.raises(ParserError, match="Expected '\\)' after expression"):
            parse_expr("(1 + 2")

    def test_missing_operand(self, parse_expr):
        with pytest.raises(ParserError, match="Unexpected token ';'"):
            parse_expr("1 +")

    def test_keyword_is_not_an_expression(self, parse_expr):
        with pytest.raises(ParserError, match="Unexpected token 'while'"):
            parse_expr("while")

    def test_end_of_input(self, parse):
        with pytest.raises(ParserError, match="Unexpected end of input"):
            parse("void f() { return 1 +")


class TestLocations:
    """Nodes remember where they start; equality ignores it."""

    def test_binary_location_is_the_operator(self, parse_expr):
        expr = parse_expr("a + b")
        assert expr.location.column == 24

    def test_literal_location(self, parse_expr):
        expr = parse_expr("42")
        assert (expr.location.line, expr.location.column) == (1, 22)
