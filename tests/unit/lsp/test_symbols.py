"""Tests for cflat LSP document symbols."""

from lsprotocol import types

from cflat.lsp.symbols import (
    Location,
    Symbol,
    SymbolCollector,
    SymbolKind,
    get_document_symbols,
)
from cflat.utils.errors import SourceLocation


class TestSymbolCollector:
    def test_one_symbol_per_function(self, parse) -> None:
        program = parse("void a() {} int32 b(int32 x) { return x; }")
        symbols = SymbolCollector().collect(program)

        assert [s.name for s in symbols] == ["a", "b"]
        assert all(s.kind == SymbolKind.FUNCTION for s in symbols)
        assert symbols[0].children == []

    def test_parameters_are_children(self, parse) -> None:
        program = parse("int32 add(int32 a, float64 b) { return a; }")
        (function,) = SymbolCollector().collect(program)

        assert function.type_info == "int32 (int32 a, float64 b)"
        assert [(p.name, p.type_info) for p in function.children] == [
            ("a", "int32"),
            ("b", "float64"),
        ]
        assert all(p.kind == SymbolKind.PARAMETER for p in function.children)

    def test_local_declarations_are_not_symbols(self, parse) -> None:
        program = parse("void f() { int32 x = 1; }")
        (function,) = SymbolCollector().collect(program)
        assert function.children == []


class TestDocumentSymbols:
    def test_lsp_conversion(self, parse) -> None:
        program = parse("\nint32 add(int32 a, int32 b) { return a + b; }")
        (symbol,) = get_document_symbols(program)

        assert symbol.name == "add"
        assert symbol.kind == types.SymbolKind.Function
        assert symbol.range.start == types.Position(line=1, character=0)
        assert symbol.range.end == types.Position(line=1, character=9)
        assert [child.name for child in symbol.children] == ["a", "b"]
        assert symbol.children[0].kind == types.SymbolKind.Variable

    def test_function_without_parameters_has_no_children(self, parse) -> None:
        (symbol,) = get_document_symbols(parse("void f() {}"))
        assert symbol.children is None

    def test_symbol_without_location(self) -> None:
        symbol = Symbol(name="f", kind=SymbolKind.FUNCTION).to_document_symbol()
        assert symbol.range.end == types.Position(line=0, character=1)


class TestLocation:
    def test_from_source_is_zero_indexed(self) -> None:
        location = Location.from_source(SourceLocation(3, 5), width=4)
        assert (location.line, location.character) == (2, 4)
        assert (location.end_line, location.end_character) == (2, 8)

    def test_missing_location(self) -> None:
        location = Location.from_source(None, width=2)
        assert location.to_lsp_range() == types.Range(
            start=types.Position(line=0, character=0),
            end=types.Position(line=0, character=2),
        )
