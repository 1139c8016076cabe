"""
Document symbols for cflat LSP.

Collects the outline of a parsed document: one Function symbol per
top-level declaration, with its parameters as children.
"""

from dataclasses import dataclass, field
from enum import Enum, auto

from lsprotocol import types

from cflat.compiler.ast_nodes import BaseASTVisitor, FunctionDeclaration, Program
from cflat.utils.errors import SourceLocation


class SymbolKind(Enum):
    """Kind of symbol in the cflat language."""

    FUNCTION = auto()
    PARAMETER = auto()


SYMBOL_KIND_TO_LSP: dict[SymbolKind, types.SymbolKind] = {
    SymbolKind.FUNCTION: types.SymbolKind.Function,
    SymbolKind.PARAMETER: types.SymbolKind.Variable,
}


@dataclass
class Location:
    """Source range of a symbol, 0-indexed."""

    line: int
    character: int
    end_line: int | None = None
    end_character: int | None = None

    @classmethod
    def from_source(cls, location: SourceLocation | None, width: int = 1) -> "Location":
        """Convert a 1-indexed front-end location into an LSP-style one."""
        if location is None:
            return cls(0, 0, 0, width)
        line = max(0, location.line - 1)
        character = max(0, location.column - 1)
        return cls(line, character, line, character + max(1, width))

    def to_lsp_range(self) -> types.Range:
        """Convert to LSP Range type."""
        return types.Range(
            start=types.Position(line=self.line, character=self.character),
            end=types.Position(
                line=self.end_line if self.end_line is not None else self.line,
                character=self.end_character
                if self.end_character is not None
                else self.character + 1,
            ),
        )


@dataclass
class Symbol:
    """
    A named definition in a document.

    Attributes:
        name: The symbol's identifier name
        kind: Function or parameter
        type_info: Type as written, or a signature for functions
        location: Where the symbol is defined
        children: Child symbols (a function's parameters)
    """

    name: str
    kind: SymbolKind
    type_info: str | None = None
    location: Location | None = None
    children: list["Symbol"] = field(default_factory=list)

    def to_lsp_symbol_kind(self) -> types.SymbolKind:
        return SYMBOL_KIND_TO_LSP.get(self.kind, types.SymbolKind.Variable)

    def to_document_symbol(self) -> types.DocumentSymbol:
        """Convert to LSP DocumentSymbol."""
        if self.location is None:
            range_ = types.Range(
                start=types.Position(line=0, character=0),
                end=types.Position(line=0, character=len(self.name)),
            )
        else:
            range_ = self.location.to_lsp_range()

        children = [child.to_document_symbol() for child in self.children]

        return types.DocumentSymbol(
            name=self.name,
            kind=self.to_lsp_symbol_kind(),
            range=range_,
            selection_range=range_,
            detail=self.type_info,
            children=children if children else None,
        )


class SymbolCollector(BaseASTVisitor):
    """Walks a Program and records a Symbol per function declaration."""

    def __init__(self) -> None:
        self.symbols: list[Symbol] = []

    def collect(self, program: Program) -> list[Symbol]:
        self.symbols = []
        self.visit(program)
        return self.symbols

    def visit_function_declaration(self, node: FunctionDeclaration) -> None:
        location = Location.from_source(
            node.location, len(node.return_type) + 1 + len(node.identifier)
        )
        params = [
            Symbol(
                name=name,
                kind=SymbolKind.PARAMETER,
                type_info=ptype,
                location=location,
            )
            for ptype, name in node.parameters
        ]
        signature = ", ".join(f"{ptype} {name}" for ptype, name in node.parameters)
        self.symbols.append(
            Symbol(
                name=node.identifier,
                kind=SymbolKind.FUNCTION,
                type_info=f"{node.return_type} ({signature})",
                location=location,
                children=params,
            )
        )


def get_document_symbols(program: Program) -> list[types.DocumentSymbol]:
    """Outline of `program` as LSP DocumentSymbols."""
    return [symbol.to_document_symbol() for symbol in SymbolCollector().collect(program)]
