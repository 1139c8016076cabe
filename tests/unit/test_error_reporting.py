"""
Unit tests for errors and rich diagnostics.
"""

import pytest

from cflat.utils.diagnostics import (
    DiagnosticEmitter,
    DiagnosticLevel,
    ErrorCode,
    SourceSpan,
    create_missing_token_diagnostic,
    create_unclosed_delimiter_diagnostic,
    create_unexpected_character_diagnostic,
    create_unexpected_token_diagnostic,
    create_unterminated_string_diagnostic,
    levenshtein_distance,
    suggest_similar,
)
from cflat.utils.errors import LexerError, ParserError, SourceLoadError, SourceLocation


class TestErrors:
    def test_location_str(self):
        assert str(SourceLocation(3, 7)) == "3:7"
        assert str(SourceLocation(3, 7, 40, "main.cf")) == "main.cf:3:7"

    def test_message_with_location(self):
        error = ParserError("Unexpected token 'x'", SourceLocation(1, 2))
        assert str(error) == "[1:2] Unexpected token 'x'"
        assert error.message == "Unexpected token 'x'"

    def test_message_with_caret(self):
        error = LexerError("Unexpected character: '@'", SourceLocation(1, 3), "a @")
        lines = str(error).splitlines()
        assert lines[0] == "[1:3] Unexpected character: '@'"
        assert lines[1] == "    a @"
        assert lines[2] == "      ^"

    def test_source_load_error_keeps_path(self):
        error = SourceLoadError("Source file not found", "missing.cf")
        assert error.path == "missing.cf"
        assert str(error) == "Source file not found: missing.cf"


class TestSimilarity:
    @pytest.mark.parametrize(
        "a, b, distance",
        [("", "", 0), ("abc", "", 3), ("kitten", "sitting", 3), ("whlie", "while", 2)],
    )
    def test_levenshtein(self, a, b, distance):
        assert levenshtein_distance(a, b) == distance

    def test_suggest_keyword(self):
        assert suggest_similar("whlie", ["if", "else", "while", "return"]) == ["while"]

    def test_exact_match_is_not_suggested(self):
        assert suggest_similar("while", ["while"]) == []

    def test_distant_names_are_not_suggested(self):
        assert suggest_similar("compute", ["if", "while"]) == []

    def test_closest_first(self):
        assert suggest_similar("retrn", ["return", "retain"], max_suggestions=2)[0] == "return"


class TestRendering:
    SOURCE = "void f() {\n  x = 1\n}"

    def test_render_plain(self):
        emitter = DiagnosticEmitter(self.SOURCE, "f.cf")
        span = SourceSpan.from_location(3, 1, 1, "f.cf")
        diagnostic = create_missing_token_diagnostic(
            emitter, "Expected ';' after assignment", span, hint="add ';'"
        )

        rendered = diagnostic.render(self.SOURCE, use_color=False)
        assert rendered.splitlines() == [
            "error[E0203]: Expected ';' after assignment",
            "  --> f.cf:3:1",
            "   |",
            "  3 | }",
            "   | ^",
            "   |",
            "   = help: add ';'",
        ]
        assert "\033[" not in rendered

    def test_render_with_color(self):
        emitter = DiagnosticEmitter(self.SOURCE)
        span = SourceSpan.from_location(2, 3)
        diagnostic = create_unexpected_token_diagnostic(emitter, "';'", "'x'", span)
        assert "\033[91m" in diagnostic.render(self.SOURCE, use_color=True)

    def test_unclosed_delimiter_labels_both_ends(self):
        emitter = DiagnosticEmitter(self.SOURCE)
        diagnostic = create_unclosed_delimiter_diagnostic(
            emitter, "{", SourceSpan.from_location(1, 10), SourceSpan.from_location(3, 2)
        )
        assert diagnostic.code == ErrorCode.E0202
        assert [label.is_primary for label in diagnostic.labels] == [True, False]
        assert diagnostic.helps == ["add matching closing '}'"]
        assert diagnostic.primary_span.start_line == 3

    def test_lexical_helpers(self):
        emitter = DiagnosticEmitter('x @ "ab')
        bad_char = create_unexpected_character_diagnostic(
            emitter, "@", SourceSpan.from_location(1, 3)
        )
        unterminated = create_unterminated_string_diagnostic(
            emitter, SourceSpan.from_location(1, 5)
        )
        assert bad_char.code == ErrorCode.E0101
        assert unterminated.code == ErrorCode.E0102
        assert unterminated.helps == ["add a closing '\"'"]
        assert len(emitter.diagnostics) == 2

    def test_emitter_render_all(self):
        emitter = DiagnosticEmitter(self.SOURCE)
        emitter.error(ErrorCode.E0205, "first", SourceSpan.from_location(1, 1)).emit()
        emitter.error(ErrorCode.E0204, "second", SourceSpan.from_location(2, 3)).emit()
        rendered = emitter.render_all(use_color=False)
        assert "error[E0205]: first" in rendered
        assert "error[E0204]: second" in rendered
        assert rendered.index("first") < rendered.index("second")

    def test_to_dict(self):
        emitter = DiagnosticEmitter(self.SOURCE, "f.cf")
        diagnostic = (
            emitter.error(ErrorCode.E0201, "expected ';'", SourceSpan.from_location(2, 8, 1, "f.cf"))
            .note("statements end with ';'")
            .build()
        )
        assert diagnostic.to_dict() == {
            "code": "E0201",
            "level": "error",
            "message": "expected ';'",
            "file": "f.cf",
            "line": 2,
            "column": 8,
            "notes": ["statements end with ';'"],
            "helps": [],
        }
        assert diagnostic.level == DiagnosticLevel.ERROR
        # build() does not emit
        assert emitter.diagnostics == []


class TestParserDiagnostics:
    """Rich diagnostics recorded while parsing real source."""

    def test_keyword_suggestion(self, parse_source):
        result = parse_source("void f() {\n  whlie(x) { }\n}")
        (diagnostic,) = result.diagnostics
        assert diagnostic.code == ErrorCode.E0203
        assert diagnostic.helps == ["did you mean 'while'?"]

    def test_unclosed_block(self, parse_source):
        result = parse_source("void f() {\n  return 1;\n")
        (diagnostic,) = result.diagnostics
        assert diagnostic.code == ErrorCode.E0202
        secondary = [label for label in diagnostic.labels if not label.is_primary]
        assert secondary[0].span.start_line == 1
        assert secondary[0].span.start_col == 10

    def test_global_statement(self, parse_source):
        (diagnostic,) = parse_source("x = 5;").diagnostics
        assert diagnostic.code == ErrorCode.E0205

    def test_invalid_expression(self, parse_source):
        (diagnostic,) = parse_source("void f() { return *; }").diagnostics
        assert diagnostic.code == ErrorCode.E0204

    def test_unexpected_token_names_what_was_found(self, parse_source):
        (diagnostic,) = parse_source("void f(int32 1) {}").diagnostics
        assert diagnostic.code == ErrorCode.E0201
        assert diagnostic.message == "expected identifier, found '1'"

    def test_lexical_error(self, parse_source):
        (diagnostic,) = parse_source("void f() { x = 1 @ 2; }").diagnostics
        assert diagnostic.code == ErrorCode.E0101
        assert diagnostic.message == "unexpected character '@'"
        assert diagnostic.primary_span.start_col == 18

    def test_unterminated_string(self, parse_source):
        (diagnostic,) = parse_source('void f() { print("oops); }').diagnostics
        assert diagnostic.code == ErrorCode.E0102
        assert diagnostic.primary_span.start_col == 18
