"""Tests for declarations, annotations, and whole files."""

from __future__ import annotations

import logging

import pytest

from enumranges.ast import Declaration
from enumranges.errors import ParseError
from enumranges.parser import parse_declaration

from tests.conftest import assert_range

COLOR = """
Color {
    Blue: 450..495,
    Green: 495..570,
    Yellow: 570..590,
}
"""


class TestDeclaration:
    def test_basic(self):
        decl = parse_declaration("MyRanges { Foo: 1..10, Bar: 11 }")
        assert isinstance(decl, Declaration)
        assert decl.name == "MyRanges"
        assert decl.annotations == ()
        assert_range(decl.ranges[0], "Foo", 1, 10)
        assert_range(decl.ranges[1], "Bar", 11, None)

    def test_multiline_with_trailing_comma(self):
        decl = parse_declaration(COLOR)
        assert decl.name == "Color"
        assert [r.name for r in decl.ranges] == ["Blue", "Green", "Yellow"]

    def test_empty_body(self):
        decl = parse_declaration("Nothing {}")
        assert decl.ranges == ()

    def test_name_span(self):
        decl = parse_declaration("  Color { }")
        assert decl.name_span.start.column == 3
        assert decl.name_span.end.column == 8

    def test_comments_ignored(self):
        decl = parse_declaration("// palette\nColor { Blue: 1, // first\n Red: 2 }")
        assert [r.name for r in decl.ranges] == ["Blue", "Red"]


class TestAnnotations:
    def test_rust_attribute(self):
        decl = parse_declaration("#[derive(PartialEq, Debug)]\nLogTen { Zero: 0 }")
        assert [a.text for a in decl.annotations] == ["#[derive(PartialEq, Debug)]"]
        assert decl.name == "LogTen"

    def test_python_decorator(self):
        decl = parse_declaration("@enum.unique\nColor { Blue: 1 }")
        assert [a.text for a in decl.annotations] == ["@enum.unique"]

    def test_decorator_with_arguments(self):
        decl = parse_declaration('@register(name="x", tags=[1, 2])\nColor { }')
        assert [a.text for a in decl.annotations] == ['@register(name="x", tags=[1, 2])']

    def test_several_in_order(self):
        decl = parse_declaration("#[derive(Debug)]\n#[repr(u8)]\nE { A: 1 }")
        assert [a.text for a in decl.annotations] == ["#[derive(Debug)]", "#[repr(u8)]"]

    def test_text_is_verbatim(self):
        decl = parse_declaration("#[ derive ( Debug ,Clone ) ]  E { }")
        assert decl.annotations[0].text == "#[ derive ( Debug ,Clone ) ]"

    def test_nested_brackets(self):
        decl = parse_declaration('#[doc = "a ] b", cfg(all(x, y))] E { }')
        assert decl.annotations[0].text == '#[doc = "a ] b", cfg(all(x, y))]'


class TestAnnotationLeniency:
    def test_broken_annotation_becomes_name_error(self):
        # The annotation failure itself is swallowed; the declaration then
        # fails where the enum name was expected.
        with pytest.raises(ParseError, match="expected enum name") as exc_info:
            parse_declaration("#[derive(Debug]\nE { A: 1 }")
        assert exc_info.value.span.start.column == 1

    def test_hash_without_bracket(self):
        with pytest.raises(ParseError, match="expected enum name"):
            parse_declaration("# E { A: 1 }")

    def test_swallowed_failure_is_logged(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="enumranges.parser"):
            with pytest.raises(ParseError):
                parse_declaration("@(x) E { }")
        assert "ignoring unparseable annotations" in caplog.text

    def test_good_annotations_lost_with_bad_one(self):
        with pytest.raises(ParseError, match="expected enum name"):
            parse_declaration("#[derive(Debug)]\n#[oops\nE { }")


class TestDeclarationErrors:
    def test_missing_name(self):
        with pytest.raises(ParseError, match="expected enum name"):
            parse_declaration("{ A: 1 }")

    def test_missing_open_brace(self):
        with pytest.raises(ParseError, match="expected '\\{' after enum name"):
            parse_declaration("Color A: 1 }")

    def test_missing_close_brace(self):
        with pytest.raises(ParseError, match="expected ',' or '\\}' after range"):
            parse_declaration("Color { A: 1")

    def test_missing_close_brace_after_comma(self):
        with pytest.raises(ParseError, match="expected '\\}' to close range list"):
            parse_declaration("Color { A: 1,")

    def test_missing_comma_between_ranges(self):
        with pytest.raises(ParseError, match="expected ',' or '\\}' after range"):
            parse_declaration("Color { A: 1 B: 2 }")

    def test_range_error_propagates(self):
        with pytest.raises(ParseError, match="expected integer literal after '..'"):
            parse_declaration("Color { A: 1.., B: 2 }")

    def test_trailing_input(self):
        with pytest.raises(ParseError, match="unexpected input after declaration"):
            parse_declaration("A { } extra")


class TestSourceFile:
    def test_empty_file(self, parse_source):
        assert parse_source("").declarations == ()

    def test_comment_only_file(self, parse_source):
        assert parse_source("// nothing\n").declarations == ()

    def test_multiple_declarations(self, parse_source):
        result = parse_source(COLOR + "\n#[derive(Debug)]\nLogTen { Zero: 0, Ones: 1..10 }\n")
        assert [d.name for d in result.declarations] == ["Color", "LogTen"]
        assert result.declarations[1].annotations[0].text == "#[derive(Debug)]"

    def test_error_in_second_declaration(self, parse_source):
        with pytest.raises(ParseError) as exc_info:
            parse_source("A { X: 1 }\nB { Y }")
        assert exc_info.value.span.start.line == 2
