"""
Unit tests for the generic operator-tree parser.
"""

import pytest
from hilang import (
    tokenize, parse, Parser, ParserError,
    Placeholder, Group, Leaf, BinaryOp,
)


def parse_source(source: str):
    """Helper to tokenize and parse source."""
    return parse(tokenize(source), source)


class TestOperands:
    """Test operand shapes."""

    def test_leaf(self):
        """A lone name is a leaf."""
        assert parse_source("abc") == Leaf("abc")

    def test_string_leaf_keeps_quotes(self):
        """String leaves keep their quotes for the adapter."""
        assert parse_source('"abc"') == Leaf('"abc"')

    def test_group(self):
        """Parentheses produce a group."""
        assert parse_source("(abc)") == Group(Leaf("abc"))

    def test_empty_source_is_placeholder(self):
        """Nothing to parse yields a placeholder."""
        assert parse_source("") == Placeholder()

    def test_empty_group(self):
        """'()' holds a placeholder."""
        assert parse_source("()") == Group(Placeholder())

    def test_prefix_operator(self):
        """An operator with nothing on its left gets a placeholder operand."""
        assert parse_source("\\abc") == BinaryOp("\\", Placeholder(), Leaf("abc"))

    def test_trailing_operator(self):
        """An operator with nothing on its right gets a placeholder operand."""
        assert parse_source("a ->") == BinaryOp("->", Leaf("a"), Placeholder())


class TestPrecedence:
    """Test operator precedence and associativity."""

    def test_left_associative_arrows(self):
        """Chains of the same operator group to the left."""
        assert parse_source("a -> b -> c") == BinaryOp(
            "->", BinaryOp("->", Leaf("a"), Leaf("b")), Leaf("c")
        )

    def test_bar_looser_than_arrow(self):
        """'|' binds looser than '->'."""
        assert parse_source("a -> b | c -> d") == BinaryOp(
            "|",
            BinaryOp("->", Leaf("a"), Leaf("b")),
            BinaryOp("->", Leaf("c"), Leaf("d")),
        )

    def test_semicolon_loosest(self):
        """';' binds looser than '|'."""
        assert parse_source("a | b ; c") == BinaryOp(
            ";", BinaryOp("|", Leaf("a"), Leaf("b")), Leaf("c")
        )

    def test_dot_tightest(self):
        """'.' binds tighter than arithmetic."""
        assert parse_source('"a".load + "b".load') == BinaryOp(
            "+",
            BinaryOp(".", Leaf('"a"'), Leaf("load")),
            BinaryOp(".", Leaf('"b"'), Leaf("load")),
        )

    def test_comparison_tighter_than_arrow(self):
        """Comparisons bind tighter than '->'."""
        assert parse_source("a < b -> c") == BinaryOp(
            "->", BinaryOp("<", Leaf("a"), Leaf("b")), Leaf("c")
        )

    def test_group_overrides_precedence(self):
        """Parentheses override precedence."""
        assert parse_source("a -> (b | c)") == BinaryOp(
            "->", Leaf("a"), Group(BinaryOp("|", Leaf("b"), Leaf("c")))
        )

    def test_nested_groups_with_reverse_arrow(self):
        """Reverse arrows parse like any other operator."""
        tree = parse_source("((P -> Q)<-(R -> S)).a")
        assert tree == BinaryOp(
            ".",
            Group(BinaryOp(
                "<-",
                Group(BinaryOp("->", Leaf("P"), Leaf("Q"))),
                Group(BinaryOp("->", Leaf("R"), Leaf("S"))),
            )),
            Leaf("a"),
        )


class TestSpans:
    """Test source spans on tree nodes."""

    def test_binary_span_covers_operands(self):
        """A binary node spans from its left operand to its right."""
        tree = parse_source("ab -> cd")
        assert tree.span.start.column == 1
        assert tree.span.end.column == 9

    def test_spans_ignored_in_equality(self):
        """Trees compare equal regardless of position."""
        assert parse_source("a") == parse_source("   a")


class TestParserErrors:
    """Test parser error reporting."""

    def test_adjacent_operands(self):
        """Two operands without an operator are rejected."""
        with pytest.raises(ParserError) as exc_info:
            parse_source("a b")
        assert exc_info.value.code == "E101"

    def test_stray_close_paren(self):
        """An unmatched ')' is rejected."""
        with pytest.raises(ParserError) as exc_info:
            parse_source("a)")
        assert exc_info.value.code == "E101"

    def test_unclosed_paren(self):
        """An unmatched '(' is rejected."""
        with pytest.raises(ParserError) as exc_info:
            parse_source("(a -> b")
        assert exc_info.value.code == "E102"

    def test_parser_class(self):
        """Parser can be used directly."""
        parser = Parser(tokenize("a;b"))
        assert parser.parse_program() == BinaryOp(";", Leaf("a"), Leaf("b"))

    def test_deeply_nested_parentheses(self):
        """Nesting past the recursion limit is a parse error, not a crash."""
        source = "(" * 5000 + "a" + ")" * 5000
        with pytest.raises(ParserError) as exc_info:
            parse_source(source)
        assert exc_info.value.code == "E103"


class TestLongChains:
    """Test flat operator chains."""

    def test_long_statement_list(self):
        """Thousands of statements parse into a left-deep chain."""
        tree = parse_source(";\n".join(["a"] * 5000))
        depth = 0
        while isinstance(tree, BinaryOp):
            assert tree.label == ";"
            assert tree.right == Leaf("a")
            tree = tree.left
            depth += 1
        assert depth == 4999
        assert tree == Leaf("a")
