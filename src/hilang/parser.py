"""
Operator-precedence parser for hilang.

Converts a token stream into the generic operator tree (see tree.py).
The parser has no opinion about what an operator means; the tree
adapter decides that.
"""

from typing import List, Optional
from .tokens import Token, TokenType, SourceSpan
from .tree import Node, Placeholder, Group, Leaf, BinaryOp
from .errors import (
    error_unexpected_token,
    error_unbalanced_paren,
    error_nesting_too_deep,
)


class Parser:
    """
    Precedence-climbing parser producing a generic operator tree.

    Usage:
        parser = Parser(tokens)
        tree = parser.parse_program()

    Every operator is left-associative and sits on its own level:
        Lowest:  ;
                 |
                 ->
                 <-
                 =<
                 ==
                 !=
                 <
                 +
                 -
                 *
                 %
                 \\
        Highest: .

    An operand position with nothing in it (start of input before an
    operator, directly before ')' or at end of input) yields a
    Placeholder instead of an error.
    """

    PRECEDENCE = {
        TokenType.SEMICOLON: 1,
        TokenType.BAR: 2,
        TokenType.ARROW: 3,
        TokenType.BACK_ARROW: 4,
        TokenType.LE: 5,
        TokenType.EQ: 6,
        TokenType.NE: 7,
        TokenType.LT: 8,
        TokenType.PLUS: 9,
        TokenType.MINUS: 10,
        TokenType.STAR: 11,
        TokenType.PERCENT: 12,
        TokenType.BACKSLASH: 13,
        TokenType.DOT: 14,
    }

    def __init__(self, tokens: List[Token], source: Optional[str] = None):
        self.tokens = tokens
        self.source_lines = source.splitlines() if source else []
        self.pos = 0

    # =========================================================================
    # Token Navigation
    # =========================================================================

    def _current(self) -> Token:
        if self.pos >= len(self.tokens):
            return self.tokens[-1]  # EOF
        return self.tokens[self.pos]

    def _is_at_end(self) -> bool:
        return self._current().type == TokenType.EOF

    def _check(self, token_type: TokenType) -> bool:
        return self._current().type == token_type

    def _advance(self) -> Token:
        """Consume and return current token."""
        token = self._current()
        if not self._is_at_end():
            self.pos += 1
        return token

    def _source_line(self, token: Token) -> Optional[str]:
        line = token.span.start.line
        if 1 <= line <= len(self.source_lines):
            return self.source_lines[line - 1]
        return None

    # =========================================================================
    # Expression Parsing (Precedence Climbing)
    # =========================================================================

    def _parse_binary_expr(self, min_precedence: int) -> Node:
        left = self._parse_operand()

        while True:
            op_token = self._current()
            precedence = self.PRECEDENCE.get(op_token.type)

            if precedence is None or precedence < min_precedence:
                break

            self._advance()  # consume operator
            right = self._parse_binary_expr(precedence + 1)

            left = BinaryOp(
                op_token.lexeme,
                left,
                right,
                span=SourceSpan(left.span.start, right.span.end),
            )

        return left

    def _parse_operand(self) -> Node:
        token = self._current()

        if token.type in (TokenType.IDENTIFIER, TokenType.STRING_LITERAL):
            self._advance()
            return Leaf(token.lexeme, span=token.span)

        if token.type == TokenType.LPAREN:
            self._advance()
            inner = self._parse_binary_expr(0)
            if not self._check(TokenType.RPAREN):
                raise error_unbalanced_paren(self._current().span, self._source_line(self._current()))
            close = self._advance()
            return Group(inner, span=SourceSpan(token.span.start, close.span.end))

        # Nothing to consume: operator, ')' or EOF
        return Placeholder(span=SourceSpan(token.span.start, token.span.start))

    def parse_program(self) -> Node:
        """Parse the whole token stream as one expression."""
        try:
            tree = self._parse_binary_expr(0)
        except RecursionError:
            token = self._current()
            raise error_nesting_too_deep(token.span, self._source_line(token)) from None
        if not self._is_at_end():
            token = self._current()
            raise error_unexpected_token(str(token), token.span, self._source_line(token))
        return tree


def parse(tokens: List[Token], source: Optional[str] = None) -> Node:
    """
    Convenience function to parse tokens into a generic operator tree.

    Args:
        tokens: List of tokens from the lexer
        source: Optional original source code for error messages

    Returns:
        Root node of the generic tree

    Raises:
        ParserError: If tokens remain after a complete expression or a
            parenthesis is left open, or parentheses nest past the
            recursion limit
    """
    parser = Parser(tokens, source)
    return parser.parse_program()
