"""
Lexer for hilang.

Converts source text into a stream of tokens for the parser.
Supports:
- Bare names (letters, digits and underscores)
- Double-quoted string literals (no escapes, single line)
- The operator set ; | -> <- =< == != < + - * % \\ .
- Parentheses for grouping

Whitespace, including newlines, only separates tokens.
"""

from typing import List, Optional, Iterator
from .tokens import Token, TokenType, SourceLocation, SourceSpan, OPERATORS
from .errors import (
    error_unexpected_character,
    error_unterminated_string,
)


class Lexer:
    """
    Tokenizer for hilang source.

    Usage:
        lexer = Lexer(source_code)
        tokens = lexer.tokenize()

    Or for streaming:
        lexer = Lexer(source_code)
        for token in lexer:
            process(token)
    """

    def __init__(self, source: str, filename: Optional[str] = None):
        self.source = source
        self.filename = filename
        self.pos = 0            # Current position in source
        self.line = 1           # Current line (1-indexed)
        self.column = 1         # Current column (1-indexed)
        self._lines: Optional[List[str]] = None  # Cached line list

    @property
    def lines(self) -> List[str]:
        """Lazy-load line list for error reporting."""
        if self._lines is None:
            self._lines = self.source.splitlines()
        return self._lines

    def get_source_line(self, line_num: int) -> Optional[str]:
        """Get a specific line of source (1-indexed)."""
        if 1 <= line_num <= len(self.lines):
            return self.lines[line_num - 1]
        return None

    def _location(self) -> SourceLocation:
        return SourceLocation(self.line, self.column, self.pos, self.filename)

    def _span(self, start: SourceLocation) -> SourceSpan:
        return SourceSpan(start, self._location())

    def _peek(self, offset: int = 0) -> str:
        """Look at character at current position + offset without consuming."""
        idx = self.pos + offset
        if idx >= len(self.source):
            return '\0'
        return self.source[idx]

    def _advance(self) -> str:
        """Consume and return current character."""
        if self.pos >= len(self.source):
            return '\0'
        ch = self.source[self.pos]
        self.pos += 1
        if ch == '\n':
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return ch

    def _is_at_end(self) -> bool:
        return self.pos >= len(self.source)

    def _skip_whitespace(self) -> None:
        while not self._is_at_end() and self._peek().isspace():
            self._advance()

    def _make_token(self, token_type: TokenType, start: SourceLocation) -> Token:
        lexeme = self.source[start.offset:self.pos]
        return Token(token_type, lexeme, self._span(start))

    def _scan_string(self) -> Token:
        """Scan a string literal; the token lexeme keeps both quotes."""
        start = self._location()
        self._advance()  # consume opening quote

        while not self._is_at_end() and self._peek() != '"':
            if self._peek() == '\n':
                raise error_unterminated_string(
                    self._span(start),
                    self.get_source_line(start.line)
                )
            self._advance()

        if self._is_at_end():
            raise error_unterminated_string(
                self._span(start),
                self.get_source_line(start.line)
            )

        self._advance()  # consume closing quote
        return self._make_token(TokenType.STRING_LITERAL, start)

    def _scan_identifier(self) -> Token:
        start = self._location()
        while self._peek().isalnum() or self._peek() == '_':
            self._advance()
        return self._make_token(TokenType.IDENTIFIER, start)

    def _scan_token(self) -> Token:
        """Scan the next token."""
        self._skip_whitespace()

        start = self._location()
        if self._is_at_end():
            return self._make_token(TokenType.EOF, start)

        ch = self._peek()

        if ch == '"':
            return self._scan_string()

        if ch.isalnum() or ch == '_':
            return self._scan_identifier()

        # Two-character operators first
        pair = ch + self._peek(1)
        if pair in OPERATORS:
            self._advance()
            self._advance()
            return self._make_token(OPERATORS[pair], start)

        if ch in OPERATORS:
            self._advance()
            return self._make_token(OPERATORS[ch], start)

        if ch == '(':
            self._advance()
            return self._make_token(TokenType.LPAREN, start)
        if ch == ')':
            self._advance()
            return self._make_token(TokenType.RPAREN, start)

        self._advance()
        raise error_unexpected_character(
            ch, self._span(start), self.get_source_line(start.line)
        )

    def tokenize(self) -> List[Token]:
        """Tokenize the entire source, returning a list of tokens."""
        return list(self)

    def __iter__(self) -> Iterator[Token]:
        while True:
            token = self._scan_token()
            yield token
            if token.type == TokenType.EOF:
                break


def tokenize(source: str, filename: Optional[str] = None) -> List[Token]:
    """
    Convenience function to tokenize source code.

    Args:
        source: The source code to tokenize
        filename: Optional filename for error messages

    Returns:
        List of tokens, ending with EOF

    Raises:
        LexerError: If tokenization fails
    """
    lexer = Lexer(source, filename)
    return lexer.tokenize()
