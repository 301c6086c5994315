"""
Token types for the hilang lexer.

Error code ranges:
- E0xx: Lexer errors
- E1xx: Parser errors
- E2xx: Structural errors (tree adapter)
- E3xx: Evaluation faults
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Optional


class TokenType(Enum):
    """All token types recognized by the lexer."""

    # --- Operands ---
    IDENTIFIER = auto()         # int, load, aaa
    STRING_LITERAL = auto()     # "hello" (lexeme keeps the quotes)

    # --- Operators ---
    SEMICOLON = auto()          # ;
    BAR = auto()                # |
    ARROW = auto()              # ->
    BACK_ARROW = auto()         # <-
    LE = auto()                 # =<
    EQ = auto()                 # ==
    NE = auto()                 # !=
    LT = auto()                 # <
    PLUS = auto()               # +
    MINUS = auto()              # -
    STAR = auto()               # *
    PERCENT = auto()            # %
    BACKSLASH = auto()          # \ (variable marker)
    DOT = auto()                # .

    # --- Delimiters ---
    LPAREN = auto()             # (
    RPAREN = auto()             # )

    # --- Special ---
    EOF = auto()                # end of file


@dataclass(frozen=True)
class SourceLocation:
    """Represents a position in source code."""
    line: int           # 1-indexed line number
    column: int         # 1-indexed column number
    offset: int         # 0-indexed character offset from start
    filename: Optional[str] = None

    def __str__(self) -> str:
        if self.filename:
            return f"{self.filename}:{self.line}:{self.column}"
        return f"{self.line}:{self.column}"


@dataclass(frozen=True)
class SourceSpan:
    """Represents a range in source code."""
    start: SourceLocation
    end: SourceLocation

    def __str__(self) -> str:
        if self.start.filename:
            return f"{self.start.filename}:{self.start.line}:{self.start.column}-{self.end.line}:{self.end.column}"
        return f"{self.start.line}:{self.start.column}-{self.end.line}:{self.end.column}"


@dataclass(frozen=True)
class Token:
    """A single token from the lexer."""
    type: TokenType
    lexeme: str             # The original source text
    span: SourceSpan        # Location in source

    def __str__(self) -> str:
        if self.type in (TokenType.STRING_LITERAL, TokenType.IDENTIFIER):
            return f"{self.type.name}({self.lexeme!r})"
        return self.type.name


# Operator spellings, longest first so the lexer can match greedily
OPERATORS: dict[str, TokenType] = {
    "->": TokenType.ARROW,
    "<-": TokenType.BACK_ARROW,
    "=<": TokenType.LE,
    "==": TokenType.EQ,
    "!=": TokenType.NE,
    ";": TokenType.SEMICOLON,
    "|": TokenType.BAR,
    "<": TokenType.LT,
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.STAR,
    "%": TokenType.PERCENT,
    "\\": TokenType.BACKSLASH,
    ".": TokenType.DOT,
}


def is_operator_token(token_type: TokenType) -> bool:
    """Check if a token type is a binary operator."""
    return token_type in OPERATORS.values()
