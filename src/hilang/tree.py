"""
Generic operator tree produced by the parser.

The tree knows nothing about the language's semantics: it only records
which operator joined which operands. Four shapes exist:

- Placeholder: an operand position the source left empty
- Group: a parenthesized sub-tree
- Leaf: a bare name or a quoted string, stored with its quotes
- BinaryOp: an operator label with two children
"""

from dataclasses import dataclass, field
from typing import Optional
from .tokens import SourceSpan


@dataclass(frozen=True)
class Node:
    """Base class for generic tree nodes."""
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False, kw_only=True)


@dataclass(frozen=True)
class Placeholder(Node):
    """Missing operand, e.g. the left side of a prefix '\\'."""
    pass


@dataclass(frozen=True)
class Group(Node):
    """A parenthesized sub-tree."""
    inner: Node


@dataclass(frozen=True)
class Leaf(Node):
    """A bare name or a string literal (label keeps the quotes)."""
    label: str


@dataclass(frozen=True)
class BinaryOp(Node):
    """Operator label joining two children."""
    label: str
    left: Node
    right: Node
