"""
Semantic syntax tree for hilang.

The tree adapter builds these nodes from the generic operator tree; the
interpreter walks them. Nodes are immutable. Each carries an optional
source span for error reporting that does not take part in equality, so
trees built by hand compare equal to parsed ones.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple, Any, List
from abc import ABC
from .tokens import SourceSpan


# =============================================================================
# Base Classes
# =============================================================================

@dataclass(frozen=True)
class AstNode(ABC):
    """Base class for all AST nodes."""
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False, kw_only=True)

    def accept(self, visitor: "AstVisitor") -> Any:
        """Accept a visitor for traversal."""
        method_name = f"visit_{self.__class__.__name__}"
        method = getattr(visitor, method_name, visitor.generic_visit)
        return method(self)


class AstVisitor(ABC):
    """Base class for AST visitors."""

    def generic_visit(self, node: AstNode) -> Any:
        """Default visit method."""
        raise NotImplementedError(f"No visitor for {node.__class__.__name__}")


# =============================================================================
# Nodes
# =============================================================================

@dataclass(frozen=True)
class Scope(AstNode):
    """Parenthesized expression; evaluates exactly as its inner node."""
    inner: AstNode


@dataclass(frozen=True)
class Sequence(AstNode):
    """Evaluate first, then feed its result to second."""
    first: AstNode
    second: AstNode


@dataclass(frozen=True)
class Alternative(AstNode):
    """Evaluate first; if it fails, evaluate second on the original stream."""
    first: AstNode
    second: AstNode


@dataclass(frozen=True)
class Call(AstNode):
    """Evaluate callee with operands (unevaluated) as its argument list."""
    operands: Tuple[AstNode, ...]
    callee: AstNode


@dataclass(frozen=True)
class Name(AstNode):
    """Built-in operation, e.g. 'load' or '+'."""
    label: str


@dataclass(frozen=True)
class Text(AstNode):
    """String literal (quotes already stripped)."""
    contents: str


@dataclass(frozen=True)
class VarRef(AstNode):
    """Variable marker (\\name). Parsed, but has no runtime meaning."""
    label: str


# =============================================================================
# Visitor Helpers
# =============================================================================

class AstPrinter(AstVisitor):
    """
    Renders a tree one node per line, children indented.

    Children are queued on a work list instead of visited recursively,
    so long statement chains print without deep Python recursion.
    """

    def __init__(self):
        self.lines: List[str] = []
        self.depth = 0
        self._pending: List[Tuple[int, AstNode]] = []

    def _emit(self, text: str) -> None:
        self.lines.append("  " * self.depth + text)

    def _children(self, *nodes: AstNode) -> None:
        for node in reversed(nodes):
            self._pending.append((self.depth + 1, node))

    def render(self, root: AstNode) -> List[str]:
        self._pending.append((0, root))
        while self._pending:
            self.depth, node = self._pending.pop()
            node.accept(self)
        return self.lines

    def visit_Name(self, node: Name) -> None:
        self._emit(f"Name {node.label}")

    def visit_Text(self, node: Text) -> None:
        self._emit(f"Text {node.contents!r}")

    def visit_VarRef(self, node: VarRef) -> None:
        self._emit(f"VarRef {node.label}")

    def visit_Call(self, node: Call) -> None:
        self._emit("Call")
        self._children(*node.operands, node.callee)

    def generic_visit(self, node: AstNode) -> None:
        # Scope, Sequence, Alternative
        self._emit(node.__class__.__name__)
        children = [v for v in node.__dict__.values() if isinstance(v, AstNode)]
        self._children(*children)


def format_ast(node: AstNode) -> str:
    """Return the indented text form of a tree."""
    return "\n".join(AstPrinter().render(node))
