"""
Transforms the generic operator tree into the semantic tree (ast.py).

The grammar accepts any operator between any two operands; rules it
cannot express are enforced here:

- an empty operand position is only legal as the left side of '\\'
- '\\' must be followed by a bare name
"""

from typing import Optional
from .tree import Node, Placeholder, Group, Leaf, BinaryOp
from .ast import AstNode, Scope, Sequence, Alternative, Call, Name, Text, VarRef
from .errors import (
    error_missing_operand,
    error_malformed_variable,
    error_unknown_operator,
    error_structure_too_deep,
)

# Operators that become a call to the built-in of the same name
BUILTIN_OPERATORS = frozenset({"=<", "==", "!=", "<", "+", "-", "*", "%"})


class TreeAdapter:
    def transform(self, node: Node) -> AstNode:
        match node:
            case Placeholder():
                raise error_missing_operand(node.span)
            case Group(inner=inner):
                return Scope(self.transform(inner), span=node.span)
            case Leaf(label=label) if label.startswith('"'):
                return Text(label.strip('"'), span=node.span)
            case Leaf(label=label):
                return Name(label, span=node.span)
            case BinaryOp(label="\\"):
                return self._variable(node)
            case BinaryOp():
                return self._operator(node)
        raise TypeError(f"Unexpected node in operator tree: {type(node).__name__}")

    def _variable(self, node: BinaryOp) -> VarRef:
        if isinstance(node.left, Placeholder) and isinstance(node.right, Leaf) \
                and not node.right.label.startswith('"'):
            return VarRef(node.right.label, span=node.span)
        raise error_malformed_variable(node.span)

    def _operator(self, node: BinaryOp) -> AstNode:
        # Left-associative chains are walked down their left spine
        # iteratively; only right children recurse.
        spine = []
        while isinstance(node, BinaryOp) and node.label != "\\":
            spine.append(node)
            node = node.left

        result = self.transform(node)
        for op in reversed(spine):
            result = self._combine(op, result, self.transform(op.right))
        return result

    def _combine(self, node: BinaryOp, left: AstNode, right: AstNode) -> AstNode:
        span = node.span

        match node.label:
            case ";" | "->":
                return Sequence(left, right, span=span)
            case "<-":
                return Sequence(right, left, span=span)
            case "|":
                return Alternative(left, right, span=span)
            case ".":
                return Call((left,), right, span=span)
            case label if label in BUILTIN_OPERATORS:
                return Call((left, right), Name(label, span=span), span=span)
        raise error_unknown_operator(node.label, span)


def adapt(node: Node) -> AstNode:
    """
    Convert a generic operator tree into a semantic tree.

    Raises:
        StructureError: If any sub-tree has no legal semantic form, or
            the tree nests past the recursion limit. No partial tree is
            returned.
    """
    try:
        return TreeAdapter().transform(node)
    except RecursionError:
        raise error_structure_too_deep(node.span) from None


def parse_program(source: str, filename: Optional[str] = None) -> AstNode:
    """
    Tokenize, parse and adapt source text in one call.

    Raises:
        LexerError, ParserError, StructureError: all subclasses of DslError
    """
    from .lexer import tokenize
    from .parser import parse

    tokens = tokenize(source, filename)
    return adapt(parse(tokens, source))
