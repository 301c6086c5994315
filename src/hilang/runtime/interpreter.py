"""
Tree-walking interpreter for hilang.

A single stream value flows through the semantic tree. Every evaluation
ends in one of three ways:

- a Value (success)
- FAILURE (soft failure, recoverable only by Alternative)
- EvaluationFault raised (fatal, unwinds the whole run)
"""

from dataclasses import dataclass
from typing import Dict, Optional, Sequence, TextIO

from .values import Value, Outcome, EMPTY, FAILURE, is_failure, text_val
from .context import ExecutionContext, create_context
from .builtins import BuiltinRegistry, get_builtin_registry

from ..ast import AstNode, Scope, Sequence as SequenceNode, Alternative, Call, Name, Text, VarRef
from ..errors import (
    Diagnostic,
    DslError,
    EvaluationFault,
    fault_literal_misuse,
    fault_unsupported_variable,
    fault_too_deep,
    failure_soft,
    failure_not_empty,
)


@dataclass
class ExecutionResult:
    """Result of running a program to completion."""
    success: bool
    value: Optional[Value] = None
    diagnostic: Optional[Diagnostic] = None

    @property
    def error_message(self) -> Optional[str]:
        if self.diagnostic is None:
            return None
        return self.diagnostic.summary()

    @property
    def faulted(self) -> bool:
        """True when the run was aborted by a fatal fault."""
        return self.diagnostic is not None and self.diagnostic.code.startswith("E3")

    @property
    def soft_failed(self) -> bool:
        """True when the program ended in an unrecovered soft failure."""
        return self.diagnostic is not None and self.diagnostic.code == "E401"


class Interpreter:
    """
    Tree-walking interpreter.

    Owns one ExecutionContext, and with it one global store, for its
    whole lifetime.
    """

    def __init__(self, context: Optional[ExecutionContext] = None,
                 registry: Optional[BuiltinRegistry] = None):
        self.context = context or create_context()
        self.registry = registry or get_builtin_registry()

    @property
    def store(self) -> Dict[str, Value]:
        return self.context.store

    def evaluate(self, operands: Sequence[AstNode], node: AstNode, stream: Value) -> Outcome:
        """
        Evaluate a node against the current stream.

        Args:
            operands: Active operand list; Call replaces it, every other
                composite node hands it down unchanged
            node: The node to evaluate
            stream: Incoming stream value

        Returns:
            A Value, or FAILURE

        Raises:
            EvaluationFault: On any contract violation
        """
        if isinstance(node, SequenceNode):
            return self._eval_sequence(operands, node, stream)
        elif isinstance(node, Alternative):
            return self._eval_alternative(operands, node, stream)
        elif isinstance(node, Call):
            return self.evaluate(node.operands, node.callee, stream)
        elif isinstance(node, Name):
            return self.registry.call(self, node.label, operands, stream, node.span)
        elif isinstance(node, Text):
            return self._eval_text(operands, node, stream)
        elif isinstance(node, Scope):
            return self.evaluate(operands, node.inner, stream)
        elif isinstance(node, VarRef):
            raise self._located(fault_unsupported_variable(node.label, node.span))
        else:
            raise TypeError(f"Unknown node type: {type(node).__name__}")

    def _eval_sequence(self, operands: Sequence[AstNode], node: SequenceNode, stream: Value) -> Outcome:
        """
        Run a statement chain step by step.

        `a; b; c` adapts to Sequence(Sequence(a, b), c). The left spine is
        unrolled into a list so long programs do not nest Python frames.
        """
        steps = []
        while isinstance(node, SequenceNode):
            steps.append(node.second)
            node = node.first

        outcome = self.evaluate(operands, node, stream)
        for step in reversed(steps):
            if is_failure(outcome):
                return outcome
            outcome = self.evaluate(operands, step, outcome)
        return outcome

    def _eval_alternative(self, operands: Sequence[AstNode], node: Alternative, stream: Value) -> Outcome:
        """Try each branch of an `a | b | c` chain against the same stream."""
        branches = []
        while isinstance(node, Alternative):
            branches.append(node.second)
            node = node.first
        branches.append(node)

        # Values are immutable, so the original stream is still intact
        outcome: Outcome = FAILURE
        for branch in reversed(branches):
            outcome = self.evaluate(operands, branch, stream)
            if not is_failure(outcome):
                return outcome
        return outcome

    def _eval_text(self, operands: Sequence[AstNode], node: Text, stream: Value) -> Value:
        if not stream.is_empty or operands:
            raise self._located(fault_literal_misuse(node.span))
        return text_val(node.contents)

    def _located(self, fault: EvaluationFault) -> EvaluationFault:
        """Attach the offending source line to a fault."""
        diag = fault.diagnostic
        if diag.source_line is None:
            diag.source_line = self.context.get_source_line(diag.span)
        return fault

    def run(self, node: AstNode, stream: Value = EMPTY) -> ExecutionResult:
        """
        Evaluate a whole program.

        Succeeds only if the program ends with an Empty stream. Faults,
        an unrecovered soft failure and a leftover value all produce a
        failed result.
        """
        try:
            outcome = self.evaluate((), node, stream)
        except EvaluationFault as e:
            return ExecutionResult(success=False, diagnostic=self._located(e).diagnostic)
        except RecursionError:
            return ExecutionResult(success=False, diagnostic=fault_too_deep(node.span).diagnostic)

        if is_failure(outcome):
            return ExecutionResult(success=False, diagnostic=failure_soft(node.span))
        if not outcome.is_empty:
            return ExecutionResult(success=False, value=outcome,
                                   diagnostic=failure_not_empty(repr(outcome)))
        return ExecutionResult(success=True, value=outcome)


def execute(
    node: AstNode,
    store: Optional[Dict[str, object]] = None,
    stream: Value = EMPTY,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
    source: str = "",
) -> ExecutionResult:
    """
    Run an adapted program with a fresh context.

    Args:
        node: Root of the semantic tree
        store: Initial store contents (Values or raw int/str)
        stream: Initial stream value
        stdin: Console input (defaults to sys.stdin)
        stdout: Console output (defaults to sys.stdout)
        source: Original source code for error messages

    Returns:
        ExecutionResult
    """
    ctx = create_context(store=store, source=source, stdin=stdin, stdout=stdout)
    return Interpreter(ctx).run(node, stream)


def compile_and_run(
    source: str,
    store: Optional[Dict[str, object]] = None,
    stream: Value = EMPTY,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
) -> ExecutionResult:
    """
    High-level API to parse and run source code in one call.

        from hilang import compile_and_run

        result = compile_and_run('"3" -> int -> output')
        if not result.success:
            print(result.error_message)

    Parse failures are returned as a failed result carrying the
    lexer, parser or structural diagnostic.
    """
    from ..adapter import parse_program

    try:
        program = parse_program(source)
    except DslError as e:
        return ExecutionResult(success=False, diagnostic=e.diagnostic)

    return execute(program, store=store, stream=stream, stdin=stdin, stdout=stdout, source=source)
