"""
Built-in operation registry for the hilang interpreter.

Maps operation names (int, load, +, loop, ...) to implementations. Each
implementation receives the interpreter, the unevaluated operand nodes,
the incoming stream and the span of the call site, and returns a Value
or FAILURE. Contract violations raise EvaluationFault.
"""

from dataclasses import dataclass
from typing import Callable, Dict, Optional, Sequence, Tuple, TYPE_CHECKING

from .values import (
    Value, ValueKind, Outcome, FAILURE, EMPTY,
    int_val, text_val, is_failure, parse_integer,
)
from ..ast import AstNode
from ..tokens import SourceSpan
from ..errors import (
    fault_type_mismatch,
    fault_missing_operand,
    fault_unknown_operation,
    fault_division_by_zero,
)

if TYPE_CHECKING:
    from .interpreter import Interpreter


Implementation = Callable[["Interpreter", Sequence[AstNode], Value, Optional[SourceSpan]], Outcome]


@dataclass
class BuiltinFunction:
    """
    A built-in operation.

    `arity` is the number of operands the operation reads; calling it
    with fewer is a fault, extra operands are ignored.
    """
    name: str
    arity: int
    implementation: Implementation
    doc: str = ""


def _found(outcome: Outcome) -> str:
    return "soft failure" if is_failure(outcome) else repr(outcome)


def _evaluate_key(interp: "Interpreter", name: str, operand: AstNode,
                  span: Optional[SourceSpan]) -> str:
    """Evaluate a store key operand; anything but Text is a fault."""
    key = interp.evaluate((), operand, EMPTY)
    if is_failure(key) or key.kind != ValueKind.TEXT:
        raise fault_type_mismatch(name, "a Text key", _found(key), span)
    return key.data


def _evaluate_integers(interp: "Interpreter", name: str, operands: Sequence[AstNode],
                       span: Optional[SourceSpan]) -> Optional[Tuple[int, int]]:
    """
    Evaluate both operands left to right against Empty.

    Returns None if either soft-fails; the right operand is not
    evaluated when the left one already failed.
    """
    results = []
    for operand in operands[:2]:
        outcome = interp.evaluate((), operand, EMPTY)
        if is_failure(outcome):
            return None
        results.append(outcome)
    left, right = results
    if left.kind != ValueKind.INTEGER or right.kind != ValueKind.INTEGER:
        raise fault_type_mismatch(
            name, "two Integers", f"{left!r} and {right!r}", span
        )
    return left.data, right.data


def _remainder(a: int, b: int) -> int:
    """Remainder truncated toward zero; the sign follows the dividend."""
    r = abs(a) % abs(b)
    return -r if a < 0 else r


class BuiltinRegistry:
    """
    Registry of all built-in operations.

    Operations are registered by name and looked up at call time.
    """

    def __init__(self):
        self._functions: Dict[str, BuiltinFunction] = {}
        self._register_all()

    def get_function(self, name: str) -> Optional[BuiltinFunction]:
        """Look up an operation by name."""
        return self._functions.get(name)

    def register(self, func: BuiltinFunction) -> None:
        self._functions[func.name] = func

    def names(self) -> Tuple[str, ...]:
        return tuple(sorted(self._functions))

    def call(self, interp: "Interpreter", name: str, operands: Sequence[AstNode],
             stream: Value, span: Optional[SourceSpan] = None) -> Outcome:
        """Dispatch to an operation, checking that it exists and has its operands."""
        func = self.get_function(name)
        if func is None:
            raise fault_unknown_operation(name, span)
        if len(operands) < func.arity:
            raise fault_missing_operand(name, span)
        return func.implementation(interp, operands, stream, span)

    def _register_all(self) -> None:
        self._register_conversion_functions()
        self._register_console_functions()
        self._register_store_functions()
        self._register_arithmetic_functions()
        self._register_comparison_functions()
        self._register_control_functions()

    # --- Conversions ---

    def _register_conversion_functions(self) -> None:

        def _int(interp, operands, stream, span):
            if stream.kind == ValueKind.INTEGER:
                return stream
            if stream.kind == ValueKind.TEXT:
                n = parse_integer(stream.data)
                return FAILURE if n is None else int_val(n)
            raise fault_type_mismatch("int", "Integer or Text", repr(stream), span)

        def _str(interp, operands, stream, span):
            if stream.kind == ValueKind.INTEGER:
                return text_val(str(stream.data))
            if stream.kind == ValueKind.TEXT:
                return stream
            raise fault_type_mismatch("str", "Integer or Text", repr(stream), span)

        self.register(BuiltinFunction("int", 0, _int, "Text to Integer; malformed text fails"))
        self.register(BuiltinFunction("str", 0, _str, "Integer to Text"))

    # --- Console ---

    def _register_console_functions(self) -> None:

        def _output(interp, operands, stream, span):
            if stream.is_empty:
                raise fault_type_mismatch("output", "Integer or Text", repr(stream), span)
            interp.context.write_line(str(stream.data))
            return EMPTY

        def _input(interp, operands, stream, span):
            if not stream.is_empty:
                raise fault_type_mismatch("input", "Empty", repr(stream), span)
            return text_val(interp.context.read_line())

        self.register(BuiltinFunction("output", 0, _output, "Write the stream as a line"))
        self.register(BuiltinFunction("input", 0, _input, "Read one line as Text"))

    # --- Global store ---

    def _register_store_functions(self) -> None:

        def _store(interp, operands, stream, span):
            key = _evaluate_key(interp, "store", operands[0], span)
            interp.context.save(key, stream)
            return EMPTY

        def _load(interp, operands, stream, span):
            if not stream.is_empty:
                raise fault_type_mismatch("load", "Empty", repr(stream), span)
            key = _evaluate_key(interp, "load", operands[0], span)
            value = interp.context.load(key)
            return FAILURE if value is None else value

        self.register(BuiltinFunction("store", 1, _store, "Save the stream under a key"))
        self.register(BuiltinFunction("load", 1, _load, "Read a key; fails when absent"))

    # --- Arithmetic ---

    def _register_arithmetic_functions(self) -> None:

        def _mod(a: int, b: int, span) -> int:
            if b == 0:
                raise fault_division_by_zero(span)
            return _remainder(a, b)

        arithmetic = [
            ("+", lambda a, b, span: a + b),
            ("-", lambda a, b, span: a - b),
            ("*", lambda a, b, span: a * b),
            ("%", _mod),
        ]

        for name, op in arithmetic:
            def _arith(interp, operands, stream, span, name=name, op=op):
                pair = _evaluate_integers(interp, name, operands, span)
                if pair is None:
                    return FAILURE
                return int_val(op(pair[0], pair[1], span))

            self.register(BuiltinFunction(name, 2, _arith))

    # --- Comparisons ---

    def _register_comparison_functions(self) -> None:

        comparisons = [
            ("==", lambda a, b: a == b),
            ("!=", lambda a, b: a != b),
            ("=<", lambda a, b: a <= b),
            ("<", lambda a, b: a < b),
        ]

        for name, test in comparisons:
            def _compare(interp, operands, stream, span, name=name, test=test):
                pair = _evaluate_integers(interp, name, operands, span)
                if pair is None or not test(*pair):
                    return FAILURE
                return EMPTY

            self.register(BuiltinFunction(name, 2, _compare))

    # --- Control ---

    def _register_control_functions(self) -> None:

        def _loop(interp, operands, stream, span):
            outcome: Outcome = stream
            while not is_failure(outcome):
                outcome = interp.evaluate((), operands[0], outcome)
            return FAILURE

        def _pass(interp, operands, stream, span):
            return stream

        self.register(BuiltinFunction("loop", 1, _loop, "Repeat the body until it fails; always fails"))
        self.register(BuiltinFunction("pass", 0, _pass, "Identity"))


# Global singleton registry
_registry: Optional[BuiltinRegistry] = None


def get_builtin_registry() -> BuiltinRegistry:
    """Get the global built-in operation registry."""
    global _registry
    if _registry is None:
        _registry = BuiltinRegistry()
    return _registry
