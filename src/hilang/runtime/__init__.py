"""
hilang runtime - tree-walking interpreter.

This module provides:
- Interpreter: Evaluates the semantic tree against a stream value
- Value: Runtime values (Integer, Text, Empty) and the FAILURE sentinel
- ExecutionContext: The global store and console streams for one run
- BuiltinRegistry: Built-in operation implementations
"""

from .values import (
    Value,
    ValueKind,
    SoftFailure,
    Outcome,
    FAILURE,
    EMPTY,
    is_failure,
    int_val,
    text_val,
    from_python,
    parse_integer,
    wrap_int64,
)

from .context import (
    ExecutionContext,
    create_context,
)

from .builtins import (
    BuiltinFunction,
    BuiltinRegistry,
    get_builtin_registry,
)

from .interpreter import (
    Interpreter,
    ExecutionResult,
    execute,
    compile_and_run,
)

__all__ = [
    # Values
    'Value',
    'ValueKind',
    'SoftFailure',
    'Outcome',
    'FAILURE',
    'EMPTY',
    'is_failure',
    'int_val',
    'text_val',
    'from_python',
    'parse_integer',
    'wrap_int64',

    # Context
    'ExecutionContext',
    'create_context',

    # Builtins
    'BuiltinFunction',
    'BuiltinRegistry',
    'get_builtin_registry',

    # Interpreter
    'Interpreter',
    'ExecutionResult',
    'execute',
    'compile_and_run',
]
