"""
Execution context for the hilang interpreter.

Holds the global store and the console streams for one run. Each
Interpreter owns its own context, so separate runs never share a store.
"""

import sys
from dataclasses import dataclass, field
from typing import Dict, List, Optional, TextIO

from .values import Value, from_python
from ..tokens import SourceSpan


@dataclass
class ExecutionContext:
    """
    The state shared by every node during one evaluation.

    Tracks:
    - The global store (string keys to runtime values)
    - Console input and output streams
    - Source lines for diagnostics

    Store writes are never rolled back, not even when the Alternative
    branch that made them fails.
    """
    store: Dict[str, Value] = field(default_factory=dict)

    stdin: TextIO = field(default_factory=lambda: sys.stdin)
    stdout: TextIO = field(default_factory=lambda: sys.stdout)

    # Source tracking for error messages
    filename: Optional[str] = None
    source_lines: List[str] = field(default_factory=list)

    def load(self, key: str) -> Optional[Value]:
        """Look up a key; None when absent."""
        return self.store.get(key)

    def save(self, key: str, value: Value) -> None:
        """Write a value under key, replacing any previous value."""
        self.store[key] = value

    def read_line(self) -> str:
        """Block until a line is available; trailing whitespace is stripped."""
        return self.stdin.readline().rstrip()

    def write_line(self, text: str) -> None:
        self.stdout.write(text + "\n")
        self.stdout.flush()

    def get_source_line(self, span: Optional[SourceSpan]) -> Optional[str]:
        """Get the source line a span starts on, for error messages."""
        if span is None:
            return None
        line_num = span.start.line
        if 1 <= line_num <= len(self.source_lines):
            return self.source_lines[line_num - 1]
        return None


def create_context(
    store: Optional[Dict[str, object]] = None,
    source: str = "",
    filename: Optional[str] = None,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
) -> ExecutionContext:
    """
    Create a new execution context.

    Args:
        store: Initial store contents; values may be Values or raw
            int/str, which are wrapped
        source: The source code (for error messages)
        filename: Source file name (for error messages)
        stdin: Console input stream (defaults to sys.stdin)
        stdout: Console output stream (defaults to sys.stdout)

    Returns:
        A fresh ExecutionContext
    """
    ctx = ExecutionContext(
        filename=filename,
        source_lines=source.splitlines() if source else [],
    )
    if stdin is not None:
        ctx.stdin = stdin
    if stdout is not None:
        ctx.stdout = stdout

    for key, raw in (store or {}).items():
        ctx.save(key, raw if isinstance(raw, Value) else from_python(raw))

    return ctx
