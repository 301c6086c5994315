"""
Runtime values for the hilang interpreter.

A stream value is exactly one of Integer (64-bit signed), Text or Empty.
Evaluation produces either a Value or the FAILURE sentinel (soft
failure); fatal faults are raised as EvaluationFault.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union


INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1

_INTEGER_TEXT = re.compile(r"[+-]?[0-9]+")


class ValueKind(Enum):
    """Kinds of stream value."""
    INTEGER = "Integer"
    TEXT = "Text"
    EMPTY = "Empty"


@dataclass(frozen=True)
class Value:
    """
    A runtime value.

    The `data` field holds an int, a str, or None for Empty.
    """
    data: Any
    kind: ValueKind

    def __repr__(self) -> str:
        if self.kind == ValueKind.EMPTY:
            return "Empty"
        return f"{self.kind.value}({self.data!r})"

    @property
    def is_empty(self) -> bool:
        return self.kind == ValueKind.EMPTY


class SoftFailure:
    """
    Recoverable, valueless outcome.

    Encodes boolean false, a missing store key and loop termination.
    Only Alternative recovers from it.
    """
    _instance: Optional["SoftFailure"] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "FAILURE"


FAILURE = SoftFailure()

Outcome = Union[Value, SoftFailure]

EMPTY = Value(None, ValueKind.EMPTY)


def is_failure(outcome: Outcome) -> bool:
    """Check whether an evaluation outcome is a soft failure."""
    return outcome is FAILURE


# Convenience constructors

def wrap_int64(n: int) -> int:
    """Wrap an arbitrary int into the signed 64-bit range."""
    n &= (1 << 64) - 1
    if n > INT64_MAX:
        n -= 1 << 64
    return n


def int_val(n: int) -> Value:
    """Create an integer value (wrapped to 64 bits)."""
    return Value(wrap_int64(int(n)), ValueKind.INTEGER)


def text_val(s: str) -> Value:
    """Create a text value."""
    return Value(str(s), ValueKind.TEXT)


def parse_integer(text: str) -> Optional[int]:
    """
    Parse signed decimal text into an int.

    Accepts an optional sign followed by ASCII digits, nothing else.
    Returns None for malformed text or values outside the 64-bit range.
    """
    if not _INTEGER_TEXT.fullmatch(text):
        return None
    n = int(text)
    if n < INT64_MIN or n > INT64_MAX:
        return None
    return n


def from_python(raw: Any) -> Value:
    """Wrap a raw Python value: None, int or str."""
    if raw is None:
        return EMPTY
    if isinstance(raw, bool):
        raise TypeError("bool is not a hilang value")
    if isinstance(raw, int):
        return int_val(raw)
    if isinstance(raw, str):
        return text_val(raw)
    raise TypeError(f"cannot convert {type(raw).__name__} to a hilang value")
