"""
Exceptions and diagnostics for hilang.

Error code ranges:
- E0xx: Lexer errors
- E1xx: Parser errors
- E2xx: Structural errors (generic tree cannot be adapted)
- E3xx: Evaluation faults
- E4xx: Execution failures reported at top level
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List
from .tokens import SourceSpan


class ErrorSeverity(Enum):
    """Severity levels for diagnostics; every hilang diagnostic is an error."""
    ERROR = "error"


@dataclass
class Diagnostic:
    """A single diagnostic message."""
    code: str                       # E001, E101, etc.
    message: str                    # Human-readable message
    severity: ErrorSeverity
    span: Optional[SourceSpan] = None
    source_line: Optional[str] = None   # The actual line of source code
    hints: List[str] = field(default_factory=list)

    def summary(self) -> str:
        """Single-line form: location: severity[code]: message."""
        if self.span is not None:
            return f"{self.span.start}: {self.severity.value}[{self.code}]: {self.message}"
        return f"{self.severity.value}[{self.code}]: {self.message}"

    def format(self, show_source: bool = True) -> str:
        """Format the diagnostic for display."""
        parts = [self.summary()]

        # Source line with caret
        if show_source and self.source_line is not None and self.span is not None:
            parts.append(f"  |")
            line_num = str(self.span.start.line)
            parts.append(f"{line_num:>3} | {self.source_line}")

            col = self.span.start.column
            end_col = self.span.end.column if self.span.start.line == self.span.end.line else len(self.source_line) + 1
            underline_len = max(1, end_col - col)
            parts.append(f"    | {' ' * (col - 1)}{'^' * underline_len}")

        for hint in self.hints:
            parts.append(f"    = hint: {hint}")

        return "\n".join(parts)

    def to_json(self) -> dict:
        """Convert to JSON-serializable dict for tooling integration."""
        result = {
            "code": self.code,
            "message": self.message,
            "severity": self.severity.value,
            "hints": self.hints,
        }
        if self.span is not None:
            result["range"] = {
                "start": {
                    "line": self.span.start.line,
                    "column": self.span.start.column,
                    "offset": self.span.start.offset,
                },
                "end": {
                    "line": self.span.end.line,
                    "column": self.span.end.column,
                    "offset": self.span.end.offset,
                },
            }
        return result


class DslError(Exception):
    """Base exception for hilang errors."""

    def __init__(self, diagnostic: Diagnostic):
        self.diagnostic = diagnostic
        super().__init__(diagnostic.message)

    @property
    def code(self) -> str:
        return self.diagnostic.code

    def __str__(self) -> str:
        return self.diagnostic.format()


class LexerError(DslError):
    """Error during lexical analysis (E0xx)."""
    pass


class ParserError(DslError):
    """Error while building the generic operator tree (E1xx)."""
    pass


class StructureError(DslError):
    """Generic tree has no legal semantic form (E2xx)."""
    pass


class EvaluationFault(DslError):
    """
    Fatal fault during evaluation (E3xx).

    Unwinds every pending Sequence and Alternative frame; only the
    top-level execute() turns it into a failed ExecutionResult.
    """
    pass


def _error(code: str, message: str, span: Optional[SourceSpan],
           source_line: Optional[str] = None, hints: Optional[List[str]] = None) -> Diagnostic:
    return Diagnostic(
        code=code,
        message=message,
        severity=ErrorSeverity.ERROR,
        span=span,
        source_line=source_line,
        hints=hints or [],
    )


# --- Lexer error codes ---

def error_unexpected_character(char: str, span: SourceSpan, source_line: str = None) -> LexerError:
    """E001: Unexpected character."""
    return LexerError(_error("E001", f"unexpected character '{char}'", span, source_line))


def error_unterminated_string(span: SourceSpan, source_line: str = None) -> LexerError:
    """E002: Unterminated string literal."""
    return LexerError(_error(
        "E002", "unterminated string literal", span, source_line,
        hints=["string literals must be closed with '\"' on the same line"],
    ))


# --- Parser error codes ---

def error_unexpected_token(found: str, span: SourceSpan, source_line: str = None) -> ParserError:
    """E101: Token left over after a complete expression."""
    return ParserError(_error(
        "E101", f"unexpected {found}, expected an operator or end of file", span, source_line,
    ))


def error_unbalanced_paren(span: SourceSpan, source_line: str = None) -> ParserError:
    """E102: '(' without matching ')'."""
    return ParserError(_error("E102", "expected ')'", span, source_line))


def error_nesting_too_deep(span: Optional[SourceSpan], source_line: str = None) -> ParserError:
    """E103: Parentheses nested past the recursion limit."""
    return ParserError(_error(
        "E103", "expression nested too deeply", span, source_line,
        hints=["raise the limit with HILANG_RECURSION_LIMIT"],
    ))


# --- Structural error codes ---

def error_missing_operand(span: Optional[SourceSpan]) -> StructureError:
    """E201: Placeholder in an operand position."""
    return StructureError(_error("E201", "missing operand", span))


def error_malformed_variable(span: Optional[SourceSpan]) -> StructureError:
    """E202: '\\' not used as a prefix on a bare name."""
    return StructureError(_error(
        "E202", "malformed variable marker", span,
        hints=["write the marker directly before a name, e.g. \\name"],
    ))


def error_unknown_operator(label: str, span: Optional[SourceSpan]) -> StructureError:
    """E203: Operator label with no semantic mapping."""
    return StructureError(_error("E203", f"unknown operator '{label}'", span))


def error_structure_too_deep(span: Optional[SourceSpan]) -> StructureError:
    """E204: Tree nested past the recursion limit."""
    return StructureError(_error(
        "E204", "expression nested too deeply", span,
        hints=["raise the limit with HILANG_RECURSION_LIMIT"],
    ))


# --- Evaluation faults ---

def fault_type_mismatch(operation: str, expected: str, found: str,
                        span: Optional[SourceSpan] = None) -> EvaluationFault:
    """E301: Runtime value of the wrong kind."""
    return EvaluationFault(_error(
        "E301", f"'{operation}' expected {expected}, found {found}", span,
    ))


def fault_missing_operand(operation: str, span: Optional[SourceSpan] = None) -> EvaluationFault:
    """E302: Built-in called with too few operands."""
    return EvaluationFault(_error(
        "E302", f"'{operation}' is missing an operand", span,
        hints=[f"pass the operand with a dot, e.g. \"key\".{operation}"],
    ))


def fault_unknown_operation(label: str, span: Optional[SourceSpan] = None) -> EvaluationFault:
    """E303: Name not in the built-in table."""
    return EvaluationFault(_error("E303", f"unknown operation '{label}'", span))


def fault_unsupported_variable(label: str, span: Optional[SourceSpan] = None) -> EvaluationFault:
    """E304: Variable markers parse but have no runtime meaning."""
    return EvaluationFault(_error(
        "E304", f"variable '\\{label}' is not supported at runtime", span,
    ))


def fault_literal_misuse(span: Optional[SourceSpan] = None) -> EvaluationFault:
    """E305: Literal reached with a non-empty stream or pending operands."""
    return EvaluationFault(_error(
        "E305", "text literal requires an empty stream and no operands", span,
    ))


def fault_division_by_zero(span: Optional[SourceSpan] = None) -> EvaluationFault:
    """E306: Remainder by zero."""
    return EvaluationFault(_error("E306", "remainder by zero", span))


def fault_too_deep(span: Optional[SourceSpan] = None) -> EvaluationFault:
    """E307: Python recursion limit hit while walking the tree."""
    return EvaluationFault(_error(
        "E307", "evaluation nested too deeply", span,
        hints=["raise the limit with HILANG_RECURSION_LIMIT"],
    ))


# --- Top-level execution failures ---

def failure_soft(span: Optional[SourceSpan] = None) -> Diagnostic:
    """E401: Program ended in soft failure."""
    return _error("E401", "program failed", span)


def failure_not_empty(found: str) -> Diagnostic:
    """E402: Program ended with a value instead of Empty."""
    return _error(
        "E402", f"program must end with an empty stream, found {found}", None,
        hints=["finish with -> output or -> \"key\".store to consume the stream"],
    )
