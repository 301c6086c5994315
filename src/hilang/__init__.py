"""
hilang - a minimal stack-free scripting language.

A program is a single expression evaluated against one implicit stream
value. Success and soft failure stand in for true and false, loops end by
failing, and durable state lives in a global key/value store.

This module provides:
- Lexer and Parser: source text to generic operator tree
- TreeAdapter: generic operator tree to semantic tree
- Interpreter: evaluates the semantic tree

Usage:
    from hilang import parse_program, Interpreter, create_context, int_val

    program = parse_program('("3" -> int) + "a".load -> "b".store')
    interp = Interpreter(create_context(store={"a": 5}))
    result = interp.run(program)
    assert result.success
    assert interp.store["b"] == int_val(8)

Or in one call:
    from hilang import compile_and_run
    result = compile_and_run('"hello" -> output')
"""

__version__ = "0.1.0"

from .tokens import (
    Token,
    TokenType,
    SourceLocation,
    SourceSpan,
    OPERATORS,
)

from .lexer import (
    Lexer,
    tokenize,
)

from .tree import (
    Node,
    Placeholder,
    Group,
    Leaf,
    BinaryOp,
)

from .parser import (
    Parser,
    parse,
)

from .ast import (
    AstNode,
    AstVisitor,
    AstPrinter,
    Scope,
    Sequence,
    Alternative,
    Call,
    Name,
    Text,
    VarRef,
    format_ast,
)

from .adapter import (
    TreeAdapter,
    adapt,
    parse_program,
)

from .errors import (
    Diagnostic,
    ErrorSeverity,
    DslError,
    LexerError,
    ParserError,
    StructureError,
    EvaluationFault,
)

from .runtime import (
    Value,
    ValueKind,
    FAILURE,
    EMPTY,
    is_failure,
    int_val,
    text_val,
    ExecutionContext,
    create_context,
    Interpreter,
    ExecutionResult,
    execute,
    compile_and_run,
)

__all__ = [
    # Tokens
    'Token',
    'TokenType',
    'SourceLocation',
    'SourceSpan',
    'OPERATORS',

    # Lexer and parser
    'Lexer',
    'tokenize',
    'Node',
    'Placeholder',
    'Group',
    'Leaf',
    'BinaryOp',
    'Parser',
    'parse',

    # Semantic tree
    'AstNode',
    'AstVisitor',
    'AstPrinter',
    'Scope',
    'Sequence',
    'Alternative',
    'Call',
    'Name',
    'Text',
    'VarRef',
    'format_ast',

    # Adapter
    'TreeAdapter',
    'adapt',
    'parse_program',

    # Errors
    'Diagnostic',
    'ErrorSeverity',
    'DslError',
    'LexerError',
    'ParserError',
    'StructureError',
    'EvaluationFault',

    # Runtime
    'Value',
    'ValueKind',
    'FAILURE',
    'EMPTY',
    'is_failure',
    'int_val',
    'text_val',
    'ExecutionContext',
    'create_context',
    'Interpreter',
    'ExecutionResult',
    'execute',
    'compile_and_run',
]
