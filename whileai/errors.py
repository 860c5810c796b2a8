# whileai/errors.py
"""
Error types for the whileai analyzer.

Architecture Overview:
─────────────────────
┌─────────────────────────────────────────────────────────────────────────────┐
│                          Error Hierarchy                                     │
├─────────────────────────────────────────────────────────────────────────────┤
│  WhileAIError (base)                                                         │
│  ├── ConfigurationError       - Rejected before any analysis work begins     │
│  ├── ParseError               - Program / initial-state text is malformed    │
│  ├── AnalysisArithmeticError  - Program errors surfaced to the caller        │
│  │   ├── DivisionByZeroError                                                 │
│  │   ├── MalformedIntervalError                                              │
│  │   └── UndefinedInfinityError                                              │
│  └── InternalError            - Analyzer bugs (should never happen)          │
│      ├── UnreachableReadError                                                │
│      └── FixpointDivergenceError                                             │
└─────────────────────────────────────────────────────────────────────────────┘

An infeasible path is *not* an error: it is the domain bottom / the
Unreachable state and flows through every lattice operator silently.

Error Codes:
────────────
Each error carries a code of the form WAI-XXXX where XXXX is in ranges:
  - 1000-1999: Configuration errors
  - 2000-2999: Parse errors
  - 3000-3999: Arithmetic errors in the analysed program
  - 9000-9999: Internal errors
"""

from __future__ import annotations

from enum import Enum, unique
from typing import Optional

__all__ = [
    "ErrorCode",
    "WhileAIError",
    "ConfigurationError",
    "ParseError",
    "AnalysisArithmeticError",
    "DivisionByZeroError",
    "MalformedIntervalError",
    "UndefinedInfinityError",
    "InternalError",
    "UnreachableReadError",
    "FixpointDivergenceError",
]


# ═══════════════════════════════════════════════════════════════════════════════
# ERROR CODES
# ═══════════════════════════════════════════════════════════════════════════════

@unique
class ErrorCode(Enum):
    """Stable error codes, grouped by range."""

    # Configuration (1000-1999)
    INVERTED_BOUNDS = 1001
    NEGATIVE_DELAY = 1002
    BAD_ITERATION_CAP = 1003
    UNKNOWN_DOMAIN = 1004

    # Parsing (2000-2999)
    SYNTAX = 2001
    STATE_FILE = 2002

    # Arithmetic (3000-3999)
    DIVISION_BY_ZERO = 3001
    MALFORMED_INTERVAL = 3002
    UNDEFINED_INFINITY = 3003

    # Internal (9000-9999)
    INTERNAL = 9000
    UNREACHABLE_READ = 9001
    FIXPOINT_DIVERGENCE = 9002

    @property
    def code(self) -> str:
        """Get the full error code string."""
        return f"WAI-{self.value:04d}"

    def __str__(self) -> str:
        return self.code


# ═══════════════════════════════════════════════════════════════════════════════
# EXCEPTION CLASSES
# ═══════════════════════════════════════════════════════════════════════════════

class WhileAIError(Exception):
    """Base exception for all whileai errors."""

    default_code = ErrorCode.INTERNAL

    def __init__(self, message: str, code: Optional[ErrorCode] = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class ConfigurationError(WhileAIError):
    """Malformed analysis configuration."""

    default_code = ErrorCode.INVERTED_BOUNDS


# ───────────────────────────────────────────────────────────────────────────────
# PARSE ERRORS
# ───────────────────────────────────────────────────────────────────────────────

class ParseError(WhileAIError):
    """Source text could not be parsed."""

    default_code = ErrorCode.SYNTAX

    def __init__(
        self,
        message: str,
        line: int = 0,
        column: int = 0,
        filename: str = "<input>",
        code: Optional[ErrorCode] = None,
    ) -> None:
        super().__init__(message, code)
        self.line = line
        self.column = column
        self.filename = filename

    def __str__(self) -> str:
        if self.line:
            return f"{self.filename}:{self.line}:{self.column}: [{self.code}] {self.message}"
        return f"{self.filename}: [{self.code}] {self.message}"


# ───────────────────────────────────────────────────────────────────────────────
# ARITHMETIC ERRORS
# ───────────────────────────────────────────────────────────────────────────────

class AnalysisArithmeticError(WhileAIError):
    """An arithmetic error in the analysed program.

    Distinct from an infeasible branch: these abort the evaluation of the
    current expression and propagate to the caller of the analysis.
    """

    default_code = ErrorCode.DIVISION_BY_ZERO


class DivisionByZeroError(AnalysisArithmeticError):
    """Division whose divisor is the constant zero."""

    def __init__(self, expression: str) -> None:
        super().__init__(
            f"division by the constant zero in '{expression}'",
            ErrorCode.DIVISION_BY_ZERO,
        )
        self.expression = expression


class MalformedIntervalError(AnalysisArithmeticError):
    """Interval literal whose lower bound exceeds its upper bound."""

    def __init__(self, lo: object, hi: object) -> None:
        super().__init__(
            f"interval literal [{lo}, {hi}] has lower bound greater than upper bound",
            ErrorCode.MALFORMED_INTERVAL,
        )
        self.lo = lo
        self.hi = hi


class UndefinedInfinityError(AnalysisArithmeticError):
    """+inf and -inf were added together."""

    def __init__(self, operation: str = "+inf + -inf") -> None:
        super().__init__(
            f"undefined operation on infinities: {operation}",
            ErrorCode.UNDEFINED_INFINITY,
        )


# ───────────────────────────────────────────────────────────────────────────────
# INTERNAL ERRORS
# ───────────────────────────────────────────────────────────────────────────────

class InternalError(WhileAIError):
    """Analyzer bug (should never happen)."""

    default_code = ErrorCode.INTERNAL


class UnreachableReadError(InternalError):
    """A variable was read from the Unreachable state."""

    def __init__(self, variable: str) -> None:
        super().__init__(
            f"read of '{variable}' from an unreachable state",
            ErrorCode.UNREACHABLE_READ,
        )
        self.variable = variable


class FixpointDivergenceError(InternalError):
    """A fixpoint phase did not stabilise within the iteration cap."""

    def __init__(self, phase: str, iterations: int) -> None:
        super().__init__(
            f"{phase} phase did not stabilise after {iterations} iterations",
            ErrorCode.FIXPOINT_DIVERGENCE,
        )
        self.phase = phase
        self.iterations = iterations
