# Copyright 2026 TinyLex Contributors
# SPDX-License-Identifier: Apache-2.0

"""Sample interpreter for two-operand arithmetic, e.g. ``47 + 11``.

One operation is read per iteration until the reserved word ``exit`` or the
end of input. Lexer errors are reported and the interpreter resynchronises.
"""

import enum
import logging
from decimal import Decimal, DecimalException, Overflow
from typing import TextIO

from tinylex.lexer import Lexer, LexerSyntaxError, LineSource, UnexpectedTokenError

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

BANNER = "Enter simple arithmetic operations of two positive numbers, e.g. 47 + 11.\nType exit to stop.\n"


class EvaluationError(ArithmeticError):
    """Raised when an operation has no representable result."""


class CalcToken(enum.Enum):
    """Token types of the arithmetic language."""

    DECIMAL = "decimal"
    OPERATOR = "operator"
    RESERVED = "reserved"


class Interpreter:
    """Reads operations from ``source`` and writes results to ``output``.

    Owns the lexer and therefore the source; use it as a context manager or
    call ``close()``.
    """

    def __init__(self, source: LineSource, output: TextIO) -> None:
        self._output = output
        self._lexer: Lexer[CalcToken] = Lexer(source)
        self._lexer.define(CalcToken.DECIMAL, r"(\d+(?:\.\d+)?)\b")
        self._lexer.define(CalcToken.OPERATOR, r"(\+|-|\*|\/)")
        self._lexer.define(CalcToken.RESERVED, r"(exit)")

    def execute(self) -> int:
        """Run until ``exit`` or end of input. Returns the number of errors reported."""
        errors = 0
        while True:
            try:
                if self._lexer.match(CalcToken.RESERVED, "exit") or self._lexer.at_end:
                    break
                self._parse_operation()
            except UnexpectedTokenError as exc:
                self._report(str(exc))
                self._lexer.discard()
                errors += 1
            except LexerSyntaxError as exc:
                self._report(str(exc))
                self._lexer.skip_line()
                errors += 1
            except EvaluationError as exc:
                self._report(str(exc))
                errors += 1
        return errors

    def close(self) -> None:
        self._lexer.close()

    def __enter__(self) -> "Interpreter":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _parse_operation(self) -> None:
        a = Decimal(self._lexer.consume(CalcToken.DECIMAL))
        op = self._lexer.consume(CalcToken.OPERATOR)
        b = Decimal(self._lexer.consume(CalcToken.DECIMAL))

        try:
            result = evaluate(a, op, b)
        except DecimalException as exc:
            logger.debug("Evaluation of %s %s %s failed: %r", a, op, b, exc)
            raise EvaluationError(f"Cannot evaluate {a} {op} {b}: {_describe(exc, op, b)}") from exc
        print(f"Result: {result}", file=self._output)

    def _report(self, message: str) -> None:
        print(message, file=self._output)


def evaluate(a: Decimal, op: str, b: Decimal) -> Decimal:
    """Apply the binary operator ``op`` to ``a`` and ``b``.

    Raises:
        ValueError: If ``op`` is not one of ``+ - * /``.
        decimal.DecimalException: On division by zero or a result out of range.
    """
    if op == "+":
        return a + b
    if op == "-":
        return a - b
    if op == "*":
        return a * b
    if op == "/":
        return a / b
    raise ValueError(f"Unknown operator: {op!r}")


# ################
# Implementation
# ################


def _describe(exc: DecimalException, op: str, b: Decimal) -> str:
    if op == "/" and b.is_zero():
        return "division by zero"
    if isinstance(exc, Overflow):
        return "result out of range"
    return "invalid operation"
