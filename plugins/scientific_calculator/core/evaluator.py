"""Pure arithmetic evaluation for the Scientific Calculator plugin."""

from __future__ import annotations

import ast
import io
import math
import re
import tokenize
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from .functions import EMPTY_SCOPE, FunctionScope


class ErrorKind(str, Enum):
    """Stable failure taxonomy surfaced verbatim to callers."""

    SYNTAX = "SyntaxError"
    EVALUATION = "EvaluationError"
    DIVISION_BY_ZERO = "DivisionByZero"
    GENERIC = "GenericError"

    @property
    def label(self) -> str:
        return _ERROR_LABELS[self]


_ERROR_LABELS = {
    ErrorKind.SYNTAX: "Syntax Error",
    ErrorKind.EVALUATION: "Evaluation Error",
    ErrorKind.DIVISION_BY_ZERO: "Error: Division by zero",
    ErrorKind.GENERIC: "Error",
}

MAX_EXPR_LENGTH = 1024


class ExpressionError(ValueError):
    """Raised inside the evaluator; ``kind`` is fixed where the problem is found."""

    def __init__(self, message: str, kind: ErrorKind = ErrorKind.GENERIC):
        super().__init__(message)
        self.kind = kind


@dataclass(frozen=True, slots=True)
class Success:
    value: float

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class Failure:
    kind: ErrorKind
    message: str

    @property
    def ok(self) -> bool:
        return False


EvaluationResult = Success | Failure

_BINARY_OPS = (ast.Add, ast.Sub, ast.Mult, ast.Div, ast.Mod)
_NUMBER_LITERAL = re.compile(r"(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_OPERATOR_TOKENS = frozenset({"+", "-", "*", "/", "%", "(", ")", ","})
_LINE_BREAKS = re.compile(r"[\\\r\n\f\v]")


def _normalize_expression(expression: str, max_length: int) -> str:
    if not isinstance(expression, str) or not expression.strip():
        raise ExpressionError("Expression is required", ErrorKind.SYNTAX)
    expression = expression.strip()
    if len(expression) > max_length:
        raise ExpressionError("Expression is too long", ErrorKind.SYNTAX)
    return expression


def _check_tokens(expression: str) -> None:
    """Accept only decimal numbers, names, arithmetic operators, parentheses and commas.

    Comments, line breaks, digit separators and hex or complex literals are
    rejected before ``ast.parse`` sees the text.
    """

    if _LINE_BREAKS.search(expression):
        raise ExpressionError("Line breaks and continuations are not allowed", ErrorKind.SYNTAX)
    try:
        tokens = list(tokenize.generate_tokens(io.StringIO(expression).readline))
    except (tokenize.TokenError, SyntaxError) as exc:
        raise ExpressionError(f"Could not parse expression: {exc}", ErrorKind.SYNTAX) from exc
    for token in tokens:
        if token.type == tokenize.NUMBER:
            allowed = _NUMBER_LITERAL.fullmatch(token.string) is not None
        elif token.type == tokenize.OP:
            allowed = token.string in _OPERATOR_TOKENS
        elif token.type == tokenize.NEWLINE:
            # The tokenizer closes the last line with an empty NEWLINE token.
            allowed = token.string == ""
        else:
            allowed = token.type in (tokenize.NAME, tokenize.ENDMARKER)
        if not allowed:
            raise ExpressionError(f"Invalid token {token.string!r}", ErrorKind.SYNTAX)


def _validate_ast(node: ast.AST) -> None:
    if isinstance(node, ast.Expression):
        _validate_ast(node.body)
        return
    if isinstance(node, ast.BinOp):
        if not isinstance(node.op, _BINARY_OPS):
            raise ExpressionError("Operator not permitted", ErrorKind.SYNTAX)
        _validate_ast(node.left)
        _validate_ast(node.right)
        return
    if isinstance(node, ast.UnaryOp):
        if not isinstance(node.op, (ast.UAdd, ast.USub)):
            raise ExpressionError("Unary operator not permitted", ErrorKind.SYNTAX)
        _validate_ast(node.operand)
        return
    if isinstance(node, ast.Call):
        if not isinstance(node.func, ast.Name):
            raise ExpressionError("Only named functions are permitted", ErrorKind.SYNTAX)
        if node.keywords:
            raise ExpressionError("Keyword arguments are not supported", ErrorKind.SYNTAX)
        for arg in node.args:
            if isinstance(arg, ast.Starred):
                raise ExpressionError("Argument unpacking is not supported", ErrorKind.SYNTAX)
            _validate_ast(arg)
        return
    if isinstance(node, ast.Constant):
        if isinstance(node.value, bool) or not isinstance(node.value, (int, float)):
            raise ExpressionError("Only numeric literals are allowed", ErrorKind.SYNTAX)
        return
    if isinstance(node, ast.Name):
        raise ExpressionError(f"Unknown name '{node.id}'", ErrorKind.GENERIC)
    raise ExpressionError("Unsupported syntax", ErrorKind.SYNTAX)


def _divide(left: float, right: float) -> float:
    if right == 0:
        if left == 0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)
    return left / right


def _modulo(left: float, right: float) -> float:
    if right == 0:
        return math.nan
    return left % right


def _to_float(value: object) -> float:
    if isinstance(value, complex):
        raise ExpressionError("Complex results are not supported", ErrorKind.EVALUATION)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ExpressionError("Expression returned a non-numeric value", ErrorKind.EVALUATION)
    try:
        return float(value)
    except OverflowError as exc:
        raise ExpressionError("Number is out of range", ErrorKind.EVALUATION) from exc


def _eval_node(node: ast.AST, scope: FunctionScope) -> float:
    if isinstance(node, ast.Constant):
        value = _to_float(node.value)
    elif isinstance(node, ast.UnaryOp):
        operand = _eval_node(node.operand, scope)
        value = +operand if isinstance(node.op, ast.UAdd) else -operand
    elif isinstance(node, ast.BinOp):
        left = _eval_node(node.left, scope)
        right = _eval_node(node.right, scope)
        op = node.op
        if isinstance(op, ast.Add):
            value = left + right
        elif isinstance(op, ast.Sub):
            value = left - right
        elif isinstance(op, ast.Mult):
            value = left * right
        elif isinstance(op, ast.Div):
            value = _divide(left, right)
        elif isinstance(op, ast.Mod):
            value = _modulo(left, right)
        else:  # pragma: no cover - guarded by _validate_ast
            raise ExpressionError("Operator not permitted", ErrorKind.SYNTAX)
    elif isinstance(node, ast.Call):
        func_name = node.func.id
        func = scope.resolve(func_name)
        if func is None:
            raise ExpressionError(f"Unknown function '{func_name}'", ErrorKind.GENERIC)
        args = [_eval_node(arg, scope) for arg in node.args]
        try:
            value = _to_float(func(*args))
        except TypeError as exc:
            raise ExpressionError(f"{func_name} usage error: {exc}", ErrorKind.EVALUATION) from exc
    else:  # pragma: no cover - guarded by _validate_ast
        raise ExpressionError("Unsupported syntax", ErrorKind.SYNTAX)

    if math.isnan(value) or math.isinf(value):
        raise ExpressionError("Result is not finite", ErrorKind.DIVISION_BY_ZERO)
    return value


def evaluate_expression(
    expression: str,
    scope: FunctionScope = EMPTY_SCOPE,
    *,
    max_length: int = MAX_EXPR_LENGTH,
) -> EvaluationResult:
    """Evaluate ``expression`` with the functions visible through ``scope``.

    Returns :class:`Success` carrying a finite float, or :class:`Failure`
    tagged with the :class:`ErrorKind` that describes why evaluation stopped.
    """

    try:
        normalized = _normalize_expression(expression, max_length)
        _check_tokens(normalized)
        try:
            parsed = ast.parse(normalized, mode="eval")
        except (SyntaxError, ValueError) as exc:
            raise ExpressionError(f"Could not parse expression: {exc}", ErrorKind.SYNTAX) from exc
        _validate_ast(parsed)
        return Success(_eval_node(parsed.body, scope))
    except ExpressionError as exc:
        return Failure(exc.kind, str(exc))
    except RecursionError:
        return Failure(ErrorKind.EVALUATION, "Expression is nested too deeply")


def format_number(value: float) -> str:
    """Render ``value`` with the shortest digits that round-trip.

    Integers print without a fractional part and exponent notation is used
    below 1e-6 and from 1e21 upwards, e.g. ``14``, ``0.01``, ``1e-7``,
    ``1.5e+21``.
    """

    if not math.isfinite(value):
        raise ValueError("Only finite values can be formatted")
    if value == 0:
        return "0"
    sign, digits_tuple, exponent = Decimal(repr(value)).normalize().as_tuple()
    digits = "".join(str(d) for d in digits_tuple)
    # Position of the decimal point relative to the first digit.
    point = len(digits) + exponent
    prefix = "-" if sign else ""
    if len(digits) <= point <= 21:
        body = digits + "0" * (point - len(digits))
    elif 0 < point <= 21:
        body = f"{digits[:point]}.{digits[point:]}"
    elif -6 < point <= 0:
        body = "0." + "0" * -point + digits
    else:
        shift = point - 1
        mantissa = digits[0] if len(digits) == 1 else f"{digits[0]}.{digits[1:]}"
        body = f"{mantissa}e{'+' if shift > 0 else '-'}{abs(shift)}"
    return prefix + body


__all__ = [
    "ErrorKind",
    "ExpressionError",
    "Success",
    "Failure",
    "EvaluationResult",
    "MAX_EXPR_LENGTH",
    "evaluate_expression",
    "format_number",
]
