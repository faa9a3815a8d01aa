"""
Adapter: ASTEvaluator
Implementuje port Evaluator: parsuje tokeny (token_parser) i rekurencyjnie
przechodzi ExprAST z Fraction.

Fractions zapewniają dokładną arytmetykę dla + - * / (0.1 + 0.2 == 0.3).
Potęgowanie jest dokładne dla całkowitych wykładników o ograniczonym rozmiarze;
pozostałe przypadki liczone są na float.

evaluate() — nigdy nie rzuca wyjątku dla błędnej formuły,
             zwraca EvalResult.unevaluable(...)
eval_expr() — liczy gotowe AST, rzuca EvaluationError / ArithmeticError
"""
from __future__ import annotations

import logging
import math
from fractions import Fraction
from typing import Mapping, Sequence, Union

from adapters.evaluator.token_parser import EvaluationError, parse_tokens
from contracts import (
    BinOpNode,
    EvalResult,
    ExprAST,
    NumberNode,
    Token,
    UnaryOpNode,
    VariableNode,
)

logger = logging.getLogger("formulabox.evaluator")

Value = Union[Fraction, float]

# Maksymalny rozmiar (w bitach) wyniku dokładnego potęgowania
_MAX_EXACT_POW_BITS = 8192
# Większe wyniki całkowite zwracane są jako float (lub nieobliczalne przy przepełnieniu)
_MAX_INT_RESULT_BITS = 1024


def _safe_div(a: Value, b: Value) -> Value:
    if b == 0:
        raise ZeroDivisionError("Dzielenie przez zero")
    return a / b


def _pow(a: Value, b: Value) -> Value:
    if isinstance(a, Fraction) and isinstance(b, Fraction) and b.denominator == 1:
        if a == 0 and b < 0:
            raise ZeroDivisionError("Zero do potęgi ujemnej")
        bits = max(a.numerator.bit_length(), a.denominator.bit_length()) * abs(b.numerator)
        if bits <= _MAX_EXACT_POW_BITS:
            return a ** int(b)
    if a == 0 and b < 0:
        raise ZeroDivisionError("Zero do potęgi ujemnej")
    result = float(a) ** float(b)
    if isinstance(result, complex):
        raise EvaluationError("Wynik zespolony (ujemna podstawa, ułamkowy wykładnik)")
    return result


# Mapowanie symboli operatorów na operacje
_OP_FUNCS = {
    "+": lambda a, b: a + b,
    "-": lambda a, b: a - b,
    "*": lambda a, b: a * b,
    "/": _safe_div,
    "^": _pow,
}


def _to_value(v: Union[int, float]) -> Fraction:
    # repr(float) to najkrótszy zapis, więc 0.1 → 1/10 a nie 3602879701896397/36028797018963968
    if isinstance(v, float):
        if not math.isfinite(v):
            raise EvaluationError(f"Wartość nieskończona: {v!r}")
        return Fraction(repr(v))
    return Fraction(v)


class ASTEvaluator:
    """Ewaluator formuły oparty na AST. Tylko odczyt, niczego nie mutuje."""

    # -- Evaluator protocol ------------------------------------------------

    def evaluate(
        self,
        tokens: Sequence[Token],
        env: Mapping[str, Union[int, float]] | None = None,
    ) -> EvalResult:
        try:
            ast = parse_tokens(tokens)
            return self.eval_expr(ast, env)
        except (EvaluationError, ArithmeticError) as exc:
            logger.debug("Formuła nieobliczalna: %s", exc)
            return EvalResult.unevaluable(str(exc))

    # -- AST ---------------------------------------------------------------

    def eval_expr(
        self,
        ast: ExprAST,
        env: Mapping[str, Union[int, float]] | None = None,
    ) -> EvalResult:
        """
        Rekurencyjnie oblicza wartość AST.
        env: podstawienia zmiennych po id (np. {"17": 5}).
        Zwraca EvalResult z wartością i krokami.
        """
        bound = {k: _to_value(v) for k, v in (env or {}).items()}
        value, steps = self._eval(ast, bound)

        # Konwersja Fraction → int lub float
        if isinstance(value, Fraction):
            if value.denominator == 1 and value.numerator.bit_length() <= _MAX_INT_RESULT_BITS:
                return EvalResult(value=int(value), is_exact=True, steps=steps)
            return EvalResult(value=float(value), is_exact=False, steps=steps)

        if not math.isfinite(value):
            raise OverflowError("Wynik nieskończony")
        return EvalResult(value=value, is_exact=False, steps=steps)

    # -- Prywatne ----------------------------------------------------------

    def _eval(
        self,
        root: ExprAST,
        env: dict[str, Fraction],
    ) -> tuple[Value, list[str]]:
        """
        Zwraca (wartość, lista kroków).
        Post-order na jawnym stosie: długie łańcuchy (1 + 1 + ... + 1)
        budują drzewo głębokie w lewo, więc bez rekurencji.
        """
        steps: list[str] = []
        values: list[Value] = []
        stack: list[tuple[ExprAST, bool]] = [(root, False)]

        while stack:
            node, children_done = stack.pop()

            if isinstance(node, NumberNode):
                values.append(_to_value(node.value))

            elif isinstance(node, VariableNode):
                val = env.get(node.id, _to_value(node.value))
                steps.append(f"{node.name} = {_fmt(val)}")
                values.append(val)

            elif isinstance(node, UnaryOpNode):
                if not children_done:
                    stack.append((node, True))
                    stack.append((node.operand, False))  # type: ignore[arg-type]
                    continue
                val = values.pop()
                if node.op == "+":
                    values.append(val)
                    continue
                result = -val
                steps.append(f"-({_fmt(val)}) = {_fmt(result)}")
                values.append(result)

            elif isinstance(node, BinOpNode):
                if not children_done:
                    stack.append((node, True))
                    stack.append((node.right, False))  # type: ignore[arg-type]
                    stack.append((node.left, False))   # type: ignore[arg-type]
                    continue
                right_val = values.pop()
                left_val = values.pop()

                fn = _OP_FUNCS.get(node.op)
                if fn is None:
                    raise EvaluationError(f"Nieznany operator: {node.op!r}")

                result = fn(left_val, right_val)
                steps.append(f"{_fmt(left_val)} {node.op} {_fmt(right_val)} = {_fmt(result)}")
                values.append(result)

            else:
                raise TypeError(f"Nieznany typ węzła AST: {type(node)}")

        return values.pop(), steps


def _fmt(v: Value) -> str:
    """Czytelna reprezentacja wartości."""
    if isinstance(v, float):
        return format(v, ".12g")
    if max(v.numerator.bit_length(), v.denominator.bit_length()) > _MAX_INT_RESULT_BITS:
        try:
            return "~" + format(float(v), ".12g")
        except OverflowError:
            return "~inf" if v > 0 else "~-inf"
    if v.denominator == 1:
        return str(v.numerator)
    return f"{v.numerator}/{v.denominator}"
