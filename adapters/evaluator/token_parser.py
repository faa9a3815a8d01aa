"""
Precedence climbing parser działający bezpośrednio na tokenach formuły.

Gramatyka (binding power rośnie w dół):
  expr    = term (('+'|'-') term)*           bp 10, lewostronne
  term    = unary (('*'|'/') unary)*         bp 20, lewostronne
  unary   = ('-'|'+') unary | power          bp 25
  power   = atom ('^' unary)?                bp 30, prawostronne
  atom    = NUMBER | VARIABLE | '(' expr ')'

Token typu TEXT nigdy nie jest poprawnym atomem.
"""
from __future__ import annotations

import re
from typing import Sequence

from contracts import (
    BinOpNode,
    ExprAST,
    NumberNode,
    Token,
    TokenKind,
    UnaryOpNode,
    VariableNode,
)


class EvaluationError(ValueError):
    """Sekwencja tokenów nie tworzy poprawnego wyrażenia arytmetycznego."""


# Lewy binding power operatorów binarnych
_LEFT_BP: dict[str, int] = {"+": 10, "-": 10, "*": 20, "/": 20, "^": 30}
_RIGHT_ASSOC = {"^"}
_UNARY_BP = 25
# Maksymalne zagnieżdżenie (nawiasy, unarne znaki, łańcuch '^')
_MAX_DEPTH = 100


class TokenParser:
    def __init__(self, tokens: Sequence[Token]) -> None:
        self._tokens = tokens
        self._pos = 0
        self._depth = 0

    def _peek(self) -> Token | None:
        return self._tokens[self._pos] if self._pos < len(self._tokens) else None

    def _consume(self) -> Token:
        t = self._tokens[self._pos]
        self._pos += 1
        return t

    def parse(self) -> ExprAST:
        if not self._tokens:
            raise EvaluationError("Puste wyrażenie")
        node = self._expr(0)
        if self._pos < len(self._tokens):
            raise EvaluationError(f"Nieoczekiwany token na pozycji {self._pos}: {self._tokens[self._pos].label()!r}")
        return node

    def _expr(self, min_bp: int) -> ExprAST:
        self._depth += 1
        if self._depth > _MAX_DEPTH:
            raise EvaluationError(f"Zbyt głębokie zagnieżdżenie wyrażenia (limit {_MAX_DEPTH})")
        try:
            return self._expr_loop(min_bp)
        finally:
            self._depth -= 1

    def _expr_loop(self, min_bp: int) -> ExprAST:
        left = self._unary()
        while True:
            tok = self._peek()
            if tok is None or tok.kind != TokenKind.OPERATOR or tok.value not in _LEFT_BP:
                break
            op = str(tok.value)
            bp = _LEFT_BP[op]
            if bp <= min_bp:
                break
            self._consume()
            # Prawostronne wiązanie dla '^': right_bp = bp - 1
            right = self._expr(bp - 1 if op in _RIGHT_ASSOC else bp)
            left = BinOpNode(op=op, left=left, right=right)  # type: ignore[arg-type]
        return left

    def _unary(self) -> ExprAST:
        tok = self._peek()
        if tok is not None and tok.kind == TokenKind.OPERATOR and tok.value in ("-", "+"):
            self._consume()
            operand = self._expr(_UNARY_BP)
            return UnaryOpNode(op=tok.value, operand=operand)  # type: ignore[arg-type]
        return self._primary()

    def _primary(self) -> ExprAST:
        tok = self._peek()
        if tok is None:
            raise EvaluationError("Nieoczekiwany koniec wyrażenia")

        if tok.kind == TokenKind.NUMBER:
            self._consume()
            return NumberNode(value=tok.value)  # type: ignore[arg-type]

        if tok.kind == TokenKind.VARIABLE:
            self._consume()
            return VariableNode(id=tok.id, name=tok.name, value=tok.value)  # type: ignore[arg-type]

        if tok.kind == TokenKind.TEXT:
            raise EvaluationError(f"Token tekstowy nie jest liczbą: {tok.value!r}")

        if tok.value == "(":
            self._consume()
            nxt = self._peek()
            if nxt is not None and nxt.kind == TokenKind.OPERATOR and nxt.value == ")":
                raise EvaluationError("Puste nawiasy")
            node = self._expr(0)
            closing = self._peek()
            if closing is None or closing.kind != TokenKind.OPERATOR or closing.value != ")":
                raise EvaluationError("Niezamknięty nawias")
            self._consume()
            return node

        raise EvaluationError(f"Oczekiwano liczby, otrzymano {tok.label()!r}")


def parse_tokens(tokens: Sequence[Token]) -> ExprAST:
    """Buduje AST z tokenów. Rzuca EvaluationError dla niepoprawnej sekwencji."""
    return TokenParser(tokens).parse()


def render_tokens(tokens: Sequence[Token]) -> str:
    """Czytelny zapis formuły do wyświetlenia: ( 1 + 2 ) => (1 + 2)."""
    result = " ".join(t.label() for t in tokens)
    result = re.sub(r"\(\s+", "(", result)
    result = re.sub(r"\s+\)", ")", result)
    return result
