"""
contracts.py — Jedyne źródło prawdy dla wszystkich typów danych w FormulaBox.
Wszystkie moduły importują WYŁĄCZNIE stąd. Nie modyfikować bez versioning.
"""
from __future__ import annotations

import math
from enum import Enum
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

CONTRACTS_VERSION = "1.0.0"

# Symbole rozpoznawane jako operatory (w tym nawiasy)
OPERATORS: tuple[str, ...] = ("+", "-", "*", "/", "^", "(", ")")


# ─────────────────────────── Token ───────────────────────────────────────

class TokenKind(str, Enum):
    VARIABLE = "variable"   # zmienna wybrana z listy podpowiedzi
    OPERATOR = "operator"   # + - * / ^ ( )
    NUMBER = "number"       # np. 42, 3.5
    TEXT = "text"           # dowolny nierozpoznany tekst


Numeric = Union[int, float]


class Token(BaseModel):
    """
    Pojedynczy element formuły. Niezmienny, przy edycji podmieniany w całości.
    Variable ma zawsze `name` i `id`; pozostałe rodzaje nigdy.
    """
    model_config = ConfigDict(frozen=True)

    kind: TokenKind
    value: Union[int, float, str] = 0
    name: Optional[str] = None
    id: Optional[str] = None

    @model_validator(mode="after")
    def _check_shape(self) -> Token:
        if self.kind == TokenKind.VARIABLE:
            if not self.name or not self.id:
                raise ValueError("Variable token requires both name and id")
        elif self.name is not None or self.id is not None:
            raise ValueError(f"{self.kind.value} token cannot carry name/id")

        if self.kind in (TokenKind.NUMBER, TokenKind.VARIABLE):
            if not isinstance(self.value, (int, float)) or isinstance(self.value, bool):
                raise ValueError(f"{self.kind.value} token needs a numeric value")
            if isinstance(self.value, float) and not math.isfinite(self.value):
                raise ValueError(f"{self.kind.value} token value must be finite")
        elif self.kind == TokenKind.OPERATOR:
            if self.value not in OPERATORS:
                raise ValueError(f"Unknown operator: {self.value!r}")
        elif not isinstance(self.value, str):
            raise ValueError("text token needs a string value")
        return self

    @classmethod
    def number(cls, value: Numeric) -> Token:
        return cls(kind=TokenKind.NUMBER, value=value)

    @classmethod
    def operator(cls, symbol: str) -> Token:
        return cls(kind=TokenKind.OPERATOR, value=symbol)

    @classmethod
    def text(cls, value: str) -> Token:
        return cls(kind=TokenKind.TEXT, value=value)

    @classmethod
    def variable(cls, id: str, name: str, value: Numeric = 0) -> Token:
        return cls(kind=TokenKind.VARIABLE, value=value, name=name, id=id)

    def label(self) -> str:
        """Tekst wyświetlany w widoku (zmienne po nazwie)."""
        if self.kind == TokenKind.VARIABLE:
            return self.name or ""
        return str(self.value)


# ─────────────────────────── SuggestionProvider ──────────────────────────

class Suggestion(BaseModel):
    model_config = ConfigDict(extra="ignore")

    # Puste id/name nie dałoby poprawnego tokenu Variable
    id: str = Field(min_length=1)
    name: str = Field(min_length=1)

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, v: Any) -> Any:
        # mockapi zwraca id jako string, inne backendy jako int
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


# ─────────────────────────── InputClassifier ─────────────────────────────

class InputState(BaseModel):
    """Stan pola tekstowego potrzebny klasyfikatorowi do podjęcia decyzji."""
    pending: str = ""
    suggestions: list[Suggestion] = Field(default_factory=list)
    suggestions_open: bool = False
    highlighted: int = 0
    formula_length: int = 0


class InputActionKind(str, Enum):
    COMMIT_SUGGESTION = "commit_suggestion"
    APPEND = "append"
    REMOVE_LAST = "remove_last"
    MOVE_HIGHLIGHT = "move_highlight"
    CLOSE_SUGGESTIONS = "close_suggestions"
    EDIT_PENDING = "edit_pending"   # zwykły backspace w polu tekstowym
    NONE = "none"


class InputAction(BaseModel):
    kind: InputActionKind = InputActionKind.NONE
    tokens: list[Token] = Field(default_factory=list)  # do dopisania, w kolejności
    highlight: Optional[int] = None
    clear_pending: bool = False
    close_suggestions: bool = False
    prevent_default: bool = False


# ─────────────────────────── Evaluator ───────────────────────────────────

# AST dla wyrażeń arytmetycznych

class NumberNode(BaseModel):
    node_type: Literal["number"] = "number"
    value: Numeric


class VariableNode(BaseModel):
    node_type: Literal["variable"] = "variable"
    id: str
    name: str
    value: Numeric = 0


class BinOpNode(BaseModel):
    node_type: Literal["binop"] = "binop"
    op: Literal["+", "-", "*", "/", "^"]
    left: "ExprAST"
    right: "ExprAST"


class UnaryOpNode(BaseModel):
    node_type: Literal["unary"] = "unary"
    op: Literal["-", "+"]
    operand: "ExprAST"


ExprAST = Union[NumberNode, VariableNode, BinOpNode, UnaryOpNode]
BinOpNode.model_rebuild()
UnaryOpNode.model_rebuild()


class EvalStatus(str, Enum):
    OK = "ok"
    UNEVALUABLE = "unevaluable"


class EvalResult(BaseModel):
    status: EvalStatus = EvalStatus.OK
    value: Optional[Numeric] = None
    is_exact: bool = True
    error: Optional[str] = None                     # tylko diagnostyka
    steps: list[str] = Field(default_factory=list)  # czytelne kroki

    @classmethod
    def unevaluable(cls, reason: str) -> EvalResult:
        return cls(status=EvalStatus.UNEVALUABLE, is_exact=False, error=reason)

    @property
    def evaluable(self) -> bool:
        return self.status == EvalStatus.OK

    def display(self) -> str:
        return str(self.value) if self.evaluable else "Error"


# ─────────────────────────── Session view ────────────────────────────────

class FormulaView(BaseModel):
    tokens: list[Token]
    expression: str
    result: EvalResult
    pending: str = ""
    suggestions: list[Suggestion] = Field(default_factory=list)
    suggestions_open: bool = False
    highlighted: int = 0
    loading: bool = False           # zapytanie o podpowiedzi w toku
