"""
Adapter: KeystrokeClassifier
Implementuje port InputClassifier.

Klasyfikacja tekstu (classify):
  NUMBER   — cały fragment to liczba dziesiętna: 42, -3.5, .5, 1e3
  OPERATOR — dokładnie jeden z symboli + - * / ^ ( )
  TEXT     — wszystko inne, zachowane dosłownie (błąd dopiero przy ewaluacji)

Reguły klawiszy (decide), pierwsza pasująca wygrywa:
  1. Enter + otwarta, niepusta lista podpowiedzi → zmienna z podświetlonej podpowiedzi
  2. Enter + niepusty tekst                      → classify(tekst)
  3. klawisz operatora                           → flush(tekst), potem Operator
  4. Backspace + pusty tekst                     → usuń ostatni token
  5. ArrowUp / ArrowDown + otwarta lista         → cykliczny ruch podświetlenia
  6. Escape                                      → zamknij listę
"""
from __future__ import annotations

import math
import re

from contracts import (
    OPERATORS,
    InputAction,
    InputActionKind,
    InputState,
    Suggestion,
    Token,
)

# Liczba dziesiętna zajmująca cały fragment (bez inf/nan, bez podkreśleń)
_NUMBER_RE = re.compile(r'^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$')
_INT_RE = re.compile(r'^[+-]?\d{1,15}$')

_KEY_ENTER = "Enter"
_KEY_UP = "ArrowUp"
_KEY_DOWN = "ArrowDown"
_KEY_ESCAPE = "Escape"
_KEY_BACKSPACE = "Backspace"


def parse_number(fragment: str) -> int | float | None:
    """Zwraca wartość liczbową albo None, jeśli fragment nie jest w całości liczbą."""
    s = fragment.strip()
    if not _NUMBER_RE.match(s):
        return None
    if _INT_RE.match(s):
        return int(s)
    value = float(s)
    if not math.isfinite(value):
        return None
    return value


class KeystrokeClassifier:
    """Bezstanowy klasyfikator. Nigdy nie mutuje formuły sam, zwraca InputAction."""

    # -- InputClassifier protocol ------------------------------------------

    def classify(self, fragment: str) -> Token:
        text = fragment.strip()
        number = parse_number(text)
        if number is not None:
            return Token.number(number)
        if text in OPERATORS:
            return Token.operator(text)
        return Token.text(text)

    def flush(self, fragment: str) -> Token | None:
        text = fragment.strip()
        if not text:
            return None
        number = parse_number(text)
        if number is not None:
            return Token.number(number)
        return Token.text(text)

    def decide(self, key: str, state: InputState) -> InputAction:
        has_list = state.suggestions_open and bool(state.suggestions)

        if key == _KEY_ENTER:
            if has_list:
                chosen = state.suggestions[self._clamp(state.highlighted, state.suggestions)]
                return self._commit(
                    InputActionKind.COMMIT_SUGGESTION,
                    [self.variable_from(chosen)],
                )
            if state.pending.strip():
                return self._commit(InputActionKind.APPEND, [self.classify(state.pending)])
            return InputAction()

        if key in OPERATORS:
            tokens: list[Token] = []
            flushed = self.flush(state.pending)
            if flushed is not None:
                tokens.append(flushed)
            tokens.append(Token.operator(key))
            return self._commit(InputActionKind.APPEND, tokens)

        if key == _KEY_BACKSPACE:
            if state.pending == "" and state.formula_length > 0:
                return InputAction(kind=InputActionKind.REMOVE_LAST, prevent_default=True)
            if state.pending:
                return InputAction(kind=InputActionKind.EDIT_PENDING)
            return InputAction()

        if key in (_KEY_UP, _KEY_DOWN):
            if not has_list:
                return InputAction()
            size = len(state.suggestions)
            current = self._clamp(state.highlighted, state.suggestions)
            step = -1 if key == _KEY_UP else 1
            return InputAction(
                kind=InputActionKind.MOVE_HIGHLIGHT,
                highlight=(current + step) % size,
                prevent_default=True,
            )

        if key == _KEY_ESCAPE:
            return InputAction(kind=InputActionKind.CLOSE_SUGGESTIONS, close_suggestions=True)

        return InputAction()

    # -- Pomocnicze --------------------------------------------------------

    @staticmethod
    def variable_from(suggestion: Suggestion) -> Token:
        # Brak powiązania z realną wielkością, wartość domyślna 0
        return Token.variable(id=suggestion.id, name=suggestion.name)

    @staticmethod
    def _commit(kind: InputActionKind, tokens: list[Token]) -> InputAction:
        return InputAction(
            kind=kind,
            tokens=tokens,
            clear_pending=True,
            close_suggestions=True,
            prevent_default=True,
        )

    @staticmethod
    def _clamp(index: int, suggestions: list[Suggestion]) -> int:
        return min(max(index, 0), len(suggestions) - 1)
