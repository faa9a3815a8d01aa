"""
session.py — FormulaSession: kontroler widżetu formuły.

Łączy wstrzyknięte komponenty (brak globalnego stanu):
  TokenStore         — formuła
  InputClassifier    — decyzja, co zrobić z klawiszem
  Evaluator          — wynik liczony od nowa przy każdym odczycie
  SuggestionProvider — podpowiedzi zmiennych (async)

Sesja trzyma stan po stronie UI: wpisywany tekst, listę podpowiedzi,
podświetlony indeks i licznik generacji zapytań. Odpowiedź na zapytanie
o podpowiedzi jest stosowana tylko wtedy, gdy generacja i tekst się zgadzają
(wygrywa ostatnie zapytanie, przestarzałe odpowiedzi są odrzucane).
"""
from __future__ import annotations

import logging
from typing import Mapping, Union

from adapters.evaluator.token_parser import render_tokens
from contracts import (
    EvalResult,
    FormulaView,
    InputAction,
    InputActionKind,
    InputState,
    Suggestion,
    Token,
)
from ports.evaluator import Evaluator
from ports.input_classifier import InputClassifier
from ports.suggestion_provider import SuggestionProvider
from ports.token_store import TokenStore

logger = logging.getLogger("formulabox.session")


class FormulaSession:
    def __init__(
        self,
        store: TokenStore,
        classifier: InputClassifier,
        evaluator: Evaluator,
        suggestion_provider: SuggestionProvider,
        env: Mapping[str, Union[int, float]] | None = None,
    ) -> None:
        self._store = store
        self._classifier = classifier
        self._evaluator = evaluator
        self._provider = suggestion_provider
        self._env = dict(env or {})

        self.pending: str = ""
        self.suggestions: list[Suggestion] = []
        self.suggestions_open: bool = False
        self.highlighted: int = 0
        self.loading: bool = False
        self._generation = 0

    # ── Wpisywany tekst i podpowiedzi ─────────────────────────────────────────

    async def set_input(self, text: str) -> bool:
        """
        Ustawia wpisywany tekst i pobiera podpowiedzi dla niego.
        Zwraca True, jeśli wynik zapytania został zastosowany;
        False dla pustego tekstu albo gdy w międzyczasie przyszło nowsze zapytanie.
        """
        self.pending = text
        self._generation += 1
        generation = self._generation

        if not text.strip():
            self._close_suggestions()
            return False

        # Lista poprzedniego zapytania nie może być zatwierdzona Enterem
        self.suggestions = []
        self.suggestions_open = True
        self.highlighted = 0
        self.loading = True

        results = await self._provider.lookup(text)

        if generation != self._generation or text != self.pending:
            logger.debug("Odrzucono przestarzałe podpowiedzi dla %r (generacja %d)", text, generation)
            return False

        self.suggestions = results
        self.loading = False
        if self.highlighted >= len(results):
            self.highlighted = 0
        return True

    def blur(self) -> None:
        """Fokus przeszedł gdzie indziej, lista podpowiedzi się zamyka."""
        self.suggestions_open = False

    # ── Zdarzenia klawiatury ──────────────────────────────────────────────────

    def press(self, key: str) -> InputAction:
        action = self._classifier.decide(key, self.input_state())
        self.apply(action)
        return action

    def apply(self, action: InputAction) -> None:
        if action.kind in (InputActionKind.APPEND, InputActionKind.COMMIT_SUGGESTION):
            for token in action.tokens:
                self._store.append(token)
        elif action.kind == InputActionKind.REMOVE_LAST:
            self._store.remove_at(len(self._store) - 1)
        elif action.kind == InputActionKind.MOVE_HIGHLIGHT and action.highlight is not None:
            self.highlighted = action.highlight

        if action.clear_pending:
            self.pending = ""
            # Zapytania w locie dotyczą już nieaktualnego tekstu
            self._generation += 1
            self.loading = False
        if action.close_suggestions:
            if action.clear_pending:
                self._close_suggestions()
            else:
                self.suggestions_open = False

    def select_suggestion(self, index: int) -> bool:
        """Kliknięcie w podpowiedź. False, gdy lista nie ma takiej pozycji."""
        if not 0 <= index < len(self.suggestions):
            logger.debug("select_suggestion(%d) poza zakresem (len=%d)", index, len(self.suggestions))
            return False
        token = Token.variable(id=self.suggestions[index].id, name=self.suggestions[index].name)
        self._store.append(token)
        self.pending = ""
        self._generation += 1
        self._close_suggestions()
        return True

    def clear(self) -> None:
        self._store.clear()

    # ── Akcje na tokenach (menu tokenu: Edit / Delete / Properties) ───────────

    def edit_token(self, index: int, text: str) -> bool:
        if not text.strip():
            return False
        return self._store.replace_at(index, self._classifier.classify(text))

    def delete_token(self, index: int) -> bool:
        return self._store.remove_at(index) is not None

    def token_properties(self, index: int) -> Token | None:
        tokens = self._store.snapshot()
        if 0 <= index < len(tokens):
            return tokens[index]
        return None

    # ── Odczyt ────────────────────────────────────────────────────────────────

    def input_state(self) -> InputState:
        return InputState(
            pending=self.pending,
            suggestions=self.suggestions,
            suggestions_open=self.suggestions_open,
            highlighted=self.highlighted,
            formula_length=len(self._store),
        )

    def tokens(self) -> tuple[Token, ...]:
        return self._store.snapshot()

    def result(self) -> EvalResult:
        return self._evaluator.evaluate(self._store.snapshot(), self._env)

    def view(self) -> FormulaView:
        tokens = self._store.snapshot()
        return FormulaView(
            tokens=list(tokens),
            expression=render_tokens(tokens),
            result=self._evaluator.evaluate(tokens, self._env),
            pending=self.pending,
            suggestions=list(self.suggestions),
            suggestions_open=self.suggestions_open,
            highlighted=self.highlighted,
            loading=self.loading,
        )

    # ── Prywatne ──────────────────────────────────────────────────────────────

    def _close_suggestions(self) -> None:
        self.suggestions = []
        self.suggestions_open = False
        self.highlighted = 0
        self.loading = False
