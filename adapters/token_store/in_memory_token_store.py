"""
Adapter: InMemoryTokenStore
Implementuje port TokenStore: formuła trzymana jako lista w pamięci.

Każda mutacja kończy się przed zwróceniem sterowania, więc snapshot()
zawsze widzi stan po ostatniej zakończonej operacji.
"""
from __future__ import annotations

import logging
from typing import Iterable

from contracts import Token

logger = logging.getLogger("formulabox.token_store")


class InMemoryTokenStore:
    """
    Formuła jednej sesji. Przekazywana jawnie (brak globalnego stanu).
    Jednowątkowa, wszystkie mutacje przychodzą z jednej pętli zdarzeń.
    """

    def __init__(self, tokens: Iterable[Token] = ()) -> None:
        self._tokens: list[Token] = list(tokens)

    # -- TokenStore protocol -----------------------------------------------

    def append(self, token: Token) -> None:
        self._tokens.append(token)

    def replace_at(self, index: int, token: Token) -> bool:
        if not self._in_bounds(index):
            logger.debug("replace_at(%d) poza zakresem (len=%d)", index, len(self._tokens))
            return False
        self._tokens[index] = token
        return True

    def remove_at(self, index: int) -> Token | None:
        if not self._in_bounds(index):
            logger.debug("remove_at(%d) poza zakresem (len=%d)", index, len(self._tokens))
            return None
        return self._tokens.pop(index)

    def clear(self) -> None:
        self._tokens = []

    def snapshot(self) -> tuple[Token, ...]:
        return tuple(self._tokens)

    def __len__(self) -> int:
        return len(self._tokens)

    # -- Prywatne ----------------------------------------------------------

    def _in_bounds(self, index: int) -> bool:
        # Ujemne indeksy traktujemy jako błąd zakresu, nie jako indeksowanie od końca
        return 0 <= index < len(self._tokens)
