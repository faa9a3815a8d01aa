"""
Port: SuggestionProvider
Odpowiedzialność: zamiana wpisywanego tekstu na listę kandydatów na zmienne.
"""
from typing import Protocol, runtime_checkable

from contracts import Suggestion


@runtime_checkable
class SuggestionProvider(Protocol):
    async def lookup(self, query: str) -> list[Suggestion]:
        """
        Returns suggestions whose name contains the query, case-insensitively,
        in provider order. Never raises: lookup failures are logged and
        reported as an empty list.
        """
        ...
