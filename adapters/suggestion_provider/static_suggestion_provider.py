"""
Adapter: StaticSuggestionProvider
Implementuje port SuggestionProvider za pomocą listy in-memory.
Używany przez CLI w trybie offline i w testach.
"""
from __future__ import annotations

from typing import Iterable

from adapters.suggestion_provider.filtering import filter_by_name
from contracts import Suggestion


class StaticSuggestionProvider:
    def __init__(self, entries: Iterable[Suggestion | tuple[str, str]] = ()) -> None:
        self._entries: list[Suggestion] = []
        for entry in entries:
            if isinstance(entry, tuple):
                entry_id, name = entry
                entry = Suggestion(id=entry_id, name=name)
            self._entries.append(entry)

    async def lookup(self, query: str) -> list[Suggestion]:
        return filter_by_name(self._entries, query)
