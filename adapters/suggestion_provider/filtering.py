"""
Wspólne filtrowanie podpowiedzi: dopasowanie podciągu w `name`, bez rozróżniania
wielkości liter. Kolejność z backendu zachowana.
"""
from __future__ import annotations

from typing import Iterable

from contracts import Suggestion


def filter_by_name(items: Iterable[Suggestion], query: str) -> list[Suggestion]:
    needle = query.strip().lower()
    if not needle:
        return []
    return [s for s in items if needle in s.name.lower()]
