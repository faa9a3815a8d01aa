"""
Port: TokenStore
Odpowiedzialność: uporządkowana sekwencja tokenów formuły i wszystkie jej mutacje.
"""
from typing import Optional, Protocol, runtime_checkable

from contracts import Token


@runtime_checkable
class TokenStore(Protocol):
    def append(self, token: Token) -> None:
        """Adds a token at the end of the formula."""
        ...

    def replace_at(self, index: int, token: Token) -> bool:
        """Overwrites the token at index. Out of bounds is a no-op returning False."""
        ...

    def remove_at(self, index: int) -> Optional[Token]:
        """
        Deletes the token at index, shifting later tokens left.
        Returns the removed token, or None (no-op) when index is out of bounds.
        """
        ...

    def clear(self) -> None:
        """Empties the formula atomically."""
        ...

    def snapshot(self) -> tuple[Token, ...]:
        """Immutable copy of the current sequence, reading order."""
        ...

    def __len__(self) -> int:
        ...
