"""
Port: InputClassifier
Odpowiedzialność: klasyfikacja surowego tekstu do tokenu oraz decyzja, którą
mutację formuły wywołuje dane zdarzenie klawiatury.
"""
from typing import Optional, Protocol, runtime_checkable

from contracts import InputAction, InputState, Token


@runtime_checkable
class InputClassifier(Protocol):
    def classify(self, fragment: str) -> Token:
        """
        Classifies committed text: Number if it parses fully as a decimal,
        Operator if it is exactly one operator symbol, Text otherwise.
        Never fails.
        """
        ...

    def flush(self, fragment: str) -> Optional[Token]:
        """
        Classifies pending text cut off by an operator keystroke:
        Number if parseable, Text otherwise, None for blank text.
        """
        ...

    def decide(self, key: str, state: InputState) -> InputAction:
        """
        Decides the mutation for a key event (DOM KeyboardEvent.key names:
        "Enter", "ArrowUp", "ArrowDown", "Escape", "Backspace", operator symbols).
        Pure: does not mutate anything.
        """
        ...
