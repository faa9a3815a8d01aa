"""
Port: Evaluator
Odpowiedzialność: deterministyczne liczenie wartości formuły z sekwencji tokenów,
bez wykonywania tekstu jako kodu.
"""
from typing import Mapping, Optional, Protocol, Sequence, Union, runtime_checkable

from contracts import EvalResult, Token


@runtime_checkable
class Evaluator(Protocol):
    def evaluate(
        self,
        tokens: Sequence[Token],
        env: Optional[Mapping[str, Union[int, float]]] = None,
    ) -> EvalResult:
        """
        Evaluates a token sequence to a numeric result.
        env: optional bindings keyed by Variable id; unbound variables
        contribute their stored value (0 by default).
        Never raises for malformed input: empty formulas, dangling operators,
        unmatched parentheses, text tokens and division by zero all yield
        EvalResult.unevaluable(...). Read-only and idempotent.
        """
        ...
