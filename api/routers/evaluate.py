"""
Router: POST /evaluate
Bezstanowa ewaluacja podanej sekwencji tokenów (bez sesji).
"""
from fastapi import APIRouter, Depends

from api.dependencies import get_evaluator
from api.schemas import EvaluateRequest
from contracts import EvalResult

router = APIRouter(prefix="/evaluate", tags=["evaluate"])


@router.post("", response_model=EvalResult)
async def evaluate(body: EvaluateRequest, evaluator=Depends(get_evaluator)) -> EvalResult:
    return evaluator.evaluate(body.tokens, body.env)
