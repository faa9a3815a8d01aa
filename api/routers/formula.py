"""
Router: /formula
Stan widżetu formuły: tokeny, wpisywany tekst, podpowiedzi i wynik.
Każdy endpoint zwraca aktualny FormulaView.
"""
from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_session
from api.schemas import EditTokenRequest, InputRequest, KeyRequest
from contracts import FormulaView, Token
from session import FormulaSession

router = APIRouter(prefix="/formula", tags=["formula"])


@router.get("", response_model=FormulaView)
async def get_formula(session: FormulaSession = Depends(get_session)) -> FormulaView:
    return session.view()


@router.delete("", response_model=FormulaView)
async def clear_formula(session: FormulaSession = Depends(get_session)) -> FormulaView:
    session.clear()
    return session.view()


@router.post("/input", response_model=FormulaView)
async def set_input(
    body: InputRequest,
    session: FormulaSession = Depends(get_session),
) -> FormulaView:
    await session.set_input(body.text)
    return session.view()


@router.post("/keys", response_model=FormulaView)
async def press_key(
    body: KeyRequest,
    session: FormulaSession = Depends(get_session),
) -> FormulaView:
    session.press(body.key)
    return session.view()


@router.post("/blur", response_model=FormulaView)
async def blur(session: FormulaSession = Depends(get_session)) -> FormulaView:
    session.blur()
    return session.view()


@router.post("/suggestions/{index}", response_model=FormulaView)
async def select_suggestion(
    index: int,
    session: FormulaSession = Depends(get_session),
) -> FormulaView:
    if not session.select_suggestion(index):
        raise HTTPException(status_code=404, detail=f"Brak podpowiedzi o indeksie {index}")
    return session.view()


# ─────────────────────────── menu tokenu ─────────────────────────

@router.get("/tokens/{index}", response_model=Token)
async def token_properties(
    index: int,
    session: FormulaSession = Depends(get_session),
) -> Token:
    token = session.token_properties(index)
    if token is None:
        raise HTTPException(status_code=404, detail=f"Brak tokenu o indeksie {index}")
    return token


@router.put("/tokens/{index}", response_model=FormulaView)
async def edit_token(
    index: int,
    body: EditTokenRequest,
    session: FormulaSession = Depends(get_session),
) -> FormulaView:
    if not session.edit_token(index, body.text):
        raise HTTPException(status_code=404, detail=f"Brak tokenu o indeksie {index}")
    return session.view()


@router.delete("/tokens/{index}", response_model=FormulaView)
async def delete_token(
    index: int,
    session: FormulaSession = Depends(get_session),
) -> FormulaView:
    if not session.delete_token(index):
        raise HTTPException(status_code=404, detail=f"Brak tokenu o indeksie {index}")
    return session.view()
