"""
Router: GET /suggestions
Przepuszcza zapytanie do SuggestionProvider. Błędy backendu dają pustą listę.
"""
from fastapi import APIRouter, Depends, Query

from api.dependencies import get_suggestion_provider
from contracts import Suggestion

router = APIRouter(tags=["suggestions"])


@router.get("/suggestions", response_model=list[Suggestion])
async def list_suggestions(
    query: str = Query("", description="Wpisywany tekst"),
    provider=Depends(get_suggestion_provider),
) -> list[Suggestion]:
    return await provider.lookup(query)
