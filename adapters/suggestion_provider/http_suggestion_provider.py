"""
HttpSuggestionProvider — adapter SuggestionProvider pytający zewnętrzny backend
autocomplete.

Kontrakt backendu:
    GET {suggestion_backend_url}?query=<tekst>

    ← 200 OK, Content-Type: application/json
    Body: [{"id": "1", "name": "revenue", ...}, ...]
          (albo {"result": [...]} / {"items": [...]})

Backend nie musi filtrować, wynik jest zawsze filtrowany po stronie klienta.
Błędy sieci, HTTP, niepoprawnego adresu i walidacji kończą się pustą listą i ostrzeżeniem w logu.
"""
from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from adapters.suggestion_provider.filtering import filter_by_name
from contracts import Suggestion

logger = logging.getLogger("formulabox.http_suggestions")


class HttpSuggestionProvider:
    """
    Async klient backendu podpowiedzi.
    Przyjmuje gotowy httpx.AsyncClient (testy, współdzielona pula połączeń)
    albo tworzy własny i zamyka go w aclose().
    """

    def __init__(
        self,
        backend_url: str,
        timeout_ms: int = 5_000,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._url = backend_url.strip()
        self._timeout = timeout_ms / 1000.0
        self._client = client
        self._owns_client = client is None

    # ── SuggestionProvider protocol ───────────────────────────────────────────

    async def lookup(self, query: str) -> list[Suggestion]:
        if not query.strip():
            return []
        if not self._url:
            logger.warning("Brak adresu backendu podpowiedzi, zwracam pustą listę.")
            return []

        try:
            items = await self.call_backend(query)
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as exc:
            logger.warning("Pobieranie podpowiedzi nie powiodło się (query=%r): %s", query, exc)
            return []
        return filter_by_name(items, query)

    # ── Wywołanie backendu ────────────────────────────────────────────────────

    async def call_backend(self, query: str) -> list[Suggestion]:
        """GET z parametrem query, zwraca poprawne wpisy w kolejności backendu."""
        client = self._get_client()
        response = await client.get(self._url, params={"query": query}, timeout=self._timeout)
        response.raise_for_status()
        payload: Any = response.json()

        # Niektóre backendy opakowują listę w "result" albo "items".
        if isinstance(payload, dict):
            payload = payload.get("result", payload.get("items"))
        if not isinstance(payload, list):
            raise ValueError(f"Nieoczekiwany format odpowiedzi: {type(payload).__name__}")

        result: list[Suggestion] = []
        for raw in payload:
            try:
                result.append(Suggestion.model_validate(raw))
            except ValidationError as exc:
                logger.warning("Pominięto niepoprawną podpowiedź: %s | raw=%r", exc, raw)
        return result

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client
