from __future__ import annotations

import asyncio
import logging

import httpx

from adapters.suggestion_provider.http_suggestion_provider import HttpSuggestionProvider
from adapters.suggestion_provider.static_suggestion_provider import StaticSuggestionProvider

BACKEND_URL = "https://example.test/autocomplete"

PAYLOAD = [
    {"id": "1", "name": "Revenue", "createdAt": "2023-10-18"},
    {"id": "2", "name": "cost"},
    {"id": "3", "name": "Net revenue"},
    {"id": "4", "name": "reversal"},
]


def _provider(handler) -> HttpSuggestionProvider:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpSuggestionProvider(backend_url=BACKEND_URL, client=client)


def test_http_provider_filters_case_insensitively_by_name():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=PAYLOAD)

    result = asyncio.run(_provider(handler).lookup("rev"))

    assert [s.id for s in result] == ["1", "3", "4"]
    assert seen[0].url.params["query"] == "rev"
    assert str(seen[0].url).startswith(BACKEND_URL)


def test_http_provider_unwraps_result_key():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"result": PAYLOAD})

    result = asyncio.run(_provider(handler).lookup("COST"))

    assert [s.name for s in result] == ["cost"]


def test_http_provider_skips_invalid_entries(caplog):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[{"id": "1"}, {"id": 9, "name": "revenue"}])

    with caplog.at_level(logging.WARNING, logger="formulabox.http_suggestions"):
        result = asyncio.run(_provider(handler).lookup("rev"))

    assert [(s.id, s.name) for s in result] == [("9", "revenue")]
    assert "Pominięto" in caplog.text


def test_http_provider_returns_empty_list_on_http_error(caplog):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"detail": "boom"})

    with caplog.at_level(logging.WARNING, logger="formulabox.http_suggestions"):
        result = asyncio.run(_provider(handler).lookup("rev"))

    assert result == []
    assert "rev" in caplog.text


def test_http_provider_returns_empty_list_on_connection_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    assert asyncio.run(_provider(handler).lookup("rev")) == []


def test_http_provider_returns_empty_list_on_unexpected_payload():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="not json")

    assert asyncio.run(_provider(handler).lookup("rev")) == []


def test_http_provider_skips_backend_for_blank_query():
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("backend should not be called")

    assert asyncio.run(_provider(handler).lookup("   ")) == []


def test_static_provider_matches_substring():
    provider = StaticSuggestionProvider([("1", "Revenue"), ("2", "cost"), ("3", "net REVENUE")])

    result = asyncio.run(provider.lookup("rev"))

    assert [s.id for s in result] == ["1", "3"]


def test_http_provider_skips_entries_with_empty_id_or_name(caplog):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[
            {"id": "", "name": "revenue"},
            {"id": "2", "name": ""},
            {"id": "3", "name": "revenue growth"},
        ])

    with caplog.at_level(logging.WARNING, logger="formulabox.http_suggestions"):
        result = asyncio.run(_provider(handler).lookup("rev"))

    assert [(s.id, s.name) for s in result] == [("3", "revenue growth")]
    assert "Pominięto" in caplog.text


def test_http_provider_returns_empty_list_on_invalid_url(caplog):
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("backend should not be called")

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    provider = HttpSuggestionProvider(backend_url="http://example.test:port/autocomplete", client=client)

    with caplog.at_level(logging.WARNING, logger="formulabox.http_suggestions"):
        result = asyncio.run(provider.lookup("rev"))

    assert result == []
    assert "nie powiodło się" in caplog.text
