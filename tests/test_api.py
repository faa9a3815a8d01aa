from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from adapters.suggestion_provider.static_suggestion_provider import StaticSuggestionProvider
from api.main import create_app
from config import Settings


@pytest.fixture()
def client():
    app = create_app(
        settings=Settings(log_level="WARNING"),
        suggestion_provider=StaticSuggestionProvider([("1", "revenue"), ("2", "cost")]),
    )
    with TestClient(app) as c:
        yield c


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_typing_through_api_updates_result(client):
    client.post("/formula/input", json={"text": "2"})
    client.post("/formula/keys", json={"key": "+"})
    client.post("/formula/input", json={"text": "3"})
    response = client.post("/formula/keys", json={"key": "Enter"})

    view = response.json()
    assert [t["value"] for t in view["tokens"]] == [2, "+", 3]
    assert view["expression"] == "2 + 3"
    assert view["result"]["value"] == 5
    assert view["result"]["status"] == "ok"


def test_suggestion_click_appends_variable(client):
    view = client.post("/formula/input", json={"text": "REV"}).json()
    assert view["suggestions_open"]
    assert [s["name"] for s in view["suggestions"]] == ["revenue"]

    view = client.post("/formula/suggestions/0").json()

    assert view["tokens"] == [{"kind": "variable", "value": 0, "name": "revenue", "id": "1"}]
    assert view["result"]["value"] == 0
    assert client.post("/formula/suggestions/3").status_code == 404


def test_token_actions_and_clear(client):
    client.post("/formula/input", json={"text": "8"})
    client.post("/formula/keys", json={"key": "/"})
    client.post("/formula/input", json={"text": "0"})
    view = client.post("/formula/keys", json={"key": "Enter"}).json()
    assert view["result"]["status"] == "unevaluable"

    view = client.put("/formula/tokens/2", json={"text": "4"}).json()
    assert view["result"]["value"] == 2

    assert client.get("/formula/tokens/1").json() == {"kind": "operator", "value": "/", "name": None, "id": None}
    assert client.get("/formula/tokens/9").status_code == 404
    assert client.delete("/formula/tokens/9").status_code == 404

    view = client.delete("/formula").json()
    assert view["tokens"] == []
    assert view["result"]["status"] == "unevaluable"


def test_stateless_evaluate_endpoint(client):
    body = {
        "tokens": [
            {"kind": "variable", "value": 0, "name": "revenue", "id": "1"},
            {"kind": "operator", "value": "^"},
            {"kind": "number", "value": 2},
        ],
        "env": {"1": 3},
    }

    response = client.post("/evaluate", json=body)

    assert response.status_code == 200
    assert response.json()["value"] == 9


def test_evaluate_rejects_malformed_tokens(client):
    body = {"tokens": [{"kind": "variable", "value": 0}]}

    assert client.post("/evaluate", json=body).status_code == 422


def test_suggestions_endpoint(client):
    response = client.get("/suggestions", params={"query": "co"})

    assert response.json() == [{"id": "2", "name": "cost"}]


def test_evaluate_endpoint_handles_deeply_nested_formula(client):
    tokens = (
        [{"kind": "operator", "value": "("}] * 400
        + [{"kind": "number", "value": 1}]
        + [{"kind": "operator", "value": ")"}] * 400
    )

    response = client.post("/evaluate", json={"tokens": tokens})

    assert response.status_code == 200
    assert response.json()["status"] == "unevaluable"
