"""
schemas.py — Request/Response modele FastAPI.
Oddzielone od contracts.py żeby API mogło ewoluować niezależnie.
"""
from __future__ import annotations

from typing import Union

from pydantic import BaseModel, Field

from contracts import Token


# ─────────────────────────── /formula ────────────────────────────

class InputRequest(BaseModel):
    text: str


class KeyRequest(BaseModel):
    key: str  # nazwy jak KeyboardEvent.key: "Enter", "ArrowUp", "+", ...


class EditTokenRequest(BaseModel):
    text: str = Field(min_length=1)


# ─────────────────────────── /evaluate ───────────────────────────

class EvaluateRequest(BaseModel):
    tokens: list[Token]
    env: dict[str, Union[int, float]] = {}  # wartości zmiennych po id


# ─────────────────────────── /health ─────────────────────────────

class HealthResponse(BaseModel):
    status: str
    version: str
