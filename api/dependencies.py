"""
dependencies.py — FastAPI Dependency Injection.
Każda zależność zwraca odpowiedni obiekt przez Request.app.state.
"""
from __future__ import annotations

from fastapi import Request

from adapters.evaluator.ast_evaluator import ASTEvaluator
from ports.suggestion_provider import SuggestionProvider
from session import FormulaSession


def get_session(request: Request) -> FormulaSession:
    return request.app.state.session


def get_evaluator(request: Request) -> ASTEvaluator:
    return request.app.state.evaluator


def get_suggestion_provider(request: Request) -> SuggestionProvider:
    return request.app.state.suggestion_provider
