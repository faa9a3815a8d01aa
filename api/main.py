"""
api/main.py — punkt wejścia FastAPI.

Lifespan:
  - Tworzy adaptery (TokenStore, KeystrokeClassifier, ASTEvaluator, SuggestionProvider)
  - Składa z nich jedną FormulaSession (widżet jednego użytkownika)
  - Przy zamknięciu zamyka klienta HTTP backendu podpowiedzi
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from adapters.evaluator.ast_evaluator import ASTEvaluator
from adapters.input_classifier.keystroke_classifier import KeystrokeClassifier
from adapters.suggestion_provider.http_suggestion_provider import HttpSuggestionProvider
from adapters.token_store.in_memory_token_store import InMemoryTokenStore
from api.routers import evaluate, formula, suggestions
from api.schemas import HealthResponse
from config import Settings
from ports.suggestion_provider import SuggestionProvider
from session import FormulaSession

logger = logging.getLogger("formulabox")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings

    provider = app.state.suggestion_provider_override
    owned_provider: HttpSuggestionProvider | None = None
    if provider is None:
        owned_provider = HttpSuggestionProvider(
            backend_url=settings.suggestion_backend_url,
            timeout_ms=settings.suggestion_timeout_ms,
        )
        provider = owned_provider

    # Adaptery bezstanowe, tworzone raz
    app.state.evaluator = ASTEvaluator()
    app.state.suggestion_provider = provider
    app.state.session = FormulaSession(
        store=InMemoryTokenStore(),
        classifier=KeystrokeClassifier(),
        evaluator=app.state.evaluator,
        suggestion_provider=provider,
    )

    logger.info("FormulaBox API ready.")
    yield

    if owned_provider is not None:
        logger.info("Shutting down, closing suggestion client.")
        await owned_provider.aclose()


def create_app(
    settings: Settings | None = None,
    suggestion_provider: SuggestionProvider | None = None,
) -> FastAPI:
    settings = settings or Settings()
    logging.basicConfig(level=settings.log_level.upper())

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.suggestion_provider_override = suggestion_provider

    # Routers
    app.include_router(formula.router)
    app.include_router(evaluate.router)
    app.include_router(suggestions.router)

    # Health
    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health():
        return HealthResponse(status="ok", version=settings.app_version)

    return app


app = create_app()
