"""
config.py — Konfiguracja aplikacji przez zmienne środowiskowe.
Wszystkie zmienne mają prefiks FORMULABOX_.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Backend podpowiedzi zmiennych (autocomplete)
    suggestion_backend_url: str = "https://652f91320b8d8ddac0b2b62b.mockapi.io/autocomplete"
    suggestion_timeout_ms: int = 5_000

    # Logging
    log_level: str = "INFO"

    # App
    app_title: str = "FormulaBox"
    app_version: str = "0.1.0"

    model_config = SettingsConfigDict(env_prefix="FORMULABOX_", env_file=".env", extra="ignore")
