from .http_suggestion_provider import HttpSuggestionProvider
from .static_suggestion_provider import StaticSuggestionProvider

__all__ = [
    "HttpSuggestionProvider",
    "StaticSuggestionProvider",
]
