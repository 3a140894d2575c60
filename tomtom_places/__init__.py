"""
TomTom Places Client Library

This module provides a Python async client library for address autocomplete
with the TomTom Fuzzy Search API, restricted to Australia, with transparent
recovery from API rate limiting.

Example usage:
    from tomtom_places import FuzzySearch, getAutoCompleteDetails

    # One-shot lookup, API key read from TOMTOM_API_KEY
    results = await getAutoCompleteDetails("Charlotte Street")

    # Stateful client delaying and batching requests after a 429 error
    async with FuzzySearch(apiKey="your_api_key", delay=5.0, limit=10) as search:
        results = await search.autoComplete("Charlotte Street")
"""

from .api import getAutoCompleteDetails, getAutoCompleteResults, getParams, toAutoCompleteResult
from .client import FuzzySearch, QueuedRequest
from .constants import VERSION
from .exceptions import (
    ConfigurationError,
    DisposedError,
    TomTomPlacesError,
    TooManyRequestsError,
    TransportError,
    ValidationError,
)
from .models import (
    AutoCompleteOptions,
    AutoCompleteParams,
    AutoCompleteResult,
    FuzzySearchOptions,
    SearchResponse,
    SearchResult,
)
from .schema import parseResponse

__version__ = VERSION

__all__ = [
    "getAutoCompleteDetails",
    "getAutoCompleteResults",
    "getParams",
    "toAutoCompleteResult",
    "parseResponse",
    "FuzzySearch",
    "QueuedRequest",
    "AutoCompleteOptions",
    "AutoCompleteParams",
    "AutoCompleteResult",
    "FuzzySearchOptions",
    "SearchResponse",
    "SearchResult",
    "TomTomPlacesError",
    "ConfigurationError",
    "TooManyRequestsError",
    "TransportError",
    "DisposedError",
    "ValidationError",
]
