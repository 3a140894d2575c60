"""
Response validation for the TomTom Fuzzy Search API.

The TypedDict models from tomtom_places.models are validated at runtime
with a pydantic TypeAdapter. A payload not matching the documented shape
raises pydantic.ValidationError.
"""

from typing import Any

from pydantic import TypeAdapter

from .models import SearchResponse

_responseAdapter: TypeAdapter[SearchResponse] = TypeAdapter(SearchResponse)


def parseResponse(data: Any) -> SearchResponse:
    """Validate a decoded JSON body and return it as a SearchResponse.

    Args:
        data: Decoded JSON response body

    Returns:
        Validated response, unknown fields are dropped

    Raises:
        pydantic.ValidationError: If the body does not match the response schema
    """
    return _responseAdapter.validate_python(data)
