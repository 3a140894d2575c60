"""
TomTom Fuzzy Search API functions

This module provides the stateless building blocks of the client:
building the query parameters, running a single search request and
converting raw API results into AutoCompleteResult objects.
"""

import logging
import os
from typing import List, Mapping, Optional
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from .constants import (
    API_KEY_ENV,
    COUNTRY_CODE,
    DEFAULT_TIMEOUT,
    HTTP_TOO_MANY_REQUESTS,
    MAX_LIMIT,
    MIN_LIMIT,
    SEARCH_SUFFIX,
    SEARCH_URL,
    URL_SAFE_CHARS,
)
from .exceptions import ConfigurationError, TooManyRequestsError, TransportError
from .models import AutoCompleteOptions, AutoCompleteParams, AutoCompleteResult, FuzzySearchOptions, SearchResult
from .schema import parseResponse

logger = logging.getLogger(__name__)


def clampLimit(limit: Optional[int]) -> int:
    """Get the limit to send to the API, defaulting to MAX_LIMIT and clamped to the supported range."""
    if limit is None:
        return MAX_LIMIT
    return min(max(MIN_LIMIT, int(limit)), MAX_LIMIT)


def getParams(
    options: Optional[FuzzySearchOptions] = None,
    env: Optional[Mapping[str, str]] = None,
) -> AutoCompleteParams:
    """Get the TomTom API parameters to send from the provided options or defaults, dood!

    Args:
        options: Explicit options, the API key and limit are read from it
        env: Environment mapping used as fallback for the API key (default: os.environ)

    Returns:
        AutoCompleteParams with the API key, the country filter and a clamped limit

    Raises:
        ConfigurationError: If no API key is provided and TOMTOM_API_KEY is not set or empty
    """
    if options is None:
        options = FuzzySearchOptions()
    if env is None:
        env = os.environ

    key = options.apiKey or env.get(API_KEY_ENV)
    if not key:
        raise ConfigurationError(f"Missing API key or {API_KEY_ENV} environment variable")

    return AutoCompleteParams(
        key=key,
        countrySet=COUNTRY_CODE,
        limit=clampLimit(options.limit),
    )


def toAutoCompleteResult(result: SearchResult) -> AutoCompleteResult:
    """Convert a TomTom API result to the result type used by the library"""
    address = result["address"]
    return AutoCompleteResult(
        placeId=result["id"],
        streetNumber=address.get("streetNumber"),
        countryCode=address["countryCode"],
        country=address["country"],
        freeformAddress=address["freeformAddress"],
        municipality=address.get("municipality"),
    )


def buildSearchUrl(address: str) -> str:
    """Build the search endpoint URL, the address is URL-encoded as a single path segment.

    Same escaping as JavaScript's encodeURIComponent: unreserved marks !'()* are kept.
    """
    return f"{SEARCH_URL}/{quote(address, safe=URL_SAFE_CHARS)}{SEARCH_SUFFIX}"


async def getAutoCompleteResults(
    params: AutoCompleteParams,
    address: str,
    options: Optional[AutoCompleteOptions] = None,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> List[AutoCompleteResult]:
    """Call the TomTom API for autocomplete results, dood!

    Creates a new HTTP session for each request to support proper concurrent
    operations. Results are returned in the order provided by the API, which
    reflects its relevance ranking.

    Args:
        params: Query parameters built by getParams()
        address: Free-form address to search for
        options: Per-call options (timeout)
        transport: Optional httpx transport for the request session

    Returns:
        List of AutoCompleteResult, possibly empty

    Raises:
        TooManyRequestsError: If the API returns HTTP 429
        pydantic.ValidationError: If the response body doesn't match the expected schema
        TransportError: For any other HTTP or network failure
    """
    if options is None:
        options = AutoCompleteOptions()

    url = buildSearchUrl(address)
    timeout = options.timeout if options.timeout is not None else DEFAULT_TIMEOUT
    logger.debug(f"Making request to {url} with limit={params.limit}, countrySet={params.countrySet}")

    try:
        async with httpx.AsyncClient(timeout=timeout, transport=transport) as session:
            response = await session.get(url, params=params.toQueryParams())
    except httpx.RequestError as e:
        logger.warning(f"Network error for {url}: {type(e).__name__}#{e}")
        raise TransportError(f"Network error: {type(e).__name__}#{e}", originalError=e) from e

    if response.status_code == HTTP_TOO_MANY_REQUESTS:
        # Caught by FuzzySearch to attempt a retry
        logger.warning(f"Rate limit exceeded for {url}")
        raise TooManyRequestsError()

    try:
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        logger.warning(f"API request failed: {response.status_code} for {url}")
        raise TransportError(
            f"Request failed with status code {response.status_code}",
            originalError=e,
            statusCode=response.status_code,
        ) from e

    try:
        data = response.json()
    except ValueError as e:
        logger.warning(f"Failed to parse JSON response from {url}: {e}")
        raise TransportError(
            f"Invalid JSON response: {e}",
            originalError=e,
            statusCode=response.status_code,
        ) from e

    try:
        searchResponse = parseResponse(data)
    except ValidationError as e:
        # Could be an issue with the returned data or the validation logic being too strict
        logger.error(f"Response validation failed for {url}: {e.error_count()} errors")
        raise

    results = [toAutoCompleteResult(result) for result in searchResponse["results"]]
    logger.debug(f"API request successful: {len(results)} results")
    return results


async def getAutoCompleteDetails(
    address: str,
    options: Optional[AutoCompleteOptions] = None,
) -> List[AutoCompleteResult]:
    """One-shot lookup with default parameters (API key from TOMTOM_API_KEY).

    No rate limit recovery is applied, use FuzzySearch for that.

    Raises:
        ConfigurationError: If TOMTOM_API_KEY is not set
        TooManyRequestsError, TransportError, pydantic.ValidationError: See getAutoCompleteResults()
    """
    params = getParams()
    return await getAutoCompleteResults(params, address, options)
