"""
TomTom Places Constants

This module contains constants for the TomTom Fuzzy Search API client.
"""

from typing import Final

VERSION: Final[str] = "0.1.0"

# TomTom API search URL - https://developer.tomtom.com/search-api/documentation/search-service/fuzzy-search#request-parameters
SEARCH_URL: Final[str] = "https://api.tomtom.com/search/2/search"
# Characters left as is in the address path segment
URL_SAFE_CHARS: Final[str] = "!'()*"
SEARCH_SUFFIX: Final[str] = ".json"

# Restrict search to Australia - https://developer.tomtom.com/search-api/documentation/product-information/market-coverage#asiapacific
COUNTRY_CODE: Final[str] = "AU"

# Range of the "limit" parameter supported by the API
MIN_LIMIT: Final[int] = 1
MAX_LIMIT: Final[int] = 100

# Delay in seconds before running requests again after a "Too Many Requests" error
# https://developer.tomtom.com/search-api/documentation/search-service/fuzzy-search#response-codes
DELAY_TIME: Final[float] = 5.0

# HTTP request timeout in seconds when the caller does not provide one
DEFAULT_TIMEOUT: Final[float] = 10.0

# Environment variable providing the default API key
API_KEY_ENV: Final[str] = "TOMTOM_API_KEY"

HTTP_TOO_MANY_REQUESTS: Final[int] = 429
