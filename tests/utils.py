"""
Test utility functions and helpers.

This module provides canned TomTom API payloads, a scripted fake API served
through httpx.MockTransport and async helpers for testing.
"""

import asyncio
import copy
import time
from typing import Any, Callable, Dict, List, Optional, Union

import httpx

from tomtom_places.models import AutoCompleteResult

# ============================================================================
# Canned Payloads
# ============================================================================


def createStreetResult(
    resultId: str,
    streetName: str,
    freeformAddress: str,
    **addressFields: Any,
) -> Dict[str, Any]:
    """
    Create a raw "Street" search result located in Australia.

    Args:
        resultId: Result id, becomes placeId
        streetName: Street name
        freeformAddress: Formatted address
        **addressFields: Extra address fields (streetNumber, municipality, ...)

    Returns:
        Dict: Raw result as returned by the API
    """
    return {
        "id": resultId,
        "type": "Street",
        "address": {
            "streetName": streetName,
            "country": "Australia",
            "countryCode": "AU",
            "countryCodeISO3": "AUS",
            "freeformAddress": freeformAddress,
            **addressFields,
        },
        "position": {"lat": -25, "lon": 133},
        "score": 1,
        "viewport": {
            "topLeftPoint": {"lat": -25, "lon": 133},
            "btmRightPoint": {"lat": -25, "lon": 133},
        },
    }


def createSearchResponse(results: List[Dict[str, Any]], query: str = "Test address") -> Dict[str, Any]:
    """Wrap raw results into a full search response body."""
    return {
        "summary": {
            "query": query,
            "queryType": "NEARBY",
            "queryTime": 100,
            "numResults": len(results),
            "offset": 0,
            "totalResults": len(results),
            "fuzzyLevel": 1,
            "queryIntent": [],
        },
        "results": results,
    }


VALID_RESPONSE: Dict[str, Any] = createSearchResponse(
    [
        createStreetResult("test1", "Test street 1", "First test street"),
        createStreetResult("test2", "Test street 2", "Second test street"),
    ]
)

VALID_RESULTS: List[AutoCompleteResult] = [
    AutoCompleteResult(
        placeId="test1",
        streetNumber=None,
        countryCode="AU",
        country="Australia",
        freeformAddress="First test street",
        municipality=None,
    ),
    AutoCompleteResult(
        placeId="test2",
        streetNumber=None,
        countryCode="AU",
        country="Australia",
        freeformAddress="Second test street",
        municipality=None,
    ),
]

INVALID_RESPONSE: Dict[str, Any] = {"summary": {}, "results": []}


# ============================================================================
# Fake API
# ============================================================================

# A scripted reply: status code, (status code, JSON body), (status code, raw text) or an exception to raise
ScriptedReply = Union[int, tuple, Exception]


class FakeTomTomApi:
    """
    Scripted TomTom API served through httpx.MockTransport, dood!

    Replies are consumed in order, once the script is exhausted the reply
    registered for the searched address in byAddress is used, then the default
    reply (200 with VALID_RESPONSE). Every request is recorded.
    """

    def __init__(
        self,
        *script: ScriptedReply,
        default: Optional[ScriptedReply] = None,
        byAddress: Optional[Dict[str, ScriptedReply]] = None,
    ):
        self.script: List[ScriptedReply] = list(script)
        self.default: ScriptedReply = default if default is not None else (200, VALID_RESPONSE)
        self.byAddress: Dict[str, ScriptedReply] = dict(byAddress or {})
        self.requests: List[httpx.Request] = []

    @property
    def callCount(self) -> int:
        return len(self.requests)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    @property
    def addresses(self) -> List[str]:
        """Decoded query of each request, in order"""
        return [getRequestAddress(request) for request in self.requests]

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.script:
            reply = self.script.pop(0)
        else:
            reply = self.byAddress.get(getRequestAddress(request), self.default)

        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, int):
            return httpx.Response(reply, json={"errorText": "scripted error"})

        statusCode, body = reply
        if isinstance(body, str):
            return httpx.Response(statusCode, text=body)
        return httpx.Response(statusCode, json=copy.deepcopy(body))


def getRequestAddress(request: httpx.Request) -> str:
    """Get the decoded address searched by a request"""
    return request.url.path.rsplit("/", 1)[-1].removesuffix(".json")


# ============================================================================
# Async Utilities
# ============================================================================


async def waitUntil(predicate: Callable[[], bool], timeout: float = 2.0, interval: float = 0.01) -> None:
    """
    Wait until predicate() is true.

    Raises:
        AssertionError: If the predicate is still false after timeout seconds
    """
    deadline = time.monotonic() + timeout
    while not predicate():
        if time.monotonic() > deadline:
            raise AssertionError(f"Condition not met within {timeout}s")
        await asyncio.sleep(interval)
