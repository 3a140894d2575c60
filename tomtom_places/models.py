"""
TomTom Fuzzy Search Data Models

This module defines the data models used by the TomTom Places client:

- TypedDict models describing the Fuzzy Search API response body. They are
  used both for static typing and, through pydantic, for runtime validation
  of the payload (see tomtom_places.schema).
- Frozen dataclasses for the library's own stable types (parameters sent to
  the API, per-call options and the autocomplete result shape).

Response layout is documented in:
https://developer.tomtom.com/search-api/documentation/search-service/fuzzy-search#response-body---json
"""

import sys
from dataclasses import dataclass
from typing import Annotated, Any, Dict, List, Literal, NotRequired, Optional, Union

from pydantic import Field

if sys.version_info >= (3, 12):
    from typing import TypedDict
else:
    from typing_extensions import TypedDict


Latitude = Annotated[float, Field(ge=-90, le=90)]
Longitude = Annotated[float, Field(ge=-180, le=180)]
Hour = Annotated[int, Field(ge=0, le=23)]
Minute = Annotated[int, Field(ge=0, le=59)]


class LatLon(TypedDict):
    """Latitude/longitude pair, dood!"""

    lat: Latitude
    lon: Longitude


# Summary: queryIntent items, the "details" field varies based on the "type" field


class CoordinateIntent(TypedDict):
    type: Literal["COORDINATE"]
    details: LatLon


class NearbyIntentDetails(TypedDict):
    lat: Latitude
    lon: Longitude
    query: str
    text: str


class NearbyIntent(TypedDict):
    type: Literal["NEARBY"]
    details: NearbyIntentDetails


class W3WIntentDetails(TypedDict):
    address: str


class W3WIntent(TypedDict):
    type: Literal["W3W"]
    details: W3WIntentDetails


class BookmarkIntentDetails(TypedDict):
    bookmark: str


class BookmarkIntent(TypedDict):
    type: Literal["BOOKMARK"]
    details: BookmarkIntentDetails


QueryIntent = Annotated[
    Union[CoordinateIntent, NearbyIntent, W3WIntent, BookmarkIntent],
    Field(discriminator="type"),
]


class Summary(TypedDict):
    """Summary block of the search response"""

    query: str
    queryType: Literal["NEARBY", "NON_NEAR"]
    queryTime: int
    numResults: int
    offset: int
    totalResults: int
    fuzzyLevel: int
    geoBias: NotRequired[LatLon]
    queryIntent: List[QueryIntent]


# POI details


class Brand(TypedDict):
    name: str


class CategorySet(TypedDict):
    id: float


class TimeObject(TypedDict):
    """Used for startTime and endTime"""

    date: str
    hour: Hour
    minute: Minute


class TimeRange(TypedDict):
    startTime: TimeObject
    endTime: TimeObject


class OpeningHours(TypedDict):
    mode: str
    timeRanges: List[TimeRange]


class ClassificationName(TypedDict):
    nameLocale: str
    name: str


class Classification(TypedDict):
    code: str
    names: List[ClassificationName]


class TimeZone(TypedDict):
    ianaId: str


class Poi(TypedDict):
    """Point of interest details, only present for results with type == POI"""

    name: str
    phone: NotRequired[str]
    brands: NotRequired[List[Brand]]
    url: NotRequired[str]
    # "categories" is deprecated by the API and not modelled
    categorySet: List[CategorySet]
    openingHours: NotRequired[OpeningHours]
    classifications: List[Classification]
    timeZone: NotRequired[TimeZone]


class Address(TypedDict):
    """Structured address of a search result, dood!

    Only streetName, countryCode, country, countryCodeISO3 and freeformAddress
    are always present.
    """

    streetNumber: NotRequired[str]
    streetName: str
    municipalitySubdivision: NotRequired[str]
    municipalitySecondarySubdivision: NotRequired[str]
    neighbourhood: NotRequired[str]
    municipality: NotRequired[str]
    countrySecondarySubdivision: NotRequired[str]
    countryTertiarySubdivision: NotRequired[str]
    countrySubdivision: NotRequired[str]
    postalCode: NotRequired[str]
    postalName: NotRequired[str]  # Only with entityType == PostalCodeArea, only for USA
    extendedPostalCode: NotRequired[str]
    countryCode: Annotated[str, Field(min_length=2, max_length=2)]
    country: str
    countryCodeISO3: Annotated[str, Field(min_length=3, max_length=3)]
    freeformAddress: str
    countrySubdivisionName: NotRequired[str]  # Only for USA, Canada and Great Britain
    countrySubdivisionCode: NotRequired[str]  # Only with entityType == CountrySubdivision
    localName: NotRequired[str]


class Mapcode(TypedDict):
    type: Literal["Local", "International", "Alternative"]
    fullMapcode: str
    territory: str
    code: str


class Viewport(TypedDict):
    """Used for viewport and boundingBox objects"""

    topLeftPoint: LatLon
    btmRightPoint: LatLon


class EntryPoint(TypedDict):
    type: Literal["main", "minor"]
    functions: NotRequired[List[str]]
    position: LatLon


# "from" is a keyword, so the functional syntax is required here
AddressRanges = TypedDict(
    "AddressRanges",
    {
        "rangeLeft": str,
        "rangeRight": str,
        "from": LatLon,
        "to": LatLon,
    },
)


class Connector(TypedDict):
    ratedPowerKW: float
    currentA: int
    currentType: str
    voltageV: int


class ChargingPark(TypedDict):
    connectors: List[Connector]


class DataSourceRef(TypedDict):
    """Reference to additional data (chargingAvailability, parkingAvailability, fuelPrice)"""

    id: str


class GeometryRef(TypedDict):
    id: str
    sourceName: NotRequired[str]


class DataSources(TypedDict):
    chargingAvailability: NotRequired[DataSourceRef]  # Only for type == POI
    parkingAvailability: NotRequired[DataSourceRef]  # Only for type == POI
    fuelPrice: NotRequired[DataSourceRef]  # Only for type == POI
    geometry: NotRequired[GeometryRef]  # Only for type == Geography or type == POI


class ResultCommon(TypedDict):
    """Fields present in all result objects"""

    id: str
    score: float
    dist: NotRequired[float]  # in meters
    info: NotRequired[str]
    address: Address
    position: LatLon
    mapcodes: NotRequired[List[Mapcode]]
    viewport: Viewport
    entryPoints: NotRequired[List[EntryPoint]]
    chargingPark: NotRequired[ChargingPark]
    dataSources: NotRequired[DataSources]
    fuelTypes: NotRequired[List[str]]
    vehiculeTypes: NotRequired[List[Literal["Car", "Truck"]]]


class PoiResult(ResultCommon):
    type: Literal["POI"]
    poi: Poi


class GeographyResult(ResultCommon):
    type: Literal["Geography"]
    entityType: Literal[
        "Country",
        "CountrySubdivision",
        "CountrySecondarySubdivision",
        "CountryTertiarySubdivision",
        "Municipality",
        "MunicipalitySubdivision",
        "MunicipalitySecondarySubdivision",
        "Neighbourhood",
        "PostalCodeArea",
    ]
    boundingBox: Viewport


class AddressRangeResult(ResultCommon):
    type: Literal["Address Range"]
    addressRanges: AddressRanges


class StreetResult(ResultCommon):
    type: Literal["Street", "Point Address", "Cross Street"]


SearchResult = Annotated[
    Union[PoiResult, GeographyResult, AddressRangeResult, StreetResult],
    Field(discriminator="type"),
]


class SearchResponse(TypedDict):
    """Fuzzy Search response body"""

    summary: Summary
    results: List[SearchResult]


# Library types


@dataclass(frozen=True)
class AutoCompleteParams:
    """
    Query parameters sent to the TomTom API.

    Built by getParams(), never from raw caller input.

    Attributes:
        key: TomTom API key
        countrySet: Country filter, always COUNTRY_CODE
        limit: Maximum number of results, within [MIN_LIMIT, MAX_LIMIT]
    """

    key: str
    countrySet: str
    limit: int

    def toQueryParams(self) -> Dict[str, Any]:
        """Get the params as a dict suitable for the HTTP query string"""
        return {"key": self.key, "countrySet": self.countrySet, "limit": self.limit}


@dataclass(frozen=True)
class AutoCompleteResult:
    """
    Autocomplete result returned by the library.

    Optional fields are None when the API does not provide them.
    """

    placeId: str
    streetNumber: Optional[str]
    countryCode: str
    country: str
    freeformAddress: str
    municipality: Optional[str]


@dataclass(frozen=True)
class AutoCompleteOptions:
    """
    Per-call options.

    Attributes:
        timeout: HTTP request timeout in seconds (default: DEFAULT_TIMEOUT)
    """

    timeout: Optional[float] = None


@dataclass(frozen=True)
class FuzzySearchOptions:
    """
    Options for getParams() and the FuzzySearch constructor.

    Attributes:
        apiKey: TomTom API key, falls back to TOMTOM_API_KEY if not provided
        delay: Delay in seconds applied after a "Too Many Requests" error (default: 5 seconds)
        limit: Limit to the number of results returned by the API (default: 100, the maximum)
    """

    apiKey: Optional[str] = None
    delay: Optional[float] = None
    limit: Optional[int] = None
