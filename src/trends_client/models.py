"""Pydantic data models for trends queries and report widgets."""

from datetime import date, datetime, timezone
from enum import Enum, IntEnum
from typing import Annotated, Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_serializer, model_validator
from pydantic.alias_generators import to_camel

# First day covered by Google Trends data at daily granularity
EPOCH_START = date(2014, 1, 1)


class ReportType(str, Enum):
    """Report widgets offered by the explore endpoint, keyed by widget id."""

    TIME_SERIES = "TIMESERIES"
    REGION = "GEO_MAP"
    RELATED_TOPICS = "RELATED_TOPICS"
    RELATED_QUERIES = "RELATED_QUERIES"

    @property
    def widget_id(self) -> str:
        return self.value

    @property
    def endpoint(self) -> str:
        """Widget data path relative to the API root."""
        return _WIDGET_ENDPOINTS[self]


_WIDGET_ENDPOINTS = {
    ReportType.TIME_SERIES: "widgetdata/multiline",
    ReportType.REGION: "widgetdata/comparedgeo",
    ReportType.RELATED_TOPICS: "widgetdata/relatedsearches",
    ReportType.RELATED_QUERIES: "widgetdata/relatedsearches",
}


class Resolution(str, Enum):
    """Geographic granularity of a regional report."""

    COUNTRY = "COUNTRY"
    CITY = "CITY"
    DMA = "DMA"


class SourceVertical(str, Enum):
    """Search property the interest is measured on."""

    WEB = ""
    IMAGES = "images"
    NEWS = "news"
    VIDEO = "youtube"
    SHOPPING = "froogle"


class Category(IntEnum):
    """Topic filter, serialized as its numeric category code."""

    ALL = 0
    ENTERTAINMENT = 3
    ELECTRONICS = 5
    FINANCE = 7
    GAMES = 8
    HOME = 11
    BUSINESS = 12
    INTERNET = 13
    SOCIETY = 14
    NEWS = 16
    SHOPPING = 18
    LAW = 19
    SPORTS = 20
    LITERATURE = 22
    REAL_ESTATE = 29
    FITNESS = 44
    HEALTH = 45
    VEHICLES = 47
    HOBBIES = 65
    PETS = 66
    TRAVEL = 67
    FOOD = 71
    SCIENCE = 174
    COMMUNITIES = 299
    REFERENCE = 533
    EDUCATION = 958


# ---------------------------------------------------------------------------
# Query model
# ---------------------------------------------------------------------------


class TimeWindow(BaseModel):
    """Inclusive calendar date range, sent as ``"YYYY-MM-DD YYYY-MM-DD"``."""

    model_config = ConfigDict(frozen=True)

    start: date = Field(..., description="First day of the window")
    end: date = Field(..., description="Last day of the window")

    @classmethod
    def default(cls) -> "TimeWindow":
        """Window spanning everything from 2014-01-01 up to today (UTC)."""
        return cls(start=EPOCH_START, end=datetime.now(timezone.utc).date())

    def formatted(self) -> str:
        return f"{self.start.strftime('%Y-%m-%d')} {self.end.strftime('%Y-%m-%d')}"

    @model_serializer
    def _serialize(self) -> str:
        return self.formatted()


class ComparisonItem(BaseModel):
    """One search term of a comparison query."""

    model_config = ConfigDict(frozen=True)

    keyword: str = Field(..., description="Search term or topic id")
    geo: Optional[str] = Field(default=None, description="Geographic code (US, GB, US-CA)")
    time: TimeWindow = Field(default_factory=TimeWindow.default, description="Time window")

    @classmethod
    def by_keyword(cls, keyword: str, time: Optional[TimeWindow] = None) -> "ComparisonItem":
        return cls(keyword=keyword, time=time or TimeWindow.default())

    @classmethod
    def by_keyword_with_geo(
        cls, keyword: str, geo: str, time: Optional[TimeWindow] = None
    ) -> "ComparisonItem":
        return cls(keyword=keyword, geo=geo, time=time or TimeWindow.default())


class Query(BaseModel):
    """A comparison request across one or more search terms.

    Field order and aliases are the wire contract of the explore endpoint:
    ``{"comparisonItem": [...], "category": 0, "property": ""}``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    comparison_items: Tuple[ComparisonItem, ...] = Field(
        ..., alias="comparisonItem", min_length=1
    )
    category: Category = Field(default=Category.ALL)
    source: SourceVertical = Field(default=SourceVertical.WEB, alias="property")

    @classmethod
    def by_keyword(cls, keyword: str, time: Optional[TimeWindow] = None) -> "Query":
        return cls(comparison_items=[ComparisonItem.by_keyword(keyword, time)])

    @property
    def keywords(self) -> List[str]:
        return [item.keyword for item in self.comparison_items]

    def to_request(self) -> str:
        """Serialize to the compact JSON sent as the explore ``req`` parameter."""
        return self.model_dump_json(by_alias=True)


# ---------------------------------------------------------------------------
# Explore response
# ---------------------------------------------------------------------------


class WidgetRequest(BaseModel):
    """Widget descriptor carrying the token and payload needed to fetch data."""

    token: str
    id: str
    request: Dict[str, Any]


class OtherWidget(BaseModel):
    """Any other widget the explore page renders (titles, explanations...)."""

    id: str


# Richer variant first: a descriptor only falls back to OtherWidget when it
# does not carry a token and request payload.
Widget = Annotated[Union[WidgetRequest, OtherWidget], Field(union_mode="left_to_right")]


class ExploreResponse(BaseModel):
    widgets: List[Widget]

    def find_request(self, report_type: ReportType) -> Optional[WidgetRequest]:
        """Return the first data-request widget matching ``report_type``."""
        for widget in self.widgets:
            if isinstance(widget, WidgetRequest) and widget.id == report_type.widget_id:
                return widget
        return None


# ---------------------------------------------------------------------------
# Widget data
# ---------------------------------------------------------------------------


class _ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class _SeriesModel(_ApiModel):
    value: List[int] = Field(..., description="One value per comparison item")
    has_data: List[bool] = Field(..., description="Whether each value is backed by data")

    @model_validator(mode="after")
    def _check_parallel(self):
        if len(self.value) != len(self.has_data):
            raise ValueError(
                f"value and hasData differ in length ({len(self.value)} != {len(self.has_data)})"
            )
        return self


class TimeSeriesEntry(_SeriesModel):
    """A single time bucket of an interest-over-time report."""

    time: datetime
    formatted_time: str
    formatted_value: List[str] = Field(default_factory=list)
    is_partial: bool = False

    @field_validator("time", mode="before")
    @classmethod
    def _parse_epoch_seconds(cls, raw: Any) -> Any:
        # The API sends bucket starts as epoch seconds in a string
        if isinstance(raw, datetime):
            return raw
        if not isinstance(raw, (str, int)) or isinstance(raw, bool):
            raise ValueError(f"invalid epoch seconds {raw!r}")
        try:
            return datetime.fromtimestamp(int(raw), tz=timezone.utc)
        except (ValueError, OverflowError, OSError) as e:
            raise ValueError(f"invalid epoch seconds {raw!r}") from e


class Coordinates(BaseModel):
    lat: float
    lng: float


class RegionEntry(_SeriesModel):
    """A single region of an interest-by-region report."""

    coordinates: Optional[Coordinates] = None
    geo_code: str = ""
    geo_name: str
    formatted_value: List[str] = Field(default_factory=list)
    max_value_index: int = 0


class TimeSeriesData(BaseModel):
    entries: List[TimeSeriesEntry] = Field(..., alias="timelineData")


class RegionData(BaseModel):
    entries: List[RegionEntry] = Field(..., alias="geoMapData")


class RelatedTopic(_ApiModel):
    mid: str = ""
    title: str
    type: str = ""


class RelatedEntry(_ApiModel):
    """A ranked related query (``query`` set) or topic (``topic`` set)."""

    query: Optional[str] = None
    topic: Optional[RelatedTopic] = None
    value: int
    formatted_value: str = ""
    has_data: bool = True
    link: str = ""


class RankedList(_ApiModel):
    ranked_keyword: List[RelatedEntry] = Field(default_factory=list)


class RelatedSearchesData(_ApiModel):
    ranked_list: List[RankedList] = Field(default_factory=list)


class RelatedData(BaseModel):
    """Related topics or queries, split into the top and rising rankings."""

    top: List[RelatedEntry] = Field(default_factory=list)
    rising: List[RelatedEntry] = Field(default_factory=list)


class TimeSeriesResponse(BaseModel):
    default: TimeSeriesData


class RegionResponse(BaseModel):
    default: RegionData


class RelatedSearchesResponse(BaseModel):
    default: RelatedSearchesData
