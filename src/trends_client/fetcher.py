"""Google Trends report fetcher using the explore/widgetdata API.

Every report is a two step exchange: the explore endpoint answers a query
with a list of widgets, each carrying a short-lived token and a request
payload; the widget's data endpoint is then called with that token and the
(refined) payload.
"""

import logging
from http.cookiejar import CookieJar, DefaultCookiePolicy
from typing import Any, Callable, List, Optional, TypeVar

import httpx

from . import payload
from .config import settings
from .errors import WidgetUnavailableError
from .models import (
    Category,
    Query,
    RegionEntry,
    RelatedData,
    ReportType,
    Resolution,
    SourceVertical,
    TimeSeriesEntry,
    WidgetRequest,
)
from .parser import decode_explore, decode_geo_map, decode_related, decode_timeline
from .transport import RetryingTransport

logger = logging.getLogger(__name__)

ResultT = TypeVar("ResultT")

# Timezone offset sent to the API; results are always requested in UTC
TZ_OFFSET = "0"


class TrendsFetcher:
    """Fetches interest reports for a comparison query.

    Usage::

        async with TrendsFetcher() as fetcher:
            entries = await fetcher.interest_over_time(Query.by_keyword("rust"))

    Calls share nothing but the underlying connection pool, so a single
    fetcher may serve concurrent tasks. No cookies are kept between calls:
    the only cookie ever sent is the one a rate limit challenge hands to its
    single retry.
    """

    def __init__(
        self,
        locale: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.locale = locale or settings.hl
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=settings.request_timeout,
            cookies=CookieJar(policy=DefaultCookiePolicy(allowed_domains=[])),
            headers={
                "User-Agent": settings.user_agent,
                "Accept": "application/json, text/plain, */*",
            },
        )
        self._transport = RetryingTransport(self._client)

    async def __aenter__(self) -> "TrendsFetcher":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client if this fetcher created it."""
        if self._owns_client:
            await self._client.aclose()

    # ------------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------------

    async def interest_over_time(
        self,
        query: Query,
        source: SourceVertical = SourceVertical.WEB,
        category: Category = Category.ALL,
    ) -> List[TimeSeriesEntry]:
        """Interest over time, one value per comparison item in each bucket."""
        widget = await self.explore(query, ReportType.TIME_SERIES)
        payload.refine(widget, source=source, category=category)
        return await self._fetch(widget, ReportType.TIME_SERIES, decode_timeline)

    async def interest_by_region(
        self,
        query: Query,
        resolution: Resolution = Resolution.COUNTRY,
        source: SourceVertical = SourceVertical.WEB,
        category: Category = Category.ALL,
        include_low_volume_geos: bool = False,
    ) -> List[RegionEntry]:
        """Interest broken down by region at the given resolution."""
        widget = await self.explore(query, ReportType.REGION)
        payload.refine(
            widget,
            resolution=resolution,
            source=source,
            category=category,
            include_low_volume_geos=include_low_volume_geos,
        )
        return await self._fetch(widget, ReportType.REGION, decode_geo_map)

    async def related_topics(
        self,
        query: Query,
        source: SourceVertical = SourceVertical.WEB,
        category: Category = Category.ALL,
    ) -> RelatedData:
        return await self._related(query, ReportType.RELATED_TOPICS, source, category)

    async def related_queries(
        self,
        query: Query,
        source: SourceVertical = SourceVertical.WEB,
        category: Category = Category.ALL,
    ) -> RelatedData:
        return await self._related(query, ReportType.RELATED_QUERIES, source, category)

    async def _related(
        self,
        query: Query,
        report_type: ReportType,
        source: SourceVertical,
        category: Category,
    ) -> RelatedData:
        widget = await self.explore(query, report_type)
        payload.refine(widget, source=source, category=category)
        return await self._fetch(widget, report_type, decode_related)

    # ------------------------------------------------------------------
    # Protocol steps
    # ------------------------------------------------------------------

    async def explore(self, query: Query, report_type: ReportType) -> WidgetRequest:
        """
        Resolve the widget of ``report_type`` offered for ``query``.

        Returns:
            A deep copy of the matching widget, safe to refine in place.

        Raises:
            WidgetUnavailableError: if explore offered no such widget
        """
        logger.info(f"Exploring {query.keywords} for {report_type.widget_id}")

        request = self._build_request(
            f"{settings.api_url}/explore",
            params={"hl": self.locale, "tz": TZ_OFFSET, "req": query.to_request()},
        )
        response = await self._transport.send(request)
        explore = decode_explore(response.text)

        widget = explore.find_request(report_type)
        if widget is None:
            logger.warning(
                f"No {report_type.widget_id} widget for {query.keywords} "
                f"(got {[w.id for w in explore.widgets]})"
            )
            raise WidgetUnavailableError(report_type)

        return widget.model_copy(deep=True)

    async def _fetch(
        self,
        widget: WidgetRequest,
        report_type: ReportType,
        decoder: Callable[[str], ResultT],
    ) -> ResultT:
        request = self._build_request(
            f"{settings.api_url}/{report_type.endpoint}",
            params={
                "hl": self.locale,
                "tz": TZ_OFFSET,
                "token": widget.token,
                "req": payload.dump(widget),
            },
        )
        response = await self._transport.send(request)
        result = decoder(response.text)
        logger.info(f"Fetched {report_type.widget_id} data ({len(response.text)} bytes)")
        return result

    def _build_request(self, url: str, params: dict) -> httpx.Request:
        request = self._client.build_request("GET", url, params=params)
        # Drop whatever an injected client's cookie jar attached
        request.headers.pop("Cookie", None)
        return request
