"""Shared fixtures: an in-process fake of the trends explore/widgetdata API."""

import json
from typing import List, Optional

import httpx
import pytest

EXPLORE_GUARD = ")]}'"
WIDGET_GUARD = ")]}',"

EXPLORE_WIDGETS = [
    {"id": "TIMESERIES_TITLE", "title": "Interest over time", "type": "fe_text"},
    {
        "token": "tok-timeseries",
        "id": "TIMESERIES",
        "title": "Interest over time",
        "request": {
            "time": "2020-01-01 2020-12-31",
            "resolution": "WEEK",
            "locale": "en-US",
            "comparisonItem": [{"geo": {}, "complexKeywordsRestriction": {}}],
            "requestOptions": {"property": "", "backend": "IZG", "category": 0},
        },
    },
    {
        "token": "tok-geo",
        "id": "GEO_MAP",
        "title": "Interest by region",
        "request": {
            "geo": {},
            "comparisonItem": [{"time": "2020-01-01 2020-12-31"}],
            "resolution": "COUNTRY",
            "locale": "en-US",
            "requestOptions": {"property": "", "backend": "IZG", "category": 0},
        },
    },
    {
        "token": "tok-topics",
        "id": "RELATED_TOPICS",
        "request": {"restriction": {}, "keywordType": "ENTITY", "metric": ["TOP", "RISING"]},
    },
    {
        "token": "tok-queries",
        "id": "RELATED_QUERIES",
        "request": {"restriction": {}, "keywordType": "QUERY", "metric": ["TOP", "RISING"]},
    },
]

TIMELINE = {
    "timelineData": [
        {
            "time": "1577836800",
            "formattedTime": "Jan 1 - 7, 2020",
            "formattedAxisTime": "Jan 1, 2020",
            "value": [42, 17],
            "hasData": [True, True],
            "formattedValue": ["42", "17"],
        },
        {
            "time": "1578441600",
            "formattedTime": "Jan 8 - 14, 2020",
            "formattedAxisTime": "Jan 8, 2020",
            "value": [100, 0],
            "hasData": [True, False],
            "formattedValue": ["100", "0"],
            "isPartial": True,
        },
    ],
    "averages": [],
}

GEO_MAP = {
    "geoMapData": [
        {
            "geoCode": "US",
            "geoName": "United States",
            "value": [100],
            "formattedValue": ["100"],
            "maxValueIndex": 0,
            "hasData": [True],
        },
        {
            "coordinates": {"lat": 47.6062, "lng": -122.3321},
            "geoName": "Seattle",
            "value": [64],
            "formattedValue": ["64"],
            "maxValueIndex": 0,
            "hasData": [True],
        },
    ]
}

RELATED = {
    "rankedList": [
        {
            "rankedKeyword": [
                {
                    "query": "rust lang",
                    "value": 100,
                    "formattedValue": "100",
                    "hasData": True,
                    "link": "/trends/explore?q=rust+lang",
                },
                {
                    "topic": {"mid": "/m/0dsbpg6", "title": "Rust", "type": "Programming language"},
                    "value": 55,
                    "formattedValue": "55",
                    "hasData": True,
                    "link": "/trends/explore?q=/m/0dsbpg6",
                },
            ]
        },
        {
            "rankedKeyword": [
                {
                    "query": "rust 1.0",
                    "value": 2450,
                    "formattedValue": "Breakout",
                    "link": "/trends/explore?q=rust+1.0",
                }
            ]
        },
    ]
}


def explore_body(widgets: list) -> str:
    return EXPLORE_GUARD + json.dumps({"widgets": widgets})


def widget_body(data: dict) -> str:
    return WIDGET_GUARD + json.dumps({"default": data})


class FakeTrendsServer:
    """Answers explore and widgetdata requests and records every request."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.widgets = [dict(w) for w in EXPLORE_WIDGETS]
        self.data = {"multiline": TIMELINE, "comparedgeo": GEO_MAP, "relatedsearches": RELATED}
        # When set, the first request is answered 429 with this Set-Cookie
        self.challenge_cookie: Optional[str] = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if self.challenge_cookie and len(self.requests) == 1:
            return httpx.Response(
                429, headers={"Set-Cookie": self.challenge_cookie}, text="Too Many Requests"
            )

        path = request.url.path
        if path.endswith("/explore"):
            return httpx.Response(200, text=explore_body(self.widgets))

        endpoint = path.rsplit("/", 1)[-1]
        return httpx.Response(200, text=widget_body(self.data[endpoint]))

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))

    def sent_params(self, index: int) -> dict:
        return dict(self.requests[index].url.params)

    def sent_payload(self, index: int) -> dict:
        return json.loads(self.requests[index].url.params["req"])


@pytest.fixture
def fake_trends() -> FakeTrendsServer:
    return FakeTrendsServer()
