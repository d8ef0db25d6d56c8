"""Tests for the command line entry point."""

import asyncio
import json
from datetime import date
from typing import List

import httpx
import pytest

from trends_client.config import settings
from trends_client.main import (
    EXIT_FAILURE,
    EXIT_OK,
    EXIT_WIDGET_UNAVAILABLE,
    build_parser,
    build_query,
    main,
)
from trends_client.models import Category, Resolution, SourceVertical


def _main(argv: List[str], client: httpx.AsyncClient) -> int:
    """Run the CLI against an injected client, closing it afterwards."""
    try:
        return main(argv, client=client)
    finally:
        asyncio.run(client.aclose())


def test_build_query_from_arguments() -> None:
    args = build_parser().parse_args(
        [
            "interest-over-time",
            "rust",
            "go",
            "--geo",
            "US",
            "--start",
            "2021-01-01",
            "--end",
            "2021-06-30",
            "--category",
            "real-estate",
            "--source",
            "video",
        ]
    )

    query = build_query(args)

    assert query.keywords == ["rust", "go"]
    assert all(item.geo == "US" for item in query.comparison_items)
    assert query.comparison_items[0].time.formatted() == "2021-01-01 2021-06-30"
    assert query.category is Category.REAL_ESTATE
    assert query.source is SourceVertical.VIDEO


def test_region_arguments_parse_resolution() -> None:
    args = build_parser().parse_args(
        ["interest-by-region", "rust", "--resolution", "dma", "--include-low-volume"]
    )
    assert args.resolution is Resolution.DMA
    assert args.include_low_volume is True
    assert args.start == date(2014, 1, 1)


def test_unknown_category_is_rejected() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args(["related-topics", "rust", "--category", "astrology"])


def test_main_prints_time_series_json(fake_trends, capsys) -> None:
    code = _main(["interest-over-time", "rust", "go"], fake_trends.client())

    assert code == EXIT_OK
    report = json.loads(capsys.readouterr().out)
    assert len(report) == 2
    assert report[0]["value"] == [42, 17]
    assert report[0]["has_data"] == [True, True]
    assert report[0]["time"].startswith("2020-01-01T00:00:00")


def test_main_prints_related_queries_json(fake_trends, capsys) -> None:
    code = _main(["related-queries", "rust"], fake_trends.client())

    assert code == EXIT_OK
    report = json.loads(capsys.readouterr().out)
    assert [entry["query"] for entry in report["top"]] == ["rust lang", None]
    assert report["rising"][0]["value"] == 2450


def test_main_reports_unavailable_widget(fake_trends, capsys) -> None:
    fake_trends.widgets = [{"id": "GEO_MAP"}]

    code = _main(["interest-by-region", "rust"], fake_trends.client())

    assert code == EXIT_WIDGET_UNAVAILABLE
    assert capsys.readouterr().out == ""


def test_main_reports_unexpected_response(capsys) -> None:
    client = httpx.AsyncClient(
        transport=httpx.MockTransport(lambda request: httpx.Response(500, text="boom"))
    )

    code = _main(["interest-over-time", "rust"], client)

    assert code == EXIT_FAILURE
    assert client.is_closed
    assert capsys.readouterr().out == ""


@pytest.mark.parametrize("level", ["loud", "basic_format"])
def test_invalid_log_level_is_rejected(fake_trends, level: str) -> None:
    with pytest.raises(SystemExit) as excinfo:
        _main(["--log-level", level, "interest-over-time", "rust"], fake_trends.client())

    assert excinfo.value.code == 2
    assert fake_trends.requests == []


def test_invalid_log_level_from_environment_is_rejected(monkeypatch) -> None:
    monkeypatch.setattr(settings, "log_level", "verbose")

    with pytest.raises(SystemExit):
        main(["interest-over-time", "rust"])


def test_log_level_is_case_insensitive(fake_trends) -> None:
    assert _main(["--log-level", "debug", "interest-over-time", "rust"], fake_trends.client()) == EXIT_OK
