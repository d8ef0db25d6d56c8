"""Parser for Google Trends explore and widget data responses."""

import logging
from typing import List, Type, TypeVar

from pydantic import BaseModel, ValidationError

from .errors import DecodeError
from .models import (
    ExploreResponse,
    RegionEntry,
    RegionResponse,
    RelatedData,
    RelatedSearchesResponse,
    TimeSeriesEntry,
    TimeSeriesResponse,
)

logger = logging.getLogger(__name__)

# Length of the anti-XSSI guard in front of the JSON payload
EXPLORE_GUARD_LENGTH = 4  # )]}'
WIDGET_GUARD_LENGTH = 5  # )]}',

ModelT = TypeVar("ModelT", bound=BaseModel)


def strip_guard(body: str, length: int) -> str:
    """Drop exactly ``length`` leading characters of guard text."""
    return body[length:]


def decode(body: str, guard_length: int, model: Type[ModelT]) -> ModelT:
    """
    Strip the guard prefix and validate the remaining JSON against ``model``.

    Raises:
        DecodeError: if the remainder is not JSON or does not match the model
    """
    payload = strip_guard(body, guard_length)
    try:
        return model.model_validate_json(payload)
    except ValidationError as e:
        logger.error(f"Failed to decode {model.__name__}: {e.error_count()} error(s)")
        raise DecodeError(f"Unexpected {model.__name__} payload: {e}", body=body) from e


def decode_explore(body: str) -> ExploreResponse:
    explore = decode(body, EXPLORE_GUARD_LENGTH, ExploreResponse)
    logger.debug(f"Explore returned widgets: {[w.id for w in explore.widgets]}")
    return explore


def decode_timeline(body: str) -> List[TimeSeriesEntry]:
    """Decode a multiline widget response into its timeline entries."""
    return decode(body, WIDGET_GUARD_LENGTH, TimeSeriesResponse).default.entries


def decode_geo_map(body: str) -> List[RegionEntry]:
    """Decode a comparedgeo widget response into its region entries."""
    return decode(body, WIDGET_GUARD_LENGTH, RegionResponse).default.entries


def decode_related(body: str) -> RelatedData:
    """
    Decode a relatedsearches widget response.

    The server sends two ranked lists: the first ranks the top entries, the
    second the rising ones. Either may be missing for low-volume queries.
    """
    ranked = decode(body, WIDGET_GUARD_LENGTH, RelatedSearchesResponse).default.ranked_list

    top = ranked[0].ranked_keyword if len(ranked) > 0 else []
    rising = ranked[1].ranked_keyword if len(ranked) > 1 else []
    return RelatedData(top=top, rising=rising)
