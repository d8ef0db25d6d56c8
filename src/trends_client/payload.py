"""Targeted edits of a widget's opaque request payload.

The payload returned by the explore endpoint is echoed back to the widget
data endpoint. Only a handful of well-known fields are overwritten here; the
rest of the tree is passed through untouched.
"""

import logging
from typing import Any, Dict, Optional, Sequence

from pydantic_core import PydanticSerializationError, to_json, to_jsonable_python

from .errors import PayloadError
from .models import Category, Resolution, SourceVertical, WidgetRequest

logger = logging.getLogger(__name__)

RESOLUTION_PATH = ("resolution",)
PROPERTY_PATH = ("requestOptions", "property")
CATEGORY_PATH = ("requestOptions", "category")
LOW_VOLUME_GEOS_PATH = ("includeLowSearchVolumeGeos",)


def set_path(tree: Dict[str, Any], path: Sequence[str], value: Any) -> None:
    """
    Set ``value`` at ``path`` inside ``tree``, creating objects on the way.

    Intermediate nodes that are missing or are not objects are replaced by
    empty objects. The leaf is overwritten if present, inserted otherwise.
    """
    if not path:
        raise ValueError("path must not be empty")

    node = tree
    for key in path[:-1]:
        child = node.get(key)
        if not isinstance(child, dict):
            child = {}
            node[key] = child
        node = child
    node[path[-1]] = value


def set_json_value(tree: Dict[str, Any], path: Sequence[str], value: Any) -> None:
    """Convert ``value`` to its JSON form and write it at ``path``."""
    try:
        encoded = to_jsonable_python(value)
    except PydanticSerializationError as e:
        raise PayloadError(f"Cannot encode {value!r} for {'.'.join(path)}: {e}") from e
    set_path(tree, path, encoded)


def set_resolution(widget: WidgetRequest, resolution: Resolution) -> None:
    set_json_value(widget.request, RESOLUTION_PATH, resolution)


def set_source(widget: WidgetRequest, source: SourceVertical) -> None:
    set_json_value(widget.request, PROPERTY_PATH, source)


def set_category(widget: WidgetRequest, category: Category) -> None:
    set_json_value(widget.request, CATEGORY_PATH, category)


def set_include_low_volume_geos(widget: WidgetRequest, include: bool) -> None:
    set_json_value(widget.request, LOW_VOLUME_GEOS_PATH, include)


def dump(widget: WidgetRequest) -> str:
    """Serialize the widget payload as compact JSON for the ``req`` parameter."""
    return to_json(widget.request).decode("utf-8")


def refine(
    widget: WidgetRequest,
    resolution: Optional[Resolution] = None,
    source: Optional[SourceVertical] = None,
    category: Optional[Category] = None,
    include_low_volume_geos: Optional[bool] = None,
) -> WidgetRequest:
    """Apply every given refinement to the widget payload in place."""
    if resolution is not None:
        set_resolution(widget, resolution)
    if source is not None:
        set_source(widget, source)
    if category is not None:
        set_category(widget, category)
    if include_low_volume_geos is not None:
        set_include_low_volume_geos(widget, include_low_volume_geos)

    logger.debug(f"Refined {widget.id} payload: {widget.request}")
    return widget
