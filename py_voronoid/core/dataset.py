"""
Input items and their conversion to layout sites.

This is the validation boundary of the engine: every target fraction
depends on a positive total, so bad input is rejected here before a
run starts.
"""

import math
import numbers
from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional, Union

import structlog

from .categories import DEFAULT_CATEGORY, normalize_category
from .errors import InvalidDatasetError
from .weight_optimizer import calculate_targets

logger = structlog.get_logger()

MAX_ITEMS = 50


@dataclass(frozen=True)
class DataItem:
    """One input item as delivered by the import layer."""
    label: str
    value: float
    category: str = DEFAULT_CATEGORY
    display_label: Optional[str] = None
    text_color: Optional[str] = None


@dataclass
class Site:
    """A data item placed in the layout.

    The target fraction is fixed for a run; the weight is what the
    optimizer adjusts.
    """
    index: int
    label: str
    value: float
    category: str
    target: float
    weight: float = 0.0
    display_label: Optional[str] = None
    text_color: Optional[str] = None


def _first(raw: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if raw.get(key) is not None:
            return raw[key]
    return None


def coerce_item(raw: Union[DataItem, Site, Mapping[str, Any]], position: int) -> DataItem:
    """
    Build a DataItem from an item, a site or a loose mapping.

    Mappings may use label/name, value/n/count and category/cat keys.

    Raises:
        InvalidDatasetError: Missing label or invalid value
    """
    if isinstance(raw, (DataItem, Site)):
        label, value, category = raw.label, raw.value, raw.category
        display_label, text_color = raw.display_label, raw.text_color
    elif isinstance(raw, Mapping):
        label = _first(raw, "label", "name")
        value = _first(raw, "value", "n", "count")
        category = _first(raw, "category", "cat")
        display_label = raw.get("display_label")
        text_color = raw.get("text_color")
    else:
        raise InvalidDatasetError(f"Item {position + 1}: unsupported item type {type(raw).__name__}")

    if not label or not str(label).strip():
        raise InvalidDatasetError(f"Item {position + 1}: missing label")

    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidDatasetError(f"Item {position + 1}: invalid value {value!r}")
    if math.isnan(value) or math.isinf(value) or value < 0:
        raise InvalidDatasetError(f"Item {position + 1}: invalid value {value!r}")

    return DataItem(
        label=str(label).strip(),
        value=float(value),
        category=normalize_category(category),
        display_label=display_label,
        text_color=text_color,
    )


def prepare_sites(items: Iterable[Union[DataItem, Site, Mapping[str, Any]]],
                  max_items: int = MAX_ITEMS) -> List[Site]:
    """
    Validate input items and turn them into sites with target fractions.

    Existing sites are accepted too; their targets are derived again
    from their values.

    Args:
        items: DataItems, Sites or mappings
        max_items: Largest accepted dataset

    Returns:
        Sites in input order, targets summing to 1, weights at 0

    Raises:
        InvalidDatasetError: Empty or oversized dataset, bad item, or a
            zero total
    """
    data = [coerce_item(raw, i) for i, raw in enumerate(items)]

    if not data:
        raise InvalidDatasetError("No valid data found")
    if len(data) > max_items:
        raise InvalidDatasetError(f"Maximum {max_items} items allowed, got {len(data)}")

    if sum(d.value for d in data) <= 0:
        raise InvalidDatasetError("Values must have a positive total")
    targets = calculate_targets([d.value for d in data])

    sites = [
        Site(
            index=i,
            label=d.label,
            value=d.value,
            category=d.category,
            target=float(targets[i]),
            display_label=d.display_label,
            text_color=d.text_color,
        )
        for i, d in enumerate(data)
    ]

    logger.debug("Sites prepared", count=len(sites),
                 categories=sorted({s.category for s in sites}))
    return sites
