import logging
import math
from typing import Any, Mapping, Optional

logger = logging.getLogger(__name__)

MISSING_MARKERS = {"", "n/a"}


def is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and value.strip() in MISSING_MARKERS


def is_numeric_key(key: Any) -> bool:
    if isinstance(key, (int, float)) and not isinstance(key, bool):
        return not math.isnan(key)
    try:
        return not math.isnan(float(str(key)))
    except ValueError:
        return False


def parse_metric(value: Any) -> Optional[float]:
    if is_missing(value):
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        metric = float(value)
        return metric if math.isfinite(metric) else None
    text = str(value).replace(",", "").strip()
    try:
        metric = float(text)
    except ValueError:
        logger.debug("Unparseable metric value %r treated as missing", value)
        return None
    if not math.isfinite(metric):
        logger.debug("Non-finite metric value %r treated as missing", value)
        return None
    return metric


def parse_year_value(row: Mapping[str, Any], year: Any) -> Optional[float]:
    for key in (year, str(year)):
        if key in row:
            return parse_metric(row[key])
    return None


def range_converter(
    value: float, old_min: float, old_max: float, new_min: float, new_max: float
) -> float:
    """Map ``value`` from [old_min, old_max] onto [new_min, new_max].

    A zero-width input range gives NaN instead of raising.
    """
    old_span = old_max - old_min
    if old_span == 0:
        return math.nan
    return (value - old_min) / old_span * (new_max - new_min) + new_min
