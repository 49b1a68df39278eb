import logging
import math
from typing import Iterable, List, Optional, Sequence, Tuple

from euro_metrics.normalizers.metric_normalizer import range_converter
from euro_metrics.provider.schemas import CountryRecord
from euro_metrics.settings import RenderingConfig, get_rendering_config

logger = logging.getLogger(__name__)

REVERSED = "reversed"


def _round_channel(value: float) -> int:
    # half-up, matching browser rounding of colour channels
    return min(255, max(0, int(math.floor(value * 255 + 0.5))))


def _hue_to_channel(p: float, q: float, t: float) -> float:
    if t < 0:
        t += 1
    if t > 1:
        t -= 1
    if t < 1 / 6:
        return p + (q - p) * 6 * t
    if t < 1 / 2:
        return q
    if t < 2 / 3:
        return p + (q - p) * (2 / 3 - t) * 6
    return p


def hsl_to_rgb(h: float, s: float, l: float) -> Tuple[int, int, int]:
    if s == 0:
        r = g = b = l
    else:
        q = l * (1 + s) if l < 0.5 else l + s - l * s
        p = 2 * l - q
        r = _hue_to_channel(p, q, h + 1 / 3)
        g = _hue_to_channel(p, q, h)
        b = _hue_to_channel(p, q, h - 1 / 3)
    return _round_channel(r), _round_channel(g), _round_channel(b)


def format_rgb(rgb: Sequence[int]) -> str:
    return f"rgb({rgb[0]}, {rgb[1]}, {rgb[2]})"


def defined_metrics(metrics: Iterable[Optional[float]]) -> List[float]:
    return [
        float(m)
        for m in metrics
        if isinstance(m, (int, float)) and not isinstance(m, bool) and math.isfinite(m)
    ]


def metric_hue(
    metric: float,
    low: float,
    high: float,
    relationship: Optional[str],
    config: RenderingConfig,
) -> float:
    position = range_converter(metric, low, high, 0, 1)
    if math.isnan(position):
        position = config.color.degenerate_position
    if relationship == REVERSED:
        position = 1 - position
    return position * config.color.hue_span


def calculate_color(
    metric: Optional[float],
    all_metrics: Iterable[Optional[float]],
    relationship: Optional[str] = None,
    config: Optional[RenderingConfig] = None,
) -> str:
    config = config or get_rendering_config()
    if metric is None or (isinstance(metric, float) and math.isnan(metric)):
        return format_rgb(config.color.no_data_rgb)
    metrics = defined_metrics(all_metrics) or [metric]
    hue = metric_hue(metric, min(metrics), max(metrics), relationship, config)
    return format_rgb(hsl_to_rgb(hue, config.color.saturation, config.color.lightness))


def colorize(
    records: Sequence[CountryRecord],
    relationship: Optional[str] = None,
    config: Optional[RenderingConfig] = None,
) -> List[CountryRecord]:
    config = config or get_rendering_config()
    metrics = defined_metrics(r.metric for r in records)
    if metrics and min(metrics) == max(metrics):
        logger.info(
            "All %d defined metrics equal %s; colouring at position %.2f",
            len(metrics),
            metrics[0],
            config.color.degenerate_position,
        )
    return [
        record.model_copy(
            update={"color": calculate_color(record.metric, metrics, relationship, config)}
        )
        for record in records
    ]
