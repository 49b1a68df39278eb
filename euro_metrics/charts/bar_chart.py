import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Union

from euro_metrics.normalizers.color_normalizer import REVERSED
from euro_metrics.normalizers.metric_normalizer import range_converter
from euro_metrics.provider.schemas import CountryRecord
from euro_metrics.settings import RenderingConfig, get_rendering_config

Number = Union[int, float]


@dataclass(frozen=True)
class Bar:
    name: str
    metric: float
    color: str
    label: Union[str, Number]
    width_pct: float


def format_number(num: Optional[Number]) -> Optional[Union[str, Number]]:
    if num is None:
        return None
    if num >= 1000:
        return f"{num / 1000:.1f}K"
    return num


def prepare_bars(
    records: Sequence[CountryRecord],
    relationship: Optional[str] = None,
    config: Optional[RenderingConfig] = None,
) -> List[Bar]:
    """Order records for a bar chart, best value first, and size each bar.

    Records without a metric are left out. Widths are percentages of the
    container: ``min_width_pct`` plus the metric's share of ``span_pct``
    relative to the largest metric.
    """
    config = config or get_rendering_config()
    defined = [r for r in records if r.metric is not None and not math.isnan(r.metric)]
    ordered = sorted(defined, key=lambda r: r.metric, reverse=relationship != REVERSED)
    if not ordered:
        return []
    largest = max(r.metric for r in ordered)
    bars: List[Bar] = []
    for record in ordered:
        share = range_converter(record.metric, 0, largest, 0, config.bars.span_pct)
        bars.append(
            Bar(
                name=record.name,
                metric=record.metric,
                color=record.color,
                label=format_number(record.metric),
                width_pct=(0.0 if math.isnan(share) else share) + config.bars.min_width_pct,
            )
        )
    return bars
