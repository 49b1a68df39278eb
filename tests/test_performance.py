import time

import pytest

from euro_metrics.loaders.country_identities import COUNTRY_IDENTITIES
from euro_metrics.loaders.metrics_loader import load_metrics
from euro_metrics.matchers.geometry_matcher import join_geometry
from euro_metrics.normalizers.color_normalizer import colorize


@pytest.mark.performance
def test_load_colorize_join_perf_smoke():
    rows = [
        {"Country": name, **{str(year): f"{idx * 1000 + year:,}" for year in range(1960, 2025)}}
        for idx, name in enumerate(COUNTRY_IDENTITIES)
    ]
    features = [
        {"type": "Feature", "properties": {"admin": f"Region {idx}"}, "geometry": {"type": "Polygon"}}
        for idx in range(250)
    ] + [
        {"type": "Feature", "properties": {"admin": name}, "geometry": {"type": "Polygon"}}
        for name in COUNTRY_IDENTITIES
    ]

    start = time.perf_counter()
    for year in range(1960, 2025):
        records = colorize(load_metrics(rows, year), "straight")
        join_geometry(records, features)
    duration = time.perf_counter() - start

    assert duration < 5.0
