from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Callable, List, Mapping, Optional, Tuple, Union

from euro_metrics.loaders.metrics_loader import load_metrics
from euro_metrics.loaders.sources import DataSourceError, fetch_all
from euro_metrics.matchers.geometry_matcher import join_geometry
from euro_metrics.normalizers.color_normalizer import colorize
from euro_metrics.provider.schemas import CountryRecord, DataResult
from euro_metrics.qa.geometry_report import build_geometry_report
from euro_metrics.settings import RenderingConfig, get_rendering_config

logger = logging.getLogger(__name__)

Source = Union[str, Path]
Fetcher = Callable[..., List[Any]]


def _gather(*sources: Source, timeout_s: Optional[float] = None) -> List[Any]:
    return asyncio.run(fetch_all(*sources, timeout_s=timeout_s))


def _expect_table(source: Source, table: Any) -> List[Any]:
    if not isinstance(table, list) or not all(isinstance(row, Mapping) for row in table):
        raise DataSourceError(source, "expected a JSON array of country rows")
    return table


def _expect_features(source: Source, geometry: Any) -> Any:
    features = geometry.get("features") if isinstance(geometry, Mapping) else geometry
    if not isinstance(features, list) or not all(isinstance(f, Mapping) for f in features):
        raise DataSourceError(source, "expected a GeoJSON FeatureCollection or feature array")
    return geometry


class DataProvider:
    """Turns a metric table (and optionally country geometry) into coloured records.

    Holds no per-request state: every call fetches, loads and colours from
    scratch. ``fetcher`` takes any number of sources and returns their decoded
    JSON in the same order once all of them have arrived.
    """

    def __init__(
        self,
        config: Optional[RenderingConfig] = None,
        fetcher: Optional[Fetcher] = None,
    ) -> None:
        self.config = config or get_rendering_config()
        self.fetcher = fetcher or _gather

    def build_records(
        self,
        table: Any,
        year: Optional[Any] = None,
        relationship: Optional[str] = None,
    ) -> List[CountryRecord]:
        year = self.config.resolve_year(year)
        relationship = self.config.resolve_relationship(relationship)
        return colorize(load_metrics(table, year), relationship, self.config)

    def get_data(
        self,
        source: Source,
        year: Optional[Any] = None,
        relationship: Optional[str] = None,
    ) -> DataResult:
        try:
            (table,) = self.fetcher(source, timeout_s=self.config.fetch_timeout_s)
            table = _expect_table(source, table)
        except DataSourceError as exc:
            return self._failure(exc)
        records = self.build_records(table, year, relationship)
        return DataResult(status="ok", records=records, source=str(source))

    def get_map_data(
        self,
        source: Source,
        geometry_source: Source,
        year: Optional[Any] = None,
        relationship: Optional[str] = None,
    ) -> DataResult:
        try:
            table, geometry = self._fetch_with_geometry(source, geometry_source)
        except DataSourceError as exc:
            return self._failure(exc)
        records = self.build_records(table, year, relationship)
        return DataResult(
            status="ok",
            records=records,
            features=join_geometry(records, geometry),
            source=str(source),
        )

    def get_geometry_report(
        self,
        source: Source,
        geometry_source: Source,
        year: Optional[Any] = None,
    ) -> DataResult:
        try:
            table, geometry = self._fetch_with_geometry(source, geometry_source)
        except DataSourceError as exc:
            return self._failure(exc)
        records = self.build_records(table, year)
        return DataResult(
            status="ok",
            records=records,
            report=build_geometry_report(
                records, geometry, self.config.suggestion_threshold
            ),
            source=str(source),
        )

    def _fetch_with_geometry(
        self, source: Source, geometry_source: Source
    ) -> Tuple[List[Any], Any]:
        table, geometry = self.fetcher(
            source, geometry_source, timeout_s=self.config.fetch_timeout_s
        )
        return _expect_table(source, table), _expect_features(geometry_source, geometry)

    @staticmethod
    def _failure(exc: DataSourceError) -> DataResult:
        logger.warning("Data source unavailable source=%s reason=%s", exc.source, exc.reason)
        return DataResult(status="error", error=str(exc), source=exc.source)
