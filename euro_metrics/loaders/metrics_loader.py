import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

import pandas as pd

from euro_metrics.loaders.country_identities import COUNTRY_IDENTITIES
from euro_metrics.normalizers.metric_normalizer import (
    is_numeric_key,
    parse_year_value,
)
from euro_metrics.provider.schemas import CountryRecord

logger = logging.getLogger(__name__)

COUNTRY_COLUMN = "Country"
RESERVED_FIELDS = {"name", "metric", "color"}

MetricSource = Union[pd.DataFrame, Iterable[Mapping[str, Any]]]


def read_metric_table(path: Union[str, Path]) -> pd.DataFrame:
    """Read a local metric table into a DataFrame for use with ``load_metrics``.

    For library callers working in pandas. ``DataProvider`` fetches raw JSON
    through ``sources`` so that local and remote tables share one path.
    """
    return pd.read_json(
        Path(path), orient="records", dtype=False, convert_axes=False, convert_dates=False
    )


def _is_blank_cell(value: Any) -> bool:
    return pd.api.types.is_scalar(value) and pd.isna(value)


def _rows(source: MetricSource) -> List[Mapping[str, Any]]:
    if isinstance(source, pd.DataFrame):
        return [
            {key: value for key, value in row.items() if not _is_blank_cell(value)}
            for row in source.astype(object).to_dict(orient="records")
        ]
    return list(source)


def _passthrough(row: Mapping[str, Any]) -> Dict[str, Any]:
    extras: Dict[str, Any] = {}
    for key, value in row.items():
        if key == "" or is_numeric_key(key) or key in RESERVED_FIELDS:
            continue
        extras[str(key)] = value
    return extras


def load_metrics(
    source: MetricSource,
    year: Any,
    identities: Optional[Sequence[str]] = None,
) -> List[CountryRecord]:
    identities = COUNTRY_IDENTITIES if identities is None else identities
    by_country: Dict[str, Mapping[str, Any]] = {}
    for row in _rows(source):
        country = row.get(COUNTRY_COLUMN)
        if country in identities:
            by_country[country] = row
        else:
            logger.debug("Skipping row for unrecognised country %r", country)

    records: List[CountryRecord] = []
    for name in identities:
        row = by_country.get(name)
        if row is None:
            records.append(CountryRecord(name=name))
            continue
        records.append(
            CountryRecord(
                name=name,
                metric=parse_year_value(row, year),
                **_passthrough(row),
            )
        )
    return records
