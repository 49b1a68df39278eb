from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional, Tuple

import yaml
from dotenv import load_dotenv

load_dotenv()

CONFIG_DIR = Path(__file__).resolve().parent / "config"
RENDERING_PATH = CONFIG_DIR / "rendering.yml"
DATASETS_PATH = CONFIG_DIR / "datasets.yml"

DATA_DIR_ENV = "EURO_METRICS_DATA_DIR"
FETCH_TIMEOUT_ENV = "EURO_METRICS_FETCH_TIMEOUT"


@dataclass(frozen=True)
class ColorConfig:
    no_data_rgb: Tuple[int, int, int]
    saturation: float
    lightness: float
    hue_span: float
    degenerate_position: float


@dataclass(frozen=True)
class BarConfig:
    min_width_pct: float
    span_pct: float


@dataclass(frozen=True)
class RenderingConfig:
    default_year: int
    default_relationship: str
    color: ColorConfig
    bars: BarConfig
    data_dir: Path
    fetch_timeout_s: float
    suggestion_threshold: float

    def resolve_year(self, year: Optional[object]) -> object:
        return self.default_year if year in (None, "") else year

    def resolve_relationship(self, relationship: Optional[str]) -> str:
        return relationship or self.default_relationship


@dataclass(frozen=True)
class DatasetConfig:
    key: str
    label: str
    file: str
    relationship: str


@dataclass(frozen=True)
class DatasetRegistry:
    geometry_file: str
    datasets: Dict[str, DatasetConfig]

    def get(self, key: str) -> Optional[DatasetConfig]:
        return self.datasets.get(key.lower())


def _read_yaml(path: Path) -> dict:
    return (yaml.safe_load(path.read_text()) or {}) if path.exists() else {}


@lru_cache
def get_rendering_config(path: Path = RENDERING_PATH) -> RenderingConfig:
    data = _read_yaml(path)
    color_data = data.get("color") or {}
    bar_data = data.get("bars") or {}
    source_data = data.get("sources") or {}
    geometry_data = data.get("geometry") or {}

    color = ColorConfig(
        no_data_rgb=tuple(int(c) for c in color_data.get("no_data_rgb", (180, 180, 180))),
        saturation=float(color_data.get("saturation", 0.5)),
        lightness=float(color_data.get("lightness", 0.5)),
        hue_span=float(color_data.get("hue_span", 0.5)),
        degenerate_position=float(color_data.get("degenerate_position", 0.5)),
    )
    bars = BarConfig(
        min_width_pct=float(bar_data.get("min_width_pct", 10)),
        span_pct=float(bar_data.get("span_pct", 40)),
    )
    data_dir = os.getenv(DATA_DIR_ENV) or source_data.get("data_dir", "data")
    fetch_timeout = os.getenv(FETCH_TIMEOUT_ENV) or source_data.get("fetch_timeout_s", 10.0)
    return RenderingConfig(
        default_year=int(data.get("default_year", 2000)),
        default_relationship=data.get("default_relationship", "straight"),
        color=color,
        bars=bars,
        data_dir=Path(data_dir),
        fetch_timeout_s=float(fetch_timeout),
        suggestion_threshold=float(geometry_data.get("suggestion_threshold", 0.6)),
    )


@lru_cache
def get_dataset_registry(path: Path = DATASETS_PATH) -> DatasetRegistry:
    data = _read_yaml(path)
    datasets = {
        key.lower(): DatasetConfig(
            key=key.lower(),
            label=value.get("label", key),
            file=value.get("file", f"{key}.json"),
            relationship=value.get("relationship", "straight"),
        )
        for key, value in (data.get("datasets") or {}).items()
    }
    return DatasetRegistry(
        geometry_file=data.get("geometry_file", "countries.json"),
        datasets=datasets,
    )
