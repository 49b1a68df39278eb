import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

import yaml

from euro_metrics.provider.schemas import CountryRecord

logger = logging.getLogger(__name__)

ALIASES_PATH = (
    __import__("pathlib").Path(__file__).resolve().parents[1]
    / "config"
    / "geometry_aliases.yml"
)
with ALIASES_PATH.open() as f:
    ALIASES: Dict[str, str] = (yaml.safe_load(f) or {}).get("aliases") or {}

GeoFeatures = Union[Mapping[str, Any], Iterable[Mapping[str, Any]]]


def feature_list(geo_features: GeoFeatures) -> List[Mapping[str, Any]]:
    if isinstance(geo_features, Mapping):
        return list(geo_features.get("features") or [])
    return list(geo_features)


def _candidate_names(name: str, aliases: Mapping[str, str]) -> List[str]:
    alias = aliases.get(name)
    return [alias, name] if alias and alias != name else [name]


def feature_matches(name: str, feature: Mapping[str, Any]) -> bool:
    properties = feature.get("properties") or {}
    if properties.get("formal_en") == name:
        return True
    admin = properties.get("admin") or ""
    if not admin or not name:
        return False
    return name in admin or admin in name


def find_feature(
    name: str,
    features: Sequence[Mapping[str, Any]],
    aliases: Optional[Mapping[str, str]] = None,
) -> Optional[Mapping[str, Any]]:
    aliases = ALIASES if aliases is None else aliases
    for candidate in _candidate_names(name, aliases):
        for feature in features:
            if feature_matches(candidate, feature):
                return feature
    return None


def join_geometry(
    records: Sequence[CountryRecord],
    geo_features: GeoFeatures,
    aliases: Optional[Mapping[str, str]] = None,
) -> List[Dict[str, Any]]:
    features = feature_list(geo_features)
    joined: List[Dict[str, Any]] = []
    for record in records:
        feature = find_feature(record.name, features, aliases)
        if feature is None or not feature.get("geometry"):
            logger.debug("No geometry found for %s", record.name)
            continue
        joined.append(
            {
                "type": "Feature",
                "properties": record.model_dump(),
                "geometry": feature["geometry"],
            }
        )
    return joined
