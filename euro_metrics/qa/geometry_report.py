from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence

from euro_metrics.matchers.geometry_matcher import GeoFeatures, feature_list, find_feature
from euro_metrics.normalizers.name_normalizer import (
    normalize_country_name,
    token_sort_ratio,
)
from euro_metrics.provider.schemas import CountryRecord
from euro_metrics.settings import get_rendering_config


def _best_admin(name: str, admins: Sequence[str]) -> Optional[Dict[str, Any]]:
    norm_name = normalize_country_name(name)
    best = None
    best_score = 0.0
    for admin in admins:
        score = token_sort_ratio(norm_name, normalize_country_name(admin))
        if score > best_score:
            best_score = score
            best = admin
    if best is None:
        return None
    return {"admin": best, "score": round(best_score, 3)}


def build_geometry_report(
    records: Sequence[CountryRecord],
    geo_features: GeoFeatures,
    threshold: Optional[float] = None,
    aliases: Optional[Mapping[str, str]] = None,
) -> Dict[str, Any]:
    """Summarise which records found geometry and propose aliases for the rest."""
    threshold = get_rendering_config().suggestion_threshold if threshold is None else threshold
    features = feature_list(geo_features)
    admins = [
        f["properties"]["admin"]
        for f in features
        if (f.get("properties") or {}).get("admin")
    ]

    matched: List[str] = []
    unresolved: List[str] = []
    suggestions: Dict[str, Dict[str, Any]] = {}
    for record in records:
        if find_feature(record.name, features, aliases) is not None:
            matched.append(record.name)
            continue
        unresolved.append(record.name)
        best = _best_admin(record.name, admins)
        if best is not None and best["score"] >= threshold:
            suggestions[record.name] = best

    return {
        "matched": matched,
        "unresolved": unresolved,
        "suggestions": suggestions,
    }
