from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

NO_DATA_COLOR = "rgb(180, 180, 180)"


class CountryRecord(BaseModel):
    """One country's value for the selected year.

    Fields copied through from the source row (continent, ISO code, labels)
    are kept as model extras and included in ``model_dump()``.
    """

    model_config = ConfigDict(extra="allow")

    name: str
    metric: Optional[float] = None
    color: str = NO_DATA_COLOR


class DataResult(BaseModel):
    status: Literal["ok", "error"]
    records: List[CountryRecord] = Field(default_factory=list)
    features: List[Dict[str, Any]] = Field(default_factory=list)
    error: Optional[str] = None
    source: Optional[str] = None
    report: Optional[Dict[str, Any]] = None

    @property
    def ok(self) -> bool:
        return self.status == "ok"
