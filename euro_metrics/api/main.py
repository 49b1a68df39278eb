from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import HTMLResponse

from euro_metrics.charts.bar_chart import prepare_bars
from euro_metrics.charts.withholding_chain import parse_withholding_chain
from euro_metrics.provider.data_provider import DataProvider
from euro_metrics.provider.schemas import DataResult
from euro_metrics.settings import DatasetConfig, get_dataset_registry, get_rendering_config

app = FastAPI(title="European Metrics API")
provider = DataProvider()

API_ENDPOINTS = [
    {"method": "GET", "path": "/health", "description": "Simple API health check"},
    {"method": "GET", "path": "/datasets", "description": "List configured metric datasets"},
    {"method": "GET", "path": "/datasets/{key}/records", "description": "Coloured per-country records for a year"},
    {"method": "GET", "path": "/datasets/{key}/bars", "description": "Ordered, sized bars for a bar chart"},
    {"method": "GET", "path": "/datasets/{key}/map", "description": "GeoJSON FeatureCollection for a choropleth"},
    {"method": "GET", "path": "/datasets/{key}/geometry-report", "description": "Countries missing geometry, with alias suggestions"},
    {"method": "GET", "path": "/withholding-chain", "description": "Parse a withholding chain expression"},
]


def _get_dataset(key: str) -> DatasetConfig:
    dataset = get_dataset_registry().get(key)
    if not dataset:
        raise HTTPException(status_code=404, detail=f"Unknown dataset '{key}'")
    return dataset


def _data_path(filename: str) -> Path:
    return get_rendering_config().data_dir / filename


def _checked(result: DataResult) -> DataResult:
    if not result.ok:
        raise HTTPException(status_code=502, detail=result.error)
    return result


def _load(dataset: DatasetConfig, year: Optional[str], relationship: Optional[str]) -> DataResult:
    return _checked(
        provider.get_data(
            _data_path(dataset.file), year, relationship or dataset.relationship
        )
    )


def _load_map(dataset: DatasetConfig, year: Optional[str], relationship: Optional[str]) -> DataResult:
    return _checked(
        provider.get_map_data(
            _data_path(dataset.file),
            _data_path(get_dataset_registry().geometry_file),
            year,
            relationship or dataset.relationship,
        )
    )


@app.get("/", response_class=HTMLResponse)
def index():
    datasets = get_dataset_registry().datasets.values()
    html = f"""
    <!DOCTYPE html>
    <html lang="en">
    <head>
        <meta charset="utf-8" />
        <title>European Metrics</title>
        <style>
            body {{ font-family: Arial, sans-serif; margin: 24px; color: #1f2430; }}
            table {{ border-collapse: collapse; width: 100%; margin-bottom: 24px; }}
            th, td {{ border-bottom: 1px solid #e5e7ef; text-align: left; padding: 8px; font-size: 14px; }}
            th {{ background: #f2f4ff; }}
        </style>
    </head>
    <body>
        <h1>European Metrics</h1>
        <h2>Endpoints</h2>
        <table>
            <thead><tr><th>Method</th><th>Path</th><th>Description</th></tr></thead>
            <tbody>
                {''.join(f"<tr><td>{ep['method']}</td><td><code>{ep['path']}</code></td><td>{ep['description']}</td></tr>" for ep in API_ENDPOINTS)}
            </tbody>
        </table>
        <h2>Datasets</h2>
        <table>
            <thead><tr><th>Key</th><th>Label</th><th>Relationship</th></tr></thead>
            <tbody>
                {''.join(f"<tr><td><code>{d.key}</code></td><td>{d.label}</td><td>{d.relationship}</td></tr>" for d in datasets)}
            </tbody>
        </table>
    </body>
    </html>
    """
    return HTMLResponse(content=html)


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/datasets")
def list_datasets():
    return {
        "datasets": [
            {"key": d.key, "label": d.label, "relationship": d.relationship}
            for d in get_dataset_registry().datasets.values()
        ]
    }


@app.get("/datasets/{key}/records")
def dataset_records(key: str, year: Optional[str] = None, relationship: Optional[str] = None):
    dataset = _get_dataset(key)
    result = _load(dataset, year, relationship)
    return {
        "dataset": dataset.key,
        "year": get_rendering_config().resolve_year(year),
        "records": [r.model_dump() for r in result.records],
    }


@app.get("/datasets/{key}/bars")
def dataset_bars(key: str, year: Optional[str] = None, relationship: Optional[str] = None):
    dataset = _get_dataset(key)
    relationship = relationship or dataset.relationship
    result = _load(dataset, year, relationship)
    return {
        "dataset": dataset.key,
        "bars": [asdict(bar) for bar in prepare_bars(result.records, relationship)],
    }


@app.get("/datasets/{key}/map")
def dataset_map(key: str, year: Optional[str] = None, relationship: Optional[str] = None):
    dataset = _get_dataset(key)
    result = _load_map(dataset, year, relationship)
    return {"type": "FeatureCollection", "features": result.features}


@app.get("/datasets/{key}/geometry-report")
def dataset_geometry_report(key: str, year: Optional[str] = None) -> Dict[str, Any]:
    dataset = _get_dataset(key)
    result = _checked(
        provider.get_geometry_report(
            _data_path(dataset.file),
            _data_path(get_dataset_registry().geometry_file),
            year,
        )
    )
    return result.report


@app.get("/withholding-chain")
def withholding_chain(participants: str = Query(..., min_length=1), capital: Optional[str] = None):
    try:
        chain = parse_withholding_chain(participants, capital)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return {"participants": [asdict(p) for p in chain]}
