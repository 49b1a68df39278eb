from __future__ import annotations

import asyncio
import json
import logging
import time
from pathlib import Path
from typing import Any, List, Optional, Union

import httpx

from euro_metrics.settings import get_rendering_config

logger = logging.getLogger(__name__)

Source = Union[str, Path]


class DataSourceError(RuntimeError):
    def __init__(self, source: Source, reason: str) -> None:
        super().__init__(f"Failed to load {source}: {reason}")
        self.source = str(source)
        self.reason = reason


def is_remote(source: Source) -> bool:
    return str(source).startswith(("http://", "https://"))


def _read_local(source: Source) -> Any:
    path = Path(source)
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise DataSourceError(source, exc.strerror or str(exc)) from exc
    except json.JSONDecodeError as exc:
        raise DataSourceError(source, f"invalid JSON ({exc.msg})") from exc
    except UnicodeDecodeError as exc:
        raise DataSourceError(source, "invalid UTF-8") from exc


def _decode(source: Source, response: httpx.Response) -> Any:
    try:
        response.raise_for_status()
        return response.json()
    except httpx.HTTPStatusError as exc:
        raise DataSourceError(source, f"HTTP {exc.response.status_code}") from exc
    except ValueError as exc:
        raise DataSourceError(source, "invalid JSON") from exc


def _timeout(timeout_s: Optional[float]) -> float:
    return timeout_s if timeout_s is not None else get_rendering_config().fetch_timeout_s


def fetch_json(
    source: Source,
    timeout_s: Optional[float] = None,
    transport: Optional[httpx.BaseTransport] = None,
) -> Any:
    if not is_remote(source):
        return _read_local(source)
    start_time = time.monotonic()
    try:
        with httpx.Client(timeout=_timeout(timeout_s), transport=transport) as client:
            response = client.get(str(source))
    except httpx.HTTPError as exc:
        raise DataSourceError(source, type(exc).__name__) from exc
    finally:
        logger.debug(
            "Fetched source=%s latency_ms=%.2f",
            source,
            (time.monotonic() - start_time) * 1000,
        )
    return _decode(source, response)


async def _fetch_async(source: Source, client: httpx.AsyncClient) -> Any:
    if not is_remote(source):
        return await asyncio.to_thread(_read_local, source)
    try:
        response = await client.get(str(source))
    except httpx.HTTPError as exc:
        raise DataSourceError(source, type(exc).__name__) from exc
    return _decode(source, response)


async def fetch_all(
    *sources: Source,
    timeout_s: Optional[float] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> List[Any]:
    """Fetch every source concurrently and return once all have completed.

    Results come back in argument order. The first failure is raised as a
    ``DataSourceError``.
    """
    async with httpx.AsyncClient(timeout=_timeout(timeout_s), transport=transport) as client:
        return list(await asyncio.gather(*(_fetch_async(s, client) for s in sources)))
