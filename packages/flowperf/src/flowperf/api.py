"""FastAPI service accepting performance result batches.

Endpoints:
  POST /results  — report a batch, detect regressions, persist results + alerts
  GET  /health   — liveness and whether the database phase is enabled
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI, HTTPException
from pydantic import BaseModel

from flowperf.errors import FlowPerfError, StoreUnavailableError
from flowperf.models import FlowPerfConfig, OrgContext, TestResultOutput
from flowperf.pipeline import report_results
from flowperf.reporters import Reporter, build_reporters
from flowperf.storage import ResultStore, create_pool
from flowperf_core.models import CamelModel

logger = logging.getLogger("flowperf.api")

router = APIRouter(tags=["results"])

# Set at startup via `configure_results_router`
_config: FlowPerfConfig | None = None
_reporters: list[Reporter] = []
_store: ResultStore | None = None


class ReportRequest(CamelModel):
    org_context: OrgContext
    results: list[TestResultOutput]


class ReportResponse(BaseModel):
    results: int
    failed_reporters: list[str]
    eligible: int
    alerts: int
    saved: bool


def configure_results_router(
    *,
    config: FlowPerfConfig,
    reporters: list[Reporter],
    store: ResultStore | None = None,
) -> None:
    """Inject dependencies into the results router.

    Called during app startup before the first request.
    """
    global _config, _reporters, _store
    _config = config
    _reporters = reporters
    _store = store


def _get_config() -> FlowPerfConfig:
    if _config is None:
        raise HTTPException(status_code=503, detail="Service not configured")
    return _config


@router.get("/health")
async def health() -> dict[str, bool]:
    config = _get_config()
    return {"ok": True, "database_enabled": config.database_enabled}


@router.post("/results")
async def post_results(request: ReportRequest) -> ReportResponse:
    """Report a batch and store regression alerts."""
    config = _get_config()
    try:
        outcome = await report_results(
            request.results,
            request.org_context,
            config=config,
            reporters=_reporters,
            baselines=_store,
            sink=_store,
        )
    except StoreUnavailableError as exc:
        raise HTTPException(status_code=503, detail="Result store unavailable") from exc
    except FlowPerfError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    except Exception as exc:
        raise HTTPException(status_code=500, detail="Failed to save results") from exc

    return ReportResponse(
        results=len(outcome.results),
        failed_reporters=outcome.failed_reporters,
        eligible=outcome.eligible_count,
        alerts=len(outcome.alerts),
        saved=outcome.saved,
    )


def create_app(config: FlowPerfConfig | None = None) -> FastAPI:
    """Build the app; the database pool lives for the app's lifespan."""
    config = config or FlowPerfConfig()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        pool = None
        store = None
        if config.database_url:
            try:
                pool = await create_pool(config.database_url)
                store = ResultStore(pool=pool, window_days=config.baseline_window_days)
            except Exception:
                logger.exception("Failed to create PostgreSQL pool")
        configure_results_router(config=config, reporters=build_reporters(config), store=store)
        try:
            yield
        finally:
            if pool is not None:
                await pool.close()

    app = FastAPI(
        title="flowperf",
        description="Performance regression alerting for flow/action test results.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.include_router(router)
    return app
