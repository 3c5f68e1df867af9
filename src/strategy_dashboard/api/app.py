"""FastAPI application for the strategy dashboard backend."""

from __future__ import annotations

import os
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Generator, Optional

import structlog
from fastapi import APIRouter, Depends, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from strategy_dashboard import __version__
from strategy_dashboard.config.loader import load_config
from strategy_dashboard.config.schema import AppConfig
from strategy_dashboard.db.engine import dispose_engine, get_session as _get_session, init_engine
from strategy_dashboard.metrics import MetricsCache, MetricsEngine, MetricsError
from strategy_dashboard.metrics.queries import (
    compute_window_heatmap,
    compute_window_metrics,
    fetch_strategies,
    list_symbols,
    performance_from_row,
    strategy_to_dict,
)

logger = structlog.get_logger()

router = APIRouter()


def get_db() -> Generator[Session, None, None]:
    """Dependency to get DB session."""
    gen = _get_session()
    session = next(gen)
    try:
        yield session
    finally:
        try:
            next(gen)
        except StopIteration:
            pass


def get_engine(request: Request) -> MetricsEngine:
    return request.app.state.metrics_engine


def get_cache(request: Request) -> MetricsCache:
    return request.app.state.metrics_cache


@router.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}


@router.get("/symbols")
def get_symbols(session: Session = Depends(get_db)):
    """Distinct traded symbols (futures collapsed to their root)."""
    return {"symbols": list_symbols(session)}


@router.get("/universe")
def get_universe(
    from_: date = Query(..., alias="from"),
    to: date = Query(...),
    session: Session = Depends(get_db),
):
    """Every strategy entered and exited within the window."""
    rows = fetch_strategies(session, from_, to)
    return {"strategies": [strategy_to_dict(row) for row in rows]}


@router.get("/strategy/{symbol:path}")
def get_strategy(
    symbol: str,
    from_: date = Query(..., alias="from"),
    to: date = Query(...),
    session: Session = Depends(get_db),
):
    """Strategies for a single symbol within the window."""
    rows = fetch_strategies(session, from_, to, symbol=symbol)
    return {"strategies": [strategy_to_dict(row) for row in rows]}


@router.get("/performance")
def get_performance(
    from_: date = Query(..., alias="from"),
    to: date = Query(...),
    is_active: bool = False,
    session: Session = Depends(get_db),
):
    """Entry/exit price and return per strategy; open ones when *is_active*."""
    status = "OPEN" if is_active else "CLOSED"
    rows = fetch_strategies(session, from_, to, status=status)

    performance = []
    for row in rows:
        perf = performance_from_row(row)
        performance.append({
            "strategy": perf.strategy,
            "start_date": perf.start_date.isoformat(),
            "exit_date": perf.exit_date.isoformat(),
            "start_price": float(perf.start_price),
            "end_price": float(perf.end_price),
            "pnl": float(perf.pnl),
            "roi": float(perf.roi),
        })
    return {"performance": performance}


@router.get("/metrics")
def get_metrics(
    from_: date = Query(..., alias="from"),
    to: date = Query(...),
    symbol: Optional[str] = None,
    session: Session = Depends(get_db),
    engine: MetricsEngine = Depends(get_engine),
    cache: MetricsCache = Depends(get_cache),
):
    """Drawdown, Sharpe, expectancy, recovery and profit factor for closed trades."""
    key = MetricsCache.key("metrics", from_, to, symbol)
    metrics = cache.get_or_compute(
        key, lambda: compute_window_metrics(session, from_, to, engine, symbol=symbol)
    )
    body = metrics.to_dict()
    logger.info("Metrics", **body)
    return {"metrics": body}


@router.get("/watermarks")
def get_watermarks(
    from_: date = Query(..., alias="from"),
    to: date = Query(...),
    session: Session = Depends(get_db),
    engine: MetricsEngine = Depends(get_engine),
    cache: MetricsCache = Depends(get_cache),
):
    """Weekly watermark heatmap over the year ending at *to*.

    ``from`` is accepted for parity with the other range endpoints; the
    lookback window is always derived from ``to``.
    """
    key = MetricsCache.key("watermarks", to, to)
    heatmap = cache.get_or_compute(key, lambda: compute_window_heatmap(session, to, engine))
    logger.info("Watermark heatmap", cells=len(heatmap.cells), to=to.isoformat())
    return heatmap.to_dict()


async def metrics_error_handler(request: Request, exc: MetricsError) -> JSONResponse:
    logger.warning("Rejected metrics request", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=400, content={"error": str(exc)})


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Database error", path=request.url.path)
    return JSONResponse(status_code=500, content={"error": f"Database error: {exc}"})


def mount_frontend(app: FastAPI, directory: str | Path) -> None:
    """Serve the static dashboard for every path not matched by the API."""
    app.mount("/", StaticFiles(directory=str(directory), html=True), name="frontend")
    logger.info("Serving frontend", directory=str(directory))


def create_app(config: AppConfig | None = None) -> FastAPI:
    """Build the API with its engine, cache and middleware from *config*."""
    config = config or load_config(os.environ.get("DASHBOARD_CONFIG"))

    app = FastAPI(
        title="Strategy Dashboard API",
        description="Performance metrics and history for closed trading strategies",
        version=__version__,
    )
    app.state.config = config
    app.state.metrics_engine = MetricsEngine(config.metrics)
    app.state.metrics_cache = MetricsCache(ttl_seconds=config.api.cache_ttl_s)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.api.cors_origins,
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    app.add_exception_handler(MetricsError, metrics_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.include_router(router)

    @app.on_event("startup")
    async def startup_event():
        init_engine(config.database.url)

    @app.on_event("shutdown")
    async def shutdown_event():
        dispose_engine()

    if config.api.frontend_dir and Path(config.api.frontend_dir).is_dir():
        mount_frontend(app, config.api.frontend_dir)

    return app


app = create_app()
