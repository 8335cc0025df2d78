import logging
from pathlib import Path

# Load .env from repo root before any other imports read os.environ
try:
    from dotenv import load_dotenv
    _env_path = Path(__file__).resolve().parent.parent / ".env"
    load_dotenv(_env_path, override=False)
except ImportError:
    pass  # python-dotenv not installed, set JQUANTS_API_KEY in the shell

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from screener_backend.config import load_settings
from screener_backend.models import (
    ErrorResponse,
    FinancialTrendResponse,
    PriceChartResponse,
    RankingsResponse,
    ScreeningPayload,
)
from screener_backend.orchestrator.screening_orchestrator import ScreeningContext
from screener_backend.services import chart_shaper, rankings

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(title="Screener Backend")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:4173",
        "http://127.0.0.1:4173",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_context = ScreeningContext(settings=load_settings())
if not _context.settings.api_key:
    logger.error("JQUANTS_API_KEY is not set; upstream endpoints will fail")


def get_context() -> ScreeningContext:
    return _context


def _error(exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=500, content=ErrorResponse(error=str(exc)).model_dump())


_ERROR_RESPONSES = {500: {"model": ErrorResponse}}


@app.get("/health")
def healthcheck():
    return {"status": "ok"}


# ---------------------------------------------------------------------------
# GET /api/screening
# Cached aggregation of master + latest prices + financial summaries.
# ---------------------------------------------------------------------------

@app.get("/api/screening", response_model=ScreeningPayload, responses=_ERROR_RESPONSES)
async def get_screening(refresh: bool = False, ctx: ScreeningContext = Depends(get_context)):
    try:
        return await ctx.get_screening(force=refresh)
    except Exception as exc:
        logger.exception("Screening aggregation failed")
        return _error(exc)


@app.get("/api/rankings", response_model=RankingsResponse, responses=_ERROR_RESPONSES)
async def get_rankings(
    limit: int = rankings.DEFAULT_LIMIT,
    ctx: ScreeningContext = Depends(get_context),
):
    """Top-N lists built from the (cached) screening payload."""
    try:
        payload = await ctx.get_screening()
    except Exception as exc:
        logger.exception("Screening aggregation failed")
        return _error(exc)
    records = [s.model_dump() for s in payload.stocks]
    return RankingsResponse(**rankings.build_rankings(records, limit=max(1, limit)))


# ---------------------------------------------------------------------------
# Chart endpoints (live, never cached)
# ---------------------------------------------------------------------------

@app.get("/api/chart/{code}", response_model=PriceChartResponse, responses=_ERROR_RESPONSES)
async def get_price_chart(
    code: str,
    period: str = chart_shaper.DEFAULT_PERIOD,
    ctx: ScreeningContext = Depends(get_context),
):
    """Daily bars for one symbol over a period label (1D … 5Y, default 1M)."""
    try:
        async with ctx.open_client() as client:
            points = await chart_shaper.fetch_price_chart(client, code, period)
    except Exception as exc:
        logger.exception("Price chart failed for %s", code)
        return _error(exc)
    return PriceChartResponse(code=code, period=period, data=points)


@app.get("/api/financials/{code}", response_model=FinancialTrendResponse, responses=_ERROR_RESPONSES)
async def get_financial_trend(code: str, ctx: ScreeningContext = Depends(get_context)):
    """Last five fiscal years of revenue / operating / ordinary / net income."""
    try:
        async with ctx.open_client() as client:
            series = await chart_shaper.fetch_financial_trend(client, code)
    except Exception as exc:
        logger.exception("Financial trend failed for %s", code)
        return _error(exc)
    return FinancialTrendResponse(code=code, data=series)
