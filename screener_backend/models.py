from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class StockRecord(CamelModel):
    code: str
    name: str
    sector: str
    market: str
    price: float | None = None
    per: float | None = None
    pbr: float | None = None
    dividend_yield: float | None = None
    market_cap: float | None = None
    roe: float | None = None
    roa: float | None = None
    equity_ratio: float | None = None
    eps: float | None = None
    bps: float | None = None
    dividend: float | None = None
    net_income: float | None = None
    equity: float | None = None
    total_assets: float | None = None
    shares: float | None = None
    value_score: int = 0
    score_grade: str = "low"


class ScreeningPayload(CamelModel):
    stocks: list[StockRecord]
    total: int
    updated_at: datetime


class PricePoint(CamelModel):
    date: str
    open: float | None = None
    high: float | None = None
    low: float | None = None
    close: float | None = None
    volume: float | None = None
    adjusted_close: float | None = None


class PriceChartResponse(CamelModel):
    code: str
    period: str
    data: list[PricePoint]


class FinancialPoint(CamelModel):
    fiscal_year: str
    revenue: float = 0.0
    operating_income: float = 0.0
    ordinary_income: float = 0.0
    net_income: float = 0.0


class FinancialTrendResponse(CamelModel):
    code: str
    data: list[FinancialPoint]


class RankingsResponse(CamelModel):
    limit: int
    per: list[StockRecord]
    pbr: list[StockRecord]
    dividend_yield: list[StockRecord]
    roe: list[StockRecord]
    value_score: list[StockRecord]


class ErrorResponse(BaseModel):
    error: str
