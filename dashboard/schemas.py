"""
Pydantic schemas for the HTTP API.

Decimal quantities are serialized as strings so clients never see
binary floating point artifacts.
"""
from datetime import datetime
from typing import Dict, List, Optional, Any
from uuid import UUID

from pydantic import BaseModel, Field

# =======================
# COMMON
# =======================

class ErrorResponse(BaseModel):
    error: str
    message: str

# =======================
# 1. HEALTH
# =======================

class DispatcherStats(BaseModel):
    pending: int
    draining: bool
    min_interval_seconds: float
    completed: int
    failed: int

class HealthResponse(BaseModel):
    status: str  # healthy, degraded
    timestamp: datetime
    version: str
    database: bool
    dispatcher: DispatcherStats
    provider: Dict[str, Any]

# =======================
# 2. INSIGHTS
# =======================

class DayChangeSchema(BaseModel):
    absolute: str
    percentage: str

class TrendSchema(BaseModel):
    direction: str  # up, down, flat
    percentage: str

class InsightsSchema(BaseModel):
    symbol: str
    latest_price: str
    latest_date: str
    day_change: DayChangeSchema
    trend_7_day: TrendSchema
    trend_30_day: TrendSchema
    volume: int
    high_52_week: Optional[str] = None
    low_52_week: Optional[str] = None
    pe_ratio: Optional[str] = None

class InsightsResponse(BaseModel):
    insights: InsightsSchema
    display: Dict[str, str]
    from_cache: bool
    last_refreshed: str

# =======================
# 3. SEARCH
# =======================

class SymbolMatchSchema(BaseModel):
    symbol: str
    name: str
    type: str
    region: str
    currency: str

class SearchResponse(BaseModel):
    query: str
    results: List[SymbolMatchSchema]

# =======================
# 4. WATCHLIST
# =======================

class AddStockRequest(BaseModel):
    symbol: str = Field(..., min_length=1, max_length=20)

class WatchlistEntrySchema(BaseModel):
    id: UUID
    user_id: UUID
    symbol: str
    added_at: datetime

class WatchlistResponse(BaseModel):
    user_id: UUID
    stocks: List[WatchlistEntrySchema]
