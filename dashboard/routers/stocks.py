from fastapi import APIRouter, Depends, Query

from core.container import ServiceContainer
from dashboard.dependencies import get_container
from dashboard.schemas import InsightsResponse, SearchResponse, SymbolMatchSchema

router = APIRouter(prefix="/api", tags=["Stocks"])


@router.get("/stocks/{symbol}/insights", response_model=InsightsResponse)
async def get_stock_insights(
    symbol: str,
    container: ServiceContainer = Depends(get_container),
):
    """
    Insights for one symbol. Served from cache when fresh, otherwise
    queued behind the provider rate limit (may take a while).
    """
    report = await container.insights.get_insights(symbol)
    return InsightsResponse(**report.to_dict())


@router.get("/search", response_model=SearchResponse)
async def search_symbols(
    q: str = Query(default="", max_length=100),
    container: ServiceContainer = Depends(get_container),
):
    """Symbol lookup by keyword; blank queries return no results."""
    matches = await container.fetcher.search_symbols(q)
    return SearchResponse(
        query=q,
        results=[SymbolMatchSchema(**match.to_dict()) for match in matches],
    )
