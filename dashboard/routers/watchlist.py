from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from core.container import ServiceContainer
from dashboard.dependencies import get_container, get_user_id
from dashboard.schemas import AddStockRequest, WatchlistEntrySchema, WatchlistResponse

router = APIRouter(prefix="/api/watchlist", tags=["Watchlist"])


@router.get("", response_model=WatchlistResponse)
async def list_watchlist(
    user_id: UUID = Depends(get_user_id),
    container: ServiceContainer = Depends(get_container),
):
    """The caller's watchlist, most recently added first."""
    entries = await container.watchlist.list_stocks(user_id=user_id)
    return WatchlistResponse(
        user_id=user_id,
        stocks=[WatchlistEntrySchema(**entry.to_dict()) for entry in entries],
    )


@router.post("", response_model=WatchlistEntrySchema, status_code=status.HTTP_201_CREATED)
async def add_to_watchlist(
    body: AddStockRequest,
    user_id: UUID = Depends(get_user_id),
    container: ServiceContainer = Depends(get_container),
):
    entry = await container.watchlist.add_stock(body.symbol, user_id=user_id)
    return WatchlistEntrySchema(**entry.to_dict())


@router.delete("/{stock_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_from_watchlist(
    stock_id: UUID,
    user_id: UUID = Depends(get_user_id),
    container: ServiceContainer = Depends(get_container),
):
    await container.watchlist.remove_stock(stock_id, user_id=user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
