from fastapi import APIRouter, Depends, Query
from typing import List, Optional
import logging

from ..leaderboard.service import LeaderboardService
from ..models.leaderboard import LeaderboardSelector, RankItem
from ..services.execution import ExecutionState, LeaderboardExecutor
from .dependencies import get_leaderboard_service
from .search import error_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ranks", tags=["ranks"])


@router.get("", response_model=List[RankItem])
async def get_ranks(
    category: Optional[str] = Query(None),
    metric: Optional[str] = Query(None),
    time_range: Optional[str] = Query(None),
    sort: Optional[str] = Query(None),
    filter_a: Optional[str] = Query(None),
    filter_b: Optional[str] = Query(None),
    service: LeaderboardService = Depends(get_leaderboard_service)
):
    """Leaderboard for a selector; unknown values fall back to defaults"""
    selector = LeaderboardSelector(
        category=category,
        metric=metric,
        time_range=time_range,
        sort=sort,
        filter_a=filter_a,
        filter_b=filter_b
    )

    executor = LeaderboardExecutor(service)
    snapshot = await executor.load(selector)

    if snapshot.state == ExecutionState.ERROR:
        return error_response(snapshot)

    return snapshot.results
