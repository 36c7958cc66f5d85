from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse
from typing import List, Optional
import logging

from ..models.search import (
    HistoryEntry, SavedQuery, SearchRequest, SuggestionItem,
    ToggleSavedRequest, ToggleSavedResponse, RenameSavedRequest
)
from ..search.config import SearchConfig
from ..search.data_source import DataSource
from ..search.engine import SearchEngine
from ..search.models import SearchResults
from ..search.suggestions import SuggestionBuilder
from ..services.execution import ExecutionSnapshot, ExecutionState, SearchExecutor
from ..services.history import SearchHistoryStore
from .dependencies import get_data_source, get_history_store, get_search_engine

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/search", tags=["search"])


def error_response(snapshot: ExecutionSnapshot) -> JSONResponse:
    """Map an error snapshot to 503 with the snapshot body"""
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "state": snapshot.state.value,
            "generation": snapshot.generation,
            "error": snapshot.error,
        }
    )


@router.post("", response_model=SearchResults)
async def run_search(
    request: SearchRequest,
    engine: SearchEngine = Depends(get_search_engine),
    history_store: SearchHistoryStore = Depends(get_history_store)
):
    """Run a search across people, works, posts, groups and organizations"""
    executor = SearchExecutor(engine, history_store=history_store)
    snapshot = await executor.search(request.query, request.filters, request.sort)

    if snapshot.state == ExecutionState.ERROR:
        return error_response(snapshot)

    return snapshot.results


@router.get("/suggestions", response_model=List[SuggestionItem])
async def get_suggestions(
    q: Optional[str] = Query(None, description="Current input text"),
    limit: int = Query(SearchConfig.SUGGESTION_LIMIT, ge=1, le=50),
    data_source: DataSource = Depends(get_data_source),
    history_store: SearchHistoryStore = Depends(get_history_store)
):
    """Type-ahead suggestions for the current input"""
    builder = SuggestionBuilder(limit=limit)
    return builder.build(
        q,
        history=history_store.get_history(),
        saved=history_store.get_saved(),
        trending=data_source.trending(),
        pool=data_source.suggestion_pool(),
    )


@router.get("/history", response_model=List[HistoryEntry])
async def get_history(history_store: SearchHistoryStore = Depends(get_history_store)):
    """Executed searches, most recent first"""
    return history_store.get_history()


@router.delete("/history", status_code=status.HTTP_204_NO_CONTENT)
async def clear_history(history_store: SearchHistoryStore = Depends(get_history_store)):
    """Clear the search history"""
    history_store.clear_history()


@router.delete("/history/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_history_entry(
    entry_id: str,
    history_store: SearchHistoryStore = Depends(get_history_store)
):
    """Remove one entry from the search history"""
    if not history_store.remove_history_entry(entry_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="History entry not found"
        )


@router.get("/saved", response_model=List[SavedQuery])
async def get_saved(history_store: SearchHistoryStore = Depends(get_history_store)):
    """Saved queries in creation order"""
    return history_store.get_saved()


@router.post("/saved/toggle", response_model=ToggleSavedResponse)
async def toggle_saved(
    request: ToggleSavedRequest,
    history_store: SearchHistoryStore = Depends(get_history_store)
):
    """Save a search, or unsave it when the same query and kind is already saved"""
    entry = history_store.toggle_saved(request.query, request.filters, request.sort, request.name)
    return ToggleSavedResponse(saved=entry is not None, entry=entry)


@router.patch("/saved/{saved_id}", response_model=SavedQuery)
async def rename_saved(
    saved_id: str,
    request: RenameSavedRequest,
    history_store: SearchHistoryStore = Depends(get_history_store)
):
    """Rename a saved query"""
    entry = history_store.rename_saved(saved_id, request.name)

    if not entry:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Saved query not found"
        )

    return entry


@router.delete("/saved/{saved_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_saved(
    saved_id: str,
    history_store: SearchHistoryStore = Depends(get_history_store)
):
    """Delete a saved query"""
    if not history_store.delete_saved(saved_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Saved query not found"
        )
