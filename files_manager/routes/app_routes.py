"""Service status API routes."""

from fastapi import APIRouter, Request

from files_manager.schemas.app import StatsResponse, StatusResponse

router = APIRouter(tags=["Status"])


@router.get("/status", response_model=StatusResponse)
async def get_status(request: Request):
    """
    Report whether the key-value store and the document store answer.

    Returns:
        - redis: key-value store reachable
        - db: document store reachable
    """
    state = request.app.state
    return StatusResponse(
        redis=await state.kv_store.ping(),
        db=state.database.is_alive(),
    )


@router.get("/stats", response_model=StatsResponse)
async def get_stats(request: Request):
    """
    Count stored users and files.

    Returns:
        - users: number of registered users
        - files: number of file records, folders included
    """
    state = request.app.state
    return StatsResponse(
        users=state.user_repo.count(),
        files=state.file_repo.count(),
    )
