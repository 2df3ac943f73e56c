from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user_id
from app.core.dispatcher import dispatch
from app.db.session import get_db

router = APIRouter(prefix="/api/boards/{board_id}/actions", tags=["actions"])


@router.post("/")
async def run_action(
    board_id: int,
    payload: dict,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Apply one intent-tagged mutation to this board."""
    result = await dispatch(db, payload, user_id, board_id=board_id)
    return JSONResponse(
        content=result.model_dump(exclude_none=True),
        status_code=result.status_code,
    )
