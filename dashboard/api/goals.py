from fastapi import APIRouter, Depends, status
from typing import List

from services.goal_service import GoalService
from shared.models import Goal, GoalCreate, GoalProgressUpdate

from ..dependencies import get_goal_service, get_user_id

router = APIRouter(prefix="/api/goals", tags=["goals"])


@router.get("", response_model=List[Goal])
async def get_goals(
    user_id: str = Depends(get_user_id),
    service: GoalService = Depends(get_goal_service)
):
    return await service.get_goals(user_id)


@router.post("", response_model=Goal, status_code=status.HTTP_201_CREATED)
async def create_goal(
    data: GoalCreate,
    user_id: str = Depends(get_user_id),
    service: GoalService = Depends(get_goal_service)
):
    return await service.create_goal(user_id, data)


@router.post("/{goal_id}/progress", response_model=Goal)
async def update_goal_progress(
    goal_id: str,
    data: GoalProgressUpdate,
    user_id: str = Depends(get_user_id),
    service: GoalService = Depends(get_goal_service)
):
    return await service.update_goal_progress(goal_id, user_id, data.value)
