from fastapi import APIRouter, Depends, Query, Response, status
from typing import Any, Dict, List, Optional

from services.habit_service import HabitService
from shared.models import CompleteHabitRequest, Habit, HabitCreate, HabitPatch, HabitWithStatus

from ..dependencies import get_habit_service, get_user_id

router = APIRouter(prefix="/api/habits", tags=["habits"])


@router.get("", response_model=List[HabitWithStatus])
async def get_habits(
    user_id: str = Depends(get_user_id),
    service: HabitService = Depends(get_habit_service)
):
    """
    Привычки пользователя с отметкой за сегодня и последними 7 днями
    """
    return await service.get_habits_with_status(user_id)


@router.get("/stats", response_model=Dict[str, Any])
async def get_habit_stats(
    user_id: str = Depends(get_user_id),
    service: HabitService = Depends(get_habit_service)
):
    stats = await service.get_habit_stats(user_id)
    return stats.to_dict()


@router.post("", response_model=Habit, status_code=status.HTTP_201_CREATED)
async def create_habit(
    data: HabitCreate,
    user_id: str = Depends(get_user_id),
    service: HabitService = Depends(get_habit_service)
):
    return await service.create_habit(user_id, data)


@router.patch("/{habit_id}", response_model=Habit)
async def update_habit(
    habit_id: str,
    patch: HabitPatch,
    user_id: str = Depends(get_user_id),
    service: HabitService = Depends(get_habit_service)
):
    return await service.update_habit(habit_id, user_id, patch)


@router.delete("/{habit_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_habit(
    habit_id: str,
    user_id: str = Depends(get_user_id),
    service: HabitService = Depends(get_habit_service)
):
    await service.delete_habit(habit_id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{habit_id}/complete", response_model=Dict[str, Any])
async def complete_habit(
    habit_id: str,
    data: Optional[CompleteHabitRequest] = None,
    user_id: str = Depends(get_user_id),
    service: HabitService = Depends(get_habit_service)
):
    """
    Отметить выполнение; повторная отметка в тот же день серию не меняет
    """
    result = await service.complete_habit(habit_id, user_id, notes=data.notes if data else None)
    return result.to_dict()


@router.get("/{habit_id}/history", response_model=Dict[str, Any])
async def get_completion_history(
    habit_id: str,
    days: int = Query(7),
    user_id: str = Depends(get_user_id),
    service: HabitService = Depends(get_habit_service)
):
    """
    Окно выполнения: индекс 0 - сегодня
    """
    history = await service.get_completion_history(habit_id, user_id, days)
    return {"habit_id": history.habit_id, "days": history.days, "completions": history.completions}
