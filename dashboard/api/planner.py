from datetime import date
from fastapi import APIRouter, Depends, Query, Response, status
from typing import Any, Dict, List, Optional

from services.settings_service import SettingsService
from services.time_budget_service import TimeBudgetService
from shared.models import (
    PreferencesPatch,
    TemplateCreate,
    TemplateLoad,
    TimeAllocation,
    TimeBlockCreate,
    TimeBlockPatch,
    TimeTemplate,
    UserPreferences,
)

from ..dependencies import get_settings_service, get_time_budget_service, get_user_id

router = APIRouter(prefix="/api/planner", tags=["planner"])


# ===== БЛОКИ ВРЕМЕНИ =====

@router.get("/allocations", response_model=List[TimeAllocation])
async def get_time_budgets(
    day: Optional[date] = Query(None, alias="date"),
    user_id: str = Depends(get_user_id),
    service: TimeBudgetService = Depends(get_time_budget_service)
):
    """
    Блоки времени на дату (по умолчанию сегодня, UTC)
    """
    return await service.get_time_budgets(user_id, day)


@router.post("/allocations", response_model=TimeAllocation, status_code=status.HTTP_201_CREATED)
async def save_time_budget(
    data: TimeBlockCreate,
    user_id: str = Depends(get_user_id),
    service: TimeBudgetService = Depends(get_time_budget_service)
):
    return await service.save_time_budget(user_id, data)


@router.patch("/allocations/{allocation_id}", response_model=TimeAllocation)
async def update_time_budget(
    allocation_id: str,
    patch: TimeBlockPatch,
    user_id: str = Depends(get_user_id),
    service: TimeBudgetService = Depends(get_time_budget_service)
):
    return await service.update_time_budget(allocation_id, user_id, patch)


@router.delete("/allocations/{allocation_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_time_budget(
    allocation_id: str,
    user_id: str = Depends(get_user_id),
    service: TimeBudgetService = Depends(get_time_budget_service)
):
    await service.delete_time_budget(allocation_id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/summary", response_model=List[Dict[str, Any]])
async def get_daily_summary(
    day: Optional[date] = Query(None, alias="date"),
    user_id: str = Depends(get_user_id),
    service: TimeBudgetService = Depends(get_time_budget_service)
):
    return await service.get_daily_summary(user_id, day)


# ===== ШАБЛОНЫ =====

@router.get("/templates", response_model=List[TimeTemplate])
async def get_templates(
    user_id: str = Depends(get_user_id),
    service: TimeBudgetService = Depends(get_time_budget_service)
):
    return await service.get_templates(user_id)


@router.post("/templates", response_model=TimeTemplate, status_code=status.HTTP_201_CREATED)
async def save_as_template(
    data: TemplateCreate,
    user_id: str = Depends(get_user_id),
    service: TimeBudgetService = Depends(get_time_budget_service)
):
    return await service.save_as_template(user_id, data)


@router.post("/templates/{template_id}/load", response_model=List[TimeAllocation])
async def load_template(
    template_id: str,
    data: Optional[TemplateLoad] = None,
    user_id: str = Depends(get_user_id),
    service: TimeBudgetService = Depends(get_time_budget_service)
):
    """
    Заменить блоки даты блоками шаблона
    """
    return await service.load_template(template_id, user_id, data.allocation_date if data else None)


# ===== НАСТРОЙКИ =====

@router.get("/preferences", response_model=UserPreferences)
async def get_preferences(
    user_id: str = Depends(get_user_id),
    service: SettingsService = Depends(get_settings_service)
):
    return await service.get_user_preferences(user_id)


@router.patch("/preferences", response_model=UserPreferences)
async def update_preferences(
    patch: PreferencesPatch,
    user_id: str = Depends(get_user_id),
    service: SettingsService = Depends(get_settings_service)
):
    return await service.update_user_preferences(user_id, patch)
