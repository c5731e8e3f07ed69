from datetime import date
from fastapi import APIRouter, Depends, Query
from typing import Any, Dict, List, Optional

from core.metrics import productivity_score
from services.analytics_service import AnalyticsService

from ..dependencies import get_analytics_service, get_user_id

router = APIRouter(prefix="/api/stats", tags=["statistics"])


@router.get("/overview", response_model=Dict[str, Any])
async def get_productivity_overview(
    days: int = Query(7, ge=1, le=365),
    user_id: str = Depends(get_user_id),
    service: AnalyticsService = Depends(get_analytics_service)
):
    """
    Метрики продуктивности за последние days дней
    """
    metrics = await service.get_productivity_overview(user_id, days)
    return metrics.to_dict()


@router.get("/score", response_model=Dict[str, int])
async def calculate_score(
    minutes: float = Query(..., ge=0),
    tasks: int = Query(..., ge=0),
    energy: float = Query(..., ge=0, le=10)
):
    """
    Оценка продуктивности по явным значениям
    """
    return {"productivity_score": productivity_score(minutes, tasks, energy)}


@router.get("/focus-trends", response_model=List[Dict[str, Any]])
async def get_daily_focus_trends(
    days: int = Query(7, ge=1, le=365),
    user_id: str = Depends(get_user_id),
    service: AnalyticsService = Depends(get_analytics_service)
):
    return await service.get_daily_focus_trends(user_id, days)


@router.get("/distribution", response_model=List[Dict[str, Any]])
async def get_category_distribution(
    user_id: str = Depends(get_user_id),
    service: AnalyticsService = Depends(get_analytics_service)
):
    return await service.get_category_distribution(user_id)


@router.get("/planned-vs-actual", response_model=Dict[str, int])
async def get_planned_vs_actual(
    day: Optional[date] = Query(None, alias="date"),
    user_id: str = Depends(get_user_id),
    service: AnalyticsService = Depends(get_analytics_service)
):
    return await service.get_planned_vs_actual(user_id, day)


@router.get("/vitality", response_model=List[Dict[str, Any]])
async def get_vitality_trends(
    limit: int = Query(14, ge=1, le=365),
    user_id: str = Depends(get_user_id),
    service: AnalyticsService = Depends(get_analytics_service)
):
    return await service.get_vitality_trends(user_id, limit)


@router.get("/work-dynamics", response_model=List[Dict[str, Any]])
async def get_work_dynamics(
    limit: int = Query(14, ge=1, le=365),
    user_id: str = Depends(get_user_id),
    service: AnalyticsService = Depends(get_analytics_service)
):
    return await service.get_work_dynamics(user_id, limit)
