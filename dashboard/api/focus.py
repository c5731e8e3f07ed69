from fastapi import APIRouter, Depends, Query, status
from typing import Any, Dict, List

from services.session_service import SessionService
from services.vitality_service import VitalityService
from shared.models import FocusSession, SessionCreate, VitalityCreate, VitalityLog

from ..dependencies import get_session_service, get_user_id, get_vitality_service

router = APIRouter(prefix="/api/focus", tags=["focus"])


# ===== СЕССИИ =====

@router.post("/sessions", response_model=FocusSession, status_code=status.HTTP_201_CREATED)
async def create_session(
    data: SessionCreate,
    user_id: str = Depends(get_user_id),
    service: SessionService = Depends(get_session_service)
):
    return await service.create_session(user_id, data)


@router.get("/sessions", response_model=List[FocusSession])
async def get_recent_sessions(
    limit: int = Query(10, ge=1, le=200),
    user_id: str = Depends(get_user_id),
    service: SessionService = Depends(get_session_service)
):
    return await service.get_recent_sessions(user_id, limit)


@router.get("/sessions/recent", response_model=List[Dict[str, Any]])
async def get_recent_sessions_with_projects(
    limit: int = Query(7, ge=1, le=200),
    user_id: str = Depends(get_user_id),
    service: SessionService = Depends(get_session_service)
):
    """
    Последние сессии с именем и цветом проекта
    """
    return await service.get_recent_sessions_with_projects(user_id, limit)


@router.get("/today", response_model=Dict[str, Any])
async def get_today_focus_stats(
    user_id: str = Depends(get_user_id),
    service: SessionService = Depends(get_session_service)
):
    """
    Сессии и минуты за сегодня и серия дней с фокусом
    """
    stats = await service.get_today_focus_stats(user_id)
    return stats.to_dict()


# ===== САМОЧУВСТВИЕ =====

@router.post("/vitality", response_model=VitalityLog, status_code=status.HTTP_201_CREATED)
async def log_vitality(
    data: VitalityCreate,
    user_id: str = Depends(get_user_id),
    service: VitalityService = Depends(get_vitality_service)
):
    return await service.log_vitality(user_id, data)


@router.get("/vitality", response_model=List[VitalityLog])
async def get_vitality_history(
    limit: int = Query(30, ge=1, le=365),
    user_id: str = Depends(get_user_id),
    service: VitalityService = Depends(get_vitality_service)
):
    return await service.get_vitality_history(user_id, limit)
