from fastapi import APIRouter, Depends, Query
from typing import Any, Dict, List

from services.project_service import ProjectService
from services.session_service import SessionService
from shared.models import FocusSession, Project, ProjectCreate, ProjectPatch

from ..dependencies import get_project_service, get_session_service, get_user_id

router = APIRouter(prefix="/api/projects", tags=["projects"])


@router.get("")
async def get_projects(
    status: str = Query("active", pattern="^(active|archived|completed|all)$"),
    with_stats: bool = Query(False),
    user_id: str = Depends(get_user_id),
    service: ProjectService = Depends(get_project_service)
):
    """
    Проекты по статусу; with_stats добавляет статистику задач (только активные)
    """
    if with_stats:
        return await service.get_projects_with_stats(user_id)
    return await service.get_projects_by_status(user_id, status)


@router.get("/stats", response_model=Dict[str, Any])
async def get_aggregate_stats(
    user_id: str = Depends(get_user_id),
    service: ProjectService = Depends(get_project_service)
):
    return await service.get_aggregate_stats(user_id)


@router.get("/{project_id}", response_model=Project)
async def get_project(
    project_id: str,
    user_id: str = Depends(get_user_id),
    service: ProjectService = Depends(get_project_service)
):
    return await service.get_project(project_id, user_id)


@router.get("/{project_id}/stats", response_model=Dict[str, Any])
async def get_project_stats(
    project_id: str,
    user_id: str = Depends(get_user_id),
    service: ProjectService = Depends(get_project_service)
):
    await service.get_project(project_id, user_id)
    stats = await service.get_project_stats(project_id)
    return {**stats.to_dict(), "completion_rate": stats.completion_rate}


@router.get("/{project_id}/sessions", response_model=List[FocusSession])
async def get_project_sessions(
    project_id: str,
    limit: int = Query(20, ge=1, le=200),
    user_id: str = Depends(get_user_id),
    sessions: SessionService = Depends(get_session_service)
):
    return await sessions.get_project_sessions(project_id, user_id, limit)


@router.get("/{project_id}/focus", response_model=Dict[str, Any])
async def get_project_focus_stats(
    project_id: str,
    user_id: str = Depends(get_user_id),
    sessions: SessionService = Depends(get_session_service)
):
    stats = await sessions.get_project_focus_stats(project_id, user_id)
    return stats.to_dict()


@router.post("", response_model=Project, status_code=201)
async def create_project(
    data: ProjectCreate,
    user_id: str = Depends(get_user_id),
    service: ProjectService = Depends(get_project_service)
):
    return await service.create_project(user_id, data)


@router.patch("/{project_id}", response_model=Project)
async def update_project(
    project_id: str,
    patch: ProjectPatch,
    user_id: str = Depends(get_user_id),
    service: ProjectService = Depends(get_project_service)
):
    return await service.update_project(project_id, user_id, patch)


@router.post("/{project_id}/archive", response_model=Project)
async def archive_project(
    project_id: str,
    user_id: str = Depends(get_user_id),
    service: ProjectService = Depends(get_project_service)
):
    return await service.archive_project(project_id, user_id)


@router.post("/{project_id}/health", response_model=Dict[str, Any])
async def recalculate_health(
    project_id: str,
    user_id: str = Depends(get_user_id),
    service: ProjectService = Depends(get_project_service)
):
    await service.get_project(project_id, user_id)
    return {"project_id": project_id, "health_score": await service.update_project_health(project_id)}
