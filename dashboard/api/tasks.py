from fastapi import APIRouter, Depends, Query, Response, status
from typing import List

from services.task_service import TaskService
from shared.models import Task, TaskCreate, TaskPatch

from ..dependencies import get_task_service, get_user_id

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


@router.get("", response_model=List[Task])
async def get_tasks_for_project(
    project_id: str = Query(...),
    user_id: str = Depends(get_user_id),
    service: TaskService = Depends(get_task_service)
):
    """
    Задачи проекта в порядке создания
    """
    return await service.get_tasks_for_project(project_id, user_id)


@router.get("/{task_id}", response_model=Task)
async def get_task(
    task_id: str,
    user_id: str = Depends(get_user_id),
    service: TaskService = Depends(get_task_service)
):
    return await service.get_task(task_id, user_id)


@router.post("", response_model=Task, status_code=status.HTTP_201_CREATED)
async def create_task(
    data: TaskCreate,
    user_id: str = Depends(get_user_id),
    service: TaskService = Depends(get_task_service)
):
    return await service.create_task(user_id, data)


@router.patch("/{task_id}", response_model=Task)
async def update_task(
    task_id: str,
    patch: TaskPatch,
    user_id: str = Depends(get_user_id),
    service: TaskService = Depends(get_task_service)
):
    return await service.update_task(task_id, user_id, patch)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(
    task_id: str,
    user_id: str = Depends(get_user_id),
    service: TaskService = Depends(get_task_service)
):
    await service.delete_task(task_id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
