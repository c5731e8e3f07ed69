from fastapi import APIRouter, Depends, Query, Response, status
from typing import Any, Dict, List

from services.reading_service import ReadingService
from shared.models import ReadingItem, ReadingItemCreate, ReadingItemPatch, ReadingProgressUpdate

from ..dependencies import get_reading_service, get_user_id

router = APIRouter(prefix="/api/reading", tags=["reading"])


@router.get("", response_model=List[ReadingItem])
async def get_reading_items(
    active_only: bool = Query(False),
    user_id: str = Depends(get_user_id),
    service: ReadingService = Depends(get_reading_service)
):
    if active_only:
        return await service.get_active_items(user_id)
    return await service.get_reading_items(user_id)


@router.get("/stats", response_model=Dict[str, Any])
async def get_reading_stats(
    user_id: str = Depends(get_user_id),
    service: ReadingService = Depends(get_reading_service)
):
    return await service.get_reading_stats(user_id)


@router.post("", response_model=ReadingItem, status_code=status.HTTP_201_CREATED)
async def add_item(
    data: ReadingItemCreate,
    user_id: str = Depends(get_user_id),
    service: ReadingService = Depends(get_reading_service)
):
    return await service.add_item(user_id, data)


@router.patch("/{item_id}", response_model=ReadingItem)
async def update_item(
    item_id: str,
    patch: ReadingItemPatch,
    user_id: str = Depends(get_user_id),
    service: ReadingService = Depends(get_reading_service)
):
    return await service.update_item(item_id, user_id, patch)


@router.post("/{item_id}/progress", response_model=ReadingItem)
async def update_progress(
    item_id: str,
    data: ReadingProgressUpdate,
    user_id: str = Depends(get_user_id),
    service: ReadingService = Depends(get_reading_service)
):
    """
    Прогресс по страницам; при достижении total элемент завершается
    """
    return await service.update_progress(item_id, user_id, data.progress, data.total)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_item(
    item_id: str,
    user_id: str = Depends(get_user_id),
    service: ReadingService = Depends(get_reading_service)
):
    await service.delete_item(item_id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
