from fastapi import APIRouter, Depends, Response, status
from typing import Any, Dict, List

from core.capture import classify, time_ago
from services.capture_service import CaptureService
from shared.models import Capture, CaptureCreate

from ..dependencies import get_capture_service, get_user_id

router = APIRouter(prefix="/api/captures", tags=["captures"])


@router.post("/classify", response_model=Dict[str, Any])
async def classify_capture(data: CaptureCreate):
    """
    Предпросмотр классификации без сохранения
    """
    result = classify(data.content)
    return {"type": result.type.value, "clean_content": result.clean_content}


@router.get("", response_model=List[Dict[str, Any]])
async def get_inbox(
    user_id: str = Depends(get_user_id),
    service: CaptureService = Depends(get_capture_service)
):
    """
    Необработанные записи входящих, новые первыми
    """
    captures = await service.get_unprocessed(user_id)
    return [
        {**capture.model_dump(mode="json"), "time_ago": time_ago(capture.created_at)}
        for capture in captures
    ]


@router.post("", response_model=Capture, status_code=status.HTTP_201_CREATED)
async def create_capture(
    data: CaptureCreate,
    user_id: str = Depends(get_user_id),
    service: CaptureService = Depends(get_capture_service)
):
    return await service.create_capture(user_id, data.content)


@router.post("/{capture_id}/processed", response_model=Capture)
async def mark_processed(
    capture_id: str,
    user_id: str = Depends(get_user_id),
    service: CaptureService = Depends(get_capture_service)
):
    return await service.mark_processed(capture_id, user_id)


@router.delete("/{capture_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_capture(
    capture_id: str,
    user_id: str = Depends(get_user_id),
    service: CaptureService = Depends(get_capture_service)
):
    await service.delete_capture(capture_id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
