import logging
from typing import Optional
from fastapi import APIRouter

from api.responses import storage_failure, to_envelope
from api.schemas import Envelope, SupportCreate
from core.database import StorageError, database
from core.services import SupportService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/support", tags=["support"])
service = SupportService(database)


@router.get("", response_model=Envelope)
async def list_support_requests():
    """Most recent support requests, newest first"""
    try:
        outcome = await service.list()
    except StorageError as e:
        return storage_failure("Error fetching support requests", e).render()

    return to_envelope(outcome).render()


@router.post("", status_code=201, response_model=Envelope)
async def create_support_request(payload: Optional[SupportCreate] = None):
    """Submit the contact form"""
    data = payload.model_dump(exclude_unset=True) if payload else {}
    try:
        outcome = await service.create(data)
    except StorageError as e:
        return storage_failure("Error saving support request", e).render()

    return to_envelope(outcome, "Support request submitted successfully").render()


@router.delete("/{request_id}", response_model=Envelope)
async def delete_support_request(request_id: str):
    try:
        outcome = await service.delete_by_id(request_id)
    except StorageError as e:
        return storage_failure("Error deleting support request", e).render()

    return to_envelope(outcome, "Support request deleted successfully").render()
