import logging
from typing import Optional
from fastapi import APIRouter

from api.responses import storage_failure, to_envelope
from api.schemas import AppointmentCreate, AppointmentUpdate, Envelope
from core.database import StorageError, database
from core.services import AppointmentService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/appointments", tags=["appointments"])
service = AppointmentService(database)


@router.get("", response_model=Envelope)
async def list_appointments():
    """All appointments, latest appointment date first"""
    try:
        outcome = await service.list()
    except StorageError as e:
        return storage_failure("Error fetching appointments", e).render()

    return to_envelope(outcome).render()


@router.post("", status_code=201, response_model=Envelope)
async def create_appointment(payload: Optional[AppointmentCreate] = None):
    """Book a new appointment"""
    data = payload.model_dump(exclude_unset=True) if payload else {}
    try:
        outcome = await service.create(data)
    except StorageError as e:
        return storage_failure("Error creating appointment", e).render()

    return to_envelope(outcome, "Appointment booked successfully").render()


@router.get("/{appointment_id}", response_model=Envelope)
async def get_appointment(appointment_id: str):
    try:
        outcome = await service.get_by_id(appointment_id)
    except StorageError as e:
        return storage_failure("Error fetching appointment", e).render()

    return to_envelope(outcome).render()


@router.put("/{appointment_id}", response_model=Envelope)
async def update_appointment(appointment_id: str, payload: Optional[AppointmentUpdate] = None):
    """Change status or any other appointment field"""
    changes = payload.model_dump(exclude_unset=True) if payload else {}
    try:
        outcome = await service.update(appointment_id, changes)
    except StorageError as e:
        return storage_failure("Error updating appointment", e).render()

    return to_envelope(outcome, "Appointment updated successfully").render()


@router.delete("/{appointment_id}", response_model=Envelope)
async def delete_appointment(appointment_id: str):
    try:
        outcome = await service.delete_by_id(appointment_id)
    except StorageError as e:
        return storage_failure("Error deleting appointment", e).render()

    return to_envelope(outcome, "Appointment deleted successfully").render()
