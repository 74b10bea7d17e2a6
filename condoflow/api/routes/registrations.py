"""Registration routes - public intake and administrative review."""

from fastapi import APIRouter, Depends, Query, status

from condoflow.api.dependencies import get_store, require_user
from condoflow.models.enums import RegistrationStatus
from condoflow.schemas.registration import (
    RegistrationDraft,
    RegistrationResponse,
    RegistrationUpdate,
    StepValidation,
    UnitOption,
)
from condoflow.services import registrations as registration_service
from condoflow.store.base import RecordStore

# Intake form endpoints, reachable without logging in
public_router = APIRouter(prefix="/registrations", tags=["registrations"])

router = APIRouter(prefix="/registrations", tags=["registrations"], dependencies=require_user)


@public_router.get("/units", response_model=list[UnitOption])
def list_unit_options(store: RecordStore = Depends(get_store)):
    """Units a resident can pick on the intake form."""
    return registration_service.unit_options(store)


@public_router.post("/validate", response_model=StepValidation)
def validate_step(
    draft: RegistrationDraft,
    step: int = Query(..., ge=1, le=3),
):
    """Field errors of one intake step (1: unit, 2: resident, 3: additional residents)."""
    return registration_service.validate_step(draft, step)


@public_router.post("", response_model=RegistrationResponse, status_code=status.HTTP_201_CREATED)
def submit_registration(draft: RegistrationDraft, store: RecordStore = Depends(get_store)):
    """
    Submit a resident registration for review.

    Every step is validated; failures return 422 with ``{"errors": {field: message}}``.
    """
    return registration_service.create_registration(store, draft)


@router.get("", response_model=list[RegistrationResponse])
def list_registrations(
    status_filter: RegistrationStatus | None = Query(None, alias="status"),
    unit_id: int | None = Query(None),
    store: RecordStore = Depends(get_store),
):
    """List registration requests, newest first."""
    return registration_service.list_registrations(store, status_filter, unit_id)


@router.get("/pending/count")
def pending_count(store: RecordStore = Depends(get_store)):
    """Number of requests awaiting a decision."""
    return {"pending": registration_service.pending_count(store)}


@router.get("/{registration_id}", response_model=RegistrationResponse)
def get_registration(registration_id: int, store: RecordStore = Depends(get_store)):
    return registration_service.get_registration(store, registration_id)


@router.patch("/{registration_id}", response_model=RegistrationResponse)
def update_registration(
    registration_id: int,
    registration_data: RegistrationUpdate,
    store: RecordStore = Depends(get_store),
):
    """Edit a pending request in place."""
    return registration_service.update_registration(store, registration_id, registration_data)


@router.post("/{registration_id}/approve", response_model=RegistrationResponse)
def approve_registration(registration_id: int, store: RecordStore = Depends(get_store)):
    """Approve a request; the unit takes the resident's name and role."""
    return registration_service.approve_registration(store, registration_id)


@router.post("/{registration_id}/reject", response_model=RegistrationResponse)
def reject_registration(registration_id: int, store: RecordStore = Depends(get_store)):
    return registration_service.reject_registration(store, registration_id)
