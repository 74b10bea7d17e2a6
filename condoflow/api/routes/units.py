"""Unit routes - registry, monthly status listing and resident profile."""

from fastapi import APIRouter, Depends, Query, status

from condoflow.api.dependencies import get_store, require_user
from condoflow.schemas.reconciliation import MAX_YEAR, MIN_YEAR, UnitStatusListing
from condoflow.schemas.registration import (
    RegistrationResponse,
    UnitProfile,
    UnitProfileResponse,
)
from condoflow.schemas.unit import UnitCreate, UnitResponse, UnitUpdate
from condoflow.services import registrations as registration_service
from condoflow.services import units as unit_service
from condoflow.services.dashboard import resolve_reference_month
from condoflow.services.units import StatusFilter
from condoflow.store.base import RecordStore

router = APIRouter(prefix="/units", tags=["units"], dependencies=require_user)


@router.get("", response_model=list[UnitResponse])
def list_units(store: RecordStore = Depends(get_store)):
    """List all units in canonical order (non-numeric first, then block and number)."""
    return unit_service.list_units(store)


@router.post("", response_model=UnitResponse, status_code=status.HTTP_201_CREATED)
def create_unit(unit_data: UnitCreate, store: RecordStore = Depends(get_store)):
    return unit_service.create_unit(store, unit_data)


@router.get("/status", response_model=UnitStatusListing)
def list_unit_status(
    month: int | None = Query(None, ge=1, le=12),
    year: int | None = Query(None, ge=MIN_YEAR, le=MAX_YEAR),
    status_filter: StatusFilter = Query(StatusFilter.TODOS, alias="filter"),
    search: str | None = Query(None, description="Matches unit number or resident name"),
    store: RecordStore = Depends(get_store),
):
    """
    Units with their reading status for a reference month.

    Defaults to the month of the most recent reading.
    """
    reference = resolve_reference_month(store, month, year)
    return unit_service.list_unit_status(store, reference, status_filter, search)


@router.post("/profile", response_model=UnitProfileResponse, status_code=status.HTTP_201_CREATED)
def create_unit_profile(profile: UnitProfile, store: RecordStore = Depends(get_store)):
    """Create a unit together with an approved resident registration."""
    return unit_service.save_unit_profile(store, profile)


@router.get("/{unit_id}", response_model=UnitResponse)
def get_unit(unit_id: int, store: RecordStore = Depends(get_store)):
    return unit_service.get_unit(store, unit_id)


@router.patch("/{unit_id}", response_model=UnitResponse)
def update_unit(unit_id: int, unit_data: UnitUpdate, store: RecordStore = Depends(get_store)):
    return unit_service.update_unit(store, unit_id, unit_data)


@router.delete("/{unit_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_unit(unit_id: int, store: RecordStore = Depends(get_store)):
    """Delete a unit along with its readings and registration requests."""
    unit_service.delete_unit(store, unit_id)


@router.put("/{unit_id}/profile", response_model=UnitProfileResponse)
def save_unit_profile(
    unit_id: int,
    profile: UnitProfile,
    store: RecordStore = Depends(get_store),
):
    """Update a unit and its latest approved registration in one go."""
    return unit_service.save_unit_profile(store, profile, unit_id=unit_id)


@router.get("/{unit_id}/resident", response_model=RegistrationResponse)
def get_unit_resident(unit_id: int, store: RecordStore = Depends(get_store)):
    """Resident details from the unit's most recent approved registration."""
    return registration_service.latest_approved_registration(store, unit_id)
