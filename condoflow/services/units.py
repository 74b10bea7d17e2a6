"""Unit service - registry CRUD, status listing and administrative profile edits."""

import logging
from collections.abc import Iterable
from enum import Enum

from fastapi import HTTPException, status

from condoflow.core.documents import only_digits
from condoflow.models.enums import RegistrationStatus, ResidentRole
from condoflow.schemas.reading import ReadingFilter
from condoflow.schemas.reconciliation import (
    ReferenceMonth,
    UnitStatusEntry,
    UnitStatusListing,
)
from condoflow.schemas.registration import (
    RegistrationDraft,
    RegistrationFilter,
    RegistrationUpdate,
    UnitProfile,
    UnitProfileResponse,
)
from condoflow.schemas.unit import UnitCreate, UnitResponse, UnitUpdate
from condoflow.services.ordering import sort_units, unit_label
from condoflow.services.reconciliation import completion_percent, reconcile_units
from condoflow.store.base import RecordStore

logger = logging.getLogger(__name__)


class StatusFilter(str, Enum):
    """Status filter of the unit listing."""

    TODOS = "todos"
    PENDENTE = "pendente"
    PARCIAL = "parcial"
    CONCLUIDO = "concluido"

    def matches(self, entry: UnitStatusEntry) -> bool:
        if self is StatusFilter.PENDENTE:
            return entry.status.is_pending
        if self is StatusFilter.PARCIAL:
            return entry.status.is_partial
        if self is StatusFilter.CONCLUIDO:
            return entry.status.is_complete
        return True


def list_units(store: RecordStore) -> list[UnitResponse]:
    """All units in canonical order."""
    return sort_units(store.list_units())


def get_unit(store: RecordStore, unit_id: int) -> UnitResponse:
    unit = store.get_unit(unit_id)
    if not unit:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Unit not found",
        )
    return unit


def create_unit(store: RecordStore, data: UnitCreate) -> UnitResponse:
    unit = store.create_unit(data)
    logger.info("Created unit %s (id=%s)", unit_label(unit), unit.id)
    return unit


def update_unit(store: RecordStore, unit_id: int, data: UnitUpdate) -> UnitResponse:
    unit = store.update_unit(unit_id, data)
    if not unit:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Unit not found",
        )
    return unit


def delete_unit(store: RecordStore, unit_id: int) -> None:
    """Delete a unit; its readings and registration requests go with it."""
    if not store.delete_unit(unit_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Unit not found",
        )
    logger.info("Deleted unit %s with its readings and registrations", unit_id)


def search_units(units: Iterable[UnitResponse], search: str | None) -> list[UnitResponse]:
    """Case-insensitive match on the unit number or the resident's name."""
    if not search or not search.strip():
        return list(units)
    needle = search.strip().lower()
    return [
        u for u in units if needle in u.number.lower() or needle in u.resident_name.lower()
    ]


def list_unit_status(
    store: RecordStore,
    reference: ReferenceMonth,
    status_filter: StatusFilter = StatusFilter.TODOS,
    search: str | None = None,
) -> UnitStatusListing:
    """
    Units with their completion status for the month.

    The completion percent always covers every unit; the filter and the
    search only narrow the listed entries.
    """
    units = store.list_units()
    readings = store.list_readings(ReadingFilter(start=reference.start, end=reference.end))
    entries = reconcile_units(units, readings, reference)

    matching_ids = {u.id for u in search_units(units, search)}
    return UnitStatusListing(
        reference=reference,
        completion_percent=completion_percent(entries),
        units=[e for e in entries if e.unit.id in matching_ids and status_filter.matches(e)],
    )


def _registration_fields(profile: UnitProfile) -> dict:
    """Registration columns of a profile, cleared where they do not apply."""
    tenant = profile.resident_role == ResidentRole.INQUILINO
    return {
        "full_name": profile.resident_name,
        "cpf": only_digits(profile.cpf),
        "birth_date": profile.birth_date,
        "phone": only_digits(profile.phone),
        "resident_type": profile.resident_role,
        "garage_spot": profile.garage_spot,
        "is_financial_responsible": profile.is_financial_responsible,
        "financial_responsible_name": (
            None if profile.is_financial_responsible else profile.financial_responsible_name
        ),
        "financial_responsible_cpf": (
            None
            if profile.is_financial_responsible
            else only_digits(profile.financial_responsible_cpf or "")
        ),
        "owner_name": profile.owner_name if tenant else None,
        "owner_phone": only_digits(profile.owner_phone or "") if tenant else None,
        "additional_residents": profile.additional_residents,
    }


def save_unit_profile(
    store: RecordStore,
    profile: UnitProfile,
    unit_id: int | None = None,
) -> UnitProfileResponse:
    """
    Administrative edit of a unit and its resident.

    Creates the unit when ``unit_id`` is None, otherwise updates it. The
    latest approved registration of the unit is updated in place, or a new
    approved one is created when the unit has none.
    """
    unit_fields = {
        "number": profile.number,
        "block": profile.block,
        "resident_name": profile.resident_name,
        "resident_role": profile.resident_role,
    }
    if unit_id is None:
        unit = store.create_unit(UnitCreate(**unit_fields))
    else:
        unit = update_unit(store, unit_id, UnitUpdate(**unit_fields))

    fields = _registration_fields(profile)
    approved = store.list_registrations(
        RegistrationFilter(unit_id=unit.id, status=RegistrationStatus.APROVADO)
    )
    if approved:
        registration = store.update_registration(approved[0].id, RegistrationUpdate(**fields))
    else:
        created = store.create_registration(RegistrationDraft(unit_id=unit.id, **fields))
        registration = store.update_registration_status(created.id, RegistrationStatus.APROVADO)

    logger.info("Saved profile of unit %s (id=%s)", unit_label(unit), unit.id)
    return UnitProfileResponse(unit=unit, registration=registration)
