"""Registration service - public resident intake and its administrative review."""

import logging

from fastapi import HTTPException, status

from condoflow.core.documents import is_valid_cpf, is_valid_phone, only_digits
from condoflow.models.enums import RegistrationStatus, ResidentRole
from condoflow.schemas.registration import (
    RegistrationDraft,
    RegistrationFilter,
    RegistrationResponse,
    RegistrationUpdate,
    StepValidation,
    UnitOption,
)
from condoflow.schemas.unit import UnitResponse
from condoflow.services.ordering import sort_units, unit_label
from condoflow.store.base import RecordStore

logger = logging.getLogger(__name__)

INTAKE_STEPS = (1, 2, 3)


def _step_errors(draft: RegistrationDraft, step: int) -> dict[str, str]:
    errors: dict[str, str] = {}

    if step == 1:
        if not draft.unit_id:
            errors["selectedApartment"] = "Selecione uma unidade."

    elif step == 2:
        if not draft.full_name.strip():
            errors["fullName"] = "Nome é obrigatório."
        if not is_valid_cpf(draft.cpf):
            errors["cpf"] = "CPF inválido."
        if not draft.birth_date:
            errors["birthDate"] = "Data obrigatória."
        if not is_valid_phone(draft.phone):
            errors["phone"] = "Telefone inválido."
        if not draft.garage_spot.strip():
            errors["garageSpot"] = "Vaga é obrigatória."
        if not draft.is_financial_responsible and not (
            draft.financial_responsible_name or ""
        ).strip():
            errors["financialResponsibleName"] = "Informe o responsável."

    elif step == 3:
        for index, resident in enumerate(draft.additional_residents):
            if not resident.name.strip():
                errors[f"additional_{index}_name"] = "Nome obrigatório"
            if not resident.birth_date:
                errors[f"additional_{index}_birthDate"] = "Data obrigatória"

    return errors


def validate_step(draft: RegistrationDraft, step: int) -> StepValidation:
    """Field errors of one intake step; the form advances only when there are none."""
    if step not in INTAKE_STEPS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown registration step {step}",
        )
    errors = _step_errors(draft, step)
    return StepValidation(step=step, ok=not errors, errors=errors)


def validate_draft(draft: RegistrationDraft, steps: tuple[int, ...] = INTAKE_STEPS) -> None:
    """
    Run the given steps and fail with every field error at once.

    Raises:
        HTTPException: 422 with ``{"errors": {field: message}}``

    """
    errors: dict[str, str] = {}
    for step in steps:
        errors.update(_step_errors(draft, step))
    if errors:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"errors": errors},
        )


def normalize_draft(draft: RegistrationDraft) -> RegistrationDraft:
    """Documents as digits only, optional sections cleared where they do not apply."""
    tenant = draft.resident_type == ResidentRole.INQUILINO
    responsible = draft.is_financial_responsible
    return draft.model_copy(
        update={
            "full_name": draft.full_name.strip(),
            "cpf": only_digits(draft.cpf),
            "phone": only_digits(draft.phone),
            "garage_spot": draft.garage_spot.strip(),
            "financial_responsible_name": None if responsible else draft.financial_responsible_name,
            "financial_responsible_cpf": (
                None if responsible else (only_digits(draft.financial_responsible_cpf) or None)
            ),
            "owner_name": draft.owner_name if tenant else None,
            "owner_phone": (only_digits(draft.owner_phone) or None) if tenant else None,
            "additional_residents": [
                r.model_copy(update={"cpf": only_digits(r.cpf), "phone": only_digits(r.phone)})
                for r in draft.additional_residents
            ],
        }
    )


def get_registration(store: RecordStore, registration_id: int) -> RegistrationResponse:
    registration = store.get_registration(registration_id)
    if not registration:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Registration not found",
        )
    return registration


def create_registration(store: RecordStore, draft: RegistrationDraft) -> RegistrationResponse:
    """Public intake: validate every step and store the request as pending."""
    validate_draft(draft)
    if store.get_unit(draft.unit_id) is None:  # type: ignore[arg-type]
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Unit not found",
        )

    registration = store.create_registration(normalize_draft(draft))
    logger.info(
        "Received registration %s for unit %s", registration.id, registration.unit_id
    )
    return registration


def _require_pending(registration: RegistrationResponse, action: str) -> None:
    if registration.status != RegistrationStatus.PENDENTE:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Cannot {action} a registration that is {registration.status.value}",
        )


def update_registration(
    store: RecordStore,
    registration_id: int,
    data: RegistrationUpdate,
) -> RegistrationResponse:
    """Edit a pending request in place; the merged result must still pass intake validation."""
    current = get_registration(store, registration_id)
    _require_pending(current, "edit")

    merged = RegistrationDraft.model_validate(
        {
            **current.model_dump(exclude={"id", "status", "created_at"}),
            **data.model_dump(exclude_unset=True),
        }
    )
    validate_draft(merged, steps=(2, 3))
    normalized = normalize_draft(merged)

    update = RegistrationUpdate.model_validate(
        normalized.model_dump(exclude={"unit_id"})
    )
    updated = store.update_registration(registration_id, update)
    logger.info("Edited registration %s", registration_id)
    return updated  # type: ignore[return-value]


def approve_registration(store: RecordStore, registration_id: int) -> RegistrationResponse:
    """Copy the resident's name and role onto the unit, then mark the request approved."""
    registration = get_registration(store, registration_id)
    _require_pending(registration, "approve")

    store.apply_registration_to_unit(registration_id)
    approved = store.update_registration_status(registration_id, RegistrationStatus.APROVADO)
    logger.info(
        "Approved registration %s; unit %s now lists %s",
        registration_id,
        registration.unit_id,
        registration.full_name,
    )
    return approved  # type: ignore[return-value]


def reject_registration(store: RecordStore, registration_id: int) -> RegistrationResponse:
    registration = get_registration(store, registration_id)
    _require_pending(registration, "reject")

    rejected = store.update_registration_status(registration_id, RegistrationStatus.REJEITADO)
    logger.info("Rejected registration %s", registration_id)
    return rejected  # type: ignore[return-value]


def list_registrations(
    store: RecordStore,
    registration_status: RegistrationStatus | None = None,
    unit_id: int | None = None,
) -> list[RegistrationResponse]:
    """Requests newest first."""
    return store.list_registrations(
        RegistrationFilter(unit_id=unit_id, status=registration_status)
    )


def pending_count(store: RecordStore) -> int:
    return len(store.list_registrations(RegistrationFilter(status=RegistrationStatus.PENDENTE)))


def latest_approved_registration(store: RecordStore, unit_id: int) -> RegistrationResponse:
    """Resident details of a unit: its most recent approved request."""
    if store.get_unit(unit_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Unit not found",
        )
    approved = store.list_registrations(
        RegistrationFilter(unit_id=unit_id, status=RegistrationStatus.APROVADO)
    )
    if not approved:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No approved registration for this unit",
        )
    return approved[0]


def _option(unit: UnitResponse) -> UnitOption:
    return UnitOption(id=unit.id, number=unit.number, block=unit.block, label=unit_label(unit))


def unit_options(store: RecordStore) -> list[UnitOption]:
    """Units selectable on the intake form, in canonical order."""
    return [_option(unit) for unit in sort_units(store.list_units())]
