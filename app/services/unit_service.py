import logging
from decimal import Decimal

from sqlmodel import Session

from app.db.session import transaction
from app.errors import ConflictError, NotFoundError, ValidationError
from app.model.unit import Unit
from app.repository import tenant as tenant_repo
from app.repository import unit as unit_repo

logger = logging.getLogger(__name__)

NUMBER_CONFLICT = "unit number already registered for this tenant"

# Campos editáveis via update_unit (number tratado à parte).
# Os opcionais aceitam null explícito para limpar o valor.
_OPTIONAL_FIELDS = frozenset({"block", "floor", "area", "owner_name", "owner_email", "owner_phone"})
_FLAG_FIELDS = frozenset({"occupied", "active"})


def create_unit(
    session: Session,
    *,
    tenant_id: int,
    number: str,
    block: str | None = None,
    floor: int | None = None,
    area: Decimal | None = None,
    owner_name: str | None = None,
    owner_email: str | None = None,
    owner_phone: str | None = None,
    occupied: bool = True,
    active: bool = True,
) -> Unit:
    """
    Cria unidade no tenant ativo.

    Raises:
        NotFoundError / ValidationError: tenant inexistente ou inativo
        ConflictError: número já usado neste tenant
    """
    tenant = tenant_repo.get_by_id(session, tenant_id)
    if not tenant:
        raise NotFoundError("tenant not found")
    if not tenant.active:
        raise ValidationError("tenant is inactive")

    number = (number or "").strip()
    if not number:
        raise ValidationError("unit number is required")
    if unit_repo.get_by_number(session, tenant_id=tenant_id, number=number):
        raise ConflictError(NUMBER_CONFLICT)

    with transaction(session, conflict_message=NUMBER_CONFLICT):
        unit = unit_repo.create(
            session,
            Unit(
                tenant_id=tenant_id,
                number=number,
                block=block or None,
                floor=floor,
                area=area,
                owner_name=owner_name or None,
                owner_email=owner_email or None,
                owner_phone=owner_phone or None,
                occupied=occupied,
                active=active,
            ),
        )
    session.refresh(unit)
    logger.info(f"Unidade criada (id={unit.id}, tenant_id={tenant_id}, number={number})")
    return unit


def get_unit(session: Session, *, tenant_id: int, unit_id: int) -> Unit:
    unit = unit_repo.get_by_id(session, tenant_id=tenant_id, unit_id=unit_id)
    if not unit:
        raise NotFoundError("unit not found")
    return unit


def get_unit_by_number(session: Session, *, tenant_id: int, number: str) -> Unit:
    number = (number or "").strip()
    if not number:
        raise ValidationError("unit number is required")
    unit = unit_repo.get_by_number(session, tenant_id=tenant_id, number=number)
    if not unit:
        raise NotFoundError("unit not found")
    return unit


def list_units(session: Session, *, tenant_id: int, block: str | None = None) -> list[Unit]:
    return unit_repo.list_by_tenant(session, tenant_id=tenant_id, block=(block or "").strip() or None)


def update_unit(session: Session, *, tenant_id: int, unit_id: int, **changes) -> Unit:
    """
    Atualiza a unidade com os campos informados em changes.

    Campos ausentes são mantidos; None limpa os opcionais (block, floor, area, owner_*).

    O tenant_id vem do token e entra no WHERE; não é possível mover a unidade
    para outro tenant.
    """
    unit = get_unit(session, tenant_id=tenant_id, unit_id=unit_id)

    values = {k: changes[k] for k in changes.keys() & _OPTIONAL_FIELDS}
    values.update({k: changes[k] for k in changes.keys() & _FLAG_FIELDS if changes[k] is not None})
    number = changes.get("number")
    if number is not None:
        number = number.strip()
        if not number:
            raise ValidationError("unit number is required")
        if number != unit.number:
            other = unit_repo.get_by_number(session, tenant_id=tenant_id, number=number)
            if other and other.id != unit.id:
                raise ConflictError(NUMBER_CONFLICT)
        values["number"] = number

    if values:
        with transaction(session, conflict_message=NUMBER_CONFLICT):
            unit_repo.update_fields(session, tenant_id=tenant_id, unit_id=unit_id, values=values)
        session.refresh(unit)
    return unit


def delete_unit(session: Session, *, tenant_id: int, unit_id: int) -> None:
    get_unit(session, tenant_id=tenant_id, unit_id=unit_id)
    with transaction(session):
        unit_repo.soft_delete(session, tenant_id=tenant_id, unit_id=unit_id)
    logger.info(f"Unidade removida (id={unit_id}, tenant_id={tenant_id})")
