from typing import Any

from sqlalchemy import update
from sqlmodel import Session, col, select

from app.model.base import utc_now
from app.model.unit import Unit


def create(session: Session, unit: Unit) -> Unit:
    session.add(unit)
    session.flush()
    session.refresh(unit)
    return unit


def get_by_id(session: Session, *, tenant_id: int, unit_id: int) -> Unit | None:
    return session.exec(
        select(Unit).where(
            Unit.tenant_id == tenant_id,
            Unit.id == unit_id,
            col(Unit.deleted_at).is_(None),
        )
    ).first()


def get_by_number(session: Session, *, tenant_id: int, number: str) -> Unit | None:
    return session.exec(
        select(Unit).where(
            Unit.tenant_id == tenant_id,
            Unit.number == number,
            col(Unit.deleted_at).is_(None),
        )
    ).first()


def list_by_tenant(session: Session, *, tenant_id: int, block: str | None = None) -> list[Unit]:
    query = select(Unit).where(Unit.tenant_id == tenant_id, col(Unit.deleted_at).is_(None))
    if block:
        query = query.where(Unit.block == block)
    return list(session.exec(query.order_by(col(Unit.block), col(Unit.number))).all())


def update_fields(session: Session, *, tenant_id: int, unit_id: int, values: dict[str, Any]) -> int:
    """UPDATE com tenant_id no predicado: tenant diferente afeta 0 linhas."""
    result = session.exec(
        update(Unit)
        .where(
            col(Unit.tenant_id) == tenant_id,
            col(Unit.id) == unit_id,
            col(Unit.deleted_at).is_(None),
        )
        .values(**values, updated_at=utc_now())
    )
    return result.rowcount


def soft_delete(session: Session, *, tenant_id: int, unit_id: int) -> int:
    now = utc_now()
    result = session.exec(
        update(Unit)
        .where(
            col(Unit.tenant_id) == tenant_id,
            col(Unit.id) == unit_id,
            col(Unit.deleted_at).is_(None),
        )
        .values(deleted_at=now, updated_at=now)
    )
    return result.rowcount
