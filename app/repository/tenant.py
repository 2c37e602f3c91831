from sqlalchemy import update
from sqlmodel import Session, col, select

from app.model.base import utc_now
from app.model.tenant import Tenant


def create(session: Session, tenant: Tenant) -> Tenant:
    session.add(tenant)
    session.flush()
    session.refresh(tenant)
    return tenant


def get_by_id(session: Session, tenant_id: int) -> Tenant | None:
    return session.exec(
        select(Tenant).where(Tenant.id == tenant_id, col(Tenant.deleted_at).is_(None))
    ).first()


def get_by_cnpj(session: Session, cnpj: str) -> Tenant | None:
    return session.exec(
        select(Tenant).where(Tenant.cnpj == cnpj, col(Tenant.deleted_at).is_(None))
    ).first()


def list_all(session: Session) -> list[Tenant]:
    return list(
        session.exec(
            select(Tenant).where(col(Tenant.deleted_at).is_(None)).order_by(col(Tenant.name))
        ).all()
    )


def save(session: Session, tenant: Tenant) -> Tenant:
    tenant.updated_at = utc_now()
    session.add(tenant)
    session.flush()
    session.refresh(tenant)
    return tenant


def soft_delete(session: Session, tenant_id: int) -> int:
    now = utc_now()
    result = session.exec(
        update(Tenant)
        .where(col(Tenant.id) == tenant_id, col(Tenant.deleted_at).is_(None))
        .values(deleted_at=now, updated_at=now)
    )
    return result.rowcount
