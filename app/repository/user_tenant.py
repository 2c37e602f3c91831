from sqlalchemy import delete
from sqlmodel import Session, col, select

from app.model.base import utc_now
from app.model.tenant import Tenant
from app.model.user import User
from app.model.user_tenant import UserTenant


def create(session: Session, membership: UserTenant) -> UserTenant:
    session.add(membership)
    session.flush()
    session.refresh(membership)
    return membership


def get(session: Session, *, user_id: int, tenant_id: int) -> UserTenant | None:
    """Vínculo (ativo ou não) do usuário com o tenant."""
    return session.exec(
        select(UserTenant).where(
            UserTenant.user_id == user_id,
            UserTenant.tenant_id == tenant_id,
            col(UserTenant.deleted_at).is_(None),
        )
    ).first()


def get_active(session: Session, *, user_id: int, tenant_id: int) -> UserTenant | None:
    return session.exec(
        select(UserTenant).where(
            UserTenant.user_id == user_id,
            UserTenant.tenant_id == tenant_id,
            col(UserTenant.is_active).is_(True),
            col(UserTenant.deleted_at).is_(None),
        )
    ).first()


def list_by_user(
    session: Session, user_id: int, *, active_only: bool = False
) -> list[tuple[UserTenant, Tenant]]:
    """Vínculos do usuário com o tenant correspondente (tenants removidos ficam de fora)."""
    conditions = [
        UserTenant.user_id == user_id,
        col(UserTenant.deleted_at).is_(None),
        col(Tenant.deleted_at).is_(None),
    ]
    if active_only:
        conditions.append(col(UserTenant.is_active).is_(True))
    rows = session.exec(
        select(UserTenant, Tenant)
        .join(Tenant, col(Tenant.id) == col(UserTenant.tenant_id))
        .where(*conditions)
        .order_by(col(Tenant.name))
    ).all()
    return [(ut, t) for ut, t in rows]


def is_active_member(session: Session, *, email: str, tenant_id: int) -> bool:
    row = session.exec(
        select(UserTenant.id)
        .join(User, col(User.id) == col(UserTenant.user_id))
        .where(
            User.email == email,
            UserTenant.tenant_id == tenant_id,
            col(UserTenant.is_active).is_(True),
            col(User.deleted_at).is_(None),
            col(UserTenant.deleted_at).is_(None),
        )
    ).first()
    return row is not None


def save(session: Session, membership: UserTenant) -> UserTenant:
    membership.updated_at = utc_now()
    session.add(membership)
    session.flush()
    session.refresh(membership)
    return membership


def delete_membership(session: Session, *, user_id: int, tenant_id: int) -> int:
    """Remoção física do vínculo (sair do tenant). Retorna linhas afetadas."""
    result = session.exec(
        delete(UserTenant).where(
            col(UserTenant.user_id) == user_id,
            col(UserTenant.tenant_id) == tenant_id,
        )
    )
    return result.rowcount
