from sqlalchemy import func, or_
from sqlmodel import Session, col, select

from app.model.base import utc_now
from app.model.user import User
from app.model.user_tenant import UserTenant


def create(session: Session, user: User) -> User:
    session.add(user)
    session.flush()
    session.refresh(user)
    return user


def get_by_id(session: Session, user_id: int) -> User | None:
    return session.exec(
        select(User).where(User.id == user_id, col(User.deleted_at).is_(None))
    ).first()


def get_by_email(session: Session, email: str) -> User | None:
    """Busca global (email é único no sistema inteiro)."""
    return session.exec(
        select(User).where(User.email == email, col(User.deleted_at).is_(None))
    ).first()


def get_in_tenant(session: Session, *, tenant_id: int, user_id: int) -> tuple[User, UserTenant] | None:
    """Retorna o usuário e o vínculo com o tenant (qualquer is_active)."""
    row = session.exec(
        select(User, UserTenant)
        .join(UserTenant, col(UserTenant.user_id) == col(User.id))
        .where(
            User.id == user_id,
            UserTenant.tenant_id == tenant_id,
            col(User.deleted_at).is_(None),
            col(UserTenant.deleted_at).is_(None),
        )
    ).first()
    if row is None:
        return None
    return row[0], row[1]


def list_by_tenant(
    session: Session,
    *,
    tenant_id: int,
    page: int,
    per_page: int,
    search: str | None = None,
) -> tuple[list[tuple[User, UserTenant]], int]:
    """Lista paginada dos membros de um tenant. Retorna (linhas, total)."""
    conditions = [
        UserTenant.tenant_id == tenant_id,
        col(User.deleted_at).is_(None),
        col(UserTenant.deleted_at).is_(None),
    ]
    if search:
        pattern = f"%{search}%"
        conditions.append(
            or_(
                col(User.name).ilike(pattern),
                col(User.email).ilike(pattern),
                col(User.phone).ilike(pattern),
            )
        )

    total = session.exec(
        select(func.count())
        .select_from(User)
        .join(UserTenant, col(UserTenant.user_id) == col(User.id))
        .where(*conditions)
    ).one()

    rows = session.exec(
        select(User, UserTenant)
        .join(UserTenant, col(UserTenant.user_id) == col(User.id))
        .where(*conditions)
        .order_by(col(User.name), col(User.id))
        .offset((page - 1) * per_page)
        .limit(per_page)
    ).all()
    return [(u, ut) for u, ut in rows], int(total)


def save(session: Session, user: User) -> User:
    user.updated_at = utc_now()
    session.add(user)
    session.flush()
    session.refresh(user)
    return user
