from sqlalchemy import update
from sqlmodel import Session, col, select

from app.model.base import utc_now
from app.model.invite import Invite, InviteStatus


def create(session: Session, invite: Invite) -> Invite:
    session.add(invite)
    session.flush()
    session.refresh(invite)
    return invite


def get_by_token(session: Session, token: str) -> Invite | None:
    """Busca global: o token é a credencial do convite (rota pública)."""
    return session.exec(
        select(Invite).where(Invite.token == token, col(Invite.deleted_at).is_(None))
    ).first()


def get_by_id(session: Session, *, tenant_id: int, invite_id: int) -> Invite | None:
    return session.exec(
        select(Invite).where(
            Invite.tenant_id == tenant_id,
            Invite.id == invite_id,
            col(Invite.deleted_at).is_(None),
        )
    ).first()


def get_valid_for_email(session: Session, *, tenant_id: int, email: str) -> Invite | None:
    """Convite pendente e ainda não expirado para (tenant, email)."""
    return session.exec(
        select(Invite).where(
            Invite.tenant_id == tenant_id,
            Invite.email == email,
            Invite.status == InviteStatus.PENDING,
            col(Invite.expires_at) > utc_now(),
            col(Invite.deleted_at).is_(None),
        )
    ).first()


def list_pending_by_email(session: Session, email: str) -> list[Invite]:
    """Pendentes e não expirados (expiração é verificada na leitura)."""
    return list(
        session.exec(
            select(Invite)
            .where(
                Invite.email == email,
                Invite.status == InviteStatus.PENDING,
                col(Invite.expires_at) > utc_now(),
                col(Invite.deleted_at).is_(None),
            )
            .order_by(col(Invite.created_at).desc())
        ).all()
    )


def list_by_tenant(session: Session, *, tenant_id: int) -> list[Invite]:
    return list(
        session.exec(
            select(Invite)
            .where(Invite.tenant_id == tenant_id, col(Invite.deleted_at).is_(None))
            .order_by(col(Invite.created_at).desc(), col(Invite.id).desc())
        ).all()
    )


def save(session: Session, invite: Invite) -> Invite:
    invite.updated_at = utc_now()
    session.add(invite)
    session.flush()
    session.refresh(invite)
    return invite


def mark_cancelled(session: Session, *, tenant_id: int, invite_id: int) -> int:
    """Só sai de pending: convites aceitos/cancelados não são alterados."""
    result = session.exec(
        update(Invite)
        .where(
            col(Invite.tenant_id) == tenant_id,
            col(Invite.id) == invite_id,
            col(Invite.status) == InviteStatus.PENDING,
            col(Invite.deleted_at).is_(None),
        )
        .values(status=InviteStatus.CANCELLED, updated_at=utc_now())
    )
    return result.rowcount
