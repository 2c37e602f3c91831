"""
Ciclo de vida de convites.

    pending -> accepted
    pending -> cancelled
    pending -> (expired)   derivado de now > expires_at, nunca gravado

Nenhuma transição sai de accepted/cancelled.
"""
import logging
import secrets

from sqlmodel import Session

from app.auth.password import hash_password, validate_password_strength
from app.db.session import transaction
from app.errors import AuthzError, ConflictError, NotFoundError, ValidationError
from app.model.base import utc_now
from app.model.invite import INVITE_TTL, Invite, InviteStatus
from app.model.user import User
from app.model.user_tenant import UserRole, UserTenant
from app.repository import invite as invite_repo
from app.repository import user as user_repo
from app.repository import user_tenant as user_tenant_repo
from app.services.auth_service import normalize_email

logger = logging.getLogger(__name__)

MEMBERSHIP_CONFLICT = "user already belongs to this tenant"


def _generate_token() -> str:
    return secrets.token_urlsafe(32)


def create_invite(
    session: Session,
    *,
    tenant_id: int,
    inviter_id: int,
    email: str,
    role: UserRole,
) -> Invite:
    """
    Cria convite para (tenant, email).

    Raises:
        AuthzError: quem convida não é síndico/admin ativo do tenant
        ConflictError: email já é membro ativo ou já existe convite válido
    """
    email = normalize_email(email)
    if not email:
        raise ValidationError("email is required")
    role = UserRole(role)

    inviter_membership = user_tenant_repo.get_active(session, user_id=inviter_id, tenant_id=tenant_id)
    if not inviter_membership:
        raise AuthzError("user does not belong to this tenant")
    if not inviter_membership.can_manage:
        raise AuthzError("only síndico or admin can create invites")

    if user_tenant_repo.is_active_member(session, email=email, tenant_id=tenant_id):
        raise ConflictError(MEMBERSHIP_CONFLICT)
    if invite_repo.get_valid_for_email(session, tenant_id=tenant_id, email=email):
        raise ConflictError("pending invite already exists for this email and tenant")

    now = utc_now()
    with transaction(session, conflict_message="invite token collision, try again"):
        invite = invite_repo.create(
            session,
            Invite(
                tenant_id=tenant_id,
                email=email,
                role=role,
                token=_generate_token(),
                status=InviteStatus.PENDING,
                invited_by_user_id=inviter_id,
                expires_at=now + INVITE_TTL,
            ),
        )
    session.refresh(invite)
    logger.info(f"Convite criado (id={invite.id}, tenant_id={tenant_id}, email={email}, role={role.value})")
    return invite


def get_by_token(session: Session, token: str) -> Invite:
    invite = invite_repo.get_by_token(session, token)
    if not invite:
        raise NotFoundError("invite not found")
    return invite


def _ensure_acceptable(invite: Invite) -> None:
    if invite.is_valid():
        return
    if invite.status != InviteStatus.PENDING:
        raise ValidationError(f"invite is {invite.status.value}")
    raise ValidationError("invite has expired")


def accept_invite(
    session: Session,
    token: str,
    *,
    name: str | None = None,
    password: str | None = None,
    phone: str | None = None,
    cpf: str | None = None,
) -> User:
    """
    Aceita o convite em uma única transação:
    cria o usuário (se o email ainda não existe), cria o vínculo e marca o convite.

    Vínculo inativo pré-existente é reativado com o papel do convite.
    A corrida entre dois aceites simultâneos é resolvida pela unique key
    de user_tenant (IntegrityError -> ConflictError).
    """
    invite = get_by_token(session, token)
    _ensure_acceptable(invite)

    with transaction(session, conflict_message=MEMBERSHIP_CONFLICT):
        user = user_repo.get_by_email(session, invite.email)
        existing_membership = None
        if user:
            existing_membership = user_tenant_repo.get(session, user_id=user.id, tenant_id=invite.tenant_id)
            if existing_membership and existing_membership.is_active:
                raise ConflictError(MEMBERSHIP_CONFLICT)
        else:
            name = (name or "").strip()
            if not name or not password:
                raise ValidationError("name and password are required for new users")
            validate_password_strength(password)
            user = user_repo.create(
                session,
                User(
                    email=invite.email,
                    password_hash=hash_password(password),
                    name=name,
                    phone=phone or None,
                    cpf=cpf or None,
                    active=True,
                ),
            )

        now = utc_now()
        if existing_membership:
            existing_membership.role = invite.role
            existing_membership.is_active = True
            existing_membership.joined_at = now
            user_tenant_repo.save(session, existing_membership)
        else:
            user_tenant_repo.create(
                session,
                UserTenant(
                    user_id=user.id,
                    tenant_id=invite.tenant_id,
                    role=invite.role,
                    is_active=True,
                    joined_at=now,
                ),
            )

        invite.status = InviteStatus.ACCEPTED
        invite.accepted_by_user_id = user.id
        invite.accepted_at = now
        invite_repo.save(session, invite)

    session.refresh(user)
    logger.info(f"Convite aceito (id={invite.id}, tenant_id={invite.tenant_id}, user_id={user.id})")
    return user


def list_pending_for_email(session: Session, email: str) -> list[Invite]:
    """Convites pendentes e não expirados endereçados ao email."""
    return invite_repo.list_pending_by_email(session, normalize_email(email))


def list_tenant_invites(session: Session, *, tenant_id: int) -> list[Invite]:
    return invite_repo.list_by_tenant(session, tenant_id=tenant_id)


def cancel_invite(session: Session, *, invite_id: int, acting_user_id: int, tenant_id: int) -> None:
    """
    Cancela um convite pendente do tenant ativo.

    Permitido para quem convidou ou para síndico/admin, ambos com vínculo ativo no tenant.
    """
    invite = invite_repo.get_by_id(session, tenant_id=tenant_id, invite_id=invite_id)
    if not invite:
        raise NotFoundError("invite not found")

    # Quem convidou também precisa de vínculo ativo no tenant
    membership = user_tenant_repo.get_active(session, user_id=acting_user_id, tenant_id=tenant_id)
    if not membership:
        raise AuthzError("user does not belong to this tenant")
    if invite.invited_by_user_id != acting_user_id and not membership.can_manage:
        raise AuthzError("only the inviter, síndico, or admin can cancel invites")

    if invite.status != InviteStatus.PENDING:
        raise ValidationError(f"invite is {invite.status.value}")

    with transaction(session):
        affected = invite_repo.mark_cancelled(session, tenant_id=tenant_id, invite_id=invite_id)
    if affected == 0:
        # Aceito/cancelado por outra request entre a leitura e o UPDATE.
        raise ValidationError("invite is no longer pending")
    logger.info(f"Convite cancelado (id={invite_id}, tenant_id={tenant_id}, by={acting_user_id})")
