from datetime import datetime

from fastapi import APIRouter, BackgroundTasks, Depends, status
from pydantic import BaseModel as PydanticBaseModel, EmailStr
from sqlmodel import Session

from app.api.deps import get_email_sender, get_settings
from app.api.schema import DataResponse, MessageResponse, UserResponse
from app.auth.dependencies import get_token_claims, require_active_tenant
from app.auth.jwt import TokenClaims
from app.config import Settings
from app.db.session import get_session
from app.model.invite import Invite
from app.model.user_tenant import UserRole
from app.repository import tenant as tenant_repo
from app.repository import user as user_repo
from app.services import invite_service
from app.services.email_service import EmailSender, send_invite_email

router = APIRouter(tags=["Invite"])


class InviteCreate(PydanticBaseModel):
    email: EmailStr
    role: UserRole


class InviteAccept(PydanticBaseModel):
    name: str | None = None
    password: str | None = None
    phone: str | None = None
    cpf: str | None = None


class InviteResponse(PydanticBaseModel):
    id: int
    tenant_id: int
    email: str
    role: UserRole
    token: str
    # Status efetivo: pendente vencido aparece como "expired"
    status: str
    invited_by_user_id: int
    accepted_by_user_id: int | None = None
    expires_at: datetime
    accepted_at: datetime | None = None
    created_at: datetime

    @classmethod
    def from_invite(cls, invite: Invite) -> "InviteResponse":
        return cls(
            id=invite.id,
            tenant_id=invite.tenant_id,
            email=invite.email,
            role=invite.role,
            token=invite.token,
            status=invite.effective_status.value,
            invited_by_user_id=invite.invited_by_user_id,
            accepted_by_user_id=invite.accepted_by_user_id,
            expires_at=invite.expires_at,
            accepted_at=invite.accepted_at,
            created_at=invite.created_at,
        )


class InvitePublicResponse(InviteResponse):
    """Convite consultado pelo token (rota pública), com nome do condomínio."""

    tenant_name: str | None = None


@router.post("/invites", response_model=DataResponse[InviteResponse], status_code=status.HTTP_201_CREATED)
def create_invite(
    body: InviteCreate,
    background_tasks: BackgroundTasks,
    claims: TokenClaims = Depends(require_active_tenant),
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
    email_sender: EmailSender = Depends(get_email_sender),
):
    """
    Convida um email para o tenant ativo (apenas síndico/admin).

    O email é enviado depois da resposta (background task); falha no envio só é logada.
    """
    invite = invite_service.create_invite(
        session,
        tenant_id=claims.active_tenant_id,
        inviter_id=claims.user_id,
        email=body.email,
        role=body.role,
    )
    tenant = tenant_repo.get_by_id(session, invite.tenant_id)
    inviter = user_repo.get_by_id(session, claims.user_id)
    background_tasks.add_task(
        send_invite_email,
        email_sender,
        settings.email,
        to_email=invite.email,
        tenant_name=tenant.name if tenant else "",
        inviter_name=inviter.name if inviter else "",
        role=invite.role.value,
        token=invite.token,
    )
    return DataResponse(data=InviteResponse.from_invite(invite))


@router.get("/invites/me", response_model=DataResponse[list[InviteResponse]])
def list_my_invites(
    claims: TokenClaims = Depends(get_token_claims),
    session: Session = Depends(get_session),
):
    """Convites pendentes (não expirados) para o email do usuário autenticado."""
    invites = invite_service.list_pending_for_email(session, claims.email)
    return DataResponse(data=[InviteResponse.from_invite(i) for i in invites])


@router.get("/invites/{token}", response_model=DataResponse[InvitePublicResponse])
def get_invite(token: str, session: Session = Depends(get_session)):
    """Rota pública: o token é a credencial."""
    invite = invite_service.get_by_token(session, token)
    tenant = tenant_repo.get_by_id(session, invite.tenant_id)
    data = InvitePublicResponse(
        **InviteResponse.from_invite(invite).model_dump(),
        tenant_name=tenant.name if tenant else None,
    )
    return DataResponse(data=data)


@router.post("/invites/{token}/accept", response_model=DataResponse[UserResponse])
def accept_invite(token: str, body: InviteAccept, session: Session = Depends(get_session)):
    """Rota pública. Nome e senha são obrigatórios apenas se o email ainda não tem conta."""
    user = invite_service.accept_invite(
        session,
        token,
        name=body.name,
        password=body.password,
        phone=body.phone,
        cpf=body.cpf,
    )
    return DataResponse(data=UserResponse.model_validate(user))


@router.delete("/invites/{invite_id}", response_model=MessageResponse)
def cancel_invite(
    invite_id: int,
    claims: TokenClaims = Depends(require_active_tenant),
    session: Session = Depends(get_session),
):
    invite_service.cancel_invite(
        session,
        invite_id=invite_id,
        acting_user_id=claims.user_id,
        tenant_id=claims.active_tenant_id,
    )
    return MessageResponse(message="invite cancelled successfully")


@router.get("/tenants/invites", response_model=DataResponse[list[InviteResponse]])
def list_tenant_invites(
    claims: TokenClaims = Depends(require_active_tenant),
    session: Session = Depends(get_session),
):
    invites = invite_service.list_tenant_invites(session, tenant_id=claims.active_tenant_id)
    return DataResponse(data=[InviteResponse.from_invite(i) for i in invites])
