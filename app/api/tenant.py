from datetime import datetime

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel as PydanticBaseModel, field_validator
from sqlmodel import Session

from app.api.schema import DataResponse, MessageResponse
from app.auth.dependencies import get_token_claims, require_role
from app.auth.jwt import TokenClaims
from app.db.session import get_session
from app.model.user_tenant import UserRole
from app.services import tenant_service

router = APIRouter(prefix="/tenants", tags=["Tenant"])

admin_only = require_role(UserRole.ADMIN)


class TenantCreate(PydanticBaseModel):
    name: str
    cnpj: str
    email: str | None = None
    phone: str | None = None

    @field_validator("name", "cnpj")
    @classmethod
    def validate_string_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("campo não pode ser vazio")
        return v.strip()


class TenantUpdate(PydanticBaseModel):
    name: str | None = None
    cnpj: str | None = None
    email: str | None = None
    phone: str | None = None
    active: bool | None = None


class TenantResponse(PydanticBaseModel):
    id: int
    name: str
    cnpj: str
    email: str | None = None
    phone: str | None = None
    active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


@router.post("/create", response_model=DataResponse[TenantResponse], status_code=status.HTTP_201_CREATED)
def create_tenant_by_user(
    body: TenantCreate,
    claims: TokenClaims = Depends(get_token_claims),
    session: Session = Depends(get_session),
):
    """
    Self-service: qualquer usuário autenticado cria um condomínio e vira síndico dele.

    Não exige tenant ativo (usuário órfão). Use /auth/switch-tenant para entrar no novo tenant.
    """
    tenant = tenant_service.create_tenant_by_user(
        session,
        user_id=claims.user_id,
        name=body.name,
        cnpj=body.cnpj,
        email=body.email,
        phone=body.phone,
    )
    return DataResponse(data=TenantResponse.model_validate(tenant))


# Rotas administrativas (papel admin no token, sem isolamento por tenant)


@router.post(
    "",
    response_model=DataResponse[TenantResponse],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(admin_only)],
)
def create_tenant(body: TenantCreate, session: Session = Depends(get_session)):
    tenant = tenant_service.create_tenant(
        session, name=body.name, cnpj=body.cnpj, email=body.email, phone=body.phone
    )
    return DataResponse(data=TenantResponse.model_validate(tenant))


@router.get("", response_model=DataResponse[list[TenantResponse]], dependencies=[Depends(admin_only)])
def list_tenants(session: Session = Depends(get_session)):
    tenants = tenant_service.list_tenants(session)
    return DataResponse(data=[TenantResponse.model_validate(t) for t in tenants])


@router.get("/cnpj/{cnpj}", response_model=DataResponse[TenantResponse], dependencies=[Depends(admin_only)])
def get_tenant_by_cnpj(cnpj: str, session: Session = Depends(get_session)):
    tenant = tenant_service.get_tenant_by_cnpj(session, cnpj)
    return DataResponse(data=TenantResponse.model_validate(tenant))


@router.get("/{tenant_id}", response_model=DataResponse[TenantResponse], dependencies=[Depends(admin_only)])
def get_tenant(tenant_id: int, session: Session = Depends(get_session)):
    tenant = tenant_service.get_tenant(session, tenant_id)
    return DataResponse(data=TenantResponse.model_validate(tenant))


@router.put("/{tenant_id}", response_model=DataResponse[TenantResponse], dependencies=[Depends(admin_only)])
def update_tenant(tenant_id: int, body: TenantUpdate, session: Session = Depends(get_session)):
    tenant = tenant_service.update_tenant(session, tenant_id, **body.model_dump(exclude_unset=True))
    return DataResponse(data=TenantResponse.model_validate(tenant))


@router.delete("/{tenant_id}", response_model=MessageResponse, dependencies=[Depends(admin_only)])
def delete_tenant(tenant_id: int, session: Session = Depends(get_session)):
    tenant_service.delete_tenant(session, tenant_id)
    return MessageResponse(message="tenant deleted successfully")
