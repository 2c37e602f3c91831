from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel as PydanticBaseModel
from sqlmodel import Session

from app.api.schema import DataResponse, MessageResponse
from app.auth.dependencies import get_token_claims, require_active_tenant, require_role
from app.auth.jwt import TokenClaims
from app.db.session import get_session
from app.model.user_tenant import UserRole
from app.services import user_service

router = APIRouter(prefix="/users", tags=["User"])

manager_only = require_role(UserRole.SINDICO, UserRole.ADMIN)


class UserInTenantResponse(PydanticBaseModel):
    id: int
    name: str
    email: str
    phone: str | None = None
    role: str
    is_active: bool
    unit_id: int | None = None

    class Config:
        from_attributes = True


class UserListResponse(PydanticBaseModel):
    data: list[UserInTenantResponse]
    total: int
    page: int
    per_page: int
    total_pages: int


class MyTenantResponse(PydanticBaseModel):
    tenant_id: int
    tenant_name: str
    role: str
    is_active: bool

    class Config:
        from_attributes = True


class MembershipUpdate(PydanticBaseModel):
    is_active: bool | None = None
    unit_id: int | None = None


@router.get("/me/tenants", response_model=DataResponse[list[MyTenantResponse]])
def list_my_tenants(
    claims: TokenClaims = Depends(get_token_claims),
    session: Session = Depends(get_session),
):
    """Tenants do usuário autenticado (não exige tenant ativo)."""
    tenants = user_service.list_my_tenants(session, claims.user_id)
    return DataResponse(data=[MyTenantResponse.model_validate(t) for t in tenants])


@router.get("", response_model=UserListResponse)
def list_users(
    page: int = Query(1, ge=1),
    per_page: int = Query(user_service.DEFAULT_PER_PAGE, ge=1, le=user_service.MAX_PER_PAGE),
    search: str | None = Query(None),
    claims: TokenClaims = Depends(require_active_tenant),
    session: Session = Depends(get_session),
):
    result = user_service.list_users(
        session,
        tenant_id=claims.active_tenant_id,
        page=page,
        per_page=per_page,
        search=search,
    )
    return UserListResponse(
        data=[UserInTenantResponse.model_validate(u) for u in result.data],
        total=result.total,
        page=result.page,
        per_page=result.per_page,
        total_pages=result.total_pages,
    )


@router.get("/{user_id}", response_model=DataResponse[UserInTenantResponse])
def get_user(
    user_id: int,
    claims: TokenClaims = Depends(require_active_tenant),
    session: Session = Depends(get_session),
):
    user = user_service.get_user_in_tenant(session, tenant_id=claims.active_tenant_id, user_id=user_id)
    return DataResponse(data=UserInTenantResponse.model_validate(user))


@router.patch(
    "/{user_id}/membership",
    response_model=DataResponse[UserInTenantResponse],
    dependencies=[Depends(manager_only)],
)
def update_membership(
    user_id: int,
    body: MembershipUpdate,
    claims: TokenClaims = Depends(require_active_tenant),
    session: Session = Depends(get_session),
):
    """Ativa/desativa o vínculo e vincula (ou desvincula, com unit_id null) a unidade."""
    fields = body.model_dump(exclude_unset=True)
    user = user_service.update_membership(
        session,
        tenant_id=claims.active_tenant_id,
        user_id=user_id,
        is_active=fields.get("is_active"),
        unit_id=fields.get("unit_id"),
        clear_unit="unit_id" in fields and fields["unit_id"] is None,
    )
    return DataResponse(data=UserInTenantResponse.model_validate(user))


@router.delete("/{user_id}", response_model=MessageResponse, dependencies=[Depends(manager_only)])
def remove_from_tenant(
    user_id: int,
    claims: TokenClaims = Depends(require_active_tenant),
    session: Session = Depends(get_session),
):
    """Remove o usuário do tenant ativo (a conta continua existindo)."""
    user_service.remove_from_tenant(session, tenant_id=claims.active_tenant_id, user_id=user_id)
    return MessageResponse(message="user removed from tenant successfully")
