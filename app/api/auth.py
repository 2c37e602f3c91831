from fastapi import APIRouter, Depends, status
from pydantic import BaseModel as PydanticBaseModel, EmailStr
from sqlmodel import Session

from app.api.deps import get_settings
from app.api.schema import DataResponse, UserResponse
from app.auth.dependencies import get_token_claims
from app.auth.jwt import TokenClaims
from app.config import Settings
from app.db.session import get_session
from app.services import auth_service

router = APIRouter(prefix="/auth", tags=["Auth"])


class LoginRequest(PydanticBaseModel):
    email: EmailStr
    password: str


class RegisterRequest(PydanticBaseModel):
    email: EmailStr
    password: str
    name: str
    phone: str | None = None
    cpf: str | None = None


class TenantOption(PydanticBaseModel):
    tenant_id: int
    tenant_name: str
    role: str


class LoginResponse(PydanticBaseModel):
    token: str | None = None
    requires_tenant_selection: bool = False
    user: UserResponse
    tenants: list[TenantOption] = []


class TokenResponse(PydanticBaseModel):
    token: str


def _login_response(result: auth_service.LoginResult) -> DataResponse[LoginResponse]:
    return DataResponse(
        data=LoginResponse(
            token=result.token,
            requires_tenant_selection=result.requires_tenant_selection,
            user=UserResponse.model_validate(result.user),
            tenants=[
                TenantOption(tenant_id=t.tenant_id, tenant_name=t.tenant_name, role=t.role)
                for t in result.tenants
            ],
        )
    )


@router.post("/register", response_model=DataResponse[UserResponse], status_code=status.HTTP_201_CREATED)
def register(body: RegisterRequest, session: Session = Depends(get_session)):
    """Cadastro de usuário sem tenant (órfão)."""
    user = auth_service.register(
        session,
        email=body.email,
        password=body.password,
        name=body.name,
        phone=body.phone,
        cpf=body.cpf,
    )
    return DataResponse(data=UserResponse.model_validate(user))


@router.post("/login", response_model=DataResponse[LoginResponse])
def login(
    body: LoginRequest,
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
):
    """
    Login por email/senha.

    Com mais de um tenant ativo não há token: o cliente escolhe um tenant
    da lista e chama /auth/login/tenant/{tenant_id}.
    """
    result = auth_service.login(session, settings.jwt, email=body.email, password=body.password)
    return _login_response(result)


@router.post("/login/tenant/{tenant_id}", response_model=DataResponse[LoginResponse])
def login_with_tenant(
    tenant_id: int,
    body: LoginRequest,
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
):
    result = auth_service.login_with_tenant(
        session, settings.jwt, email=body.email, password=body.password, tenant_id=tenant_id
    )
    return _login_response(result)


@router.post("/switch-tenant/{tenant_id}", response_model=DataResponse[TokenResponse])
def switch_tenant(
    tenant_id: int,
    claims: TokenClaims = Depends(get_token_claims),
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
):
    """Emite novo token com outro tenant ativo (o anterior não é revogado)."""
    token = auth_service.switch_tenant(session, settings.jwt, user_id=claims.user_id, tenant_id=tenant_id)
    return DataResponse(data=TokenResponse(token=token))
