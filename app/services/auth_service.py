"""
Autenticação: cadastro, login (com ou sem escolha de tenant) e troca de tenant ativo.

O papel do usuário é sempre resolvido via UserTenant, nunca por campo do User.
"""
import logging
from dataclasses import dataclass, field

from sqlmodel import Session

from app.auth.jwt import create_access_token
from app.auth.password import hash_password, validate_password_strength, verify_password
from app.config import JWTConfig
from app.db.session import transaction
from app.errors import AuthError, AuthzError, ConflictError, NotFoundError, ValidationError
from app.model.user import User
from app.repository import tenant as tenant_repo
from app.repository import user as user_repo
from app.repository import user_tenant as user_tenant_repo

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "invalid email or password"


@dataclass(frozen=True)
class TenantChoice:
    tenant_id: int
    tenant_name: str
    role: str


@dataclass
class LoginResult:
    """
    Resultado do login.

    token é None quando o usuário tem mais de um tenant ativo: o cliente
    escolhe um da lista `tenants` e chama login_with_tenant().
    """

    user: User
    token: str | None = None
    tenants: list[TenantChoice] = field(default_factory=list)

    @property
    def requires_tenant_selection(self) -> bool:
        return self.token is None


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def _authenticate(session: Session, email: str, password: str) -> User:
    # Mesma mensagem para email inexistente, conta inativa e senha errada.
    user = user_repo.get_by_email(session, normalize_email(email))
    if not user or not user.active:
        raise AuthError(INVALID_CREDENTIALS)
    if not verify_password(password, user.password_hash):
        raise AuthError(INVALID_CREDENTIALS)
    return user


def register(
    session: Session,
    *,
    email: str,
    password: str,
    name: str,
    phone: str | None = None,
    cpf: str | None = None,
) -> User:
    """
    Cria um usuário sem tenant (órfão).

    Raises:
        ValidationError: senha fraca ou campos obrigatórios vazios
        ConflictError: email já cadastrado
    """
    email = normalize_email(email)
    name = (name or "").strip()
    if not email:
        raise ValidationError("email is required")
    if not name:
        raise ValidationError("name is required")
    validate_password_strength(password)

    if user_repo.get_by_email(session, email):
        raise ConflictError("email already registered")

    with transaction(session, conflict_message="email already registered"):
        user = user_repo.create(
            session,
            User(
                email=email,
                password_hash=hash_password(password),
                name=name,
                phone=phone or None,
                cpf=cpf or None,
                active=True,
            ),
        )
    session.refresh(user)
    logger.info(f"Usuário registrado (id={user.id}, email={user.email})")
    return user


def login(session: Session, jwt_config: JWTConfig, *, email: str, password: str) -> LoginResult:
    """
    Login por email/senha.

    - 0 tenants ativos: token sem tenant ativo (sessão órfã)
    - 1 tenant ativo: token com tenant/papel
    - >1 tenants ativos: sem token, devolve a lista para escolha
    """
    user = _authenticate(session, email, password)
    memberships = user_tenant_repo.list_by_user(session, user.id, active_only=True)

    if len(memberships) == 0:
        token = create_access_token(jwt_config, user_id=user.id, email=user.email)
        return LoginResult(user=user, token=token)

    if len(memberships) == 1:
        membership, _tenant = memberships[0]
        token = create_access_token(
            jwt_config,
            user_id=user.id,
            email=user.email,
            tenant_id=membership.tenant_id,
            role=membership.role.value,
        )
        return LoginResult(user=user, token=token)

    tenants = [
        TenantChoice(tenant_id=t.id, tenant_name=t.name, role=ut.role.value)
        for ut, t in memberships
    ]
    return LoginResult(user=user, tenants=tenants)


def login_with_tenant(
    session: Session, jwt_config: JWTConfig, *, email: str, password: str, tenant_id: int
) -> LoginResult:
    user = _authenticate(session, email, password)
    membership = user_tenant_repo.get(session, user_id=user.id, tenant_id=tenant_id)
    if not membership or not tenant_repo.get_by_id(session, tenant_id):
        raise AuthError("user does not belong to this tenant")
    if not membership.is_active:
        raise AuthError("user access to this tenant is inactive")

    token = create_access_token(
        jwt_config,
        user_id=user.id,
        email=user.email,
        tenant_id=tenant_id,
        role=membership.role.value,
    )
    return LoginResult(user=user, token=token)


def switch_tenant(session: Session, jwt_config: JWTConfig, *, user_id: int, tenant_id: int) -> str:
    """
    Emite um novo token com outro tenant ativo.

    O token anterior continua válido até expirar (tokens sem estado).
    """
    user = user_repo.get_by_id(session, user_id)
    if not user:
        raise NotFoundError("user not found")
    membership = user_tenant_repo.get(session, user_id=user_id, tenant_id=tenant_id)
    if not membership or not tenant_repo.get_by_id(session, tenant_id):
        raise AuthzError("user does not belong to this tenant")
    if not membership.is_active:
        raise AuthzError("user access to this tenant is inactive")

    logger.info(f"Troca de tenant (user_id={user_id}, tenant_id={tenant_id})")
    return create_access_token(
        jwt_config,
        user_id=user.id,
        email=user.email,
        tenant_id=tenant_id,
        role=membership.role.value,
    )
