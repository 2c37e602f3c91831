"""
Usuários: perfil próprio (conta) e gestão de membros dentro do tenant ativo.
"""
import logging
import math
from dataclasses import dataclass

from sqlmodel import Session

from app.auth.password import hash_password, validate_password_strength, verify_password
from app.db.session import transaction
from app.errors import NotFoundError, ValidationError
from app.model.user import User
from app.model.user_tenant import UserTenant
from app.repository import unit as unit_repo
from app.repository import user as user_repo
from app.repository import user_tenant as user_tenant_repo

logger = logging.getLogger(__name__)

DEFAULT_PER_PAGE = 10
MAX_PER_PAGE = 100
MAX_PHONE_LENGTH = 20


@dataclass(frozen=True)
class UserInTenant:
    """Dados do User combinados com o vínculo no tenant."""

    id: int
    name: str
    email: str
    phone: str | None
    role: str
    is_active: bool
    unit_id: int | None

    @classmethod
    def from_rows(cls, user: User, membership: UserTenant) -> "UserInTenant":
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            phone=user.phone,
            role=membership.role.value,
            is_active=membership.is_active,
            unit_id=user.unit_id,
        )


@dataclass(frozen=True)
class UserPage:
    data: list[UserInTenant]
    total: int
    page: int
    per_page: int

    @property
    def total_pages(self) -> int:
        if self.total == 0:
            return 0
        return math.ceil(self.total / self.per_page)


@dataclass(frozen=True)
class MyTenant:
    tenant_id: int
    tenant_name: str
    role: str
    is_active: bool


def get_user(session: Session, user_id: int) -> User:
    user = user_repo.get_by_id(session, user_id)
    if not user:
        raise NotFoundError("user not found")
    return user


def get_user_in_tenant(session: Session, *, tenant_id: int, user_id: int) -> UserInTenant:
    row = user_repo.get_in_tenant(session, tenant_id=tenant_id, user_id=user_id)
    if not row:
        raise NotFoundError("user not found")
    return UserInTenant.from_rows(*row)


def list_users(
    session: Session,
    *,
    tenant_id: int,
    page: int = 1,
    per_page: int = DEFAULT_PER_PAGE,
    search: str | None = None,
) -> UserPage:
    """Lista paginada dos membros do tenant (busca em nome, email e telefone)."""
    page = page if page and page > 0 else 1
    if not per_page or per_page < 1:
        per_page = DEFAULT_PER_PAGE
    per_page = min(per_page, MAX_PER_PAGE)
    search = (search or "").strip() or None

    rows, total = user_repo.list_by_tenant(
        session, tenant_id=tenant_id, page=page, per_page=per_page, search=search
    )
    return UserPage(
        data=[UserInTenant.from_rows(u, ut) for u, ut in rows],
        total=total,
        page=page,
        per_page=per_page,
    )


def list_my_tenants(session: Session, user_id: int) -> list[MyTenant]:
    return [
        MyTenant(tenant_id=t.id, tenant_name=t.name, role=ut.role.value, is_active=ut.is_active)
        for ut, t in user_tenant_repo.list_by_user(session, user_id)
    ]


def update_membership(
    session: Session,
    *,
    tenant_id: int,
    user_id: int,
    is_active: bool | None = None,
    unit_id: int | None = None,
    clear_unit: bool = False,
) -> UserInTenant:
    """
    Atualiza campos do vínculo: is_active (user_tenant) e unidade (user.unit_id).

    A unidade precisa pertencer ao mesmo tenant.
    """
    row = user_repo.get_in_tenant(session, tenant_id=tenant_id, user_id=user_id)
    if not row:
        raise NotFoundError("user does not belong to this tenant")
    user, membership = row

    if unit_id is not None and not unit_repo.get_by_id(session, tenant_id=tenant_id, unit_id=unit_id):
        raise NotFoundError("unit not found")

    with transaction(session):
        if is_active is not None:
            membership.is_active = is_active
            user_tenant_repo.save(session, membership)
        if unit_id is not None or clear_unit:
            user.unit_id = unit_id
            user_repo.save(session, user)

    return get_user_in_tenant(session, tenant_id=tenant_id, user_id=user_id)


def update_profile(
    session: Session,
    user_id: int,
    *,
    name: str | None = None,
    phone: str | None = None,
) -> User:
    """Atualiza nome/telefone do próprio usuário (email e senha têm fluxos próprios)."""
    user = get_user(session, user_id)
    if name is not None:
        name = name.strip()
        if not name:
            raise ValidationError("name is required")
        user.name = name
    if phone is not None:
        phone = phone.strip()
        if len(phone) > MAX_PHONE_LENGTH:
            raise ValidationError(f"phone must be at most {MAX_PHONE_LENGTH} characters")
        user.phone = phone or None

    with transaction(session):
        user_repo.save(session, user)
    session.refresh(user)
    return user


def update_password(session: Session, user_id: int, *, old_password: str, new_password: str) -> None:
    user = get_user(session, user_id)
    if not verify_password(old_password, user.password_hash):
        raise ValidationError("invalid old password")
    validate_password_strength(new_password)

    user.password_hash = hash_password(new_password)
    with transaction(session):
        user_repo.save(session, user)
    logger.info(f"Senha alterada (user_id={user_id})")


def remove_from_tenant(session: Session, *, tenant_id: int, user_id: int) -> None:
    """Remove fisicamente o vínculo; o User continua existindo."""
    if not user_tenant_repo.get(session, user_id=user_id, tenant_id=tenant_id):
        raise NotFoundError("user does not belong to this tenant")
    with transaction(session):
        user_tenant_repo.delete_membership(session, user_id=user_id, tenant_id=tenant_id)
    logger.info(f"Usuário {user_id} removido do tenant {tenant_id}")
