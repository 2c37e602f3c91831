"""
Tenants (condomínios): CRUD administrativo e criação self-service pelo usuário.
"""
from __future__ import annotations

import logging

from sqlmodel import Session

from app.db.session import transaction
from app.errors import ConflictError, NotFoundError, ValidationError
from app.model.base import utc_now
from app.model.tenant import Tenant
from app.model.user_tenant import UserRole, UserTenant
from app.repository import tenant as tenant_repo
from app.repository import user as user_repo
from app.repository import user_tenant as user_tenant_repo

logger = logging.getLogger(__name__)


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _require_name_and_cnpj(name: str | None, cnpj: str | None) -> tuple[str, str]:
    name = _clean(name)
    cnpj = _clean(cnpj)
    if not name:
        raise ValidationError("tenant name is required")
    if not cnpj:
        raise ValidationError("CNPJ is required")
    return name, cnpj


def create_tenant(
    session: Session,
    *,
    name: str,
    cnpj: str,
    email: str | None = None,
    phone: str | None = None,
    active: bool = True,
) -> Tenant:
    """Criação administrativa (sem vínculo com usuário)."""
    name, cnpj = _require_name_and_cnpj(name, cnpj)
    if tenant_repo.get_by_cnpj(session, cnpj):
        raise ConflictError("CNPJ already registered")

    with transaction(session, conflict_message="CNPJ already registered"):
        tenant = tenant_repo.create(
            session,
            Tenant(name=name, cnpj=cnpj, email=_clean(email), phone=_clean(phone), active=active),
        )
    session.refresh(tenant)
    logger.info(f"Tenant criado (id={tenant.id}, cnpj={tenant.cnpj})")
    return tenant


def create_tenant_by_user(
    session: Session,
    *,
    user_id: int,
    name: str,
    cnpj: str,
    email: str | None = None,
    phone: str | None = None,
) -> Tenant:
    """
    Cria o tenant e torna o usuário síndico dele, na mesma transação.

    Se qualquer um dos inserts falhar, nenhum dos dois é gravado.
    """
    name, cnpj = _require_name_and_cnpj(name, cnpj)
    if not user_repo.get_by_id(session, user_id):
        raise NotFoundError("user not found")
    if tenant_repo.get_by_cnpj(session, cnpj):
        raise ConflictError("CNPJ already registered")

    with transaction(session, conflict_message="CNPJ already registered"):
        tenant = tenant_repo.create(
            session,
            Tenant(name=name, cnpj=cnpj, email=_clean(email), phone=_clean(phone), active=True),
        )
        user_tenant_repo.create(
            session,
            UserTenant(
                user_id=user_id,
                tenant_id=tenant.id,
                role=UserRole.SINDICO,
                is_active=True,
                joined_at=utc_now(),
            ),
        )
    session.refresh(tenant)
    logger.info(f"Tenant criado pelo usuário {user_id} (id={tenant.id}); usuário é síndico")
    return tenant


def get_tenant(session: Session, tenant_id: int) -> Tenant:
    tenant = tenant_repo.get_by_id(session, tenant_id)
    if not tenant:
        raise NotFoundError("tenant not found")
    return tenant


def get_tenant_by_cnpj(session: Session, cnpj: str) -> Tenant:
    cnpj = _clean(cnpj)
    if not cnpj:
        raise ValidationError("CNPJ is required")
    tenant = tenant_repo.get_by_cnpj(session, cnpj)
    if not tenant:
        raise NotFoundError("tenant not found")
    return tenant


def list_tenants(session: Session) -> list[Tenant]:
    return tenant_repo.list_all(session)


def update_tenant(session: Session, tenant_id: int, **changes) -> Tenant:
    """
    Atualização administrativa. Campos ausentes (None) são mantidos.

    Troca de CNPJ é revalidada quanto à unicidade.
    """
    tenant = get_tenant(session, tenant_id)

    name = changes.get("name")
    cnpj = changes.get("cnpj")
    name, cnpj = _require_name_and_cnpj(
        tenant.name if name is None else name,
        tenant.cnpj if cnpj is None else cnpj,
    )

    if cnpj != tenant.cnpj:
        other = tenant_repo.get_by_cnpj(session, cnpj)
        if other and other.id != tenant.id:
            raise ConflictError("CNPJ already registered")

    tenant.name = name
    tenant.cnpj = cnpj
    if changes.get("email") is not None:
        tenant.email = _clean(changes["email"])
    if changes.get("phone") is not None:
        tenant.phone = _clean(changes["phone"])
    if changes.get("active") is not None:
        tenant.active = bool(changes["active"])

    with transaction(session, conflict_message="CNPJ already registered"):
        tenant_repo.save(session, tenant)
    session.refresh(tenant)
    return tenant


def delete_tenant(session: Session, tenant_id: int) -> None:
    get_tenant(session, tenant_id)
    with transaction(session):
        tenant_repo.soft_delete(session, tenant_id)
    logger.info(f"Tenant removido (id={tenant_id})")
