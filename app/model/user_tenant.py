from __future__ import annotations

import enum
from datetime import datetime

import sqlalchemy as sa
from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from app.model.base import BaseModel, utc_now


class UserRole(str, enum.Enum):
    ADMIN = "admin"
    SINDICO = "sindico"
    MORADOR = "morador"


# Papéis que administram um condomínio (convidar, cancelar convites, gerenciar membros).
MANAGER_ROLES = frozenset({UserRole.ADMIN, UserRole.SINDICO})


class UserTenant(BaseModel, table=True):
    """
    Vínculo User ↔ Tenant.

    Observações:
      - `role` vive aqui (não no User): um User tem no máximo um papel por tenant.
      - Revogar acesso = is_active=False (preserva histórico).
      - Remoção do tenant apaga a linha fisicamente.
    """

    __tablename__ = "user_tenant"

    user_id: int = Field(foreign_key="user.id", index=True)
    tenant_id: int = Field(foreign_key="tenant.id", index=True)

    # Persistir enums pelos *values* ("sindico", "morador", ...).
    role: UserRole = Field(
        default=UserRole.MORADOR,
        sa_type=sa.Enum(
            UserRole,
            name="user_role",
            native_enum=False,
            values_callable=lambda e: [m.value for m in e],
        ),
        index=True,
    )
    is_active: bool = Field(default=True, index=True)
    joined_at: datetime = Field(
        default_factory=utc_now,
        sa_type=sa.DateTime(timezone=True),
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint("user_id", "tenant_id", name="uq_user_tenant_user_tenant"),
    )

    @property
    def can_manage(self) -> bool:
        return self.role in MANAGER_ROLES
