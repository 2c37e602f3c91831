from __future__ import annotations

import enum
from datetime import datetime, timedelta

import sqlalchemy as sa
from sqlmodel import Field

from app.model.base import BaseModel, ensure_utc, utc_now
from app.model.user_tenant import UserRole

INVITE_TTL = timedelta(days=7)


class InviteStatus(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    EXPIRED = "expired"
    CANCELLED = "cancelled"


class Invite(BaseModel, table=True):
    """
    Convite para um email entrar em um tenant com um papel.

    Transições: pending -> accepted | cancelled (sem volta).
    "expired" não é gravado: é derivado de now > expires_at na leitura.
    """

    __tablename__ = "invite"

    tenant_id: int = Field(foreign_key="tenant.id", index=True)
    email: str = Field(index=True)
    role: UserRole = Field(
        default=UserRole.MORADOR,
        sa_type=sa.Enum(
            UserRole,
            name="invite_role",
            native_enum=False,
            values_callable=lambda e: [m.value for m in e],
        ),
    )
    token: str = Field(unique=True, index=True)
    status: InviteStatus = Field(
        default=InviteStatus.PENDING,
        sa_type=sa.Enum(
            InviteStatus,
            name="invite_status",
            native_enum=False,
            values_callable=lambda e: [m.value for m in e],
        ),
        index=True,
    )
    invited_by_user_id: int = Field(foreign_key="user.id", index=True)
    accepted_by_user_id: int | None = Field(default=None, foreign_key="user.id", nullable=True)
    expires_at: datetime = Field(sa_type=sa.DateTime(timezone=True), nullable=False)
    accepted_at: datetime | None = Field(default=None, sa_type=sa.DateTime(timezone=True), nullable=True)

    def is_expired(self, now: datetime | None = None) -> bool:
        return (now or utc_now()) > ensure_utc(self.expires_at)

    def is_valid(self, now: datetime | None = None) -> bool:
        return self.status == InviteStatus.PENDING and not self.is_expired(now)

    @property
    def effective_status(self) -> InviteStatus:
        if self.status == InviteStatus.PENDING and self.is_expired():
            return InviteStatus.EXPIRED
        return self.status
