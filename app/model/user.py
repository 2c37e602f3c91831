from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from app.model.base import BaseModel


class User(BaseModel, table=True):
    """
    Modelo User - pessoa com login no sistema.

    Não tem tenant_id: o vínculo com condomínios (e o papel em cada um)
    vive em UserTenant. Nunca é removido fisicamente (apenas deleted_at).
    """

    __tablename__ = "user"

    email: str = Field(index=True)
    password_hash: str
    name: str
    phone: str | None = Field(default=None, nullable=True, max_length=20)
    cpf: str | None = Field(default=None, nullable=True, index=True, max_length=14)
    active: bool = Field(default=True)
    unit_id: int | None = Field(default=None, foreign_key="unit.id", nullable=True, index=True)

    # Email globalmente único (um User pode participar de vários tenants via UserTenant)
    __table_args__ = (
        UniqueConstraint("email", name="uq_user_email"),
    )
