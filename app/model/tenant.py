from sqlmodel import Field

from app.model.base import BaseModel


class Tenant(BaseModel, table=True):
    """Modelo Tenant - condomínio, raiz do multi-tenant (não tem tenant_id)."""

    __tablename__ = "tenant"

    name: str = Field(index=True)
    cnpj: str = Field(unique=True, index=True, max_length=18)
    email: str | None = Field(default=None, nullable=True)
    phone: str | None = Field(default=None, nullable=True, max_length=20)
    active: bool = Field(default=True)
