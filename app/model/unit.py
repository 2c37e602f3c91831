from decimal import Decimal

import sqlalchemy as sa
from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from app.model.base import BaseModel


class Unit(BaseModel, table=True):
    """Modelo Unit - apartamento/casa de um condomínio."""

    __tablename__ = "unit"

    tenant_id: int = Field(foreign_key="tenant.id", index=True)
    number: str = Field(max_length=50)
    block: str | None = Field(default=None, nullable=True, max_length=50, index=True)
    floor: int | None = Field(default=None, nullable=True)
    area: Decimal | None = Field(default=None, sa_type=sa.Numeric(10, 2), nullable=True)

    owner_name: str | None = Field(default=None, nullable=True)
    owner_email: str | None = Field(default=None, nullable=True)
    owner_phone: str | None = Field(default=None, nullable=True, max_length=20)

    occupied: bool = Field(default=True)
    active: bool = Field(default=True)

    __table_args__ = (
        UniqueConstraint("tenant_id", "number", name="uq_unit_tenant_number"),
    )
