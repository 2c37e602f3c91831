from sqlmodel import Field

from app.model.base import BaseModel


class Folder(BaseModel, table=True):
    """Modelo Folder - pasta de documentos de um condomínio."""

    __tablename__ = "folder"

    tenant_id: int = Field(foreign_key="tenant.id", index=True)
    name: str = Field(max_length=100)
    description: str | None = Field(default=None, nullable=True, max_length=500)
