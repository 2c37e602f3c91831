from sqlmodel import Field

from app.model.base import BaseModel


class Document(BaseModel, table=True):
    """Modelo Document - metadados de arquivos armazenados no MinIO/S3."""

    __tablename__ = "document"

    tenant_id: int = Field(foreign_key="tenant.id", index=True)
    # NULL = raiz. Excluir a pasta desvincula o documento (não o exclui).
    folder_id: int | None = Field(default=None, foreign_key="folder.id", nullable=True, index=True)
    name: str = Field(max_length=255)
    original_name: str = Field(max_length=255)
    content_type: str = Field(max_length=100)
    size: int  # Tamanho em bytes
    s3_key: str = Field(unique=True, max_length=500)
    uploaded_by_id: int = Field(foreign_key="user.id", index=True)
