"""Envelope de resposta e modelos compartilhados entre os routers."""
from datetime import datetime
from typing import Generic, TypeVar

from pydantic import BaseModel as PydanticBaseModel

T = TypeVar("T")


class DataResponse(PydanticBaseModel, Generic[T]):
    data: T


class MessageResponse(PydanticBaseModel):
    message: str


class UserResponse(PydanticBaseModel):
    """Usuário sem hash de senha."""

    id: int
    email: str
    name: str
    phone: str | None = None
    cpf: str | None = None
    active: bool
    unit_id: int | None = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
