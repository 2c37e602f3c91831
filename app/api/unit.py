from datetime import datetime
from decimal import Decimal

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel as PydanticBaseModel
from sqlmodel import Session

from app.api.schema import DataResponse, MessageResponse
from app.auth.dependencies import require_active_tenant
from app.auth.jwt import TokenClaims
from app.db.session import get_session
from app.services import unit_service

router = APIRouter(prefix="/units", tags=["Unit"])


class UnitCreate(PydanticBaseModel):
    number: str
    block: str | None = None
    floor: int | None = None
    area: Decimal | None = None
    owner_name: str | None = None
    owner_email: str | None = None
    owner_phone: str | None = None
    occupied: bool = True
    active: bool = True


class UnitUpdate(PydanticBaseModel):
    number: str | None = None
    block: str | None = None
    floor: int | None = None
    area: Decimal | None = None
    owner_name: str | None = None
    owner_email: str | None = None
    owner_phone: str | None = None
    occupied: bool | None = None
    active: bool | None = None


class UnitResponse(PydanticBaseModel):
    id: int
    tenant_id: int
    number: str
    block: str | None = None
    floor: int | None = None
    area: Decimal | None = None
    owner_name: str | None = None
    owner_email: str | None = None
    owner_phone: str | None = None
    occupied: bool
    active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


@router.post("", response_model=DataResponse[UnitResponse], status_code=status.HTTP_201_CREATED)
def create_unit(
    body: UnitCreate,
    claims: TokenClaims = Depends(require_active_tenant),
    session: Session = Depends(get_session),
):
    # tenant_id sempre do token, nunca do corpo
    unit = unit_service.create_unit(session, tenant_id=claims.active_tenant_id, **body.model_dump())
    return DataResponse(data=UnitResponse.model_validate(unit))


@router.get("", response_model=DataResponse[list[UnitResponse]])
def list_units(
    block: str | None = Query(None),
    claims: TokenClaims = Depends(require_active_tenant),
    session: Session = Depends(get_session),
):
    units = unit_service.list_units(session, tenant_id=claims.active_tenant_id, block=block)
    return DataResponse(data=[UnitResponse.model_validate(u) for u in units])


@router.get("/number/{number}", response_model=DataResponse[UnitResponse])
def get_unit_by_number(
    number: str,
    claims: TokenClaims = Depends(require_active_tenant),
    session: Session = Depends(get_session),
):
    unit = unit_service.get_unit_by_number(session, tenant_id=claims.active_tenant_id, number=number)
    return DataResponse(data=UnitResponse.model_validate(unit))


@router.get("/{unit_id}", response_model=DataResponse[UnitResponse])
def get_unit(
    unit_id: int,
    claims: TokenClaims = Depends(require_active_tenant),
    session: Session = Depends(get_session),
):
    unit = unit_service.get_unit(session, tenant_id=claims.active_tenant_id, unit_id=unit_id)
    return DataResponse(data=UnitResponse.model_validate(unit))


@router.put("/{unit_id}", response_model=DataResponse[UnitResponse])
def update_unit(
    unit_id: int,
    body: UnitUpdate,
    claims: TokenClaims = Depends(require_active_tenant),
    session: Session = Depends(get_session),
):
    unit = unit_service.update_unit(
        session,
        tenant_id=claims.active_tenant_id,
        unit_id=unit_id,
        **body.model_dump(exclude_unset=True),
    )
    return DataResponse(data=UnitResponse.model_validate(unit))


@router.delete("/{unit_id}", response_model=MessageResponse)
def delete_unit(
    unit_id: int,
    claims: TokenClaims = Depends(require_active_tenant),
    session: Session = Depends(get_session),
):
    unit_service.delete_unit(session, tenant_id=claims.active_tenant_id, unit_id=unit_id)
    return MessageResponse(message="unit deleted successfully")
