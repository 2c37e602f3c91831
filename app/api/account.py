from fastapi import APIRouter, Depends
from pydantic import BaseModel as PydanticBaseModel, Field
from sqlmodel import Session

from app.api.schema import DataResponse, MessageResponse, UserResponse
from app.auth.dependencies import get_current_user
from app.db.session import get_session
from app.model.user import User
from app.services import user_service

router = APIRouter(prefix="/account", tags=["Account"])


class AccountUpdate(PydanticBaseModel):
    name: str | None = None
    phone: str | None = Field(default=None, max_length=user_service.MAX_PHONE_LENGTH)


class PasswordUpdate(PydanticBaseModel):
    old_password: str
    new_password: str


@router.get("", response_model=DataResponse[UserResponse])
def get_account(user: User = Depends(get_current_user)):
    """Dados do próprio usuário (não exige tenant ativo)."""
    return DataResponse(data=UserResponse.model_validate(user))


@router.patch("", response_model=DataResponse[UserResponse])
def update_account(
    body: AccountUpdate,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    updated = user_service.update_profile(session, user.id, name=body.name, phone=body.phone)
    return DataResponse(data=UserResponse.model_validate(updated))


@router.patch("/password", response_model=MessageResponse)
def update_password(
    body: PasswordUpdate,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    user_service.update_password(
        session, user.id, old_password=body.old_password, new_password=body.new_password
    )
    return MessageResponse(message="password updated successfully")
