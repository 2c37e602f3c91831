"""Dependencies que expõem os colaboradores guardados em app.state por create_app()."""
from fastapi import Request

from app.config import Settings
from app.services.email_service import EmailSender
from app.storage.client import ObjectStorage


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_storage(request: Request) -> ObjectStorage:
    return request.app.state.storage


def get_email_sender(request: Request) -> EmailSender:
    return request.app.state.email_sender
