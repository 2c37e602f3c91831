import logging

from sqlmodel import Session

from app.db.session import transaction
from app.errors import ConflictError, NotFoundError, ValidationError
from app.model.folder import Folder
from app.repository import document as document_repo
from app.repository import folder as folder_repo

logger = logging.getLogger(__name__)

NAME_CONFLICT = "folder name already exists for this tenant"


def create_folder(session: Session, *, tenant_id: int, name: str, description: str | None = None) -> Folder:
    name = (name or "").strip()
    if not name:
        raise ValidationError("folder name is required")
    if folder_repo.get_by_name(session, tenant_id=tenant_id, name=name):
        raise ConflictError(NAME_CONFLICT)

    with transaction(session, conflict_message=NAME_CONFLICT):
        folder = folder_repo.create(
            session,
            Folder(tenant_id=tenant_id, name=name, description=(description or "").strip() or None),
        )
    session.refresh(folder)
    return folder


def get_folder(session: Session, *, tenant_id: int, folder_id: int) -> Folder:
    folder = folder_repo.get_by_id(session, tenant_id=tenant_id, folder_id=folder_id)
    if not folder:
        raise NotFoundError("folder not found")
    return folder


def list_folders(session: Session, *, tenant_id: int) -> list[Folder]:
    return folder_repo.list_by_tenant(session, tenant_id=tenant_id)


def update_folder(
    session: Session,
    *,
    tenant_id: int,
    folder_id: int,
    name: str | None = None,
    description: str | None = None,
) -> Folder:
    folder = get_folder(session, tenant_id=tenant_id, folder_id=folder_id)

    values = {}
    if name is not None:
        name = name.strip()
        if not name:
            raise ValidationError("folder name is required")
        if name != folder.name:
            other = folder_repo.get_by_name(session, tenant_id=tenant_id, name=name)
            if other and other.id != folder.id:
                raise ConflictError(NAME_CONFLICT)
        values["name"] = name
    if description is not None:
        values["description"] = description.strip() or None

    if values:
        with transaction(session, conflict_message=NAME_CONFLICT):
            folder_repo.update_fields(session, tenant_id=tenant_id, folder_id=folder_id, values=values)
        session.refresh(folder)
    return folder


def delete_folder(session: Session, *, tenant_id: int, folder_id: int) -> None:
    """Remove a pasta; os documentos dela vão para a raiz (não são excluídos)."""
    get_folder(session, tenant_id=tenant_id, folder_id=folder_id)
    with transaction(session):
        detached = document_repo.detach_from_folder(session, tenant_id=tenant_id, folder_id=folder_id)
        folder_repo.soft_delete(session, tenant_id=tenant_id, folder_id=folder_id)
    logger.info(f"Pasta removida (id={folder_id}, tenant_id={tenant_id}, documentos movidos para a raiz: {detached})")
