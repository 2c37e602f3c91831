from typing import Any

from sqlalchemy import update
from sqlmodel import Session, col, select

from app.model.base import utc_now
from app.model.document import Document


def create(session: Session, document: Document) -> Document:
    session.add(document)
    session.flush()
    session.refresh(document)
    return document


def get_by_id(session: Session, *, tenant_id: int, document_id: int) -> Document | None:
    return session.exec(
        select(Document).where(
            Document.tenant_id == tenant_id,
            Document.id == document_id,
            col(Document.deleted_at).is_(None),
        )
    ).first()


def list_by_tenant(
    session: Session, *, tenant_id: int, folder_id: int | None = None
) -> list[Document]:
    """Documentos do tenant (mais recentes primeiro), opcionalmente de uma pasta."""
    query = select(Document).where(
        Document.tenant_id == tenant_id, col(Document.deleted_at).is_(None)
    )
    if folder_id is not None:
        query = query.where(Document.folder_id == folder_id)
    return list(
        session.exec(query.order_by(col(Document.created_at).desc(), col(Document.id).desc())).all()
    )


def update_fields(session: Session, *, tenant_id: int, document_id: int, values: dict[str, Any]) -> int:
    result = session.exec(
        update(Document)
        .where(
            col(Document.tenant_id) == tenant_id,
            col(Document.id) == document_id,
            col(Document.deleted_at).is_(None),
        )
        .values(**values, updated_at=utc_now())
    )
    return result.rowcount


def detach_from_folder(session: Session, *, tenant_id: int, folder_id: int) -> int:
    """Move para a raiz (folder_id=NULL) todos os documentos da pasta."""
    result = session.exec(
        update(Document)
        .where(
            col(Document.tenant_id) == tenant_id,
            col(Document.folder_id) == folder_id,
            col(Document.deleted_at).is_(None),
        )
        .values(folder_id=None, updated_at=utc_now())
    )
    return result.rowcount


def soft_delete(session: Session, *, tenant_id: int, document_id: int) -> int:
    now = utc_now()
    result = session.exec(
        update(Document)
        .where(
            col(Document.tenant_id) == tenant_id,
            col(Document.id) == document_id,
            col(Document.deleted_at).is_(None),
        )
        .values(deleted_at=now, updated_at=now)
    )
    return result.rowcount
