from typing import Any

from sqlalchemy import update
from sqlmodel import Session, col, select

from app.model.base import utc_now
from app.model.folder import Folder


def create(session: Session, folder: Folder) -> Folder:
    session.add(folder)
    session.flush()
    session.refresh(folder)
    return folder


def get_by_id(session: Session, *, tenant_id: int, folder_id: int) -> Folder | None:
    return session.exec(
        select(Folder).where(
            Folder.tenant_id == tenant_id,
            Folder.id == folder_id,
            col(Folder.deleted_at).is_(None),
        )
    ).first()


def get_by_name(session: Session, *, tenant_id: int, name: str) -> Folder | None:
    return session.exec(
        select(Folder).where(
            Folder.tenant_id == tenant_id,
            Folder.name == name,
            col(Folder.deleted_at).is_(None),
        )
    ).first()


def list_by_tenant(session: Session, *, tenant_id: int) -> list[Folder]:
    return list(
        session.exec(
            select(Folder)
            .where(Folder.tenant_id == tenant_id, col(Folder.deleted_at).is_(None))
            .order_by(col(Folder.name))
        ).all()
    )


def update_fields(session: Session, *, tenant_id: int, folder_id: int, values: dict[str, Any]) -> int:
    result = session.exec(
        update(Folder)
        .where(
            col(Folder.tenant_id) == tenant_id,
            col(Folder.id) == folder_id,
            col(Folder.deleted_at).is_(None),
        )
        .values(**values, updated_at=utc_now())
    )
    return result.rowcount


def soft_delete(session: Session, *, tenant_id: int, folder_id: int) -> int:
    now = utc_now()
    result = session.exec(
        update(Folder)
        .where(
            col(Folder.tenant_id) == tenant_id,
            col(Folder.id) == folder_id,
            col(Folder.deleted_at).is_(None),
        )
        .values(deleted_at=now, updated_at=now)
    )
    return result.rowcount
