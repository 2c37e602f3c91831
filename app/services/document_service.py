"""
Documentos: metadados no banco, conteúdo no object storage (S3/MinIO).
"""
import logging
import os
import uuid
from dataclasses import dataclass

from sqlmodel import Session

from app.db.session import transaction
from app.errors import InternalError, NotFoundError, ValidationError
from app.model.document import Document
from app.repository import document as document_repo
from app.repository import folder as folder_repo
from app.storage.client import ObjectStorage, StorageError

logger = logging.getLogger(__name__)

MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB
DOWNLOAD_URL_TTL_SECONDS = 15 * 60
DEFAULT_CONTENT_TYPE = "application/octet-stream"


@dataclass(frozen=True)
class DownloadLink:
    url: str
    expires_in: int
    filename: str


def _safe_filename(filename: str) -> str:
    # Remove diretórios e caracteres problemáticos para a chave S3
    name = os.path.basename((filename or "").replace("\\", "/")).strip()
    name = name.replace(" ", "_")
    return name or "arquivo"


def generate_s3_key(tenant_id: int, filename: str) -> str:
    """
    Gera chave S3 seguindo padrão: tenants/{tenant_id}/documents/{uuid}/{filename}

    O prefixo por tenant isola os arquivos; o UUID evita colisões.
    """
    return f"tenants/{tenant_id}/documents/{uuid.uuid4()}/{_safe_filename(filename)}"


def _ensure_folder(session: Session, tenant_id: int, folder_id: int | None, message: str) -> None:
    if folder_id is not None and not folder_repo.get_by_id(session, tenant_id=tenant_id, folder_id=folder_id):
        raise NotFoundError(message)


def upload_document(
    session: Session,
    storage: ObjectStorage,
    *,
    tenant_id: int,
    uploaded_by_id: int,
    filename: str,
    content: bytes,
    content_type: str | None = None,
    folder_id: int | None = None,
    name: str | None = None,
) -> Document:
    """
    Faz upload do arquivo e cria o registro Document.

    Ordem: valida -> envia o blob -> grava metadados. Se a gravação falhar,
    tenta excluir o blob (best-effort, sem garantia).
    """
    size = len(content)
    if size > MAX_FILE_SIZE:
        raise ValidationError("file size exceeds maximum of 10MB")
    if size == 0:
        raise ValidationError("file is empty")
    _ensure_folder(session, tenant_id, folder_id, "folder not found")

    original_name = os.path.basename((filename or "").replace("\\", "/")).strip() or "arquivo"
    content_type = content_type or DEFAULT_CONTENT_TYPE
    s3_key = generate_s3_key(tenant_id, original_name)

    try:
        storage.put(s3_key, content, content_type, size)
    except StorageError as e:
        logger.error(f"Falha no upload para o storage (tenant_id={tenant_id}, key={s3_key}): {e}")
        raise InternalError("failed to upload file") from e

    try:
        with transaction(session):
            document = document_repo.create(
                session,
                Document(
                    tenant_id=tenant_id,
                    folder_id=folder_id,
                    name=(name or "").strip() or original_name,
                    original_name=original_name,
                    content_type=content_type,
                    size=size,
                    s3_key=s3_key,
                    uploaded_by_id=uploaded_by_id,
                ),
            )
    except Exception as db_error:
        logger.error(f"Erro ao salvar documento no banco (key={s3_key}): {db_error}", exc_info=True)
        try:
            storage.delete(s3_key)
        except StorageError as cleanup_error:
            logger.warning(f"Blob órfão no storage (key={s3_key}): {cleanup_error}")
        raise InternalError("failed to save document") from db_error

    session.refresh(document)
    logger.info(f"Documento enviado (id={document.id}, tenant_id={tenant_id}, size={size})")
    return document


def get_document(session: Session, *, tenant_id: int, document_id: int) -> Document:
    document = document_repo.get_by_id(session, tenant_id=tenant_id, document_id=document_id)
    if not document:
        raise NotFoundError("document not found")
    return document


def list_documents(session: Session, *, tenant_id: int, folder_id: int | None = None) -> list[Document]:
    return document_repo.list_by_tenant(session, tenant_id=tenant_id, folder_id=folder_id)


def get_download_url(
    session: Session, storage: ObjectStorage, *, tenant_id: int, document_id: int
) -> DownloadLink:
    document = get_document(session, tenant_id=tenant_id, document_id=document_id)
    try:
        url = storage.presign_get(document.s3_key, DOWNLOAD_URL_TTL_SECONDS)
    except StorageError as e:
        raise InternalError("failed to generate download URL") from e
    return DownloadLink(url=url, expires_in=DOWNLOAD_URL_TTL_SECONDS, filename=document.original_name)


def delete_document(session: Session, storage: ObjectStorage, *, tenant_id: int, document_id: int) -> None:
    """Exclui o blob e depois o registro; falha no storage mantém o registro."""
    document = get_document(session, tenant_id=tenant_id, document_id=document_id)
    try:
        storage.delete(document.s3_key)
    except StorageError as e:
        logger.error(f"Falha ao excluir blob (key={document.s3_key}): {e}")
        raise InternalError("failed to delete file from storage") from e

    with transaction(session):
        document_repo.soft_delete(session, tenant_id=tenant_id, document_id=document_id)
    logger.info(f"Documento removido (id={document_id}, tenant_id={tenant_id})")


def move_document(
    session: Session, *, tenant_id: int, document_id: int, folder_id: int | None
) -> Document:
    """Move o documento para outra pasta do tenant (None = raiz)."""
    document = get_document(session, tenant_id=tenant_id, document_id=document_id)
    _ensure_folder(session, tenant_id, folder_id, "target folder not found")

    with transaction(session):
        document_repo.update_fields(
            session, tenant_id=tenant_id, document_id=document_id, values={"folder_id": folder_id}
        )
    session.refresh(document)
    return document
