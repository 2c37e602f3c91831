from datetime import datetime

from fastapi import APIRouter, Depends, File as FastAPIFile, Form, Query, UploadFile, status
from pydantic import BaseModel as PydanticBaseModel
from sqlmodel import Session

from app.api.deps import get_storage
from app.api.schema import DataResponse, MessageResponse
from app.auth.dependencies import require_active_tenant
from app.auth.jwt import TokenClaims
from app.db.session import get_session
from app.services import document_service, folder_service
from app.storage.client import ObjectStorage

router = APIRouter(tags=["Document"])


class FolderCreate(PydanticBaseModel):
    name: str
    description: str | None = None


class FolderUpdate(PydanticBaseModel):
    name: str | None = None
    description: str | None = None


class FolderResponse(PydanticBaseModel):
    id: int
    tenant_id: int
    name: str
    description: str | None = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class DocumentResponse(PydanticBaseModel):
    id: int
    tenant_id: int
    folder_id: int | None = None
    name: str
    original_name: str
    content_type: str
    size: int
    uploaded_by_id: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class DocumentMove(PydanticBaseModel):
    # null = mover para a raiz
    folder_id: int | None = None


class DownloadResponse(PydanticBaseModel):
    url: str
    expires_in: int
    filename: str

    class Config:
        from_attributes = True


# Pastas


@router.post("/folders", response_model=DataResponse[FolderResponse], status_code=status.HTTP_201_CREATED)
def create_folder(
    body: FolderCreate,
    claims: TokenClaims = Depends(require_active_tenant),
    session: Session = Depends(get_session),
):
    folder = folder_service.create_folder(
        session, tenant_id=claims.active_tenant_id, name=body.name, description=body.description
    )
    return DataResponse(data=FolderResponse.model_validate(folder))


@router.get("/folders", response_model=DataResponse[list[FolderResponse]])
def list_folders(
    claims: TokenClaims = Depends(require_active_tenant),
    session: Session = Depends(get_session),
):
    folders = folder_service.list_folders(session, tenant_id=claims.active_tenant_id)
    return DataResponse(data=[FolderResponse.model_validate(f) for f in folders])


@router.get("/folders/{folder_id}", response_model=DataResponse[FolderResponse])
def get_folder(
    folder_id: int,
    claims: TokenClaims = Depends(require_active_tenant),
    session: Session = Depends(get_session),
):
    folder = folder_service.get_folder(session, tenant_id=claims.active_tenant_id, folder_id=folder_id)
    return DataResponse(data=FolderResponse.model_validate(folder))


@router.put("/folders/{folder_id}", response_model=DataResponse[FolderResponse])
def update_folder(
    folder_id: int,
    body: FolderUpdate,
    claims: TokenClaims = Depends(require_active_tenant),
    session: Session = Depends(get_session),
):
    folder = folder_service.update_folder(
        session,
        tenant_id=claims.active_tenant_id,
        folder_id=folder_id,
        name=body.name,
        description=body.description,
    )
    return DataResponse(data=FolderResponse.model_validate(folder))


@router.delete("/folders/{folder_id}", response_model=MessageResponse)
def delete_folder(
    folder_id: int,
    claims: TokenClaims = Depends(require_active_tenant),
    session: Session = Depends(get_session),
):
    """Exclui a pasta; os documentos dela vão para a raiz."""
    folder_service.delete_folder(session, tenant_id=claims.active_tenant_id, folder_id=folder_id)
    return MessageResponse(message="folder deleted successfully")


# Documentos


@router.post("/documents/upload", response_model=DataResponse[DocumentResponse], status_code=status.HTTP_201_CREATED)
def upload_document(
    file: UploadFile = FastAPIFile(...),
    folder_id: int | None = Form(None),
    name: str | None = Form(None),
    claims: TokenClaims = Depends(require_active_tenant),
    session: Session = Depends(get_session),
    storage: ObjectStorage = Depends(get_storage),
):
    """Upload multipart (máximo 10MB)."""
    # Lê no máximo 1 byte além do limite: o service rejeita pelo tamanho.
    content = file.file.read(document_service.MAX_FILE_SIZE + 1)
    document = document_service.upload_document(
        session,
        storage,
        tenant_id=claims.active_tenant_id,
        uploaded_by_id=claims.user_id,
        filename=file.filename or "",
        content=content,
        content_type=file.content_type,
        folder_id=folder_id,
        name=name,
    )
    return DataResponse(data=DocumentResponse.model_validate(document))


@router.get("/documents", response_model=DataResponse[list[DocumentResponse]])
def list_documents(
    folder_id: int | None = Query(None),
    claims: TokenClaims = Depends(require_active_tenant),
    session: Session = Depends(get_session),
):
    documents = document_service.list_documents(session, tenant_id=claims.active_tenant_id, folder_id=folder_id)
    return DataResponse(data=[DocumentResponse.model_validate(d) for d in documents])


@router.get("/documents/{document_id}", response_model=DataResponse[DocumentResponse])
def get_document(
    document_id: int,
    claims: TokenClaims = Depends(require_active_tenant),
    session: Session = Depends(get_session),
):
    document = document_service.get_document(session, tenant_id=claims.active_tenant_id, document_id=document_id)
    return DataResponse(data=DocumentResponse.model_validate(document))


@router.get("/documents/{document_id}/download", response_model=DataResponse[DownloadResponse])
def get_download_url(
    document_id: int,
    claims: TokenClaims = Depends(require_active_tenant),
    session: Session = Depends(get_session),
    storage: ObjectStorage = Depends(get_storage),
):
    """URL presignada válida por 15 minutos."""
    link = document_service.get_download_url(
        session, storage, tenant_id=claims.active_tenant_id, document_id=document_id
    )
    return DataResponse(data=DownloadResponse.model_validate(link))


@router.delete("/documents/{document_id}", response_model=MessageResponse)
def delete_document(
    document_id: int,
    claims: TokenClaims = Depends(require_active_tenant),
    session: Session = Depends(get_session),
    storage: ObjectStorage = Depends(get_storage),
):
    document_service.delete_document(session, storage, tenant_id=claims.active_tenant_id, document_id=document_id)
    return MessageResponse(message="document deleted successfully")


@router.patch("/documents/{document_id}/move", response_model=DataResponse[DocumentResponse])
def move_document(
    document_id: int,
    body: DocumentMove,
    claims: TokenClaims = Depends(require_active_tenant),
    session: Session = Depends(get_session),
):
    document = document_service.move_document(
        session, tenant_id=claims.active_tenant_id, document_id=document_id, folder_id=body.folder_id
    )
    return DataResponse(data=DocumentResponse.model_validate(document))
