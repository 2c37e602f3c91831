"""S3Client com o cliente boto3 real, falhas simuladas nas chamadas ao S3."""
import pytest
from boto3.exceptions import S3UploadFailedError
from botocore.exceptions import ClientError, EndpointConnectionError
from sqlalchemy.exc import OperationalError

from app.config import StorageConfig
from app.errors import InternalError
from app.services import document_service
from app.storage.client import S3Client, StorageError
from tests.factories import make_tenant, make_user

UNREACHABLE = "http://127.0.0.1:1"


def _unreachable(*args, **kwargs):
    raise EndpointConnectionError(endpoint_url=UNREACHABLE)


@pytest.fixture
def s3():
    return S3Client(StorageConfig(endpoint_url=UNREACHABLE, bucket_name="habitta-test"))


@pytest.fixture
def owner(session):
    return make_user(session, "owner@example.com")


@pytest.fixture
def tenant(session, owner):
    return make_tenant(session, owner)


def _upload(session, storage, tenant, owner):
    return document_service.upload_document(
        session,
        storage,
        tenant_id=tenant.id,
        uploaded_by_id=owner.id,
        filename="ata.pdf",
        content=b"%PDF-1.4 ata",
        content_type="application/pdf",
    )


def test_unreachable_endpoint_becomes_internal_error(session, s3, tenant, owner, monkeypatch):
    monkeypatch.setattr(s3._client, "head_bucket", _unreachable)

    with pytest.raises(InternalError) as exc:
        _upload(session, s3, tenant, owner)
    assert exc.value.message == "failed to upload file"
    assert isinstance(exc.value.__cause__, StorageError)
    assert document_service.list_documents(session, tenant_id=tenant.id) == []


def test_managed_upload_failure_becomes_internal_error(session, s3, tenant, owner, monkeypatch):
    def failed_upload(*args, **kwargs):
        raise S3UploadFailedError("Failed to upload: AccessDenied")

    monkeypatch.setattr(s3._client, "head_bucket", lambda **kwargs: {})
    monkeypatch.setattr(s3._client, "upload_fileobj", failed_upload)

    with pytest.raises(InternalError) as exc:
        _upload(session, s3, tenant, owner)
    assert exc.value.message == "failed to upload file"


def test_cleanup_transport_error_keeps_original_failure(session, s3, tenant, owner, monkeypatch):
    def broken_create(session, document):
        raise OperationalError("INSERT", {}, Exception("db down"))

    monkeypatch.setattr(s3._client, "head_bucket", lambda **kwargs: {})
    monkeypatch.setattr(s3._client, "upload_fileobj", lambda *args, **kwargs: None)
    monkeypatch.setattr(s3._client, "delete_object", _unreachable)
    monkeypatch.setattr("app.services.document_service.document_repo.create", broken_create)

    with pytest.raises(InternalError) as exc:
        _upload(session, s3, tenant, owner)
    assert exc.value.message == "failed to save document"
    assert isinstance(exc.value.__cause__, OperationalError)


def test_adapter_methods_raise_storage_error(s3, monkeypatch):
    def denied(*args, **kwargs):
        raise ClientError({"Error": {"Code": "AccessDenied", "Message": "denied"}}, "DeleteObject")

    monkeypatch.setattr(s3._client, "delete_object", denied)
    monkeypatch.setattr(s3._client, "generate_presigned_url", _unreachable)

    with pytest.raises(StorageError):
        s3.delete("tenants/1/documents/x/ata.pdf")
    with pytest.raises(StorageError):
        s3.presign_get("tenants/1/documents/x/ata.pdf", 900)


def test_missing_bucket_is_created_once(s3, monkeypatch):
    calls = []

    def missing(**kwargs):
        raise ClientError({"Error": {"Code": "404", "Message": "Not Found"}}, "HeadBucket")

    monkeypatch.setattr(s3._client, "head_bucket", missing)
    monkeypatch.setattr(s3._client, "create_bucket", lambda **kwargs: calls.append(kwargs))

    s3.ensure_bucket_exists()
    s3.ensure_bucket_exists()
    assert calls == [{"Bucket": "habitta-test"}]
