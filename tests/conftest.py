"""
Fixtures compartilhadas.

Banco SQLite em memória (StaticPool: uma conexão para a sessão do teste e
para as requests do TestClient), storage em memória e sender de email que
apenas registra as mensagens.
"""
import bcrypt
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

import app.model  # noqa: F401
from app.config import EmailConfig, JWTConfig, Settings
from app.main import create_app
from app.storage.client import StorageError

_real_gensalt = bcrypt.gensalt


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch):
    """12 rounds deixam a suíte lenta; o custo não muda o comportamento testado."""
    monkeypatch.setattr(bcrypt, "gensalt", lambda rounds=12, prefix=b"2b": _real_gensalt(4, prefix))


class FakeStorage:
    """Object storage em memória."""

    def __init__(self):
        self.objects: dict[str, bytes] = {}
        self.content_types: dict[str, str] = {}
        self.deleted: list[str] = []
        self.fail_put = False
        self.fail_delete = False

    def put(self, key: str, data: bytes, content_type: str, size: int) -> None:
        if self.fail_put:
            raise StorageError("put failed")
        self.objects[key] = data
        self.content_types[key] = content_type

    def delete(self, key: str) -> None:
        if self.fail_delete:
            raise StorageError("delete failed")
        self.objects.pop(key, None)
        self.deleted.append(key)

    def presign_get(self, key: str, expiration: int) -> str:
        return f"https://storage.test/{key}?expires={expiration}"


class RecordingEmailSender:
    def __init__(self):
        self.sent: list[dict] = []
        self.fail = False

    def send(self, to: str, subject: str, html_body: str) -> None:
        if self.fail:
            raise RuntimeError("smtp down")
        self.sent.append({"to": to, "subject": subject, "html": html_body})


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def settings():
    return Settings(
        jwt=JWTConfig(secret="test-secret", expiration_hours=1, issuer="habitta-test"),
        env="development",
        email=EmailConfig(app_base_url="http://app.test"),
    )


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def email_sender():
    return RecordingEmailSender()


@pytest.fixture
def client(engine, settings, storage, email_sender):
    app = create_app(settings, engine=engine, storage=storage, email_sender=email_sender)
    with TestClient(app) as test_client:
        yield test_client

