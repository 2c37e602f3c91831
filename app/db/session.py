import logging
from contextlib import contextmanager
from typing import Generator

from fastapi import Request
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlmodel import SQLModel, Session, create_engine

# Importa todos os modelos para que o SQLModel os registre
import app.model  # noqa: F401
from app.errors import ConflictError

logger = logging.getLogger(__name__)


def build_engine(database_url: str, *, echo: bool = False) -> Engine:
    """Cria o engine a partir da URL configurada (psycopg3 em produção)."""
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(database_url, echo=echo, connect_args=connect_args, pool_pre_ping=True)


def get_session(request: Request) -> Generator[Session, None, None]:
    """Dependency do FastAPI para obter sessão do banco (engine em app.state)."""
    with Session(request.app.state.engine) as session:
        yield session


@contextmanager
def transaction(session: Session, *, conflict_message: str = "resource already exists") -> Generator[Session, None, None]:
    """
    Unidade de trabalho: commit no fim do bloco, rollback em qualquer erro.

    IntegrityError (violação de unique key no commit, ex.: dois aceites
    concorrentes do mesmo convite) vira ConflictError.
    """
    try:
        yield session
        session.commit()
    except IntegrityError as e:
        session.rollback()
        logger.warning(f"Violação de integridade: {e.orig}")
        raise ConflictError(conflict_message) from e
    except Exception:
        session.rollback()
        raise


def create_tables(engine: Engine) -> None:
    """Cria todas as tabelas (útil para testes e ambiente local)."""
    SQLModel.metadata.create_all(engine)
