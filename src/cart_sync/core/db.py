"""Factory de sessão do SQLAlchemy 2."""
from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

def create_session_factory(database_url: str, echo: bool = False):
    """Cria SessionFactory síncrona para SQLAlchemy 2.

    SQLite em memória compartilha uma única conexão (StaticPool), senão cada
    sessão enxergaria um banco vazio.

    :param database_url: URL completa do banco (psycopg3 ou sqlite).
    :param echo: loga o SQL emitido.
    :return: sessionmaker configurado.
    """
    url = make_url(database_url)
    kwargs = {}
    if url.get_backend_name() == "sqlite":
        kwargs["connect_args"] = {"check_same_thread": False}
        if url.database in (None, "", ":memory:"):
            kwargs["poolclass"] = StaticPool
    engine = create_engine(url, pool_pre_ping=True, echo=echo, **kwargs)
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)

def create_schema(session_factory) -> None:
    """Cria as tabelas do carrinho no engine da factory (dev/testes)."""
    from ..repo.models import Base
    Base.metadata.create_all(session_factory.kw["bind"])
