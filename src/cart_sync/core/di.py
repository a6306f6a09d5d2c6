"""Bootstrap do container de DI (kink) para o serviço de carrinho."""
from kink import di
from .settings import Settings
from .logging import configure_logging, get_logger
from .db import create_session_factory, create_schema
from ..ports.interfaces import RemoteStore
from ..repo.store import SqlCartStore

def bootstrap_di(settings: Settings | None = None) -> None:
    settings = settings or Settings()
    configure_logging(settings.log_level)
    di[Settings] = settings
    di["logger"] = get_logger()
    di["session_factory"] = create_session_factory(settings.database_url, echo=settings.database_echo)
    if settings.create_schema:
        create_schema(di["session_factory"])
    di[RemoteStore] = SqlCartStore(di["session_factory"])
