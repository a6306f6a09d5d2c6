"""Provedor de identidade em memória (settable) com notificação de troca."""
from __future__ import annotations
import threading
from typing import Callable, List
from ..core.logging import get_logger
from ..ports.interfaces import Identity, IdentityListener

log = get_logger()

class InMemoryIdentityProvider:
    """Guarda a identidade corrente e avisa os assinantes quando ela muda."""
    def __init__(self, identity: Identity | None = None):
        self._identity = identity
        self._listeners: List[IdentityListener] = []
        self._lock = threading.Lock()

    def current_identity(self) -> Identity | None:
        return self._identity

    def subscribe(self, listener: IdentityListener) -> Callable[[], None]:
        """Registra listener; retorna função para cancelar a assinatura."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)
        return unsubscribe

    def set_identity(self, identity: Identity | None) -> None:
        """Troca a identidade (login/logout) e notifica só se mudou."""
        if identity == self._identity:
            return
        self._identity = identity
        log.info("identity_changed", auth_id=(identity.id if identity else None))
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            listener(identity)

    def sign_out(self) -> None:
        self.set_identity(None)
