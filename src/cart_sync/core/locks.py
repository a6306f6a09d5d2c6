"""Serialização por perfil (lock local, em processo).

Mutações do mesmo perfil (resolve -> muta -> reload) rodam uma de cada vez,
evitando duas inserções concorrentes de "primeiro add". Entre processos a
garantia vem das constraints de unicidade do store.

Cada entrada guarda [lock, referências]; sai do mapa quando o último usuário
libera, então o mapa só contém perfis com mutação em andamento.
"""
from __future__ import annotations
import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List
from .logging import get_logger

log = get_logger()

_guard = threading.Lock()
_locks: Dict[str, List] = {}

def _acquire_ref(profile_id: str) -> threading.RLock:
    with _guard:
        entry = _locks.get(profile_id)
        if entry is None:
            entry = _locks[profile_id] = [threading.RLock(), 0]
        entry[1] += 1
        return entry[0]

def _release_ref(profile_id: str) -> None:
    with _guard:
        entry = _locks[profile_id]
        entry[1] -= 1
        if entry[1] == 0:
            del _locks[profile_id]

@contextmanager
def profile_lock(profile_id: str) -> Iterator[None]:
    """Segura o lock do perfil durante o bloco (reentrante na mesma thread)."""
    lock = _acquire_ref(profile_id)
    try:
        if not lock.acquire(blocking=False):
            log.info("profile_lock_wait", profile_id=profile_id)
            lock.acquire()
        try:
            yield
        finally:
            lock.release()
    finally:
        _release_ref(profile_id)
