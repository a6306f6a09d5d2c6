"""Taxonomia de erros do carrinho.

- NotFound: perfil/carrinho ausente; não fatal, a operação aborta em silêncio.
- CartUnavailable: falha ao criar o carrinho; propagado ao chamador.
- PersistenceError: falha de leitura/escrita no store; logado e relançado.
- Unauthenticated: sem identidade; mutações rejeitam antes de qualquer I/O.
"""
from __future__ import annotations

class CartError(Exception):
    """Base de todos os erros do carrinho."""

class NotFound(CartError):
    """Registro esperado não existe no store."""

class ProfileNotFound(NotFound):
    def __init__(self, auth_id: str):
        super().__init__(f"perfil não encontrado para auth_id={auth_id}")
        self.auth_id = auth_id

class CartUnavailable(CartError):
    """Não foi possível obter nem criar o carrinho do perfil."""

class PersistenceError(CartError):
    """Falha de I/O contra o store remoto."""

class StoreConflict(PersistenceError):
    """Violação de unicidade no store (corrida de inserção)."""

class Unauthenticated(CartError):
    def __init__(self, message: str = "Entre na sua conta para alterar o carrinho"):
        super().__init__(message)

class InvalidQuantity(CartError, ValueError):
    def __init__(self, quantity: int):
        super().__init__(f"quantidade inválida: {quantity} (precisa ser > 0)")
        self.quantity = quantity
