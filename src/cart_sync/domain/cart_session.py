"""Sessão de carrinho: snapshot em memória sempre reconstruído do store.

Toda mutação segue resolve perfil -> resolve carrinho -> uma escrita -> reload.
O snapshot é uma tupla trocada de uma vez; nunca é remendado localmente.
"""
from __future__ import annotations
from decimal import Decimal
from typing import Callable, Tuple
from kink import di
from ..core.errors import CartError, CartUnavailable, InvalidQuantity, NotFound, PersistenceError, Unauthenticated
from ..core.locks import profile_lock
from ..core.logging import get_logger
from ..ports.interfaces import Identity, IdentityProvider, LineItem, ProductDetails, RemoteStore
from .services import cart_service, totals

log = get_logger()

class CartSession:
    """Contexto de carrinho de uma sessão (uma identidade por vez).

    Expõe `cart_items`, `cart_count`, `loading`, as operações de mutação e
    `get_cart_total()`. Várias sessões podem coexistir no mesmo processo.
    """

    def __init__(self, identity_provider: IdentityProvider, store: RemoteStore | None = None):
        self.identity_provider = identity_provider
        self.store: RemoteStore = store or di[RemoteStore]
        self._items: Tuple[LineItem, ...] = ()
        self._loading = False
        self._profile: tuple[str, str] | None = None  # (auth_id, profile_id)
        self._unsubscribe: Callable[[], None] | None = None

    # ---------- ciclo de vida ----------
    def start(self) -> "CartSession":
        """Assina trocas de identidade e carrega o carrinho inicial."""
        if self._unsubscribe is None:
            self._unsubscribe = self.identity_provider.subscribe(self._on_identity_change)
        self.refresh_cart()
        return self

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _on_identity_change(self, identity: Identity | None) -> None:
        self._profile = None
        if identity is None:
            self._items = ()
            log.info("cart_session_signed_out")
            return
        try:
            self.refresh_cart()
        except PersistenceError:
            # listener de notificação: o snapshot anterior continua publicado
            log.error("cart_refresh_on_identity_failed", auth_id=identity.id)

    # ---------- leitura ----------
    @property
    def cart_items(self) -> Tuple[LineItem, ...]:
        return self._items

    @property
    def cart_count(self) -> int:
        return totals.total_count(self._items)

    @property
    def loading(self) -> bool:
        return self._loading

    def get_cart_total(self) -> Decimal:
        return totals.total_price(self._items)

    # ---------- resolução ----------
    def _require_identity(self) -> Identity:
        identity = self.identity_provider.current_identity()
        if identity is None:
            raise Unauthenticated()
        return identity

    def _profile_id(self, identity: Identity) -> str | None:
        """Perfil da identidade; resolvido uma vez por sessão/identidade."""
        if self._profile and self._profile[0] == identity.id:
            return self._profile[1]
        profile_id = cart_service.resolve_profile(self.store, identity)
        if profile_id:
            self._profile = (identity.id, profile_id)
        return profile_id

    # ---------- reload ----------
    def refresh_cart(self) -> Tuple[LineItem, ...]:
        """Relê o carrinho do store e publica o novo snapshot.

        Falha de resolução (perfil/carrinho) mantém o snapshot anterior.
        Falha de leitura dos itens é logada e relançada.
        """
        identity = self.identity_provider.current_identity()
        if identity is None:
            return self._items
        self._loading = True
        try:
            try:
                profile_id = self._profile_id(identity)
                cart_id = cart_service.resolve_cart(self.store, profile_id)
            except (NotFound, CartUnavailable) as exc:
                log.warning("cart_refresh_aborted", auth_id=identity.id, reason=type(exc).__name__)
                return self._items
            try:
                items = cart_service.get_items(self.store, cart_id)
            except PersistenceError:
                log.error("cart_refresh_failed", auth_id=identity.id, cart_id=cart_id)
                raise
            self._items = tuple(items)
            log.info("cart_refreshed", cart_id=cart_id, items=len(self._items), count=self.cart_count)
            return self._items
        finally:
            self._loading = False

    # ---------- mutações ----------
    def _mutate(self, op: str, identity: Identity, write: Callable[[str], object]) -> None:
        """resolve -> escrita única -> reload, serializado por perfil."""
        try:
            profile_id = self._profile_id(identity)
        except NotFound:
            log.warning("cart_op_aborted", op=op, auth_id=identity.id, reason="profile_not_found")
            return
        with profile_lock(profile_id):
            try:
                cart_id = cart_service.resolve_cart(self.store, profile_id)
                write(cart_id)
            except CartError as exc:
                log.error("cart_op_failed", op=op, auth_id=identity.id, error=str(exc), kind=type(exc).__name__)
                raise
            self.refresh_cart()

    def add_to_cart(self, variant_id: str, asin: str, quantity: int, product: ProductDetails | dict) -> None:
        """Adiciona a variante ou incrementa a linha existente (preço da primeira inclusão)."""
        identity = self._require_identity()
        if quantity <= 0:
            raise InvalidQuantity(quantity)
        details = product if isinstance(product, ProductDetails) else ProductDetails.model_validate(product)
        self._mutate(
            "add_to_cart", identity,
            lambda cart_id: cart_service.add_item(self.store, cart_id, variant_id, asin, quantity, details),
        )

    def update_quantity(self, item_id: str, quantity: int) -> None:
        """Sobrescreve a quantidade. Quantidade <= 0 é rejeitada (não remove o item)."""
        identity = self._require_identity()
        if quantity <= 0:
            raise InvalidQuantity(quantity)
        self._mutate(
            "update_quantity", identity,
            lambda cart_id: cart_service.set_quantity(self.store, cart_id, item_id, quantity),
        )

    def remove_from_cart(self, item_id: str) -> None:
        identity = self._require_identity()
        self._mutate(
            "remove_from_cart", identity,
            lambda cart_id: cart_service.remove_item(self.store, cart_id, item_id),
        )

    def clear_cart(self) -> None:
        """Esvazia o carrinho do perfil corrente (nunca toca outros carrinhos)."""
        identity = self._require_identity()
        self._mutate(
            "clear_cart", identity,
            lambda cart_id: cart_service.clear_items(self.store, cart_id),
        )
