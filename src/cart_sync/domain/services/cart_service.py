"""Serviço de carrinho: resolução de perfil/carrinho e merge idempotente de itens.

Cada função faz no máximo uma escrita no store; o reload do snapshot fica a
cargo da sessão (CartSession).
"""
from __future__ import annotations
from ...core.errors import CartUnavailable, InvalidQuantity, PersistenceError, ProfileNotFound, StoreConflict
from ...core.logging import get_logger
from ...ports.interfaces import Identity, LineItem, ProductDetails, RemoteStore

log = get_logger()

def resolve_profile(store: RemoteStore, identity: Identity | None) -> str | None:
    """Mapeia a identidade autenticada para o id interno do perfil.

    Sem identidade não há lookup (estado anônimo): retorna None.
    Levanta ProfileNotFound se não existir linha em `users` para o auth_id.
    """
    if identity is None:
        return None
    profile_id = store.find_profile_id(identity.id)
    if not profile_id:
        log.warning("profile_not_found", auth_id=identity.id)
        raise ProfileNotFound(identity.id)
    return profile_id

def resolve_cart(store: RemoteStore, profile_id: str) -> str:
    """Retorna o carrinho do perfil, criando-o se ausente (consulta antes de inserir)."""
    cart_id = store.find_cart_id(profile_id)
    if cart_id:
        return cart_id
    created = True
    try:
        store.insert_cart(profile_id)
    except StoreConflict:
        created = False
        # outro criador venceu a corrida; o re-read abaixo devolve o carrinho dele
        log.info("cart_create_race", profile_id=profile_id)
    except PersistenceError as exc:
        log.error("cart_create_failed", profile_id=profile_id)
        raise CartUnavailable(f"não foi possível criar carrinho para {profile_id}") from exc
    try:
        cart_id = store.find_cart_id(profile_id)
    except PersistenceError as exc:
        raise CartUnavailable(f"carrinho de {profile_id} ilegível após criação") from exc
    if not cart_id:
        log.error("cart_missing_after_create", profile_id=profile_id)
        raise CartUnavailable(f"carrinho de {profile_id} não encontrado após criação")
    if created:
        log.info("cart_created", profile_id=profile_id, cart_id=cart_id)
    return cart_id

def add_item(store: RemoteStore, cart_id: str, variant_id: str, asin: str, quantity: int, details: ProductDetails) -> None:
    """Adiciona (ou incrementa) item no carrinho.

    Upsert por (cart_id, variant_id): se a variante já existe soma a quantidade
    e mantém preço/metadados da primeira inclusão; senão insere a linha.
    """
    if quantity <= 0:
        raise InvalidQuantity(quantity)
    existing = store.find_item(cart_id, variant_id)
    if existing:
        new_qty = existing.quantity + quantity
        if store.update_item_quantity(cart_id, existing.id, new_qty) == 0:
            # linha removida entre a leitura e a escrita: o add não foi aplicado
            log.error("cart_item_vanished", cart_id=cart_id, variant_id=variant_id, item_id=existing.id)
            raise PersistenceError(f"item {existing.id} sumiu antes do merge")
        log.info("cart_item_merged", cart_id=cart_id, variant_id=variant_id, item_id=existing.id, quantity=new_qty)
    else:
        store.insert_item(cart_id, variant_id, asin, quantity, details)
        log.info("cart_item_added", cart_id=cart_id, variant_id=variant_id, asin=asin, quantity=quantity)

def set_quantity(store: RemoteStore, cart_id: str, item_id: str, quantity: int) -> bool:
    """Sobrescreve a quantidade do item (não incrementa). Retorna se algo mudou."""
    if quantity <= 0:
        raise InvalidQuantity(quantity)
    changed = store.update_item_quantity(cart_id, item_id, quantity) > 0
    if changed:
        log.info("cart_item_quantity_set", cart_id=cart_id, item_id=item_id, quantity=quantity)
    else:
        log.warning("cart_item_not_in_cart", cart_id=cart_id, item_id=item_id, op="update_quantity")
    return changed

def remove_item(store: RemoteStore, cart_id: str, item_id: str) -> bool:
    """Remove um item; idempotente se o id já não existir."""
    removed = store.delete_item(cart_id, item_id) > 0
    log.info("cart_item_removed", cart_id=cart_id, item_id=item_id, removed=removed)
    return removed

def clear_items(store: RemoteStore, cart_id: str) -> int:
    """Esvazia o carrinho (somente itens deste cart_id)."""
    count = store.delete_cart_items(cart_id)
    log.info("cart_cleared", cart_id=cart_id, removed=count)
    return count

def get_items(store: RemoteStore, cart_id: str) -> list[LineItem]:
    """Lista itens atuais do carrinho, mais recentes primeiro."""
    return store.list_items(cart_id)
