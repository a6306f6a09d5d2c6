"""Store remoto (SQLAlchemy): users / carts / cart_items.

Cada chamada é um round-trip próprio (sessão + transação curtas). Todo filtro é
por igualdade exata e a ordenação dos itens é por created_at.
"""
from __future__ import annotations
from contextlib import contextmanager
from typing import Iterator
from kink import di
from sqlalchemy import select, update, delete
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session as OrmSession
from ..core.errors import PersistenceError, StoreConflict
from ..core.logging import get_logger
from ..ports.interfaces import LineItem, ProductDetails
from .models import User, Cart, CartItem

log = get_logger()

class SqlCartStore:
    """Implementação do RemoteStore sobre SQLAlchemy 2."""
    def __init__(self, session_factory=None):
        self._session_factory = session_factory or di["session_factory"]

    @contextmanager
    def _session(self, op: str, write: bool = False) -> Iterator[OrmSession]:
        """Abre sessão (e transação quando `write`) e traduz erros do driver."""
        Session = self._session_factory
        try:
            with Session() as s:
                if write:
                    with s.begin():
                        yield s
                else:
                    yield s
        except IntegrityError as exc:
            log.warning("store_conflict", op=op, error=str(exc.orig))
            raise StoreConflict(f"{op}: violação de unicidade") from exc
        except SQLAlchemyError as exc:
            log.error("store_error", op=op, error=str(exc))
            raise PersistenceError(f"{op}: falha no store") from exc

    # ---------- users ----------
    def find_profile_id(self, auth_id: str) -> str | None:
        with self._session("find_profile") as s:
            return s.execute(select(User.id).where(User.auth_id == auth_id)).scalar()

    # ---------- carts ----------
    def find_cart_id(self, user_id: str) -> str | None:
        with self._session("find_cart") as s:
            return s.execute(select(Cart.id).where(Cart.user_id == user_id).limit(1)).scalar()

    def insert_cart(self, user_id: str) -> None:
        with self._session("insert_cart", write=True) as s:
            s.add(Cart(user_id=user_id))

    # ---------- cart_items ----------
    def find_item(self, cart_id: str, variant_id: str) -> LineItem | None:
        with self._session("find_item") as s:
            row = s.execute(
                select(CartItem).where(CartItem.cart_id == cart_id, CartItem.variant_id == variant_id).limit(1)
            ).scalars().first()
            return LineItem.model_validate(row) if row else None

    def insert_item(self, cart_id: str, variant_id: str, asin: str, quantity: int, details: ProductDetails) -> None:
        with self._session("insert_item", write=True) as s:
            s.add(CartItem(
                cart_id=cart_id,
                variant_id=variant_id,
                asin=asin,
                quantity=quantity,
                price_at_time=details.price,
                product_name=details.name,
                product_image=details.image,
                variant_weight=details.weight,
                variant_weight_unit=details.weight_unit,
            ))

    def update_item_quantity(self, cart_id: str, item_id: str, quantity: int) -> int:
        """Sobrescreve a quantidade; retorna linhas afetadas (0 se o item não é do carrinho)."""
        with self._session("update_item", write=True) as s:
            res = s.execute(
                update(CartItem)
                .where(CartItem.id == item_id, CartItem.cart_id == cart_id)
                .values(quantity=quantity)
            )
            return res.rowcount

    def delete_item(self, cart_id: str, item_id: str) -> int:
        with self._session("delete_item", write=True) as s:
            res = s.execute(delete(CartItem).where(CartItem.id == item_id, CartItem.cart_id == cart_id))
            return res.rowcount

    def delete_cart_items(self, cart_id: str) -> int:
        """Esvazia apenas o carrinho informado (predicado sempre por cart_id)."""
        with self._session("clear_items", write=True) as s:
            res = s.execute(delete(CartItem).where(CartItem.cart_id == cart_id))
            return res.rowcount

    def list_items(self, cart_id: str) -> list[LineItem]:
        """Itens do carrinho, mais recentes primeiro (empate por id: estável, não cronológico)."""
        with self._session("list_items") as s:
            rows = s.execute(
                select(CartItem)
                .where(CartItem.cart_id == cart_id)
                .order_by(CartItem.created_at.desc(), CartItem.id.desc())
            ).scalars().all()
            return [LineItem.model_validate(r) for r in rows]
