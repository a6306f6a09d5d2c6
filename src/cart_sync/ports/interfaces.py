"""Portas hexagonais (interfaces) e DTOs do carrinho."""
from __future__ import annotations
from datetime import datetime
from decimal import Decimal
from typing import Callable, Protocol
from pydantic import BaseModel, ConfigDict, Field

class Identity(BaseModel):
    """Identidade autenticada externamente (ex.: usuário do provedor de auth)."""
    model_config = ConfigDict(frozen=True)
    id: str = Field(min_length=1)
    email: str | None = None

class ProductDetails(BaseModel):
    """Preço e metadados de exibição informados pelo chamador no momento do add.

    Escalas batem com as colunas (preço 2 casas, peso 3): valor fora disso é
    rejeitado em vez de arredondado pelo store. Aceita `weightUnit` (camelCase).
    """
    model_config = ConfigDict(populate_by_name=True)
    price: Decimal = Field(ge=0, max_digits=12, decimal_places=2)
    name: str = Field(min_length=1, max_length=200)
    image: str | None = None
    weight: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=3)
    weight_unit: str | None = Field(default=None, max_length=16, alias="weightUnit")

class LineItem(BaseModel):
    """Linha do snapshot do carrinho (somente leitura)."""
    model_config = ConfigDict(frozen=True, from_attributes=True)
    id: str
    cart_id: str
    variant_id: str
    asin: str
    quantity: int
    price_at_time: Decimal
    product_name: str
    product_image: str | None = None
    variant_weight: Decimal | None = None
    variant_weight_unit: str | None = None
    created_at: datetime

IdentityListener = Callable[[Identity | None], None]

class IdentityProvider(Protocol):
    def current_identity(self) -> Identity | None: ...
    def subscribe(self, listener: IdentityListener) -> Callable[[], None]: ...

class RemoteStore(Protocol):
    """Store tabular: users(auth_id, id), carts(id, user_id), cart_items(...)."""
    def find_profile_id(self, auth_id: str) -> str | None: ...
    def find_cart_id(self, user_id: str) -> str | None: ...
    def insert_cart(self, user_id: str) -> None: ...
    def find_item(self, cart_id: str, variant_id: str) -> LineItem | None: ...
    def insert_item(self, cart_id: str, variant_id: str, asin: str, quantity: int, details: ProductDetails) -> None: ...
    def update_item_quantity(self, cart_id: str, item_id: str, quantity: int) -> int: ...
    def delete_item(self, cart_id: str, item_id: str) -> int: ...
    def delete_cart_items(self, cart_id: str) -> int: ...
    def list_items(self, cart_id: str) -> list[LineItem]: ...
