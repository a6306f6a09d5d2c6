"""Modelos SQLAlchemy para usuários, carrinhos e itens."""
from __future__ import annotations
from datetime import datetime, timezone
from decimal import Decimal
from uuid import uuid4
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy import String, Integer, Numeric, ForeignKey, Index, UniqueConstraint, TIMESTAMP

def _new_id() -> str:
    return uuid4().hex

def _utcnow() -> datetime:
    return datetime.now(timezone.utc)

class Base(DeclarativeBase):
    """Base declarativa."""
    pass

class User(Base):
    __tablename__ = "users"
    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=_new_id)
    auth_id: Mapped[str] = mapped_column(String(64), unique=True)

class Cart(Base):
    __tablename__ = "carts"
    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id"))
    # um carrinho por perfil
    __table_args__ = (
        UniqueConstraint("user_id", name="uq_carts_user"),
    )

class CartItem(Base):
    __tablename__ = "cart_items"
    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=_new_id)
    cart_id: Mapped[str] = mapped_column(ForeignKey("carts.id"))
    variant_id: Mapped[str] = mapped_column(String(64))
    asin: Mapped[str] = mapped_column(String(32))
    quantity: Mapped[int] = mapped_column(Integer)
    price_at_time: Mapped[Decimal] = mapped_column(Numeric(12, 2))
    product_name: Mapped[str] = mapped_column(String(200))
    product_image: Mapped[str | None] = mapped_column(String(500))
    variant_weight: Mapped[Decimal | None] = mapped_column(Numeric(10, 3))
    variant_weight_unit: Mapped[str | None] = mapped_column(String(16))
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), default=_utcnow)
    # uma linha por variante dentro do carrinho
    __table_args__ = (
        UniqueConstraint("cart_id", "variant_id", name="uq_cart_items_variant"),
        Index("ix_cart_items_cart_created", "cart_id", "created_at"),
    )
