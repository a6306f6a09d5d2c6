"""Agregados puros sobre o snapshot do carrinho."""
from decimal import Decimal
from typing import Iterable
from ...ports.interfaces import LineItem

def total_count(items: Iterable[LineItem]) -> int:
    """Soma das quantidades."""
    return sum(i.quantity for i in items)

def total_price(items: Iterable[LineItem]) -> Decimal:
    """Soma de quantidade * preço capturado no add."""
    return sum((i.quantity * i.price_at_time for i in items), Decimal("0"))
