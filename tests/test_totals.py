"""
Testes dos agregados puros (contagem e total).
"""
from datetime import datetime
from decimal import Decimal

from cart_sync.domain.services.totals import total_count, total_price
from cart_sync.ports.interfaces import LineItem


def _item(variant_id: str, quantity: int, price: str) -> LineItem:
    return LineItem(
        id=f"id-{variant_id}", cart_id="c1", variant_id=variant_id, asin="B1",
        quantity=quantity, price_at_time=Decimal(price), product_name=variant_id,
        created_at=datetime(2026, 1, 1),
    )


class TestTotals:
    def test_empty_snapshot(self):
        assert total_count(()) == 0
        assert total_price(()) == Decimal("0")

    def test_count_sums_quantities(self):
        assert total_count([_item("V1", 5, "9.99"), _item("V2", 2, "1.00")]) == 7

    def test_price_is_exact_decimal(self):
        assert total_price([_item("V1", 5, "9.99")]) == Decimal("49.95")

    def test_price_mixed_items(self):
        items = [_item("V1", 3, "0.10"), _item("V2", 1, "0.20"), _item("V3", 2, "19.90")]
        assert total_price(items) == Decimal("40.30")
