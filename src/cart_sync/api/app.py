"""API Flask: superfície HTTP do carrinho (snapshot + mutações).

A identidade chega pelo header configurado (padrão X-Auth-Id); cada request
monta sua própria CartSession, então o snapshot devolvido é sempre o relido
do store após a operação.
"""
from __future__ import annotations
from flask import Flask, request, jsonify, g
from kink import di
from pydantic import BaseModel, Field, ValidationError
from ..core.di import bootstrap_di
from ..core.errors import CartUnavailable, InvalidQuantity, PersistenceError, Unauthenticated
from ..core.logging import set_trace_id, get_logger
from ..core.settings import Settings
from ..connectors.identity import InMemoryIdentityProvider
from ..domain.cart_session import CartSession
from ..ports.interfaces import Identity, ProductDetails

log = get_logger()

class AddItemBody(BaseModel):
    variant_id: str = Field(min_length=1, max_length=64)
    asin: str = Field(min_length=1, max_length=32)
    quantity: int = 1
    product: ProductDetails

class UpdateQuantityBody(BaseModel):
    quantity: int

def _snapshot(session: CartSession) -> dict:
    return {
        "items": [i.model_dump(mode="json") for i in session.cart_items],
        "count": session.cart_count,
        "total": str(session.get_cart_total()),
        "loading": session.loading,
    }

def _error(status: int, code: str, detail):
    return jsonify({"error": code, "detail": detail}), status

def create_app(settings: Settings | None = None) -> Flask:
    """Cria o app Flask e faz o bootstrap do DI."""
    bootstrap_di(settings)
    app = Flask(__name__)

    @app.before_request
    def open_session():
        set_trace_id(request.headers.get("X-Trace-Id"))
        auth_id = request.headers.get(di[Settings].auth_header)
        identity = Identity(id=auth_id) if auth_id else None
        g.cart = CartSession(InMemoryIdentityProvider(identity))

    @app.errorhandler(Unauthenticated)
    def on_unauthenticated(exc):
        return _error(401, "unauthenticated", str(exc))

    @app.errorhandler(InvalidQuantity)
    def on_invalid_quantity(exc):
        return _error(400, "invalid_quantity", str(exc))

    @app.errorhandler(ValidationError)
    def on_validation(exc):
        detail = [f"{'.'.join(map(str, e['loc']))}: {e['msg']}" for e in exc.errors()]
        return _error(400, "invalid_request", detail)

    @app.errorhandler(CartUnavailable)
    def on_cart_unavailable(exc):
        return _error(503, "cart_unavailable", str(exc))

    @app.errorhandler(PersistenceError)
    def on_persistence(exc):
        return _error(500, "persistence_error", "falha ao gravar o carrinho, tente novamente")

    @app.get("/healthz")
    def healthz():
        """Health check básico."""
        return {"ok": True}

    @app.get("/cart")
    def get_cart():
        """Relê o carrinho e devolve o snapshot (vazio se anônimo)."""
        g.cart.refresh_cart()
        return jsonify(_snapshot(g.cart))

    @app.post("/cart/items")
    def add_item():
        """Adiciona (ou incrementa) uma variante no carrinho."""
        body = AddItemBody.model_validate(request.get_json(force=True, silent=True) or {})
        g.cart.add_to_cart(body.variant_id, body.asin, body.quantity, body.product)
        log.info("api_cart_add", variant_id=body.variant_id, quantity=body.quantity)
        return jsonify(_snapshot(g.cart)), 201

    @app.patch("/cart/items/<item_id>")
    def update_item(item_id: str):
        body = UpdateQuantityBody.model_validate(request.get_json(force=True, silent=True) or {})
        g.cart.update_quantity(item_id, body.quantity)
        return jsonify(_snapshot(g.cart))

    @app.delete("/cart/items/<item_id>")
    def remove_item(item_id: str):
        g.cart.remove_from_cart(item_id)
        return jsonify(_snapshot(g.cart))

    @app.delete("/cart")
    def clear_cart():
        g.cart.clear_cart()
        return jsonify(_snapshot(g.cart))

    return app
