"""Migração inicial: usuários, carrinhos e itens com unicidade por perfil/variante."""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001_init"
down_revision = None
branch_labels = None
depends_on = None

def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(32), primary_key=True),
        sa.Column("auth_id", sa.String(64), nullable=False, unique=True),
    )
    op.create_table(
        "carts",
        sa.Column("id", sa.String(32), primary_key=True),
        sa.Column("user_id", sa.String(32), sa.ForeignKey("users.id"), nullable=False),
        sa.UniqueConstraint("user_id", name="uq_carts_user"),
    )
    op.create_table(
        "cart_items",
        sa.Column("id", sa.String(32), primary_key=True),
        sa.Column("cart_id", sa.String(32), sa.ForeignKey("carts.id"), nullable=False),
        sa.Column("variant_id", sa.String(64), nullable=False),
        sa.Column("asin", sa.String(32), nullable=False),
        sa.Column("quantity", sa.Integer, nullable=False),
        sa.Column("price_at_time", sa.Numeric(12, 2), nullable=False),
        sa.Column("product_name", sa.String(200), nullable=False),
        sa.Column("product_image", sa.String(500), nullable=True),
        sa.Column("variant_weight", sa.Numeric(10, 3), nullable=True),
        sa.Column("variant_weight_unit", sa.String(16), nullable=True),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.UniqueConstraint("cart_id", "variant_id", name="uq_cart_items_variant"),
    )
    op.create_index("ix_cart_items_cart_created", "cart_items", ["cart_id", "created_at"])

def downgrade() -> None:
    op.drop_index("ix_cart_items_cart_created", table_name="cart_items")
    op.drop_table("cart_items")
    op.drop_table("carts")
    op.drop_table("users")
