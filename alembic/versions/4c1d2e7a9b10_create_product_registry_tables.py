"""create product registry tables

Revision ID: 4c1d2e7a9b10
Revises:
Create Date: 2026-10-16 10:12:41.118204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4c1d2e7a9b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade():
    op.create_table(
        "products",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=False),
        sa.Column("product_id", sa.String(64), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("origin", sa.String(100), nullable=False),
        sa.Column("document_hash", sa.String(64), nullable=False),
        sa.Column("timestamp", sa.BigInteger(), nullable=False),
        sa.Column("manufacturer", sa.String(128), nullable=False),
        sa.Column("product_type", sa.String(50), nullable=False),
        sa.Column("batch_number", sa.String(50), nullable=False),
        sa.Column("expiry_date", sa.BigInteger(), nullable=False),
        sa.Column("location", sa.String(100), nullable=False),
        sa.Column("currency", sa.String(8), nullable=False),
        sa.Column("status", sa.Boolean(), nullable=False),
        sa.Column("quantity", sa.BigInteger(), nullable=False),
        sa.Column("price", sa.BigInteger(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),

        sa.UniqueConstraint("product_id"),
        sa.CheckConstraint("id >= 0", name="ck_products_id_nonnegative"),
        sa.CheckConstraint("quantity > 0", name="ck_products_quantity_positive"),
        sa.CheckConstraint("price >= 0", name="ck_products_price_nonnegative"),
    )
    op.create_index("ix_products_manufacturer", "products", ["manufacturer"])

    op.create_table(
        "product_updates",
        sa.Column("product_ref", sa.Integer(), sa.ForeignKey("products.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("update_name", sa.String(100), nullable=False),
        sa.Column("update_origin", sa.String(100), nullable=False),
        sa.Column("update_timestamp", sa.BigInteger(), nullable=False),
        sa.Column("updater", sa.String(128), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    op.create_table(
        "registry_config",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("next_product_id", sa.Integer(), nullable=False),
        sa.Column("max_products", sa.Integer(), nullable=False),
        sa.Column("registration_fee", sa.BigInteger(), nullable=False),
        sa.Column("authority_contract", sa.String(128), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),

        sa.CheckConstraint("id = 1", name="ck_registry_config_singleton"),
        sa.CheckConstraint("next_product_id >= 0", name="ck_registry_config_next_id"),
    )

    op.create_table(
        "fee_ledger_entries",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("seq", sa.Integer(), nullable=False),
        sa.Column("amount", sa.BigInteger(), nullable=False),
        sa.Column("sender", sa.String(128), nullable=False),
        sa.Column("recipient", sa.String(128), nullable=False),
        sa.Column("memo", sa.String(128), nullable=True),
        sa.Column("prev_hash", sa.String(128), nullable=False),
        sa.Column("entry_hash", sa.String(128), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("payload_json", sa.JSON(), nullable=False),

        sa.UniqueConstraint("seq", name="uq_fee_ledger_seq"),
    )
    op.create_index("ix_fee_ledger_sender", "fee_ledger_entries", ["sender"])
    op.create_index("ix_fee_ledger_recipient", "fee_ledger_entries", ["recipient"])

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("request_id", sa.String(128), nullable=True),
        sa.Column("actor", sa.String(128), nullable=False),
        sa.Column("action", sa.String(96), nullable=False),
        sa.Column("status", sa.String(32), nullable=False),
        sa.Column("product_ref", sa.Integer(), nullable=True),
        sa.Column("clock", sa.BigInteger(), nullable=True),
        sa.Column("payload_hash", sa.String(128), nullable=False),
        sa.Column("details_json", sa.JSON(), nullable=False),
    )
    op.create_index("ix_audit_logs_request_id", "audit_logs", ["request_id"])
    op.create_index("ix_audit_logs_product", "audit_logs", ["product_ref"])
    op.create_index("ix_audit_logs_action", "audit_logs", ["action"])
    op.create_index("ix_audit_logs_created", "audit_logs", ["created_at"])


def downgrade():
    op.drop_index("ix_audit_logs_created", table_name="audit_logs")
    op.drop_index("ix_audit_logs_action", table_name="audit_logs")
    op.drop_index("ix_audit_logs_product", table_name="audit_logs")
    op.drop_index("ix_audit_logs_request_id", table_name="audit_logs")
    op.drop_table("audit_logs")

    op.drop_index("ix_fee_ledger_recipient", table_name="fee_ledger_entries")
    op.drop_index("ix_fee_ledger_sender", table_name="fee_ledger_entries")
    op.drop_table("fee_ledger_entries")

    op.drop_table("registry_config")
    op.drop_table("product_updates")

    op.drop_index("ix_products_manufacturer", table_name="products")
    op.drop_table("products")
