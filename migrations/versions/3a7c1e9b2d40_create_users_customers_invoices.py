"""create users, customers and invoices

Revision ID: 3a7c1e9b2d40
Revises:
Create Date: 2026-10-19

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision: str = "3a7c1e9b2d40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    bind = op.get_bind()
    insp = inspect(bind)
    existing_tables = set(insp.get_table_names())

    if "users" not in existing_tables:
        op.create_table(
            "users",
            sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
            sa.Column("email", sa.String(length=320), nullable=False),
            sa.Column("password_hash", sa.String(length=255), nullable=False),
            sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
            sa.Column(
                "created_at",
                sa.DateTime(timezone=False),
                nullable=False,
                server_default=sa.func.current_timestamp(),
            ),
            sa.UniqueConstraint("email", name="uq_users_email"),
        )

    if "customers" not in existing_tables:
        op.create_table(
            "customers",
            sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
            sa.Column("name", sa.String(length=255), nullable=False),
            sa.Column("email", sa.String(length=320), nullable=False),
            sa.Column("image_url", sa.String(length=2048), nullable=False),
            sa.UniqueConstraint("email", name="uq_customers_email"),
        )
        op.create_index("idx_customers_name", "customers", ["name"])

    if "invoices" not in existing_tables:
        op.create_table(
            "invoices",
            sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
            sa.Column("customer_id", sa.Uuid(), nullable=False),
            sa.Column("amount", sa.Integer(), nullable=False),
            sa.Column("status", sa.String(length=16), nullable=False),
            sa.Column("date", sa.Date(), nullable=False, server_default=sa.func.current_date()),
            sa.ForeignKeyConstraint(
                ["customer_id"], ["customers.id"], name="fk_invoices_customer_id", ondelete="RESTRICT"
            ),
        )
        op.create_index("idx_invoices_customer_id", "invoices", ["customer_id"])
        op.create_index("idx_invoices_date", "invoices", ["date"])
        op.create_index("idx_invoices_status", "invoices", ["status"])


def downgrade() -> None:
    op.drop_index("idx_invoices_status", table_name="invoices")
    op.drop_index("idx_invoices_date", table_name="invoices")
    op.drop_index("idx_invoices_customer_id", table_name="invoices")
    op.drop_table("invoices")

    op.drop_index("idx_customers_name", table_name="customers")
    op.drop_table("customers")

    op.drop_table("users")
