"""initial_tables

Revision ID: a1c4e2f7b903
Revises:
Create Date: 2026-10-18 09:12:40.118532

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "a1c4e2f7b903"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "chains",
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("currency", sa.String(20), nullable=False),
        sa.Column("rpc_url", sa.String(500), nullable=False),
        sa.Column("explorer_url", sa.String(500), nullable=False),
        sa.Column("is_testnet", sa.Boolean(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_chains")),
    )
    op.create_index(op.f("ix_chains_is_active"), "chains", ["is_active"])

    op.create_table(
        "contract_abis",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("address", sa.String(42), nullable=False),
        sa.Column("chain_id", sa.String(32), sa.ForeignKey("chains.id", name=op.f("fk_contract_abis_chain_id_chains")), nullable=False),
        sa.Column("abi", sa.JSON(), nullable=False),
        sa.Column("source", sa.String(20), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_contract_abis")),
        sa.UniqueConstraint("address", "chain_id", name="uq_contract_abis_address_chain_id"),
    )
    op.create_index(op.f("ix_contract_abis_address"), "contract_abis", ["address"])

    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("api_key_hash", sa.String(64), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_users")),
        sa.UniqueConstraint("api_key_hash", name=op.f("uq_users_api_key_hash")),
    )

    op.create_table(
        "transactions",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("chain_id", sa.String(32), sa.ForeignKey("chains.id", name=op.f("fk_transactions_chain_id_chains")), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("from_addr", sa.String(42), nullable=True),
        sa.Column("to_addr", sa.String(42), nullable=False),
        sa.Column("value", sa.String(80), nullable=False),
        sa.Column("data", sa.Text(), nullable=False),
        sa.Column("gas_limit", sa.String(32), nullable=True),
        sa.Column("tx_hash", sa.String(66), nullable=True),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_transactions")),
    )
    op.create_index(op.f("ix_transactions_tx_hash"), "transactions", ["tx_hash"])
    op.create_index(op.f("ix_transactions_status"), "transactions", ["status"])
    op.create_index("ix_transactions_user_created", "transactions", ["user_id", "created_at"])


def downgrade() -> None:
    op.drop_index("ix_transactions_user_created", table_name="transactions")
    op.drop_index(op.f("ix_transactions_status"), table_name="transactions")
    op.drop_index(op.f("ix_transactions_tx_hash"), table_name="transactions")
    op.drop_table("transactions")
    op.drop_table("users")
    op.drop_index(op.f("ix_contract_abis_address"), table_name="contract_abis")
    op.drop_table("contract_abis")
    op.drop_index(op.f("ix_chains_is_active"), table_name="chains")
    op.drop_table("chains")
