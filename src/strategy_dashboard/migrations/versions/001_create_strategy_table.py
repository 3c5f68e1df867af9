"""Create the strategy table.

Revision ID: 001
Revises: None
Create Date: 2025-01-06
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "strategy",
        sa.Column("local_id", sa.Uuid, primary_key=True),
        sa.Column("symbol", sa.Text, nullable=False),
        sa.Column("entry_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("exit_time", sa.DateTime(timezone=True), nullable=False),
        # 1 = Open, 2 = Closed
        sa.Column("status", sa.Integer, nullable=False),
        sa.Column("cfg", JSONB, nullable=True),
        sa.Column("metadata", JSONB, nullable=True),
        sa.Column("risk", JSONB, nullable=True),
        sa.Column("orders", JSONB, nullable=True),
        sa.Column("account", JSONB, nullable=True),
    )
    op.create_index("ix_strategy_symbol", "strategy", ["symbol"])
    op.create_index("ix_strategy_exit_time", "strategy", ["exit_time"])


def downgrade() -> None:
    op.drop_index("ix_strategy_exit_time", table_name="strategy")
    op.drop_index("ix_strategy_symbol", table_name="strategy")
    op.drop_table("strategy")
