"""create boards, columns and items

Revision ID: 0f3a6c2d9b41
Revises:
Create Date: 2026-10-19 10:12:44.118406

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0f3a6c2d9b41'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade():
    op.create_table(
        "boards",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("owner_user_id", sa.String(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("color", sa.String(length=10), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_boards_id", "boards", ["id"])
    op.create_index("ix_boards_owner_user_id", "boards", ["owner_user_id"])

    op.create_table(
        "columns",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column(
            "board_id",
            sa.Integer(),
            sa.ForeignKey("boards.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("order", sa.Integer(), nullable=False),
    )
    op.create_index("ix_columns_board_id", "columns", ["board_id"])

    op.create_table(
        "items",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column(
            "column_id",
            sa.String(),
            sa.ForeignKey("columns.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("order", sa.Float(), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("content", sa.String(), nullable=True),
    )
    op.create_index("ix_items_column_id", "items", ["column_id"])


def downgrade():
    op.drop_index("ix_items_column_id", table_name="items")
    op.drop_table("items")
    op.drop_index("ix_columns_board_id", table_name="columns")
    op.drop_table("columns")
    op.drop_index("ix_boards_owner_user_id", table_name="boards")
    op.drop_index("ix_boards_id", table_name="boards")
    op.drop_table("boards")
