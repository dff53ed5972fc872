"""Add restaurants and seating_areas tables

Revision ID: 001
Revises:
Create Date: (run alembic upgrade head)

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "restaurants",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("name", sa.String(256), nullable=False),
        sa.Column("zenchef_id", sa.String(64), nullable=True),
        sa.Column("zenchef_api_token", sa.String(512), nullable=True),
        sa.Column("max_escalation_seating", sa.Integer(), nullable=False, server_default="8"),
        sa.Column("timezone", sa.String(64), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_table(
        "seating_areas",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column(
            "restaurant_id",
            sa.String(64),
            sa.ForeignKey("restaurants.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("zenchef_room_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(256), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("max_capacity", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_seating_areas_restaurant_id", "seating_areas", ["restaurant_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_seating_areas_restaurant_id", table_name="seating_areas")
    op.drop_table("seating_areas")
    op.drop_table("restaurants")
