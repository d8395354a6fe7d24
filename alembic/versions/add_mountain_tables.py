"""Add mountain catalog tables (mountains, mountain_translations)

Revision ID: add_mountain_tables
Revises: add_auth_tables
Create Date: 2026-10-18
"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "add_mountain_tables"
down_revision: str | None = "add_auth_tables"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "mountains",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("key", sa.String(100), nullable=False, unique=True, index=True),
        sa.Column("altitude", sa.String(50), nullable=True),
        sa.Column("has_death_zone", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("first_climbed_date", sa.Date(), nullable=True),
        sa.Column("mountain_img", sa.String(500), nullable=True),
        sa.Column("country_flag_img", sa.String(500), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.text("now()"), nullable=False),
    )

    op.create_table(
        "mountain_translations",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "mountain_id",
            sa.Integer(),
            sa.ForeignKey("mountains.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column("language", sa.String(10), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("location", sa.String(200), nullable=True),
        sa.Column("first_climber", sa.String(200), nullable=True),
        sa.UniqueConstraint("mountain_id", "language", name="uq_mountain_translation_language"),
    )


def downgrade() -> None:
    op.drop_table("mountain_translations")
    op.drop_table("mountains")
