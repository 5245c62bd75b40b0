"""Create noise_reports table with spatial index

Revision ID: 0001
Revises:
Create Date: 2026-10-18
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.execute("CREATE EXTENSION IF NOT EXISTS postgis")

    media_type = postgresql.ENUM("audio", "video", name="media_type_enum")

    op.create_table(
        "noise_reports",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Text(), nullable=False),
        sa.Column("media_url", sa.String(1024), nullable=False),
        sa.Column("media_type", media_type, nullable=False),
        sa.Column("reason", sa.Text(), nullable=False),
        sa.Column("comment", sa.Text(), nullable=False),
        sa.Column("latitude", sa.Float(), nullable=True),
        sa.Column("longitude", sa.Float(), nullable=True),
        sa.Column("address", postgresql.JSONB(), nullable=True),
        sa.Column("geo_location", postgresql.JSONB(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            "(latitude IS NULL AND longitude IS NULL AND geo_location IS NULL) OR "
            "(latitude IS NOT NULL AND longitude IS NOT NULL AND geo_location IS NOT NULL)",
            name="ck_noise_reports_location_geo_location",
        ),
    )
    op.create_index("ix_noise_reports_user_id", "noise_reports", ["user_id"])
    op.create_index("ix_noise_reports_created_at", "noise_reports", ["created_at"])
    op.create_index("ix_noise_reports_coordinates", "noise_reports", ["latitude", "longitude"])
    op.execute(
        "CREATE INDEX ix_noise_reports_geo_location_gist ON noise_reports "
        "USING gist (ST_SetSRID(ST_GeomFromGeoJSON(geo_location::text), 4326))"
    )


def downgrade() -> None:
    op.drop_index("ix_noise_reports_geo_location_gist", table_name="noise_reports")
    op.drop_index("ix_noise_reports_coordinates", table_name="noise_reports")
    op.drop_index("ix_noise_reports_created_at", table_name="noise_reports")
    op.drop_index("ix_noise_reports_user_id", table_name="noise_reports")
    op.drop_table("noise_reports")
    op.execute("DROP TYPE IF EXISTS media_type_enum")
