"""Create templates table

Revision ID: 3f9c2a7d1b04
Revises:
Create Date: 2026-10-17 10:12:40.118264

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '3f9c2a7d1b04'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

JSONType = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def upgrade() -> None:
    op.create_table(
        'templates',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('width', sa.Integer(), nullable=False),
        sa.Column('height', sa.Integer(), nullable=False),
        sa.Column('background_color', sa.String(length=32), nullable=True),
        sa.Column('background_gradient', JSONType, nullable=True),
        sa.Column('layers', JSONType, nullable=False),
        sa.Column('output_format', sa.String(length=10), server_default='png', nullable=False),
        sa.Column('fps', sa.Float(), nullable=True),
        sa.Column('duration', sa.Float(), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.CheckConstraint('width > 0 AND height > 0', name='check_template_dimensions'),
        sa.CheckConstraint("output_format IN ('png', 'jpg', 'webp', 'mp4', 'gif')", name='check_output_format'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_templates_updated_at', 'templates', ['updated_at'])


def downgrade() -> None:
    op.drop_index('idx_templates_updated_at', table_name='templates')
    op.drop_table('templates')
