"""create_state_blobs

Revision ID: a3f9c2d18e47
Revises:
Create Date: 2025-11-10 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'a3f9c2d18e47'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    # One row per storage key holding the JSON snapshot of sessions and claims
    op.create_table(
        'state_blobs',
        sa.Column('storage_key', sa.String(length=100), primary_key=True),
        sa.Column('schema_version', sa.Integer(), nullable=False),
        sa.Column('payload', sa.Text(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )


def downgrade():
    op.drop_table('state_blobs')
