"""create kv_entry for the score record and preferences

Revision ID: 5c2a9e7d1f30
Revises:
Create Date: 2026-10-19 00:00:00
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '5c2a9e7d1f30'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    if 'kv_entry' in set(insp.get_table_names()):
        return
    op.create_table(
        'kv_entry',
        sa.Column('key', sa.String(length=128), primary_key=True),
        sa.Column('value', sa.Text(), nullable=False),
        sa.Column('updated_at', sa.Float(), nullable=False),
    )


def downgrade():
    op.drop_table('kv_entry')
