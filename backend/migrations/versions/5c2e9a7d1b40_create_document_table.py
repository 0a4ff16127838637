"""create document table for thread game records

Revision ID: 5c2e9a7d1b40
Revises:
Create Date: 2026-10-16 09:00:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '5c2e9a7d1b40'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    if 'document' in set(insp.get_table_names()):
        return
    op.create_table(
        'document',
        sa.Column('path', sa.String(length=255), primary_key=True),
        sa.Column('collection', sa.String(length=255), nullable=False),
        sa.Column('doc_id', sa.String(length=64), nullable=False),
        sa.Column('data', sa.Text(), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('updated_at', sa.Float(), nullable=True),
    )
    op.create_index('ix_document_collection', 'document', ['collection'])


def downgrade():
    op.drop_index('ix_document_collection', table_name='document')
    op.drop_table('document')
