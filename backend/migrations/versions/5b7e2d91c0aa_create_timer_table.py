"""create timer table

Revision ID: 5b7e2d91c0aa
Revises:
Create Date: 2026-10-19 09:30:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '5b7e2d91c0aa'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    if 'timer' in set(insp.get_table_names()):
        return

    op.create_table(
        'timer',
        sa.Column('id', sa.String(length=32), primary_key=True),
        sa.Column('name', sa.String(length=64), nullable=False),
        sa.Column('elapsed', sa.Float(), nullable=False, server_default='0'),
        sa.Column('running', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
    )
    op.create_index('ix_timer_position', 'timer', ['position'])


def downgrade():
    op.drop_index('ix_timer_position', table_name='timer')
    op.drop_table('timer')
