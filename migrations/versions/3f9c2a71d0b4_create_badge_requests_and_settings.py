"""Create badge_requests and settings tables

Revision ID: 3f9c2a71d0b4
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3f9c2a71d0b4'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'badge_requests',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('requester_name', sa.String(length=200), nullable=True),
        sa.Column('company', sa.String(length=100), nullable=False),
        sa.Column('employee_name', sa.String(length=200), nullable=False),
        sa.Column('ldap', sa.String(length=20), nullable=True),
        sa.Column('ain', sa.String(length=9), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('badge_requests', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_badge_requests_company'), ['company'], unique=False)

    op.create_table(
        'settings',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('key', sa.String(length=100), nullable=False),
        sa.Column('value', sa.Text(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('settings', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_settings_key'), ['key'], unique=True)


def downgrade():
    with op.batch_alter_table('settings', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_settings_key'))
    op.drop_table('settings')

    with op.batch_alter_table('badge_requests', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_badge_requests_company'))
    op.drop_table('badge_requests')
