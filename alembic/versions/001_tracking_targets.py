"""Create tracking_targets

Revision ID: 001_tracking_targets
Revises:
Create Date: 2026-10-17 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001_tracking_targets'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'tracking_targets',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('display_name', sa.Text(), nullable=False),
        sa.Column('locator', sa.Text(), nullable=True),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='tracking'),
        sa.Column('target_price', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('current_price', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('stock_status', sa.String(length=16), nullable=True),
        sa.Column('last_checked', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint("status IN ('tracking', 'not-tracking')", name='ck_tracking_targets_status'),
        sa.CheckConstraint(
            "stock_status IS NULL OR stock_status IN ('in-stock', 'out-of-stock')",
            name='ck_tracking_targets_stock_status',
        ),
    )
    op.create_index('ix_tracking_targets_status', 'tracking_targets', ['status'])


def downgrade() -> None:
    op.drop_index('ix_tracking_targets_status', table_name='tracking_targets')
    op.drop_table('tracking_targets')
