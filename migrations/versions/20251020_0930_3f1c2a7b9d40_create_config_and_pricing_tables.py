"""create config and pricing tables

Revision ID: 3f1c2a7b9d40
Revises:
Create Date: 2025-10-20 09:30:12.481022

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '3f1c2a7b9d40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade():
    op.create_table(
        'vehicle_types',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=50), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('daily_rate', sa.Numeric(10, 2), nullable=False, server_default='0'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name', name='uq_vehicle_types_name'),
    )

    op.create_table(
        'locations',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('city', sa.String(length=120), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'system_configs',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('config_key', sa.String(length=100), nullable=False),
        sa.Column('config_value', sa.Text(), nullable=False),
        sa.Column('config_type', sa.String(length=16), nullable=False, server_default='string'),
        sa.Column('category', sa.String(length=24), nullable=False, server_default='general'),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('is_editable', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('updated_by', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint(
            "config_type IN ('string','number','boolean','json')",
            name='ck_system_configs_config_type',
        ),
        sa.CheckConstraint(
            "category IN ('general','pricing','email','notifications','security','business','fiscal')",
            name='ck_system_configs_category',
        ),
    )
    op.create_index('ix_system_configs_config_key', 'system_configs', ['config_key'], unique=True)
    op.create_index('ix_system_configs_category', 'system_configs', ['category'])

    op.create_table(
        'price_configs',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('vehicle_type_id', sa.Integer(), nullable=True),
        sa.Column('location_id', sa.Integer(), nullable=True),
        sa.Column('season', sa.String(length=16), nullable=True),
        sa.Column('daily_rate', sa.Numeric(10, 2), nullable=False),
        sa.Column('weekly_rate', sa.Numeric(10, 2), nullable=True),
        sa.Column('monthly_rate', sa.Numeric(10, 2), nullable=True),
        sa.Column('minimum_rental_days', sa.Integer(), nullable=True, server_default='1'),
        sa.Column('discount_percentage', sa.Numeric(5, 2), nullable=True),
        sa.Column('extra_hour_rate', sa.Numeric(10, 2), nullable=True),
        sa.Column('extra_day_rate', sa.Numeric(10, 2), nullable=True),
        sa.Column('insurance_rate', sa.Numeric(10, 2), nullable=True),
        sa.Column('deposit_amount', sa.Numeric(10, 2), nullable=True),
        sa.Column('late_fee_per_day', sa.Numeric(10, 2), nullable=True),
        sa.Column('effective_from', sa.DateTime(), nullable=False),
        sa.Column('effective_until', sa.DateTime(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_by', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['vehicle_type_id'], ['vehicle_types.id']),
        sa.ForeignKeyConstraint(['location_id'], ['locations.id']),
        sa.CheckConstraint('daily_rate >= 0', name='ck_price_configs_daily_rate_positive'),
        sa.CheckConstraint(
            "season IS NULL OR season IN ('low','regular','high','peak')",
            name='ck_price_configs_season',
        ),
        sa.CheckConstraint(
            'effective_until IS NULL OR effective_until >= effective_from',
            name='ck_price_configs_effective_window',
        ),
    )
    op.create_index('ix_price_configs_vehicle_type_id', 'price_configs', ['vehicle_type_id'])
    op.create_index('ix_price_configs_location_id', 'price_configs', ['location_id'])
    op.create_index('ix_price_configs_effective_from', 'price_configs', ['effective_from'])
    op.create_index('ix_price_configs_is_active', 'price_configs', ['is_active'])


def downgrade():
    op.drop_index('ix_price_configs_is_active', table_name='price_configs')
    op.drop_index('ix_price_configs_effective_from', table_name='price_configs')
    op.drop_index('ix_price_configs_location_id', table_name='price_configs')
    op.drop_index('ix_price_configs_vehicle_type_id', table_name='price_configs')
    op.drop_table('price_configs')

    op.drop_index('ix_system_configs_category', table_name='system_configs')
    op.drop_index('ix_system_configs_config_key', table_name='system_configs')
    op.drop_table('system_configs')

    op.drop_table('locations')
    op.drop_table('vehicle_types')
