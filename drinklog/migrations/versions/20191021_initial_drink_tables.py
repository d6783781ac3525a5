"""initial_drink_tables

Revision ID: 3a1f5c2e9b70
Revises:
Create Date: 2019-10-21 20:34:10.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3a1f5c2e9b70'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

TIME_PERIODS = ('morning', 'afternoon', 'evening', 'night')
VOLUME_UNITS = ('fl oz', 'mL', 'cL', 'L')


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.func.current_timestamp()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.func.current_timestamp()),
    ]


def _approx(name, nullable):
    return [
        sa.Column(f'{name}_val', sa.Float(), nullable=nullable),
        sa.Column(f'{name}_is_approximate', sa.Boolean(), nullable=nullable),
    ]


def upgrade() -> None:
    """
    Create the generation-1 schema.

    Changes:
    1. person table
    2. drink table, unique on (name, min_abv, max_abv)
    3. entry table with inline time period and unit enums, a JSON
       context list, and both the entered volume and its mL copy
    """
    op.create_table(
        'person',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        *_timestamps(),
    )

    op.create_table(
        'drink',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        *_approx('min_abv', nullable=True),
        *_approx('max_abv', nullable=True),
        sa.Column('multiplier', sa.Float(), nullable=False, server_default='1.0'),
        *_timestamps(),
        sa.UniqueConstraint(
            'name',
            'min_abv_val',
            'min_abv_is_approximate',
            'max_abv_val',
            'max_abv_is_approximate',
            name='uq_drink_name_abv',
        ),
        sa.CheckConstraint("name != ''", name='ck_drink_non_empty_name'),
        sa.CheckConstraint('multiplier > 0', name='ck_drink_positive_multiplier'),
        sa.CheckConstraint(
            'min_abv_val IS NULL OR max_abv_val IS NULL OR min_abv_val <= max_abv_val',
            name='ck_drink_abv_range',
        ),
    )
    op.create_index('ix_drink_name_lower', 'drink', [sa.text('lower(name)')])

    op.create_table(
        'entry',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('person_id', sa.Integer(),
                  sa.ForeignKey('person.id', ondelete='CASCADE'), nullable=False),
        sa.Column('drank_on', sa.Date(), nullable=False),
        sa.Column('time_period', sa.Enum(*TIME_PERIODS, name='timeperiod'),
                  nullable=False),
        sa.Column('context', sa.JSON(), nullable=False),
        sa.Column('drink_id', sa.Integer(),
                  sa.ForeignKey('drink.id', ondelete='NO ACTION'), nullable=False),
        *_approx('min_quantity', nullable=False),
        *_approx('max_quantity', nullable=False),
        *_approx('volume', nullable=True),
        sa.Column('volume_unit', sa.Enum(*VOLUME_UNITS, name='volumeunit'),
                  nullable=True),
        *_approx('volume_ml', nullable=True),
        sa.Column('volume_ml_unit', sa.Enum(*VOLUME_UNITS, name='volumeunit'),
                  nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            'min_quantity_val <= max_quantity_val', name='ck_entry_quantity_range'
        ),
        sa.CheckConstraint('min_quantity_val >= 0', name='ck_entry_positive_quantity'),
    )
    op.create_index(
        'ix_entry_person_drink_drank_on', 'entry',
        ['person_id', 'drink_id', 'drank_on'],
    )


def downgrade() -> None:
    """Drop every table."""
    op.drop_index('ix_entry_person_drink_drank_on', table_name='entry')
    op.drop_table('entry')
    op.drop_index('ix_drink_name_lower', table_name='drink')
    op.drop_table('drink')
    op.drop_table('person')
