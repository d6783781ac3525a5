"""normalize_lookup_tables

Revision ID: 7c4d9e1b2f86
Revises: 3a1f5c2e9b70
Create Date: 2020-02-15 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

from drinklog.ledger.enums import TimePeriod, VolumeUnit
from drinklog.ledger.schema_evolution import (
    TIME_PERIOD_ROWS,
    VOLUME_UNIT_ROWS,
    migrate_row_v1_to_v2,
)
from drinklog.ledger.units import STANDARD_FACTORS


# revision identifiers, used by Alembic.
revision: str = '7c4d9e1b2f86'
down_revision: Union[str, Sequence[str], None] = '3a1f5c2e9b70'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_V1_UNIT_LABELS = tuple(unit.value for unit in VolumeUnit)


def _approx_columns(name):
    return [
        sa.column(f'{name}_val', sa.Float),
        sa.column(f'{name}_is_approximate', sa.Boolean),
    ]


def _entry_v1():
    return sa.table(
        'entry',
        sa.column('id', sa.Integer),
        sa.column('person_id', sa.Integer),
        sa.column('drank_on', sa.Date),
        sa.column('time_period', sa.String),
        sa.column('context', sa.JSON),
        sa.column('drink_id', sa.Integer),
        *_approx_columns('min_quantity'),
        *_approx_columns('max_quantity'),
        *_approx_columns('volume'),
        sa.column('volume_unit', sa.String),
        *_approx_columns('volume_ml'),
        sa.column('volume_ml_unit', sa.String),
        sa.column('time_id', sa.Integer),
        sa.column('volume_unit_id', sa.Integer),
    )


def _fold(row, name):
    if row[f'{name}_val'] is None:
        return None
    return {
        'val': row[f'{name}_val'],
        'is_approximate': bool(row[f'{name}_is_approximate']),
    }


def _fold_volume(row, name):
    amount = _fold(row, name)
    if amount is None:
        return None
    return {'volume': amount, 'unit': row[f'{name}_unit']}


def _v1_entry_row(row):
    """Generation-1 logical row from the flattened columns."""
    return {
        'id': row['id'],
        'person_id': row['person_id'],
        'drank_on': row['drank_on'],
        'time_period': row['time_period'],
        'context': row['context'],
        'drink_id': row['drink_id'],
        'min_quantity': _fold(row, 'min_quantity'),
        'max_quantity': _fold(row, 'max_quantity'),
        'volume': _fold_volume(row, 'volume'),
        'volume_ml': _fold_volume(row, 'volume_ml'),
    }


def upgrade() -> None:
    """
    Move enums into lookup tables and drop redundant entry columns.

    Changes:
    1. Creates and seeds time_period (ids 1..4) and volume_unit (ids 1..4)
    2. Rewrites every entry through migrate_row_v1_to_v2, filling
       time_id and volume_unit_id
    3. Drops entry.time_period, entry.context, entry.volume_unit and the
       volume_ml columns
    4. Adds multiplier to the drink uniqueness constraint
    """
    time_period = op.create_table(
        'time_period',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=False),
        sa.Column('name', sa.String(length=16), nullable=False, unique=True),
    )
    volume_unit = op.create_table(
        'volume_unit',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=False),
        sa.Column('abbr', sa.String(length=16), nullable=False, unique=True),
    )
    op.bulk_insert(time_period, TIME_PERIOD_ROWS)
    op.bulk_insert(volume_unit, VOLUME_UNIT_ROWS)

    op.add_column('entry', sa.Column('time_id', sa.Integer(), nullable=True))
    op.add_column('entry', sa.Column('volume_unit_id', sa.Integer(), nullable=True))

    # Data migration
    bind = op.get_bind()
    entry = _entry_v1()
    rows = bind.execute(sa.select(entry)).mappings().all()
    for row in rows:
        migrated = migrate_row_v1_to_v2('entry', _v1_entry_row(row))
        volume = migrated['volume']
        bind.execute(
            entry.update()
            .where(entry.c.id == row['id'])
            .values(
                time_id=migrated['time_id'],
                volume_val=volume.value if volume is not None else None,
                volume_is_approximate=(
                    volume.is_approximate if volume is not None else None
                ),
                volume_unit_id=migrated['volume_unit_id'],
            )
        )

    op.drop_index('ix_entry_person_drink_drank_on', table_name='entry')
    with op.batch_alter_table('entry') as batch_op:
        batch_op.drop_column('time_period')
        batch_op.drop_column('context')
        batch_op.drop_column('volume_unit')
        batch_op.drop_column('volume_ml_val')
        batch_op.drop_column('volume_ml_is_approximate')
        batch_op.drop_column('volume_ml_unit')
        batch_op.alter_column('time_id', existing_type=sa.Integer(), nullable=False)
        batch_op.create_foreign_key(
            'fk_entry_time_id_time_period', 'time_period',
            ['time_id'], ['id'], ondelete='RESTRICT',
        )
        batch_op.create_foreign_key(
            'fk_entry_volume_unit_id_volume_unit', 'volume_unit',
            ['volume_unit_id'], ['id'], ondelete='RESTRICT',
        )
    op.create_index('ix_entry_person_drank_on', 'entry', ['person_id', 'drank_on'])
    op.create_index('ix_entry_drank_on', 'entry', ['drank_on'])
    op.create_index('ix_entry_drink_id', 'entry', ['drink_id'])

    # Expression indexes do not survive a batch table rebuild
    op.drop_index('ix_drink_name_lower', table_name='drink')
    with op.batch_alter_table('drink') as batch_op:
        batch_op.drop_constraint('uq_drink_name_abv', type_='unique')
        batch_op.create_unique_constraint(
            'uq_drink_identity',
            [
                'name',
                'min_abv_val',
                'min_abv_is_approximate',
                'max_abv_val',
                'max_abv_is_approximate',
                'multiplier',
            ],
        )
    op.create_index('ix_drink_name_lower', 'drink', [sa.text('lower(name)')])


def downgrade() -> None:
    """
    Restore inline enums and the redundant entry columns.

    Warning: Entry context notes were discarded by the upgrade and come
    back as empty lists. Fails if two drinks differ only by multiplier.
    """
    op.drop_index('ix_drink_name_lower', table_name='drink')
    with op.batch_alter_table('drink') as batch_op:
        batch_op.drop_constraint('uq_drink_identity', type_='unique')
        batch_op.create_unique_constraint(
            'uq_drink_name_abv',
            [
                'name',
                'min_abv_val',
                'min_abv_is_approximate',
                'max_abv_val',
                'max_abv_is_approximate',
            ],
        )
    op.create_index('ix_drink_name_lower', 'drink', [sa.text('lower(name)')])

    op.add_column('entry', sa.Column('time_period', sa.String(length=9), nullable=True))
    op.add_column('entry', sa.Column('context', sa.JSON(), nullable=True))
    op.add_column('entry', sa.Column('volume_unit', sa.String(length=5), nullable=True))
    op.add_column('entry', sa.Column('volume_ml_val', sa.Float(), nullable=True))
    op.add_column(
        'entry', sa.Column('volume_ml_is_approximate', sa.Boolean(), nullable=True)
    )
    op.add_column('entry', sa.Column('volume_ml_unit', sa.String(length=5), nullable=True))

    bind = op.get_bind()
    entry = _entry_v1()
    rows = bind.execute(sa.select(entry)).mappings().all()
    for row in rows:
        values = {
            'time_period': TimePeriod.from_id(row['time_id']).value,
            'context': [],
        }
        unit = (
            VolumeUnit.from_id(row['volume_unit_id'])
            if row['volume_unit_id'] is not None
            else None
        )
        if unit is not None and row['volume_val'] is not None:
            values.update(
                volume_unit=unit.value,
                volume_ml_val=row['volume_val'] * STANDARD_FACTORS[unit],
                volume_ml_is_approximate=row['volume_is_approximate'],
                volume_ml_unit=VolumeUnit.ML.value,
            )
        bind.execute(entry.update().where(entry.c.id == row['id']).values(**values))

    op.drop_index('ix_entry_drink_id', table_name='entry')
    op.drop_index('ix_entry_drank_on', table_name='entry')
    op.drop_index('ix_entry_person_drank_on', table_name='entry')
    with op.batch_alter_table('entry') as batch_op:
        batch_op.drop_constraint('fk_entry_volume_unit_id_volume_unit', type_='foreignkey')
        batch_op.drop_constraint('fk_entry_time_id_time_period', type_='foreignkey')
        batch_op.drop_column('volume_unit_id')
        batch_op.drop_column('time_id')
        batch_op.alter_column(
            'time_period',
            existing_type=sa.String(length=9),
            type_=sa.Enum(*(p.value for p in TimePeriod), name='timeperiod'),
            nullable=False,
        )
        batch_op.alter_column('context', existing_type=sa.JSON(), nullable=False)
        batch_op.alter_column(
            'volume_unit',
            existing_type=sa.String(length=5),
            type_=sa.Enum(*_V1_UNIT_LABELS, name='volumeunit'),
        )
        batch_op.alter_column(
            'volume_ml_unit',
            existing_type=sa.String(length=5),
            type_=sa.Enum(*_V1_UNIT_LABELS, name='volumeunit'),
        )
    op.create_index(
        'ix_entry_person_drink_drank_on', 'entry',
        ['person_id', 'drink_id', 'drank_on'],
    )

    op.drop_table('volume_unit')
    op.drop_table('time_period')
