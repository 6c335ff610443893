"""unique donor and donation category names, shift end after start

Revision ID: 8e4b2d7a1c90
Revises: 5c3a1e2f9d47
Create Date: 2026-10-20 09:30:00.000000

"""

# revision identifiers, used by Alembic.
revision = '8e4b2d7a1c90'
down_revision = '5c3a1e2f9d47'

from alembic import op


def upgrade():
    with op.batch_alter_table('donor', schema=None) as batch_op:
        batch_op.create_unique_constraint('uq_donor_name', ['organization_id', 'name'])

    with op.batch_alter_table('donation_category', schema=None) as batch_op:
        batch_op.create_unique_constraint('uq_donation_category_name', ['organization_id', 'name'])

    with op.batch_alter_table('shift', schema=None) as batch_op:
        batch_op.create_check_constraint(op.f('ck_shift_end_after_start'), '"end" >= start')


def downgrade():
    with op.batch_alter_table('shift', schema=None) as batch_op:
        batch_op.drop_constraint(op.f('ck_shift_end_after_start'), type_='check')

    with op.batch_alter_table('donation_category', schema=None) as batch_op:
        batch_op.drop_constraint('uq_donation_category_name', type_='unique')

    with op.batch_alter_table('donor', schema=None) as batch_op:
        batch_op.drop_constraint('uq_donor_name', type_='unique')
