"""initial schema

Revision ID: 5c3a1e2f9d47
Revises: None
Create Date: 2026-10-19 12:00:00.000000

"""

# revision identifiers, used by Alembic.
revision = '5c3a1e2f9d47'
down_revision = None

from alembic import op
import sqlalchemy as sa


def upgrade():
    op.create_table('organization',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('name', sa.String(), nullable=False),
    sa.Column('address', sa.Text(), nullable=True),
    sa.Column('incoming_dollar_value', sa.Float(), nullable=False),
    sa.PrimaryKeyConstraint('id', name=op.f('pk_organization'))
    )
    op.create_index(op.f('ix_organization_name'), 'organization', ['name'], unique=True)

    op.create_table('user',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('email', sa.String(), nullable=False),
    sa.Column('first_name', sa.String(), nullable=False),
    sa.Column('last_name', sa.String(), nullable=False),
    sa.Column('phone', sa.String(), nullable=True),
    sa.Column('password_hash', sa.String(), nullable=True),
    sa.Column('role', sa.Enum('ADMIN', 'STAFF', 'VOLUNTEER', name='userrole'), nullable=False),
    sa.Column('status', sa.Enum('PENDING', 'APPROVED', 'DENIED', name='userstatus'), nullable=False),
    sa.Column('organization_id', sa.Integer(), nullable=False),
    sa.Column('created_at', sa.DateTime(), nullable=False),
    sa.Column('approved_at', sa.DateTime(), nullable=True),
    sa.Column('approved_by_id', sa.Integer(), nullable=True),
    sa.Column('denied_at', sa.DateTime(), nullable=True),
    sa.Column('denied_by_id', sa.Integer(), nullable=True),
    sa.Column('denial_reason', sa.String(), nullable=True),
    sa.ForeignKeyConstraint(['approved_by_id'], ['user.id'], name=op.f('fk_user_approved_by_id_user'), ondelete='SET NULL'),
    sa.ForeignKeyConstraint(['denied_by_id'], ['user.id'], name=op.f('fk_user_denied_by_id_user'), ondelete='SET NULL'),
    sa.ForeignKeyConstraint(['organization_id'], ['organization.id'], name=op.f('fk_user_organization_id_organization')),
    sa.PrimaryKeyConstraint('id', name=op.f('pk_user')),
    sa.UniqueConstraint('email', name=op.f('uq_user_email')),
    sa.UniqueConstraint('phone', name=op.f('uq_user_phone'))
    )
    op.create_index(op.f('ix_user_organization_id'), 'user', ['organization_id'], unique=False)
    op.create_index('ix_user_email_lower', 'user', [sa.text('lower(email)')], unique=True)

    op.create_table('shift_category',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('organization_id', sa.Integer(), nullable=False),
    sa.Column('name', sa.String(), nullable=False),
    sa.Column('icon', sa.String(), nullable=True),
    sa.ForeignKeyConstraint(['organization_id'], ['organization.id'], name=op.f('fk_shift_category_organization_id_organization')),
    sa.PrimaryKeyConstraint('id', name=op.f('pk_shift_category')),
    sa.UniqueConstraint('organization_id', 'name', name='uq_shift_category_name')
    )
    op.create_index(op.f('ix_shift_category_organization_id'), 'shift_category', ['organization_id'], unique=False)

    op.create_table('recurring_shift',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('organization_id', sa.Integer(), nullable=False),
    sa.Column('shift_category_id', sa.Integer(), nullable=False),
    sa.Column('name', sa.String(), nullable=False),
    sa.Column('day_of_week', sa.Integer(), nullable=False),
    sa.Column('start_time', sa.Time(), nullable=False),
    sa.Column('end_time', sa.Time(), nullable=False),
    sa.Column('location', sa.String(), nullable=False),
    sa.Column('slots', sa.Integer(), nullable=False),
    sa.CheckConstraint('day_of_week >= 0 AND day_of_week <= 6', name=op.f('ck_recurring_shift_day_of_week_range')),
    sa.CheckConstraint('slots >= 1', name=op.f('ck_recurring_shift_slots_positive')),
    sa.ForeignKeyConstraint(['organization_id'], ['organization.id'], name=op.f('fk_recurring_shift_organization_id_organization')),
    sa.ForeignKeyConstraint(['shift_category_id'], ['shift_category.id'], name=op.f('fk_recurring_shift_shift_category_id_shift_category')),
    sa.PrimaryKeyConstraint('id', name=op.f('pk_recurring_shift'))
    )
    op.create_index(op.f('ix_recurring_shift_organization_id'), 'recurring_shift', ['organization_id'], unique=False)
    op.create_index(op.f('ix_recurring_shift_shift_category_id'), 'recurring_shift', ['shift_category_id'], unique=False)

    op.create_table('shift',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('organization_id', sa.Integer(), nullable=False),
    sa.Column('shift_category_id', sa.Integer(), nullable=False),
    sa.Column('name', sa.String(), nullable=False),
    sa.Column('start', sa.DateTime(), nullable=False),
    sa.Column('end', sa.DateTime(), nullable=False),
    sa.Column('location', sa.String(), nullable=False),
    sa.Column('slots', sa.Integer(), nullable=False),
    sa.CheckConstraint('slots >= 1', name=op.f('ck_shift_slots_positive')),
    sa.ForeignKeyConstraint(['organization_id'], ['organization.id'], name=op.f('fk_shift_organization_id_organization')),
    sa.ForeignKeyConstraint(['shift_category_id'], ['shift_category.id'], name=op.f('fk_shift_shift_category_id_shift_category')),
    sa.PrimaryKeyConstraint('id', name=op.f('pk_shift')),
    sa.UniqueConstraint('organization_id', 'shift_category_id', 'name', 'start', 'end', 'location', name='uq_shift_occurrence')
    )
    op.create_index(op.f('ix_shift_organization_id'), 'shift', ['organization_id'], unique=False)
    op.create_index(op.f('ix_shift_shift_category_id'), 'shift', ['shift_category_id'], unique=False)
    op.create_index(op.f('ix_shift_start'), 'shift', ['start'], unique=False)

    op.create_table('shift_signup',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('user_id', sa.Integer(), nullable=False),
    sa.Column('shift_id', sa.Integer(), nullable=False),
    sa.Column('check_in', sa.DateTime(), nullable=True),
    sa.Column('check_out', sa.DateTime(), nullable=True),
    sa.Column('meals_served', sa.Integer(), nullable=False),
    sa.Column('created_at', sa.DateTime(), nullable=False),
    sa.ForeignKeyConstraint(['shift_id'], ['shift.id'], name=op.f('fk_shift_signup_shift_id_shift'), ondelete='CASCADE'),
    sa.ForeignKeyConstraint(['user_id'], ['user.id'], name=op.f('fk_shift_signup_user_id_user'), ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id', name=op.f('pk_shift_signup')),
    sa.UniqueConstraint('user_id', 'shift_id', name='uq_shift_signup_user_shift')
    )
    op.create_index(op.f('ix_shift_signup_shift_id'), 'shift_signup', ['shift_id'], unique=False)
    op.create_index(op.f('ix_shift_signup_user_id'), 'shift_signup', ['user_id'], unique=False)

    op.create_table('donor',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('organization_id', sa.Integer(), nullable=False),
    sa.Column('name', sa.String(), nullable=False),
    sa.ForeignKeyConstraint(['organization_id'], ['organization.id'], name=op.f('fk_donor_organization_id_organization')),
    sa.PrimaryKeyConstraint('id', name=op.f('pk_donor'))
    )
    op.create_index(op.f('ix_donor_organization_id'), 'donor', ['organization_id'], unique=False)

    op.create_table('donation_category',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('organization_id', sa.Integer(), nullable=False),
    sa.Column('name', sa.String(), nullable=False),
    sa.ForeignKeyConstraint(['organization_id'], ['organization.id'], name=op.f('fk_donation_category_organization_id_organization')),
    sa.PrimaryKeyConstraint('id', name=op.f('pk_donation_category'))
    )
    op.create_index(op.f('ix_donation_category_organization_id'), 'donation_category', ['organization_id'], unique=False)

    op.create_table('donation',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('organization_id', sa.Integer(), nullable=False),
    sa.Column('donor_id', sa.Integer(), nullable=True),
    sa.Column('shift_id', sa.Integer(), nullable=True),
    sa.Column('shift_signup_id', sa.Integer(), nullable=True),
    sa.Column('summary', sa.Float(), nullable=False),
    sa.Column('created_at', sa.DateTime(), nullable=False),
    sa.ForeignKeyConstraint(['donor_id'], ['donor.id'], name=op.f('fk_donation_donor_id_donor')),
    sa.ForeignKeyConstraint(['organization_id'], ['organization.id'], name=op.f('fk_donation_organization_id_organization')),
    sa.ForeignKeyConstraint(['shift_id'], ['shift.id'], name=op.f('fk_donation_shift_id_shift'), ondelete='SET NULL'),
    sa.ForeignKeyConstraint(['shift_signup_id'], ['shift_signup.id'], name=op.f('fk_donation_shift_signup_id_shift_signup'), ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id', name=op.f('pk_donation'))
    )
    op.create_index(op.f('ix_donation_created_at'), 'donation', ['created_at'], unique=False)
    op.create_index(op.f('ix_donation_organization_id'), 'donation', ['organization_id'], unique=False)

    op.create_table('donation_item',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('donation_id', sa.Integer(), nullable=False),
    sa.Column('category_id', sa.Integer(), nullable=False),
    sa.Column('weight_kg', sa.Float(), nullable=False),
    sa.ForeignKeyConstraint(['category_id'], ['donation_category.id'], name=op.f('fk_donation_item_category_id_donation_category')),
    sa.ForeignKeyConstraint(['donation_id'], ['donation.id'], name=op.f('fk_donation_item_donation_id_donation'), ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id', name=op.f('pk_donation_item'))
    )
    op.create_index(op.f('ix_donation_item_category_id'), 'donation_item', ['category_id'], unique=False)
    op.create_index(op.f('ix_donation_item_donation_id'), 'donation_item', ['donation_id'], unique=False)

    op.create_table('weighing_category',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('organization_id', sa.Integer(), nullable=False),
    sa.Column('category', sa.String(), nullable=False),
    sa.Column('kilograms', sa.Float(), nullable=False),
    sa.Column('pounds', sa.Float(), nullable=False),
    sa.ForeignKeyConstraint(['organization_id'], ['organization.id'], name=op.f('fk_weighing_category_organization_id_organization')),
    sa.PrimaryKeyConstraint('id', name=op.f('pk_weighing_category')),
    sa.UniqueConstraint('organization_id', 'category', name='uq_weighing_category_name')
    )
    op.create_index(op.f('ix_weighing_category_organization_id'), 'weighing_category', ['organization_id'], unique=False)


def downgrade():
    op.drop_table('weighing_category')
    op.drop_table('donation_item')
    op.drop_table('donation')
    op.drop_table('donation_category')
    op.drop_table('donor')
    op.drop_table('shift_signup')
    op.drop_table('shift')
    op.drop_table('recurring_shift')
    op.drop_table('shift_category')
    op.drop_index('ix_user_email_lower', table_name='user')
    op.drop_table('user')
    op.drop_table('organization')
    sa.Enum(name='userstatus').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='userrole').drop(op.get_bind(), checkfirst=True)
