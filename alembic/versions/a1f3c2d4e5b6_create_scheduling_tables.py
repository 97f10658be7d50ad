"""create scheduling tables

Revision ID: a1f3c2d4e5b6
Revises:
Create Date: 2026-10-19 09:12:44.318205

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = 'a1f3c2d4e5b6'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""

    # 1. Providers
    op.create_table(
        'providers',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('email', sa.String(255), nullable=False, unique=True),
        sa.Column('business_name', sa.String(200), nullable=True),
        sa.Column('phone', sa.String(30), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
    )

    # 2. Services
    op.create_table(
        'services',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('provider_id', sa.Integer, sa.ForeignKey('providers.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('description', sa.Text, nullable=True),
        sa.Column('duration', sa.Integer, nullable=False),
        sa.Column('price', sa.Numeric(10, 2), nullable=False, server_default='0'),
        sa.Column('requirements', sa.Text, nullable=True),
        sa.Column('is_active', sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.CheckConstraint('duration > 0', name='ck_services_duration_positive'),
        sa.CheckConstraint('price >= 0', name='ck_services_price_non_negative'),
    )
    op.create_index('ix_services_provider_id', 'services', ['provider_id'])
    op.create_index('ix_services_is_active', 'services', ['is_active'])

    # 3. Clients
    op.create_table(
        'clients',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('provider_id', sa.Integer, sa.ForeignKey('providers.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(30), nullable=False),
        sa.Column('whatsapp', sa.String(30), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='active'),
        sa.Column('notes', sa.Text, nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
    )
    op.create_index('ix_clients_provider_id', 'clients', ['provider_id'])
    op.create_index('ix_clients_email', 'clients', ['email'])

    # 4. Weekly availability, one row per provider and weekday
    op.create_table(
        'availability_rules',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('provider_id', sa.Integer, sa.ForeignKey('providers.id', ondelete='CASCADE'), nullable=False),
        sa.Column('day_of_week', sa.Integer, nullable=False),
        sa.Column('is_enabled', sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column('intervals', sa.JSON, nullable=False),
        sa.UniqueConstraint('provider_id', 'day_of_week', name='uq_availability_provider_day'),
        sa.CheckConstraint('day_of_week >= 0 AND day_of_week <= 6', name='ck_availability_day_of_week'),
    )
    op.create_index('ix_availability_rules_provider_id', 'availability_rules', ['provider_id'])

    # 5. Appointments
    op.create_table(
        'appointments',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('provider_id', sa.Integer, sa.ForeignKey('providers.id', ondelete='CASCADE'), nullable=False),
        sa.Column('client_id', sa.Integer, sa.ForeignKey('clients.id', ondelete='CASCADE'), nullable=False),
        sa.Column('service_id', sa.Integer, sa.ForeignKey('services.id'), nullable=False),
        sa.Column('date', sa.Date, nullable=False),
        sa.Column('start_time', sa.Time, nullable=False),
        sa.Column('notes', sa.Text, nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
    )
    op.create_index('idx_appointments_provider_date', 'appointments', ['provider_id', 'date'])

    # 6. Public booking page settings
    op.create_table(
        'booking_forms',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('provider_id', sa.Integer, sa.ForeignKey('providers.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('title', sa.String(200), nullable=False, server_default='Book Your Appointment'),
        sa.Column('description', sa.Text, nullable=False, server_default='Schedule your appointment with us today.'),
        sa.Column('background_color', sa.String(20), nullable=False, server_default='#6366F1'),
        sa.Column('button_color', sa.String(20), nullable=False, server_default='#10B981'),
        sa.Column('header_image', sa.String(500), nullable=True),
        sa.Column('is_active', sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('booking_forms')
    op.drop_index('idx_appointments_provider_date', table_name='appointments')
    op.drop_table('appointments')
    op.drop_index('ix_availability_rules_provider_id', table_name='availability_rules')
    op.drop_table('availability_rules')
    op.drop_index('ix_clients_email', table_name='clients')
    op.drop_index('ix_clients_provider_id', table_name='clients')
    op.drop_table('clients')
    op.drop_index('ix_services_is_active', table_name='services')
    op.drop_index('ix_services_provider_id', table_name='services')
    op.drop_table('services')
    op.drop_table('providers')
