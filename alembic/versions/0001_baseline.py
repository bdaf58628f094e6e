"""Baseline: catalog, working hours and appointments.

Revision ID: 0001_baseline
Revises:
Create Date: 2026-10-17

Creates:
- employees
- services
- working_intervals
- appointments
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_baseline'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'employees',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )

    op.create_table(
        'services',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('duration_minutes', sa.Integer(), nullable=False),
        sa.Column('cost', sa.Numeric(10, 2), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.CheckConstraint('duration_minutes > 0', name='ck_service_positive_duration'),
    )

    op.create_table(
        'working_intervals',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column(
            'employee_id', sa.Uuid(),
            sa.ForeignKey('employees.id', ondelete='CASCADE'), nullable=False,
        ),
        sa.Column('day_of_week', sa.Integer(), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.CheckConstraint('day_of_week >= 1 AND day_of_week <= 7', name='ck_valid_day_of_week'),
        sa.CheckConstraint('end_time > start_time', name='ck_interval_end_after_start'),
    )
    op.create_index(
        'idx_working_intervals_employee_day', 'working_intervals', ['employee_id', 'day_of_week']
    )

    op.create_table(
        'appointments',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('client_name', sa.String(255), nullable=False),
        sa.Column('client_document', sa.String(50), nullable=False),
        sa.Column('client_phone', sa.String(30), nullable=False),
        sa.Column('employee_id', sa.Uuid(), sa.ForeignKey('employees.id'), nullable=False),
        sa.Column('service_id', sa.Uuid(), sa.ForeignKey('services.id'), nullable=False),
        sa.Column('scheduled_start', sa.DateTime(), nullable=False),
        sa.Column('scheduled_end', sa.DateTime(), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='scheduled'),
        sa.Column('total_cost', sa.Numeric(10, 2), nullable=False),
        sa.Column('reminder_sent', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('scheduled_end > scheduled_start', name='ck_appointment_end_after_start'),
    )
    op.create_index(
        'idx_appointments_employee_start', 'appointments', ['employee_id', 'scheduled_start']
    )
    op.create_index(
        'idx_appointments_reminder_scan', 'appointments',
        ['reminder_sent', 'status', 'scheduled_start'],
    )
    op.create_index(
        'idx_appointments_client', 'appointments', ['client_document', 'client_phone']
    )


def downgrade() -> None:
    op.drop_table('appointments')
    op.drop_table('working_intervals')
    op.drop_table('services')
    op.drop_table('employees')
