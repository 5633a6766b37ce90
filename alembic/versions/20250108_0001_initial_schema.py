"""Initial schema - blotter cases, parties, status updates and hearings.

Revision ID: 0001
Revises:
Create Date: 2025-01-08

Creates:
- blotter_cases: one row per filed case with its workflow status and stage dates
- blotter_parties: complainant, respondent and witnesses
- status_updates: append-only transition history
- hearings: scheduled mediation/conciliation sessions
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

from blotter.core.models.base import GUID

# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Blotter cases
    op.create_table(
        'blotter_cases',
        sa.Column('id', GUID(), primary_key=True),
        sa.Column('case_number', sa.String(50), nullable=False, unique=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='FILED'),
        sa.Column('priority', sa.String(10), nullable=False, server_default='MEDIUM'),
        sa.Column('incident_type', sa.String(100), nullable=False),
        sa.Column('incident_date', sa.Date, nullable=False),
        sa.Column('incident_time', sa.String(20)),
        sa.Column('incident_location', sa.Text, nullable=False),
        sa.Column('incident_description', sa.Text, nullable=False),
        sa.Column('report_date', sa.Date, nullable=False),
        sa.Column('filing_fee', sa.Numeric(10, 2)),
        sa.Column('filing_fee_paid', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('docket_date', sa.Date),
        sa.Column('summon_date', sa.Date),
        sa.Column('mediation_start_date', sa.Date),
        sa.Column('mediation_end_date', sa.Date),
        sa.Column('conciliation_start_date', sa.Date),
        sa.Column('conciliation_end_date', sa.Date),
        sa.Column('extension_date', sa.Date),
        sa.Column('certification_date', sa.Date),
        sa.Column('resolution_method', sa.String(20)),
        sa.Column('escalated_to', sa.Text),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), onupdate=sa.func.now()),
    )
    op.create_index('ix_blotter_cases_status', 'blotter_cases', ['status'])
    op.create_index('ix_blotter_cases_priority', 'blotter_cases', ['priority'])
    op.create_index('ix_blotter_cases_incident_type', 'blotter_cases', ['incident_type'])
    op.create_index('ix_blotter_cases_status_priority', 'blotter_cases', ['status', 'priority'])
    op.create_index('ix_blotter_cases_report_date', 'blotter_cases', ['report_date'])

    # Parties
    op.create_table(
        'blotter_parties',
        sa.Column('id', GUID(), primary_key=True),
        sa.Column('case_id', GUID(), sa.ForeignKey('blotter_cases.id', ondelete='CASCADE'), nullable=False),
        sa.Column('party_type', sa.String(20), nullable=False),
        sa.Column('first_name', sa.String(100), nullable=False),
        sa.Column('middle_name', sa.String(100)),
        sa.Column('last_name', sa.String(100), nullable=False),
        sa.Column('address', sa.Text, nullable=False),
        sa.Column('contact_number', sa.String(50)),
        sa.Column('email', sa.String(255)),
        sa.Column('is_resident', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), onupdate=sa.func.now()),
    )
    op.create_index('ix_blotter_parties_case_id', 'blotter_parties', ['case_id'])
    op.create_index('ix_blotter_parties_first_name', 'blotter_parties', ['first_name'])
    op.create_index('ix_blotter_parties_last_name', 'blotter_parties', ['last_name'])

    # Status history
    op.create_table(
        'status_updates',
        sa.Column('id', GUID(), primary_key=True),
        sa.Column('case_id', GUID(), sa.ForeignKey('blotter_cases.id', ondelete='CASCADE'), nullable=False),
        sa.Column('sequence', sa.Integer, nullable=False),
        sa.Column('from_status', sa.String(20), nullable=False),
        sa.Column('requested_status', sa.String(20), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('actor', sa.String(255), nullable=False),
        sa.Column('remarks', sa.Text),
        sa.Column('details', sa.JSON),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_status_updates_case_id', 'status_updates', ['case_id'])
    op.create_index('ix_status_updates_case_sequence', 'status_updates', ['case_id', 'sequence'], unique=True)

    # Hearings
    op.create_table(
        'hearings',
        sa.Column('id', GUID(), primary_key=True),
        sa.Column('case_id', GUID(), sa.ForeignKey('blotter_cases.id', ondelete='CASCADE'), nullable=False),
        sa.Column('hearing_date', sa.Date, nullable=False),
        sa.Column('hearing_time', sa.String(20)),
        sa.Column('location', sa.Text),
        sa.Column('status', sa.String(20), nullable=False, server_default='SCHEDULED'),
        sa.Column('notes', sa.Text),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), onupdate=sa.func.now()),
    )
    op.create_index('ix_hearings_case_id', 'hearings', ['case_id'])
    op.create_index('ix_hearings_hearing_date', 'hearings', ['hearing_date'])
    op.create_index('ix_hearings_status', 'hearings', ['status'])
    op.create_index('ix_hearings_case_date', 'hearings', ['case_id', 'hearing_date'])


def downgrade() -> None:
    op.drop_table('hearings')
    op.drop_table('status_updates')
    op.drop_table('blotter_parties')
    op.drop_table('blotter_cases')
