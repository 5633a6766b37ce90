"""Case version counter for compare-and-set writes.

Revision ID: 0002
Revises: 0001
Create Date: 2025-01-15

Adds:
- blotter_cases.version: incremented by every workflow write, so two writers
  that read the same case cannot both succeed even when the status stays
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '0002'
down_revision: Union[str, None] = '0001'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.add_column(
        'blotter_cases',
        sa.Column('version', sa.Integer, nullable=False, server_default='1'),
    )


def downgrade() -> None:
    with op.batch_alter_table('blotter_cases') as batch_op:
        batch_op.drop_column('version')
