"""Initial schema.

Revision ID: 20261001_000001
Revises:
Create Date: 2026-10-01

Participants, investments, reward ledger, plan configuration layers and
batch run log.
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = '20261001_000001'
down_revision = None
branch_labels = None
depends_on = None

JSON_TYPE = sa.JSON().with_variant(postgresql.JSONB(), 'postgresql')


def upgrade() -> None:
    """Create all tables."""
    op.create_table(
        'participants',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('display_name', sa.String(length=255), nullable=False),
        sa.Column('upline_id', sa.Integer(), nullable=True),
        sa.Column('org_unit_id', sa.Integer(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('self_volume', sa.DECIMAL(precision=18, scale=8), nullable=False, server_default='0'),
        sa.Column('direct_volume', sa.DECIMAL(precision=18, scale=8), nullable=False, server_default='0'),
        sa.Column('total_volume', sa.DECIMAL(precision=18, scale=8), nullable=False, server_default='0'),
        sa.Column('rank', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('rank_updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['upline_id'], ['participants.id'], ondelete='SET NULL'),
        sa.CheckConstraint('self_volume >= 0', name='check_participant_self_volume_non_negative'),
        sa.CheckConstraint('direct_volume >= 0', name='check_participant_direct_volume_non_negative'),
        sa.CheckConstraint('total_volume >= 0', name='check_participant_total_volume_non_negative'),
        sa.CheckConstraint('rank >= 0', name='check_participant_rank_non_negative'),
        sa.CheckConstraint(
            'upline_id IS NULL OR upline_id != id', name='check_participant_not_own_upline'
        ),
    )
    op.create_index('ix_participants_upline_id', 'participants', ['upline_id'])
    op.create_index('ix_participants_org_unit_id', 'participants', ['org_unit_id'])

    op.create_table(
        'investments',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('participant_id', sa.Integer(), nullable=False),
        sa.Column('referrer_id', sa.Integer(), nullable=True),
        sa.Column('org_unit_id', sa.Integer(), nullable=True),
        sa.Column('amount', sa.DECIMAL(precision=18, scale=8), nullable=False),
        sa.Column('product_variant', sa.String(length=20), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='pending'),
        sa.Column('current_phase', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('current_rate', sa.DECIMAL(precision=10, scale=6), nullable=False, server_default='0'),
        sa.Column('phase_started_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('months_completed', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('total_profit_earned', sa.DECIMAL(precision=18, scale=8), nullable=False, server_default='0'),
        sa.Column('profit_cap', sa.DECIMAL(precision=18, scale=8), nullable=False, server_default='0'),
        sa.Column('last_distribution_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            'plan_snapshot',
            JSON_TYPE,
            nullable=True,
            comment='Effective plan configuration locked at activation'
        ),
        sa.Column('activated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('completion_reason', sa.String(length=20), nullable=True),
        sa.Column('rejected_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['participant_id'], ['participants.id']),
        sa.ForeignKeyConstraint(['referrer_id'], ['participants.id']),
        sa.CheckConstraint('amount > 0', name='check_investment_amount_positive'),
        sa.CheckConstraint('current_phase >= 1', name='check_investment_phase_positive'),
        sa.CheckConstraint('months_completed >= 0', name='check_investment_months_non_negative'),
        sa.CheckConstraint('total_profit_earned >= 0', name='check_investment_profit_non_negative'),
        sa.CheckConstraint(
            'total_profit_earned <= profit_cap', name='check_investment_profit_not_exceeds_cap'
        ),
        sa.CheckConstraint(
            "product_variant IN ('with_product', 'without_product')",
            name='check_investment_product_variant'
        ),
        sa.CheckConstraint(
            "status IN ('pending', 'active', 'completed', 'rejected')",
            name='check_investment_status'
        ),
    )
    op.create_index('ix_investments_participant_id', 'investments', ['participant_id'])
    op.create_index('ix_investments_status', 'investments', ['status'])
    op.create_index('idx_investment_status_id', 'investments', ['status', 'id'])

    op.create_table(
        'reward_records',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('investment_id', sa.Integer(), nullable=False),
        sa.Column('recipient_id', sa.Integer(), nullable=False),
        sa.Column('reward_type', sa.String(length=20), nullable=False),
        sa.Column('amount', sa.DECIMAL(precision=18, scale=8), nullable=False),
        sa.Column('level', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('rate', sa.DECIMAL(precision=10, scale=6), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['investment_id'], ['investments.id']),
        sa.ForeignKeyConstraint(['recipient_id'], ['participants.id']),
        sa.CheckConstraint('amount > 0', name='check_reward_amount_positive'),
        sa.CheckConstraint('level >= 0', name='check_reward_level_non_negative'),
        sa.CheckConstraint(
            "reward_type IN ('profit_share', 'matching_bonus', 'referral_bonus')",
            name='check_reward_type'
        ),
    )
    op.create_index('ix_reward_records_investment_id', 'reward_records', ['investment_id'])
    op.create_index('ix_reward_records_recipient_id', 'reward_records', ['recipient_id'])
    op.create_index('idx_reward_recipient_type', 'reward_records', ['recipient_id', 'reward_type'])

    op.create_table(
        'plan_configurations',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('scope', sa.String(length=20), nullable=False),
        sa.Column('scope_id', sa.Integer(), nullable=True),
        sa.Column('referral_bonus_rates', JSON_TYPE, nullable=True),
        sa.Column('matching_bonus_rates', JSON_TYPE, nullable=True),
        sa.Column('with_product_phases', JSON_TYPE, nullable=True),
        sa.Column('without_product_phases', JSON_TYPE, nullable=True),
        sa.Column('rank_targets', JSON_TYPE, nullable=True),
        sa.Column('profit_cap_multiplier', sa.DECIMAL(precision=10, scale=4), nullable=True),
        sa.Column('horizon_months', sa.Integer(), nullable=True),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('scope', 'scope_id', name='uq_plan_configuration_scope'),
    )

    op.create_table(
        'batch_run_logs',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('job_name', sa.String(length=100), nullable=False),
        sa.Column('attempt', sa.Integer(), nullable=False),
        sa.Column('outcome', sa.String(length=20), nullable=False),
        sa.Column('details', sa.Text(), nullable=True),
        sa.Column('error', sa.Text(), nullable=True),
        sa.Column('processed_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('active_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_batch_run_logs_job_name', 'batch_run_logs', ['job_name'])
    op.create_index('ix_batch_run_logs_created_at', 'batch_run_logs', ['created_at'])


def downgrade() -> None:
    """Drop all tables."""
    op.drop_index('ix_batch_run_logs_created_at', table_name='batch_run_logs')
    op.drop_index('ix_batch_run_logs_job_name', table_name='batch_run_logs')
    op.drop_table('batch_run_logs')
    op.drop_table('plan_configurations')
    op.drop_index('idx_reward_recipient_type', table_name='reward_records')
    op.drop_index('ix_reward_records_recipient_id', table_name='reward_records')
    op.drop_index('ix_reward_records_investment_id', table_name='reward_records')
    op.drop_table('reward_records')
    op.drop_index('idx_investment_status_id', table_name='investments')
    op.drop_index('ix_investments_status', table_name='investments')
    op.drop_index('ix_investments_participant_id', table_name='investments')
    op.drop_table('investments')
    op.drop_index('ix_participants_org_unit_id', table_name='participants')
    op.drop_index('ix_participants_upline_id', table_name='participants')
    op.drop_table('participants')
