"""create users, prospects and audit_logs tables

Revision ID: c3f1a9e2b7d4
Revises:
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa

revision = 'c3f1a9e2b7d4'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('role', sa.Enum('ADMIN', 'AGENT', 'VIEWER', name='userrole'), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'prospects',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('prospect_type', sa.String(20), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('company_name', sa.String(255), nullable=True),
        sa.Column('company_domain', sa.String(255), nullable=True),
        sa.Column('company_industry', sa.String(255), nullable=True),
        sa.Column('company_size', sa.String(100), nullable=True),
        sa.Column('company_location', sa.String(255), nullable=True),
        sa.Column('company_linkedin', sa.String(500), nullable=True),
        sa.Column('contact_name', sa.String(255), nullable=True),
        sa.Column('contact_email', sa.String(255), nullable=True),
        sa.Column('contact_phone', sa.String(100), nullable=True),
        sa.Column('contact_title', sa.String(255), nullable=True),
        sa.Column('contact_linkedin', sa.String(500), nullable=True),
        sa.Column('tags', sa.JSON(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('source', sa.String(100), nullable=True),
        sa.Column('score', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_by', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_prospects_status', 'prospects', ['status'])
    op.create_index('ix_prospects_company_domain', 'prospects', ['company_domain'])
    op.create_index('ix_prospects_contact_email', 'prospects', ['contact_email'])
    op.create_index('ix_prospects_created_by', 'prospects', ['created_by'])

    op.create_table(
        'audit_logs',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('actor_user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('actor_role_snapshot', sa.String(50), nullable=False),
        sa.Column('action', sa.String(100), nullable=False),
        sa.Column('target_type', sa.String(50), nullable=False),
        sa.Column('import_session_id', sa.String(36), nullable=True),
        sa.Column('meta_json', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_audit_logs_actor_user_id', 'audit_logs', ['actor_user_id'])
    op.create_index('ix_audit_logs_action', 'audit_logs', ['action'])
    op.create_index('ix_audit_logs_import_session_id', 'audit_logs', ['import_session_id'])


def downgrade() -> None:
    op.drop_index('ix_audit_logs_import_session_id', 'audit_logs')
    op.drop_index('ix_audit_logs_action', 'audit_logs')
    op.drop_index('ix_audit_logs_actor_user_id', 'audit_logs')
    op.drop_table('audit_logs')
    op.drop_index('ix_prospects_created_by', 'prospects')
    op.drop_index('ix_prospects_contact_email', 'prospects')
    op.drop_index('ix_prospects_company_domain', 'prospects')
    op.drop_index('ix_prospects_status', 'prospects')
    op.drop_table('prospects')
    op.drop_index('ix_users_email', 'users')
    op.drop_table('users')
    sa.Enum(name='userrole').drop(op.get_bind(), checkfirst=True)
