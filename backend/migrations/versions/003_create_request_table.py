"""Create request table

Revision ID: 003
Revises: 002
Create Date: 2026-10-05 10:20:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '003'
down_revision = '002'
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'request',
        sa.Column('id', postgresql.UUID(as_uuid=True), server_default=sa.text('gen_random_uuid()'), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('declaration_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('status', sa.Text(), server_default='PENDING', nullable=False),
        sa.Column('url', sa.Text(), nullable=True),
        sa.Column('generation_date', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('attendant_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['user.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['declaration_id'], ['declaration.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['attendant_id'], ['user.id'], ondelete='SET NULL'),
        sa.CheckConstraint(
            "status IN ('PENDING', 'PROCESSING', 'COMPLETED', 'REJECTED')",
            name='ck_request_status'
        ),
    )

    op.create_index('ix_request_user_id_created_at', 'request', ['user_id', 'created_at'])
    op.create_index('ix_request_generation_date', 'request', ['generation_date'])

    # At most one PENDING request per (user, declaration)
    op.create_index(
        'uq_request_pending_user_declaration',
        'request',
        ['user_id', 'declaration_id'],
        unique=True,
        postgresql_where=sa.text("status = 'PENDING'"),
    )

    op.execute("""
        CREATE TRIGGER update_request_updated_at
        BEFORE UPDATE ON request
        FOR EACH ROW
        EXECUTE FUNCTION update_updated_at_column();
    """)


def downgrade():
    op.execute('DROP TRIGGER IF EXISTS update_request_updated_at ON request')
    op.drop_index('uq_request_pending_user_declaration', table_name='request')
    op.drop_index('ix_request_generation_date', table_name='request')
    op.drop_index('ix_request_user_id_created_at', table_name='request')
    op.drop_table('request')
