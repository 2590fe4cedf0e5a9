"""Initial migration: create all tables

Revision ID: initial
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = 'initial'
down_revision = None
branch_labels = None
depends_on = None


user_role = sa.Enum('USER', 'ADMIN', name='userrole')
level_color = sa.Enum('AMARELO', 'AZUL', 'VERDE', 'DOURADO', name='levelcolor')
exercise_type = sa.Enum('MULTIPLE_CHOICE', 'FILL_BLANK', 'AUDIO', name='exercisetype')
payment_method = sa.Enum('GOOGLE_PAY', 'DIAMONDS', name='paymentmethod')
transaction_status = sa.Enum('PENDING', 'COMPLETED', 'FAILED', name='transactionstatus')


def upgrade() -> None:
    # Create trail table
    op.create_table(
        'trail',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('theme', sa.String(), nullable=False),
        sa.Column('order', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_trail_order'), 'trail', ['order'], unique=False)

    # Create level table
    op.create_table(
        'level',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('color', level_color, nullable=False),
        sa.Column('xp', sa.Integer(), nullable=False),
        sa.Column('trail_id', sa.Integer(), nullable=False),
        sa.Column('order', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['trail_id'], ['trail.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_level_trail_id'), 'level', ['trail_id'], unique=False)

    # Create exercise table
    op.create_table(
        'exercise',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('question', sa.String(), nullable=False),
        sa.Column('type', exercise_type, nullable=False),
        sa.Column('options', sa.String(), nullable=False),
        sa.Column('correct_answer', sa.String(), nullable=True),
        sa.Column('audio_url', sa.String(), nullable=True),
        sa.Column('level_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['level_id'], ['level.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_exercise_level_id'), 'exercise', ['level_id'], unique=False)

    # Create user table
    op.create_table(
        'user',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('username', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('password', sa.String(), nullable=False),
        sa.Column('role', user_role, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('xp', sa.Integer(), nullable=False),
        sa.Column('diamonds', sa.Integer(), nullable=False),
        sa.Column('lives', sa.Integer(), nullable=False),
        sa.Column('next_life_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('current_level_id', sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(['current_level_id'], ['level.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_user_username'), 'user', ['username'], unique=True)

    # Create user_level table
    op.create_table(
        'user_level',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('level_id', sa.Integer(), nullable=False),
        sa.Column('completed', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['level_id'], ['level.id'], ),
        sa.ForeignKeyConstraint(['user_id'], ['user.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'level_id', name='uq_user_level_user_level')
    )
    op.create_index(op.f('ix_user_level_user_id'), 'user_level', ['user_id'], unique=False)
    op.create_index(op.f('ix_user_level_level_id'), 'user_level', ['level_id'], unique=False)

    # Create user_exercise table
    op.create_table(
        'user_exercise',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('exercise_id', sa.Integer(), nullable=False),
        sa.Column('correct', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['exercise_id'], ['exercise.id'], ),
        sa.ForeignKeyConstraint(['user_id'], ['user.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_user_exercise_user_id'), 'user_exercise', ['user_id'], unique=False)
    op.create_index(op.f('ix_user_exercise_exercise_id'), 'user_exercise', ['exercise_id'], unique=False)
    op.create_index(op.f('ix_user_exercise_created_at'), 'user_exercise', ['created_at'], unique=False)

    # Create transaction table
    op.create_table(
        'transaction',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('amount', sa.Float(), nullable=False),
        sa.Column('description', sa.String(), nullable=False),
        sa.Column('payment_method', payment_method, nullable=False),
        sa.Column('status', transaction_status, nullable=False),
        sa.Column('payment_token', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['user.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_transaction_user_id'), 'transaction', ['user_id'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_transaction_user_id'), table_name='transaction')
    op.drop_table('transaction')
    op.drop_index(op.f('ix_user_exercise_created_at'), table_name='user_exercise')
    op.drop_index(op.f('ix_user_exercise_exercise_id'), table_name='user_exercise')
    op.drop_index(op.f('ix_user_exercise_user_id'), table_name='user_exercise')
    op.drop_table('user_exercise')
    op.drop_index(op.f('ix_user_level_level_id'), table_name='user_level')
    op.drop_index(op.f('ix_user_level_user_id'), table_name='user_level')
    op.drop_table('user_level')
    op.drop_index(op.f('ix_user_username'), table_name='user')
    op.drop_table('user')
    op.drop_index(op.f('ix_exercise_level_id'), table_name='exercise')
    op.drop_table('exercise')
    op.drop_index(op.f('ix_level_trail_id'), table_name='level')
    op.drop_table('level')
    op.drop_index(op.f('ix_trail_order'), table_name='trail')
    op.drop_table('trail')

    # Drop enum types (PostgreSQL)
    bind = op.get_bind()
    for enum_type in (transaction_status, payment_method, user_role, exercise_type, level_color):
        enum_type.drop(bind, checkfirst=True)
