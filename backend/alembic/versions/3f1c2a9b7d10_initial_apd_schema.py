"""Initial APD dashboard schema

Revision ID: 3f1c2a9b7d10
Revises:
Create Date: 2025-01-06 09:12:31.402117

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# Revision identifiers used by Alembic
revision: str = '3f1c2a9b7d10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # Accounts and audit trail
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('password_hash', sa.String(), nullable=False),
        sa.Column('role', sa.String(), nullable=False),
        sa.Column('full_name', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    op.create_table(
        'password_reset_tokens',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('token_hash', sa.String(length=64), nullable=False),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.Column('used_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_password_reset_tokens_id'), 'password_reset_tokens', ['id'], unique=False)
    op.create_index(op.f('ix_password_reset_tokens_user_id'), 'password_reset_tokens', ['user_id'], unique=False)
    op.create_index(op.f('ix_password_reset_tokens_token_hash'), 'password_reset_tokens', ['token_hash'], unique=True)

    op.create_table(
        'logs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('ts', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('action', sa.String(length=50), nullable=True),
        sa.Column('resource', sa.String(length=50), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=True),
        sa.Column('ip', sa.String(length=64), nullable=True),
        sa.Column('meta', sa.JSON(), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_logs_id'), 'logs', ['id'], unique=False)
    op.create_index(op.f('ix_logs_ts'), 'logs', ['ts'], unique=False)
    op.create_index(op.f('ix_logs_action'), 'logs', ['action'], unique=False)
    op.create_index(op.f('ix_logs_resource'), 'logs', ['resource'], unique=False)
    op.create_index(op.f('ix_logs_status'), 'logs', ['status'], unique=False)
    op.create_index('ix_logs_resource_ts', 'logs', ['resource', 'ts'], unique=False)

    # Equipment and reference data
    op.create_table(
        'apd_items',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('satuan', sa.String(), nullable=True),
        sa.Column('jumlah', sa.Integer(), nullable=False),
        sa.CheckConstraint('jumlah >= 0'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_apd_items_id'), 'apd_items', ['id'], unique=False)
    op.create_index(op.f('ix_apd_items_name'), 'apd_items', ['name'], unique=False)

    op.create_table(
        'apd_bengkel',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name'),
    )
    op.create_index(op.f('ix_apd_bengkel_id'), 'apd_bengkel', ['id'], unique=False)

    op.create_table(
        'divisi',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.Column('nama_divisi', sa.String(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('nama_divisi'),
    )
    op.create_index(op.f('ix_divisi_id'), 'divisi', ['id'], unique=False)

    op.create_table(
        'posisi',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.Column('nama_posisi', sa.String(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('nama_posisi'),
    )
    op.create_index(op.f('ix_posisi_id'), 'posisi', ['id'], unique=False)

    op.create_table(
        'pegawai',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.Column('nama', sa.String(), nullable=False),
        sa.Column('nip', sa.String(), nullable=False),
        sa.Column('divisi_id', sa.Integer(), nullable=True),
        sa.Column('posisi_id', sa.Integer(), nullable=True),
        sa.Column('bengkel_id', sa.Integer(), nullable=True),
        sa.Column('size_sepatu', sa.Integer(), nullable=True),
        sa.Column('jenis_sepatu', sa.String(), nullable=True),
        sa.Column('warna_katelpack', sa.String(), nullable=True),
        sa.Column('size_katelpack', sa.String(), nullable=True),
        sa.Column('warna_helm', sa.String(), nullable=True),
        sa.Column('link_helm', sa.String(), nullable=True),
        sa.Column('link_shoes', sa.String(), nullable=True),
        sa.Column('link_katelpack', sa.String(), nullable=True),
        sa.ForeignKeyConstraint(['divisi_id'], ['divisi.id']),
        sa.ForeignKeyConstraint(['posisi_id'], ['posisi.id']),
        sa.ForeignKeyConstraint(['bengkel_id'], ['apd_bengkel.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_pegawai_id'), 'pegawai', ['id'], unique=False)
    op.create_index(op.f('ix_pegawai_nama'), 'pegawai', ['nama'], unique=False)
    op.create_index(op.f('ix_pegawai_nip'), 'pegawai', ['nip'], unique=False)

    # Issuance and monthly balance
    op.create_table(
        'apd_daily',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.Column('apd_id', sa.Integer(), nullable=False),
        sa.Column('tanggal', sa.Date(), nullable=False),
        sa.Column('nama', sa.String(), nullable=False),
        sa.Column('bengkel_id', sa.Integer(), nullable=False),
        sa.Column('qty', sa.Integer(), nullable=False),
        sa.Column('periode', sa.Date(), nullable=False),
        sa.CheckConstraint('qty > 0'),
        sa.ForeignKeyConstraint(['apd_id'], ['apd_items.id']),
        sa.ForeignKeyConstraint(['bengkel_id'], ['apd_bengkel.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_apd_daily_id'), 'apd_daily', ['id'], unique=False)
    op.create_index(op.f('ix_apd_daily_apd_id'), 'apd_daily', ['apd_id'], unique=False)
    op.create_index(op.f('ix_apd_daily_bengkel_id'), 'apd_daily', ['bengkel_id'], unique=False)
    op.create_index(op.f('ix_apd_daily_periode'), 'apd_daily', ['periode'], unique=False)

    op.create_table(
        'apd_monthly',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.Column('apd_id', sa.Integer(), nullable=False),
        sa.Column('periode', sa.Date(), nullable=False),
        sa.Column('stock_awal', sa.Integer(), nullable=False),
        sa.Column('realisasi', sa.Integer(), nullable=False),
        sa.Column('distribusi', sa.Integer(), nullable=False),
        sa.Column('saldo_akhir', sa.Integer(), nullable=False),
        sa.Column('satuan', sa.String(), nullable=True),
        sa.ForeignKeyConstraint(['apd_id'], ['apd_items.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('apd_id', 'periode', name='uq_apd_monthly_item_periode'),
    )
    op.create_index(op.f('ix_apd_monthly_id'), 'apd_monthly', ['id'], unique=False)
    op.create_index(op.f('ix_apd_monthly_apd_id'), 'apd_monthly', ['apd_id'], unique=False)
    op.create_index(op.f('ix_apd_monthly_periode'), 'apd_monthly', ['periode'], unique=False)

    # Loans, procurement and uploaded files
    op.create_table(
        'apd_peminjaman',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.Column('nama_peminjam', sa.String(), nullable=False),
        sa.Column('divisi', sa.String(), nullable=False),
        sa.Column('nama_apd', sa.String(), nullable=False),
        sa.Column('tanggal_pinjam', sa.Date(), nullable=False),
        sa.Column('tanggal_kembali', sa.Date(), nullable=True),
        sa.Column('status', sa.Enum('Dipinjam', 'Dikembalikan', name='peminjamanstatus'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_apd_peminjaman_id'), 'apd_peminjaman', ['id'], unique=False)

    op.create_table(
        'pengajuan_apd',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.Column('nama_project', sa.String(), nullable=False),
        sa.Column('nomor_project', sa.String(), nullable=False),
        sa.Column('kepala_project', sa.String(), nullable=False),
        sa.Column('progres', sa.String(), nullable=False),
        sa.Column('keterangan', sa.Text(), nullable=True),
        sa.Column('tanggal', sa.Date(), nullable=False),
        sa.Column('apd_nama', sa.String(), nullable=False),
        sa.Column('jumlah', sa.Integer(), nullable=False),
        sa.Column('unit', sa.String(), nullable=False),
        sa.Column('harga', sa.Float(), nullable=False),
        sa.Column('total', sa.Float(), sa.Computed('jumlah * harga', persisted=True), nullable=True),
        sa.CheckConstraint('jumlah >= 0'),
        sa.CheckConstraint('harga >= 0'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_pengajuan_apd_id'), 'pengajuan_apd', ['id'], unique=False)
    op.create_index(op.f('ix_pengajuan_apd_created_at'), 'pengajuan_apd', ['created_at'], unique=False)
    op.create_index(op.f('ix_pengajuan_apd_nama_project'), 'pengajuan_apd', ['nama_project'], unique=False)

    op.create_table(
        'apd_files',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.Column('file_url', sa.String(), nullable=False),
        sa.Column('storage_path', sa.String(), nullable=False),
        sa.Column('nama_file', sa.String(), nullable=False),
        sa.Column('jenis_file', sa.Enum(
            'template_mr', 'berita_serah_terima', 'pengajuan_apd',
            'logo_personal', 'kpi_konsumable', 'sop_document', name='jenisfile'), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('storage_path'),
    )
    op.create_index(op.f('ix_apd_files_id'), 'apd_files', ['id'], unique=False)
    op.create_index(op.f('ix_apd_files_created_at'), 'apd_files', ['created_at'], unique=False)
    op.create_index(op.f('ix_apd_files_jenis_file'), 'apd_files', ['jenis_file'], unique=False)
    op.create_index(op.f('ix_apd_files_user_id'), 'apd_files', ['user_id'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    # Drop in reverse dependency order
    op.drop_table('apd_files')
    op.drop_table('pengajuan_apd')
    op.drop_table('apd_peminjaman')
    op.drop_table('apd_monthly')
    op.drop_table('apd_daily')
    op.drop_table('pegawai')
    op.drop_table('posisi')
    op.drop_table('divisi')
    op.drop_table('apd_bengkel')
    op.drop_table('apd_items')
    op.drop_table('logs')
    op.drop_table('password_reset_tokens')
    op.drop_table('users')
    sa.Enum(name='jenisfile').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='peminjamanstatus').drop(op.get_bind(), checkfirst=True)
