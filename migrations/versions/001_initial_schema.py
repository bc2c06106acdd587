# migrations/versions/001_initial_schema.py
"""initial schema

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    # Tabela stations
    op.create_table('stations',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('code', sa.String(length=50), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('stream_url', sa.String(length=500), nullable=False),
        sa.Column('metadata_url', sa.String(length=500), nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.text('true'), nullable=False),
        sa.Column('display_order', sa.Integer(), server_default=sa.text('0'), nullable=True),
        sa.Column('stream_format', sa.String(length=100), nullable=True),
        sa.Column('stream_quality', sa.String(length=100), nullable=True),
        sa.Column('stream_codec', sa.String(length=50), nullable=True),
        sa.Column('stream_bitrate', sa.String(length=50), nullable=True),
        sa.Column('genre', sa.String(length=100), nullable=True),
        sa.Column('tagline', sa.String(length=200), nullable=True),
        sa.Column('logo_url', sa.String(length=500), nullable=True),
        sa.Column('description', sa.String(length=1000), nullable=True),
        sa.Column('source_info', sa.String(length=500), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('code')
    )

    # Tabela songs
    op.create_table('songs',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('station_id', sa.Integer(), nullable=False),
        sa.Column('artist', sa.String(length=500), nullable=False),
        sa.Column('title', sa.String(length=500), nullable=False),
        sa.Column('thumbs_up_count', sa.Integer(), server_default=sa.text('0'), nullable=False),
        sa.Column('thumbs_down_count', sa.Integer(), server_default=sa.text('0'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.CheckConstraint("thumbs_up_count >= 0", name="non_negative_thumbs_up"),
        sa.CheckConstraint("thumbs_down_count >= 0", name="non_negative_thumbs_down"),
        sa.ForeignKeyConstraint(['station_id'], ['stations.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('station_id', 'artist', 'title', name='unique_station_song')
    )

    # Tabela ratings
    op.create_table('ratings',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('song_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=False),
        sa.Column('ip_address', sa.String(length=45), nullable=True),
        sa.Column('rating_type', sa.String(length=20), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.CheckConstraint("rating_type IN ('THUMBS_UP', 'THUMBS_DOWN')", name="valid_rating_type"),
        sa.ForeignKeyConstraint(['song_id'], ['songs.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('song_id', 'user_id', name='unique_song_user')
    )

    # Índices
    op.create_index('idx_stations_display_order', 'stations', ['display_order'], unique=False)
    op.create_index('idx_songs_station', 'songs', ['station_id'], unique=False)
    op.create_index('idx_ratings_song', 'ratings', ['song_id'], unique=False)
    op.create_index('idx_ratings_ip_created', 'ratings', ['ip_address', 'created_at'], unique=False)

def downgrade():
    op.drop_table('ratings')
    op.drop_table('songs')
    op.drop_table('stations')
