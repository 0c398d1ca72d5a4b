# database/db_manager.py
import logging
import os
import uuid
from datetime import datetime

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import CheckConstraint, ForeignKey, UniqueConstraint, event
from sqlalchemy.engine import make_url
from sqlalchemy.orm import relationship

# Initialize the SQLAlchemy object
db = SQLAlchemy()
logger = logging.getLogger(__name__)


def _new_id() -> str:
    return str(uuid.uuid4())


class Group(db.Model):
    __tablename__ = 'groups'

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    name = db.Column(db.String(255), unique=True, nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    songs = relationship('Song', back_populates='group', lazy=True)

    def __repr__(self) -> str:
        return f'<Group {self.name}>'


class Song(db.Model):
    __tablename__ = 'songs'

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    title = db.Column(db.String(255), nullable=False)
    group_id = db.Column(db.String(36), ForeignKey('groups.id', ondelete='RESTRICT'), nullable=False, index=True)
    release_date = db.Column(db.Date, nullable=True, index=True)
    link = db.Column(db.String(500), nullable=False, default='')
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    group = relationship('Group', back_populates='songs')
    verses = relationship(
        'LyricsVerse',
        back_populates='song',
        order_by='LyricsVerse.verse_number',
        cascade='all, delete-orphan',
        passive_deletes=True,
        lazy=True,
    )

    __table_args__ = (
        UniqueConstraint('title', 'group_id', name='uq_songs_title_group'),
    )

    def __repr__(self) -> str:
        return f'<Song {self.title}>'


class LyricsVerse(db.Model):
    __tablename__ = 'lyrics_verses'

    id = db.Column(db.Integer, primary_key=True)
    song_id = db.Column(db.String(36), ForeignKey('songs.id', ondelete='CASCADE'), nullable=False, index=True)
    verse = db.Column(db.Text, nullable=False, default='')
    verse_number = db.Column(db.Integer, nullable=False)

    song = relationship('Song', back_populates='verses')

    __table_args__ = (
        UniqueConstraint('song_id', 'verse_number', name='uq_lyrics_verses_song_number'),
        CheckConstraint('verse_number >= 1', name='ck_lyrics_verses_number_positive'),
    )


def _configure_sqlite(engine) -> None:
    """Enable FK enforcement and hand transaction control to SQLAlchemy.

    pysqlite opens transactions lazily and commits on RELEASE of an outer
    SAVEPOINT; emitting BEGIN ourselves keeps nested transactions intact.
    """

    @event.listens_for(engine, 'connect')
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute('PRAGMA foreign_keys=ON')
        cursor.close()

    @event.listens_for(engine, 'begin')
    def _on_begin(conn):
        conn.exec_driver_sql('BEGIN')


def initialize_database(app):
    """
    Initializes the SQLAlchemy extension with the Flask app instance
    and creates all database tables if they don't already exist.
    """
    db.init_app(app)
    # Ensure the instance folder exists for SQLite database file
    instance_path = app.instance_path
    if not os.path.exists(instance_path):
        os.makedirs(instance_path)
        logger.info("Created instance folder: %s", instance_path)

    # Ensure the directory for the configured SQLite file exists
    try:
        uri = app.config.get('SQLALCHEMY_DATABASE_URI')
        if uri:
            url = make_url(uri)
            # Only handle file-based SQLite (not :memory:)
            if url.get_backend_name() == 'sqlite' and url.database and url.database != ':memory:':
                db_dir = os.path.dirname(url.database)
                if db_dir and not os.path.exists(db_dir):
                    os.makedirs(db_dir, exist_ok=True)
                    logger.info("Created SQLite DB directory: %s", db_dir)
    except Exception as e:
        # Don't block app startup on path parsing issues; log and continue
        logger.warning("Could not ensure SQLite directory exists: %s", e)

    with app.app_context():
        if db.engine.dialect.name == 'sqlite':
            _configure_sqlite(db.engine)
        db.create_all()
        logger.info("Database tables created or already exist.")
