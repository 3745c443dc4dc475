"""
Kanban board sync
-----------------
Flask API for a single Kanban board. Tasks, columns and archived tasks are
kept as three JSON documents, either as files in KANBAN_DATA_DIR or as rows
in a SQLite database (KANBAN_STORAGE=database).
"""
import logging

import click
from flask import Flask
from flask_cors import CORS

from .config import Config
from .lifecycle import BoardService
from .models import db
from .storage import DatabaseStore, FileStore

__version__ = '0.1.0'


def make_store(app):
    kind = app.config['KANBAN_STORAGE']
    if kind == 'files':
        return FileStore(app.config['KANBAN_DATA_DIR'])
    if kind == 'database':
        db.init_app(app)
        with app.app_context():
            db.create_all()
        return DatabaseStore()
    raise ValueError(f'unknown KANBAN_STORAGE {kind!r}')


def create_app(overrides=None):
    app = Flask(__name__)
    app.config.from_object(Config())
    if overrides:
        app.config.update(overrides)
    app.json.sort_keys = False
    CORS(app)

    level = app.config['KANBAN_LOG_LEVEL']
    logging.basicConfig(level=level)
    app.logger.setLevel(level)
    logging.getLogger(__name__).setLevel(level)

    store = make_store(app)
    with app.app_context():
        store.seed()
    app.extensions['kanban_board'] = BoardService(
        store, keep_order=app.config['KANBAN_PRESERVE_ORDER'])
    app.logger.info('board ready (%s storage)', app.config['KANBAN_STORAGE'])

    from .views import bp
    app.register_blueprint(bp)

    @app.cli.command('init-board')
    def init_board():
        """Create any missing board documents."""
        store.seed()
        click.echo('board documents ready')

    return app
