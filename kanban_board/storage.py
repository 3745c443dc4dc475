"""Load and save the three board documents.

Documents are plain JSON maps: ``tasks`` (id -> task), ``columns``
(id -> column) and ``archived_tasks`` (id -> archived task). FileStore keeps
one pretty-printed file per document; DatabaseStore keeps one row per
document in the ``document`` table.
"""
import copy
import json
import logging
import os

from sqlalchemy.exc import SQLAlchemyError

from .errors import Internal
from .models import Document, db

logger = logging.getLogger(__name__)

TASKS = 'tasks'
COLUMNS = 'columns'
ARCHIVED = 'archived_tasks'

DEFAULT_COLUMNS = {
    'todo': {'id': 'todo', 'title': 'To Do', 'taskIds': []},
    'inprogress': {'id': 'inprogress', 'title': 'In Progress', 'taskIds': []},
    'done': {'id': 'done', 'title': 'Done', 'taskIds': []},
}

DEFAULTS = {
    TASKS: {},
    COLUMNS: DEFAULT_COLUMNS,
    ARCHIVED: {},
}


def default_for(name):
    return copy.deepcopy(DEFAULTS[name])


def dumps(name, data):
    try:
        return json.dumps(data, indent=2)
    except (TypeError, ValueError) as e:
        raise Internal(f'Failed to serialize {name}', e) from e


def loads(name, raw):
    try:
        data = json.loads(raw)
    except ValueError:
        logger.warning('document %s is not valid JSON, using defaults', name)
        return default_for(name)
    if not isinstance(data, dict):
        logger.warning('document %s is not a JSON object, using defaults', name)
        return default_for(name)
    return data


class Store:
    """Named-document persistence; subclasses implement _read and _write."""

    def _read(self, name):
        raise NotImplementedError

    def _write(self, name, text):
        raise NotImplementedError

    def _exists(self, name):
        raise NotImplementedError

    def load(self, name):
        raw = self._read(name)
        if raw is None:
            return default_for(name)
        return loads(name, raw)

    def save(self, name, data):
        self._write(name, dumps(name, data))

    def seed(self):
        """Write defaults for any document that does not exist yet."""
        for name in DEFAULTS:
            if not self._exists(name):
                logger.info('seeding %s', name)
                self.save(name, default_for(name))

    def load_tasks(self):
        return self.load(TASKS)

    def load_columns(self):
        return self.load(COLUMNS)

    def load_archived(self):
        return self.load(ARCHIVED)

    def save_tasks(self, tasks):
        self.save(TASKS, tasks)

    def save_columns(self, columns):
        self.save(COLUMNS, columns)

    def save_archived(self, archived):
        self.save(ARCHIVED, archived)


class FileStore(Store):
    def __init__(self, data_dir):
        self.data_dir = data_dir

    def path(self, name):
        return os.path.join(self.data_dir, name + '.json')

    def _exists(self, name):
        return os.path.exists(self.path(name))

    def _read(self, name):
        try:
            with open(self.path(name), 'r', encoding='utf-8') as f:
                return f.read()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise Internal(f'Failed to read {name}', e) from e

    def _write(self, name, text):
        try:
            os.makedirs(self.data_dir, exist_ok=True)
            with open(self.path(name), 'w', encoding='utf-8') as f:
                f.write(text)
        except OSError as e:
            raise Internal(f'Failed to write {name}', e) from e


class DatabaseStore(Store):
    """Documents stored through Flask-SQLAlchemy; needs an app context."""

    def _exists(self, name):
        return self._read(name) is not None

    def _read(self, name):
        try:
            return Document.text_of(name)
        except SQLAlchemyError as e:
            db.session.rollback()
            raise Internal(f'Failed to read {name}', e) from e

    def _write(self, name, text):
        try:
            Document.stage(name, text)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            raise Internal(f'Failed to write {name}', e) from e
