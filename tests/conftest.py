import pytest

from kanban_board import create_app
from kanban_board.lifecycle import BoardService
from kanban_board.storage import FileStore


def make_task(task_id, status='todo', **fields):
    task = {
        'id': task_id,
        'title': f'Task {task_id}',
        'description': '',
        'priority': 'medium',
        'status': status,
        'dueDate': None,
    }
    task.update(fields)
    return task


@pytest.fixture
def store(tmp_path):
    s = FileStore(str(tmp_path / 'data'))
    s.seed()
    return s


@pytest.fixture
def service(store):
    return BoardService(store)


@pytest.fixture
def app(tmp_path):
    return create_app({
        'TESTING': True,
        'KANBAN_STORAGE': 'files',
        'KANBAN_DATA_DIR': str(tmp_path / 'data'),
        'KANBAN_PRESERVE_ORDER': True,
        'KANBAN_LOG_LEVEL': 'DEBUG',
    })


@pytest.fixture
def client(app):
    return app.test_client()
