"""Client-side board state with optimistic updates.

BoardSession keeps the same state the browser board keeps (tasks, columns,
archived tasks and a queue of notifications) and talks to the API through a
transport. Every mutation is applied locally first, then pushed; when the
push fails the local state is put back exactly as it was.
"""
import copy
import json
import logging
import time
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from .due import due_state
from .reconcile import DEFAULT_COLUMN, append_task, strip_task
from .reorder import compute_reorder

logger = logging.getLogger(__name__)


class SyncError(Exception):
    def __init__(self, message, status=None, body=None):
        super().__init__(message)
        self.status = status
        self.body = body


class HttpTransport:
    def __init__(self, base_url='http://localhost:5000', timeout_seconds=10):
        self.base_url = base_url.rstrip('/')
        self.timeout_seconds = timeout_seconds

    def request(self, method, path, body=None):
        data = json.dumps(body).encode('utf-8') if body is not None else None
        req = Request(self.base_url + path, data=data, method=method.upper())
        req.add_header('Accept', 'application/json')
        if data is not None:
            req.add_header('Content-Type', 'application/json')
        try:
            with urlopen(req, timeout=self.timeout_seconds) as resp:
                status = getattr(resp, 'status', 200)
                raw = resp.read()
        except HTTPError as e:
            raw = e.read() if hasattr(e, 'read') else b''
            raise SyncError(f'{method} {path} returned {e.code}', e.code, _decode(raw)) from e
        except URLError as e:
            raise SyncError(f'{method} {path} failed: {e.reason}') from e
        return int(status), _decode(raw)


def _decode(raw):
    if not raw:
        return {}
    try:
        return json.loads(raw.decode('utf-8'))
    except ValueError:
        return {}


class BoardSession:
    def __init__(self, transport, clock=time.time):
        self.transport = transport
        self.clock = clock
        self.tasks = {}
        self.columns = {}
        self.archived = {}
        self.notifications = []

    @property
    def board(self):
        return {'tasks': self.tasks, 'columns': self.columns}

    def notify(self, message, severity='success'):
        self.notifications.append((message, severity))

    def column_tasks(self, column_id):
        """Tasks of one column in display order, skipping dangling ids."""
        column = self.columns.get(column_id) or {}
        return [self.tasks[tid] for tid in column.get('taskIds', []) if tid in self.tasks]

    def due_tasks(self, today=None):
        """Map of task id to 'overdue' or 'due_soon' for tasks needing attention."""
        states = {}
        for task_id, task in self.tasks.items():
            state = due_state(task, today)
            if state is not None:
                states[task_id] = state
        return states

    # -------------------- command plumbing --------------------
    def _snapshot(self):
        return copy.deepcopy((self.tasks, self.columns, self.archived))

    def _run(self, apply, push, success, failure):
        snapshot = self._snapshot()
        try:
            apply()
            push()
        except SyncError as e:
            logger.error('%s: %s', failure, e)
            self.tasks, self.columns, self.archived = snapshot
            self.notify(failure, 'error')
            return False
        if success:
            self.notify(success)
        return True

    def _push_board(self):
        self.transport.request('POST', '/update', {'tasks': self.tasks, 'columns': self.columns})

    # -------------------- reads --------------------
    def refresh(self):
        try:
            _, body = self.transport.request('GET', '/tasks')
        except SyncError as e:
            logger.error('failed to load tasks: %s', e)
            self.notify('Failed to load tasks', 'error')
            return False
        self.tasks = body.get('tasks') or {}
        self.columns = body.get('columns') or self.columns
        return True

    def load_archived(self):
        try:
            _, body = self.transport.request('GET', '/archived-tasks')
        except SyncError as e:
            logger.error('failed to load archived tasks: %s', e)
            self.notify('Failed to load archived tasks', 'error')
            return False
        self.archived = body.get('archivedTasks') or {}
        return True

    # -------------------- drag and drop --------------------
    def move(self, source_column_id, source_index, dest_column_id, dest_index, task_id):
        board = self.board
        updated = compute_reorder(board, source_column_id, source_index,
                                  dest_column_id, dest_index, task_id)
        if updated is board:
            return False

        def apply():
            self.tasks = updated['tasks']
            self.columns = updated['columns']

        return self._run(apply, self._push_board, None, 'Failed to sync with server')

    # -------------------- tasks --------------------
    def add_task(self, data):
        if not (data.get('title') or '').strip():
            return False
        status = data.get('status')
        if status not in self.columns:
            self.notify('Invalid column selected', 'error')
            return False
        stamp = int(self.clock() * 1000)
        task_id = f'task-{stamp}'
        suffix = 1
        while task_id in self.tasks or task_id in self.archived:
            task_id = f'task-{stamp}-{suffix}'
            suffix += 1
        task = {
            'id': task_id,
            'title': data['title'],
            'description': data.get('description', ''),
            'priority': data.get('priority', 'medium'),
            'status': status,
            'dueDate': data.get('dueDate') or None,
        }

        def apply():
            self.tasks[task_id] = task
            append_task(self.columns, status, task_id)

        def push():
            self.transport.request('POST', '/tasks', task)

        return self._run(apply, push, 'Task created successfully', 'Failed to save task')

    def edit_task(self, task_id, changes):
        if task_id not in self.tasks:
            return False
        if 'title' in changes and not (changes['title'] or '').strip():
            return False
        previous = self.tasks[task_id]
        task = {**previous, **changes, 'id': task_id}

        def apply():
            self.tasks[task_id] = task
            if task.get('status') != previous.get('status'):
                strip_task(self.columns, task_id)
                append_task(self.columns, task.get('status') or DEFAULT_COLUMN, task_id)

        def push():
            self.transport.request('PUT', f'/tasks/{task_id}', task)

        return self._run(apply, push, 'Task updated successfully', 'Failed to save task')

    def delete_task(self, task_id):
        def apply():
            self.tasks.pop(task_id, None)
            strip_task(self.columns, task_id)

        def push():
            self.transport.request('DELETE', f'/tasks/{task_id}')

        return self._run(apply, push, 'Task deleted successfully', 'Failed to delete task')

    def archive_task(self, task_id):
        if task_id not in self.tasks:
            return False

        def apply():
            self.archived[task_id] = self.tasks.pop(task_id)
            strip_task(self.columns, task_id)

        def push():
            _, body = self.transport.request('POST', f'/tasks/{task_id}/archive')
            self.archived[task_id] = body.get('archivedTask') or self.archived[task_id]

        return self._run(apply, push, 'Task archived successfully', 'Failed to archive task')

    def restore_task(self, task_id):
        if task_id not in self.archived:
            return False

        def apply():
            task = self.archived.pop(task_id)
            task.pop('archivedAt', None)
            if (task.get('status') or DEFAULT_COLUMN) not in self.columns:
                task['status'] = DEFAULT_COLUMN
            self.tasks[task_id] = task
            append_task(self.columns, task.get('status') or DEFAULT_COLUMN, task_id)

        def push():
            _, body = self.transport.request('POST', f'/tasks/{task_id}/restore')
            if body.get('restoredTask'):
                self.tasks[task_id] = body['restoredTask']

        return self._run(apply, push, 'Task restored successfully', 'Failed to restore task')

    # -------------------- columns --------------------
    def add_column(self, column_id, title):
        column_id = (column_id or '').strip()
        title = (title or '').strip()
        if not column_id or not title or column_id in self.columns:
            return False
        column = {'id': column_id, 'title': title, 'taskIds': []}

        def apply():
            self.columns[column_id] = column

        def push():
            _, body = self.transport.request('POST', '/columns', column)
            if body:
                self.columns[column_id] = body

        return self._run(apply, push, 'Column added successfully', 'Failed to add column')
