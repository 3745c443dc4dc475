"""Board operations: whole-document read-modify-write against a Store.

Each operation loads the documents it needs, applies one transition and
saves the result. There is no locking; concurrent writers race and the
last one wins.
"""
import copy
import logging
from datetime import datetime, timezone

from .errors import BadRequest, InvalidFormat, NotFound
from .reconcile import DEFAULT_COLUMN, append_task, column_for, reconcile, strip_task
from .validation import is_valid_column, is_valid_task

logger = logging.getLogger(__name__)


def utc_timestamp(now=None):
    """ISO-8601 UTC timestamp with millisecond precision and a Z suffix."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


class BoardService:
    def __init__(self, store, keep_order=True, clock=None):
        self.store = store
        self.keep_order = keep_order
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    # -------------------- reads --------------------
    def list_board(self):
        tasks = self.store.load_tasks()
        columns = self.store.load_columns()
        return {'tasks': tasks, 'columns': reconcile(tasks, columns, keep_order=self.keep_order)}

    def list_archived(self):
        return {'archivedTasks': self.store.load_archived()}

    # -------------------- bulk write --------------------
    def bulk_update(self, payload):
        if not isinstance(payload, dict):
            raise BadRequest('Missing tasks or columns')
        tasks = payload.get('tasks')
        columns = payload.get('columns')
        if not isinstance(tasks, dict) or not isinstance(columns, dict):
            raise BadRequest('Missing tasks or columns')

        valid_tasks = {tid: task for tid, task in tasks.items() if is_valid_task(task)}
        dropped = len(tasks) - len(valid_tasks)
        if dropped:
            logger.warning('bulk update dropped %d invalid task(s)', dropped)
        valid_columns = {cid: col for cid, col in columns.items() if isinstance(col, dict)}

        self.store.save_tasks(valid_tasks)
        self.store.save_columns(reconcile(valid_tasks, valid_columns, keep_order=self.keep_order))
        logger.info('board updated: %d task(s), %d column(s)', len(valid_tasks), len(valid_columns))
        return {'message': 'Board updated successfully'}

    # -------------------- single task --------------------
    def create_task(self, candidate):
        if not is_valid_task(candidate):
            raise InvalidFormat('Invalid task format')
        task = copy.deepcopy(candidate)
        tasks = self.store.load_tasks()
        columns = self.store.load_columns()
        previous = tasks.get(task['id'])
        if previous is not None and column_for(previous) != column_for(task):
            strip_task(columns, task['id'])
        tasks[task['id']] = task
        append_task(columns, column_for(task), task['id'])
        self.store.save_tasks(tasks)
        self.store.save_columns(columns)
        logger.info('created task %s in %s', task['id'], column_for(task))
        return task

    def update_task(self, task_id, candidate):
        if not is_valid_task(candidate):
            raise InvalidFormat('Invalid task format')
        tasks = self.store.load_tasks()
        if task_id not in tasks:
            raise NotFound('Task not found')
        task = copy.deepcopy(candidate)
        task['id'] = task_id
        previous = tasks[task_id]
        tasks[task_id] = task
        self.store.save_tasks(tasks)
        if column_for(previous) != column_for(task):
            columns = self.store.load_columns()
            strip_task(columns, task_id)
            append_task(columns, column_for(task), task_id)
            self.store.save_columns(columns)
            logger.info('moved task %s from %s to %s', task_id, column_for(previous), column_for(task))
        logger.info('updated task %s', task_id)
        return task

    # -------------------- archive / restore / delete --------------------
    def archive_task(self, task_id):
        tasks = self.store.load_tasks()
        columns = self.store.load_columns()
        archived = self.store.load_archived()
        if task_id not in tasks:
            raise NotFound('Task not found')

        record = copy.deepcopy(tasks.pop(task_id))
        record['archivedAt'] = utc_timestamp(self.clock())
        archived[task_id] = record
        strip_task(columns, task_id)

        self.store.save_tasks(tasks)
        self.store.save_columns(columns)
        self.store.save_archived(archived)
        logger.info('archived task %s', task_id)
        return record

    def restore_task(self, task_id):
        tasks = self.store.load_tasks()
        columns = self.store.load_columns()
        archived = self.store.load_archived()
        if task_id not in archived:
            raise NotFound('Archived task not found')

        record = copy.deepcopy(archived.pop(task_id))
        record.pop('archivedAt', None)
        column_id = column_for(record)
        if column_id not in columns:
            logger.warning('column %r is gone, restoring task %s to %s',
                           column_id, task_id, DEFAULT_COLUMN)
            column_id = DEFAULT_COLUMN
            record['status'] = DEFAULT_COLUMN
        tasks[task_id] = record
        append_task(columns, column_id, task_id)

        self.store.save_tasks(tasks)
        self.store.save_columns(columns)
        self.store.save_archived(archived)
        logger.info('restored task %s to %s', task_id, column_id)
        return record

    def delete_task(self, task_id):
        tasks = self.store.load_tasks()
        columns = self.store.load_columns()
        if task_id not in tasks:
            raise NotFound('Task not found')
        del tasks[task_id]
        strip_task(columns, task_id)
        self.store.save_tasks(tasks)
        self.store.save_columns(columns)
        logger.info('deleted task %s', task_id)
        return {'message': 'Task deleted'}

    # -------------------- columns --------------------
    def add_column(self, candidate):
        if not is_valid_column(candidate):
            raise InvalidFormat('Invalid column format')
        column_id = candidate['id'].strip()
        columns = self.store.load_columns()
        if column_id in columns:
            raise BadRequest(f'Column {column_id} already exists')
        column = {'id': column_id, 'title': candidate['title'].strip(), 'taskIds': []}
        columns[column_id] = column
        tasks = self.store.load_tasks()
        columns = reconcile(tasks, columns, keep_order=self.keep_order)
        self.store.save_columns(columns)
        logger.info('added column %s', column_id)
        return columns[column_id]

    def delete_column(self, column_id):
        columns = self.store.load_columns()
        if column_id not in columns:
            raise NotFound('Column not found')
        tasks = self.store.load_tasks()
        members = reconcile(tasks, columns)[column_id]['taskIds']
        if members:
            raise BadRequest(f'Column {column_id} still has {len(members)} task(s)')
        del columns[column_id]
        self.store.save_columns(columns)
        logger.info('deleted column %s', column_id)
        return {'message': 'Column deleted'}
