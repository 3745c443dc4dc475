"""Derive column membership from task status.

Task status is the canonical record of where a task lives; a column's
``taskIds`` list is only trusted for the relative order of tasks that
really belong to it.
"""
import copy
import logging

from .validation import is_valid_task

logger = logging.getLogger(__name__)

DEFAULT_COLUMN = 'todo'


def column_for(task):
    return task.get('status') or DEFAULT_COLUMN


def reconcile(tasks, columns, keep_order=False):
    """Return a copy of ``columns`` with orderings rebuilt from ``tasks``.

    Valid tasks are appended, in map order, to the column named by their
    status. Tasks pointing at a column that does not exist end up in no
    ordering. With ``keep_order`` the saved position of every id that still
    belongs to its column is kept and only the missing members are appended.
    """
    result = copy.deepcopy(columns)
    members = {column_id: [] for column_id in result}
    for task_id, task in tasks.items():
        if not is_valid_task(task):
            continue
        column_id = column_for(task)
        if column_id not in members:
            logger.warning('task %s points at missing column %r', task_id, column_id)
            continue
        members[column_id].append(task['id'])

    for column_id, column in result.items():
        derived = members[column_id]
        if keep_order:
            wanted = set(derived)
            kept = []
            for task_id in column.get('taskIds') or []:
                if task_id in wanted and task_id not in kept:
                    kept.append(task_id)
            derived = kept + [task_id for task_id in derived if task_id not in kept]
        column['taskIds'] = derived
    return result


def strip_task(columns, task_id):
    """Remove ``task_id`` from every column ordering, in place."""
    for column in columns.values():
        column['taskIds'] = [tid for tid in column.get('taskIds') or [] if tid != task_id]
    return columns


def append_task(columns, column_id, task_id):
    """Append ``task_id`` to the end of one ordering, in place.

    Returns False when the column does not exist.
    """
    column = columns.get(column_id)
    if column is None:
        return False
    task_ids = column.setdefault('taskIds', [])
    if task_id not in task_ids:
        task_ids.append(task_id)
    return True
