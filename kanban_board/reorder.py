"""Drag-and-drop reordering of a board snapshot.

A board here is ``{'tasks': {...}, 'columns': {...}}`` as returned by
``GET /tasks``. compute_reorder never mutates its input.
"""
import copy
import logging

logger = logging.getLogger(__name__)


def compute_reorder(board, source_column_id, source_index, dest_column_id, dest_index, task_id):
    """Return the board after dragging ``task_id`` to a new position.

    ``dest_column_id`` is None when the drag was cancelled. Returns ``board``
    itself when nothing changes or either column is unknown.
    """
    if dest_column_id is None:
        return board
    if source_column_id == dest_column_id and source_index == dest_index:
        return board

    columns = board['columns']
    if source_column_id not in columns or dest_column_id not in columns:
        logger.warning('invalid drag from %r to %r', source_column_id, dest_column_id)
        return board

    new_columns = dict(columns)
    source = copy.deepcopy(columns[source_column_id])
    source_ids = list(source.get('taskIds') or [])
    if not 0 <= source_index < len(source_ids):
        logger.warning('stale drag index %d in %r (%d task(s))',
                       source_index, source_column_id, len(source_ids))
        return board
    del source_ids[source_index]

    if source_column_id == dest_column_id:
        source_ids.insert(dest_index, task_id)
        source['taskIds'] = source_ids
        new_columns[source_column_id] = source
        return {**board, 'columns': new_columns}

    dest = copy.deepcopy(columns[dest_column_id])
    dest_ids = list(dest.get('taskIds') or [])
    dest_ids.insert(dest_index, task_id)
    source['taskIds'] = source_ids
    dest['taskIds'] = dest_ids
    new_columns[source_column_id] = source
    new_columns[dest_column_id] = dest

    new_tasks = dict(board['tasks'])
    if task_id in new_tasks:
        new_tasks[task_id] = {**new_tasks[task_id], 'status': dest_column_id}
    return {**board, 'tasks': new_tasks, 'columns': new_columns}
