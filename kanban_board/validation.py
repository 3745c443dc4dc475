"""Schema checks for task and column records."""

PRIORITIES = ('low', 'medium', 'high')
REQUIRED_TASK_FIELDS = ('id', 'title', 'description', 'priority', 'status')


def is_valid_task(candidate):
    """Return True when ``candidate`` matches the task schema.

    ``dueDate`` may be missing, None or a string; everything in
    REQUIRED_TASK_FIELDS must be a string and ``priority`` must be one of
    PRIORITIES in any case.
    """
    if not isinstance(candidate, dict):
        return False
    for field in REQUIRED_TASK_FIELDS:
        if not isinstance(candidate.get(field), str):
            return False
    if candidate['priority'].lower() not in PRIORITIES:
        return False
    due = candidate.get('dueDate')
    return due is None or isinstance(due, str)


def is_valid_column(candidate):
    if not isinstance(candidate, dict):
        return False
    for field in ('id', 'title'):
        value = candidate.get(field)
        if not isinstance(value, str) or not value.strip():
            return False
    task_ids = candidate.get('taskIds', [])
    if not isinstance(task_ids, list):
        return False
    return all(isinstance(tid, str) for tid in task_ids)
