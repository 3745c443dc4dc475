"""Due-date urgency of a task, judged by calendar day."""
from datetime import date

OVERDUE = 'overdue'
DUE_SOON = 'due_soon'
DUE_SOON_DAYS = 3

SEVERITY = {OVERDUE: 'error', DUE_SOON: 'warning', None: 'info'}


def due_date(task):
    """Day part of ``dueDate``, or None when unset or unparseable."""
    raw = task.get('dueDate')
    if not isinstance(raw, str) or not raw:
        return None
    try:
        return date.fromisoformat(raw[:10])
    except ValueError:
        return None


def due_state(task, today=None):
    """Return OVERDUE, DUE_SOON (due within DUE_SOON_DAYS days) or None."""
    due = due_date(task)
    if due is None:
        return None
    days = (due - (today or date.today())).days
    if days < 0:
        return OVERDUE
    if days <= DUE_SOON_DAYS:
        return DUE_SOON
    return None


def due_severity(task, today=None):
    return SEVERITY[due_state(task, today)]
