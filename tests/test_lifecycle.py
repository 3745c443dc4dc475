from datetime import datetime, timezone

import pytest

from kanban_board.errors import BadRequest, InvalidFormat, NotFound
from kanban_board.lifecycle import BoardService, utc_timestamp

from conftest import make_task

FIXED = datetime(2026, 10, 19, 8, 30, 15, 123456, tzinfo=timezone.utc)


@pytest.fixture
def fixed_service(store):
    return BoardService(store, clock=lambda: FIXED)


def _ordering(store, column_id):
    return store.load_columns()[column_id]['taskIds']


def test_utc_timestamp_format():
    assert utc_timestamp(FIXED) == '2026-10-19T08:30:15.123Z'


def test_list_board_reconciles(service, store):
    store.save_tasks({'a': make_task('a', 'todo'), 'b': make_task('b', 'done')})

    board = service.list_board()

    assert board['columns']['todo']['taskIds'] == ['a']
    assert board['columns']['done']['taskIds'] == ['b']
    assert board['columns']['inprogress']['taskIds'] == []


def test_create_rejects_invalid_priority(service, store):
    with pytest.raises(InvalidFormat):
        service.create_task(make_task('a', priority='urgent'))
    assert store.load_tasks() == {}


def test_create_stores_task_and_appends_to_column(service, store):
    task = service.create_task(make_task('a', 'inprogress'))

    assert task == make_task('a', 'inprogress')
    assert store.load_tasks() == {'a': task}
    assert _ordering(store, 'inprogress') == ['a']


def test_create_overwrites_existing_id(service, store):
    service.create_task(make_task('a', 'todo'))
    service.create_task(make_task('a', 'done', title='again'))

    assert store.load_tasks()['a']['title'] == 'again'
    assert _ordering(store, 'todo') == []
    assert _ordering(store, 'done') == ['a']


def test_update_missing_task(service):
    with pytest.raises(NotFound):
        service.update_task('a', make_task('a'))


def test_update_invalid_payload(service):
    service.create_task(make_task('a'))
    with pytest.raises(InvalidFormat):
        service.update_task('a', {'id': 'a'})


def test_update_replaces_wholesale_and_keeps_id(service, store):
    service.create_task(make_task('a', description='old'))

    task = service.update_task('a', make_task('other', title='new'))

    assert task['id'] == 'a'
    assert store.load_tasks() == {'a': make_task('a', title='new')}


def test_update_status_moves_between_columns(service, store):
    service.create_task(make_task('a', 'todo'))
    service.create_task(make_task('b', 'done'))

    service.update_task('a', make_task('a', 'done'))

    assert _ordering(store, 'todo') == []
    assert _ordering(store, 'done') == ['b', 'a']


def test_archive(fixed_service, store):
    fixed_service.create_task(make_task('a', 'todo'))

    record = fixed_service.archive_task('a')

    assert record['archivedAt'] == '2026-10-19T08:30:15.123Z'
    assert store.load_tasks() == {}
    assert _ordering(store, 'todo') == []
    assert store.load_archived() == {'a': record}


def test_archive_missing(service):
    with pytest.raises(NotFound):
        service.archive_task('nope')


def test_archive_then_restore(fixed_service, store):
    original = make_task('a', 'done', dueDate='2026-11-01')
    fixed_service.create_task(make_task('b', 'done'))
    fixed_service.create_task(original)
    fixed_service.create_task(make_task('c', 'done'))

    fixed_service.archive_task('a')
    restored = fixed_service.restore_task('a')

    assert restored == original
    assert 'archivedAt' not in store.load_tasks()['a']
    assert _ordering(store, 'done') == ['b', 'c', 'a']
    assert store.load_archived() == {}


def test_restore_to_todo_when_column_gone(service, store):
    service.create_task(make_task('a', 'inprogress'))
    service.archive_task('a')
    service.delete_column('inprogress')

    restored = service.restore_task('a')

    assert restored['status'] == 'todo'
    assert _ordering(store, 'todo') == ['a']


def test_restore_missing(service):
    with pytest.raises(NotFound):
        service.restore_task('nope')


def test_delete(service, store):
    service.create_task(make_task('a'))

    assert service.delete_task('a') == {'message': 'Task deleted'}
    assert store.load_tasks() == {}
    assert _ordering(store, 'todo') == []
    with pytest.raises(NotFound):
        service.archive_task('a')
    with pytest.raises(NotFound):
        service.restore_task('a')
    with pytest.raises(NotFound):
        service.delete_task('a')


def test_bulk_update_requires_both_keys(service):
    with pytest.raises(BadRequest):
        service.bulk_update({'tasks': {}})
    with pytest.raises(BadRequest):
        service.bulk_update({'columns': {}})
    with pytest.raises(BadRequest):
        service.bulk_update([])


def test_bulk_update_drops_invalid_tasks(service, store):
    columns = store.load_columns()
    columns['todo']['taskIds'] = ['a', 'bad']
    service.bulk_update({
        'tasks': {'a': make_task('a'), 'bad': make_task('bad', priority='urgent')},
        'columns': columns,
    })

    assert list(store.load_tasks()) == ['a']
    assert _ordering(store, 'todo') == ['a']


def test_bulk_update_keeps_custom_order(service, store):
    tasks = {tid: make_task(tid) for tid in ('a', 'b', 'c')}
    columns = store.load_columns()
    columns['todo']['taskIds'] = ['c', 'a', 'b']

    service.bulk_update({'tasks': tasks, 'columns': columns})

    assert _ordering(store, 'todo') == ['c', 'a', 'b']
    assert service.list_board()['columns']['todo']['taskIds'] == ['c', 'a', 'b']


def test_bulk_update_repairs_drift(service, store):
    tasks = {'a': make_task('a', 'done')}
    columns = store.load_columns()
    columns['todo']['taskIds'] = ['a']

    service.bulk_update({'tasks': tasks, 'columns': columns})

    assert _ordering(store, 'todo') == []
    assert _ordering(store, 'done') == ['a']


def test_strict_read_uses_map_order(store):
    service = BoardService(store, keep_order=False)
    tasks = {tid: make_task(tid) for tid in ('a', 'b', 'c')}
    columns = store.load_columns()
    columns['todo']['taskIds'] = ['c', 'a', 'b']
    store.save_tasks(tasks)
    store.save_columns(columns)

    assert service.list_board()['columns']['todo']['taskIds'] == ['a', 'b', 'c']


def test_add_column(service, store):
    service.create_task(make_task('a', 'review'))

    column = service.add_column({'id': ' review ', 'title': 'Review', 'taskIds': ['x']})

    assert column == {'id': 'review', 'title': 'Review', 'taskIds': ['a']}
    assert list(store.load_columns()) == ['todo', 'inprogress', 'done', 'review']


def test_add_column_rejects_duplicates_and_bad_payloads(service):
    with pytest.raises(BadRequest):
        service.add_column({'id': 'todo', 'title': 'Again'})
    with pytest.raises(InvalidFormat):
        service.add_column({'id': 'review'})


def test_delete_column(service, store):
    service.create_task(make_task('a', 'done'))

    with pytest.raises(BadRequest):
        service.delete_column('done')
    with pytest.raises(NotFound):
        service.delete_column('review')

    service.delete_column('inprogress')
    assert list(store.load_columns()) == ['todo', 'done']
