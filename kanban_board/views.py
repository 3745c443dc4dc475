from flask import Blueprint, current_app, jsonify, request

from .errors import BoardError

bp = Blueprint('board', __name__)

def service():
    return current_app.extensions['kanban_board']

def payload():
    return request.get_json(silent=True) or {}

# -------------------- Error handling --------------------
@bp.app_errorhandler(BoardError)
def handle_board_error(e):
    if e.status_code >= 500:
        current_app.logger.exception('%s %s failed: %s', request.method, request.path, e.message)
    else:
        current_app.logger.info('%s %s rejected: %s', request.method, request.path, e.message)
    return jsonify(e.to_dict()), e.status_code

# -------------------- Board --------------------
@bp.route('/tasks', methods=['GET'])
def list_tasks():
    current_app.logger.debug('GET /tasks called')
    return jsonify(service().list_board())

@bp.route('/archived-tasks', methods=['GET'])
def list_archived():
    current_app.logger.debug('GET /archived-tasks called')
    return jsonify(service().list_archived())

@bp.route('/update', methods=['POST'])
def update_board():
    current_app.logger.debug('POST /update called')
    return jsonify(service().bulk_update(payload()))

# -------------------- Tasks --------------------
@bp.route('/tasks', methods=['POST'])
def create_task():
    current_app.logger.debug('POST /tasks called')
    return jsonify(service().create_task(payload())), 201

@bp.route('/tasks/<task_id>', methods=['PUT'])
def update_task(task_id):
    current_app.logger.debug('PUT /tasks/%s called', task_id)
    return jsonify(service().update_task(task_id, payload()))

@bp.route('/tasks/<task_id>', methods=['DELETE'])
def delete_task(task_id):
    current_app.logger.debug('DELETE /tasks/%s called', task_id)
    return jsonify(service().delete_task(task_id))

@bp.route('/tasks/<task_id>/archive', methods=['POST'])
def archive_task(task_id):
    current_app.logger.debug('POST /tasks/%s/archive called', task_id)
    task = service().archive_task(task_id)
    return jsonify({'message': 'Task archived successfully', 'archivedTask': task})

@bp.route('/tasks/<task_id>/restore', methods=['POST'])
def restore_task(task_id):
    current_app.logger.debug('POST /tasks/%s/restore called', task_id)
    task = service().restore_task(task_id)
    return jsonify({'message': 'Task restored successfully', 'restoredTask': task})

# -------------------- Columns --------------------
@bp.route('/columns', methods=['POST'])
def add_column():
    current_app.logger.debug('POST /columns called')
    return jsonify(service().add_column(payload())), 201

@bp.route('/columns/<column_id>', methods=['DELETE'])
def delete_column(column_id):
    current_app.logger.debug('DELETE /columns/%s called', column_id)
    return jsonify(service().delete_column(column_id))
