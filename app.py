"""
Kanban Board Sync
-----------------
Small Flask API backing a single drag-and-drop kanban board:
  - tasks, columns and archived tasks stored as three JSON documents
  - column membership always derived from each task's status
  - archive / restore / delete, plus dynamic columns
Run:
  pip install -e .
  python app.py
Open http://127.0.0.1:5000/tasks
"""
from kanban_board import create_app

app = create_app()

if __name__ == '__main__':
    print('Starting Kanban Board Sync...')
    app.run(host='0.0.0.0', port=app.config['KANBAN_PORT'], debug=True)
