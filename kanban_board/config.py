import os

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def _flag(value, default):
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    """Settings read from KANBAN_* environment variables."""

    def __init__(self, environ=None):
        env = os.environ if environ is None else environ
        self.KANBAN_STORAGE = env.get('KANBAN_STORAGE', 'files').strip().lower()
        self.KANBAN_DATA_DIR = env.get('KANBAN_DATA_DIR', os.path.join(BASE_DIR, 'data'))
        self.SQLALCHEMY_DATABASE_URI = env.get(
            'KANBAN_DB', 'sqlite:///' + os.path.join(self.KANBAN_DATA_DIR, 'kanban.db'))
        self.SQLALCHEMY_TRACK_MODIFICATIONS = False
        self.KANBAN_PRESERVE_ORDER = _flag(env.get('KANBAN_PRESERVE_ORDER'), True)
        self.KANBAN_PORT = int(env.get('KANBAN_PORT', 5000))
        self.KANBAN_LOG_LEVEL = env.get('KANBAN_LOG_LEVEL', 'INFO').upper()
