from datetime import datetime

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


class Document(db.Model):
    """One named JSON document (tasks, columns or archived_tasks)."""
    id = db.Column(db.Integer, primary_key=True)
    key = db.Column(db.String(64), unique=True, nullable=False)
    value = db.Column(db.Text, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @classmethod
    def text_of(cls, key):
        row = db.session.execute(db.select(cls.value).where(cls.key == key)).first()
        return row.value if row else None

    @classmethod
    def stage(cls, key, text):
        """Insert or replace ``key`` in the session; the caller commits."""
        row = db.session.execute(db.select(cls).where(cls.key == key)).scalar_one_or_none()
        if row is None:
            db.session.add(cls(key=key, value=text))
        else:
            row.value = text
        db.session.flush()
