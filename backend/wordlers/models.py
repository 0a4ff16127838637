from wordlers import db
import json
import time


class Document(db.Model):
    __tablename__ = 'document'
    # Full hierarchical path, e.g. threads/<key>/games/2026-10-16
    path = db.Column(db.String(255), primary_key=True)
    # Collection the document belongs to, e.g. threads/<key>/games
    collection = db.Column(db.String(255), nullable=False, index=True)
    doc_id = db.Column(db.String(64), nullable=False)
    data = db.Column(db.Text, nullable=False, default='{}')  # JSON-encoded fields
    version = db.Column(db.Integer, nullable=False, default=1)
    updated_at = db.Column(db.Float, nullable=True)

    def __init__(self, **kwargs):
        path = kwargs.get('path')
        if path and 'collection' not in kwargs:
            collection, _, doc_id = path.rpartition('/')
            kwargs['collection'] = collection
            kwargs.setdefault('doc_id', doc_id)
        super(Document, self).__init__(**kwargs)

    @property
    def fields(self):
        try:
            value = json.loads(self.data) if self.data else {}
        except ValueError:
            return {}
        return value if isinstance(value, dict) else {}

    @fields.setter
    def fields(self, value):
        self.data = json.dumps(value)
        self.updated_at = time.time()
