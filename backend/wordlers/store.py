"""Document store over SQLAlchemy.

Documents are JSON objects addressed by slash-separated paths
(``threads/<key>/games/<date>``). The store offers point reads, full
overwrites, partial field updates guarded by an optional version check,
collection listing and per-path change subscriptions.
"""

import json
import threading
import time
from typing import Any, Callable, Dict, List, Optional, Tuple

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from wordlers.errors import NotFound, StoreUnavailable, VersionConflict
from wordlers.models import Document


Listener = Callable[[Optional[Dict[str, Any]]], None]


class Subscription:
    """Handle returned by :meth:`DocumentStore.subscribe`."""

    def __init__(self, store: 'DocumentStore', path: str, callback: Listener):
        self.store = store
        self.path = path
        self.callback = callback
        self.active = True

    def cancel(self) -> None:
        if not self.active:
            return
        self.active = False
        self.store._remove_listener(self)

    def __repr__(self):
        return f"<Subscription {self.path} active={self.active}>"


class DocumentStore:
    def __init__(self, db):
        self.db = db
        self._listeners: Dict[str, List[Subscription]] = {}
        self._lock = threading.Lock()

    # ---- reads ----

    def get(self, path: str) -> Optional[Tuple[Dict[str, Any], int]]:
        """Return ``(fields, version)`` for the document, or None if absent."""
        try:
            doc = self.db.session.get(Document, path)
        except SQLAlchemyError as exc:
            raise self._unavailable('read', path, exc)
        if doc is None:
            return None
        return doc.fields, doc.version

    def list(self, collection: str) -> List[Tuple[str, Dict[str, Any]]]:
        """Return ``(doc_id, fields)`` for every document of a collection, ordered by id."""
        try:
            docs = (
                Document.query.filter_by(collection=collection.strip('/'))
                .order_by(Document.doc_id)
                .all()
            )
        except SQLAlchemyError as exc:
            raise self._unavailable('list', collection, exc)
        return [(d.doc_id, d.fields) for d in docs]

    # ---- writes ----

    def set(self, path: str, fields: Dict[str, Any]) -> int:
        """Create or overwrite the whole document. Returns the new version."""
        try:
            doc = self.db.session.get(Document, path)
            if doc is None:
                doc = Document(path=path, version=1)
            else:
                doc.version = (doc.version or 0) + 1
            doc.fields = fields
            self.db.session.add(doc)
            self.db.session.commit()
            version = doc.version
        except SQLAlchemyError as exc:
            raise self._unavailable('write', path, exc)
        self._notify(path, dict(fields))
        return version

    def update(self, path: str, fields: Dict[str, Any], expected_version: Optional[int] = None) -> int:
        """Replace the given top-level fields of an existing document.

        Raises NotFound when the document does not exist and VersionConflict
        when ``expected_version`` is given and no longer matches.
        """
        try:
            query = Document.query.filter_by(path=path)
            doc = query.first()
            if doc is None:
                raise NotFound(f"No document at {path}")
            if expected_version is not None and doc.version != expected_version:
                raise VersionConflict(
                    f"Document {path} changed (expected version {expected_version}, found {doc.version})",
                    expected=expected_version,
                    actual=doc.version,
                )
            merged = doc.fields
            merged.update(fields)
            new_version = doc.version + 1
            # Guarded write: only lands if nobody bumped the version since we read it
            updated = query.filter_by(version=doc.version).update(
                {'data': json.dumps(merged), 'version': new_version, 'updated_at': time.time()},
                synchronize_session=False,
            )
            if not updated:
                self.db.session.rollback()
                raise VersionConflict(
                    f"Document {path} changed during update",
                    expected=doc.version,
                )
            self.db.session.commit()
        except SQLAlchemyError as exc:
            raise self._unavailable('update', path, exc)
        self._notify(path, merged)
        return new_version

    # ---- subscriptions ----

    def subscribe(self, path: str, callback: Listener) -> Subscription:
        """Call ``callback(fields)`` after every committed write to ``path``."""
        sub = Subscription(self, path, callback)
        with self._lock:
            self._listeners.setdefault(path, []).append(sub)
        return sub

    def listener_count(self, path: Optional[str] = None) -> int:
        with self._lock:
            if path is not None:
                return len(self._listeners.get(path, []))
            return sum(len(subs) for subs in self._listeners.values())

    def _remove_listener(self, sub: Subscription) -> None:
        with self._lock:
            subs = self._listeners.get(sub.path, [])
            if sub in subs:
                subs.remove(sub)
            if not subs:
                self._listeners.pop(sub.path, None)

    def _notify(self, path: str, fields: Optional[Dict[str, Any]]) -> None:
        with self._lock:
            subs = list(self._listeners.get(path, []))
        for sub in subs:
            if not sub.active:
                continue
            try:
                sub.callback(fields)
            except Exception:
                # A broken listener must not fail the write that triggered it
                current_app.logger.exception(f"[store-listener] path={path} callback failed")

    def _unavailable(self, action: str, path: str, exc: Exception) -> StoreUnavailable:
        self.db.session.rollback()
        current_app.logger.error(f"[store-error] action={action} path={path} error={exc}")
        return StoreUnavailable(f"Document store unavailable: {exc}")


def get_store() -> DocumentStore:
    return current_app.extensions['wordlers_store']
