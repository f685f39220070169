import uuid
from collections.abc import Callable
from contextlib import contextmanager

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session

from portal.exceptions import DocumentNotFound, StoreError
from portal.models.document import StoredDocument
from portal.services.change_feed import ChangeFeed
from portal.utils.timestamps import utc_now

Filters = dict[str, object]


def _field(name: str):
    return func.json_extract(StoredDocument.data, f"$.{name}")


def _to_dict(row: StoredDocument) -> dict:
    return {"id": row.id, **row.data}


class DocumentStore:
    """Collection-scoped JSON documents on top of a single SQL table.

    Every public method opens its own session, so calls may be issued
    concurrently from worker threads.
    """

    def __init__(self, session_factory: Callable[[], Session], feed: ChangeFeed | None = None):
        self._session_factory = session_factory
        self._feed = feed

    @contextmanager
    def _session(self):
        db = self._session_factory()
        try:
            yield db
        except SQLAlchemyError as exc:
            db.rollback()
            raise StoreError(str(exc)) from exc
        finally:
            db.close()

    def _changed(self, collection: str):
        if self._feed is not None:
            self._feed.publish(collection)

    def _filtered(self, db: Session, collection: str, where: Filters | None) -> Query:
        query = db.query(StoredDocument).filter(StoredDocument.collection == collection)
        for name, value in (where or {}).items():
            query = query.filter(_field(name) == value)
        return query

    # --- writes ---

    def add(self, collection: str, data: dict, timestamp_field: str | None = None) -> str:
        """Insert a document under a generated id and return the id."""
        return self.set(collection, str(uuid.uuid4()), data, timestamp_field=timestamp_field)

    def set(self, collection: str, doc_id: str, data: dict, timestamp_field: str | None = None) -> str:
        now = utc_now()
        payload = dict(data)
        if timestamp_field:
            payload[timestamp_field] = now
        with self._session() as db:
            db.merge(StoredDocument(
                collection=collection,
                id=doc_id,
                data=payload,
                created_at=now,
                updated_at=now,
            ))
            db.commit()
        self._changed(collection)
        return doc_id

    def update(self, collection: str, doc_id: str, fields: dict) -> dict:
        with self._session() as db:
            row = self._filtered(db, collection, None).filter(StoredDocument.id == doc_id).first()
            if row is None:
                raise DocumentNotFound(collection, doc_id)
            row.data = {**row.data, **fields}
            row.updated_at = utc_now()
            db.commit()
            db.refresh(row)
            updated = _to_dict(row)
        self._changed(collection)
        return updated

    # --- reads ---

    def get(self, collection: str, doc_id: str) -> dict | None:
        with self._session() as db:
            row = self._filtered(db, collection, None).filter(StoredDocument.id == doc_id).first()
            return _to_dict(row) if row else None

    def require(self, collection: str, doc_id: str) -> dict:
        doc = self.get(collection, doc_id)
        if doc is None:
            raise DocumentNotFound(collection, doc_id)
        return doc

    def query(
        self,
        collection: str,
        where: Filters | None = None,
        order_by: str | None = None,
        descending: bool = True,
        limit: int | None = None,
    ) -> list[dict]:
        with self._session() as db:
            query = self._filtered(db, collection, where)
            if order_by:
                key = _field(order_by)
                query = query.order_by(key.desc() if descending else key.asc())
            created = StoredDocument.created_at
            query = query.order_by(created.desc() if descending else created.asc())
            if limit is not None:
                query = query.limit(limit)
            return [_to_dict(row) for row in query.all()]

    def count(self, collection: str, where: Filters | None = None) -> int:
        """Count matching documents in SQL without loading them."""
        with self._session() as db:
            query = db.query(func.count(StoredDocument.id)).filter(StoredDocument.collection == collection)
            for name, value in (where or {}).items():
                query = query.filter(_field(name) == value)
            return query.scalar() or 0

    def exists(self, collection: str, where: Filters) -> bool:
        return self.count(collection, where) > 0
