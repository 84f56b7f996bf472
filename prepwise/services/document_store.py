from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from prepwise.utils.utils import clean_document


class DocumentStore(ABC):
    """Minimal document-store surface the services depend on.

    Documents are plain dicts. Query results carry the document id under ``id``.
    """

    @abstractmethod
    def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    @abstractmethod
    def add(self, collection: str, data: Dict[str, Any]) -> str:
        raise NotImplementedError

    @abstractmethod
    def set(self, collection: str, doc_id: str, data: Dict[str, Any], merge: bool = False) -> None:
        raise NotImplementedError

    @abstractmethod
    def update(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        raise NotImplementedError

    @abstractmethod
    def find(
        self,
        collection: str,
        filters: Dict[str, Any],
        limit: Optional[int] = None,
        order_by: Optional[str] = None,
        descending: bool = True,
    ) -> List[Dict[str, Any]]:
        raise NotImplementedError

    def find_one(self, collection: str, filters: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        results = self.find(collection, filters, limit=1)
        return results[0] if results else None


class FirestoreDocumentStore(DocumentStore):
    def __init__(self, db):
        self.db = db

    def get(self, collection, doc_id):
        doc = self.db.collection(collection).document(doc_id).get()
        if not doc.exists:
            return None
        return {"id": doc.id, **clean_document(doc.to_dict() or {})}

    def add(self, collection, data):
        _, doc_ref = self.db.collection(collection).add(data)
        return doc_ref.id

    def set(self, collection, doc_id, data, merge=False):
        self.db.collection(collection).document(doc_id).set(data, merge=merge)

    def update(self, collection, doc_id, data):
        self.db.collection(collection).document(doc_id).update(data)

    def find(self, collection, filters, limit=None, order_by=None, descending=True):
        query = self.db.collection(collection)
        for field, value in filters.items():
            query = query.where(field, "==", value)
        if order_by:
            query = query.order_by(order_by, direction="DESCENDING" if descending else "ASCENDING")
        if limit:
            query = query.limit(limit)
        return [{"id": doc.id, **clean_document(doc.to_dict() or {})} for doc in query.stream()]
