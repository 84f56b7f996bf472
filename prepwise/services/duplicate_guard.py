from typing import Any, Dict, Optional

from loguru import logger

from prepwise.services.document_store import DocumentStore


class DuplicateGuard:
    """Keeps interview creation idempotent per (structure, user).

    The store has no uniqueness constraint, so this is a check before generation
    plus a re-check when the write fails. Two first-time requests that both pass
    the pre-check and both write successfully still produce two instances.
    """

    def __init__(self, store: DocumentStore, log=logger):
        self.store = store
        self.log = log

    def find_existing(self, collection: str, structure_id: str, user_id: str) -> Optional[Dict[str, Any]]:
        return self.store.find_one(collection, {"structure_id": structure_id, "user_id": user_id})

    def precheck(self, collection: str, structure_id: str, user_id: str) -> Optional[Dict[str, Any]]:
        """Existing instance, or None; a failing query does not block generation"""
        self.log.info(f"Checking for existing interview in {collection}")
        try:
            existing = self.find_existing(collection, structure_id, user_id)
        except Exception as e:
            self.log.warning(f"Could not check for duplicates, proceeding with generation: {e}")
            return None

        if existing:
            self.log.info(f"Interview already exists for this user and structure: {existing['id']}")
        return existing

    def recover(self, collection: str, structure_id: str, user_id: str, write_error: Exception) -> Dict[str, Any]:
        """After a failed write, return the instance a concurrent request created, else re-raise"""
        try:
            existing = self.find_existing(collection, structure_id, user_id)
        except Exception as e:
            self.log.error(f"Error during duplicate re-check: {e}")
            raise write_error from e

        if existing is None:
            raise write_error

        self.log.info(f"Found existing interview after save failure: {existing['id']}")
        return existing
