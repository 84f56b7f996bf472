import copy
import itertools
from typing import Any, Callable, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from prepwise.core.firebase import get_document_store
from prepwise.core.security import create_access_token
from prepwise.main import app
from prepwise.services.document_store import DocumentStore
from prepwise.services.question_generator import get_question_generator


class FakeDocumentStore(DocumentStore):
    """In-memory DocumentStore with hooks for injecting failures"""

    def __init__(self):
        self.collections: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self.writes: List[tuple] = []
        self.failures: Dict[tuple, Exception] = {}
        self.before_add: Optional[Callable[[str, Dict[str, Any]], None]] = None
        self._ids = itertools.count(1)

    def fail(self, operation: str, collection: str, error: Exception = None):
        self.failures[(operation, collection)] = error or RuntimeError(f"{operation} on {collection} failed")

    def _check(self, operation: str, collection: str):
        error = self.failures.get((operation, collection))
        if error is not None:
            raise error

    def seed(self, collection: str, doc_id: str, data: Dict[str, Any]):
        self.collections.setdefault(collection, {})[doc_id] = copy.deepcopy(data)

    def docs(self, collection: str) -> Dict[str, Dict[str, Any]]:
        return self.collections.get(collection, {})

    def get(self, collection, doc_id):
        self._check("get", collection)
        data = self.docs(collection).get(doc_id)
        if data is None:
            return None
        return {"id": doc_id, **copy.deepcopy(data)}

    def add(self, collection, data):
        if self.before_add is not None:
            hook, self.before_add = self.before_add, None
            hook(collection, data)
        self._check("add", collection)
        doc_id = f"doc-{next(self._ids)}"
        self.seed(collection, doc_id, data)
        self.writes.append(("add", collection, doc_id))
        return doc_id

    def set(self, collection, doc_id, data, merge=False):
        self._check("set", collection)
        current = self.docs(collection).get(doc_id, {}) if merge else {}
        self.seed(collection, doc_id, {**current, **data})
        self.writes.append(("set", collection, doc_id))

    def update(self, collection, doc_id, data):
        self._check("update", collection)
        if doc_id not in self.docs(collection):
            raise KeyError(f"No document {doc_id} in {collection}")
        self.collections[collection][doc_id].update(copy.deepcopy(data))
        self.writes.append(("update", collection, doc_id))

    def find(self, collection, filters, limit=None, order_by=None, descending=True):
        self._check("find", collection)
        results = [
            {"id": doc_id, **copy.deepcopy(data)}
            for doc_id, data in self.docs(collection).items()
            if all(data.get(field) == value for field, value in filters.items())
        ]
        if order_by:
            results.sort(key=lambda doc: doc.get(order_by) or "", reverse=descending)
        return results[:limit] if limit else results


class FakeGenerator:
    """Returns scripted responses in order and records every prompt"""

    model = "fake-model"

    def __init__(self, *responses):
        self.responses = list(responses)
        self.prompts: List[str] = []

    @property
    def calls(self) -> int:
        return len(self.prompts)

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.responses:
            raise AssertionError("Unexpected generation call")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def structure_document(**overrides) -> Dict[str, Any]:
    document = {
        "role": "Backend Engineer",
        "level": "mid",
        "type": "technical",
        "techstack": ["Python", "PostgreSQL"],
        "compulsory_count": 2,
        "personalized_count": 3,
        "personalized_question_prompt": "Ask about their past projects",
        "questions": ["What is an index in a database?", "How does Python manage memory?"],
        "interview_category": "mock",
        "user_id": "owner-1",
        "visibility": True,
        "usage_count": 4,
        "created_at": "2024-05-01T10:00:00+00:00",
    }
    document.update(overrides)
    return document


def profile_document(**overrides) -> Dict[str, Any]:
    document = {
        "user_id": "user-1",
        "current_role": "Software Engineer",
        "experience": 4,
        "location": "Berlin",
        "summary": "Backend engineer focused on APIs and data pipelines for fintech products.",
        "skills": "Python, FastAPI, PostgreSQL",
        "work_experience": [{
            "company": "Acme",
            "position": "Engineer",
            "start_date": "2020-01",
            "description": "Built the payments API",
            "is_current_job": "true",
        }],
        "education": "BSc Computer Science, TU Berlin",
        "languages": ["English", "German"],
        "social_links": {"github": "https://github.com/example"},
    }
    document.update(overrides)
    return document


@pytest.fixture
def store():
    return FakeDocumentStore()


@pytest.fixture
def generator():
    return FakeGenerator()


@pytest.fixture
def client(store, generator):
    app.dependency_overrides[get_document_store] = lambda: store
    app.dependency_overrides[get_question_generator] = lambda: generator
    yield TestClient(app)
    app.dependency_overrides.clear()


def bearer(user_id: str = "user-1", is_recruiter: bool = False) -> Dict[str, str]:
    token = create_access_token({"sub": user_id, "is_recruiter": is_recruiter})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers():
    return bearer()


@pytest.fixture
def recruiter_headers():
    return bearer("recruiter-1", is_recruiter=True)
