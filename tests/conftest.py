"""
Pytest Configuration File

This module provides fixtures and configuration for all tests.
"""

import pytest
import os
import sys
from bson import ObjectId
from fastapi.testclient import TestClient

# Add project root to path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from invoicing.main import app
from invoicing.features.invoice.invoice_db import InvoiceDB
from invoicing.features.invoice.routes_invoice import get_invoice_db


class MockInsertResult:
    def __init__(self, inserted_id):
        self.inserted_id = inserted_id


class MockCursor:
    def __init__(self, documents):
        self.documents = list(documents)

    def sort(self, key, direction):
        self.documents.sort(key=lambda doc: doc[key], reverse=direction < 0)
        return self

    def limit(self, count):
        self.documents = self.documents[:count]
        return self

    def __aiter__(self):
        self._iterator = iter(self.documents)
        return self

    async def __anext__(self):
        try:
            return next(self._iterator)
        except StopIteration:
            raise StopAsyncIteration


class MockCollection:
    """In-memory stand-in for the invoices collection"""

    def __init__(self):
        self.documents = []
        self.queries = []

    @staticmethod
    def _matches(document, query):
        for key, condition in query.items():
            value = document.get(key)
            if isinstance(condition, dict):
                if "$gte" in condition and not value >= condition["$gte"]:
                    return False
                if "$lt" in condition and not value < condition["$lt"]:
                    return False
            elif value != condition:
                return False
        return True

    async def count_documents(self, query):
        self.queries.append(query)
        return sum(1 for doc in self.documents if self._matches(doc, query))

    async def insert_one(self, document):
        document["_id"] = ObjectId()
        self.documents.append(dict(document))
        return MockInsertResult(document["_id"])

    async def find_one(self, query):
        for doc in self.documents:
            if self._matches(doc, query):
                return dict(doc)
        return None

    def find(self, query):
        return MockCursor(dict(doc) for doc in self.documents if self._matches(doc, query))


@pytest.fixture
def mock_collection():
    """Fixture for an empty in-memory invoices collection"""
    return MockCollection()


@pytest.fixture
def invoice_db(mock_collection):
    """Fixture for the invoice database over the mock collection"""
    return InvoiceDB(mock_collection)


@pytest.fixture
def test_client(invoice_db):
    """Fixture for FastAPI test client backed by the mock collection"""
    app.dependency_overrides[get_invoice_db] = lambda: invoice_db
    yield TestClient(app)
    app.dependency_overrides.clear()

