"""
Pytest configuration and shared fixtures for Project Store tests.

Unit tests never touch a real ArangoDB: the StandardDatabase, its collections
and AQL cursors are replaced with mocks. Integration tests live under
src/tests/integration/ and bring their own fixtures.
"""

import uuid
from typing import Any, Dict, Optional
from unittest.mock import Mock, patch

import pytest

from src.projectstore.service import ProjectStore
from src.projectstore.training import TrainingStore


def make_project_doc(
    userid: str = "user-1",
    classid: str = "class-1",
    labels: Optional[list] = None,
    **fields: Any,
) -> Dict[str, Any]:
    """Build a projects-collection document as ArangoDB would return it."""
    key = fields.pop("_key", str(uuid.uuid4()))
    doc = {
        "_key": key,
        "_id": f"projects/{key}",
        "_rev": "_h1",
        "userid": userid,
        "classid": classid,
        "type": "text",
        "name": "Capital cities",
        "labels": [] if labels is None else labels,
        "created_at": "2024-01-15T10:30:00+00:00",
    }
    doc.update(fields)
    return doc


@pytest.fixture
def mock_db():
    """Mock ArangoDB StandardDatabase instance."""
    db = Mock()
    db.has_collection = Mock(return_value=False)
    db.create_collection = Mock(return_value=Mock())
    db.collection = Mock(return_value=Mock())
    db.aql = Mock()
    db.aql.execute = Mock(return_value=[])
    return db


@pytest.fixture
def project_store(mock_db):
    """ProjectStore over the mocked database, schema setup skipped."""
    with patch.object(ProjectStore, "ensure_schema"):
        return ProjectStore(mock_db)


@pytest.fixture
def training_store(mock_db):
    """TrainingStore over the mocked database, schema setup skipped."""
    with patch.object(TrainingStore, "ensure_schema"):
        return TrainingStore(mock_db)


@pytest.fixture
def project_doc():
    """Factory for projects-collection documents."""
    return make_project_doc
