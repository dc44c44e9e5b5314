"""
Unit tests for the ArangoDB connection handle (src/shared/database.py).

ArangoClient is patched, so no server is contacted.
"""

from unittest.mock import Mock, patch
import pytest
from arango.exceptions import ArangoError

from src.shared.database import ArangoConnection


@pytest.fixture
def mock_client():
    client = Mock()
    sys_db = Mock()
    sys_db.has_database.return_value = False
    app_db = Mock()
    client.db.side_effect = lambda name, **kwargs: sys_db if name == "_system" else app_db
    client.sys_db = sys_db
    client.app_db = app_db
    with patch("src.shared.database.ArangoClient", return_value=client) as factory:
        client.factory = factory
        yield client


def test_construct_does_not_connect(mock_client):
    conn = ArangoConnection(url="http://arango:8529", database="store_test", password="pw")

    assert conn.is_ready is False
    mock_client.factory.assert_not_called()
    with pytest.raises(RuntimeError, match="Not connected"):
        _ = conn.db


def test_connect_creates_missing_database(mock_client):
    conn = ArangoConnection(url="http://arango:8529", database="store_test", password="pw", request_timeout=5)

    db = conn.connect()

    assert db is mock_client.app_db
    assert conn.db is mock_client.app_db
    assert conn.is_ready is True
    mock_client.factory.assert_called_once_with(hosts="http://arango:8529", request_timeout=5)
    mock_client.sys_db.create_database.assert_called_once_with("store_test")
    mock_client.app_db.version.assert_called_once()


def test_connect_skips_database_creation_when_disabled(mock_client):
    conn = ArangoConnection(database="store_test", password="pw", create_database=False)

    conn.connect()

    mock_client.sys_db.create_database.assert_not_called()


def test_connect_is_idempotent(mock_client):
    conn = ArangoConnection(database="store_test", password="pw")

    first = conn.connect()
    second = conn.connect()

    assert first is second
    mock_client.factory.assert_called_once()


def test_connect_failure_closes_client_and_propagates(mock_client):
    mock_client.app_db.version.side_effect = ArangoError("unauthorized")
    conn = ArangoConnection(database="store_test", password="wrong")

    with pytest.raises(ArangoError):
        conn.connect()

    mock_client.close.assert_called_once()
    assert conn.is_ready is False


def test_unreachable_server_closes_client_and_propagates(mock_client):
    mock_client.sys_db.has_database.side_effect = ConnectionAbortedError("Can't connect to host(s) within limit (3)")
    conn = ArangoConnection(database="store_test", password="pw")

    with pytest.raises(ConnectionAbortedError):
        conn.connect()

    mock_client.close.assert_called_once()
    assert conn.is_ready is False


def test_context_manager_closes_on_exit(mock_client):
    with ArangoConnection(database="store_test", password="pw") as conn:
        assert conn.is_ready is True

    mock_client.close.assert_called_once()
    assert conn.is_ready is False


def test_close_twice_is_safe(mock_client):
    conn = ArangoConnection(database="store_test", password="pw")
    conn.connect()

    conn.close()
    conn.close()

    mock_client.close.assert_called_once()
