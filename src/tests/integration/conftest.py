"""
Integration Test Setup - Real ArangoDB connection and cleanup.

Integration tests should be marked with @pytest.mark.integration.

**Safety & Hygiene:**
- Tests automatically skip if ArangoDB is not reachable
- Every project stored under TEST_CLASS is deleted before and after the session
"""

import os
import time
from typing import Dict, Generator

import pytest
import requests

from src.shared.config import ARANGODB_USER, get_arango_password, get_arango_url
from src.shared.database import ArangoConnection
from src.projectstore.service import ProjectStore
from src.projectstore.training import TrainingStore

TEST_CLASS = "UNIQUECLASSID"


def wait_for_service(url: str, timeout: int = 5, path: str = "/_api/version") -> bool:
    """Poll a service endpoint until it answers or timeout.

    ArangoDB answers /_api/version with 401 when auth is on, which still
    proves the server is up.
    """
    start_time = time.time()
    check_url = f"{url.rstrip('/')}{path}"

    while time.time() - start_time < timeout:
        try:
            response = requests.get(check_url, timeout=2)
            if response.status_code in (200, 401):
                return True
        except requests.exceptions.RequestException:
            pass
        time.sleep(0.5)

    return False


@pytest.fixture(scope="session")
def integration_env() -> Dict[str, str]:
    """Connection settings for the test database."""
    return {
        "ARANGO_URL": get_arango_url(),
        "ARANGO_DB": os.getenv("ARANGODB_TEST_DB", "project_store_test"),
        "ARANGO_USER": ARANGODB_USER,
        "ARANGO_PASSWORD": get_arango_password(),
    }


@pytest.fixture(scope="session")
def arango_connection(integration_env: Dict[str, str]) -> Generator[ArangoConnection, None, None]:
    """Live connection, skipped when the server is not reachable."""
    if not wait_for_service(integration_env["ARANGO_URL"]):
        pytest.skip(f"ArangoDB not reachable at {integration_env['ARANGO_URL']}")

    conn = ArangoConnection(
        url=integration_env["ARANGO_URL"],
        database=integration_env["ARANGO_DB"],
        username=integration_env["ARANGO_USER"],
        password=integration_env["ARANGO_PASSWORD"],
    )
    try:
        conn.connect()
    except Exception as e:
        pytest.skip(f"ArangoDB connection failed: {e}")

    yield conn
    conn.close()


@pytest.fixture(scope="session")
def training(arango_connection: ArangoConnection) -> TrainingStore:
    return TrainingStore(arango_connection.db)


@pytest.fixture(scope="session")
def store(arango_connection: ArangoConnection, training: TrainingStore) -> Generator[ProjectStore, None, None]:
    """ProjectStore on the live database, with TEST_CLASS emptied around the session."""
    project_store = ProjectStore(arango_connection.db, training=training)
    project_store.delete_projects_by_class_id(TEST_CLASS)
    yield project_store
    project_store.delete_projects_by_class_id(TEST_CLASS)
