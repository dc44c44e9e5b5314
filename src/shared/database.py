"""
ArangoDB connection handle.

Owns the lifecycle of the backend client: construct (no network), connect
(ready), close (shut down). Stores receive the StandardDatabase from
`connection.db` instead of reaching for a module-level client.
"""

from typing import Optional

from arango import ArangoClient
from arango.database import StandardDatabase
from arango.exceptions import ArangoError

from .config import (
    ARANGO_REQUEST_TIMEOUT,
    ARANGODB_DB,
    ARANGODB_USER,
    get_arango_password,
    get_arango_url,
)
from .logger import get_logger

logger = get_logger("projectstore", __name__)


class ArangoConnection:
    """Explicit handle on one ArangoDB database.

    Usage:
        with ArangoConnection() as conn:
            store = ProjectStore(conn.db)
    """

    def __init__(
        self,
        url: Optional[str] = None,
        database: Optional[str] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        request_timeout: int = ARANGO_REQUEST_TIMEOUT,
        create_database: bool = True,
    ) -> None:
        # Store connection params. Don't connect yet.
        self.url = url or get_arango_url()
        self.database = database or ARANGODB_DB
        self.username = username or ARANGODB_USER
        self.password = password if password is not None else get_arango_password()
        self.request_timeout = request_timeout
        self.create_database = create_database
        self._client: Optional[ArangoClient] = None
        self._db: Optional[StandardDatabase] = None

    @property
    def is_ready(self) -> bool:
        return self._db is not None

    @property
    def db(self) -> StandardDatabase:
        """The connected database.

        Raises:
            RuntimeError: If connect() has not been called, or close() has.
        """
        if self._db is None:
            raise RuntimeError("Not connected to ArangoDB")
        return self._db

    def connect(self) -> StandardDatabase:
        """Open the client, create the database if allowed, and verify access.

        Raises:
            ArangoError: If credentials are rejected or the database cannot be created.
            ConnectionError: If the server is unreachable.
        """
        if self._db is not None:
            return self._db

        client = ArangoClient(hosts=self.url, request_timeout=self.request_timeout)
        try:
            if self.create_database:
                sys_db = client.db("_system", username=self.username, password=self.password)
                if not sys_db.has_database(self.database):
                    sys_db.create_database(self.database)
                    logger.info(f"Created database '{self.database}'")

            db = client.db(self.database, username=self.username, password=self.password)
            db.version()
        except ArangoError as e:
            logger.error(f"Could not connect to ArangoDB at {self.url}: {e}", exc_info=True)
            client.close()
            raise
        except Exception as e:
            logger.error(f"Unexpected error connecting to ArangoDB at {self.url}: {e}", exc_info=True)
            client.close()
            raise

        self._client = client
        self._db = db
        logger.info(f"Connected to ArangoDB database '{self.database}' at {self.url}")
        return db

    def close(self) -> None:
        """Release the HTTP session. Safe to call more than once."""
        if self._client is not None:
            self._client.close()
            logger.info("Disconnected from ArangoDB")
        self._client = None
        self._db = None

    def __enter__(self) -> "ArangoConnection":
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
