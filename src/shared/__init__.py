"""Shared configuration, logging and backend plumbing for the Project Store."""

from .config import (
    ARANGODB_URL,
    ARANGODB_DB,
    ARANGODB_USER,
    ARANGODB_PASSWORD,
    ARANGO_REQUEST_TIMEOUT,
    PROJECTS_COLLECTION,
    TRAINING_COLLECTION,
    get_arango_url,
    get_arango_password,
)
from .database import ArangoConnection
from .logger import get_logger

__all__ = [
    # Config exports
    "ARANGODB_URL",
    "ARANGODB_DB",
    "ARANGODB_USER",
    "ARANGODB_PASSWORD",
    "ARANGO_REQUEST_TIMEOUT",
    "PROJECTS_COLLECTION",
    "TRAINING_COLLECTION",
    "get_arango_url",
    "get_arango_password",
    # Backend / logging
    "ArangoConnection",
    "get_logger",
]
