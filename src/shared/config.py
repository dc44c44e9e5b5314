"""
Shared configuration for the Project Store.

Centralizes backend connection settings using environment variables.
All modules should use these constants instead of hardcoded values.
"""

import os

# ============================================
# Database Configuration (ArangoDB)
# ============================================

ARANGODB_URL: str = os.getenv("ARANGODB_URL", "http://localhost:8529")
ARANGODB_DB: str = os.getenv("ARANGODB_DB", "project_store")
ARANGODB_USER: str = os.getenv("ARANGODB_USER", "root")
ARANGODB_PASSWORD: str = os.getenv("ARANGODB_PASSWORD", "")

# Seconds before the HTTP client gives up on a single request
ARANGO_REQUEST_TIMEOUT: int = int(os.getenv("ARANGO_REQUEST_TIMEOUT", "15"))

# ============================================
# Collections
# ============================================

PROJECTS_COLLECTION: str = os.getenv("PROJECTS_COLLECTION", "projects")
TRAINING_COLLECTION: str = os.getenv("TRAINING_COLLECTION", "training")

# ============================================
# Environment Variable Names (for reference)
# ============================================
# These can be set in docker-compose.yml or .env files:
#
# ARANGODB_URL=http://localhost:8529
# ARANGODB_DB=project_store
# ARANGODB_USER=root
# ARANGODB_PASSWORD=
# ARANGO_REQUEST_TIMEOUT=15
# LOG_FORMAT=text

# ============================================
# Helper Functions
# ============================================

def get_arango_url() -> str:
    """Get ArangoDB URL from environment or default."""
    return ARANGODB_URL

def get_arango_password() -> str:
    """Centralized ArangoDB password lookup with ARANGO_ROOT_PASSWORD override."""
    return os.getenv("ARANGO_ROOT_PASSWORD") or ARANGODB_PASSWORD
