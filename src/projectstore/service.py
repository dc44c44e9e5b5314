"""
Project Store.

Handles persistence and retrieval of projects and their label lists in ArangoDB.
Every query is scoped by id, by (userid, classid) or by classid; there is no
general-purpose filtering.
"""

import uuid
from typing import Any, Dict, List, Optional
from arango.database import StandardDatabase
from arango.exceptions import ArangoError

from ..shared.config import PROJECTS_COLLECTION
from ..shared.logger import get_logger
from ..shared.utils import utc_now_iso
from .errors import ProjectNotFoundError, ProjectStoreError
from .labels import sanitize_labels
from .training import TrainingStore
from .types import Project, ProjectCreate

logger = get_logger("projectstore", __name__)

_OWNER_FILTER = "p._key == @key AND p.userid == @userid AND p.classid == @classid"
_USER_FILTER = "p.classid == @classid AND p.userid == @userid"
_CLASS_FILTER = "p.classid == @classid"


class ProjectStore:
    """Store for projects, their owners and their labels."""

    COLLECTION_NAME = PROJECTS_COLLECTION

    def __init__(self, db: StandardDatabase, training: Optional[TrainingStore] = None) -> None:
        """
        Initialize the Project Store.

        Args:
            db: ArangoDB StandardDatabase instance (must be connected).
            training: Optional TrainingStore. When given, deleting a project
                also deletes its training items.

        Raises:
            ValueError: If db is None.
            ProjectStoreError: If schema setup fails.
        """
        if db is None:
            raise ValueError("Database instance is required")
        self.db = db
        self.training = training
        self.ensure_schema()

    def ensure_schema(self) -> None:
        """Ensure the collection exists with indexes for the scoped lookups."""
        try:
            if not self.db.has_collection(self.COLLECTION_NAME):
                self.db.create_collection(self.COLLECTION_NAME)
                logger.info(f"Created collection '{self.COLLECTION_NAME}'")

            collection = self.db.collection(self.COLLECTION_NAME)
            # (classid, userid) serves both the class and the user listings
            collection.add_persistent_index(fields=["classid", "userid"])
            collection.add_persistent_index(fields=["created_at"])
            logger.debug(f"Ensured indexes in '{self.COLLECTION_NAME}'")

        except ArangoError as e:
            logger.error(f"Failed to ensure schema for '{self.COLLECTION_NAME}': {e}", exc_info=True)
            raise ProjectStoreError(f"Schema setup failed: {e}") from e
        except Exception as e:
            logger.error(f"Unexpected error setting up schema: {e}", exc_info=True)
            raise ProjectStoreError(f"Unexpected error setting up schema: {e}") from e

    def _query(self, query: str, bind_vars: Dict[str, Any]) -> List[Any]:
        cursor = self.db.aql.execute(
            query,
            bind_vars={"@col": self.COLLECTION_NAME, **bind_vars},
        )
        return list(cursor)

    # ------------------------------------------------------------------
    # Creation & retrieval
    # ------------------------------------------------------------------

    def store_project(
        self,
        userid: str,
        classid: str,
        type: str,
        name: str,
        labels: Optional[List[str]] = None,
        **extra: Any,
    ) -> Project:
        """Create a new project.

        The store does not validate names or types. Labels are sanitized:
        empty strings and repeats are dropped, first occurrences keep their order.

        Args:
            userid: Owning user.
            classid: Class the project belongs to.
            type: Kind of training data (e.g. "text", "images").
            name: Display name.
            labels: Initial labels.
            **extra: Additional fields, stored and returned unchanged.

        Returns:
            The stored Project, with generated id and created_at.

        Raises:
            ProjectStoreError: If the insert fails.
        """
        payload = ProjectCreate(
            userid=userid,
            classid=classid,
            type=type,
            name=name,
            labels=labels or [],
            **extra,
        )
        fields = payload.model_dump()
        fields.update(
            id=str(uuid.uuid4()),
            labels=sanitize_labels(payload.labels),
            created_at=utc_now_iso(),
        )
        project = Project(**fields)

        try:
            self.db.collection(self.COLLECTION_NAME).insert(project.to_document())
        except ArangoError as e:
            logger.error(f"Failed to store project: {e}", exc_info=True)
            raise ProjectStoreError(f"Failed to store project: {e}") from e
        except Exception as e:
            logger.error(f"Unexpected error storing project: {e}", exc_info=True)
            raise ProjectStoreError(f"Unexpected error storing project: {e}") from e

        logger.info(
            f"Stored project {project.id}",
            extra={"payload": {"project_id": project.id, "user_id": userid, "class_id": classid}},
        )
        return project

    def get_project(self, project_id: str) -> Optional[Project]:
        """Retrieve a project by ID.

        Returns:
            Project, or None if no project has this id.

        Raises:
            ProjectStoreError: If the backend fails.
        """
        try:
            doc = self.db.collection(self.COLLECTION_NAME).get(project_id)
        except ArangoError as e:
            logger.error(f"Failed to fetch project {project_id}: {e}", exc_info=True)
            raise ProjectStoreError(f"Failed to fetch project: {e}") from e
        except Exception as e:
            logger.error(f"Unexpected error fetching project: {e}", exc_info=True)
            raise ProjectStoreError(f"Unexpected error fetching project: {e}") from e

        if doc is None:
            return None
        return Project.from_document(doc)

    def get_projects_by_user_id(self, userid: str, classid: str) -> List[Project]:
        """List a user's projects within one class, oldest first."""
        query = f"""
        FOR p IN @@col
        FILTER {_USER_FILTER}
        SORT p.created_at ASC, p._key ASC
        RETURN p
        """
        try:
            docs = self._query(query, {"userid": userid, "classid": classid})
        except ArangoError as e:
            logger.error(f"Failed to list projects for user {userid}: {e}", exc_info=True)
            raise ProjectStoreError(f"Failed to list projects: {e}") from e
        except Exception as e:
            logger.error(f"Unexpected error listing projects: {e}", exc_info=True)
            raise ProjectStoreError(f"Unexpected error listing projects: {e}") from e
        return [Project.from_document(doc) for doc in docs]

    def get_projects_by_class_id(self, classid: str) -> List[Project]:
        """List every project in a class regardless of owner, oldest first."""
        query = f"""
        FOR p IN @@col
        FILTER {_CLASS_FILTER}
        SORT p.created_at ASC, p._key ASC
        RETURN p
        """
        try:
            docs = self._query(query, {"classid": classid})
        except ArangoError as e:
            logger.error(f"Failed to list projects for class {classid}: {e}", exc_info=True)
            raise ProjectStoreError(f"Failed to list projects: {e}") from e
        except Exception as e:
            logger.error(f"Unexpected error listing projects: {e}", exc_info=True)
            raise ProjectStoreError(f"Unexpected error listing projects: {e}") from e
        return [Project.from_document(doc) for doc in docs]

    def count_projects_by_user_id(self, userid: str, classid: str) -> int:
        """Number of projects a user owns in a class; 0 for unknown users or classes."""
        return self._count(_USER_FILTER, {"userid": userid, "classid": classid})

    def count_projects_by_class_id(self, classid: str) -> int:
        """Number of projects in a class."""
        return self._count(_CLASS_FILTER, {"classid": classid})

    def _count(self, filter_clause: str, bind_vars: Dict[str, Any]) -> int:
        query = f"""
        FOR p IN @@col
        FILTER {filter_clause}
        COLLECT WITH COUNT INTO num
        RETURN num
        """
        try:
            results = self._query(query, bind_vars)
        except ArangoError as e:
            logger.error(f"Failed to count projects: {e}", exc_info=True)
            raise ProjectStoreError(f"Failed to count projects: {e}") from e
        except Exception as e:
            logger.error(f"Unexpected error counting projects: {e}", exc_info=True)
            raise ProjectStoreError(f"Unexpected error counting projects: {e}") from e
        return int(results[0]) if results else 0

    # ------------------------------------------------------------------
    # Deletion
    # ------------------------------------------------------------------

    def delete_entire_project(self, userid: str, classid: str, project: Project) -> None:
        """Delete one project, provided userid and classid own it.

        A project that is already gone, or belongs to someone else, is left alone.
        """
        self._remove_where(
            _OWNER_FILTER,
            {"key": project.id, "userid": userid, "classid": classid},
            f"project {project.id}",
        )

    def delete_entire_user(self, userid: str, classid: str) -> None:
        """Delete every project a user owns in a class. Other users are untouched."""
        self._remove_where(
            _USER_FILTER,
            {"userid": userid, "classid": classid},
            f"user {userid} in class {classid}",
        )

    def delete_projects_by_class_id(self, classid: str) -> None:
        """Delete every project in a class. A no-op for an empty class."""
        self._remove_where(_CLASS_FILTER, {"classid": classid}, f"class {classid}")

    def _remove_where(self, filter_clause: str, bind_vars: Dict[str, Any], scope: str) -> List[str]:
        """Remove all projects matching filter_clause in one statement.

        Training items go first, so re-running after a failure still finds the
        project ids whose training needs deleting.
        """
        try:
            if self.training is not None:
                ids = self._query(
                    f"FOR p IN @@col FILTER {filter_clause} RETURN p._key",
                    bind_vars,
                )
                if ids:
                    self.training.delete_training_by_projects(ids)

            removed = self._query(
                f"""
                FOR p IN @@col
                FILTER {filter_clause}
                REMOVE p IN @@col
                RETURN OLD._key
                """,
                bind_vars,
            )
        except ArangoError as e:
            logger.error(f"Failed to delete projects for {scope}: {e}", exc_info=True)
            raise ProjectStoreError(f"Failed to delete projects: {e}") from e
        except ProjectStoreError:
            # already logged and wrapped by the training store
            raise
        except Exception as e:
            logger.error(f"Unexpected error deleting projects: {e}", exc_info=True)
            raise ProjectStoreError(f"Unexpected error deleting projects: {e}") from e

        logger.info(f"Deleted {len(removed)} project(s) for {scope}")
        return removed

    # ------------------------------------------------------------------
    # Labels
    # ------------------------------------------------------------------

    def add_label_to_project(self, userid: str, classid: str, projectid: str, label: str) -> List[str]:
        """Append a label to a project's label list.

        Empty labels and labels already present leave the list unchanged.
        The append runs as one AQL UPDATE, so concurrent adds to the same
        project cannot overwrite each other.

        Returns:
            The project's full label list after the call.

        Raises:
            ProjectNotFoundError: If userid/classid own no project with this id.
            ProjectStoreError: If the backend fails.
        """
        if not label:
            return self._get_labels(userid, classid, projectid)

        query = f"""
        FOR p IN @@col
        FILTER {_OWNER_FILTER}
        UPDATE p WITH {{
          labels: PUSH(p.labels ? p.labels : [], @label, true)
        }} IN @@col
        RETURN NEW.labels
        """
        labels = self._update_labels(query, userid, classid, projectid, label)
        logger.info(
            f"Added label to project {projectid}",
            extra={"payload": {"project_id": projectid, "label": label}},
        )
        return labels

    def remove_label_from_project(self, userid: str, classid: str, projectid: str, label: str) -> List[str]:
        """Remove a label from a project's label list.

        Empty labels and labels not present leave the list unchanged. Training
        items filed under the label are not touched; see
        TrainingStore.delete_training_by_label.

        Returns:
            The project's full label list after the call.

        Raises:
            ProjectNotFoundError: If userid/classid own no project with this id.
            ProjectStoreError: If the backend fails.
        """
        if not label:
            return self._get_labels(userid, classid, projectid)

        query = f"""
        FOR p IN @@col
        FILTER {_OWNER_FILTER}
        UPDATE p WITH {{
          labels: REMOVE_VALUE(p.labels ? p.labels : [], @label)
        }} IN @@col
        RETURN NEW.labels
        """
        labels = self._update_labels(query, userid, classid, projectid, label)
        logger.info(
            f"Removed label from project {projectid}",
            extra={"payload": {"project_id": projectid, "label": label}},
        )
        return labels

    def _update_labels(self, query: str, userid: str, classid: str, projectid: str, label: str) -> List[str]:
        try:
            results = self._query(
                query,
                {"key": projectid, "userid": userid, "classid": classid, "label": label},
            )
        except ArangoError as e:
            logger.error(f"Failed to update labels for project {projectid}: {e}", exc_info=True)
            raise ProjectStoreError(f"Failed to update labels: {e}") from e
        except Exception as e:
            logger.error(f"Unexpected error updating labels: {e}", exc_info=True)
            raise ProjectStoreError(f"Unexpected error updating labels: {e}") from e

        if not results:
            raise ProjectNotFoundError(projectid)
        return list(results[0] or [])

    def _get_labels(self, userid: str, classid: str, projectid: str) -> List[str]:
        query = f"""
        FOR p IN @@col
        FILTER {_OWNER_FILTER}
        RETURN p.labels
        """
        try:
            results = self._query(query, {"key": projectid, "userid": userid, "classid": classid})
        except ArangoError as e:
            logger.error(f"Failed to fetch labels for project {projectid}: {e}", exc_info=True)
            raise ProjectStoreError(f"Failed to fetch labels: {e}") from e
        except Exception as e:
            logger.error(f"Unexpected error fetching labels: {e}", exc_info=True)
            raise ProjectStoreError(f"Unexpected error fetching labels: {e}") from e

        if not results:
            raise ProjectNotFoundError(projectid)
        return list(results[0] or [])
