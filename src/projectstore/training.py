"""
Training Store.

Keeps the labelled training items of each project and reports how many are
filed under each label. Projects and their label lists live in ProjectStore;
nothing here changes a project's labels.
"""

import uuid
from typing import Any, Dict, Iterable, List
from arango.database import StandardDatabase
from arango.exceptions import ArangoError

from ..shared.config import TRAINING_COLLECTION
from ..shared.logger import get_logger
from ..shared.utils import utc_now_iso
from .errors import ProjectStoreError
from .types import TrainingItem

logger = get_logger("projectstore", __name__)


class TrainingStore:
    """Store for training items, keyed by project and label."""

    COLLECTION_NAME = TRAINING_COLLECTION

    def __init__(self, db: StandardDatabase) -> None:
        """Initialize training store.

        Args:
            db: ArangoDB database instance.
        """
        if db is None:
            raise ValueError("Database instance is required")
        self.db = db
        self.ensure_schema()

    def ensure_schema(self) -> None:
        """Ensure training collection exists with indexes."""
        try:
            if not self.db.has_collection(self.COLLECTION_NAME):
                self.db.create_collection(self.COLLECTION_NAME)
                logger.info(f"Created collection '{self.COLLECTION_NAME}'")

            collection = self.db.collection(self.COLLECTION_NAME)
            # Prefix (projectid) serves per-project scans, the pair serves per-label ones
            collection.add_persistent_index(fields=["projectid", "label"])
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
    # Storing
    # ------------------------------------------------------------------

    def store_text_training(self, projectid: str, text: str, label: str) -> TrainingItem:
        """Store a text example under a label.

        Raises:
            ValueError: If text or label is empty.
        """
        if not text or not text.strip():
            raise ValueError("Training text cannot be empty")
        return self._store(projectid, label, textdata=text)

    def store_image_training(self, projectid: str, imageurl: str, label: str) -> TrainingItem:
        """Store an image example (by location) under a label."""
        if not imageurl or not imageurl.strip():
            raise ValueError("Image URL cannot be empty")
        return self._store(projectid, label, imageurl=imageurl)

    def store_number_training(self, projectid: str, numbers: List[float], label: str) -> TrainingItem:
        """Store a numeric example under a label."""
        if not numbers:
            raise ValueError("Training numbers cannot be empty")
        return self._store(projectid, label, numberdata=[float(n) for n in numbers])

    def _store(self, projectid: str, label: str, **payload: Any) -> TrainingItem:
        if not label:
            raise ValueError("Training label cannot be empty")

        item = TrainingItem(
            id=str(uuid.uuid4()),
            projectid=projectid,
            label=label,
            created_at=utc_now_iso(),
            **payload,
        )
        try:
            self.db.collection(self.COLLECTION_NAME).insert(item.to_document())
        except ArangoError as e:
            logger.error(f"Failed to store training for project {projectid}: {e}", exc_info=True)
            raise ProjectStoreError(f"Failed to store training: {e}") from e
        except Exception as e:
            logger.error(f"Unexpected error storing training: {e}", exc_info=True)
            raise ProjectStoreError(f"Unexpected error storing training: {e}") from e

        logger.debug(f"Stored training item {item.id} for project {projectid}")
        return item

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def get_training(self, projectid: str, limit: int = 50, start: int = 0) -> List[TrainingItem]:
        """Page through a project's training items, oldest first."""
        query = """
        FOR t IN @@col
        FILTER t.projectid == @projectid
        SORT t.created_at ASC, t._key ASC
        LIMIT @start, @limit
        RETURN t
        """
        try:
            docs = self._query(query, {"projectid": projectid, "start": start, "limit": limit})
        except ArangoError as e:
            logger.error(f"Failed to fetch training for project {projectid}: {e}", exc_info=True)
            raise ProjectStoreError(f"Failed to fetch training: {e}") from e
        except Exception as e:
            logger.error(f"Unexpected error fetching training: {e}", exc_info=True)
            raise ProjectStoreError(f"Unexpected error fetching training: {e}") from e
        return [TrainingItem.from_document(doc) for doc in docs]

    def count_training(self, projectid: str) -> int:
        """Total number of training items in a project."""
        query = """
        FOR t IN @@col
        FILTER t.projectid == @projectid
        COLLECT WITH COUNT INTO num
        RETURN num
        """
        try:
            results = self._query(query, {"projectid": projectid})
        except ArangoError as e:
            logger.error(f"Failed to count training for project {projectid}: {e}", exc_info=True)
            raise ProjectStoreError(f"Failed to count training: {e}") from e
        except Exception as e:
            logger.error(f"Unexpected error counting training: {e}", exc_info=True)
            raise ProjectStoreError(f"Unexpected error counting training: {e}") from e
        return int(results[0]) if results else 0

    def count_training_by_label(self, projectid: str) -> Dict[str, int]:
        """Map each label to the number of items filed under it.

        Labels without items do not appear. Unknown projects give {}.
        """
        query = """
        FOR t IN @@col
        FILTER t.projectid == @projectid
        COLLECT label = t.label WITH COUNT INTO num
        RETURN { label: label, num: num }
        """
        try:
            rows = self._query(query, {"projectid": projectid})
        except ArangoError as e:
            logger.error(f"Failed to count training by label for project {projectid}: {e}", exc_info=True)
            raise ProjectStoreError(f"Failed to count training: {e}") from e
        except Exception as e:
            logger.error(f"Unexpected error counting training: {e}", exc_info=True)
            raise ProjectStoreError(f"Unexpected error counting training: {e}") from e
        return {row["label"]: int(row["num"]) for row in rows}

    # ------------------------------------------------------------------
    # Relabelling & deletion
    # ------------------------------------------------------------------

    def rename_training_label(self, projectid: str, before: str, after: str) -> int:
        """Move every item filed under `before` to `after`. Returns the number moved."""
        if not after:
            raise ValueError("Training label cannot be empty")
        query = """
        FOR t IN @@col
        FILTER t.projectid == @projectid AND t.label == @before
        UPDATE t WITH { label: @after } IN @@col
        RETURN 1
        """
        try:
            moved = len(self._query(query, {"projectid": projectid, "before": before, "after": after}))
        except ArangoError as e:
            logger.error(f"Failed to rename training label for project {projectid}: {e}", exc_info=True)
            raise ProjectStoreError(f"Failed to rename training label: {e}") from e
        except Exception as e:
            logger.error(f"Unexpected error renaming training label: {e}", exc_info=True)
            raise ProjectStoreError(f"Unexpected error renaming training label: {e}") from e

        logger.info(
            f"Relabelled {moved} training item(s) in project {projectid}",
            extra={"payload": {"project_id": projectid, "label": after}},
        )
        return moved

    def delete_training_by_label(self, projectid: str, label: str) -> int:
        """Delete every item filed under a label. Returns the number deleted."""
        query = """
        FOR t IN @@col
        FILTER t.projectid == @projectid AND t.label == @label
        REMOVE t IN @@col
        RETURN 1
        """
        try:
            deleted = len(self._query(query, {"projectid": projectid, "label": label}))
        except ArangoError as e:
            logger.error(f"Failed to delete training by label for project {projectid}: {e}", exc_info=True)
            raise ProjectStoreError(f"Failed to delete training: {e}") from e
        except Exception as e:
            logger.error(f"Unexpected error deleting training: {e}", exc_info=True)
            raise ProjectStoreError(f"Unexpected error deleting training: {e}") from e

        logger.info(
            f"Deleted {deleted} training item(s) from project {projectid}",
            extra={"payload": {"project_id": projectid, "label": label}},
        )
        return deleted

    def delete_training_by_project(self, projectid: str) -> None:
        """Delete all of a project's training items."""
        self.delete_training_by_projects([projectid])

    def delete_training_by_projects(self, projectids: Iterable[str]) -> None:
        """Delete the training items of several projects in one statement."""
        ids = list(projectids)
        if not ids:
            return
        query = """
        FOR t IN @@col
        FILTER t.projectid IN @projectids
        REMOVE t IN @@col
        """
        try:
            self._query(query, {"projectids": ids})
        except ArangoError as e:
            logger.error(f"Failed to delete training for {len(ids)} project(s): {e}", exc_info=True)
            raise ProjectStoreError(f"Failed to delete training: {e}") from e
        except Exception as e:
            logger.error(f"Unexpected error deleting training: {e}", exc_info=True)
            raise ProjectStoreError(f"Unexpected error deleting training: {e}") from e
        logger.info(f"Deleted training for {len(ids)} project(s)")
