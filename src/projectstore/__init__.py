"""Project Store: projects owned by users within a class, their labels, and the training filed under them.
"""

from .errors import ProjectNotFoundError, ProjectStoreError
from .labels import LabelSet, sanitize_labels
from .types import Project, ProjectCreate, TrainingItem
from .service import ProjectStore
from .training import TrainingStore

__all__ = [
    "Project",
    "ProjectCreate",
    "TrainingItem",
    "ProjectStore",
    "TrainingStore",
    "LabelSet",
    "sanitize_labels",
    "ProjectStoreError",
    "ProjectNotFoundError",
]
