"""Exceptions raised by the Project Store."""


class ProjectStoreError(RuntimeError):
    """The backend failed (connectivity, timeout, constraint or write conflict).

    Always chained to the underlying ArangoError.
    """


class ProjectNotFoundError(ValueError):
    """A label mutation targeted a project that does not exist for this user and class."""

    def __init__(self, project_id: str) -> None:
        super().__init__(f"Project not found: {project_id}")
        self.project_id = project_id
