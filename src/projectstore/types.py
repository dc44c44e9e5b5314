"""
Project Store Domain Models.

Defines Pydantic models for projects and the training items filed under their labels.
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, ConfigDict

# Document attributes owned by ArangoDB, never part of a model
_SYSTEM_ATTRS = ("_key", "_id", "_rev")


def _strip_system_attrs(doc: Dict[str, Any]) -> Dict[str, Any]:
    data = {k: v for k, v in doc.items() if k not in _SYSTEM_ATTRS}
    data["id"] = doc.get("_key", data.get("id"))
    return data


class ProjectCreate(BaseModel):
    """Payload for creating a new project (no ID or created_at).

    Fields beyond the declared ones are kept and stored as they are.
    """

    model_config = ConfigDict(
        extra="allow",
        json_schema_extra={
            "example": {
                "userid": "auth0|5b0e7f",
                "classid": "classroom-42",
                "type": "text",
                "name": "Capital cities",
                "labels": ["france", "spain"],
                "language": "en",
            }
        }
    )

    userid: str = Field(..., description="Owning user")
    classid: str = Field(..., description="Classification scope the project lives in")
    type: str = Field(..., description="Kind of training data (text, images, numbers, sounds)")
    name: str = Field(..., description="Display name, not unique")
    labels: List[str] = Field(default_factory=list, description="Initial labels, before sanitizing")


class Project(BaseModel):
    """A stored project with its current label list."""

    model_config = ConfigDict(
        extra="allow",
        json_schema_extra={
            "example": {
                "id": "550e8400-e29b-41d4-a716-446655440000",
                "userid": "auth0|5b0e7f",
                "classid": "classroom-42",
                "type": "text",
                "name": "Capital cities",
                "labels": ["france", "spain"],
                "created_at": "2024-01-15T10:30:00+00:00",
            }
        }
    )

    id: str = Field(..., description="Unique project identifier (UUID)")
    userid: str = Field(..., description="Owning user")
    classid: str = Field(..., description="Classification scope")
    type: str = Field(..., description="Kind of training data")
    name: str = Field(..., description="Display name")
    labels: List[str] = Field(default_factory=list, description="Ordered, unique, non-empty labels")
    created_at: Optional[str] = Field(None, description="Creation timestamp (ISO format)")

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "Project":
        """Create from ArangoDB document (maps _key to id)."""
        data = _strip_system_attrs(doc)
        if not isinstance(data.get("labels"), list):
            data["labels"] = []
        return cls(**data)

    def to_document(self) -> Dict[str, Any]:
        """Convert to an ArangoDB document (maps id to _key)."""
        doc = self.model_dump(exclude={"id"})
        doc["_key"] = self.id
        return doc


class TrainingItem(BaseModel):
    """One labelled example belonging to a project.

    Exactly one of textdata, imageurl or numberdata is set, matching the project type.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Unique training item identifier (UUID)")
    projectid: str = Field(..., description="Project the item belongs to")
    label: str = Field(..., description="Label the item is filed under")
    textdata: Optional[str] = Field(None, description="Text example")
    imageurl: Optional[str] = Field(None, description="Location of an image example")
    numberdata: Optional[List[float]] = Field(None, description="Numeric feature values")
    created_at: Optional[str] = Field(None, description="Creation timestamp (ISO format)")

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "TrainingItem":
        """Create from ArangoDB document (maps _key to id)."""
        return cls(**_strip_system_attrs(doc))

    def to_document(self) -> Dict[str, Any]:
        """Convert to an ArangoDB document, leaving out unset payload fields."""
        doc = self.model_dump(exclude={"id"}, exclude_none=True)
        doc["_key"] = self.id
        return doc
