"""Domain contracts for File Storage Service records."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

ReferenceField = Literal["real_path", "canonical_path"]
REFERENCE_FIELDS: tuple[ReferenceField, ...] = ("real_path", "canonical_path")


class ContentReference(BaseModel):
    """Persisted mapping from one virtual path to its physical blob.

    ``real_path`` is the stored filename currently holding the bytes and may be
    shared by many virtual paths. ``canonical_path`` is the filename the content
    would get with no collisions; references sharing it form a collision group.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    virtual_path: str = Field(min_length=1)
    real_path: str = Field(min_length=2)
    canonical_path: str = Field(min_length=2)
