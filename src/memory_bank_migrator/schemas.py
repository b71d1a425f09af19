"""Versioned JSON document schemas for the memory bank (v2)."""

from __future__ import annotations

import re
from datetime import datetime
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

SCHEMA_VERSION = "memory_document_v2"

TAG_PATTERN = r"^[a-z0-9-]+$"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DocumentMetadataV2(_CamelModel):
    title: str = Field(min_length=1)
    document_type: str = Field(min_length=1)
    id: str
    path: str = Field(min_length=1)
    tags: list[str] = Field(default_factory=list)
    last_modified: datetime
    created_at: datetime
    version: int = Field(default=1, gt=0)

    @field_validator("id")
    @classmethod
    def _check_uuid(cls, value: str) -> str:
        try:
            UUID(value)
        except ValueError as exc:
            raise ValueError("Document ID must be a valid UUID") from exc
        return value

    @field_validator("tags")
    @classmethod
    def _check_tags(cls, value: list[str]) -> list[str]:
        for tag in value:
            if not re.match(TAG_PATTERN, tag):
                raise ValueError(
                    f"Tag '{tag}' must contain only lowercase letters, numbers, and hyphens"
                )
        return value


class BaseJsonDocument(BaseModel):
    """Envelope every structured document must satisfy regardless of type."""

    schema_: Literal["memory_document_v2"] = Field(alias="schema")
    metadata: DocumentMetadataV2
    content: dict[str, Any]

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("content")
    @classmethod
    def _content_not_empty(cls, value: dict[str, Any]) -> dict[str, Any]:
        if not value:
            raise ValueError("Content cannot be empty")
        return value


class UserStory(_CamelModel):
    description: str
    completed: bool = False


class BranchContextContent(_CamelModel):
    purpose: str = Field(min_length=1)
    background: str | None = None
    user_stories: list[UserStory] = Field(default_factory=list)


class ActiveContextContent(_CamelModel):
    current_work: str | None = None
    recent_changes: list[str] = Field(default_factory=list)
    active_decisions: list[str] = Field(default_factory=list)
    considerations: list[str] = Field(default_factory=list)
    next_steps: list[str] = Field(default_factory=list)


class ProgressContent(_CamelModel):
    working_features: list[str] = Field(default_factory=list)
    pending_implementation: list[str] = Field(default_factory=list)
    status: str | None = None
    current_state: str | None = None
    known_issues: list[str] = Field(default_factory=list)


class TechnicalDecision(_CamelModel):
    title: str = Field(min_length=1)
    context: str = Field(min_length=1)
    decision: str = Field(min_length=1)
    consequences: list[str] = Field(min_length=1)


class SystemPatternsContent(_CamelModel):
    technical_decisions: list[TechnicalDecision] = Field(default_factory=list)


class BranchContextMetadata(DocumentMetadataV2):
    document_type: Literal["branch_context"]


class ActiveContextMetadata(DocumentMetadataV2):
    document_type: Literal["active_context"]


class ProgressMetadata(DocumentMetadataV2):
    document_type: Literal["progress"]


class SystemPatternsMetadata(DocumentMetadataV2):
    document_type: Literal["system_patterns"]


class BranchContextJson(BaseJsonDocument):
    metadata: BranchContextMetadata
    content: BranchContextContent  # type: ignore[assignment]


class ActiveContextJson(BaseJsonDocument):
    metadata: ActiveContextMetadata
    content: ActiveContextContent  # type: ignore[assignment]


class ProgressJson(BaseJsonDocument):
    metadata: ProgressMetadata
    content: ProgressContent  # type: ignore[assignment]


class SystemPatternsJson(BaseJsonDocument):
    metadata: SystemPatternsMetadata
    content: SystemPatternsContent  # type: ignore[assignment]


TYPED_SCHEMAS: dict[str, type[BaseJsonDocument]] = {
    "branch_context": BranchContextJson,
    "active_context": ActiveContextJson,
    "progress": ProgressJson,
    "system_patterns": SystemPatternsJson,
}


__all__ = [
    "SCHEMA_VERSION",
    "TAG_PATTERN",
    "DocumentMetadataV2",
    "BaseJsonDocument",
    "BranchContextJson",
    "ActiveContextJson",
    "ProgressJson",
    "SystemPatternsJson",
    "TechnicalDecision",
    "UserStory",
    "TYPED_SCHEMAS",
]
