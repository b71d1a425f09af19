"""Domain value objects for memory bank documents."""

from __future__ import annotations

import json
import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import PurePath
from typing import Any

from .schemas import SCHEMA_VERSION
from .utils import iso_timestamp, utc_now


class DocumentType(str, Enum):
    BRANCH_CONTEXT = "branch_context"
    ACTIVE_CONTEXT = "active_context"
    PROGRESS = "progress"
    SYSTEM_PATTERNS = "system_patterns"
    GENERIC = "generic"

    @classmethod
    def parse(cls, value: str | DocumentType | None) -> DocumentType:
        if isinstance(value, DocumentType):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.GENERIC


class InvalidDocumentPathError(ValueError):
    """Raised when a document path violates the memory bank path rules."""


_INVALID_CHARS_RE = re.compile(r'[<>:"|?*]')
_DRIVE_RE = re.compile(r"^[a-zA-Z]:")


@dataclass(frozen=True, slots=True)
class DocumentPath:
    """Relative, forward-slash path of a document inside a memory bank."""

    value: str

    @classmethod
    def create(cls, value: str) -> DocumentPath:
        if not value:
            raise InvalidDocumentPathError("Document path cannot be empty")
        if "\\" in value:
            raise InvalidDocumentPathError(
                "Document path cannot contain backslashes (\\). Use forward slashes (/) instead."
            )
        if ".." in value:
            raise InvalidDocumentPathError('Document path cannot contain ".."')
        if value.startswith("/") or _DRIVE_RE.match(value):
            raise InvalidDocumentPathError("Document path cannot be absolute")
        if _INVALID_CHARS_RE.search(value):
            raise InvalidDocumentPathError(
                'Document path contains invalid characters (<, >, :, ", |, ?, *)'
            )
        if value.endswith("/"):
            raise InvalidDocumentPathError("Document path cannot end with a slash")
        return cls(value)

    @classmethod
    def from_relative(cls, path: PurePath) -> DocumentPath:
        return cls.create(path.as_posix())

    @property
    def directory(self) -> str:
        head, _, _ = self.value.rpartition("/")
        return head

    @property
    def filename(self) -> str:
        return self.value.rpartition("/")[2]

    @property
    def extension(self) -> str:
        name = self.filename
        return name.rpartition(".")[2] if "." in name else ""

    @property
    def basename(self) -> str:
        name = self.filename
        return name.rpartition(".")[0] if "." in name else name

    @property
    def is_markdown(self) -> bool:
        return self.extension.lower() == "md"

    @property
    def is_json(self) -> bool:
        return self.extension.lower() == "json"

    def with_extension(self, extension: str) -> DocumentPath:
        if not extension:
            raise InvalidDocumentPathError("Extension cannot be empty")
        name = f"{self.basename}.{extension}"
        return DocumentPath.create(f"{self.directory}/{name}" if self.directory else name)

    def to_alternate_format(self) -> DocumentPath:
        if self.is_markdown:
            return self.with_extension("json")
        if self.is_json:
            return self.with_extension("md")
        return DocumentPath.create(self.value)

    def __str__(self) -> str:
        return self.value


@dataclass(slots=True)
class DocumentMetadata:
    title: str
    document_type: str
    path: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    tags: list[str] = field(default_factory=list)
    last_modified: datetime = field(default_factory=utc_now)
    created_at: datetime = field(default_factory=utc_now)
    version: int = 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "documentType": self.document_type,
            "path": self.path,
            "tags": list(self.tags),
            "lastModified": iso_timestamp(self.last_modified),
            "createdAt": iso_timestamp(self.created_at),
            "version": self.version,
        }


@dataclass(slots=True)
class StructuredDocument:
    """A converted document: schema tag, identity metadata and typed content."""

    metadata: DocumentMetadata
    content: dict[str, Any]
    schema: str = SCHEMA_VERSION

    @classmethod
    def create(
        cls,
        *,
        path: DocumentPath,
        title: str,
        document_type: DocumentType | str,
        content: dict[str, Any],
        tags: list[str] | None = None,
    ) -> StructuredDocument:
        now = utc_now()
        type_value = document_type.value if isinstance(document_type, DocumentType) else document_type
        metadata = DocumentMetadata(
            title=title,
            document_type=type_value,
            path=path.value,
            tags=list(tags or []),
            last_modified=now,
            created_at=now,
        )
        return cls(metadata=metadata, content=content)

    @property
    def document_type(self) -> str:
        return self.metadata.document_type

    def to_dict(self) -> dict[str, Any]:
        return {
            "schema": self.schema,
            "metadata": self.metadata.to_dict(),
            "content": self.content,
        }

    def to_json(self, pretty: bool = True) -> str:
        if pretty:
            return json.dumps(self.to_dict(), indent=2, ensure_ascii=False) + "\n"
        return json.dumps(self.to_dict(), ensure_ascii=False)


__all__ = [
    "DocumentType",
    "DocumentPath",
    "DocumentMetadata",
    "StructuredDocument",
    "InvalidDocumentPathError",
]
