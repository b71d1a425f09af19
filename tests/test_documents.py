import json
from pathlib import PurePosixPath

import pytest

from memory_bank_migrator.documents import (
    DocumentPath,
    DocumentType,
    InvalidDocumentPathError,
    StructuredDocument,
)


def test_document_path_parts() -> None:
    path = DocumentPath.create("feature-login/branchContext.md")
    assert path.directory == "feature-login"
    assert path.filename == "branchContext.md"
    assert path.basename == "branchContext"
    assert path.extension == "md"
    assert path.is_markdown
    assert not path.is_json


def test_document_path_alternate_format() -> None:
    path = DocumentPath.create("core/progress.md")
    assert path.to_alternate_format().value == "core/progress.json"
    assert path.to_alternate_format().to_alternate_format() == path
    assert DocumentPath.create("notes.txt").to_alternate_format().value == "notes.txt"


@pytest.mark.parametrize(
    "value",
    ["", "a\\b.md", "../escape.md", "/abs/path.md", "C:/drive.md", "bad|name.md", "dir/"],
)
def test_document_path_rejects_invalid_values(value) -> None:
    with pytest.raises(InvalidDocumentPathError):
        DocumentPath.create(value)


def test_document_path_from_relative_uses_forward_slashes() -> None:
    path = DocumentPath.from_relative(PurePosixPath("a") / "b" / "c.md")
    assert path.value == "a/b/c.md"


def test_structured_document_serialization() -> None:
    document = StructuredDocument.create(
        path=DocumentPath.create("notes.md"),
        title="メモ",
        document_type=DocumentType.GENERIC,
        content={"body": "テキスト"},
        tags=["core"],
    )
    payload = json.loads(document.to_json())
    assert payload["schema"] == "memory_document_v2"
    assert payload["metadata"]["documentType"] == "generic"
    assert payload["metadata"]["tags"] == ["core"]
    assert payload["metadata"]["version"] == 1
    assert payload["metadata"]["createdAt"].endswith("Z")
    assert "テキスト" in document.to_json()
    assert document.to_json().endswith("\n")
