from __future__ import annotations

from typing import Any, Protocol

from ..documents import DocumentPath, DocumentType, StructuredDocument
from .parsing import ParsedMarkdown, parse_markdown


class ConversionError(RuntimeError):
    """Raised when a converter cannot make sense of its input."""


class Converter(Protocol):
    def convert(self, markdown: str, path: DocumentPath) -> StructuredDocument:  # pragma: no cover - interface
        ...


class BaseConverter:
    """Parses the shared document shell and delegates the payload to ``build_content``."""

    document_type: DocumentType

    def convert(self, markdown: str, path: DocumentPath) -> StructuredDocument:
        if "\x00" in markdown:
            raise ConversionError(f"{path.value} contains binary data")
        parsed = parse_markdown(markdown, path)
        content = self.build_content(parsed, path)
        return StructuredDocument.create(
            path=path,
            title=parsed.title,
            document_type=self.document_type,
            content=content,
            tags=parsed.tags,
        )

    def build_content(self, parsed: ParsedMarkdown, path: DocumentPath) -> dict[str, Any]:
        raise NotImplementedError


__all__ = ["BaseConverter", "Converter", "ConversionError"]
