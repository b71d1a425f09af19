from __future__ import annotations

from .documents import DocumentType

FILENAME_PATTERNS: tuple[tuple[DocumentType, tuple[str, ...]], ...] = (
    (DocumentType.BRANCH_CONTEXT, ("branchcontext", "branch-context")),
    (DocumentType.ACTIVE_CONTEXT, ("activecontext", "active-context")),
    (DocumentType.PROGRESS, ("progress",)),
    (DocumentType.SYSTEM_PATTERNS, ("systempatterns", "system-patterns")),
)

TITLE_KEYWORDS: tuple[tuple[DocumentType, tuple[str, ...]], ...] = (
    (DocumentType.BRANCH_CONTEXT, ("branch context", "ブランチコンテキスト")),
    (DocumentType.ACTIVE_CONTEXT, ("active context", "アクティブコンテキスト")),
    (DocumentType.PROGRESS, ("progress", "進捗")),
    (DocumentType.SYSTEM_PATTERNS, ("system patterns", "システムパターン")),
)

HEADING_MARKER = "# "


def _match(text: str, table: tuple[tuple[DocumentType, tuple[str, ...]], ...]) -> DocumentType | None:
    for document_type, needles in table:
        if any(needle in text for needle in needles):
            return document_type
    return None


def classify_document(filename: str, content: str) -> DocumentType:
    """Classify a legacy Markdown document by file name, then by its first line.

    Falls back to ``DocumentType.GENERIC``; never raises.
    """

    by_name = _match(filename.lower(), FILENAME_PATTERNS)
    if by_name is not None:
        return by_name

    first_line = content.split("\n", 1)[0].strip()
    if first_line.startswith(HEADING_MARKER):
        title = first_line[len(HEADING_MARKER):].strip().lower()
        by_title = _match(title, TITLE_KEYWORDS)
        if by_title is not None:
            return by_title

    return DocumentType.GENERIC


__all__ = ["classify_document", "FILENAME_PATTERNS", "TITLE_KEYWORDS"]
